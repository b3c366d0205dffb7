import pytest

from moveguard.model import CapabilityRef, CapId, Location, NonRef, ObjectId, ObjectRef
from moveguard.transitions import (
    BorrowKind,
    Borrowed,
    Initialized,
    InvalidTransitionError,
    Moved,
    Released,
    StateTransitionAnalyzer,
    TransitionCause,
    Uninitialized,
)

LOC = Location(file="t.move", line=1)


def test_valid_chain_of_transitions_has_no_violations():
    analyzer = StateTransitionAnalyzer()
    analyzer.analyze_transition("x", Initialized(NonRef()), LOC, TransitionCause.ASSIGNMENT)
    analyzer.analyze_transition(
        "x", Borrowed(BorrowKind.MUTABLE_WRITE), LOC, TransitionCause.BORROW_START
    )
    assert analyzer.check_safety() == []


def test_invalid_first_transition_raises_with_details():
    analyzer = StateTransitionAnalyzer()
    with pytest.raises(InvalidTransitionError) as info:
        analyzer.analyze_transition(
            "x", Borrowed(BorrowKind.SHARED_READ), LOC, TransitionCause.BORROW_START
        )
    assert info.value.var == "x"
    assert info.value.from_state == Uninitialized()
    assert info.value.to_state == Borrowed(BorrowKind.SHARED_READ)
    assert info.value.location == LOC
    assert "Invalid reference state transition for x" in str(info.value)


def test_state_is_updated_after_success():
    analyzer = StateTransitionAnalyzer()
    analyzer.analyze_transition("x", Initialized(NonRef()), LOC, TransitionCause.ASSIGNMENT)
    with pytest.raises(InvalidTransitionError) as info:
        analyzer.analyze_transition("x", Initialized(NonRef()), LOC, TransitionCause.ASSIGNMENT)
    assert info.value.from_state == Initialized(NonRef())


def test_move_of_borrowed_reference_is_rejected():
    analyzer = StateTransitionAnalyzer()
    analyzer.analyze_transition("x", Initialized(NonRef()), LOC, TransitionCause.ASSIGNMENT)
    analyzer.analyze_transition(
        "x", Borrowed(BorrowKind.MUTABLE_WRITE), LOC, TransitionCause.BORROW_START
    )
    with pytest.raises(InvalidTransitionError):
        analyzer.analyze_transition("x", Moved(), LOC, TransitionCause.MOVE)
    assert analyzer.check_safety() == []


def test_variables_are_tracked_separately():
    analyzer = StateTransitionAnalyzer()
    analyzer.analyze_transition("a", Initialized(NonRef()), LOC, TransitionCause.ASSIGNMENT)
    analyzer.analyze_transition("b", Initialized(NonRef()), LOC, TransitionCause.ASSIGNMENT)
    with pytest.raises(InvalidTransitionError) as info:
        analyzer.analyze_transition("c", Released(), LOC, TransitionCause.TRANSFER)
    assert info.value.from_state == Uninitialized()


@pytest.mark.parametrize(
    "state",
    [Initialized(ObjectRef(ObjectId())), Initialized(CapabilityRef(CapId()))],
)
def test_object_and_capability_values_cannot_be_assigned_from_start(state):
    analyzer = StateTransitionAnalyzer()
    with pytest.raises(InvalidTransitionError):
        analyzer.analyze_transition("x", state, LOC, TransitionCause.ASSIGNMENT)