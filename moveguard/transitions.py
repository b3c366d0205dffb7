"""Reference state machine and a checker for state transitions."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Union

from moveguard.model import (
    AbstractValue,
    CapabilityRef,
    CapId,
    Location,
    NonRef,
    ObjectId,
    ObjectRef,
    SafetyViolation,
    Severity,
    ViolationType,
)


class BorrowKind(Enum):
    SHARED_READ = auto()
    MUTABLE_WRITE = auto()
    TRANSFER_GUARDED = auto()
    CAPABILITY_PROTECTED = auto()


class TransitionCause(Enum):
    ASSIGNMENT = auto()
    BORROW_START = auto()
    BORROW_END = auto()
    MOVE = auto()
    TRANSFER = auto()
    CAPABILITY_USE = auto()


@dataclass(frozen=True)
class Uninitialized:
    """No value assigned yet."""


@dataclass(frozen=True)
class Initialized:
    """Holds a value."""

    value: AbstractValue


@dataclass(frozen=True)
class Borrowed:
    """Currently borrowed."""

    kind: BorrowKind


@dataclass(frozen=True)
class Moved:
    """The value has been moved away."""


@dataclass(frozen=True)
class Released:
    """The value has been released."""


ReferenceState = Union[Uninitialized, Initialized, Borrowed, Moved, Released]

VALID_TRANSITIONS: frozenset[tuple[ReferenceState, ReferenceState]] = frozenset(
    {
        (Uninitialized(), Initialized(NonRef())),
        (Initialized(NonRef()), Borrowed(BorrowKind.SHARED_READ)),
        (Initialized(NonRef()), Borrowed(BorrowKind.MUTABLE_WRITE)),
        (Initialized(ObjectRef(ObjectId())), Borrowed(BorrowKind.TRANSFER_GUARDED)),
        (Initialized(CapabilityRef(CapId())), Borrowed(BorrowKind.CAPABILITY_PROTECTED)),
    }
)


class InvalidTransitionError(Exception):
    """A variable was asked to move between states that may not follow each other."""

    def __init__(
        self,
        var: str,
        from_state: ReferenceState,
        to_state: ReferenceState,
        location: Location,
    ) -> None:
        super().__init__(
            f"Invalid reference state transition for {var} from {from_state!r} to {to_state!r}"
        )
        self.var = var
        self.from_state = from_state
        self.to_state = to_state
        self.location = location


@dataclass(frozen=True)
class _Transition:
    from_state: ReferenceState
    to_state: ReferenceState
    location: Location
    cause: TransitionCause


class StateTransitionAnalyzer:
    """Tracks the state of each variable and accepts only allowed transitions."""

    def __init__(self) -> None:
        self._states: dict[str, ReferenceState] = {}
        self._transitions: list[_Transition] = []
        self._valid = set(VALID_TRANSITIONS)

    def analyze_transition(
        self,
        var: str,
        new_state: ReferenceState,
        location: Location,
        cause: TransitionCause,
    ) -> None:
        """Move ``var`` to ``new_state``; raise InvalidTransitionError if not allowed."""
        current = self._states.get(var, Uninitialized())
        if (current, new_state) not in self._valid:
            raise InvalidTransitionError(var, current, new_state, location)
        self._transitions.append(_Transition(current, new_state, location, cause))
        self._states[var] = new_state

    def check_safety(self) -> list[SafetyViolation]:
        violations = []
        for transition in self._transitions:
            pair = (transition.from_state, transition.to_state)
            if pair == (Borrowed(BorrowKind.MUTABLE_WRITE), Moved()):
                violations.append(
                    SafetyViolation(
                        location=transition.location,
                        violation_type=ViolationType.REFERENCE_ESCAPE,
                        message="Mutable reference moved while borrowed",
                        severity=Severity.CRITICAL,
                    )
                )
            elif pair == (Borrowed(BorrowKind.TRANSFER_GUARDED), Released()):
                violations.append(
                    SafetyViolation(
                        location=transition.location,
                        violation_type=ViolationType.UNSAFE_TRANSFER,
                        message="Object released without transfer guard check",
                        severity=Severity.HIGH,
                    )
                )
        return violations