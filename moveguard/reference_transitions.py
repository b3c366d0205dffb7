"""Statement-level tracking of reference states and a stack of active borrows."""

from __future__ import annotations

from dataclasses import dataclass, field

from moveguard.model import Location, NonRef, SafetyViolation, Severity, ViolationType
from moveguard.syntax import (
    Assignment,
    Expression,
    FieldAccess,
    Return,
    Statement,
    Variable,
)
from moveguard.transitions import (
    VALID_TRANSITIONS,
    BorrowKind,
    Borrowed,
    Initialized,
    Moved,
    ReferenceState,
    TransitionCause,
    Uninitialized,
)


class ReferenceTransitionError(Exception):
    """A statement or borrow operation breaks the reference rules."""


@dataclass(frozen=True)
class _TransitionEvent:
    var: str
    from_state: ReferenceState
    to_state: ReferenceState
    location: Location
    cause: TransitionCause


@dataclass
class _BorrowInfo:
    var: str
    kind: BorrowKind
    location: Location
    active_references: set[str] = field(default_factory=set)


class ReferenceTransitionAnalyzer:
    """Follows reference states through statements and checks borrow nesting."""

    def __init__(self) -> None:
        self._states: dict[str, ReferenceState] = {}
        self._transitions: list[_TransitionEvent] = []
        self._valid = set(VALID_TRANSITIONS)
        self._borrow_stack: list[_BorrowInfo] = []

    def analyze_statement(self, statement: Statement, location: Location) -> None:
        """Apply a statement; raise ReferenceTransitionError when it is unsafe."""
        if isinstance(statement, Assignment):
            self._analyze_assignment(statement.var, statement.expr, location)
        elif isinstance(statement, Return):
            self._analyze_return(statement.expr)

    def _analyze_assignment(self, var: str, expr: Expression, location: Location) -> None:
        new_state = self._analyze_expression(expr)
        current = self._states.get(var, Uninitialized())
        if (current, new_state) not in self._valid:
            raise ReferenceTransitionError(
                f"Invalid reference state transition for {var} "
                f"from {current!r} to {new_state!r}"
            )
        self._transitions.append(
            _TransitionEvent(var, current, new_state, location, TransitionCause.ASSIGNMENT)
        )
        self._states[var] = new_state

    def _analyze_expression(self, expr: Expression) -> ReferenceState:
        if isinstance(expr, Variable):
            return self._states.get(expr.name, Uninitialized())
        if isinstance(expr, FieldAccess):
            return self._analyze_field_access(self._analyze_expression(expr.base), expr.field)
        return Initialized(NonRef())

    @staticmethod
    def _analyze_field_access(base_state: ReferenceState, field_name: str) -> ReferenceState:
        if base_state == Borrowed(BorrowKind.MUTABLE_WRITE):
            return base_state
        if base_state == Borrowed(BorrowKind.TRANSFER_GUARDED):
            if "transfer" in field_name or "guard" in field_name:
                return base_state
            raise ReferenceTransitionError(
                "Invalid field access on transfer-guarded reference"
            )
        return Initialized(NonRef())

    def _analyze_return(self, expr: Expression) -> None:
        state = self._analyze_expression(expr)
        if state == Borrowed(BorrowKind.MUTABLE_WRITE):
            raise ReferenceTransitionError(
                "Returning mutable reference may cause reference leak"
            )
        if state == Borrowed(BorrowKind.TRANSFER_GUARDED):
            raise ReferenceTransitionError("Returning transfer-guarded reference is unsafe")

    def start_borrow(self, var: str, kind: BorrowKind, location: Location) -> None:
        self._borrow_stack.append(_BorrowInfo(var, kind, location))

    def end_borrow(self, var: str) -> None:
        """End the innermost borrow, which must be of ``var``."""
        if not self._borrow_stack:
            raise ReferenceTransitionError("No active borrow to end")
        innermost = self._borrow_stack[-1]
        if innermost.var != var:
            raise ReferenceTransitionError(
                f"Mismatched borrow end: expected {innermost.var}, got {var}"
            )
        self._borrow_stack.pop()

    def check_safety(self) -> list[SafetyViolation]:
        violations = [
            SafetyViolation(
                location=borrow.location,
                violation_type=ViolationType.REFERENCE_ESCAPE,
                message=f"Unclosed borrow of {borrow.var}",
                severity=Severity.HIGH,
            )
            for borrow in self._borrow_stack
        ]
        for event in self._transitions:
            if event.from_state == Borrowed(BorrowKind.MUTABLE_WRITE) and event.to_state == Moved():
                violations.append(
                    SafetyViolation(
                        location=event.location,
                        violation_type=ViolationType.REFERENCE_ESCAPE,
                        message=f"Moving {event.var} while borrowed",
                        severity=Severity.CRITICAL,
                    )
                )
        return violations