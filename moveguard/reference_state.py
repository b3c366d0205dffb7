"""Per-variable reference state tracking with scope-aware escape detection."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping, Optional, Union

from moveguard.model import (
    AbstractValue,
    FieldId,
    InvRef,
    Location,
    NonRef,
    ObjectRef,
    ReferenceLeak,
    Severity,
)
from moveguard.syntax import (
    Assignment,
    Expression,
    FieldAccess,
    Function,
    MutableReference,
    Reference,
    Return,
    Variable,
)
from moveguard.transitions import BorrowKind, TransitionCause


@dataclass(frozen=True)
class _Initialized:
    value: AbstractValue
    mutable: bool


@dataclass(frozen=True)
class _Borrowed:
    kind: BorrowKind
    source: str


_State = Union[_Initialized, _Borrowed]


@dataclass(frozen=True)
class _Transition:
    var: str
    from_state: _State
    to_state: _State
    location: Location
    cause: TransitionCause


@dataclass
class _Scope:
    level: int
    variables: set[str] = field(default_factory=set)


class ReferenceStateAnalyzer:
    """Tracks the state of each variable and reports references that escape.

    ``values`` seeds variables already known to hold a given abstract value.
    State persists across calls to :meth:`analyze_function`.
    """

    def __init__(self, values: Optional[Mapping[str, AbstractValue]] = None) -> None:
        self._states: dict[str, _State] = {
            name: _Initialized(value, mutable=False) for name, value in (values or {}).items()
        }
        self._transitions: list[_Transition] = []
        self._scopes: list[_Scope] = [_Scope(0)]

    def analyze_function(self, function: Function) -> list[ReferenceLeak]:
        for param in function.parameters:
            self._states[param.name] = _initial_state(param.param_type)

        self._scopes.append(_Scope(self._scopes[-1].level + 1 if self._scopes else 0))
        leaks: list[ReferenceLeak] = []
        for statement in function.body:
            if isinstance(statement, Assignment):
                leaks.extend(self._analyze_assignment(statement.var, statement.expr))
            elif isinstance(statement, Return):
                leaks.extend(self._analyze_return(statement.expr))
        leaks.extend(self._exit_scope())
        return leaks

    def _analyze_assignment(self, var: str, expr: Expression) -> list[ReferenceLeak]:
        value = self._evaluate(expr)
        leaks = []
        if isinstance(value, InvRef) and self._can_escape(var):
            leaks.append(
                ReferenceLeak(
                    location=Location(),
                    leaked_field=value.field,
                    context=f"Reference may escape through assignment to {var}",
                    severity=Severity.HIGH,
                )
            )
        self._transition(var, _Initialized(value, mutable=True), TransitionCause.ASSIGNMENT)
        return leaks

    def _analyze_return(self, expr: Expression) -> list[ReferenceLeak]:
        value = self._evaluate(expr)
        if isinstance(value, InvRef):
            return [
                ReferenceLeak(
                    location=Location(),
                    leaked_field=value.field,
                    context="Reference escapes through return",
                    severity=Severity.CRITICAL,
                )
            ]
        return []

    def _evaluate(self, expr: Expression) -> AbstractValue:
        if isinstance(expr, Variable):
            state = self._states.get(expr.name)
            return state.value if isinstance(state, _Initialized) else NonRef()
        if isinstance(expr, FieldAccess):
            base = self._evaluate(expr.base)
            if isinstance(base, ObjectRef):
                return InvRef(
                    FieldId(
                        module_name=base.object_id.module_name,
                        struct_name=base.object_id.type_name,
                        field_name=expr.field,
                    )
                )
        return NonRef()

    def _transition(self, var: str, new_state: _State, cause: TransitionCause) -> None:
        old_state = self._states.get(var)
        if old_state is None:
            return
        self._states[var] = new_state
        self._transitions.append(_Transition(var, old_state, new_state, Location(), cause))

    def _can_escape(self, var: str) -> bool:
        return any(var not in scope.variables for scope in self._scopes)

    def _exit_scope(self) -> list[ReferenceLeak]:
        if not self._scopes:
            return []
        scope = self._scopes.pop()
        leaks = []
        for var in scope.variables:
            state = self._states.get(var)
            if isinstance(state, _Initialized) and isinstance(state.value, InvRef):
                leaks.append(
                    ReferenceLeak(
                        location=Location(),
                        leaked_field=state.value.field,
                        context=f"Reference {var} escapes its scope",
                        severity=Severity.HIGH,
                    )
                )
        return leaks


def _initial_state(param_type) -> _State:
    if isinstance(param_type, MutableReference):
        return _Borrowed(BorrowKind.MUTABLE_WRITE, "parameter")
    if isinstance(param_type, Reference):
        return _Borrowed(BorrowKind.SHARED_READ, "parameter")
    return _Initialized(NonRef(), mutable=False)