"""Reference flow analysis extended with object and capability tracking."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Mapping, Optional

from moveguard.model import CapId, FieldId, Location, ObjectId, ReferenceLeak, Severity
from moveguard.reference_flow import ReferenceFlowAnalyzer
from moveguard.syntax import Assignment, Expression, Function, Return, Variable


class ReferenceType(Enum):
    IMMUTABLE = auto()
    MUTABLE = auto()


class TransferState(Enum):
    OWNED = auto()
    TRANSFERRED = auto()
    SHARED = auto()
    FROZEN = auto()


@dataclass(frozen=True)
class ObjectReferenceState:
    """What is known about a variable that refers to an object."""

    object_id: ObjectId
    reference_type: ReferenceType
    transfer_state: TransferState
    recipient: Optional[str] = None
    access_points: frozenset[Location] = frozenset()


@dataclass(frozen=True)
class CapabilityDelegation:
    """A hand-over of capability permissions from one holder to another."""

    source: str
    target: str
    permissions: frozenset[str] = frozenset()
    location: Location = field(default_factory=Location)


@dataclass(frozen=True)
class CapabilityReferenceState:
    """What is known about a variable that refers to a capability."""

    cap_id: CapId
    permissions: frozenset[str] = frozenset()
    delegations: tuple[CapabilityDelegation, ...] = ()


class SuiReferenceFlowAnalyzer:
    """Follows object and capability references, then runs the base flow analysis."""

    def __init__(
        self,
        object_states: Optional[Mapping[str, ObjectReferenceState]] = None,
        capability_states: Optional[Mapping[str, CapabilityReferenceState]] = None,
    ) -> None:
        self._base = ReferenceFlowAnalyzer()
        self._object_states: dict[str, ObjectReferenceState] = dict(object_states or {})
        self._capability_states: dict[str, CapabilityReferenceState] = dict(
            capability_states or {}
        )

    def analyze_function(self, function: Function) -> list[ReferenceLeak]:
        leaks = self._track_object_references(function)
        leaks.extend(self._track_capability_references(function))
        leaks.extend(self._base.analyze_function(function))
        return leaks

    def _track_object_references(self, function: Function) -> list[ReferenceLeak]:
        leaks = []
        for statement in function.body:
            if isinstance(statement, Assignment):
                state = self._object_state_of(statement.expr)
                if state is None:
                    continue
                if _is_unsafe_object_reference(state):
                    leaks.append(
                        ReferenceLeak(
                            location=Location(context=f"Assignment to {statement.var}"),
                            leaked_field=_object_field(state.object_id),
                            context="Unsafe object reference pattern detected",
                            severity=Severity.HIGH,
                        )
                    )
                self._object_states[statement.var] = state
            elif isinstance(statement, Return):
                state = self._object_state_of(statement.expr)
                if state is not None and _is_object_reference_leak(state):
                    leaks.append(
                        ReferenceLeak(
                            location=Location(context="Return statement"),
                            leaked_field=_object_field(state.object_id),
                            context="Object reference escapes through return",
                            severity=Severity.CRITICAL,
                        )
                    )
        return leaks

    def _track_capability_references(self, function: Function) -> list[ReferenceLeak]:
        leaks = []
        for statement in function.body:
            if not isinstance(statement, Assignment):
                continue
            state = self._capability_state_of(statement.expr)
            if state is None:
                continue
            if not state.permissions or state.delegations:
                leaks.append(
                    ReferenceLeak(
                        location=Location(context=f"Assignment to {statement.var}"),
                        leaked_field=FieldId(
                            module_name=state.cap_id.module_name,
                            struct_name=state.cap_id.cap_name,
                        ),
                        context="Unsafe capability usage pattern detected",
                        severity=Severity.CRITICAL,
                    )
                )
            self._capability_states[statement.var] = state
        return leaks

    def _object_state_of(self, expr: Expression) -> Optional[ObjectReferenceState]:
        if isinstance(expr, Variable):
            return self._object_states.get(expr.name)
        return None

    def _capability_state_of(self, expr: Expression) -> Optional[CapabilityReferenceState]:
        if isinstance(expr, Variable):
            return self._capability_states.get(expr.name)
        return None


def _object_field(object_id: ObjectId) -> FieldId:
    return FieldId(module_name=object_id.module_name, struct_name=object_id.type_name)


def _is_unsafe_object_reference(state: ObjectReferenceState) -> bool:
    if state.transfer_state is TransferState.TRANSFERRED:
        return True
    return (
        state.transfer_state is TransferState.SHARED
        and state.reference_type is ReferenceType.MUTABLE
    )


def _is_object_reference_leak(state: ObjectReferenceState) -> bool:
    return (
        state.reference_type is ReferenceType.MUTABLE
        and state.transfer_state is not TransferState.OWNED
    )