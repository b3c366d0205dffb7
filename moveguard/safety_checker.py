"""Module-level checks for mutable references, invariants and public interfaces."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Optional

from moveguard.model import FieldId, Location, SafetyViolation, Severity, ViolationType
from moveguard.syntax import (
    Assignment,
    Expression,
    FieldAccess,
    Function,
    Module,
    MutableReference,
    Return,
    Variable,
)


class _RefState(Enum):
    VALID = auto()
    ESCAPED = auto()


class _AccessKind(Enum):
    WRITE = auto()
    RETURN = auto()


@dataclass(frozen=True)
class _AccessPoint:
    location: Location
    kind: _AccessKind
    context: str


@dataclass
class _MutableRefInfo:
    definition: Location
    state: _RefState = _RefState.VALID
    access_points: list[_AccessPoint] = field(default_factory=list)
    escapes: bool = False


@dataclass
class _InterfaceInfo:
    unsafe_params: set[str] = field(default_factory=set)


def _is_public(function: Function) -> bool:
    return function.name.startswith("public")


class SafetyChecker:
    """Checks a module for escaping mutable references and unsafe public functions.

    Mutable references tracked for one function remain known to later ones.
    """

    def __init__(self) -> None:
        self._mutable_refs: dict[str, _MutableRefInfo] = {}
        self._invariant_fields: set[FieldId] = set()
        self._public_interfaces: dict[str, _InterfaceInfo] = {}
        self._current_module: Optional[str] = None

    def check_module(self, module: Module) -> list[SafetyViolation]:
        self._current_module = module.name
        try:
            for invariant in module.invariants:
                self._invariant_fields.update(invariant.affected_fields)
            violations = self._check_public_interfaces(module)
            for function in module.functions:
                violations.extend(self._check_function(function))
            return violations
        finally:
            self._current_module = None

    @property
    def _module_name(self) -> str:
        return self._current_module or ""

    def _check_public_interfaces(self, module: Module) -> list[SafetyViolation]:
        violations = []
        for function in module.functions:
            if not _is_public(function):
                continue
            info = _InterfaceInfo(
                unsafe_params={
                    param.name
                    for param in function.parameters
                    if isinstance(param.param_type, MutableReference)
                }
            )
            if isinstance(function.return_type, MutableReference):
                violations.append(
                    SafetyViolation(
                        location=Location(),
                        violation_type=ViolationType.UNSAFE_PUBLIC_INTERFACE,
                        message=f"Public function {function.name} returns mutable reference",
                        severity=Severity.CRITICAL,
                    )
                )
            self._public_interfaces[function.name] = info
        return violations

    def _check_function(self, function: Function) -> list[SafetyViolation]:
        violations = self._track_mutable_parameters(function)
        for statement in function.body:
            if isinstance(statement, Assignment):
                violations.extend(self._check_assignment(statement.var, statement.expr))
            elif isinstance(statement, Return):
                violations.extend(self._check_return(statement.expr, function))
        violations.extend(
            SafetyViolation(
                location=info.definition,
                violation_type=ViolationType.REFERENCE_ESCAPE,
                message=(
                    f"Mutable reference {var} escapes its scope in function {function.name}"
                ),
                severity=Severity.HIGH,
            )
            for var, info in self._mutable_refs.items()
            if info.escapes
        )
        return violations

    def _track_mutable_parameters(self, function: Function) -> list[SafetyViolation]:
        violations = []
        for param in function.parameters:
            if not isinstance(param.param_type, MutableReference):
                continue
            self._mutable_refs[param.name] = _MutableRefInfo(
                definition=Location(
                    file=self._module_name,
                    context=f"Parameter in function {function.name}",
                )
            )
            if _is_public(function):
                violations.append(
                    SafetyViolation(
                        location=Location(
                            file=self._module_name,
                            context=f"Public function {function.name}",
                        ),
                        violation_type=ViolationType.UNSAFE_PUBLIC_INTERFACE,
                        message=(
                            f"Public function {function.name} accepts mutable "
                            f"reference parameter {param.name}"
                        ),
                        severity=Severity.HIGH,
                    )
                )
        return violations

    def _check_assignment(self, var: str, expr: Expression) -> list[SafetyViolation]:
        violations = []
        if isinstance(expr, FieldAccess):
            field_id = FieldId(module_name=self._module_name, field_name=expr.field)
            if field_id in self._invariant_fields:
                violations.append(
                    SafetyViolation(
                        location=Location(),
                        violation_type=ViolationType.INVARIANT_VIOLATION,
                        message=(
                            f"Assignment to invariant-protected field "
                            f"{field_id.field_name} through reference"
                        ),
                        severity=Severity.CRITICAL,
                    )
                )
        info = self._mutable_refs.get(var)
        if info is not None:
            info.access_points.append(_AccessPoint(Location(), _AccessKind.WRITE, "Assignment"))
        return violations

    def _check_return(self, expr: Expression, function: Function) -> list[SafetyViolation]:
        if not isinstance(expr, Variable):
            return []
        info = self._mutable_refs.get(expr.name)
        if info is None:
            return []
        info.escapes = True
        info.state = _RefState.ESCAPED
        info.access_points.append(_AccessPoint(Location(), _AccessKind.RETURN, "Return"))
        return [
            SafetyViolation(
                location=Location(),
                violation_type=ViolationType.REFERENCE_ESCAPE,
                message=(
                    f"Mutable reference to {expr.name} escapes through return "
                    f"in function {function.name}"
                ),
                severity=Severity.CRITICAL,
            )
        ]