"""Verification of local, unreachability and strong safety properties of a module."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator

from moveguard.model import (
    Location,
    SafetyViolation,
    Severity,
    ViolationContext,
    ViolationType,
)
from moveguard.syntax import Assert, Call, Function, Module, Struct


@dataclass(frozen=True)
class LocalProperty:
    """An invariant that must hold wherever the named function is called."""

    invariant: str
    scope: str
    condition: str


@dataclass
class UnreachableProperty:
    """A resource that no code path may reach."""

    resource: str
    access_path: list[str] = field(default_factory=list)


@dataclass
class StrongProperty:
    """A local property combined with an unreachability property."""

    local: LocalProperty
    unreachable: UnreachableProperty


def _call_names(function: Function) -> Iterator[str]:
    for statement in function.body:
        if isinstance(statement, Call):
            yield statement.name


def _condition_holds(condition: str) -> bool:
    return bool(condition)


def _is_resource_reachable(module: Module, resource: str) -> bool:
    return any(
        resource in name for function in module.functions for name in _call_names(function)
    )


def _is_shared_object_access(call_name: str) -> bool:
    return any(word in call_name for word in ("shared", "consensus", "sync"))


def _is_synchronizing(call_name: str) -> bool:
    return "sync" in call_name or "lock" in call_name


def _has_ownership_verification(function: Function) -> bool:
    names = list(_call_names(function))
    has_sender_check = any("tx_context::sender" in name for name in names)
    has_owner_access = any("owner" in name for name in names)
    has_assertion = any(isinstance(statement, Assert) for statement in function.body)
    return has_sender_check and has_owner_access and has_assertion


class SafetyVerifier:
    """Checks a module against registered properties and object-model rules."""

    def __init__(self) -> None:
        self._local_properties: dict[str, LocalProperty] = {}
        self._unreachable_properties: dict[str, UnreachableProperty] = {}
        self._strong_properties: dict[str, StrongProperty] = {}

    def add_local_property(self, name: str, property: LocalProperty) -> None:
        self._local_properties[name] = property

    def add_unreachable_property(self, name: str, property: UnreachableProperty) -> None:
        self._unreachable_properties[name] = property

    def add_strong_property(self, name: str, property: StrongProperty) -> None:
        self._strong_properties[name] = property

    def verify_module(self, module: Module) -> list[SafetyViolation]:
        """Return every violation found in ``module``."""
        violations: list[SafetyViolation] = []
        for function in module.functions:
            violations.extend(self._verify_local_properties(function))
        violations.extend(self._verify_unreachability(module))
        violations.extend(self._verify_strong_properties(module))
        violations.extend(self._verify_object_properties(module))
        return violations

    def _verify_local_properties(self, function: Function) -> Iterator[SafetyViolation]:
        for name in _call_names(function):
            property = self._local_properties.get(name)
            if property is not None and not _condition_holds(property.condition):
                yield SafetyViolation(
                    location=Location(),
                    violation_type=ViolationType.INVARIANT_VIOLATION,
                    message=f"Local property violation in function {function.name}",
                    severity=Severity.HIGH,
                    context=ViolationContext(
                        affected_functions=[function.name],
                        suggested_fixes=["Ensure local invariant holds"],
                        whitepaper_reference="Section 4.4: Local Properties",
                    ),
                )

    def _verify_unreachability(self, module: Module) -> Iterator[SafetyViolation]:
        for resource in self._unreachable_properties:
            if _is_resource_reachable(module, resource):
                yield SafetyViolation(
                    location=Location(),
                    violation_type=ViolationType.RESOURCE_SAFETY_VIOLATION,
                    message=f"Resource {resource} is reachable through unauthorized path",
                    severity=Severity.HIGH,
                    context=ViolationContext(
                        related_types=[resource],
                        suggested_fixes=["Remove unauthorized access path"],
                        whitepaper_reference="Section 4.4: Unreachability",
                    ),
                )

    def _verify_strong_properties(self, module: Module) -> Iterator[SafetyViolation]:
        for property in self._strong_properties.values():
            if not _condition_holds(property.local.condition) or _is_resource_reachable(
                module, property.unreachable.resource
            ):
                yield SafetyViolation(
                    location=Location(),
                    violation_type=ViolationType.RESOURCE_SAFETY_VIOLATION,
                    message="Strong property violation detected",
                    severity=Severity.CRITICAL,
                    context=ViolationContext(
                        suggested_fixes=[
                            "Ensure both local and unreachability properties hold"
                        ],
                        whitepaper_reference="Section 4.4: Strong Properties",
                    ),
                )

    def _verify_object_properties(self, module: Module) -> Iterator[SafetyViolation]:
        for struct in module.get_structs():
            if struct.has_key_ability():
                yield from self._verify_uid_initialization(struct)
        for function in module.functions:
            yield from self._verify_transfer_patterns(function)
        yield from self._verify_shared_object_access(module)

    @staticmethod
    def _verify_uid_initialization(struct: Struct) -> Iterator[SafetyViolation]:
        has_uid = any(str(f.field_type) == "UID" for f in struct.fields)
        if not has_uid:
            yield SafetyViolation(
                location=Location(),
                violation_type=ViolationType.RESOURCE_SAFETY_VIOLATION,
                message=f"Sui object {struct.name} missing UID field",
                severity=Severity.CRITICAL,
                context=ViolationContext(
                    related_types=[struct.name],
                    suggested_fixes=["Add 'id: UID' as first field"],
                    whitepaper_reference="Sui Object Model",
                ),
            )

    @staticmethod
    def _verify_transfer_patterns(function: Function) -> Iterator[SafetyViolation]:
        for name in _call_names(function):
            if "transfer::transfer" in name and not _has_ownership_verification(function):
                yield SafetyViolation(
                    location=Location(),
                    violation_type=ViolationType.UNAUTHORIZED_ACCESS,
                    message="Transfer without ownership verification",
                    severity=Severity.HIGH,
                    context=ViolationContext(
                        affected_functions=[function.name],
                        suggested_fixes=["Add ownership check before transfer"],
                        whitepaper_reference="Sui Transfer Safety",
                    ),
                )

    @staticmethod
    def _verify_shared_object_access(module: Module) -> Iterator[SafetyViolation]:
        for function in module.functions:
            names = list(_call_names(function))
            has_shared_access = any(_is_shared_object_access(name) for name in names)
            has_consensus = any("consensus::verify" in name for name in names)
            has_sync = any(_is_synchronizing(name) for name in names)
            if has_shared_access and not (has_consensus and has_sync):
                yield SafetyViolation(
                    location=Location(),
                    violation_type=ViolationType.SHARED_OBJECT_VIOLATION,
                    message=(
                        "Shared object access without proper synchronization "
                        f"in function {function.name}"
                    ),
                    severity=Severity.HIGH,
                    context=ViolationContext(
                        affected_functions=[function.name],
                        suggested_fixes=[
                            "Add consensus::verify call",
                            "Add proper synchronization",
                        ],
                        whitepaper_reference="Sui Shared Objects",
                    ),
                )