"""Checks for unguarded transfers and unsynchronised shared-object access."""

from __future__ import annotations

from moveguard.model import (
    Location,
    SafetyViolation,
    Severity,
    ViolationContext,
    ViolationType,
)
from moveguard.syntax import Assignment, FieldAccess, Function


def _assigned_fields(function: Function):
    for statement in function.body:
        if isinstance(statement, Assignment) and isinstance(statement.expr, FieldAccess):
            yield statement.expr.field


def _is_transfer(name: str) -> bool:
    return any(word in name for word in ("transfer", "move_to", "send"))


def _has_transfer_guard(name: str) -> bool:
    return "assert" in name and ("owner" in name or "auth" in name)


def _is_shared_access(name: str) -> bool:
    return any(word in name for word in ("shared", "global", "state"))


def _has_synchronization(name: str) -> bool:
    return any(word in name for word in ("consensus", "synchronized", "lock"))


class SuiSafetyChecker:
    """Looks at assigned field accesses for risky object operations."""

    def check_transfer_safety(self, function: Function) -> list[SafetyViolation]:
        return [
            SafetyViolation(
                location=Location(),
                violation_type=ViolationType.UNSAFE_TRANSFER,
                message=f"Function {function.name} performs transfer without validation",
                severity=Severity.CRITICAL,
                context=ViolationContext(
                    affected_functions=[function.name],
                    suggested_fixes=["Add transfer validation"],
                    whitepaper_reference="Section 4.4: Object Safety",
                ),
            )
            for name in _assigned_fields(function)
            if _is_transfer(name) and not _has_transfer_guard(name)
        ]

    def check_shared_object_safety(self, function: Function) -> list[SafetyViolation]:
        return [
            SafetyViolation(
                location=Location(),
                violation_type=ViolationType.SHARED_OBJECT_VIOLATION,
                message=f"Function {function.name} accesses shared object without synchronization",
                severity=Severity.CRITICAL,
                context=ViolationContext(
                    affected_functions=[function.name],
                    suggested_fixes=["Add consensus synchronization"],
                    whitepaper_reference="Section 4.4: Shared Objects",
                ),
            )
            for name in _assigned_fields(function)
            if _is_shared_access(name) and not _has_synchronization(name)
        ]