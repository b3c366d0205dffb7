"""Path-based tracking of references that are opened and never closed."""

from __future__ import annotations

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
    Return,
    Variable,
)


class ReferencePathAnalyzer:
    """Follows mutable references along a function body and reports where they escape.

    Tracked references persist across calls to :meth:`analyze_function`.
    """

    def __init__(self) -> None:
        # Insertion-ordered so that reports come out in the order references appeared.
        self._active: dict[str, None] = {}
        self._paths: dict[str, list[int]] = {}

    def analyze_function(self, function: Function) -> list[ReferenceLeak]:
        for param in function.parameters:
            if isinstance(param.param_type, MutableReference):
                self._track_reference(param.name)

        leaks: list[ReferenceLeak] = []
        for statement in function.body:
            if isinstance(statement, Assignment):
                self._analyze_assignment(statement.var, statement.expr)
            elif isinstance(statement, Return):
                leaks.extend(self._analyze_return(statement.expr))

        leaks.extend(
            ReferenceLeak(
                location=Location(),
                leaked_field=FieldId(),
                context=f"Reference {var} not properly closed",
                severity=Severity.HIGH,
            )
            for var in self._active
        )
        return leaks

    def _analyze_assignment(self, var: str, expr: Expression) -> None:
        if isinstance(self._evaluate(expr), InvRef):
            self._track_reference(var)

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
            return InvRef(FieldId()) if expr.name in self._active else NonRef()
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

    def _track_reference(self, var: str) -> None:
        self._active[var] = None
        self._paths.setdefault(var, []).append(len(self._paths))