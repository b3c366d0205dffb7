"""Flow-insensitive tracking of names that may hold references."""

from __future__ import annotations

from moveguard.model import FieldId, Location, ReferenceLeak, Severity
from moveguard.syntax import (
    Assert,
    Assignment,
    Call,
    CallExpr,
    Expression,
    FieldAccess,
    Function,
    Loop,
    Return,
    Statement,
    Variable,
)


class ReferenceFlowAnalyzer:
    """Marks accessed fields as references and reports later reads of them.

    Tracked references persist across calls to :meth:`analyze_function`.
    """

    def __init__(self) -> None:
        self._references: set[str] = set()

    def analyze_function(self, function: Function) -> list[ReferenceLeak]:
        leaks: list[ReferenceLeak] = []
        for statement in function.body:
            self._analyze_statement(statement, leaks)
        return leaks

    def is_reference(self, name: str) -> bool:
        """Whether ``name`` is currently tracked as a reference."""
        return name in self._references

    def _analyze_statement(self, statement: Statement, leaks: list[ReferenceLeak]) -> None:
        if isinstance(statement, (Assignment, Return, Loop, Assert)):
            self._analyze_expression(statement.expr, leaks)
        elif isinstance(statement, Call):
            for arg in statement.args:
                self._analyze_expression(arg, leaks)

    def _analyze_expression(self, expr: Expression, leaks: list[ReferenceLeak]) -> None:
        if isinstance(expr, Variable):
            if self.is_reference(expr.name):
                leaks.append(
                    ReferenceLeak(
                        location=Location(),
                        leaked_field=FieldId(),
                        context=f"Reference {expr.name} may leak",
                        severity=Severity.HIGH,
                    )
                )
        elif isinstance(expr, FieldAccess):
            self._analyze_expression(expr.base, leaks)
            self._references.add(expr.field)
        elif isinstance(expr, CallExpr):
            for arg in expr.args:
                self._analyze_expression(arg, leaks)