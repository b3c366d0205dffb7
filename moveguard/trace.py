"""Trace of security-relevant events: calls across modules, returns and state access."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional, Union

from moveguard.syntax import BorrowGlobal, Call, Function, Module, Return


class BoundaryKind(Enum):
    TRUSTED_TO_UNTRUSTED = auto()
    UNTRUSTED_TO_TRUSTED = auto()
    CROSS_MODULE = auto()


class AccessKind(Enum):
    READ = auto()
    WRITE = auto()
    TRANSFER = auto()


@dataclass(frozen=True)
class CallToTrusted:
    """A call that crosses a trust boundary."""

    caller: str
    callee: str
    context: str


@dataclass(frozen=True)
class ReturnToUntrusted:
    """A return back across a module boundary."""

    source: str
    destination: str
    context: str


@dataclass(frozen=True)
class BoundaryCrossing:
    """A call into another module."""

    from_module: str
    to_module: str
    kind: BoundaryKind


@dataclass(frozen=True)
class StateAccess:
    """An access to global state."""

    module: str
    field: str
    kind: AccessKind


SecurityEvent = Union[CallToTrusted, ReturnToUntrusted, BoundaryCrossing, StateAccess]


@dataclass(frozen=True)
class CallContext:
    """One entry of the simulated call stack."""

    caller: str
    callee: str
    boundary_crossed: bool
    stack_depth: int


class TraceAnalyzer:
    """Walks module bodies and records calls across module and trust boundaries.

    The call stack and call chains persist across analysed modules.
    """

    def __init__(self) -> None:
        self._events: list[SecurityEvent] = []
        self._call_stack: list[CallContext] = []
        self._current_module: Optional[str] = None
        self._trusted_modules: set[str] = set()
        self._call_chains: dict[str, list[str]] = {}

    def analyze_module(self, module: Module) -> list[SecurityEvent]:
        self._current_module = module.name
        self._events.clear()
        for function in module.functions:
            self._analyze_function(function)
        return list(self._events)

    def mark_trusted_module(self, module_name: str) -> None:
        self._trusted_modules.add(module_name)

    def get_call_chain(self, module_name: str) -> Optional[list[str]]:
        """Modules called from ``module_name``, in call order, or None if none were."""
        chain = self._call_chains.get(module_name)
        return list(chain) if chain is not None else None

    def _analyze_function(self, function: Function) -> None:
        for statement in function.body:
            if isinstance(statement, Call):
                self._track_call(statement.name)
            elif isinstance(statement, Return):
                self._track_return()
            elif isinstance(statement, BorrowGlobal):
                self._track_state_access(statement.type_name, AccessKind.READ)

    def _track_call(self, name: str) -> None:
        current = self._current_module or ""
        called = name.split("::", 1)[0]
        crosses = called != "Self"

        if crosses:
            self._events.append(
                BoundaryCrossing(current, called, self._boundary_kind(current, called))
            )

        self._call_stack.append(
            CallContext(
                caller=current,
                callee=called,
                boundary_crossed=crosses,
                stack_depth=len(self._call_stack),
            )
        )
        self._call_chains.setdefault(current, []).append(called)

        if self._is_trusted(current) != self._is_trusted(called):
            self._events.append(
                CallToTrusted(
                    caller=current,
                    callee=called,
                    context=f"Call stack depth: {len(self._call_stack)}",
                )
            )

    def _track_return(self) -> None:
        if not self._call_stack:
            return
        context = self._call_stack.pop()
        if context.boundary_crossed:
            self._events.append(
                ReturnToUntrusted(
                    source=context.callee,
                    destination=context.caller,
                    context=f"Call stack depth: {len(self._call_stack)}",
                )
            )

    def _track_state_access(self, field_name: str, kind: AccessKind) -> None:
        if self._current_module is not None:
            self._events.append(StateAccess(self._current_module, field_name, kind))

    def _is_trusted(self, module_name: str) -> bool:
        return module_name in self._trusted_modules

    def _boundary_kind(self, source: str, target: str) -> BoundaryKind:
        source_trusted = self._is_trusted(source)
        target_trusted = self._is_trusted(target)
        if source_trusted and not target_trusted:
            return BoundaryKind.TRUSTED_TO_UNTRUSTED
        if target_trusted and not source_trusted:
            return BoundaryKind.UNTRUSTED_TO_TRUSTED
        return BoundaryKind.CROSS_MODULE