from moveguard.syntax import BorrowGlobal, Call, Function, Module, Return, Variable
from moveguard.trace import (
    AccessKind,
    BoundaryCrossing,
    BoundaryKind,
    CallToTrusted,
    ReturnToUntrusted,
    StateAccess,
    TraceAnalyzer,
)


def _module(name: str, *statements) -> Module:
    function = Function("func")
    for statement in statements:
        function.add_statement(statement)
    module = Module(name)
    module.add_function(function)
    return module


def test_boundary_crossing_detection():
    analyzer = TraceAnalyzer()
    analyzer.mark_trusted_module("trusted")
    events = analyzer.analyze_module(_module("untrusted", Call("trusted::func")))
    assert any(
        isinstance(e, BoundaryCrossing) and e.kind is BoundaryKind.UNTRUSTED_TO_TRUSTED
        for e in events
    )
    assert events == [
        BoundaryCrossing("untrusted", "trusted", BoundaryKind.UNTRUSTED_TO_TRUSTED),
        CallToTrusted("untrusted", "trusted", "Call stack depth: 1"),
    ]


def test_call_chain_tracking():
    analyzer = TraceAnalyzer()
    analyzer.analyze_module(_module("test", Call("mod1::func"), Call("mod2::func")))
    chain = analyzer.get_call_chain("test")
    assert len(chain) == 2
    assert chain == ["mod1", "mod2"]


def test_unknown_module_has_no_call_chain():
    assert TraceAnalyzer().get_call_chain("nowhere") is None


def test_trusted_to_untrusted():
    analyzer = TraceAnalyzer()
    analyzer.mark_trusted_module("core")
    events = analyzer.analyze_module(_module("core", Call("plugin::run")))
    assert events[0] == BoundaryCrossing("core", "plugin", BoundaryKind.TRUSTED_TO_UNTRUSTED)
    assert isinstance(events[1], CallToTrusted)


def test_cross_module_between_untrusted_modules_has_no_trust_event():
    events = TraceAnalyzer().analyze_module(_module("a", Call("b::f")))
    assert events == [BoundaryCrossing("a", "b", BoundaryKind.CROSS_MODULE)]


def test_self_call_and_return_produce_no_events():
    analyzer = TraceAnalyzer()
    events = analyzer.analyze_module(
        _module("m", Call("Self::helper"), Return(Variable("x")))
    )
    assert events == []
    assert analyzer.get_call_chain("m") == ["Self"]


def test_return_after_external_call():
    events = TraceAnalyzer().analyze_module(
        _module("test", Call("mod1::func"), Return(Variable("x")))
    )
    assert events[-1] == ReturnToUntrusted("mod1", "test", "Call stack depth: 0")


def test_return_with_empty_stack_is_ignored():
    events = TraceAnalyzer().analyze_module(_module("m", Return(Variable("x"))))
    assert events == []


def test_borrow_global_records_state_access():
    events = TraceAnalyzer().analyze_module(_module("m", BorrowGlobal("Coin")))
    assert events == [StateAccess("m", "Coin", AccessKind.READ)]


def test_events_are_cleared_but_chains_kept_between_modules():
    analyzer = TraceAnalyzer()
    analyzer.analyze_module(_module("m", Call("a::f")))
    events = analyzer.analyze_module(_module("m", Call("b::f")))
    assert events == [BoundaryCrossing("m", "b", BoundaryKind.CROSS_MODULE)]
    assert analyzer.get_call_chain("m") == ["a", "b"]