from moveguard.model import FieldId, Location, Severity
from moveguard.reference_flow import ReferenceFlowAnalyzer
from moveguard.syntax import (
    Assert,
    Assignment,
    BorrowGlobal,
    Call,
    CallExpr,
    FieldAccess,
    Function,
    Loop,
    Return,
    Value,
    Variable,
)


def _function(*statements):
    return Function("f", body=list(statements))


def test_plain_variable_is_not_a_leak():
    analyzer = ReferenceFlowAnalyzer()
    leaks = analyzer.analyze_function(_function(Return(Variable("x"))))
    assert leaks == []
    assert analyzer.is_reference("x") is False


def test_field_access_tracks_field_name():
    analyzer = ReferenceFlowAnalyzer()
    leaks = analyzer.analyze_function(
        _function(Assignment("a", FieldAccess(Variable("obj"), "balance")))
    )
    assert leaks == []
    assert analyzer.is_reference("balance") is True
    assert analyzer.is_reference("obj") is False


def test_read_of_tracked_name_leaks():
    analyzer = ReferenceFlowAnalyzer()
    leaks = analyzer.analyze_function(
        _function(
            Assignment("a", FieldAccess(Variable("obj"), "balance")),
            Return(Variable("balance")),
        )
    )
    assert len(leaks) == 1
    leak = leaks[0]
    assert leak.context == "Reference balance may leak"
    assert leak.severity is Severity.HIGH
    assert leak.leaked_field == FieldId()
    assert leak.location == Location()


def test_tracking_persists_between_functions():
    analyzer = ReferenceFlowAnalyzer()
    analyzer.analyze_function(_function(Assignment("a", FieldAccess(Variable("s"), "f"))))
    leaks = analyzer.analyze_function(_function(Assert(Variable("f"))))
    assert [leak.context for leak in leaks] == ["Reference f may leak"]


def test_call_arguments_are_examined():
    analyzer = ReferenceFlowAnalyzer()
    leaks = analyzer.analyze_function(
        _function(
            Assignment("a", FieldAccess(Variable("s"), "v")),
            Call("g", (Variable("v"), Value("1"), Variable("v"))),
        )
    )
    assert [leak.context for leak in leaks] == ["Reference v may leak"] * 2


def test_call_expression_inside_loop():
    analyzer = ReferenceFlowAnalyzer()
    leaks = analyzer.analyze_function(
        _function(
            Loop(CallExpr("h", (FieldAccess(Variable("s"), "v"),))),
            Loop(CallExpr("h", (Variable("v"),))),
        )
    )
    assert [leak.context for leak in leaks] == ["Reference v may leak"]


def test_nested_field_access_tracks_every_field():
    analyzer = ReferenceFlowAnalyzer()
    analyzer.analyze_function(
        _function(Assignment("x", FieldAccess(FieldAccess(Variable("a"), "b"), "c")))
    )
    assert analyzer.is_reference("b") and analyzer.is_reference("c")
    assert not analyzer.is_reference("a")


def test_borrow_statements_produce_nothing():
    analyzer = ReferenceFlowAnalyzer()
    analyzer.analyze_function(_function(Assignment("a", FieldAccess(Variable("s"), "g"))))
    leaks = analyzer.analyze_function(_function(BorrowGlobal("g")))
    assert leaks == []