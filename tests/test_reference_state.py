from moveguard.model import FieldId, ObjectId, ObjectRef, Severity
from moveguard.reference_state import ReferenceStateAnalyzer
from moveguard.syntax import (
    Assignment,
    BaseType,
    FieldAccess,
    Function,
    MutableReference,
    Parameter,
    Reference,
    Return,
    Variable,
)

OBJ = ObjectRef(ObjectId(module_name="m", type_name="Coin"))


def _function(params=(), body=()):
    return Function("f", parameters=list(params), body=list(body))


def test_empty_function_has_no_leaks():
    assert ReferenceStateAnalyzer().analyze_function(_function()) == []


def test_borrowed_parameters_evaluate_to_non_references():
    params = [
        Parameter("x", MutableReference(BaseType("u64"))),
        Parameter("r", Reference(BaseType("u64"))),
    ]
    body = [Return(Variable("x")), Return(Variable("r"))]
    assert ReferenceStateAnalyzer().analyze_function(_function(params, body)) == []


def test_field_of_object_assigned_leaks():
    analyzer = ReferenceStateAnalyzer({"obj": OBJ})
    leaks = analyzer.analyze_function(
        _function(body=[Assignment("y", FieldAccess(Variable("obj"), "value"))])
    )
    assert len(leaks) == 1
    assert leaks[0].context == "Reference may escape through assignment to y"
    assert leaks[0].severity is Severity.HIGH
    assert leaks[0].leaked_field == FieldId("m", "Coin", "value")


def test_field_of_object_returned_is_critical():
    analyzer = ReferenceStateAnalyzer({"obj": OBJ})
    leaks = analyzer.analyze_function(_function(body=[Return(FieldAccess(Variable("obj"), "value"))]))
    assert [leak.context for leak in leaks] == ["Reference escapes through return"]
    assert leaks[0].severity is Severity.CRITICAL


def test_known_variable_takes_assigned_reference():
    analyzer = ReferenceStateAnalyzer({"obj": OBJ})
    params = [Parameter("p", BaseType("u64"))]
    body = [Assignment("p", FieldAccess(Variable("obj"), "value")), Return(Variable("p"))]
    leaks = analyzer.analyze_function(_function(params, body))
    assert [leak.severity for leak in leaks] == [Severity.HIGH, Severity.CRITICAL]
    assert leaks[1].leaked_field == FieldId("m", "Coin", "value")


def test_unknown_variable_does_not_keep_state():
    analyzer = ReferenceStateAnalyzer({"obj": OBJ})
    body = [Assignment("y", FieldAccess(Variable("obj"), "value")), Return(Variable("y"))]
    leaks = analyzer.analyze_function(_function(body=body))
    assert [leak.context for leak in leaks] == ["Reference may escape through assignment to y"]


def test_field_of_non_object_is_not_a_reference():
    analyzer = ReferenceStateAnalyzer()
    params = [Parameter("a", BaseType("u64"))]
    body = [Assignment("a", FieldAccess(Variable("a"), "f")), Return(Variable("a"))]
    assert analyzer.analyze_function(_function(params, body)) == []