from moveguard.syntax import (
    Assignment,
    BaseType,
    Call,
    CallExpr,
    Field,
    FieldAccess,
    Function,
    GenericType,
    Module,
    MutableReference,
    Reference,
    Struct,
    Variable,
    VectorType,
)


def test_base_type_display():
    assert str(BaseType("u64")) == "u64"


def test_reference_type_display():
    assert str(MutableReference(BaseType("u64"))) == "&mut u64"
    assert str(Reference(BaseType("u64"))) == "&u64"
    assert str(VectorType(BaseType("u8"))) == "vector<u8>"


def test_generic_type_display():
    generic = GenericType("Table", [BaseType("address"), VectorType(BaseType("u8"))])
    assert str(generic) == "Table<address, vector<u8>>"
    assert isinstance(generic.args, tuple)


def test_call_args_become_tuples():
    assert Call("f", [Variable("x")]).args == (Variable("x"),)
    assert CallExpr("g", []).args == ()


def test_expressions_compare_by_value():
    function = Function("f")
    function.add_statement(Assignment("x", FieldAccess(Variable("a"), "b")))
    assert list(function.body) == [Assignment("x", FieldAccess(Variable("a"), "b"))]
    assert function.body[0] != Assignment("x", FieldAccess(Variable("a"), "c"))
    assert function.body[0] != Assignment("y", FieldAccess(Variable("a"), "b"))


def test_struct_key_ability():
    assert Struct("Obj", abilities=["key", "store"]).has_key_ability()
    assert not Struct("Plain", abilities=["store"]).has_key_ability()


def test_function_add_statement_keeps_order():
    function = Function("f")
    function.add_statement(Call("a"))
    function.add_statement(Call("b"))
    assert [s.name for s in function.body] == ["a", "b"]
    assert function.return_type is None


def test_module_collects_functions_and_structs():
    module = Module("m")
    module.add_function(Function("f"))
    module.add_struct(Struct("S", fields=[Field("id", BaseType("UID"))]))
    assert [f.name for f in module.functions] == ["f"]
    structs = module.get_structs()
    assert [s.name for s in structs] == ["S"]
    structs.clear()
    assert len(module.structs) == 1