"""Syntax tree of a Move module: types, expressions, statements and declarations."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Union


@dataclass(frozen=True)
class BaseType:
    """A named type such as ``u64`` or ``address``."""

    name: str

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class MutableReference:
    """A mutable reference type ``&mut T``."""

    inner: "Type"

    def __str__(self) -> str:
        return f"&mut {self.inner}"


@dataclass(frozen=True)
class Reference:
    """An immutable reference type ``&T``."""

    inner: "Type"

    def __str__(self) -> str:
        return f"&{self.inner}"


@dataclass(frozen=True)
class VectorType:
    """A vector type ``vector<T>``."""

    inner: "Type"

    def __str__(self) -> str:
        return f"vector<{self.inner}>"


@dataclass(frozen=True)
class GenericType:
    """A generic type instantiation ``Name<A, B>``."""

    name: str
    args: tuple["Type", ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "args", tuple(self.args))

    def __str__(self) -> str:
        return f"{self.name}<{', '.join(str(arg) for arg in self.args)}>"


Type = Union[BaseType, MutableReference, Reference, VectorType, GenericType]


@dataclass(frozen=True)
class Parameter:
    """A function parameter."""

    name: str
    param_type: Type


@dataclass(frozen=True)
class Variable:
    """A variable read."""

    name: str


@dataclass(frozen=True)
class FieldAccess:
    """Access of a field on a base expression."""

    base: "Expression"
    field: str


@dataclass(frozen=True)
class CallExpr:
    """A function call used as an expression."""

    name: str
    args: tuple["Expression", ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "args", tuple(self.args))


@dataclass(frozen=True)
class Value:
    """A literal value."""

    value: str


Expression = Union[Variable, FieldAccess, CallExpr, Value]


@dataclass(frozen=True)
class Assignment:
    """``var = expr``."""

    var: str
    expr: Expression


@dataclass(frozen=True)
class Return:
    """``return expr``."""

    expr: Expression


@dataclass(frozen=True)
class Loop:
    """A loop over a condition expression."""

    expr: Expression


@dataclass(frozen=True)
class Call:
    """A function call used as a statement."""

    name: str
    args: tuple[Expression, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "args", tuple(self.args))


@dataclass(frozen=True)
class Assert:
    """An assertion."""

    expr: Expression


@dataclass(frozen=True)
class ExternalCall:
    """A call into another module."""

    name: str


@dataclass(frozen=True)
class InternalCall:
    """A call within the same module."""

    name: str


@dataclass(frozen=True)
class BorrowField:
    """A borrow of a struct field."""

    name: str


@dataclass(frozen=True)
class BorrowGlobal:
    """A borrow of global storage of a type."""

    type_name: str


@dataclass(frozen=True)
class BorrowLocal:
    """A borrow of a local variable."""

    name: str


Statement = Union[
    Assignment,
    Return,
    Loop,
    Call,
    Assert,
    ExternalCall,
    InternalCall,
    BorrowField,
    BorrowGlobal,
    BorrowLocal,
]


@dataclass(frozen=True)
class Field:
    """A struct field declaration."""

    name: str
    field_type: Type


@dataclass
class Struct:
    """A struct declaration with its fields and abilities."""

    name: str
    fields: list[Field] = field(default_factory=list)
    abilities: list[str] = field(default_factory=list)

    def has_key_ability(self) -> bool:
        """Whether the struct declares the ``key`` ability."""
        return "key" in self.abilities


@dataclass
class Invariant:
    """A module invariant and the fields it protects."""

    name: str = ""
    affected_fields: list = field(default_factory=list)


@dataclass
class Function:
    """A function declaration."""

    name: str
    parameters: list[Parameter] = field(default_factory=list)
    return_type: Optional[Type] = None
    body: list[Statement] = field(default_factory=list)

    def add_statement(self, statement: Statement) -> None:
        self.body.append(statement)


@dataclass
class Module:
    """A module with its functions, structs and invariants."""

    name: str
    functions: list[Function] = field(default_factory=list)
    structs: list[Struct] = field(default_factory=list)
    invariants: list[Invariant] = field(default_factory=list)

    def add_function(self, function: Function) -> None:
        self.functions.append(function)

    def add_struct(self, struct: Struct) -> None:
        self.structs.append(struct)

    def get_structs(self) -> list[Struct]:
        return list(self.structs)