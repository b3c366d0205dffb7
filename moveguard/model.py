"""Core records shared by the analyzers: severities, locations, values and findings."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union


class Severity(Enum):
    """How serious a finding is."""

    CRITICAL = "CRITICAL"
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"

    def __str__(self) -> str:
        return self.value


class ViolationType(Enum):
    """The category of a safety violation; the value is its display name."""

    UNSAFE_TRANSFER = "Unsafe Transfer"
    CAPABILITY_LEAK = "Capability Leak"
    SHARED_OBJECT_VIOLATION = "Shared Object Violation"
    INVARIANT_VIOLATION = "Invariant Violation"
    UNSAFE_PUBLIC_INTERFACE = "Unsafe Public Interface"
    UNSAFE_OBJECT_DESTRUCTION = "Unsafe Object Destruction"
    UNSAFE_CAPABILITY_USE = "Unsafe Capability Use"
    UNSAFE_HOT_POTATO = "Unsafe Hot Potato"
    DOS_VECTOR = "DOS Vector"
    CALL_STACK_VIOLATION = "Call Stack Violation"
    EXCESSIVE_GAS = "Excessive Gas Usage"
    TYPE_SAFETY_VIOLATION = "Type Safety Violation"
    ARITHMETIC_ERROR = "Arithmetic Error"
    TIMESTAMP_VIOLATION = "Timestamp Violation"
    OWNERSHIP_VIOLATION = "Ownership Violation"
    UNAUTHORIZED_ACCESS = "Unauthorized Access"
    ID_VERIFICATION_ERROR = "ID Verification Error"
    CONSENSUS_VIOLATION = "Consensus Violation"
    RESOURCE_SAFETY_VIOLATION = "Resource Safety Violation"
    CAPABILITY_VIOLATION = "Capability Violation"
    REFERENCE_ESCAPE = "Reference Escape"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Location:
    """A position in a source file."""

    file: str = ""
    line: int = 0
    column: int = 0
    context: str = ""


@dataclass(frozen=True)
class FieldId:
    """Identifies a struct field within a module."""

    module_name: str = ""
    struct_name: str = ""
    field_name: str = ""


@dataclass(frozen=True)
class ObjectId:
    """Identifies an object type."""

    module_name: str = ""
    type_name: str = ""
    is_shared: bool = False


@dataclass(frozen=True)
class CapId:
    """Identifies a capability type and the permissions it grants."""

    module_name: str = ""
    cap_name: str = ""
    permissions: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "permissions", tuple(self.permissions))


@dataclass(frozen=True)
class NonRef:
    """A value that is not a reference."""


@dataclass(frozen=True)
class InvRef:
    """A reference to an invariant-protected field."""

    field: FieldId


@dataclass(frozen=True)
class ObjectRef:
    """A reference to an object."""

    object_id: ObjectId


@dataclass(frozen=True)
class CapabilityRef:
    """A reference to a capability."""

    cap_id: CapId


AbstractValue = Union[NonRef, InvRef, ObjectRef, CapabilityRef]


@dataclass
class ViolationContext:
    """Extra information attached to a safety violation."""

    affected_functions: list[str] = field(default_factory=list)
    related_types: list[str] = field(default_factory=list)
    suggested_fixes: list[str] = field(default_factory=list)
    whitepaper_reference: Optional[str] = None


@dataclass
class SafetyViolation:
    """A safety rule broken by the analysed code."""

    location: Location
    violation_type: ViolationType
    message: str
    severity: Severity
    context: Optional[ViolationContext] = None


@dataclass
class ReferenceLeak:
    """A reference that may escape where it should not."""

    location: Location
    leaked_field: FieldId
    context: str
    severity: Severity