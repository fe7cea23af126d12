"""
IR (Intermediate Representation) node definitions.

These nodes represent the analyzed schema, ready for downstream code
generators. All references are resolved to names of registered Types,
Enums or Unions, and every entity keeps an encoded source range.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields, is_dataclass
from enum import Enum
from typing import Any

from ...validation_rules import ObjectValidationRule, ValidationRule


class Primitive(str, Enum):
    """Inline scalar kinds."""

    BOOLEAN = "boolean"
    INTEGER = "integer"
    LONG = "long"
    NUMBER = "number"
    FLOAT = "float"
    DOUBLE = "double"
    STRING = "string"
    DATE = "date"
    DATE_TIME = "date-time"
    UNTYPED = "untyped"  # placeholder for shapes that cannot be typed


class UnionKind(str, Enum):
    SIMPLE = "SimpleUnion"  # no members to classify
    DISCRIMINATED = "DiscriminatedUnion"  # complex members selected by a property
    PRIMITIVE = "PrimitiveUnion"  # primitive members only
    COMPLEX = "ComplexUnion"  # complex members only


class Severity(str, Enum):
    ERROR = "error"
    INFO = "info"


@dataclass
class StringLiteral:
    """A string with its encoded source range."""

    value: str = ""
    loc: str | None = None


@dataclass
class ConstantLiteral:
    """A constant string, number or boolean value."""

    kind: str = ""  # "StringLiteral", "NumberLiteral" or "BooleanLiteral"
    value: str | int | float | bool = ""
    loc: str | None = None


@dataclass
class MemberValue:
    """Base class for value shapes."""

    kind = ""

    is_array: bool = False
    is_optional: bool = False
    rules: list[ValidationRule] = field(default_factory=list)

    @property
    def is_primitive(self) -> bool:
        return isinstance(self, PrimitiveValue)

    @property
    def is_complex(self) -> bool:
        return isinstance(self, ComplexValue)


@dataclass
class PrimitiveValue(MemberValue):
    """An inline scalar."""

    kind = "PrimitiveValue"

    type_name: Primitive = Primitive.UNTYPED
    loc: str | None = None
    constant: ConstantLiteral | None = None

    @property
    def is_untyped(self) -> bool:
        return self.type_name == Primitive.UNTYPED


@dataclass
class ComplexValue(MemberValue):
    """A reference, by name, to a registered Type, Enum or Union."""

    kind = "ComplexValue"

    type_name: StringLiteral = field(default_factory=StringLiteral)


@dataclass
class Property:
    name: StringLiteral = field(default_factory=StringLiteral)
    description: list[StringLiteral] | None = None
    value: MemberValue = field(default_factory=PrimitiveValue)
    loc: str | None = None


@dataclass
class Type:
    """An object type."""

    name: StringLiteral = field(default_factory=StringLiteral)
    description: list[StringLiteral] | None = None
    properties: list[Property] = field(default_factory=list)
    rules: list[ObjectValidationRule] = field(default_factory=list)
    loc: str | None = None

    # JSON Pointer of the schema that produced this entry
    source_pointer: str = ""


@dataclass
class EnumMember:
    content: StringLiteral = field(default_factory=StringLiteral)


@dataclass
class EnumDef:
    """A string enumeration."""

    name: StringLiteral = field(default_factory=StringLiteral)
    description: list[StringLiteral] | None = None
    members: list[EnumMember] = field(default_factory=list)
    loc: str | None = None
    source_pointer: str = ""


@dataclass
class Union:
    name: StringLiteral = field(default_factory=StringLiteral)
    kind: UnionKind = UnionKind.SIMPLE
    description: list[StringLiteral] | None = None
    members: list[MemberValue] = field(default_factory=list)
    discriminator: StringLiteral | None = None  # only for discriminated unions
    loc: str | None = None
    source_pointer: str = ""


@dataclass
class Violation:
    """A recoverable problem found while building the IR."""

    code: str = ""
    message: str = ""
    severity: Severity = Severity.ERROR
    range: str | None = None  # encoded source range
    source_path: str = ""


@dataclass
class Service:
    """The complete Intermediate Representation of one schema document."""

    title: StringLiteral = field(default_factory=StringLiteral)
    major_version: int = 0
    source_paths: list[str] = field(default_factory=list)
    loc: str | None = None

    types: list[Type] = field(default_factory=list)
    enums: list[EnumDef] = field(default_factory=list)
    unions: list[Union] = field(default_factory=list)

    # Always empty: schemas describe data, not methods
    interfaces: list[Any] = field(default_factory=list)


@dataclass
class ParseResult:
    service: Service = field(default_factory=Service)
    violations: list[Violation] = field(default_factory=list)

    @property
    def errors(self) -> list[Violation]:
        return [v for v in self.violations if v.severity == Severity.ERROR]

    def to_dict(self) -> dict[str, Any]:
        return to_dict(self)


# Bookkeeping fields kept off the serialized IR
_INTERNAL_FIELDS = {"source_pointer"}


def to_dict(obj: Any) -> Any:
    """
    Convert IR nodes to plain JSON-compatible values.

    None-valued fields are dropped, enums become their values and value
    shapes gain their "kind" tag.
    """
    if isinstance(obj, ValidationRule):
        return obj.to_dict()
    if isinstance(obj, Enum):
        return obj.value
    if is_dataclass(obj):
        d: dict[str, Any] = {}
        if isinstance(obj, MemberValue):
            d["kind"] = obj.kind
        for f in fields(obj):
            if f.name in _INTERNAL_FIELDS:
                continue
            value = getattr(obj, f.name)
            if value is None:
                continue
            d[f.name] = to_dict(value)
        return d
    if isinstance(obj, list):
        return [to_dict(item) for item in obj]
    return obj
