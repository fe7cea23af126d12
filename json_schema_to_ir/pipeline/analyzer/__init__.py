"""
Analyzer module.

Contains reference resolution, name inference, and IR building.
"""

from __future__ import annotations

from .analyzer import (
    CIRCULAR_REFERENCE,
    DUPLICATE_NAME,
    MISCONFIGURED_DISCRIMINATOR,
    UNRESOLVED_REFERENCE,
    UNSUPPORTED_FEATURE,
    BuildContext,
    ParsedType,
    SchemaAnalyzer,
    SchemaParseError,
    UnsupportedFeatureError,
)
from .ir_nodes import (
    ComplexValue,
    ConstantLiteral,
    EnumDef,
    EnumMember,
    MemberValue,
    ParseResult,
    Primitive,
    PrimitiveValue,
    Property,
    Service,
    Severity,
    StringLiteral,
    Type,
    Union,
    UnionKind,
    Violation,
    to_dict,
)
from .name_resolver import NameResolver
from .reference_resolver import ReferenceResolver

__all__ = [
    "ComplexValue",
    "ConstantLiteral",
    "EnumDef",
    "EnumMember",
    "MemberValue",
    "ParseResult",
    "Primitive",
    "PrimitiveValue",
    "Property",
    "Service",
    "Severity",
    "StringLiteral",
    "Type",
    "Union",
    "UnionKind",
    "Violation",
    "to_dict",
    "CIRCULAR_REFERENCE",
    "DUPLICATE_NAME",
    "MISCONFIGURED_DISCRIMINATOR",
    "UNRESOLVED_REFERENCE",
    "UNSUPPORTED_FEATURE",
    "BuildContext",
    "ParsedType",
    "SchemaAnalyzer",
    "SchemaParseError",
    "UnsupportedFeatureError",
    "NameResolver",
    "ReferenceResolver",
]
