"""
Validation rule objects.

Each rule represents one validation constraint extracted from a JSON
schema keyword. Rules are plain values: they carry the constraint and the
range of the keyword they came from, and leave it to downstream code
generators to decide how to enforce them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar


@dataclass
class ValidationRule:
    """Base class for all rules that apply to a single value."""

    kind: ClassVar[str] = "ValidationRule"

    # Rule identifier, e.g. "StringMaxLength"
    id: ClassVar[str] = ""

    # Encoded range of the schema keyword that produced the rule
    loc: str | None = field(default=None, kw_only=True)

    def to_dict(self) -> dict[str, Any]:
        """Convert the rule to a dictionary, dropping empty fields."""
        d: dict[str, Any] = {"kind": self.kind, "id": self.id}
        for name, value in self.__dict__.items():
            if value is not None:
                d[name] = value
        return d


@dataclass
class ObjectValidationRule(ValidationRule):
    """Base class for rules that apply to a whole object."""

    kind: ClassVar[str] = "ObjectValidationRule"


@dataclass
class StringMaxLengthRule(ValidationRule):
    """String must be at most `length` characters"""

    id: ClassVar[str] = "StringMaxLength"
    length: int = 0


@dataclass
class StringMinLengthRule(ValidationRule):
    """String must be at least `length` characters"""

    id: ClassVar[str] = "StringMinLength"
    length: int = 0


@dataclass
class StringPatternRule(ValidationRule):
    """String must match a regex pattern"""

    id: ClassVar[str] = "StringPattern"
    pattern: str = ""


@dataclass
class StringFormatRule(ValidationRule):
    """String must conform to a named format (email, uri, ...)"""

    id: ClassVar[str] = "StringFormat"
    format: str = ""


@dataclass
class StringEnumRule(ValidationRule):
    """String must be one of a fixed set of values"""

    id: ClassVar[str] = "StringEnum"
    values: list[str] = field(default_factory=list)


@dataclass
class NumberMultipleOfRule(ValidationRule):
    """Number must be a multiple of `value`"""

    id: ClassVar[str] = "NumberMultipleOf"
    value: float = 0


@dataclass
class NumberGTRule(ValidationRule):
    """Number must be strictly greater than `value`"""

    id: ClassVar[str] = "NumberGT"
    value: float = 0


@dataclass
class NumberGTERule(ValidationRule):
    """Number must be greater than or equal to `value`"""

    id: ClassVar[str] = "NumberGTE"
    value: float = 0


@dataclass
class NumberLTRule(ValidationRule):
    """Number must be strictly less than `value`"""

    id: ClassVar[str] = "NumberLT"
    value: float = 0


@dataclass
class NumberLTERule(ValidationRule):
    """Number must be less than or equal to `value`"""

    id: ClassVar[str] = "NumberLTE"
    value: float = 0


@dataclass
class ArrayMinItemsRule(ValidationRule):
    """Array must have at least `min` items"""

    id: ClassVar[str] = "ArrayMinItems"
    min: int = 0


@dataclass
class ArrayMaxItemsRule(ValidationRule):
    """Array must have at most `max` items"""

    id: ClassVar[str] = "ArrayMaxItems"
    max: int = 0


@dataclass
class ArrayUniqueItemsRule(ValidationRule):
    """Array items must be unique"""

    id: ClassVar[str] = "ArrayUniqueItems"
    required: bool = True


@dataclass
class ObjectMinPropertiesRule(ObjectValidationRule):
    """Object must have at least `min` properties"""

    id: ClassVar[str] = "ObjectMinProperties"
    min: int = 0


@dataclass
class ObjectMaxPropertiesRule(ObjectValidationRule):
    """Object must have at most `max` properties"""

    id: ClassVar[str] = "ObjectMaxProperties"
    max: int = 0

