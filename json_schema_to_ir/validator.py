"""
Validation rule extraction for JSON schema constraints.

Each factory looks at one schema node and returns at most one rule. The
factories are independent of each other: they never see each other's
output, so the order of the pipelines only affects the order of the
returned rules, never their content.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from typing import Any

from .pipeline.schema_ast import AbstractSchemaNode, JsonLiteral
from .pipeline.schema_ast.nodes import (
    is_array_type,
    is_numeric_type,
    is_object_type,
    is_string_type,
)
from .validation_rules import (
    ArrayMaxItemsRule,
    ArrayMinItemsRule,
    ArrayUniqueItemsRule,
    NumberGTERule,
    NumberGTRule,
    NumberLTERule,
    NumberLTRule,
    NumberMultipleOfRule,
    ObjectMaxPropertiesRule,
    ObjectMinPropertiesRule,
    ObjectValidationRule,
    StringEnumRule,
    StringFormatRule,
    StringMaxLengthRule,
    StringMinLengthRule,
    StringPatternRule,
    ValidationRule,
)

ValidationRuleFactory = Callable[[AbstractSchemaNode], ValidationRule | None]
ObjectValidationRuleFactory = Callable[[AbstractSchemaNode], ObjectValidationRule | None]


def _value(literal: JsonLiteral | None) -> Any:
    """Value of a keyword, or None when it is absent or not a scalar."""
    if literal is None or not literal.is_literal:
        return None
    return literal.value


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _number(literal: JsonLiteral | None) -> int | float | None:
    value = _value(literal)
    return value if _is_number(value) else None


def _string(literal: JsonLiteral | None) -> str | None:
    value = _value(literal)
    return value if isinstance(value, str) else None


def string_max_length_factory(node: AbstractSchemaNode) -> ValidationRule | None:
    length = _number(node.max_length)
    if is_string_type(node.type) and length is not None:
        return StringMaxLengthRule(length=length, loc=node.property_range("maxLength"))
    return None


def string_min_length_factory(node: AbstractSchemaNode) -> ValidationRule | None:
    length = _number(node.min_length)
    if is_string_type(node.type) and length is not None:
        return StringMinLengthRule(length=length, loc=node.property_range("minLength"))
    return None


def string_pattern_factory(node: AbstractSchemaNode) -> ValidationRule | None:
    pattern = _string(node.pattern)
    if is_string_type(node.type) and pattern:
        return StringPatternRule(pattern=pattern, loc=node.property_range("pattern"))
    return None


def string_format_factory(node: AbstractSchemaNode) -> ValidationRule | None:
    string_format = _string(node.format)
    if is_string_type(node.type) and string_format:
        return StringFormatRule(format=string_format, loc=node.property_range("format"))
    return None


def string_enum_factory(node: AbstractSchemaNode) -> ValidationRule | None:
    if not is_string_type(node.type) or node.enum is None:
        return None

    values = [v for v in (_value(member) for member in node.enum) if isinstance(v, str)]
    if not values:
        return None
    return StringEnumRule(values=values, loc=node.property_range("enum"))


def number_multiple_of_factory(node: AbstractSchemaNode) -> ValidationRule | None:
    multiple = _number(node.multiple_of)
    if is_numeric_type(node.type) and multiple is not None:
        return NumberMultipleOfRule(value=multiple, loc=node.property_range("multipleOf"))
    return None


def number_greater_than_factory(node: AbstractSchemaNode) -> ValidationRule | None:
    """
    Lower bound from minimum/exclusiveMinimum.

    A boolean exclusiveMinimum (draft 4) makes minimum strict. A numeric
    exclusiveMinimum (draft 6+) is a strict bound of its own; when both
    bounds are numeric the tighter one wins.
    """
    if not is_numeric_type(node.type):
        return None

    minimum = _number(node.minimum)
    exclusive = _value(node.exclusive_minimum)

    if _is_number(exclusive) and (minimum is None or exclusive >= minimum):
        return NumberGTRule(value=exclusive, loc=node.property_range("exclusiveMinimum"))
    if minimum is not None:
        rule_cls = NumberGTRule if exclusive is True else NumberGTERule
        return rule_cls(value=minimum, loc=node.property_range("minimum"))
    return None


def number_less_than_factory(node: AbstractSchemaNode) -> ValidationRule | None:
    """Upper bound from maximum/exclusiveMaximum, mirroring the lower bound."""
    if not is_numeric_type(node.type):
        return None

    maximum = _number(node.maximum)
    exclusive = _value(node.exclusive_maximum)

    if _is_number(exclusive) and (maximum is None or exclusive <= maximum):
        return NumberLTRule(value=exclusive, loc=node.property_range("exclusiveMaximum"))
    if maximum is not None:
        rule_cls = NumberLTRule if exclusive is True else NumberLTERule
        return rule_cls(value=maximum, loc=node.property_range("maximum"))
    return None


def array_min_items_factory(node: AbstractSchemaNode) -> ValidationRule | None:
    min_items = _number(node.min_items)
    if is_array_type(node.type) and min_items is not None:
        return ArrayMinItemsRule(min=min_items, loc=node.property_range("minItems"))
    return None


def array_max_items_factory(node: AbstractSchemaNode) -> ValidationRule | None:
    max_items = _number(node.max_items)
    if is_array_type(node.type) and max_items is not None:
        return ArrayMaxItemsRule(max=max_items, loc=node.property_range("maxItems"))
    return None


def array_unique_items_factory(node: AbstractSchemaNode) -> ValidationRule | None:
    if is_array_type(node.type) and _value(node.unique_items) is True:
        return ArrayUniqueItemsRule(required=True, loc=node.property_range("uniqueItems"))
    return None


def object_min_properties_factory(node: AbstractSchemaNode) -> ObjectValidationRule | None:
    min_properties = _number(node.min_properties)
    if is_object_type(node.type) and min_properties is not None:
        return ObjectMinPropertiesRule(min=min_properties, loc=node.property_range("minProperties"))
    return None


def object_max_properties_factory(node: AbstractSchemaNode) -> ObjectValidationRule | None:
    max_properties = _number(node.max_properties)
    if is_object_type(node.type) and max_properties is not None:
        return ObjectMaxPropertiesRule(max=max_properties, loc=node.property_range("maxProperties"))
    return None


def object_additional_properties_factory(node: AbstractSchemaNode) -> ObjectValidationRule | None:
    # TODO: emit a rule for "additionalProperties": false once the IR has a forbidden-properties rule
    return None


VALIDATION_RULE_FACTORIES: tuple[ValidationRuleFactory, ...] = (
    string_max_length_factory,
    string_min_length_factory,
    string_pattern_factory,
    string_format_factory,
    string_enum_factory,
    number_multiple_of_factory,
    number_greater_than_factory,
    number_less_than_factory,
    array_min_items_factory,
    array_max_items_factory,
    array_unique_items_factory,
)

OBJECT_VALIDATION_RULE_FACTORIES: tuple[ObjectValidationRuleFactory, ...] = (
    object_min_properties_factory,
    object_max_properties_factory,
    object_additional_properties_factory,
)


def parse_validation_rules(node: AbstractSchemaNode) -> Iterator[ValidationRule]:
    """
    Run every value-level factory against a schema node.

    Args:
        node: The schema of a property, array item or primitive

    Yields:
        One rule per factory that applies
    """
    for factory in VALIDATION_RULE_FACTORIES:
        rule = factory(node)
        if rule is not None:
            yield rule


def parse_object_validation_rules(node: AbstractSchemaNode) -> Iterator[ObjectValidationRule]:
    """Run every object-level factory against an object schema node."""
    for factory in OBJECT_VALIDATION_RULE_FACTORIES:
        rule = factory(node)
        if rule is not None:
            yield rule
