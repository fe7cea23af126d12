"""
JSON Schema views.

These classes add JSON Schema keyword accessors on top of JsonNode. They
do not interpret the schema; the analyzer decides what each keyword means.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from functools import cached_property

from ..json_ast import Range
from .json_node import JsonLiteral, JsonNode, join_pointer


class SchemaKind(Enum):
    """Shape of a schema node, in dispatch priority order."""

    REF = "ref"  # $ref
    INTERSECTION = "intersection"  # allOf
    ANY_OF = "any_of"  # anyOf
    UNION = "union"  # oneOf
    TYPE_ARRAY = "type_array"  # "type": [...]
    ENUM = "enum"
    OBJECT = "object"
    ARRAY = "array"
    PRIMITIVE = "primitive"  # everything else, including untyped


# Shapes that register a named entry before walking their children
REGISTERING_KINDS = frozenset({SchemaKind.INTERSECTION, SchemaKind.UNION, SchemaKind.ENUM, SchemaKind.OBJECT})

# Sub-schema maps that hold named definitions
DEFINITION_KEYWORDS = ("definitions", "$defs")


class AbstractSchemaNode(JsonNode):
    """Keyword accessors shared by the document root and nested schemas."""

    @property
    def ref(self) -> JsonLiteral | None:
        return self._literal("$ref")

    @property
    def title(self) -> JsonLiteral | None:
        return self._literal("title")

    @property
    def description(self) -> JsonLiteral | None:
        return self._literal("description")

    @property
    def multiple_of(self) -> JsonLiteral | None:
        return self._literal("multipleOf")

    @property
    def maximum(self) -> JsonLiteral | None:
        return self._literal("maximum")

    @property
    def exclusive_maximum(self) -> JsonLiteral | None:
        return self._literal("exclusiveMaximum")

    @property
    def minimum(self) -> JsonLiteral | None:
        return self._literal("minimum")

    @property
    def exclusive_minimum(self) -> JsonLiteral | None:
        return self._literal("exclusiveMinimum")

    @property
    def max_length(self) -> JsonLiteral | None:
        return self._literal("maxLength")

    @property
    def min_length(self) -> JsonLiteral | None:
        return self._literal("minLength")

    @property
    def pattern(self) -> JsonLiteral | None:
        return self._literal("pattern")

    @property
    def format(self) -> JsonLiteral | None:
        return self._literal("format")

    @property
    def items(self) -> SchemaNode | list[SchemaNode] | None:
        """A single item schema, or a list of schemas for the tuple form."""
        tuple_items = self._array("items", SchemaNode)
        if tuple_items is not None:
            return tuple_items
        return self._child("items", SchemaNode)

    @property
    def max_items(self) -> JsonLiteral | None:
        return self._literal("maxItems")

    @property
    def min_items(self) -> JsonLiteral | None:
        return self._literal("minItems")

    @property
    def unique_items(self) -> JsonLiteral | None:
        return self._literal("uniqueItems")

    @property
    def max_properties(self) -> JsonLiteral | None:
        return self._literal("maxProperties")

    @property
    def min_properties(self) -> JsonLiteral | None:
        return self._literal("minProperties")

    @property
    def required(self) -> list[JsonLiteral] | None:
        return self._array("required", JsonLiteral)

    @property
    def additional_properties(self) -> SchemaNode | None:
        return self._child("additionalProperties", SchemaNode)

    @property
    def definitions(self) -> SchemaRecordNode | None:
        """The `definitions` map, falling back to `$defs`."""
        for keyword in DEFINITION_KEYWORDS:
            record = self._child(keyword, SchemaRecordNode)
            if record is not None:
                return record
        return None

    @property
    def all_definitions(self) -> list[SchemaRecordNode]:
        """Every definitions map present on this node (`definitions` and `$defs`)."""
        records = [self._child(keyword, SchemaRecordNode) for keyword in DEFINITION_KEYWORDS]
        return [r for r in records if r is not None]

    @property
    def properties(self) -> SchemaRecordNode | None:
        return self._child("properties", SchemaRecordNode)

    @property
    def enum(self) -> list[JsonLiteral] | None:
        return self._array("enum", JsonLiteral)

    @property
    def type(self) -> JsonLiteral | list[JsonLiteral] | None:
        """A single type name, or a list of alternatives."""
        types = self._array("type", JsonLiteral)
        if types is not None:
            return types
        return self._literal("type")

    @property
    def all_of(self) -> list[SchemaNode] | None:
        return self._array("allOf", SchemaNode)

    @property
    def any_of(self) -> list[SchemaNode] | None:
        return self._array("anyOf", SchemaNode)

    @property
    def one_of(self) -> list[SchemaNode] | None:
        return self._array("oneOf", SchemaNode)

    @property
    def discriminator(self) -> DiscriminatorNode | None:
        return self._child("discriminator", DiscriminatorNode)

    @property
    def const(self) -> JsonLiteral | None:
        return self._literal("const")

    @cached_property
    def kind(self) -> SchemaKind:
        """Classify this node once; first matching shape wins."""
        if self.ref is not None:
            return SchemaKind.REF
        if self.all_of is not None:
            return SchemaKind.INTERSECTION
        if self.any_of is not None:
            return SchemaKind.ANY_OF
        if self.one_of is not None:
            return SchemaKind.UNION

        schema_type = self.type
        if isinstance(schema_type, list):
            return SchemaKind.TYPE_ARRAY
        if self.enum is not None:
            return SchemaKind.ENUM
        if is_object_type(schema_type):
            return SchemaKind.OBJECT
        if is_array_type(schema_type):
            return SchemaKind.ARRAY
        return SchemaKind.PRIMITIVE


class DocumentNode(AbstractSchemaNode):
    node_type = "DocumentNode"


class SchemaNode(AbstractSchemaNode):
    node_type = "SchemaNode"


class StringMappingNode(JsonNode):
    node_type = "StringMapping"

    def read(self, key: str) -> JsonLiteral | None:
        return self._literal(key)


class DiscriminatorNode(JsonNode):
    node_type = "Discriminator"

    @property
    def property_name(self) -> JsonLiteral | None:
        return self._literal("propertyName")

    @property
    def mapping(self) -> StringMappingNode | None:
        return self._child("mapping", StringMappingNode)


@dataclass
class SchemaRecordItem:
    """One entry of a `properties` or `definitions` map."""

    loc: Range
    key: JsonLiteral
    value: SchemaNode


class SchemaRecordNode(JsonNode):
    """A map from names to schemas."""

    node_type = "SchemaRecordNode"

    @property
    def children(self) -> list[SchemaRecordItem]:
        items = []
        for prop in self.members:
            pointer = join_pointer(self.pointer, prop.key.value)
            items.append(
                SchemaRecordItem(
                    loc=prop.loc,
                    key=JsonLiteral(prop.key, pointer),
                    value=SchemaNode(prop.value, pointer),
                )
            )
        return items


def _single_type(schema_type: JsonLiteral | list[JsonLiteral] | None) -> str | None:
    if schema_type is None or isinstance(schema_type, list):
        return None
    return schema_type.value


def is_array_type(schema_type) -> bool:
    return _single_type(schema_type) == "array"


def is_boolean_type(schema_type) -> bool:
    return _single_type(schema_type) == "boolean"


def is_null_type(schema_type) -> bool:
    return _single_type(schema_type) == "null"


def is_number_type(schema_type) -> bool:
    return _single_type(schema_type) == "number"


def is_integer_type(schema_type) -> bool:
    return _single_type(schema_type) == "integer"


def is_numeric_type(schema_type) -> bool:
    return _single_type(schema_type) in ("number", "integer")


def is_object_type(schema_type) -> bool:
    return _single_type(schema_type) == "object"


def is_string_type(schema_type) -> bool:
    return _single_type(schema_type) == "string"
