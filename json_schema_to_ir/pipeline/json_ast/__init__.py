"""
JSON syntax tree module.

Contains the positioned JSON node definitions, ranges and the parser.
"""

from __future__ import annotations

from .location import Position, Range, decode_range, encode_range
from .nodes import (
    ArrayNode,
    AstNode,
    IdentifierNode,
    LiteralNode,
    ObjectNode,
    PropertyNode,
    is_array_node,
    is_identifier_node,
    is_literal_node,
    is_object_node,
    is_value_node,
)
from .parser import JsonAstParser, JsonSyntaxError, parse_json

__all__ = [
    "AstNode",
    "ObjectNode",
    "ArrayNode",
    "LiteralNode",
    "IdentifierNode",
    "PropertyNode",
    "Position",
    "Range",
    "encode_range",
    "decode_range",
    "is_object_node",
    "is_array_node",
    "is_literal_node",
    "is_identifier_node",
    "is_value_node",
    "JsonAstParser",
    "JsonSyntaxError",
    "parse_json",
]
