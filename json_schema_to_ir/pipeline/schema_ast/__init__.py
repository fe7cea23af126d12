"""
Schema AST module.

Contains the typed JSON views and the JSON Schema keyword accessors.
"""

from __future__ import annotations

from .json_node import (
    ROOT_POINTER,
    JsonLiteral,
    JsonNode,
    Literal,
    get_name,
    join_pointer,
    pointer_from_segments,
    resolve,
    split_pointer,
)
from .nodes import (
    DEFINITION_KEYWORDS,
    REGISTERING_KINDS,
    AbstractSchemaNode,
    DiscriminatorNode,
    DocumentNode,
    SchemaKind,
    SchemaNode,
    SchemaRecordItem,
    SchemaRecordNode,
    StringMappingNode,
)

__all__ = [
    "ROOT_POINTER",
    "JsonNode",
    "JsonLiteral",
    "Literal",
    "get_name",
    "join_pointer",
    "pointer_from_segments",
    "resolve",
    "split_pointer",
    "DEFINITION_KEYWORDS",
    "REGISTERING_KINDS",
    "AbstractSchemaNode",
    "DiscriminatorNode",
    "DocumentNode",
    "SchemaKind",
    "SchemaNode",
    "SchemaRecordItem",
    "SchemaRecordNode",
    "StringMappingNode",
]
