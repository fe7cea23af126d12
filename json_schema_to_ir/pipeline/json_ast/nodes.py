"""
Raw JSON syntax tree.

These nodes mirror the JSON text one-to-one: object members keep their
order and every node remembers where it came from.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .location import Range


@dataclass
class AstNode:
    """Base class for all raw JSON nodes."""

    loc: Range = field(default_factory=Range)

    # "Object", "Array", "Literal", "Identifier" or "Property"
    type: str = ""


@dataclass
class IdentifierNode(AstNode):
    """An object member key."""

    value: str = ""
    raw: str = ""
    type: str = "Identifier"


@dataclass
class LiteralNode(AstNode):
    """A string, number, boolean or null."""

    value: Any = None
    raw: str = ""
    type: str = "Literal"


@dataclass
class ArrayNode(AstNode):
    children: list[AstNode] = field(default_factory=list)
    type: str = "Array"


@dataclass
class PropertyNode(AstNode):
    """A key/value member of an object."""

    key: IdentifierNode = field(default_factory=IdentifierNode)
    value: AstNode | None = None
    type: str = "Property"


@dataclass
class ObjectNode(AstNode):
    children: list[PropertyNode] = field(default_factory=list)
    type: str = "Object"

    def find(self, key: str) -> PropertyNode | None:
        """Return the first member named key."""
        for prop in self.children:
            if prop.key.value == key:
                return prop
        return None


def is_object_node(node: AstNode | None) -> bool:
    return isinstance(node, ObjectNode)


def is_array_node(node: AstNode | None) -> bool:
    return isinstance(node, ArrayNode)


def is_literal_node(node: AstNode | None) -> bool:
    return isinstance(node, LiteralNode)


def is_identifier_node(node: AstNode | None) -> bool:
    return isinstance(node, IdentifierNode)


def is_value_node(node: AstNode | None) -> bool:
    return is_object_node(node) or is_array_node(node) or is_literal_node(node)
