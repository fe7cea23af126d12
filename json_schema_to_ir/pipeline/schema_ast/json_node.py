"""
Typed accessor facade over the raw JSON syntax tree.

A JsonNode is a lightweight, throwaway view of one position in the
document: the raw node plus the JSON Pointer that reaches it. Views are
recreated on every access and never cached.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, TypeVar

from ..json_ast import (
    ArrayNode,
    AstNode,
    IdentifierNode,
    ObjectNode,
    PropertyNode,
    Range,
    encode_range,
    is_identifier_node,
    is_literal_node,
)

T = TypeVar("T", bound="JsonNode")

ROOT_POINTER = "#"


@dataclass
class Literal:
    """A scalar value together with its encoded source range."""

    value: Any = None
    loc: str | None = None


def escape_segment(segment: str) -> str:
    """Escape a key for use as a JSON Pointer segment (RFC 6901)."""
    return segment.replace("~", "~0").replace("/", "~1")


def unescape_segment(segment: str) -> str:
    return segment.replace("~1", "/").replace("~0", "~")


def join_pointer(pointer: str, *segments: str | int) -> str:
    """Append segments to a pointer, escaping each one."""
    parts = [pointer]
    parts.extend(escape_segment(str(s)) for s in segments)
    return "/".join(parts)


def split_pointer(pointer: str) -> list[str]:
    """Split a pointer into unescaped segments. The root marker '#' is kept."""
    return [unescape_segment(s) for s in pointer.split("/")]


def pointer_from_segments(segments: list[str]) -> str:
    """Inverse of split_pointer()."""
    return join_pointer(segments[0], *segments[1:])


class JsonNode:
    """Base class for all typed views."""

    node_type = "JsonNode"

    def __init__(self, node: AstNode, pointer: str):
        self.node = node
        self.pointer = pointer

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.pointer!r})"

    @property
    def loc(self) -> Range | None:
        """Location of the underlying node."""
        return self.node.loc if self.node is not None else None

    @property
    def keys(self) -> list[IdentifierNode]:
        """All of the object member keys in this node."""
        return [p.key for p in self.members]

    @property
    def members(self) -> list[PropertyNode]:
        """All of the object members in this node."""
        return self.node.children if isinstance(self.node, ObjectNode) else []

    @property
    def values(self) -> list[AstNode]:
        """All of the array values in this node."""
        return self.node.children if isinstance(self.node, ArrayNode) else []

    def has(self, key: str) -> bool:
        return self._property(key) is not None

    def property_range(self, key: str) -> str | None:
        """Encoded range of the member named key (key and value)."""
        prop = self._property(key)
        return encode_range(0, prop.loc) if prop else None

    def _property(self, key: str) -> PropertyNode | None:
        if isinstance(self.node, ObjectNode):
            return self.node.find(key)
        return None

    def _child(self, key: str, node_cls: type[T]) -> T | None:
        prop = self._property(key)
        if prop is None or prop.value is None:
            return None
        return node_cls(prop.value, join_pointer(self.pointer, key))

    def _array(self, key: str, node_cls: type[T]) -> list[T] | None:
        prop = self._property(key)
        if prop is None or not isinstance(prop.value, ArrayNode):
            return None
        base = join_pointer(self.pointer, key)
        return [node_cls(child, f"{base}/{i}") for i, child in enumerate(prop.value.children)]

    def _literal(self, key: str) -> JsonLiteral | None:
        return self._child(key, JsonLiteral)


class JsonLiteral(JsonNode):
    """A view of a scalar leaf."""

    node_type = "Literal"

    @property
    def is_literal(self) -> bool:
        return is_literal_node(self.node) or is_identifier_node(self.node)

    @property
    def value(self) -> Any:
        """
        The scalar value.

        Raises:
            TypeError: If the underlying node is an object or an array
        """
        if self.is_literal:
            return self.node.value
        raise TypeError(f"Cannot parse literal at {self.pointer}")

    @property
    def as_literal(self) -> Literal:
        return Literal(value=self.value, loc=encode_range(0, self.loc))


def resolve(document: AstNode, pointer: str, node_cls: type[T]) -> T | None:
    """
    Resolve a JSON Pointer against the document root.

    Only document-relative pointers ("#" or "#/...") resolve; anything else,
    or any segment that does not exist, yields None.
    """
    segments = split_pointer(pointer)
    if not segments or segments[0] != ROOT_POINTER:
        return None

    cursor: AstNode | None = document
    for segment in segments[1:]:
        if isinstance(cursor, ArrayNode):
            if not segment.isdigit() or int(segment) >= len(cursor.children):
                return None
            cursor = cursor.children[int(segment)]
        elif isinstance(cursor, ObjectNode):
            prop = cursor.find(segment)
            if prop is None:
                return None
            cursor = prop.value
        else:
            return None

    return node_cls(cursor, pointer) if cursor is not None else None


def get_name(document: AstNode, pointer: str) -> Literal | None:
    """
    Return the last object key along a pointer, with the key's range.

    Array index segments are walked but do not contribute a name.
    """
    segments = split_pointer(pointer)
    if not segments or segments[0] != ROOT_POINTER:
        return None

    name: Literal | None = None
    cursor: AstNode | None = document
    for segment in segments[1:]:
        if isinstance(cursor, ArrayNode):
            if not segment.isdigit() or int(segment) >= len(cursor.children):
                return None
            cursor = cursor.children[int(segment)]
        elif isinstance(cursor, ObjectNode):
            prop = cursor.find(segment)
            if prop is None:
                return None
            name = Literal(value=prop.key.value, loc=encode_range(0, prop.key.loc))
            cursor = prop.value
        else:
            return None

    return name
