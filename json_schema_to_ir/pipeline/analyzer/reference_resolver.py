"""
Reference resolver for $ref resolution.

Resolves document-relative JSON Pointers to schema views and answers
questions that depend on a node's parent, such as whether a property is
required.
"""

from __future__ import annotations

from typing import TypeVar

from ..json_ast import AstNode
from ..schema_ast import (
    JsonNode,
    SchemaNode,
    pointer_from_segments,
    resolve,
    split_pointer,
)

T = TypeVar("T", bound=JsonNode)


class ReferenceResolver:
    """Resolves pointers against a single parsed document."""

    def __init__(self, document: AstNode):
        """
        Initialize the resolver.

        Args:
            document: Root node of the parsed schema document
        """
        self.document = document

    def resolve(self, pointer: str, node_cls: type[T] = SchemaNode) -> T | None:
        """
        Resolve a pointer (or a same-document $ref value).

        Args:
            pointer: e.g. "#/definitions/Widget" or "#/properties/items/0"
            node_cls: View class to wrap the target in

        Returns:
            The target view, or None when any segment is missing or the
            pointer refers to another document
        """
        return resolve(self.document, pointer, node_cls)

    def parent_of(self, node: JsonNode, depth: int = 1) -> SchemaNode | None:
        """Resolve the schema `depth` pointer segments above node."""
        segments = split_pointer(node.pointer)
        if len(segments) <= depth:
            return None
        return self.resolve(pointer_from_segments(segments[:-depth]))

    def is_required(self, node: JsonNode | None) -> bool:
        """
        Whether a property schema is listed in its owner's `required` array.

        Only nodes reached through `.../properties/<key>` can be required;
        the owning object two segments up is looked up by pointer.
        """
        if node is None:
            return False

        segments = split_pointer(node.pointer)
        if len(segments) < 3 or segments[-2] != "properties":
            return False

        owner = self.parent_of(node, depth=2)
        required = owner.required if owner is not None else None
        if not required:
            return False

        key = segments[-1]
        return any(name.is_literal and name.value == key for name in required)
