"""
Name resolver for inferring entity names from schema positions.

Names come from, in order: an explicit `title`, the definition key the
schema is registered under, or a path-derived name built by joining the
owner's name and the property key with an underscore.
"""

from __future__ import annotations

from ...utils import to_string_literal
from ..json_ast import AstNode
from ..schema_ast import (
    DEFINITION_KEYWORDS,
    ROOT_POINTER,
    AbstractSchemaNode,
    get_name,
    pointer_from_segments,
    split_pointer,
)
from .ir_nodes import StringLiteral
from .reference_resolver import ReferenceResolver


class NameResolver:
    """Infers stable names for schemas that register Types, Enums or Unions."""

    def __init__(self, document: AstNode, references: ReferenceResolver, root_name: str = ""):
        """
        Initialize the resolver.

        Args:
            document: Root node of the parsed schema document
            references: Resolver used to look up owning schemas
            root_name: Name for an untitled document root
        """
        self.document = document
        self.references = references
        self.root_name = root_name

    def infer_type_name(self, schema: AbstractSchemaNode | None) -> StringLiteral | None:
        """
        Infer the name of a schema.

        Examples:
            {"title": "Widget"}                       -> "Widget"
            #/definitions/gizmo                       -> "gizmo"
            #/definitions/gizmo/properties/part       -> "gizmo_part"
            #/definitions/gizmo/properties/tags/items -> "gizmo_tags_items"
            #/definitions/shape/oneOf/0               -> "shape_0"

        Returns:
            The name with the range of the literal it came from, or None for
            a schema that is not part of the document
        """
        if schema is None:
            return None

        title = schema.title
        if title is not None and title.is_literal and isinstance(title.value, str) and title.value:
            return to_string_literal(title)

        return self._name_from_pointer(schema.pointer)

    def _name_from_pointer(self, pointer: str) -> StringLiteral | None:
        segments = split_pointer(pointer)

        if len(segments) == 1:
            if segments[0] != ROOT_POINTER:
                return None
            return StringLiteral(value=self.root_name, loc=None)

        if len(segments) >= 3 and segments[-2] in DEFINITION_KEYWORDS:
            return to_string_literal(get_name(self.document, pointer))

        last = segments[-1]
        if len(segments) >= 3 and segments[-2] == "properties":
            parent = segments[:-2]
        elif last == "items":
            parent = segments[:-1]
        else:
            # oneOf/<i>, allOf/<i> and any other keyword/key pair
            parent = segments[:-2]

        parent_name = None
        if parent:
            parent_name = self.infer_type_name(self.references.resolve(pointer_from_segments(parent)))

        key = get_name(self.document, pointer)
        loc = key.loc if key is not None and key.value == last else None
        value = "_".join(part for part in (parent_name.value if parent_name else "", last) if part)
        return StringLiteral(value=value, loc=loc)
