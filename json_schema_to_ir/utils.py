"""
Utility functions for converting schema literals to IR literals.
"""

from __future__ import annotations

import re

from .pipeline.analyzer.ir_nodes import ConstantLiteral, StringLiteral
from .pipeline.schema_ast import JsonLiteral, Literal

# Paragraphs are separated by one or more blank lines
_PARAGRAPH_BREAK = re.compile(r"\n\s*\n")


def to_string_literal(node: Literal | JsonLiteral | None) -> StringLiteral | None:
    """Convert a literal (or a view of one) to a StringLiteral."""
    if node is None:
        return None
    if isinstance(node, JsonLiteral):
        node = node.as_literal
    return StringLiteral(value=str(node.value), loc=node.loc)


def split_paragraphs(text: str) -> list[str]:
    """Split text into paragraphs on blank lines.

    Examples:
        "One.\\n\\nTwo." -> ["One.", "Two."]
        "Single line" -> ["Single line"]
    """
    return [p.strip() for p in _PARAGRAPH_BREAK.split(text) if p.strip()]


def to_description(node: JsonLiteral | None) -> list[StringLiteral] | None:
    """
    Convert a `description` keyword to a list of paragraphs.

    Args:
        node: The description literal, if present

    Returns:
        One StringLiteral per paragraph, all sharing the keyword's range,
        or None when there is no usable description
    """
    if node is None or not node.is_literal or not isinstance(node.value, str):
        return None

    literal = node.as_literal
    paragraphs = split_paragraphs(literal.value)
    if not paragraphs:
        return None
    return [StringLiteral(value=p, loc=literal.loc) for p in paragraphs]


def to_constant(node: JsonLiteral | None) -> ConstantLiteral | None:
    """
    Convert a `const` keyword to a ConstantLiteral.

    Null and non-scalar constants have no IR representation and yield None.
    """
    if node is None or not node.is_literal:
        return None

    literal = node.as_literal
    value = literal.value
    if isinstance(value, bool):
        return ConstantLiteral(kind="BooleanLiteral", value=value, loc=literal.loc)
    if isinstance(value, (int, float)):
        return ConstantLiteral(kind="NumberLiteral", value=value, loc=literal.loc)
    if isinstance(value, str):
        return ConstantLiteral(kind="StringLiteral", value=value, loc=literal.loc)
    return None
