"""
Source positions and ranges.

Every node of the parsed document carries a Range. Ranges are exposed to
consumers of the IR as opaque strings produced by encode_range() and turned
back into positions with decode_range().
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Position:
    """A position in the source text."""

    line: int = 1  # 1-based
    column: int = 1  # 1-based
    offset: int = 0  # 0-based character offset


@dataclass(frozen=True)
class Range:
    """A half-open span of source text."""

    start: Position = Position()
    end: Position = Position()


def encode_range(source_index: int, loc: Range | None) -> str | None:
    """
    Encode a range as an opaque string.

    Args:
        source_index: Index of the source document in Service.source_paths
        loc: The range to encode

    Returns:
        "startLine;startColumn;endLine;endColumn;startOffset;endOffset;sourceIndex",
        or None when there is no range
    """
    if loc is None:
        return None
    return ";".join(
        str(n)
        for n in (
            loc.start.line,
            loc.start.column,
            loc.end.line,
            loc.end.column,
            loc.start.offset,
            loc.end.offset,
            source_index,
        )
    )


def decode_range(text: str | None) -> tuple[Range, int]:
    """
    Decode a string produced by encode_range().

    Missing or malformed input decodes to an empty range at the start of
    the first source document.
    """
    if not text:
        return Range(), 0

    try:
        parts = [int(p) for p in text.split(";")]
    except ValueError:
        return Range(), 0

    if len(parts) != 7:
        return Range(), 0

    start_line, start_col, end_line, end_col, start_off, end_off, source_index = parts
    return (
        Range(
            start=Position(start_line, start_col, start_off),
            end=Position(end_line, end_col, end_off),
        ),
        source_index,
    )
