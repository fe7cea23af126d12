"""
Text report of a ParseResult.

Renders the registries and violations with a Jinja2 template, resolving
encoded ranges back to `path:line:column` positions.
"""

from __future__ import annotations

from pathlib import Path

import jinja2

from .analyzer import MemberValue, ParseResult
from .json_ast import decode_range


class ReportRenderer:
    """Renders human-readable summaries of parse results."""

    TEMPLATE_NAME = "report.txt.jinja2"

    def __init__(self):
        self._setup_templates()

    def _setup_templates(self) -> None:
        """Set up Jinja2 templates."""
        template_dir = Path(__file__).parent.parent / "templates"
        self.jinja_env = jinja2.Environment(
            loader=jinja2.FileSystemLoader(str(template_dir)),
            lstrip_blocks=True,
            trim_blocks=True,
            keep_trailing_newline=True,
        )
        self.jinja_env.filters["position"] = self._position
        self.jinja_env.filters["shape"] = self._shape
        self.template = self.jinja_env.get_template(self.TEMPLATE_NAME)

    @staticmethod
    def _position(loc: str | None, source_paths: list[str]) -> str:
        """Format an encoded range as path:line:column."""
        loc_range, source_index = decode_range(loc)
        path = source_paths[source_index] if source_index < len(source_paths) else ""
        return f"{path}:{loc_range.start.line}:{loc_range.start.column}"

    @staticmethod
    def _shape(value: MemberValue) -> str:
        """Format a value shape, e.g. "string[]?" for an optional string array."""
        # A registered name for complex values, a Primitive for inline ones
        text = value.type_name.value
        if value.is_array:
            text += "[]"
        if value.is_optional:
            text += "?"
        return text

    def render(self, result: ParseResult) -> str:
        """
        Render a parse result.

        Args:
            result: The result to summarize

        Returns:
            The report text
        """
        return self.template.render(service=result.service, violations=result.violations)
