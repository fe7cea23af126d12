"""
Pipeline parser that orchestrates the schema-to-IR phases.

1. Parse the source text into a positioned JSON tree
2. Walk the tree with the analyzer to build the registries
3. Assemble the Service and the violations into a ParseResult
"""

from __future__ import annotations

import logging

from .analyzer import ParseResult, SchemaAnalyzer, Service
from .config import ParserConfig
from .json_ast import encode_range, parse_json

logger = logging.getLogger(__name__)


class PipelineParser:
    """Converts one JSON Schema document into IR."""

    def __init__(self, source_content: str, source_path: str = "", config: ParserConfig | None = None):
        """
        Initialize the parser.

        Args:
            source_content: JSON Schema text
            source_path: Path of the document, reported on violations and
                used to name an untitled root
            config: Parser configuration
        """
        self.source_content = source_content
        self.source_path = source_path
        self.config = config or ParserConfig()

    def parse(self) -> ParseResult:
        """
        Run the pipeline.

        Returns:
            The Service and the violations found while building it

        Raises:
            JsonSyntaxError: If the source is not valid JSON
            UnsupportedFeatureError: On tuple-style `items` in strict mode
            SchemaParseError: On a $ref cycle in strict mode
        """
        logger.debug("Parsing %s", self.source_path or "<string>")
        document = parse_json(self.source_content)

        analyzer = SchemaAnalyzer(document, self.source_path, self.config)
        ctx = analyzer.analyze()

        service = Service(
            title=analyzer.title(),
            major_version=self.config.major_version,
            source_paths=[self.source_path],
            loc=encode_range(0, document.loc),
            types=list(ctx.types.values()),
            enums=list(ctx.enums.values()),
            unions=list(ctx.unions.values()),
        )
        return ParseResult(service=service, violations=ctx.violations)


def parse_schema(source_content: str, source_path: str = "", config: ParserConfig | None = None) -> ParseResult:
    """Convert JSON Schema text into IR. Shorthand for PipelineParser(...).parse()."""
    return PipelineParser(source_content, source_path, config).parse()
