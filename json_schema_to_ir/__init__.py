"""JSON Schema to IR

A Python package for converting JSON Schema documents into a normalized,
language-agnostic intermediate representation of Types, Enums, Unions,
Properties and ValidationRules, with source positions for diagnostics.
"""

__version__ = "0.1.0"

from .pipeline import (
    JsonSyntaxError,
    ParserConfig,
    ParseResult,
    PipelineParser,
    SchemaParseError,
    UnsupportedFeatureError,
    parse_schema,
)

__all__ = [
    "PipelineParser",
    "parse_schema",
    "ParserConfig",
    "ParseResult",
    "JsonSyntaxError",
    "SchemaParseError",
    "UnsupportedFeatureError",
]
