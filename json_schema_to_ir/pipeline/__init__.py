"""
Pipeline - JSON Schema to IR converter.

This module provides a multi-phase architecture for converting JSON
schemas into a language-agnostic intermediate representation:

1. Phase 1 (Parser): Parse JSON text into a positioned syntax tree
2. Phase 2 (Schema AST): Wrap the tree in JSON Schema keyword views
3. Phase 3 (Analyzer): Resolve references, infer names and build IR
"""

from __future__ import annotations

from .analyzer import (
    ParseResult,
    SchemaParseError,
    Service,
    Severity,
    UnsupportedFeatureError,
    Violation,
)
from .config import ParserConfig
from .generator import PipelineParser, parse_schema
from .json_ast import JsonSyntaxError, decode_range, encode_range
from .report import ReportRenderer

__all__ = [
    "PipelineParser",
    "parse_schema",
    "ParserConfig",
    "ReportRenderer",
    "ParseResult",
    "Service",
    "Severity",
    "Violation",
    "JsonSyntaxError",
    "SchemaParseError",
    "UnsupportedFeatureError",
    "encode_range",
    "decode_range",
]
