"""
Configuration for the schema-to-IR pipeline.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path


@dataclass
class ParserConfig:
    """Configuration options for IR building."""

    # Name of an untitled root schema (empty = source file stem)
    root_name: str = ""

    # Major version reported on the Service
    major_version: int = 0

    # Abort the parse on tuple-style `items`; otherwise report and degrade
    strict_tuple_items: bool = True

    # Abort the parse on a $ref cycle; otherwise report and degrade
    strict_reference_cycles: bool = False

    # Report a violation when two schema locations claim the same name
    report_duplicate_names: bool = True

    # Report info violations for anyOf, type arrays and other placeholders
    report_unsupported_features: bool = True

    # Definition keys skipped by the eager definitions visit
    ignore_definitions: list[str] = field(default_factory=list)

    @staticmethod
    def from_dict(d: dict) -> ParserConfig:
        """Create a config from a dictionary. Unknown keys are ignored."""
        config = ParserConfig()
        for k, v in d.items():
            if hasattr(config, k):
                setattr(config, k, v)
        return config

    @staticmethod
    def from_file(path: str | Path) -> ParserConfig:
        """Load a config from a JSON file."""
        with open(path) as f:
            return ParserConfig.from_dict(json.load(f))

    def to_dict(self) -> dict:
        """Convert config to a dictionary."""
        return {
            "root_name": self.root_name,
            "major_version": self.major_version,
            "strict_tuple_items": self.strict_tuple_items,
            "strict_reference_cycles": self.strict_reference_cycles,
            "report_duplicate_names": self.report_duplicate_names,
            "report_unsupported_features": self.report_unsupported_features,
            "ignore_definitions": self.ignore_definitions,
        }
