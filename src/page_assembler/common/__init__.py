"""Common utilities shared across the assembler."""

from __future__ import annotations

from .ranges import parse_range, require_range, ALL_KEYWORD
from .path_utils import output_filename, unique_path

__all__ = [
    # ranges
    "parse_range",
    "require_range",
    "ALL_KEYWORD",
    # paths
    "output_filename",
    "unique_path",
]
