"""Interfaces for parsing ECMAScript module source code."""

from .esm_parser import SUPPORTED_SYNTAX, ParseError, parse_module
from .nodes import (
    Module,
    SourceSpan,
    Statement,
    StatementKind,
    declared_names,
    export_name,
    pattern_identifiers,
)

__all__ = [
    "SUPPORTED_SYNTAX",
    "Module",
    "ParseError",
    "SourceSpan",
    "Statement",
    "StatementKind",
    "declared_names",
    "export_name",
    "parse_module",
    "pattern_identifiers",
]
