"""
ECMAScript module parsing built on top of the Python `esprima` port.

`parse_module` runs esprima in module mode with range/location metadata and
wraps the JSON-compatible AST into a `Module` of tagged top-level statements.
Parsing is strict: any syntax error esprima reports is raised as `ParseError`
so callers never see a partially parsed module.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

import esprima

from .nodes import Module, SourceSpan, Statement, classify_statement

# esprima 4 stops at ES2017; later syntax is reported as a syntax error.
SUPPORTED_SYNTAX = (
    "supported syntax is ES2017 modules; `export * as ns`, string export names, "
    "`?.` and `??` are not recognised"
)


class ParseError(ValueError):
    """
    Raised when esprima rejects the source.

    The message carries the location and a reminder of the grammar esprima
    accepts, since newer but valid syntax fails the same way broken code does.
    """

    def __init__(
        self,
        description: str,
        *,
        line: Optional[int] = None,
        column: Optional[int] = None,
        source_name: str = "<input>",
    ):
        loc = ""
        if line is not None and column is not None:
            loc = f" (line {line}, column {column})"
        elif line is not None:
            loc = f" (line {line})"
        super().__init__(f"{source_name}: {description}{loc} ({SUPPORTED_SYNTAX})")
        self.description = description
        self.line = line
        self.column = column
        self.source_name = source_name


def _source_span(node: Dict[str, Any]) -> SourceSpan:
    start, end = node["range"]
    loc = node.get("loc") or {}
    loc_start = loc.get("start") or {}
    return SourceSpan(
        start=start,
        end=end,
        line=loc_start.get("line"),
        column=loc_start.get("column"),
    )


def parse_module(source: str, *, source_name: str = "<input>") -> Module:
    """
    Parse ECMAScript module source text into a `Module`.

    Args:
        source: Raw module source code.
        source_name: Label used in error messages (defaults to `<input>`).

    Returns:
        Module holding the source text and its top-level statements.

    Raises:
        ParseError: If esprima rejects the source.
    """
    try:
        program = esprima.parseModule(source, range=True, loc=True)
    except esprima.Error as exc:
        description = getattr(exc, "description", None) or str(exc)
        raise ParseError(
            description,
            line=getattr(exc, "lineNumber", None),
            column=getattr(exc, "column", None),
            source_name=source_name,
        ) from exc

    raw_ast = program.toDict() if hasattr(program, "toDict") else program
    statements = []
    for index, node in enumerate(raw_ast.get("body", [])):
        statements.append(
            Statement(
                index=index,
                kind=classify_statement(node),
                node=node,
                span=_source_span(node),
            )
        )
    return Module(source=source, statements=tuple(statements), source_name=source_name)


__all__ = ["SUPPORTED_SYNTAX", "ParseError", "parse_module"]
