"""
Top-level statement model for parsed ES modules.

Expressions and nested statements stay as esprima's JSON-compatible dicts; only
the module body is lifted into `Statement` values tagged with a closed
`StatementKind`, which is what every later pass dispatches on.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple


class StatementKind(str, Enum):
    VARIABLE = "variable"
    FUNCTION = "function"
    CLASS = "class"
    IMPORT = "import"
    EXPORT_DECLARATION = "export_declaration"
    EXPORT_DEFAULT = "export_default"
    EXPORT_NAMED = "export_named"
    EXPORT_ALL = "export_all"
    OTHER = "other"


@dataclass(frozen=True)
class SourceSpan:
    start: int
    end: int
    line: Optional[int]
    column: Optional[int]


@dataclass(frozen=True)
class Statement:
    """A single top-level statement of a module."""

    index: int
    kind: StatementKind
    node: Dict[str, Any]
    span: SourceSpan

    @property
    def declaration(self) -> Optional[Dict[str, Any]]:
        """The wrapped declaration of an export statement, or the node itself."""
        if self.kind in (StatementKind.EXPORT_DECLARATION, StatementKind.EXPORT_DEFAULT):
            return self.node.get("declaration")
        if self.kind in (StatementKind.VARIABLE, StatementKind.FUNCTION, StatementKind.CLASS):
            return self.node
        return None


@dataclass(frozen=True)
class Module:
    """Source text plus its ordered top-level statements."""

    source: str
    statements: Tuple[Statement, ...]
    source_name: str = "<input>"

    def text(self, node: Dict[str, Any]) -> str:
        """Return the exact source slice covered by `node`."""
        start, end = node["range"]
        return self.source[start:end]


def classify_statement(node: Dict[str, Any]) -> StatementKind:
    node_type = node.get("type")
    if node_type == "VariableDeclaration":
        return StatementKind.VARIABLE
    if node_type == "FunctionDeclaration":
        return StatementKind.FUNCTION
    if node_type == "ClassDeclaration":
        return StatementKind.CLASS
    if node_type == "ImportDeclaration":
        return StatementKind.IMPORT
    if node_type == "ExportNamedDeclaration":
        if node.get("declaration") is not None:
            return StatementKind.EXPORT_DECLARATION
        return StatementKind.EXPORT_NAMED
    if node_type == "ExportDefaultDeclaration":
        return StatementKind.EXPORT_DEFAULT
    if node_type == "ExportAllDeclaration":
        return StatementKind.EXPORT_ALL
    return StatementKind.OTHER


def pattern_identifiers(pattern: Optional[Dict[str, Any]]) -> List[str]:
    """Names bound by a binding pattern, in source order."""
    if not isinstance(pattern, dict):
        return []
    pattern_type = pattern.get("type")
    if pattern_type == "Identifier":
        return [pattern.get("name")]
    if pattern_type == "ArrayPattern":
        names: List[str] = []
        for element in pattern.get("elements") or []:
            names.extend(pattern_identifiers(element))
        return names
    if pattern_type == "ObjectPattern":
        names = []
        for prop in pattern.get("properties") or []:
            names.extend(pattern_identifiers(prop))
        return names
    if pattern_type == "Property":
        return pattern_identifiers(pattern.get("value"))
    if pattern_type == "AssignmentPattern":
        return pattern_identifiers(pattern.get("left"))
    if pattern_type == "RestElement":
        return pattern_identifiers(pattern.get("argument"))
    return []


def declared_names(declaration: Optional[Dict[str, Any]]) -> List[str]:
    """Names a variable, function or class declaration introduces."""
    if not isinstance(declaration, dict):
        return []
    if declaration.get("type") == "VariableDeclaration":
        names: List[str] = []
        for declarator in declaration.get("declarations", []):
            names.extend(pattern_identifiers(declarator.get("id")))
        return names
    identifier = declaration.get("id")
    if isinstance(identifier, dict) and identifier.get("type") == "Identifier":
        return [identifier.get("name")]
    return []


def export_name(node: Optional[Dict[str, Any]]) -> Optional[str]:
    """Name carried by an export/import specifier part (identifier or string)."""
    if not isinstance(node, dict):
        return None
    if node.get("type") == "Identifier":
        return node.get("name")
    if node.get("type") == "Literal":
        return node.get("value")
    return None


__all__ = [
    "Module",
    "SourceSpan",
    "Statement",
    "StatementKind",
    "classify_statement",
    "declared_names",
    "export_name",
    "pattern_identifiers",
]
