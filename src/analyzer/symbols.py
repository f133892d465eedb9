"""
Top-level symbol table for ES modules.

One pass over the module body records every top-level binding (variables,
functions, classes, import specifiers and the synthetic `default`) and every
export entry, i.e. which local binding each exported name exposes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Set, Tuple

from parser import Module, Statement, export_name, pattern_identifiers

DEFAULT_EXPORT = "default"


class BindingKind(str, Enum):
    VAR = "var"
    LET = "let"
    CONST = "const"
    FUNCTION = "function"
    CLASS = "class"
    IMPORT = "import"
    DEFAULT = "default"


@dataclass(frozen=True)
class SourcePosition:
    line: Optional[int]
    column: Optional[int]


@dataclass(frozen=True)
class Binding:
    """A top-level name and the statement that introduces it."""

    name: str
    kind: BindingKind
    statement: int
    loc: SourcePosition

    @property
    def is_import(self) -> bool:
        return self.kind == BindingKind.IMPORT


@dataclass(frozen=True)
class ExportEntry:
    """An exported name; `local` is None for re-exports from another module."""

    exported: str
    local: Optional[str]
    statement: int


@dataclass
class SymbolTable:
    bindings: Dict[str, Binding] = field(default_factory=dict)
    exports: Dict[str, ExportEntry] = field(default_factory=dict)

    def add_binding(self, binding: Binding) -> None:
        # `var` redeclarations keep the first declaring statement.
        self.bindings.setdefault(binding.name, binding)

    def add_export(self, entry: ExportEntry) -> None:
        self.exports[entry.exported] = entry

    def retract_exports(self, names: Iterable[str]) -> Tuple["SymbolTable", List[ExportEntry], List[str]]:
        """
        Split the export mapping by a removal request.

        Returns the table without the removed entries, the removed entries,
        and the requested names that were not exported at all.
        """
        requested = list(dict.fromkeys(names))
        removed: List[ExportEntry] = []
        ignored: List[str] = []
        for name in requested:
            entry = self.exports.get(name)
            if entry is None:
                ignored.append(name)
            else:
                removed.append(entry)
        removed_names = {entry.exported for entry in removed}
        surviving = {
            name: entry for name, entry in self.exports.items() if name not in removed_names
        }
        return SymbolTable(bindings=dict(self.bindings), exports=surviving), removed, ignored

    def local_exports(self) -> Set[str]:
        """Local binding names exposed by at least one export entry."""
        return {
            entry.local
            for entry in self.exports.values()
            if entry.local is not None and entry.local in self.bindings
        }


class _SymbolTableBuilder:
    def __init__(self) -> None:
        self._table = SymbolTable()

    def build(self, module: Module) -> SymbolTable:
        for statement in module.statements:
            handler = getattr(self, f"_visit_{statement.kind.name}", None)
            if handler:
                handler(statement)
        return self._table

    # ------------------------------------------------------------------ helpers

    @staticmethod
    def _position(node: Dict[str, Any]) -> SourcePosition:
        loc = node.get("loc") or {}
        start = loc.get("start") or {}
        return SourcePosition(line=start.get("line"), column=start.get("column"))

    def _bind(self, name: str, kind: BindingKind, statement: Statement, node: Dict[str, Any]) -> None:
        self._table.add_binding(
            Binding(name=name, kind=kind, statement=statement.index, loc=self._position(node))
        )

    def _register_declaration(self, declaration: Dict[str, Any], statement: Statement) -> List[str]:
        names: List[str] = []
        declaration_type = declaration.get("type")
        if declaration_type == "VariableDeclaration":
            kind = BindingKind(declaration.get("kind", "var"))
            for declarator in declaration.get("declarations", []):
                for name in pattern_identifiers(declarator.get("id")):
                    self._bind(name, kind, statement, declarator)
                    names.append(name)
            return names
        identifier = declaration.get("id")
        if isinstance(identifier, dict) and identifier.get("type") == "Identifier":
            kind = BindingKind.CLASS if declaration_type == "ClassDeclaration" else BindingKind.FUNCTION
            self._bind(identifier.get("name"), kind, statement, identifier)
            names.append(identifier.get("name"))
        return names

    # ----------------------------------------------------------------- visitors

    def _visit_VARIABLE(self, statement: Statement) -> None:
        self._register_declaration(statement.node, statement)

    _visit_FUNCTION = _visit_VARIABLE
    _visit_CLASS = _visit_VARIABLE

    def _visit_IMPORT(self, statement: Statement) -> None:
        for specifier in statement.node.get("specifiers", []):
            local = specifier.get("local") or {}
            self._bind(local.get("name"), BindingKind.IMPORT, statement, specifier)

    def _visit_EXPORT_DECLARATION(self, statement: Statement) -> None:
        for name in self._register_declaration(statement.declaration, statement):
            self._table.add_export(ExportEntry(exported=name, local=name, statement=statement.index))

    def _visit_EXPORT_DEFAULT(self, statement: Statement) -> None:
        declaration = statement.declaration or {}
        names: List[str] = []
        if declaration.get("type") in ("FunctionDeclaration", "ClassDeclaration"):
            names = self._register_declaration(declaration, statement)
        if names:
            local = names[0]
        else:
            local = DEFAULT_EXPORT
            self._bind(DEFAULT_EXPORT, BindingKind.DEFAULT, statement, statement.node)
        self._table.add_export(
            ExportEntry(exported=DEFAULT_EXPORT, local=local, statement=statement.index)
        )

    def _visit_EXPORT_NAMED(self, statement: Statement) -> None:
        reexport = statement.node.get("source") is not None
        for specifier in statement.node.get("specifiers", []):
            exported = export_name(specifier.get("exported")) or export_name(specifier.get("local"))
            local = None if reexport else export_name(specifier.get("local"))
            self._table.add_export(
                ExportEntry(exported=exported, local=local, statement=statement.index)
            )


def build_symbol_table(module: Module) -> SymbolTable:
    """
    Collect top-level bindings and export entries of a parsed module.

    Args:
        module: Result of `parse_module`.

    Returns:
        SymbolTable with bindings keyed by name and exports keyed by exported name.
    """
    return _SymbolTableBuilder().build(module)


__all__ = [
    "DEFAULT_EXPORT",
    "Binding",
    "BindingKind",
    "ExportEntry",
    "SourcePosition",
    "SymbolTable",
    "build_symbol_table",
]
