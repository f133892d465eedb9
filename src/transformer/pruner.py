"""
Prune a parsed module down to its live statements.

The pruner walks the top-level statements in order and decides, per
statement kind, whether the statement survives and which of its names,
declarators or specifiers survive with it. It never rewrites source text
itself: the resulting `PrunedModule` records the decisions and the emitter
renders them. Statements are kept in their original order.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, FrozenSet, List, Optional, Tuple

from analyzer import DEFAULT_EXPORT, Reachability, SymbolTable
from parser import Module, Statement, StatementKind, declared_names, export_name


@dataclass(frozen=True)
class PrunedStatement:
    """A surviving statement and the names that survive on it."""

    statement: Statement
    live_names: FrozenSet[str]
    exported_names: FrozenSet[str]
    intact: bool

    @property
    def kind(self) -> StatementKind:
        return self.statement.kind


@dataclass(frozen=True)
class PrunedModule:
    module: Module
    statements: Tuple[PrunedStatement, ...]
    removed: Tuple[str, ...]

    @property
    def is_empty(self) -> bool:
        return not self.statements


class Pruner:
    """Decides, statement by statement, what survives a removal."""

    def __init__(self, symbols: SymbolTable, reachability: Reachability):
        self.symbols = symbols
        self.reachability = reachability

    def _is_live(self, name: str) -> bool:
        return self.reachability.is_live(name)

    def _still_exported(self, name: str) -> bool:
        return name in self.reachability.surviving_exports

    # ------------------------------------------------------------------ helpers

    def prune_module(self, module: Module) -> PrunedModule:
        kept: List[PrunedStatement] = []
        for statement in module.statements:
            pruned = self._prune_statement(statement)
            if pruned is not None:
                kept.append(pruned)
        removed = tuple(
            name for name in self.symbols.bindings if not self._is_live(name)
        )
        return PrunedModule(module=module, statements=tuple(kept), removed=removed)

    def _prune_statement(self, statement: Statement) -> Optional[PrunedStatement]:
        handler = getattr(self, f"_prune_{statement.kind.name}")
        return handler(statement)

    def _keep(
        self,
        statement: Statement,
        live_names=(),
        exported_names=(),
        intact: bool = True,
    ) -> PrunedStatement:
        return PrunedStatement(
            statement=statement,
            live_names=frozenset(live_names),
            exported_names=frozenset(exported_names),
            intact=intact,
        )

    # -------------------------------------------------------------- statements

    def _prune_VARIABLE(self, statement: Statement) -> Optional[PrunedStatement]:
        names = declared_names(statement.node)
        live = [name for name in names if self._is_live(name)]
        if not live:
            return None
        return self._keep(statement, live_names=live, intact=len(live) == len(names))

    _prune_FUNCTION = _prune_VARIABLE
    _prune_CLASS = _prune_VARIABLE

    def _prune_IMPORT(self, statement: Statement) -> Optional[PrunedStatement]:
        specifiers = statement.node.get("specifiers") or []
        if not specifiers:
            # Side-effect-only import.
            return self._keep(statement)
        locals_ = [(specifier.get("local") or {}).get("name") for specifier in specifiers]
        live = [name for name in locals_ if self._is_live(name)]
        if not live:
            return None
        return self._keep(statement, live_names=live, intact=len(live) == len(locals_))

    def _prune_EXPORT_DECLARATION(self, statement: Statement) -> Optional[PrunedStatement]:
        names = declared_names(statement.declaration)
        live = [name for name in names if self._is_live(name)]
        if not live:
            return None
        exported = [name for name in live if self._still_exported(name)]
        intact = len(live) == len(names) and len(exported) == len(live)
        return self._keep(statement, live_names=live, exported_names=exported, intact=intact)

    def _prune_EXPORT_DEFAULT(self, statement: Statement) -> Optional[PrunedStatement]:
        entry = self.symbols.exports.get(DEFAULT_EXPORT)
        owner = entry.local if entry is not None else DEFAULT_EXPORT
        if not self._is_live(owner):
            return None
        if self._still_exported(DEFAULT_EXPORT):
            return self._keep(statement, live_names=[owner], exported_names=[DEFAULT_EXPORT])
        return self._keep(statement, live_names=[owner], intact=False)

    def _prune_EXPORT_NAMED(self, statement: Statement) -> Optional[PrunedStatement]:
        specifiers = statement.node.get("specifiers") or []
        if not specifiers:
            return self._keep(statement)
        reexport = statement.node.get("source") is not None
        exported: Dict[str, None] = {}
        for specifier in specifiers:
            name = export_name(specifier.get("exported")) or export_name(specifier.get("local"))
            if not self._still_exported(name):
                continue
            local = export_name(specifier.get("local"))
            if not reexport and local in self.symbols.bindings and not self._is_live(local):
                # Only reachable through removed exports; the declaration is gone.
                continue
            exported[name] = None
        if not exported:
            return None
        return self._keep(
            statement, exported_names=exported, intact=len(exported) == len(specifiers)
        )

    def _prune_EXPORT_ALL(self, statement: Statement) -> Optional[PrunedStatement]:
        return self._keep(statement)

    _prune_OTHER = _prune_EXPORT_ALL


def prune_module(module: Module, symbols: SymbolTable, reachability: Reachability) -> PrunedModule:
    """
    Drop every statement, declarator and specifier that is not live.

    Args:
        module: Parsed module.
        symbols: Symbol table of the module before the removal.
        reachability: Result of `compute_reachability` for the removal.

    Returns:
        PrunedModule listing the surviving statements in source order.
    """
    return Pruner(symbols, reachability).prune_module(module)


__all__ = ["PrunedModule", "PrunedStatement", "Pruner", "prune_module"]
