"""
Front-end integration utilities stitching together parsing and analysis.

The `run_frontend` function accepts raw module source, invokes the parser to
obtain the top-level statements, then builds the symbol table and the
reference graph over them. Downstream phases consume the aggregated result to
compute liveness and prune without reimplementing these steps.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List

from analyzer import ReferenceGraph, SymbolTable, build_reference_graph, build_symbol_table
from parser import Module, parse_module


@dataclass(frozen=True)
class FrontEndResult:
    """Combined output from the parsing and analysis pipeline."""

    module: Module
    symbols: SymbolTable
    graph: ReferenceGraph

    @property
    def diagnostics(self) -> List[str]:
        """Export entries whose local name is never declared."""
        diagnostics: List[str] = []
        for entry in self.symbols.exports.values():
            if entry.local is not None and entry.local not in self.symbols.bindings:
                diagnostics.append(
                    f"export '{entry.exported}' refers to undeclared name '{entry.local}'"
                )
        return diagnostics


def run_frontend(source: str, *, source_name: str = "<input>") -> FrontEndResult:
    """
    Parse module source and build its symbol table and reference graph.

    Args:
        source: Raw module source text.
        source_name: Identifier used in diagnostics, e.g. file path.

    Returns:
        FrontEndResult with the parsed module and its analysis.

    Raises:
        ParseError: If the source is not a valid ES module.
    """
    module = parse_module(source, source_name=source_name)
    symbols = build_symbol_table(module)
    graph = build_reference_graph(module, symbols)
    return FrontEndResult(module=module, symbols=symbols, graph=graph)


__all__ = ["FrontEndResult", "run_frontend"]
