"""Symbol, reference and liveness analysis for ES modules."""

from .reachability import Reachability, closure, compute_reachability
from .scope_tracker import ReferenceGraph, Scope, ScopeType, build_reference_graph
from .symbols import (
    DEFAULT_EXPORT,
    Binding,
    BindingKind,
    ExportEntry,
    SourcePosition,
    SymbolTable,
    build_symbol_table,
)

__all__ = [
    "DEFAULT_EXPORT",
    "Binding",
    "BindingKind",
    "ExportEntry",
    "Reachability",
    "ReferenceGraph",
    "Scope",
    "ScopeType",
    "SourcePosition",
    "SymbolTable",
    "build_reference_graph",
    "build_symbol_table",
    "closure",
    "compute_reachability",
]
