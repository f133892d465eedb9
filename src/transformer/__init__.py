"""Pruning of dead top-level statements from ES modules."""

from .pruner import PrunedModule, PrunedStatement, Pruner, prune_module

__all__ = [
    "PrunedModule",
    "PrunedStatement",
    "Pruner",
    "prune_module",
]
