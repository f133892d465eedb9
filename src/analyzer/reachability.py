"""
Liveness of top-level bindings after an export removal request.

A removal request retracts export entries. The bindings those entries exposed
are the *removed roots*; everything reachable from what the removed roots
read is *infected*. Live bindings are then the closure over the reference
graph from the surviving, uninfected exports plus the references of
side-effecting statements.
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from typing import FrozenSet, Iterable, List, Set

from .scope_tracker import ReferenceGraph
from .symbols import SymbolTable

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class Reachability:
    """Outcome of a liveness sweep."""

    live: FrozenSet[str]
    removed_roots: FrozenSet[str]
    infected: FrozenSet[str]
    surviving_exports: FrozenSet[str]
    ignored: List[str]

    def is_live(self, name: str) -> bool:
        return name in self.live


def closure(graph: ReferenceGraph, seeds: Iterable[str]) -> Set[str]:
    """All bindings reachable from `seeds`, the seeds included."""
    visited: Set[str] = set()
    queue = deque(seeds)
    while queue:
        name = queue.popleft()
        if name in visited:
            continue
        visited.add(name)
        for successor in graph.successors(name):
            if successor not in visited:
                queue.append(successor)
    return visited


def compute_reachability(
    graph: ReferenceGraph,
    symbols: SymbolTable,
    removals: Iterable[str],
    *,
    conservative: bool = False,
) -> Reachability:
    """
    Compute the live bindings once `removals` are no longer exported.

    Args:
        graph: Reference graph of the module.
        symbols: Symbol table of the module, before the removal.
        removals: Exported names to retract; unknown names are ignored.
        conservative: When True, only bindings infected by the removed exports
            may die; unrelated unexported declarations are kept.

    Returns:
        Reachability with the live set and the bookkeeping behind it.
    """
    remaining, removed, ignored = symbols.retract_exports(removals)
    known = set(symbols.bindings)

    removed_roots = {
        entry.local for entry in removed if entry.local is not None and entry.local in known
    }
    infected: Set[str] = set()
    if removed_roots:
        successors: Set[str] = set()
        for name in removed_roots:
            successors |= graph.successors(name)
        infected = closure(graph, successors) - removed_roots

    seeds: Set[str] = {name for name in remaining.local_exports() if name not in infected}
    seeds |= graph.roots
    if conservative:
        seeds |= known - removed_roots - infected

    live = closure(graph, seeds) & known
    log.debug(
        "removed roots %s, infected %s, %d of %d bindings live",
        sorted(removed_roots),
        sorted(infected),
        len(live),
        len(known),
    )
    return Reachability(
        live=frozenset(live),
        removed_roots=frozenset(removed_roots),
        infected=frozenset(infected),
        surviving_exports=frozenset(remaining.exports),
        ignored=ignored,
    )


__all__ = ["Reachability", "closure", "compute_reachability"]
