"""
Remove named exports from an ES module and tree-shake what they leave behind.

`remove_exports` is the plain text-in/text-out entry point. `shake_module`
runs the same pipeline (parse, symbol table, reference graph, reachability,
prune, emit) and also reports what was removed and what was ignored.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional

from analyzer import compute_reachability
from emitter import EmitOptions, emit_module
from frontend import run_frontend
from transformer import prune_module

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class ShakeResult:
    source: str
    removed: List[str]
    ignored: List[str]
    diagnostics: List[str]


def shake_module(
    source: str,
    names: Iterable[str],
    *,
    source_name: str = "<input>",
    conservative: bool = False,
    emit_options: Optional[EmitOptions] = None,
) -> ShakeResult:
    """
    Remove the exports `names` from `source` and prune unreachable declarations.

    Args:
        source: Module source text.
        names: Exported names to remove; may include `default`.
        source_name: Label used in diagnostics and parse errors.
        conservative: Only prune declarations the removed exports were using.
        emit_options: Printer options (trailing newline, separator).

    Returns:
        ShakeResult with the new source and a report of the removal.

    Raises:
        ParseError: If the source is not a valid ES module.
    """
    frontend = run_frontend(source, source_name=source_name)
    reachability = compute_reachability(
        frontend.graph, frontend.symbols, names, conservative=conservative
    )
    pruned = prune_module(frontend.module, frontend.symbols, reachability)
    emitted = emit_module(pruned, emit_options)

    diagnostics = list(frontend.diagnostics)
    for name in reachability.ignored:
        diagnostics.append(f"'{name}' is not exported; nothing to remove")
    for name in sorted(reachability.infected & frontend.symbols.local_exports()):
        if name not in reachability.live:
            diagnostics.append(f"export '{name}' dropped: only used by removed exports")
    if pruned.removed:
        diagnostics.append(f"removed declarations: {', '.join(pruned.removed)}")

    log.debug(
        "%s: kept %d of %d statements",
        source_name,
        emitted.statement_count,
        len(frontend.module.statements),
    )
    return ShakeResult(
        source=emitted.source,
        removed=list(pruned.removed),
        ignored=list(reachability.ignored),
        diagnostics=diagnostics,
    )


def remove_exports(source: str, names: Iterable[str]) -> str:
    """Return `source` without the exports `names` and the code only they used."""
    return shake_module(source, names).source


__all__ = ["ShakeResult", "remove_exports", "shake_module"]
