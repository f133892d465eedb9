from pathlib import Path

import pytest

from analyzer import closure, compute_reachability
from frontend import run_frontend
from parser import StatementKind
from shaker import remove_exports
from transformer import prune_module

CASES = Path(__file__).parent / "cases"


def _frontend(name: str):
    source_path = CASES / name
    return run_frontend(source_path.read_text(encoding="utf-8"), source_name=name)


def _prune(frontend, removals, **kwargs):
    reachability = compute_reachability(frontend.graph, frontend.symbols, removals, **kwargs)
    return reachability, prune_module(frontend.module, frontend.symbols, reachability)


def test_reachability_splits_removed_infected_and_live():
    frontend = _frontend("database.js")
    reachability, _ = _prune(frontend, ["foo"])

    assert reachability.removed_roots == {"foo"}
    assert reachability.infected == {"database", "USER"}
    assert reachability.live == {"default", "USER"}
    assert reachability.surviving_exports == {"default"}
    assert reachability.ignored == []


def test_reachability_terminates_on_cycles():
    frontend = _frontend("mutual_recursion.js")
    assert closure(frontend.graph, ["foo"]) == {"foo", "bar"}

    reachability, pruned = _prune(frontend, ["bar"])
    assert reachability.live == set()
    assert pruned.is_empty


def test_reachability_ignores_unknown_names():
    frontend = _frontend("database.js")
    reachability, pruned = _prune(frontend, ["missing", "missing"])

    assert reachability.ignored == ["missing"]
    assert reachability.removed_roots == set()
    assert len(pruned.statements) == len(frontend.module.statements)


def test_reachability_keeps_siblings_of_removed_rest():
    frontend = run_frontend("export const { foo, bar: baz, ...rest } = {};")
    reachability, pruned = _prune(frontend, ["rest"])

    assert reachability.removed_roots == {"rest"}
    assert reachability.infected == set()
    assert reachability.live == {"foo", "baz"}
    assert [statement.live_names for statement in pruned.statements] == [{"foo", "baz"}]


def test_reachability_conservative_keeps_unrelated_bindings():
    frontend = run_frontend("const unused = 1;\nexport const used = 2;\n")

    strict, _ = _prune(frontend, [])
    assert strict.live == {"used"}

    conservative, _ = _prune(frontend, [], conservative=True)
    assert conservative.live == {"unused", "used"}


def test_pruner_keeps_live_specifiers_only():
    frontend = _frontend("side_effects.js")
    _, pruned = _prune(frontend, ["stop"])

    kinds = [statement.kind for statement in pruned.statements]
    assert kinds == [
        StatementKind.IMPORT,
        StatementKind.IMPORT,
        StatementKind.VARIABLE,
        StatementKind.OTHER,
        StatementKind.EXPORT_DECLARATION,
    ]
    lib_import = pruned.statements[1]
    assert lib_import.live_names == {"setup"}
    assert not lib_import.intact
    assert pruned.statements[0].intact


def test_pruner_retracts_visibility_without_deleting():
    frontend = run_frontend("export const foo = 1;\nexport const bar = () => foo;\n")
    _, pruned = _prune(frontend, ["foo"])

    first, second = pruned.statements
    assert first.live_names == {"foo"}
    assert first.exported_names == set()
    assert not first.intact
    assert second.intact


def test_pruner_preserves_statement_order():
    frontend = _frontend("destructuring.js")
    _, pruned = _prune(frontend, ["head"])
    indexes = [statement.statement.index for statement in pruned.statements]
    assert indexes == sorted(indexes)
    assert indexes == [0, 1, 2]


PROPERTY_SOURCES = [
    "database.js",
    "side_effects.js",
    "destructuring.js",
    "scopes.js",
    "mutual_recursion.js",
]

REMOVAL_CHAINS = [
    (["foo"], ["foo", "default"]),
    (["stop"], ["stop", "retries"]),
    (["renamed"], ["renamed", "first", "tail"]),
    (["member"], ["member", "blocky", "Widget"]),
    (["bar"], ["bar", "foo"]),
]


@pytest.mark.parametrize("name, chain", zip(PROPERTY_SOURCES, REMOVAL_CHAINS))
def test_removal_is_idempotent(name, chain):
    source = (CASES / name).read_text(encoding="utf-8")
    for removals in chain:
        once = remove_exports(source, removals)
        assert remove_exports(once, removals) == once


@pytest.mark.parametrize("name, chain", zip(PROPERTY_SOURCES, REMOVAL_CHAINS))
def test_removal_shrinks_monotonically(name, chain):
    source = (CASES / name).read_text(encoding="utf-8")
    smaller, larger = chain
    kept_small = set(run_frontend(remove_exports(source, smaller)).symbols.bindings)
    kept_large = set(run_frontend(remove_exports(source, larger)).symbols.bindings)
    assert kept_large <= kept_small


@pytest.mark.parametrize("name, chain", zip(PROPERTY_SOURCES, REMOVAL_CHAINS))
def test_removal_output_is_closed(name, chain):
    source = (CASES / name).read_text(encoding="utf-8")
    for removals in chain:
        output = remove_exports(source, removals)
        # Everything that survived is reachable, so another sweep keeps it all.
        assert remove_exports(output, []) == output
