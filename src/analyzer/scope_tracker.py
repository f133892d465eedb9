"""
Scope-aware reference analysis for ES module ASTs.

The analyzer walks each top-level declaration of an esprima-compatible AST,
tracking the lexical scopes it opens (functions, blocks, loops, `catch`
clauses, class bodies) and the names those scopes declare. Every identifier
read that does not resolve to an inner scope and names a top-level binding is
recorded as a reference, producing a directed graph between top-level
bindings. Statements that are not declarations contribute their references as
graph roots.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, FrozenSet, Iterable, List, Optional, Set

from parser import Module, StatementKind, pattern_identifiers

from .symbols import DEFAULT_EXPORT, SymbolTable

_FUNCTION_TYPES = {"FunctionDeclaration", "FunctionExpression", "ArrowFunctionExpression"}
_CLASS_TYPES = {"ClassDeclaration", "ClassExpression"}


class ScopeType(str, Enum):
    MODULE = "module"
    FUNCTION = "function"
    BLOCK = "block"
    CATCH = "catch"
    CLASS = "class"


@dataclass
class Scope:
    """A lexical scope and the names declared directly in it."""

    scope_type: ScopeType
    node: Optional[Dict[str, Any]]
    parent: Optional["Scope"] = None
    names: Set[str] = field(default_factory=set)

    def shadows(self, name: str) -> bool:
        """True if `name` is declared in this scope or an enclosing inner scope."""
        scope: Optional[Scope] = self
        while scope is not None:
            if name in scope.names:
                return True
            scope = scope.parent
        return False


@dataclass(frozen=True)
class ReferenceGraph:
    """Edges between top-level bindings plus the bindings side effects read."""

    edges: Dict[str, FrozenSet[str]]
    roots: FrozenSet[str]

    def successors(self, name: str) -> FrozenSet[str]:
        return self.edges.get(name, frozenset())


def _hoisted_var_names(node: Any) -> Set[str]:
    """`var` names declared anywhere below `node` without crossing a function."""
    names: Set[str] = set()
    stack = [node]
    while stack:
        current = stack.pop()
        if isinstance(current, list):
            stack.extend(current)
            continue
        if not isinstance(current, dict):
            continue
        node_type = current.get("type")
        if node_type in _FUNCTION_TYPES or node_type in _CLASS_TYPES:
            continue
        if node_type == "VariableDeclaration" and current.get("kind") == "var":
            for declarator in current.get("declarations", []):
                names.update(pattern_identifiers(declarator.get("id")))
        for key, value in current.items():
            if key in {"loc", "range"}:
                continue
            if isinstance(value, (dict, list)):
                stack.append(value)
    return names


def _lexical_names(statements: Iterable[Any]) -> Set[str]:
    """Block-scoped names declared directly in a statement list."""
    names: Set[str] = set()
    for statement in statements:
        if not isinstance(statement, dict):
            continue
        node_type = statement.get("type")
        if node_type == "VariableDeclaration" and statement.get("kind") in ("let", "const"):
            for declarator in statement.get("declarations", []):
                names.update(pattern_identifiers(declarator.get("id")))
        elif node_type in ("FunctionDeclaration", "ClassDeclaration"):
            identifier = statement.get("id")
            if isinstance(identifier, dict):
                names.add(identifier.get("name"))
    return names


class _ReferenceCollector:
    def __init__(self, top_level: Set[str]) -> None:
        self._top_level = top_level
        self._found: Set[str] = set()

    def collect(self, node: Any) -> Set[str]:
        """Top-level names referenced anywhere inside `node`."""
        self._found = set()
        self._visit(node, Scope(ScopeType.MODULE, None))
        return self._found

    def collect_declarator(self, declarator: Dict[str, Any]) -> Set[str]:
        """References of a variable declarator: pattern defaults plus initializer."""
        self._found = set()
        scope = Scope(ScopeType.MODULE, None)
        self._visit_pattern(declarator.get("id"), scope)
        self._visit(declarator.get("init"), scope)
        return self._found

    # ------------------------------------------------------------------ helpers

    def _resolve(self, name: Optional[str], scope: Scope) -> None:
        if name is None or scope.shadows(name):
            return
        if name in self._top_level:
            self._found.add(name)

    def _visit(self, node: Any, scope: Scope) -> None:
        if node is None:
            return
        if isinstance(node, list):
            for element in node:
                self._visit(element, scope)
            return
        if not isinstance(node, dict):
            return

        handler = getattr(self, f"_visit_{node.get('type')}", None)
        if handler:
            handler(node, scope)
        else:
            self._generic_visit(node, scope)

    def _generic_visit(self, node: Dict[str, Any], scope: Scope) -> None:
        for key, value in node.items():
            if key in {"loc", "range"}:
                continue
            if isinstance(value, (dict, list)):
                self._visit(value, scope)

    def _visit_pattern(self, node: Any, scope: Scope) -> None:
        """Visit a binding pattern: only defaults and computed keys read names."""
        if not isinstance(node, dict):
            return
        node_type = node.get("type")
        if node_type == "Identifier":
            return
        if node_type == "AssignmentPattern":
            self._visit_pattern(node.get("left"), scope)
            self._visit(node.get("right"), scope)
        elif node_type == "ArrayPattern":
            for element in node.get("elements") or []:
                self._visit_pattern(element, scope)
        elif node_type == "ObjectPattern":
            for prop in node.get("properties") or []:
                if prop.get("type") == "Property":
                    if prop.get("computed"):
                        self._visit(prop.get("key"), scope)
                    self._visit_pattern(prop.get("value"), scope)
                else:
                    self._visit_pattern(prop, scope)
        elif node_type == "RestElement":
            self._visit_pattern(node.get("argument"), scope)
        else:
            self._visit(node, scope)

    def _visit_function(self, node: Dict[str, Any], scope: Scope, own_name: Optional[str]) -> None:
        function_scope = Scope(ScopeType.FUNCTION, node, parent=scope)
        if own_name:
            # Named function expressions bind the name within the inner scope.
            function_scope.names.add(own_name)
        params: List[Any] = node.get("params") or []
        for param in params:
            function_scope.names.update(pattern_identifiers(param))
        body = node.get("body")
        if isinstance(body, dict) and body.get("type") == "BlockStatement":
            statements = body.get("body", [])
            function_scope.names.update(_hoisted_var_names(statements))
            function_scope.names.update(_lexical_names(statements))
            for param in params:
                self._visit_pattern(param, function_scope)
            self._visit(statements, function_scope)
        else:
            for param in params:
                self._visit_pattern(param, function_scope)
            self._visit(body, function_scope)

    def _visit_class(self, node: Dict[str, Any], scope: Scope) -> None:
        self._visit(node.get("superClass"), scope)
        class_scope = Scope(ScopeType.CLASS, node, parent=scope)
        identifier = node.get("id")
        if isinstance(identifier, dict):
            class_scope.names.add(identifier.get("name"))
        self._visit(node.get("body"), class_scope)

    # ----------------------------------------------------------------- visitors

    def _visit_Identifier(self, node: Dict[str, Any], scope: Scope) -> None:
        self._resolve(node.get("name"), scope)

    def _visit_FunctionDeclaration(self, node: Dict[str, Any], scope: Scope) -> None:
        # The declared name lives in the enclosing scope, which hoisted it.
        self._visit_function(node, scope, own_name=None)

    def _visit_FunctionExpression(self, node: Dict[str, Any], scope: Scope) -> None:
        identifier = node.get("id")
        own_name = identifier.get("name") if isinstance(identifier, dict) else None
        self._visit_function(node, scope, own_name=own_name)

    def _visit_ArrowFunctionExpression(self, node: Dict[str, Any], scope: Scope) -> None:
        self._visit_function(node, scope, own_name=None)

    def _visit_ClassDeclaration(self, node: Dict[str, Any], scope: Scope) -> None:
        self._visit_class(node, scope)

    def _visit_ClassExpression(self, node: Dict[str, Any], scope: Scope) -> None:
        self._visit_class(node, scope)

    def _visit_MethodDefinition(self, node: Dict[str, Any], scope: Scope) -> None:
        if node.get("computed"):
            self._visit(node.get("key"), scope)
        self._visit(node.get("value"), scope)

    def _visit_Property(self, node: Dict[str, Any], scope: Scope) -> None:
        if node.get("computed"):
            self._visit(node.get("key"), scope)
        self._visit(node.get("value"), scope)

    def _visit_MemberExpression(self, node: Dict[str, Any], scope: Scope) -> None:
        self._visit(node.get("object"), scope)
        if node.get("computed"):
            self._visit(node.get("property"), scope)

    def _visit_MetaProperty(self, node: Dict[str, Any], scope: Scope) -> None:
        return

    def _visit_LabeledStatement(self, node: Dict[str, Any], scope: Scope) -> None:
        self._visit(node.get("body"), scope)

    def _visit_BreakStatement(self, node: Dict[str, Any], scope: Scope) -> None:
        return

    _visit_ContinueStatement = _visit_BreakStatement

    def _visit_BlockStatement(self, node: Dict[str, Any], scope: Scope) -> None:
        statements = node.get("body", [])
        block_scope = Scope(ScopeType.BLOCK, node, parent=scope, names=_lexical_names(statements))
        self._visit(statements, block_scope)

    def _visit_ForStatement(self, node: Dict[str, Any], scope: Scope) -> None:
        init = node.get("init")
        loop_scope = Scope(ScopeType.BLOCK, node, parent=scope, names=_lexical_names([init]))
        self._visit(init, loop_scope)
        self._visit(node.get("test"), loop_scope)
        self._visit(node.get("update"), loop_scope)
        self._visit(node.get("body"), loop_scope)

    def _visit_ForInStatement(self, node: Dict[str, Any], scope: Scope) -> None:
        left = node.get("left")
        loop_scope = Scope(ScopeType.BLOCK, node, parent=scope, names=_lexical_names([left]))
        self._visit(left, loop_scope)
        self._visit(node.get("right"), scope)
        self._visit(node.get("body"), loop_scope)

    _visit_ForOfStatement = _visit_ForInStatement

    def _visit_SwitchStatement(self, node: Dict[str, Any], scope: Scope) -> None:
        self._visit(node.get("discriminant"), scope)
        cases = node.get("cases", [])
        statements: List[Any] = []
        for case in cases:
            statements.extend(case.get("consequent", []))
        switch_scope = Scope(ScopeType.BLOCK, node, parent=scope, names=_lexical_names(statements))
        self._visit(cases, switch_scope)

    def _visit_CatchClause(self, node: Dict[str, Any], scope: Scope) -> None:
        param = node.get("param")
        catch_scope = Scope(
            ScopeType.CATCH, node, parent=scope, names=set(pattern_identifiers(param))
        )
        self._visit_pattern(param, catch_scope)
        self._visit(node.get("body"), catch_scope)

    def _visit_VariableDeclaration(self, node: Dict[str, Any], scope: Scope) -> None:
        for declarator in node.get("declarations", []):
            self._visit_VariableDeclarator(declarator, scope)

    def _visit_VariableDeclarator(self, node: Dict[str, Any], scope: Scope) -> None:
        self._visit_pattern(node.get("id"), scope)
        self._visit(node.get("init"), scope)


def build_reference_graph(module: Module, symbols: SymbolTable) -> ReferenceGraph:
    """
    Build the reference graph between top-level bindings.

    Args:
        module: Parsed module (result of `parse_module`).
        symbols: Symbol table built from the same module.

    Returns:
        ReferenceGraph whose edges map each binding to the top-level bindings
        its declaration reads, and whose roots are the bindings read by
        statements that are always kept.
    """
    collector = _ReferenceCollector(set(symbols.bindings))
    edges: Dict[str, Set[str]] = {name: set() for name in symbols.bindings}
    roots: Set[str] = set()

    for statement in module.statements:
        kind = statement.kind
        if kind == StatementKind.OTHER:
            roots |= collector.collect(statement.node)
            continue
        if kind == StatementKind.EXPORT_DEFAULT:
            declaration = statement.declaration or {}
            identifier = declaration.get("id") if declaration.get("type") in (
                "FunctionDeclaration",
                "ClassDeclaration",
            ) else None
            owner = identifier.get("name") if isinstance(identifier, dict) else DEFAULT_EXPORT
            edges.setdefault(owner, set()).update(collector.collect(declaration))
            continue
        declaration = statement.declaration
        if declaration is None:
            continue
        if declaration.get("type") == "VariableDeclaration":
            for declarator in declaration.get("declarations", []):
                references = collector.collect_declarator(declarator)
                for name in pattern_identifiers(declarator.get("id")):
                    edges.setdefault(name, set()).update(references)
        else:
            identifier = declaration.get("id")
            if isinstance(identifier, dict):
                edges.setdefault(identifier.get("name"), set()).update(
                    collector.collect(declaration)
                )

    return ReferenceGraph(
        edges={name: frozenset(targets) for name, targets in edges.items()},
        roots=frozenset(roots),
    )


__all__ = [
    "ReferenceGraph",
    "Scope",
    "ScopeType",
    "build_reference_graph",
]
