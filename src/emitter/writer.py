"""
Serialize a pruned module back to ECMAScript source text.

Statements that survived untouched are emitted as their exact source slice.
Statements that lost declarators, pattern elements or specifiers are rebuilt
from the source slices of the parts that survived, so expressions, function
bodies and literals are never re-printed from the AST.
"""

from __future__ import annotations

import io
from dataclasses import dataclass
from typing import Any, Dict, FrozenSet, List, Optional

from parser import Module, declared_names, export_name, pattern_identifiers
from transformer import PrunedModule, PrunedStatement


@dataclass(frozen=True)
class EmitOptions:
    trailing_newline: bool = True
    separator: str = "\n"


@dataclass(frozen=True)
class EmitResult:
    source: str
    statement_count: int


class _StatementWriter:
    def __init__(self, module: Module) -> None:
        self._module = module

    def _text(self, node: Dict[str, Any]) -> str:
        return self._module.text(node)

    def render(self, pruned: PrunedStatement) -> str:
        statement = pruned.statement
        if pruned.intact:
            return self._module.source[statement.span.start : statement.span.end]
        handler = getattr(self, f"_render_{statement.kind.name}")
        return handler(pruned)

    # ------------------------------------------------------------------ helpers

    def _render_declaration(self, declaration: Dict[str, Any], live: FrozenSet[str]) -> str:
        if declaration.get("type") != "VariableDeclaration":
            return self._text(declaration)
        if set(declared_names(declaration)) <= live:
            text = self._text(declaration)
            return text if text.rstrip().endswith(";") else text + ";"
        parts: List[str] = []
        for declarator in declaration.get("declarations", []):
            names = pattern_identifiers(declarator.get("id"))
            if not any(name in live for name in names):
                continue
            if all(name in live for name in names):
                parts.append(self._text(declarator))
                continue
            text = self._render_pattern(declarator.get("id"), live)
            init = declarator.get("init")
            if init is not None:
                text = f"{text} = {self._text(init)}"
            parts.append(text)
        return f"{declaration.get('kind')} {', '.join(parts)};"

    def _render_pattern(self, pattern: Optional[Dict[str, Any]], live: FrozenSet[str]) -> str:
        """Render a binding pattern keeping only the parts that bind live names."""
        if pattern is None:
            return ""
        names = pattern_identifiers(pattern)
        if names and all(name in live for name in names):
            return self._text(pattern)
        pattern_type = pattern.get("type")
        if pattern_type == "ArrayPattern":
            elements: List[str] = []
            for element in pattern.get("elements") or []:
                if element is None or not any(n in live for n in pattern_identifiers(element)):
                    # A hole keeps the positions of the elements after it.
                    elements.append("")
                else:
                    elements.append(self._render_pattern(element, live))
            while elements and not elements[-1]:
                elements.pop()
            return f"[{', '.join(elements)}]"
        if pattern_type == "ObjectPattern":
            properties: List[str] = []
            for prop in pattern.get("properties") or []:
                prop_names = pattern_identifiers(prop)
                if not any(name in live for name in prop_names):
                    continue
                if prop.get("type") != "Property" or all(name in live for name in prop_names):
                    properties.append(self._text(prop))
                    continue
                key = self._text(prop["key"])
                if prop.get("computed"):
                    key = f"[{key}]"
                properties.append(f"{key}: {self._render_pattern(prop.get('value'), live)}")
            return "{ " + ", ".join(properties) + " }" if properties else "{}"
        if pattern_type == "AssignmentPattern":
            left = self._render_pattern(pattern.get("left"), live)
            return f"{left} = {self._text(pattern['right'])}"
        if pattern_type == "RestElement":
            return "..." + self._render_pattern(pattern.get("argument"), live)
        return self._text(pattern)

    def _export_list(self, names: List[str]) -> str:
        return "export { " + ", ".join(names) + " };"

    # ----------------------------------------------------------------- renderers

    def _render_VARIABLE(self, pruned: PrunedStatement) -> str:
        return self._render_declaration(pruned.statement.node, pruned.live_names)

    def _render_IMPORT(self, pruned: PrunedStatement) -> str:
        node = pruned.statement.node
        default_part: Optional[str] = None
        namespace_part: Optional[str] = None
        named: List[str] = []
        for specifier in node.get("specifiers", []):
            local = (specifier.get("local") or {}).get("name")
            if local not in pruned.live_names:
                continue
            specifier_type = specifier.get("type")
            if specifier_type == "ImportDefaultSpecifier":
                default_part = local
            elif specifier_type == "ImportNamespaceSpecifier":
                namespace_part = self._text(specifier)
            else:
                named.append(self._text(specifier))
        clauses: List[str] = []
        if default_part:
            clauses.append(default_part)
        if namespace_part:
            clauses.append(namespace_part)
        if named:
            clauses.append("{ " + ", ".join(named) + " }")
        return f"import {', '.join(clauses)} from {self._text(node['source'])};"

    def _render_EXPORT_DECLARATION(self, pruned: PrunedStatement) -> str:
        declaration = pruned.statement.declaration
        body = self._render_declaration(declaration, pruned.live_names)
        exported = [name for name in declared_names(declaration) if name in pruned.exported_names]
        if not exported:
            return body
        if len(exported) == len(pruned.live_names):
            return "export " + body
        return body + "\n" + self._export_list(exported)

    def _render_EXPORT_DEFAULT(self, pruned: PrunedStatement) -> str:
        # Only reached when the default export was removed but its named
        # function or class is still referenced.
        return self._text(pruned.statement.declaration)

    def _render_EXPORT_NAMED(self, pruned: PrunedStatement) -> str:
        node = pruned.statement.node
        specifiers: List[str] = []
        for specifier in node.get("specifiers", []):
            name = export_name(specifier.get("exported")) or export_name(specifier.get("local"))
            if name in pruned.exported_names:
                specifiers.append(self._text(specifier))
        text = "export { " + ", ".join(specifiers) + " }"
        if node.get("source") is not None:
            text += f" from {self._text(node['source'])}"
        return text + ";"


def emit_module(pruned: PrunedModule, options: Optional[EmitOptions] = None) -> EmitResult:
    """
    Render the surviving statements of a pruned module to source text.
    """
    options = options or EmitOptions()
    writer = _StatementWriter(pruned.module)

    buffer = io.StringIO()
    for position, statement in enumerate(pruned.statements):
        if position:
            buffer.write(options.separator)
        buffer.write(writer.render(statement))
    if pruned.statements and options.trailing_newline:
        buffer.write("\n")

    return EmitResult(source=buffer.getvalue(), statement_count=len(pruned.statements))


__all__ = ["EmitOptions", "EmitResult", "emit_module"]
