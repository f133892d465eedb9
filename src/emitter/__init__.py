"""Utilities for emitting ECMAScript source from pruned modules."""

from .writer import EmitOptions, EmitResult, emit_module

__all__ = ["EmitOptions", "EmitResult", "emit_module"]
