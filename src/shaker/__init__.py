"""Export removal and single-module tree-shaking."""

from parser import ParseError

from .api import ShakeResult, remove_exports, shake_module

__all__ = ["ParseError", "ShakeResult", "remove_exports", "shake_module"]
