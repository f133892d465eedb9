"""Parsing plus symbol and reference analysis in one call."""

from .pipeline import FrontEndResult, run_frontend

__all__ = ["FrontEndResult", "run_frontend"]
