"""Symbol Table module.

Exports the ``SymbolTable`` class and ``SymbolNotFoundError``.
"""
from __future__ import annotations

from gxref.symbols.table import SymbolNotFoundError, SymbolTable

__all__ = ["SymbolTable", "SymbolNotFoundError"]
