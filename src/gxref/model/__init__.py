"""Grammar model module.

Exports the rule, element and symbol types.  The graph serializer lives
in ``gxref.model.serializer``.
"""
from __future__ import annotations

from gxref.model.nodes import (
    Alternative,
    Element,
    Nonterminal,
    ProductionRule,
    SourceLocation,
    Symbol,
    Terminal,
)

__all__ = [
    "Alternative",
    "Element",
    "Nonterminal",
    "ProductionRule",
    "SourceLocation",
    "Symbol",
    "Terminal",
]
