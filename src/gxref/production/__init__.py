"""Production Model parsing.

Exports ``parse_rule``, ``parse_rules`` and the ``RuleParser`` class.
"""
from __future__ import annotations

from gxref.production.parser import (
    ParseOutcome,
    RuleParser,
    join_continuations,
    parse_rule,
    parse_rules,
)

__all__ = [
    "ParseOutcome",
    "RuleParser",
    "join_continuations",
    "parse_rule",
    "parse_rules",
]
