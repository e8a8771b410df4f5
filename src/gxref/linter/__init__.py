"""Grammar linter module.

Exports the ``GrammarLinter`` class, the ``lint`` convenience function
and the built-in rules.
"""
from __future__ import annotations

from gxref.linter.linter import GrammarLinter, lint
from gxref.linter.rules import (
    ALL_LINT_RULES,
    LintRule,
    rule_duplicate_alternative,
    rule_symbol_name_kebab_case,
    rule_unreferenced_symbol,
)

__all__ = [
    "GrammarLinter",
    "lint",
    "LintRule",
    "ALL_LINT_RULES",
    "rule_duplicate_alternative",
    "rule_symbol_name_kebab_case",
    "rule_unreferenced_symbol",
]
