"""Grammar lint rules.

Each rule is a callable that accepts a built ``GrammarGraph`` and
returns a list of ``Diagnostic`` objects.  Lint findings never block a
build on their own; they point at grammar that is probably unintended.

Rule codes:
    GX-L001  Symbol is defined but never referenced (HINT)
    GX-L002  Symbol name is not lower kebab-case (WARNING)
    GX-L003  The same alternative appears twice for one symbol (WARNING)
"""
from __future__ import annotations

from collections import Counter
from typing import TYPE_CHECKING, Callable

from gxref.diagnostics.diagnostics import Diagnostic, DiagnosticKind, DiagnosticSeverity
from gxref.model.nodes import Alternative, SourceLocation
from gxref.notation.conventions import KEBAB_CASE

if TYPE_CHECKING:
    from gxref.pipeline import GrammarGraph

LintRule = Callable[["GrammarGraph"], list[Diagnostic]]


def rule_unreferenced_symbol(graph: "GrammarGraph") -> list[Diagnostic]:
    """GX-L001: every symbol except the configured roots should be used somewhere."""
    referenced = {
        link.target
        for link in graph.resolution.links.values()
        if link.site.symbol != link.target
    }
    roots = graph.config.root_symbols
    return [
        Diagnostic(
            kind=DiagnosticKind.UNREFERENCED_SYMBOL,
            severity=DiagnosticSeverity.HINT,
            message=f"Symbol {symbol.name!r} is defined but never referenced",
            location=symbol.location,
            name=symbol.name,
        )
        for symbol in graph.table
        if symbol.name not in referenced and symbol.name not in roots
    ]


def rule_symbol_name_kebab_case(graph: "GrammarGraph") -> list[Diagnostic]:
    """GX-L002: symbol names are lower kebab-case, e.g. ``getter-clause``."""
    return [
        Diagnostic(
            kind=DiagnosticKind.NAMING_CONVENTION,
            severity=DiagnosticSeverity.WARNING,
            message=f"Symbol name {symbol.name!r} should be lower kebab-case",
            location=symbol.location,
            name=symbol.name,
        )
        for symbol in graph.table
        if KEBAB_CASE.fullmatch(symbol.name) is None
    ]


def rule_duplicate_alternative(graph: "GrammarGraph") -> list[Diagnostic]:
    """GX-L003: a symbol should not list the same alternative twice.

    The finding points at the rule where the alternative first repeats.
    """
    diagnostics: list[Diagnostic] = []
    for symbol in graph.table:
        counts: Counter[Alternative] = Counter()
        repeated_at: dict[Alternative, SourceLocation] = {}
        for rule in symbol.rules:
            for alternative in rule.alternatives:
                counts[alternative] += 1
                if counts[alternative] == 2:
                    repeated_at[alternative] = rule.location
        for alternative, location in repeated_at.items():
            text = " ".join(str(e) for e in alternative)
            diagnostics.append(
                Diagnostic(
                    kind=DiagnosticKind.DUPLICATE_ALTERNATIVE,
                    severity=DiagnosticSeverity.WARNING,
                    message=(
                        f"Alternative {text!r} of {symbol.name!r} "
                        f"appears {counts[alternative]} times"
                    ),
                    location=location,
                    name=symbol.name,
                )
            )
    return diagnostics


ALL_LINT_RULES: list[LintRule] = [
    rule_unreferenced_symbol,
    rule_symbol_name_kebab_case,
    rule_duplicate_alternative,
]
