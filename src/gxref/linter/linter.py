"""Grammar linter: quality checks over a built ``GrammarGraph``.

Unlike the core build (which checks that every reference resolves and
every symbol has one definition), the linter looks for grammar that is
legal but probably unintended.  Findings are WARNING or HINT level.

Usage
-----
::

    from gxref.linter import GrammarLinter
    from gxref.pipeline import build

    graph = build(documents)
    findings = GrammarLinter().lint(graph)
"""
from __future__ import annotations

from typing import TYPE_CHECKING

from gxref.diagnostics.diagnostics import Diagnostic, DiagnosticKind, DiagnosticSeverity
from gxref.linter.rules import ALL_LINT_RULES, LintRule

if TYPE_CHECKING:
    from gxref.pipeline import GrammarGraph


class GrammarLinter:
    """Configurable grammar linter.

    Parameters
    ----------
    rules:
        Lint rules to run.  Defaults to all built-in rules.
    include_hints:
        If ``False``, HINT-level diagnostics are suppressed.
    """

    def __init__(
        self,
        rules: list[LintRule] | None = None,
        include_hints: bool = True,
    ) -> None:
        self._rules: list[LintRule] = rules if rules is not None else list(ALL_LINT_RULES)
        self._include_hints = include_hints

    def lint(self, graph: "GrammarGraph") -> list[Diagnostic]:
        """Run all lint rules against ``graph``.

        Returns
        -------
        list[Diagnostic]
            All lint findings in book order: by document, then line,
            then symbol name and code.
        """
        findings: list[Diagnostic] = []
        for rule in self._rules:
            try:
                findings.extend(rule(graph))
            except Exception as exc:  # noqa: BLE001
                findings.append(
                    Diagnostic(
                        kind=DiagnosticKind.INTERNAL_ERROR,
                        severity=DiagnosticSeverity.ERROR,
                        message=(
                            f"Internal linter error in rule {rule.__name__!r} "
                            f"over {len(graph.table)} symbol(s): {exc}"
                        ),
                    )
                )

        if not self._include_hints:
            findings = [d for d in findings if d.severity != DiagnosticSeverity.HINT]

        findings.sort(key=lambda d: (d.location.document, d.location.line, d.name, d.code))
        return findings

    def add_rule(self, rule: LintRule) -> None:
        """Add a custom lint rule."""
        self._rules.append(rule)

    @property
    def rule_count(self) -> int:
        return len(self._rules)


def lint(graph: "GrammarGraph", include_hints: bool = True) -> list[Diagnostic]:
    """Convenience function: lint ``graph`` with all default rules."""
    return GrammarLinter(include_hints=include_hints).lint(graph)
