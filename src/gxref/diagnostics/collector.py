"""Diagnostics collector: one report for the whole corpus.

The ``DiagnosticsCollector`` accumulates findings from every stage of a
build (rule parsing, registration, resolution, linting) and turns them
into a single sorted list and a human-readable report grouped by kind.
It never raises; the build layer decides from the result whether a
corpus passes, warns, or fails.

Usage
-----
::

    from gxref.diagnostics import DiagnosticsCollector

    collector = DiagnosticsCollector(strict=False)
    collector.collect(table)          # anything with a ``diagnostics`` attribute
    collector.collect(resolution)
    if collector.has_errors:
        print(collector.report())
"""
from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from gxref.diagnostics.diagnostics import (
    Diagnostic,
    DiagnosticKind,
    DiagnosticSeverity,
)


def _sort_key(d: Diagnostic) -> tuple[str, int, str, str]:
    return (d.location.document, d.location.line, d.code, d.name)


class DiagnosticsCollector:
    """Aggregates diagnostics from any number of sources.

    Parameters
    ----------
    strict:
        When ``True``, WARNING-level diagnostics are promoted to ERROR
        severity as they are collected.
    include_hints:
        If ``False``, HINT-level diagnostics are dropped.
    """

    def __init__(self, strict: bool = False, include_hints: bool = True) -> None:
        self._strict = strict
        self._include_hints = include_hints
        self._items: list[Diagnostic] = []

    def collect(self, source: Any) -> list[Diagnostic]:
        """Add diagnostics from ``source`` and return everything collected so far.

        Parameters
        ----------
        source:
            A single ``Diagnostic``, an iterable of diagnostics, or any
            object exposing a ``diagnostics`` attribute.  Anything else
            is ignored.

        Returns
        -------
        list[Diagnostic]
            All accumulated diagnostics, sorted by location.
        """
        for diagnostic in self._iter_source(source):
            if diagnostic.severity is DiagnosticSeverity.HINT and not self._include_hints:
                continue
            self._items.append(diagnostic.promoted() if self._strict else diagnostic)
        return self.diagnostics

    @staticmethod
    def _iter_source(source: Any) -> Iterable[Diagnostic]:
        if source is None:
            return ()
        if isinstance(source, Diagnostic):
            return (source,)
        inner = getattr(source, "diagnostics", None)
        if inner is not None:
            source = inner
        if isinstance(source, (str, bytes)) or not isinstance(source, Iterable):
            return ()
        return [d for d in source if isinstance(d, Diagnostic)]

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    @property
    def diagnostics(self) -> list[Diagnostic]:
        """All collected diagnostics sorted by document, line, then code."""
        return sorted(self._items, key=_sort_key)

    def by_kind(self) -> dict[DiagnosticKind, list[Diagnostic]]:
        """Group diagnostics by kind, in ``DiagnosticKind`` declaration order."""
        groups: dict[DiagnosticKind, list[Diagnostic]] = {}
        ordered = self.diagnostics
        for kind in DiagnosticKind:
            members = [d for d in ordered if d.kind is kind]
            if members:
                groups[kind] = members
        return groups

    @property
    def error_count(self) -> int:
        return sum(1 for d in self._items if d.is_error)

    @property
    def warning_count(self) -> int:
        return sum(1 for d in self._items if d.severity is DiagnosticSeverity.WARNING)

    @property
    def has_errors(self) -> bool:
        """Return True if any collected diagnostic is an error."""
        return self.error_count > 0

    def __len__(self) -> int:
        return len(self._items)

    def __bool__(self) -> bool:
        return bool(self._items)

    def report(self) -> str:
        """Return a human-readable summary grouped by kind."""
        if not self._items:
            return "No grammar diagnostics."
        lines: list[str] = []
        for kind, members in self.by_kind().items():
            lines.append(f"{kind.title} ({kind.code}): {len(members)}")
            for d in members:
                lines.append(f"  {d.severity.name:<8} {d.location}: {d.message}")
        lines.append(
            f"Summary: {self.error_count} error(s), {self.warning_count} warning(s), "
            f"{len(self._items)} total"
        )
        return "\n".join(lines)
