"""Diagnostics module.

Exports ``Diagnostic`` types, the diagnostic factories used by the core
components, and the ``DiagnosticsCollector``.
"""
from __future__ import annotations

from gxref.diagnostics.collector import DiagnosticsCollector
from gxref.diagnostics.diagnostics import (
    Diagnostic,
    DiagnosticKind,
    DiagnosticSeverity,
    duplicate_definition,
    empty_alternative,
    malformed_rule,
    unresolved_reference,
)

__all__ = [
    "Diagnostic",
    "DiagnosticKind",
    "DiagnosticSeverity",
    "DiagnosticsCollector",
    "duplicate_definition",
    "empty_alternative",
    "malformed_rule",
    "unresolved_reference",
]
