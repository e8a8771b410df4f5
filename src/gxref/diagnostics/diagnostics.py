"""Diagnostic types for the grammar cross-reference core.

A ``Diagnostic`` is an annotated message attached to a source location.
Diagnostics are produced by the rule parser (malformed rules), the
``SymbolTable`` (duplicate definitions), the ``Resolver`` (unresolved
references) and the grammar linter (quality findings).  None of them
are raised: they are collected and reported after a full pass.

Codes:

    GX001  Duplicate definition (same name, conflicting anchors)
    GX002  Unresolved reference
    GX003  Empty alternative
    GX004  Malformed rule
    GX-L001  Unreferenced symbol
    GX-L002  Symbol name not lower kebab-case
    GX-L003  Duplicate alternative within a symbol
    GX999    Internal error in a lint rule
"""
from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field, replace
from enum import Enum, auto

from gxref.model.nodes import SourceLocation


class DiagnosticSeverity(Enum):
    """Severity levels for diagnostics, aligned with LSP conventions."""

    ERROR = auto()
    WARNING = auto()
    INFORMATION = auto()
    HINT = auto()


class DiagnosticKind(Enum):
    """What went wrong."""

    DUPLICATE_DEFINITION = "GX001"
    UNRESOLVED_REFERENCE = "GX002"
    EMPTY_ALTERNATIVE = "GX003"
    MALFORMED_RULE = "GX004"
    UNREFERENCED_SYMBOL = "GX-L001"
    NAMING_CONVENTION = "GX-L002"
    DUPLICATE_ALTERNATIVE = "GX-L003"
    INTERNAL_ERROR = "GX999"

    @property
    def code(self) -> str:
        return self.value

    @property
    def title(self) -> str:
        """Human-readable kind name, e.g. ``"Unresolved reference"``."""
        return self.name.replace("_", " ").capitalize()


@dataclass(frozen=True)
class Diagnostic:
    """A single finding.

    Parameters
    ----------
    kind:
        The diagnostic kind; also supplies the machine-readable code.
    severity:
        How serious this finding is.
    message:
        Human-readable description of the problem.
    location:
        Where the offending rule or mention appears.
    name:
        The symbol name involved, if any.
    anchors:
        For duplicate definitions: the canonical anchor followed by every
        conflicting one, in arrival order.
    """

    kind: DiagnosticKind
    severity: DiagnosticSeverity
    message: str
    location: SourceLocation = field(default_factory=SourceLocation.unknown)
    name: str = ""
    anchors: tuple[str, ...] = ()

    def __str__(self) -> str:
        prefix = f"[{self.code}] {self.severity.name}"
        return f"{prefix} at {self.location}: {self.message}"

    @property
    def code(self) -> str:
        return self.kind.code

    @property
    def is_error(self) -> bool:
        """Return True if this diagnostic should fail a build."""
        return self.severity == DiagnosticSeverity.ERROR

    def promoted(self) -> "Diagnostic":
        """Return a copy with WARNING promoted to ERROR; other severities unchanged."""
        if self.severity is DiagnosticSeverity.WARNING:
            return replace(self, severity=DiagnosticSeverity.ERROR)
        return self


# ---------------------------------------------------------------------------
# Factories for the core taxonomy
# ---------------------------------------------------------------------------


def duplicate_definition(
    name: str, canonical: str, conflicting: Sequence[str], location: SourceLocation
) -> Diagnostic:
    """One diagnostic per symbol; ``anchors`` is the canonical anchor first."""
    others = ", ".join(repr(a) for a in conflicting)
    plural = "s" if len(conflicting) > 1 else ""
    return Diagnostic(
        kind=DiagnosticKind.DUPLICATE_DEFINITION,
        severity=DiagnosticSeverity.ERROR,
        message=(
            f"Symbol {name!r} is defined at anchor{plural} {others} but its "
            f"canonical anchor is {canonical!r}"
        ),
        location=location,
        name=name,
        anchors=(canonical, *conflicting),
    )


def unresolved_reference(name: str, location: SourceLocation) -> Diagnostic:
    return Diagnostic(
        kind=DiagnosticKind.UNRESOLVED_REFERENCE,
        severity=DiagnosticSeverity.WARNING,
        message=f"Reference to undefined symbol {name!r}",
        location=location,
        name=name,
    )


def empty_alternative(
    location: SourceLocation, name: str = "", index: int = 0
) -> Diagnostic:
    what = f"Alternative {index + 1}" if name else "An alternative"
    of = f" of {name!r}" if name else ""
    return Diagnostic(
        kind=DiagnosticKind.EMPTY_ALTERNATIVE,
        severity=DiagnosticSeverity.ERROR,
        message=f"{what}{of} is empty",
        location=location,
        name=name,
    )


def malformed_rule(
    message: str, location: SourceLocation, name: str = ""
) -> Diagnostic:
    return Diagnostic(
        kind=DiagnosticKind.MALFORMED_RULE,
        severity=DiagnosticSeverity.ERROR,
        message=message,
        location=location,
        name=name,
    )
