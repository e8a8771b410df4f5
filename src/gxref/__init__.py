"""gxref: grammar cross-reference toolkit for a language reference book.

Public API
----------
The stable public surface is everything exported from this module.
Anything inside submodules not re-exported here is considered private
and may change without notice.

Example
-------
::

    import gxref

    # Parse one production rule
    rule = gxref.parse_rule("getter-setter-block → { getter-clause setter-clause_opt }")

    # Build, resolve and render a whole corpus
    from gxref.corpus import load_inputs
    graph = gxref.build(load_inputs(["ReferenceManual/"]))
    print(graph.diagnostics.report())

    # Render a single rule with links
    text = gxref.render(rule, graph.resolution.resolver_for("Declarations.md"))

    # Lint for quality issues
    findings = gxref.lint(graph)

    gxref.__version__
    '0.1.0'
"""
from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import TYPE_CHECKING

__version__: str = "0.1.0"

if TYPE_CHECKING:
    from gxref.config import BuildConfig
    from gxref.corpus.records import DocumentRecord
    from gxref.diagnostics.diagnostics import Diagnostic
    from gxref.model.nodes import ProductionRule, SourceLocation
    from gxref.pipeline import GrammarGraph
    from gxref.resolver.resolver import ReferenceMention, ResolutionResult, ResolveFn
    from gxref.symbols.table import SymbolTable


def parse_rule(
    raw_text: str, location: "SourceLocation | None" = None
) -> "ProductionRule | Diagnostic":
    """Parse one rule in the book's notation.

    Parameters
    ----------
    raw_text:
        Rule text in Markdown or plain notation.
    location:
        Where the rule appears; attached to the result.

    Returns
    -------
    ProductionRule | Diagnostic
        The parsed rule, or a MALFORMED_RULE / EMPTY_ALTERNATIVE
        diagnostic.  Malformed input never raises.
    """
    from gxref.production.parser import parse_rule as _parse_rule

    return _parse_rule(raw_text, location)


def build(
    documents: Sequence["DocumentRecord"], config: "BuildConfig | None" = None
) -> "GrammarGraph":
    """Parse, register, resolve and render every rule of a corpus.

    Parameters
    ----------
    documents:
        The corpus, in the order its documents should be registered.
    config:
        Build settings.  Defaults to ``BuildConfig()``.

    Returns
    -------
    GrammarGraph
        Symbol table, reference links, rendered rules and diagnostics.
    """
    from gxref.pipeline import build as _build

    return _build(documents, config)


def resolve_all(
    table: "SymbolTable",
    mentions: Iterable["ReferenceMention"] = (),
    workers: int = 1,
) -> "ResolutionResult":
    """Bind every reference in ``table`` (and every mention) to its canonical anchor."""
    from gxref.resolver.resolver import resolve_all as _resolve_all

    return _resolve_all(table, mentions, workers=workers)


def render(
    rule: "ProductionRule",
    resolve_fn: "ResolveFn | None" = None,
    output_format: str = "markdown",
) -> str:
    """Render ``rule`` in one of the registered output formats.

    Parameters
    ----------
    rule:
        The rule to render.
    resolve_fn:
        Maps a category name to an href, or ``None`` when it has no
        definition.  Without one, categories are not linked.
    output_format:
        ``"markdown"``, ``"html"``, ``"text"`` or a plugin format name.

    Raises
    ------
    gxref.renderer.FormatNotFoundError
        If ``output_format`` is not registered.
    """
    from gxref.renderer.formats import formats
    from gxref.renderer.renderer import render as _render

    return formats.create(output_format).format_rule(_render(rule, resolve_fn))


def lint(graph: "GrammarGraph", include_hints: bool = True) -> list["Diagnostic"]:
    """Lint a built grammar for legal but probably unintended rules."""
    from gxref.linter.linter import lint as _lint

    return _lint(graph, include_hints=include_hints)


__all__ = [
    "__version__",
    "parse_rule",
    "build",
    "resolve_all",
    "render",
    "lint",
]
