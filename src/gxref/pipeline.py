"""Build pipeline: documents → resolved, rendered grammar graph.

``build`` runs the whole register-then-resolve pass over a corpus:

1. Parse every document's rule declarations.  Documents are independent
   and share no mutable state, so they are parsed on a thread pool.
2. Register every parsed rule into one ``SymbolTable``, sequentially and
   in input order, after all parsing has finished.
3. Resolve every rule reference and inline mention against the
   completed table.
4. Render every rule, linking categories through the resolution result.
5. Collect all diagnostics into a single ``DiagnosticsCollector``.

Usage
-----
::

    from gxref.corpus import load_inputs
    from gxref.pipeline import build

    graph = build(load_inputs(["book/"]))
    if not graph.ok:
        print(graph.diagnostics.report())
"""
from __future__ import annotations

import logging
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field

from gxref.config import BuildConfig
from gxref.corpus.records import DocumentRecord
from gxref.diagnostics.collector import DiagnosticsCollector
from gxref.diagnostics.diagnostics import Diagnostic
from gxref.model.nodes import ProductionRule
from gxref.production.parser import ParseOutcome, parse_rules
from gxref.renderer.renderer import RenderedRule, Renderer
from gxref.resolver.resolver import ResolutionResult, Resolver
from gxref.symbols.table import SymbolTable

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ParsedRule:
    """A parsed rule with the anchor it was declared under."""

    rule: ProductionRule
    anchor: str
    document: str


@dataclass
class ParsedDocument:
    """Output of the parse phase for one document."""

    record: DocumentRecord
    rules: list[ParsedRule] = field(default_factory=list)
    outcome: ParseOutcome = field(default_factory=ParseOutcome)

    @property
    def diagnostics(self) -> list[Diagnostic]:
        return self.outcome.diagnostics


@dataclass
class GrammarGraph:
    """The resolved grammar of a whole corpus.

    Parameters
    ----------
    table:
        Every registered symbol.
    resolution:
        Reference links and unresolved-reference diagnostics.
    rendered:
        Rendered rules per symbol name, in registration order.
    diagnostics:
        Everything found during the build.
    config:
        The configuration the graph was built with.
    """

    table: SymbolTable
    resolution: ResolutionResult
    rendered: dict[str, list[RenderedRule]]
    diagnostics: DiagnosticsCollector
    config: BuildConfig
    documents: tuple[str, ...] = ()

    @property
    def ok(self) -> bool:
        """True if the build produced no error-level diagnostics."""
        return not self.diagnostics.has_errors

    def rendered_for(self, name: str) -> list[RenderedRule]:
        return self.rendered.get(name, [])


def parse_document(record: DocumentRecord) -> ParsedDocument:
    """Parse all rule declarations of one document.

    Pure: reads only ``record`` and returns new objects, so it is safe
    to call from several threads at once.  Declarations without an
    anchor keep an empty one; the ``SymbolTable`` assigns it at
    registration.
    """
    parsed = ParsedDocument(record=record)
    for declaration in record.rules:
        location = record.location(anchor=declaration.anchor, line=declaration.line)
        outcome = parse_rules(declaration.text, location)
        for rule in outcome.rules:
            parsed.rules.append(
                ParsedRule(rule=rule, anchor=declaration.anchor, document=record.document)
            )
        parsed.outcome.extend(outcome)
    return parsed


class GrammarBuilder:
    """Runs the build phases over a corpus.

    Parameters
    ----------
    config:
        Build settings.  Defaults to ``BuildConfig()``.
    """

    def __init__(self, config: BuildConfig | None = None) -> None:
        self._config = config if config is not None else BuildConfig()

    @property
    def config(self) -> BuildConfig:
        return self._config

    def parse(self, documents: Sequence[DocumentRecord]) -> list[ParsedDocument]:
        """Phase 1: parse every document, in parallel when configured."""
        if self._config.workers == 1 or len(documents) < 2:
            return [parse_document(d) for d in documents]
        with ThreadPoolExecutor(max_workers=self._config.workers) as pool:
            return list(pool.map(parse_document, documents))

    def register(self, parsed: Sequence[ParsedDocument]) -> SymbolTable:
        """Phase 2: register every rule, sequentially, in input order."""
        table = SymbolTable(anchor_prefix=self._config.anchor_prefix)
        for document in parsed:
            for item in document.rules:
                table.register(item.rule.name, item.anchor, item.rule, document=item.document)
        return table

    def build(self, documents: Sequence[DocumentRecord]) -> GrammarGraph:
        """Run all phases and return the resolved graph."""
        documents = list(documents)
        parsed = self.parse(documents)
        table = self.register(parsed)

        mentions = [m for d in documents for m in d.mentions]
        resolution = Resolver(table, workers=self._config.workers).resolve_all(mentions)

        renderer = Renderer(layout=self._config.layout, max_width=self._config.max_width)
        rendered: dict[str, list[RenderedRule]] = {}
        for symbol in table:
            emitted: set[str] = set()
            rendered[symbol.name] = []
            for rule in symbol.rules:
                anchor = rule.location.anchor or symbol.anchor
                rendered[symbol.name].append(
                    renderer.render(
                        rule,
                        resolution.resolver_for(rule.location.document or symbol.document),
                        anchor=None if anchor in emitted else anchor,
                    )
                )
                emitted.add(anchor)

        collector = DiagnosticsCollector(strict=self._config.strict)
        for document in parsed:
            collector.collect(document)
        collector.collect(table)
        collector.collect(resolution)

        logger.info(
            "Built grammar: %d document(s), %d symbol(s), %d link(s), %d diagnostic(s)",
            len(documents),
            len(table),
            len(resolution.links),
            len(collector),
        )
        return GrammarGraph(
            table=table,
            resolution=resolution,
            rendered=rendered,
            diagnostics=collector,
            config=self._config,
            documents=tuple(d.document for d in documents),
        )


def build(
    documents: Sequence[DocumentRecord], config: BuildConfig | None = None
) -> GrammarGraph:
    """Convenience function: build a ``GrammarGraph`` with ``GrammarBuilder``."""
    return GrammarBuilder(config).build(documents)
