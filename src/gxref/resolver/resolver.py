"""Reference Resolver: bind every nonterminal use to its definition.

Resolution is the second half of a register-then-resolve build.  Once
every document has been registered into the ``SymbolTable``, the
resolver visits each nonterminal element of each alternative of each
rule, and each inline prose mention, exactly once.  A reference binds
by exact name to the symbol's canonical anchor; a name with no symbol
produces an UNRESOLVED_REFERENCE diagnostic and the pass carries on.

Recursive grammars need no special handling: resolving a reference is
a single table lookup, never a traversal.

The table is only read here, so symbol batches may be resolved on a
thread pool (``workers > 1``).  Results are merged in a fixed order and
are identical to a sequential run.
"""
from __future__ import annotations

import logging
import re
from collections.abc import Callable, Iterable, Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field

from gxref.diagnostics.diagnostics import Diagnostic, unresolved_reference
from gxref.model.nodes import SourceLocation, Symbol
from gxref.symbols.table import SymbolTable

logger = logging.getLogger(__name__)

ResolveFn = Callable[[str], "str | None"]


# ---------------------------------------------------------------------------
# Reference sites and links
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ReferenceSite:
    """One place where a nonterminal name is used.

    Rule elements are identified by ``symbol``/``rule_index``/
    ``alternative_index``/``element_index``; inline mentions by
    ``location`` and ``mention_index`` (with ``symbol`` empty).
    """

    name: str
    location: SourceLocation
    symbol: str = ""
    rule_index: int = -1
    alternative_index: int = -1
    element_index: int = -1
    mention_index: int = -1

    @property
    def is_mention(self) -> bool:
        return not self.symbol


@dataclass(frozen=True, slots=True)
class ReferenceMention:
    """An inline prose link to a grammar symbol.

    ``location`` is where the link appears; ``target`` is the link's
    own destination as written by the author.
    """

    name: str
    location: SourceLocation
    target: str = ""


@dataclass(frozen=True, slots=True)
class ReferenceLink:
    """A resolved reference: ``site`` points at ``anchor`` in ``document``."""

    site: ReferenceSite
    target: str
    anchor: str
    document: str

    def href(self, from_document: str | None = None) -> str:
        """Return the link target as seen from ``from_document``."""
        return make_href(self.anchor, self.document, from_document)


def document_url(document: str) -> str:
    """Map a source document path to the URL of its rendered page."""
    return re.sub(r"\.md$", ".html", document)


def make_href(anchor: str, document: str, from_document: str | None = None) -> str:
    if not document or document == from_document:
        return f"#{anchor}"
    return f"{document_url(document)}#{anchor}"


# ---------------------------------------------------------------------------
# Result
# ---------------------------------------------------------------------------


@dataclass
class ResolutionResult:
    """Links and diagnostics produced by one resolution pass."""

    links: dict[ReferenceSite, ReferenceLink] = field(default_factory=dict)
    diagnostics: list[Diagnostic] = field(default_factory=list)
    targets: dict[str, tuple[str, str]] = field(default_factory=dict)

    @property
    def reference_count(self) -> int:
        """Number of references visited, resolved or not."""
        return len(self.links) + len(self.diagnostics)

    def links_to(self, name: str) -> list[ReferenceLink]:
        """Return every link whose target is ``name``."""
        return [link for link in self.links.values() if link.target == name]

    def unresolved_names(self) -> set[str]:
        return {d.name for d in self.diagnostics}

    def resolver_for(self, document: str | None = None) -> ResolveFn:
        """Return a ``resolve_fn(name) -> href | None`` for pages of ``document``.

        Only names that actually resolved in this pass produce an href.
        """

        def resolve(name: str) -> str | None:
            target = self.targets.get(name)
            if target is None:
                return None
            anchor, target_document = target
            return make_href(anchor, target_document, document)

        return resolve


# ---------------------------------------------------------------------------
# Resolver
# ---------------------------------------------------------------------------


class Resolver:
    """Resolves every reference in a ``SymbolTable``.

    Parameters
    ----------
    table:
        A fully registered symbol table.  It is not modified.
    workers:
        Number of threads used to resolve symbol batches.  ``1`` resolves
        on the calling thread.
    """

    def __init__(self, table: SymbolTable, workers: int = 1) -> None:
        if workers < 1:
            raise ValueError(f"workers must be at least 1, got {workers}")
        self._table = table
        self._workers = workers

    def resolve_all(self, mentions: Iterable[ReferenceMention] = ()) -> ResolutionResult:
        """Visit every rule reference and inline mention once.

        Parameters
        ----------
        mentions:
            Inline prose mentions to resolve alongside rule references.

        Returns
        -------
        ResolutionResult
            Links for every resolved reference, one diagnostic per
            unresolved one.
        """
        symbols = sorted(self._table.all_symbols(), key=lambda s: s.name)
        if self._workers == 1 or len(symbols) < 2:
            batches = [self._resolve_symbol(symbol) for symbol in symbols]
        else:
            with ThreadPoolExecutor(max_workers=self._workers) as pool:
                batches = list(pool.map(self._resolve_symbol, symbols))

        result = ResolutionResult()
        for links, diagnostics in batches:
            self._merge(result, links, diagnostics)
        links, diagnostics = self._resolve_mentions(list(mentions))
        self._merge(result, links, diagnostics)

        logger.debug(
            "Resolved %d reference(s) across %d symbol(s); %d unresolved",
            len(result.links),
            len(symbols),
            len(result.diagnostics),
        )
        return result

    @staticmethod
    def _merge(
        result: ResolutionResult,
        links: list[ReferenceLink],
        diagnostics: list[Diagnostic],
    ) -> None:
        for link in links:
            result.links[link.site] = link
            result.targets.setdefault(link.target, (link.anchor, link.document))
        result.diagnostics.extend(diagnostics)

    def _bind(self, site: ReferenceSite) -> ReferenceLink | Diagnostic:
        target = self._table.lookup(site.name)
        if target is None:
            return unresolved_reference(site.name, site.location)
        return ReferenceLink(
            site=site,
            target=target.name,
            anchor=target.anchor,
            document=target.document,
        )

    def _resolve_symbol(
        self, symbol: Symbol
    ) -> tuple[list[ReferenceLink], list[Diagnostic]]:
        links: list[ReferenceLink] = []
        diagnostics: list[Diagnostic] = []
        for rule_index, rule in enumerate(symbol.rules):
            for alt_index, alternative in enumerate(rule.alternatives):
                for element_index, element in alternative.nonterminals():
                    site = ReferenceSite(
                        name=element.name,
                        location=rule.location,
                        symbol=symbol.name,
                        rule_index=rule_index,
                        alternative_index=alt_index,
                        element_index=element_index,
                    )
                    outcome = self._bind(site)
                    if isinstance(outcome, Diagnostic):
                        diagnostics.append(outcome)
                    else:
                        links.append(outcome)
        return links, diagnostics

    def _resolve_mentions(
        self, mentions: Sequence[ReferenceMention]
    ) -> tuple[list[ReferenceLink], list[Diagnostic]]:
        links: list[ReferenceLink] = []
        diagnostics: list[Diagnostic] = []
        for index, mention in enumerate(mentions):
            site = ReferenceSite(
                name=mention.name, location=mention.location, mention_index=index
            )
            outcome = self._bind(site)
            if isinstance(outcome, Diagnostic):
                diagnostics.append(outcome)
            else:
                links.append(outcome)
        return links, diagnostics


def resolve_all(
    table: SymbolTable,
    mentions: Iterable[ReferenceMention] = (),
    workers: int = 1,
) -> ResolutionResult:
    """Convenience function: resolve every reference in ``table``.

    Parameters
    ----------
    table:
        A fully registered symbol table.
    mentions:
        Inline prose mentions to resolve as well.
    workers:
        Thread count for parallel resolution.

    Returns
    -------
    ResolutionResult
        Links and UNRESOLVED_REFERENCE diagnostics.
    """
    return Resolver(table, workers=workers).resolve_all(mentions)
