"""Symbol Table: the canonical registry of grammar symbols.

Every symbol name maps to exactly one canonical anchor, fixed by the
first registration.  Further rules for the same name are merged under
that anchor; a rule that arrives with a *different* anchor is still
merged, and the clash is recorded as a DUPLICATE_DEFINITION diagnostic
for the author to fix.

The table is written only during the sequential registration phase of
a build.  Resolution and rendering read it without locking.

Usage
-----
::

    from gxref.symbols import SymbolTable

    table = SymbolTable()
    table.register("pattern", "grammar_pattern", rule, document="Patterns.md")
    symbol = table.lookup("pattern")
"""
from __future__ import annotations

import logging
from collections.abc import Iterator, KeysView, ValuesView
from dataclasses import replace

from gxref.diagnostics.diagnostics import Diagnostic, duplicate_definition
from gxref.model.nodes import ProductionRule, SourceLocation, Symbol
from gxref.notation.conventions import DEFAULT_ANCHOR_PREFIX, default_anchor

logger = logging.getLogger(__name__)


class SymbolNotFoundError(KeyError):
    """Raised by ``SymbolTable.get`` when a name has no definition."""

    def __init__(self, name: str) -> None:
        self.symbol_name = name
        super().__init__(
            f"Symbol {name!r} is not defined in any document. "
            "Check the spelling or add a rule that defines it."
        )


class SymbolTable:
    """Registry mapping symbol names to their definitions."""

    def __init__(self, anchor_prefix: str = DEFAULT_ANCHOR_PREFIX) -> None:
        self._anchor_prefix = anchor_prefix
        self._symbols: dict[str, Symbol] = {}
        self._duplicates: dict[str, Diagnostic] = {}

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def register(
        self,
        name: str,
        anchor: str,
        rule: ProductionRule,
        document: str = "",
    ) -> Symbol:
        """Add ``rule`` to the symbol called ``name``.

        Parameters
        ----------
        name:
            The defined symbol's name.
        anchor:
            The anchor under which this rule is declared.  Empty means the
            rule carries no anchor of its own: it joins the symbol's
            canonical anchor, or derives one from ``anchor_prefix`` when it
            is the first rule for ``name``.
        rule:
            The parsed rule.  A rule without a location anchor is stored
            with the anchor it was registered under.
        document:
            Identifier of the declaring document.

        Returns
        -------
        Symbol
            The (possibly newly created) symbol.
        """
        symbol = self._symbols.get(name)
        if not anchor and symbol is not None:
            anchor = symbol.anchor
        elif not anchor:
            anchor = default_anchor(name, self._anchor_prefix)
        if not rule.location.anchor:
            rule = replace(rule, location=replace(rule.location, anchor=anchor))

        if symbol is None:
            symbol = Symbol(name=name, anchor=anchor, document=document)
            self._symbols[name] = symbol
            logger.debug("Registered symbol %r at %s#%s", name, document, anchor)
        elif anchor != symbol.anchor and anchor not in symbol.conflicting_anchors:
            symbol.conflicting_anchors.append(anchor)
            first = self._duplicates.get(name)
            location = first.location if first is not None else rule.location
            if not location.document:
                location = SourceLocation(document=document, anchor=anchor)
            self._duplicates[name] = duplicate_definition(
                name, symbol.anchor, symbol.conflicting_anchors, location
            )
            logger.debug(
                "Symbol %r redefined at anchor %r; keeping canonical anchor %r",
                name,
                anchor,
                symbol.anchor,
            )

        if rule not in symbol.rules:
            symbol.rules.append(rule)
        return symbol

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def lookup(self, name: str) -> Symbol | None:
        """Return the symbol called ``name``, or ``None`` if it is not defined."""
        return self._symbols.get(name)

    def get(self, name: str) -> Symbol:
        """Return the symbol called ``name``.

        Raises
        ------
        SymbolNotFoundError
            If ``name`` is not defined.
        """
        try:
            return self._symbols[name]
        except KeyError:
            raise SymbolNotFoundError(name) from None

    def all_symbols(self) -> ValuesView[Symbol]:
        """Return a live view of every registered symbol."""
        return self._symbols.values()

    def names(self) -> list[str]:
        """Return all symbol names in alphabetical order."""
        return sorted(self._symbols)

    def keys(self) -> KeysView[str]:
        return self._symbols.keys()

    @property
    def diagnostics(self) -> list[Diagnostic]:
        """One DUPLICATE_DEFINITION per clashing symbol, in order of first clash."""
        return list(self._duplicates.values())

    def __contains__(self, name: object) -> bool:
        return name in self._symbols

    def __len__(self) -> int:
        return len(self._symbols)

    def __iter__(self) -> Iterator[Symbol]:
        return iter(self._symbols.values())

    def __repr__(self) -> str:
        return f"SymbolTable(symbols={len(self._symbols)}, diagnostics={len(self._duplicates)})"
