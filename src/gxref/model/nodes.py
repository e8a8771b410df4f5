"""Grammar model for the book's cross-referenced productions.

A grammar production in the book reads::

    getter-setter-block → { getter-clause setter-clause_opt }

and is represented here as a ``ProductionRule`` owned by the symbol
``getter-setter-block``, holding one ``Alternative`` of four
``Element`` values.  Elements are a tagged union of ``Terminal`` and
``Nonterminal``; only a ``Nonterminal`` may carry the optional marker.

Every value type is a frozen dataclass so rules can be hashed, compared
structurally, and shared between threads during document-parallel
parsing.  ``Symbol`` is the one mutable type: it is owned by the
``SymbolTable`` and only changes during the sequential registration
phase.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, Union


# ---------------------------------------------------------------------------
# Source location
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True, order=True)
class SourceLocation:
    """Where a rule or mention appears in the book.

    Parameters
    ----------
    document:
        Identifier of the document, usually its path relative to the
        book root (e.g. ``"ReferenceManual/Declarations.md"``).
    anchor:
        Anchor/slug of the grammar block or mention, if any.
    line:
        1-based line number, or 0 when unknown.
    """

    document: str
    anchor: str = ""
    line: int = 0

    def __str__(self) -> str:
        parts = [self.document or "<unknown>"]
        if self.line:
            parts.append(str(self.line))
        text = ":".join(parts)
        if self.anchor:
            text += f"#{self.anchor}"
        return text

    @classmethod
    def unknown(cls) -> "SourceLocation":
        """Return a sentinel location used when position info is unavailable."""
        return cls(document="", anchor="", line=0)


# ---------------------------------------------------------------------------
# Elements
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Terminal:
    """A literal keyword or punctuation token, rendered in bold."""

    text: str

    def __str__(self) -> str:
        return self.text


@dataclass(frozen=True, slots=True)
class Nonterminal:
    """A reference to a syntactic category, rendered in italics.

    Parameters
    ----------
    name:
        The referenced symbol name.
    optional:
        ``True`` when the reference carries the trailing "opt" marker.
    """

    name: str
    optional: bool = False

    def __str__(self) -> str:
        return f"{self.name}_opt" if self.optional else self.name


Element = Union[Terminal, Nonterminal]


# ---------------------------------------------------------------------------
# Rules
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Alternative:
    """One right-hand-side form of a production; never empty."""

    elements: tuple[Element, ...]

    def __post_init__(self) -> None:
        if not self.elements:
            raise ValueError("an Alternative must contain at least one element")

    def __iter__(self) -> Iterator[Element]:
        return iter(self.elements)

    def __len__(self) -> int:
        return len(self.elements)

    def nonterminals(self) -> Iterator[tuple[int, Nonterminal]]:
        """Yield ``(index, element)`` for every nonterminal, in order."""
        for index, element in enumerate(self.elements):
            if isinstance(element, Nonterminal):
                yield index, element


@dataclass(frozen=True, slots=True)
class ProductionRule:
    """One ``name → alternative (| alternative)*`` line.

    ``location`` does not take part in equality or hashing: two rules
    with the same name and alternatives are the same rule wherever they
    were declared.
    """

    name: str
    alternatives: tuple[Alternative, ...]
    location: SourceLocation = field(
        default_factory=SourceLocation.unknown, compare=False
    )

    def __len__(self) -> int:
        return len(self.alternatives)


# ---------------------------------------------------------------------------
# Symbols
# ---------------------------------------------------------------------------


@dataclass(eq=False)
class Symbol:
    """A named syntactic category and everything that defines it.

    Parameters
    ----------
    name:
        Unique symbol name.
    anchor:
        Canonical anchor.  Fixed by the first registration.
    document:
        Document that holds the canonical anchor.
    rules:
        Production rules merged under this symbol, in registration order.
    conflicting_anchors:
        Later anchors that clashed with ``anchor``, in arrival order.
    """

    name: str
    anchor: str
    document: str = ""
    rules: list[ProductionRule] = field(default_factory=list)
    conflicting_anchors: list[str] = field(default_factory=list)

    def __hash__(self) -> int:
        return hash(self.name)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Symbol):
            return NotImplemented
        return (
            self.name == other.name
            and self.anchor == other.anchor
            and self.document == other.document
            and self.rules == other.rules
        )

    @property
    def alternatives(self) -> tuple[Alternative, ...]:
        """All alternatives of all rules, in registration order."""
        return tuple(alt for rule in self.rules for alt in rule.alternatives)

    @property
    def location(self) -> SourceLocation:
        """Location of the canonical definition, with its line when known."""
        if self.rules and self.rules[0].location.document == self.document:
            return self.rules[0].location
        return SourceLocation(document=self.document, anchor=self.anchor)
