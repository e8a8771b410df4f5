"""Token definitions for the book's grammar notation.

The notation has very few moving parts: the production arrow, the
alternation bar, terminals (bold in the book, quoted in plain text),
nonterminals (italic in the book, bare words in plain text), and the
"opt" marker that follows an optional nonterminal.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto


class TokenType(Enum):
    """All token kinds produced by the notation lexer."""

    ARROW = auto()
    BAR = auto()
    TERMINAL = auto()
    NONTERMINAL = auto()
    OPT = auto()
    EOF = auto()


@dataclass(frozen=True, slots=True)
class Token:
    """A single scanned token.

    Parameters
    ----------
    type:
        The token category.
    value:
        Terminal text, nonterminal name, or the raw arrow/bar/marker text.
    col:
        1-based column of the first character of the token.
    """

    type: TokenType
    value: str
    col: int

    def __repr__(self) -> str:
        return f"Token({self.type.name}, {self.value!r}, col {self.col})"
