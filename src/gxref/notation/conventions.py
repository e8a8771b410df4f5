"""Fixed notation conventions used by every grammar block in the book.

Grammar notation:
    ``→``           production arrow (``->`` accepted when typing plain text)
    ``|``           alternation between right-hand sides
    ``**x**``       terminal: literal keyword or punctuation, in bold
    ``*x*``         nonterminal: syntactic category, in italics
    ``<sub>opt</sub>``  the preceding nonterminal is optional

The plain-text form drops the styling: nonterminals are bare
kebab-case words, ``_opt`` is appended to optional ones, and terminals
are written bare when they are plain punctuation or between backquotes
otherwise::

    getter-setter-block → { getter-clause setter-clause_opt }
    getter-clause → attributes_opt mutation-modifier_opt `get` code-block
"""
from __future__ import annotations

import re
from typing import Final

ARROW: Final[str] = "→"
ASCII_ARROW: Final[str] = "->"
BAR: Final[str] = "|"
OPT: Final[str] = "opt"

PLAIN_OPT_SUFFIX: Final[str] = "_opt"
MARKDOWN_OPT: Final[str] = "<sub>opt</sub>"
UNDERSCORE_OPT: Final[str] = "_opt_"

SYMBOL_NAME: Final[re.Pattern[str]] = re.compile(
    r"[A-Za-z][A-Za-z0-9]*(?:-[A-Za-z0-9]+)*"
)
KEBAB_CASE: Final[re.Pattern[str]] = re.compile(r"[a-z][a-z0-9]*(?:-[a-z0-9]+)*")

# Characters that may appear in an unquoted plain-text terminal.
BARE_TERMINAL_CHARS: Final[frozenset[str]] = frozenset("{}()[],.;:=<>?!&+%^~#@$/\\-")

DEFAULT_ANCHOR_PREFIX: Final[str] = "grammar_"


def is_symbol_name(text: str) -> bool:
    """Return True if ``text`` is a valid grammar symbol name."""
    return SYMBOL_NAME.fullmatch(text) is not None


def default_anchor(name: str, prefix: str = DEFAULT_ANCHOR_PREFIX) -> str:
    """Return the anchor the book uses for ``name`` when none is given."""
    return f"{prefix}{name}"
