"""Notation lexer: converts one raw grammar line into a flat token list.

The lexer accepts the book's Markdown styling and the plain-text form
described in ``gxref.notation.conventions``, and both may be mixed on a
single line.  It tracks the column of every token so malformed rules
can be reported precisely.

Recognised spans:
    - ``**x**`` and ``**`x`**``     terminal
    - `` `x` `` and ``'x'``          terminal
    - ``*x*``, ``_x_``, ``[*x*](href)``  nonterminal
    - bare ``kebab-case`` word       nonterminal (``_opt`` suffix marks it optional)
    - ``<sub>opt</sub>``, ``_opt_``  optional marker
    - ``→``, ``->``                  arrow
    - ``|``                          alternation bar
    - any other run of punctuation   terminal
"""
from __future__ import annotations

import re
from typing import Final

from gxref.notation.conventions import (
    ARROW,
    ASCII_ARROW,
    BAR,
    MARKDOWN_OPT,
    PLAIN_OPT_SUFFIX,
    SYMBOL_NAME,
    UNDERSCORE_OPT,
    is_symbol_name,
)
from gxref.notation.tokens import Token, TokenType

_LINK: Final[re.Pattern[str]] = re.compile(r"\[\*([^*\]]+)\*\]\(([^)\s]*)\)")
_UNDERSCORE_ITALIC: Final[re.Pattern[str]] = re.compile(r"_([A-Za-z][A-Za-z0-9-]*)_")
_WORD_RUN: Final[re.Pattern[str]] = re.compile(r"[A-Za-z0-9_-]+")

# Characters that always end a bare punctuation run.
_RUN_BREAKS: Final[frozenset[str]] = frozenset("|→*`'")


class NotationError(Exception):
    """Raised when a grammar line cannot be tokenized.

    Parameters
    ----------
    message:
        Human-readable description of the problem.
    col:
        1-based column where the error occurred.
    """

    def __init__(self, message: str, col: int) -> None:
        super().__init__(f"column {col}: {message}")
        self.notation_message = message
        self.col = col


class NotationLexer:
    """Single-pass lexer for one line of grammar notation.

    Parameters
    ----------
    text:
        The raw rule text.
    """

    __slots__ = ("_text", "_pos", "_tokens")

    def __init__(self, text: str) -> None:
        self._text: str = text
        self._pos: int = 0
        self._tokens: list[Token] = []

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def tokenize(self) -> list[Token]:
        """Scan the entire line and return the token list, ending with ``EOF``.

        Raises
        ------
        NotationError
            On an unterminated span or an invalid nonterminal name.
        """
        while self._pos < len(self._text):
            if self._text[self._pos].isspace():
                self._pos += 1
                continue
            self._scan_one()
        self._emit(TokenType.EOF, "", self._pos)
        return self._tokens

    # ------------------------------------------------------------------
    # Internal scanner
    # ------------------------------------------------------------------

    def _emit(self, token_type: TokenType, value: str, start: int) -> None:
        self._tokens.append(Token(type=token_type, value=value, col=start + 1))

    def _startswith(self, prefix: str) -> bool:
        return self._text.startswith(prefix, self._pos)

    def _peek(self, offset: int = 1) -> str:
        index = self._pos + offset
        return self._text[index] if index < len(self._text) else ""

    def _scan_one(self) -> None:
        start = self._pos
        ch = self._text[start]

        if ch == ARROW:
            self._pos += 1
            self._emit(TokenType.ARROW, ARROW, start)
        elif ch == BAR:
            self._pos += 1
            self._emit(TokenType.BAR, BAR, start)
        elif self._startswith("**"):
            self._scan_bold(start)
        elif ch == "*" and self._peek() not in ("", " ", "\t"):
            self._scan_star_italic(start)
        elif ch == "`":
            self._emit(TokenType.TERMINAL, self._read_backquoted(), start)
        elif ch == "'" and self._scan_single_quoted(start):
            pass
        elif self._startswith(MARKDOWN_OPT):
            self._pos += len(MARKDOWN_OPT)
            self._emit(TokenType.OPT, MARKDOWN_OPT, start)
        elif self._startswith(UNDERSCORE_OPT):
            self._pos += len(UNDERSCORE_OPT)
            self._emit(TokenType.OPT, UNDERSCORE_OPT, start)
        elif ch == "[" and self._scan_link(start):
            pass
        elif ch == "_" and self._scan_underscore_italic(start):
            pass
        elif ch.isascii() and ch.isalpha():
            self._scan_word(start)
        else:
            self._scan_bare_run(start)

    def _scan_bold(self, start: int) -> None:
        self._pos += 2
        while self._pos < len(self._text) and self._text[self._pos] == " ":
            self._pos += 1
        if self._peek(0) == "`":
            value = self._read_backquoted()
            while self._pos < len(self._text) and self._text[self._pos] == " ":
                self._pos += 1
            if not self._startswith("**"):
                raise NotationError("unterminated bold terminal", start + 1)
            self._pos += 2
        else:
            end = self._text.find("**", self._pos)
            if end == -1:
                raise NotationError("unterminated bold terminal", start + 1)
            value = self._text[self._pos:end].strip()
            self._pos = end + 2
        if not value:
            raise NotationError("empty bold terminal", start + 1)
        self._emit(TokenType.TERMINAL, value, start)

    def _scan_star_italic(self, start: int) -> None:
        end = self._text.find("*", start + 1)
        if end == -1:
            raise NotationError("unterminated italic category", start + 1)
        self._pos = end + 1
        self._emit(TokenType.NONTERMINAL, self._checked_name(self._text[start + 1:end], start), start)

    def _read_backquoted(self) -> str:
        start = self._pos
        ticks = 0
        while self._peek(0) == "`":
            ticks += 1
            self._pos += 1
        fence = "`" * ticks
        end = self._text.find(fence, self._pos)
        if end == -1:
            raise NotationError("unterminated code span", start + 1)
        value = self._text[self._pos:end]
        self._pos = end + ticks
        if ticks > 1 and value.startswith(" ") and value.endswith(" ") and value.strip():
            value = value[1:-1]
        if not value:
            raise NotationError("empty code span", start + 1)
        return value

    def _scan_single_quoted(self, start: int) -> bool:
        end = self._text.find("'", start + 1)
        if end <= start + 1:
            return False
        self._pos = end + 1
        self._emit(TokenType.TERMINAL, self._text[start + 1:end], start)
        return True

    def _scan_link(self, start: int) -> bool:
        match = _LINK.match(self._text, start)
        if match is None:
            return False
        self._pos = match.end()
        self._emit(TokenType.NONTERMINAL, self._checked_name(match.group(1), start), start)
        return True

    def _scan_underscore_italic(self, start: int) -> bool:
        match = _UNDERSCORE_ITALIC.match(self._text, start)
        if match is None:
            return False
        self._pos = match.end()
        self._emit(TokenType.NONTERMINAL, self._checked_name(match.group(1), start), start)
        return True

    def _scan_word(self, start: int) -> None:
        match = SYMBOL_NAME.match(self._text, start)
        assert match is not None
        self._pos = match.end()
        self._emit(TokenType.NONTERMINAL, match.group(0), start)
        if self._startswith(UNDERSCORE_OPT):
            return
        if self._startswith(PLAIN_OPT_SUFFIX):
            after = self._peek(len(PLAIN_OPT_SUFFIX))
            if not (after.isalnum() or after in ("_", "-")):
                opt_start = self._pos
                self._pos += len(PLAIN_OPT_SUFFIX)
                self._emit(TokenType.OPT, PLAIN_OPT_SUFFIX, opt_start)
                return
        if self._peek(0) == "_":
            word = _WORD_RUN.match(self._text, start)
            assert word is not None
            raise NotationError(
                f"invalid category name {word.group(0)!r}; only {PLAIN_OPT_SUFFIX!r} may follow a name",
                start + 1,
            )

    def _scan_bare_run(self, start: int) -> None:
        self._pos += 1
        while self._pos < len(self._text):
            ch = self._text[self._pos]
            if ch.isspace() or (ch.isascii() and ch.isalpha()) or ch in _RUN_BREAKS:
                break
            if self._startswith(MARKDOWN_OPT):
                break
            self._pos += 1
        value = self._text[start:self._pos]
        if value == ASCII_ARROW:
            self._emit(TokenType.ARROW, value, start)
        else:
            self._emit(TokenType.TERMINAL, value, start)

    @staticmethod
    def _checked_name(raw: str, start: int) -> str:
        name = raw.strip()
        if not is_symbol_name(name):
            raise NotationError(f"invalid category name {raw!r}", start + 1)
        return name


def tokenize(text: str) -> list[Token]:
    """Convenience function: tokenize ``text`` and return the token list.

    Raises
    ------
    NotationError
        If ``text`` cannot be tokenized.
    """
    return NotationLexer(text).tokenize()
