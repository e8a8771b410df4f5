"""Grammar notation module.

Exports token definitions, the notation lexer and the fixed notation
constants.
"""
from __future__ import annotations

from gxref.notation.conventions import (
    ARROW,
    BAR,
    DEFAULT_ANCHOR_PREFIX,
    OPT,
    default_anchor,
    is_symbol_name,
)
from gxref.notation.lexer import NotationError, NotationLexer, tokenize
from gxref.notation.tokens import Token, TokenType

__all__ = [
    "ARROW",
    "BAR",
    "OPT",
    "DEFAULT_ANCHOR_PREFIX",
    "default_anchor",
    "is_symbol_name",
    "NotationError",
    "NotationLexer",
    "tokenize",
    "Token",
    "TokenType",
]
