"""Unit tests for gxref.notation.lexer — every span form of the grammar
notation, columns, and lexer errors.
"""
from __future__ import annotations

import pytest

from gxref.notation.conventions import default_anchor, is_symbol_name
from gxref.notation.lexer import NotationError, NotationLexer, tokenize
from gxref.notation.tokens import Token, TokenType

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _types(text: str) -> list[TokenType]:
    return [t.type for t in tokenize(text)]


def _values(text: str) -> list[str]:
    return [t.value for t in tokenize(text) if t.type is not TokenType.EOF]


# ===========================================================================
# Plain notation
# ===========================================================================


class TestPlainNotation:
    def test_empty_input_is_just_eof(self) -> None:
        assert _types("") == [TokenType.EOF]

    def test_whitespace_only_is_just_eof(self) -> None:
        assert _types("   \t ") == [TokenType.EOF]

    def test_simple_rule(self) -> None:
        assert _types("a → b | c") == [
            TokenType.NONTERMINAL,
            TokenType.ARROW,
            TokenType.NONTERMINAL,
            TokenType.BAR,
            TokenType.NONTERMINAL,
            TokenType.EOF,
        ]

    def test_ascii_arrow(self) -> None:
        tokens = tokenize("a -> b")
        assert tokens[1].type is TokenType.ARROW
        assert tokens[1].value == "->"

    def test_ascii_arrow_without_spaces(self) -> None:
        assert _types("a->b") == [
            TokenType.NONTERMINAL,
            TokenType.ARROW,
            TokenType.NONTERMINAL,
            TokenType.EOF,
        ]

    def test_kebab_case_word_is_single_nonterminal(self) -> None:
        tokens = tokenize("getter-setter-block")
        assert tokens[0] == Token(TokenType.NONTERMINAL, "getter-setter-block", 1)

    def test_opt_suffix(self) -> None:
        tokens = tokenize("setter-clause_opt")
        assert tokens[0].type is TokenType.NONTERMINAL
        assert tokens[0].value == "setter-clause"
        assert tokens[1].type is TokenType.OPT

    def test_bare_punctuation_is_terminal(self) -> None:
        assert _values("{ } ( ) ;") == ["{", "}", "(", ")", ";"]
        assert all(t is TokenType.TERMINAL for t in _types("{ } ( ) ;")[:-1])

    def test_punctuation_run_is_one_terminal(self) -> None:
        assert _values("a → ... b") == ["a", "→", "...", "b"]

    def test_backquoted_keyword_is_terminal(self) -> None:
        tokens = tokenize("`get`")
        assert tokens[0] == Token(TokenType.TERMINAL, "get", 1)

    def test_single_quoted_keyword_is_terminal(self) -> None:
        tokens = tokenize("'set'")
        assert tokens[0] == Token(TokenType.TERMINAL, "set", 1)

    def test_double_backquote_fence_holds_backquote(self) -> None:
        assert _values("`` a`b ``") == ["a`b"]

    def test_backquoted_bar_is_not_alternation(self) -> None:
        assert _types("`|`") == [TokenType.TERMINAL, TokenType.EOF]

    def test_backquoted_arrow_is_terminal(self) -> None:
        assert _types("`->`") == [TokenType.TERMINAL, TokenType.EOF]

    def test_columns_are_one_based(self) -> None:
        tokens = tokenize("a → b")
        assert [t.col for t in tokens[:3]] == [1, 3, 5]


# ===========================================================================
# Markdown notation
# ===========================================================================


class TestMarkdownNotation:
    def test_italic_category(self) -> None:
        assert tokenize("*pattern*")[0] == Token(TokenType.NONTERMINAL, "pattern", 1)

    def test_underscore_italic_category(self) -> None:
        assert tokenize("_pattern_")[0] == Token(TokenType.NONTERMINAL, "pattern", 1)

    def test_linked_category(self) -> None:
        tokens = tokenize("[*pattern*](Patterns.md#grammar_pattern)")
        assert tokens[0] == Token(TokenType.NONTERMINAL, "pattern", 1)
        assert tokens[1].type is TokenType.EOF

    def test_bold_terminal(self) -> None:
        assert _values("**get**") == ["get"]

    def test_bold_code_terminal(self) -> None:
        assert _values("**`{`**") == ["{"]

    def test_bold_bar_is_terminal(self) -> None:
        assert _types("**|**") == [TokenType.TERMINAL, TokenType.EOF]
        assert _types("**`|`**") == [TokenType.TERMINAL, TokenType.EOF]

    def test_sub_opt_marker(self) -> None:
        assert _types("*setter-clause*<sub>opt</sub>") == [
            TokenType.NONTERMINAL,
            TokenType.OPT,
            TokenType.EOF,
        ]

    def test_underscore_opt_marker(self) -> None:
        assert _types("*setter-clause* _opt_") == [
            TokenType.NONTERMINAL,
            TokenType.OPT,
            TokenType.EOF,
        ]

    def test_full_markdown_rule(self) -> None:
        text = "*getter-setter-block* → **`{`** *getter-clause* *setter-clause*<sub>opt</sub> **`}`**"
        assert _values(text) == [
            "getter-setter-block",
            "→",
            "{",
            "getter-clause",
            "setter-clause",
            "<sub>opt</sub>",
            "}",
        ]

    def test_mixed_markdown_and_plain(self) -> None:
        assert _types("*a* → b `c`") == [
            TokenType.NONTERMINAL,
            TokenType.ARROW,
            TokenType.NONTERMINAL,
            TokenType.TERMINAL,
            TokenType.EOF,
        ]


# ===========================================================================
# Errors
# ===========================================================================


class TestLexerErrors:
    def test_unterminated_code_span(self) -> None:
        with pytest.raises(NotationError) as exc_info:
            tokenize("a → `get")
        assert exc_info.value.col == 5

    def test_unterminated_bold(self) -> None:
        with pytest.raises(NotationError, match="unterminated bold"):
            tokenize("**get")

    def test_unterminated_bold_code(self) -> None:
        with pytest.raises(NotationError, match="unterminated bold"):
            tokenize("**`{`")

    def test_unterminated_italic(self) -> None:
        with pytest.raises(NotationError, match="unterminated italic"):
            tokenize("*pattern")

    def test_invalid_category_name(self) -> None:
        with pytest.raises(NotationError, match="invalid category name"):
            tokenize("*two words*")

    @pytest.mark.parametrize("text", ["foo_bar", "a → foo_bar", "foo_optional", "foo_"])
    def test_underscore_inside_plain_word(self, text: str) -> None:
        with pytest.raises(NotationError, match="only '_opt' may follow a name"):
            tokenize(text)

    def test_underscore_error_names_the_whole_word(self) -> None:
        with pytest.raises(NotationError) as exc_info:
            tokenize("a → foo_bar-baz")
        assert "'foo_bar-baz'" in str(exc_info.value)
        assert exc_info.value.col == 5

    def test_opt_forms_are_not_errors(self) -> None:
        assert _types("foo_opt") == [TokenType.NONTERMINAL, TokenType.OPT, TokenType.EOF]
        assert _types("foo_opt_") == [TokenType.NONTERMINAL, TokenType.OPT, TokenType.EOF]

    def test_error_message_includes_column(self) -> None:
        with pytest.raises(NotationError) as exc_info:
            tokenize("`x")
        assert "column 1" in str(exc_info.value)
        assert exc_info.value.notation_message == "unterminated code span"

    def test_lexer_class_matches_function(self) -> None:
        assert NotationLexer("a → b").tokenize() == tokenize("a → b")


# ===========================================================================
# Conventions
# ===========================================================================


class TestConventions:
    @pytest.mark.parametrize("name", ["pattern", "getter-clause", "a1-b2", "Type"])
    def test_valid_symbol_names(self, name: str) -> None:
        assert is_symbol_name(name)

    @pytest.mark.parametrize("name", ["", "-a", "a-", "a--b", "a b", "1a", "a_b"])
    def test_invalid_symbol_names(self, name: str) -> None:
        assert not is_symbol_name(name)

    def test_default_anchor(self) -> None:
        assert default_anchor("pattern") == "grammar_pattern"
        assert default_anchor("pattern", prefix="g-") == "g-pattern"
