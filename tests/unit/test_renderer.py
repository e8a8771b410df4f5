"""Unit tests for gxref.renderer — the Renderer, layouts, the built-in
Markdown/HTML/plain-text formats, and reading rendered text back.
"""
from __future__ import annotations

import pytest

from gxref.model.nodes import ProductionRule, SourceLocation
from gxref.production.parser import parse_rule, parse_rules
from gxref.renderer.formats import to_html, to_markdown, to_plain_text
from gxref.renderer.renderer import (
    Layout,
    Renderer,
    SegmentKind,
    code_span,
    plain_rule_text,
    plain_terminal,
    render,
)

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

_HREFS = {
    "getter-clause": "#grammar_getter-clause",
    "setter-clause": "Declarations.html#grammar_setter-clause",
}


def _resolve(name: str) -> str | None:
    return _HREFS.get(name)


def _rule(text: str) -> ProductionRule:
    result = parse_rule(text, SourceLocation("Declarations.md"))
    assert isinstance(result, ProductionRule), str(result)
    return result


_GETTER_SETTER = "getter-setter-block → { getter-clause setter-clause_opt }"
_PATTERN = "pattern → wildcard-pattern | identifier-pattern"


# ===========================================================================
# Display structure
# ===========================================================================


class TestRenderer:
    def test_inline_segments(self) -> None:
        rendered = render(_rule(_PATTERN))
        assert len(rendered.lines) == 1
        assert [s.kind for s in rendered.lines[0].segments] == [
            SegmentKind.SYMBOL,
            SegmentKind.ARROW,
            SegmentKind.CATEGORY,
            SegmentKind.BAR,
            SegmentKind.CATEGORY,
        ]
        assert not rendered.is_stacked

    def test_stacked_lines(self) -> None:
        rendered = render(_rule(_PATTERN), layout=Layout.STACKED)
        assert len(rendered.lines) == 2
        assert not rendered.lines[0].is_continuation
        assert rendered.lines[1].is_continuation
        assert rendered.is_stacked

    def test_single_alternative_never_stacks(self) -> None:
        rendered = render(_rule("a → b"), layout=Layout.STACKED)
        assert len(rendered.lines) == 1

    def test_auto_layout_stacks_when_too_wide(self) -> None:
        rule = _rule(_PATTERN)
        assert len(plain_rule_text(rule)) > 20
        assert render(rule, layout=Layout.AUTO, max_width=20).is_stacked
        assert not render(rule, layout=Layout.AUTO, max_width=200).is_stacked

    def test_alternatives_are_layout_independent(self) -> None:
        rule = _rule(_PATTERN)
        assert (
            render(rule, layout=Layout.INLINE).alternatives
            == render(rule, layout=Layout.STACKED).alternatives
        )

    def test_opt_follows_its_category(self) -> None:
        rendered = render(_rule(_GETTER_SETTER), _resolve)
        kinds = [s.kind for s in rendered.alternatives[0]]
        assert kinds == [
            SegmentKind.LITERAL,
            SegmentKind.CATEGORY,
            SegmentKind.CATEGORY,
            SegmentKind.OPT,
            SegmentKind.LITERAL,
        ]

    def test_resolved_categories_are_links(self) -> None:
        rendered = render(_rule(_GETTER_SETTER), _resolve)
        hrefs = {s.text: s.href for s in rendered.categories()}
        assert hrefs == {
            "getter-clause": "#grammar_getter-clause",
            "setter-clause": "Declarations.html#grammar_setter-clause",
        }

    def test_unresolved_category_is_not_a_link(self) -> None:
        rendered = render(_rule("a → missing-symbol"), _resolve)
        (category,) = rendered.categories()
        assert category.text == "missing-symbol"
        assert category.href is None
        assert not category.is_link

    def test_no_resolver_means_no_links(self) -> None:
        rendered = render(_rule(_GETTER_SETTER))
        assert all(s.href is None for s in rendered.categories())

    def test_anchor_passes_through(self) -> None:
        rendered = Renderer().render(_rule("a → b"), anchor="grammar_a")
        assert rendered.anchor == "grammar_a"

    def test_invalid_max_width(self) -> None:
        with pytest.raises(ValueError):
            Renderer(max_width=0)


# ===========================================================================
# Markdown
# ===========================================================================


class TestMarkdownFormat:
    def test_getter_setter_block(self) -> None:
        text = to_markdown(render(_rule(_GETTER_SETTER), _resolve))
        assert text == (
            "*getter-setter-block* → **`{`** [*getter-clause*](#grammar_getter-clause) "
            "[*setter-clause*](Declarations.html#grammar_setter-clause)<sub>opt</sub> **`}`**"
        )

    def test_unresolved_is_plain_italic(self) -> None:
        assert to_markdown(render(_rule("a → missing-symbol"), _resolve)) == "*a* → *missing-symbol*"

    def test_anchor_tag(self) -> None:
        rendered = Renderer().render(_rule("a → b"), anchor="grammar_a")
        assert to_markdown(rendered).startswith('<a id="grammar_a"></a>\n*a* →')

    def test_stacked_uses_line_breaks(self) -> None:
        text = to_markdown(render(_rule(_PATTERN), layout=Layout.STACKED))
        assert text == "*pattern* → *wildcard-pattern*  \n| *identifier-pattern*"

    def test_literal_bar_is_code(self) -> None:
        text = to_markdown(render(_rule("union → type `|` type")))
        assert "**`|`**" in text

    def test_markdown_reads_back(self) -> None:
        rule = _rule(_GETTER_SETTER)
        assert parse_rule(to_markdown(render(rule, _resolve))) == rule


# ===========================================================================
# HTML
# ===========================================================================


class TestHtmlFormat:
    def test_links_and_literals(self) -> None:
        text = to_html(render(_rule(_GETTER_SETTER), _resolve))
        assert text.startswith('<p class="grammar-rule">')
        assert text.endswith("</p>")
        assert '<a href="#grammar_getter-clause">getter-clause</a>' in text
        assert '<strong class="literal"><code>{</code></strong>' in text
        assert "setter-clause</a></em><sub>opt</sub>" in text

    def test_escapes_literals(self) -> None:
        text = to_html(render(_rule("generic → `<` type `>`")))
        assert "<code>&lt;</code>" in text
        assert "<code>&gt;</code>" in text

    def test_unresolved_is_not_linked(self) -> None:
        text = to_html(render(_rule("a → missing-symbol"), _resolve))
        assert "<a " not in text
        assert '<em class="syntactic-category">missing-symbol</em>' in text

    def test_anchor_becomes_id(self) -> None:
        rendered = Renderer().render(_rule("a → b"), anchor="grammar_a")
        assert to_html(rendered).startswith('<p class="grammar-rule" id="grammar_a">')

    def test_stacked_lines_use_br(self) -> None:
        text = to_html(render(_rule(_PATTERN), layout=Layout.STACKED))
        assert text.count("<br>") == 1


# ===========================================================================
# Plain text
# ===========================================================================


class TestPlainTextFormat:
    def test_getter_setter_block(self) -> None:
        rendered = render(_rule(_GETTER_SETTER), _resolve)
        assert to_plain_text(rendered) == _GETTER_SETTER

    def test_keywords_are_backquoted(self) -> None:
        text = "getter-clause → attributes_opt `get` code-block"
        assert to_plain_text(render(_rule(text))) == text

    def test_stacked_continuation_lines(self) -> None:
        text = to_plain_text(render(_rule(_PATTERN), layout=Layout.STACKED))
        assert text == "pattern → wildcard-pattern\n  | identifier-pattern"

    @pytest.mark.parametrize(
        "text",
        [
            _GETTER_SETTER,
            _PATTERN,
            "function-result → `->` attributes_opt type",
            "union → type `|` type",
            "code → `` a`b `` | `'` | `→`",
            "statements → statement statements_opt",
            "tuple → ( tuple-elements_opt ) | ( )",
        ],
    )
    def test_plain_text_reads_back(self, text: str) -> None:
        rule = _rule(text)
        for layout in Layout:
            rendered = render(rule, _resolve, layout=layout, max_width=10)
            outcome = parse_rules(to_plain_text(rendered))
            assert outcome.diagnostics == []
            assert outcome.rules == [rule]


# ===========================================================================
# Helpers
# ===========================================================================


class TestNotationHelpers:
    def test_code_span_simple(self) -> None:
        assert code_span("get") == "`get`"

    def test_code_span_with_backquote(self) -> None:
        assert code_span("a`b") == "`` a`b ``"

    def test_plain_terminal_bare_punctuation(self) -> None:
        assert plain_terminal("{") == "{"
        assert plain_terminal("...") == "..."

    def test_plain_terminal_quotes_keywords_and_arrow(self) -> None:
        assert plain_terminal("get") == "`get`"
        assert plain_terminal("->") == "`->`"
        assert plain_terminal("|") == "`|`"

    def test_plain_rule_text(self) -> None:
        assert plain_rule_text(_rule(_PATTERN)) == _PATTERN
