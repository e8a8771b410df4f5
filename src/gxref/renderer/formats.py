"""Built-in output formats: Markdown, HTML and plain text.

Markdown is what the book's chapters are written in::

    *getter-setter-block* → **`{`** [*getter-clause*](#grammar_getter-clause) ...

HTML is what the page shell embeds, and plain text is the notation that
``gxref.production.parse_rule`` reads back without loss.
"""
from __future__ import annotations

import html

from gxref.renderer.registry import FormatRegistry, OutputFormat
from gxref.renderer.renderer import (
    RenderedLine,
    RenderedRule,
    Segment,
    SegmentKind,
    code_span,
    plain_terminal,
)

formats = FormatRegistry()


def _join(pieces: list[tuple[SegmentKind, str]]) -> str:
    """Join formatted pieces with spaces, attaching OPT markers to their category."""
    out = ""
    for kind, text in pieces:
        if out and kind is not SegmentKind.OPT:
            out += " "
        out += text
    return out


@formats.register("markdown")
class MarkdownFormat(OutputFormat):
    """The book's Markdown notation, with links for resolved categories."""

    def format_rule(self, rendered: RenderedRule) -> str:
        lines = [self._line(line) for line in rendered.lines]
        text = "  \n".join(lines)
        if rendered.anchor:
            text = f'<a id="{rendered.anchor}"></a>\n{text}'
        return text

    def _line(self, line: RenderedLine) -> str:
        return _join([(s.kind, self._segment(s)) for s in line.segments])

    @staticmethod
    def _segment(segment: Segment) -> str:
        if segment.kind is SegmentKind.SYMBOL:
            return f"*{segment.text}*"
        if segment.kind is SegmentKind.LITERAL:
            return f"**{code_span(segment.text)}**"
        if segment.kind is SegmentKind.CATEGORY:
            if segment.href is not None:
                return f"[*{segment.text}*]({segment.href})"
            return f"*{segment.text}*"
        if segment.kind is SegmentKind.OPT:
            return f"<sub>{segment.text}</sub>"
        return segment.text


@formats.register("html")
class HtmlFormat(OutputFormat):
    """HTML fragment; stacked alternatives are separated by ``<br>``."""

    def format_rule(self, rendered: RenderedRule) -> str:
        body = "<br>\n".join(self._line(line) for line in rendered.lines)
        id_attr = f' id="{html.escape(rendered.anchor)}"' if rendered.anchor else ""
        return f'<p class="grammar-rule"{id_attr}>{body}</p>'

    def _line(self, line: RenderedLine) -> str:
        return _join([(s.kind, self._segment(s)) for s in line.segments])

    @staticmethod
    def _segment(segment: Segment) -> str:
        text = html.escape(segment.text)
        if segment.kind is SegmentKind.SYMBOL:
            return f'<em class="syntactic-category">{text}</em>'
        if segment.kind is SegmentKind.LITERAL:
            return f'<strong class="literal"><code>{text}</code></strong>'
        if segment.kind is SegmentKind.CATEGORY:
            if segment.href is not None:
                href = html.escape(segment.href)
                return f'<em class="syntactic-category"><a href="{href}">{text}</a></em>'
            return f'<em class="syntactic-category">{text}</em>'
        if segment.kind is SegmentKind.OPT:
            return f"<sub>{text}</sub>"
        return text


@formats.register("text")
class PlainTextFormat(OutputFormat):
    """Unstyled notation that ``parse_rule``/``parse_rules`` read back."""

    def format_rule(self, rendered: RenderedRule) -> str:
        return "\n".join(self._line(line) for line in rendered.lines)

    def _line(self, line: RenderedLine) -> str:
        pieces: list[tuple[SegmentKind, str]] = []
        for segment in line.segments:
            if segment.kind is SegmentKind.LITERAL:
                pieces.append((segment.kind, plain_terminal(segment.text)))
            elif segment.kind is SegmentKind.OPT:
                pieces.append((segment.kind, f"_{segment.text}"))
            else:
                pieces.append((segment.kind, segment.text))
        text = _join(pieces)
        return f"  {text}" if line.is_continuation else text


def to_markdown(rendered: RenderedRule) -> str:
    return MarkdownFormat().format_rule(rendered)


def to_html(rendered: RenderedRule) -> str:
    return HtmlFormat().format_rule(rendered)


def to_plain_text(rendered: RenderedRule) -> str:
    return PlainTextFormat().format_rule(rendered)
