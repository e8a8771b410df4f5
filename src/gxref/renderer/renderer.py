"""Renderer: resolved ``ProductionRule`` → display structure.

The ``Renderer`` is the single place where the book's notation is
mapped onto presentation: the defined symbol and the arrow, literals in
bold, categories in italics (linked to their definition when the name
resolved), the "opt" marker right after its category, and alternatives
either joined with a bar on one line or stacked one per line.

The result is a ``RenderedRule``: a small tree of lines and segments
that output formats (Markdown, HTML, plain text) turn into text.  An
unresolved name is still rendered, as an italic category without a
link, so a broken reference never blocks the rest of a page.

Usage
-----
::

    from gxref.renderer import Layout, Renderer

    renderer = Renderer(layout=Layout.AUTO, max_width=72)
    rendered = renderer.render(rule, resolution.resolver_for("Patterns.md"))
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto

from gxref.model.nodes import Alternative, Nonterminal, ProductionRule, Terminal
from gxref.notation.conventions import ARROW, ASCII_ARROW, BAR, BARE_TERMINAL_CHARS, OPT
from gxref.resolver.resolver import ResolveFn


def _no_links(name: str) -> str | None:
    return None


class Layout(Enum):
    """How the alternatives of a rule are laid out."""

    INLINE = auto()
    STACKED = auto()
    AUTO = auto()


class SegmentKind(Enum):
    """Presentation role of one rendered piece."""

    SYMBOL = auto()
    ARROW = auto()
    LITERAL = auto()
    CATEGORY = auto()
    OPT = auto()
    BAR = auto()


@dataclass(frozen=True, slots=True)
class Segment:
    """One styled piece of a rendered rule.

    Parameters
    ----------
    kind:
        Presentation role: bold literal, italic category, and so on.
    text:
        The text to display.
    href:
        Link target for a resolved CATEGORY; ``None`` otherwise.
    """

    kind: SegmentKind
    text: str
    href: str | None = None

    @property
    def is_link(self) -> bool:
        return self.href is not None


@dataclass(frozen=True, slots=True)
class RenderedLine:
    """One display line of a rule."""

    segments: tuple[Segment, ...]

    @property
    def is_continuation(self) -> bool:
        """True for stacked lines that start with the alternation bar."""
        return bool(self.segments) and self.segments[0].kind is SegmentKind.BAR


@dataclass(frozen=True, slots=True)
class RenderedRule:
    """A rule ready for embedding in a page.

    Parameters
    ----------
    name:
        The defined symbol.
    lines:
        Display lines, one for INLINE, one per alternative for STACKED.
    alternatives:
        Segments of each alternative, independent of the layout.
    anchor:
        Anchor of the definition, for formats that emit an id.
    """

    name: str
    lines: tuple[RenderedLine, ...]
    alternatives: tuple[tuple[Segment, ...], ...]
    anchor: str | None = None

    @property
    def is_stacked(self) -> bool:
        return len(self.lines) > 1

    def categories(self) -> list[Segment]:
        """Return every CATEGORY segment in display order."""
        return [
            segment
            for line in self.lines
            for segment in line.segments
            if segment.kind is SegmentKind.CATEGORY
        ]


class Renderer:
    """Maps rules onto the book's notation.

    Parameters
    ----------
    layout:
        INLINE joins alternatives with a bar, STACKED puts each on its
        own line, AUTO stacks only when the inline form is wider than
        ``max_width`` characters.
    max_width:
        Column budget used by ``Layout.AUTO``.
    """

    def __init__(self, layout: Layout = Layout.INLINE, max_width: int = 80) -> None:
        if max_width < 1:
            raise ValueError(f"max_width must be positive, got {max_width}")
        self._layout = layout
        self._max_width = max_width

    @property
    def layout(self) -> Layout:
        return self._layout

    def render(
        self,
        rule: ProductionRule,
        resolve_fn: ResolveFn | None = None,
        anchor: str | None = None,
    ) -> RenderedRule:
        """Render ``rule`` using ``resolve_fn`` to link categories.

        Parameters
        ----------
        rule:
            The rule to render.
        resolve_fn:
            ``resolve_fn(name)`` returns the href of ``name``'s
            definition, or ``None`` when it did not resolve.
        anchor:
            Anchor of this rule's definition, passed through to formats.

        Returns
        -------
        RenderedRule
            The display structure.
        """
        resolve = resolve_fn if resolve_fn is not None else _no_links
        alternatives = tuple(self._alternative(alt, resolve) for alt in rule.alternatives)
        head = (
            Segment(SegmentKind.SYMBOL, rule.name),
            Segment(SegmentKind.ARROW, ARROW),
        )
        bar = Segment(SegmentKind.BAR, BAR)

        if self._stacks(rule):
            lines = [RenderedLine(head + alternatives[0])]
            lines.extend(RenderedLine((bar,) + alt) for alt in alternatives[1:])
        else:
            segments = list(head)
            for index, alt in enumerate(alternatives):
                if index:
                    segments.append(bar)
                segments.extend(alt)
            lines = [RenderedLine(tuple(segments))]

        return RenderedRule(
            name=rule.name,
            lines=tuple(lines),
            alternatives=alternatives,
            anchor=anchor,
        )

    def _stacks(self, rule: ProductionRule) -> bool:
        if len(rule.alternatives) < 2 or self._layout is Layout.INLINE:
            return False
        if self._layout is Layout.STACKED:
            return True
        return len(plain_rule_text(rule)) > self._max_width

    @staticmethod
    def _alternative(alternative: Alternative, resolve: ResolveFn) -> tuple[Segment, ...]:
        segments: list[Segment] = []
        for element in alternative:
            if isinstance(element, Terminal):
                segments.append(Segment(SegmentKind.LITERAL, element.text))
                continue
            segments.append(Segment(SegmentKind.CATEGORY, element.name, resolve(element.name)))
            if element.optional:
                segments.append(Segment(SegmentKind.OPT, OPT))
        return tuple(segments)


# ---------------------------------------------------------------------------
# Plain-text notation
# ---------------------------------------------------------------------------


def code_span(text: str) -> str:
    """Wrap ``text`` in a backquote fence longer than any backquote run inside it."""
    longest = run = 0
    for ch in text:
        run = run + 1 if ch == "`" else 0
        longest = max(longest, run)
    fence = "`" * (longest + 1)
    if longest:
        return f"{fence} {text} {fence}"
    return f"{fence}{text}{fence}"


def plain_terminal(text: str) -> str:
    """Return ``text`` as it must be written in plain notation to read back as a literal."""
    if text != ASCII_ARROW and all(ch in BARE_TERMINAL_CHARS for ch in text):
        return text
    return code_span(text)


def plain_alternative_text(alternative: Alternative) -> str:
    parts: list[str] = []
    for element in alternative:
        if isinstance(element, Nonterminal):
            parts.append(str(element))
        else:
            parts.append(plain_terminal(element.text))
    return " ".join(parts)


def plain_rule_text(rule: ProductionRule) -> str:
    """Return the single-line plain notation of ``rule``."""
    body = f" {BAR} ".join(plain_alternative_text(alt) for alt in rule.alternatives)
    return f"{rule.name} {ARROW} {body}"


def render(
    rule: ProductionRule,
    resolve_fn: ResolveFn | None = None,
    layout: Layout = Layout.INLINE,
    max_width: int = 80,
) -> RenderedRule:
    """Convenience function: render ``rule`` with a default ``Renderer``."""
    return Renderer(layout=layout, max_width=max_width).render(rule, resolve_fn)
