"""Renderer module.

Exports the ``Renderer``, its display structure, the built-in output
formats and the format registry.
"""
from __future__ import annotations

from gxref.renderer.formats import (
    HtmlFormat,
    MarkdownFormat,
    PlainTextFormat,
    formats,
    to_html,
    to_markdown,
    to_plain_text,
)
from gxref.renderer.registry import (
    FormatAlreadyRegisteredError,
    FormatNotFoundError,
    FormatRegistry,
    OutputFormat,
)
from gxref.renderer.renderer import (
    Layout,
    RenderedLine,
    RenderedRule,
    Renderer,
    Segment,
    SegmentKind,
    plain_rule_text,
    render,
)

__all__ = [
    "Renderer",
    "render",
    "Layout",
    "RenderedRule",
    "RenderedLine",
    "Segment",
    "SegmentKind",
    "plain_rule_text",
    "OutputFormat",
    "FormatRegistry",
    "FormatNotFoundError",
    "FormatAlreadyRegisteredError",
    "formats",
    "MarkdownFormat",
    "HtmlFormat",
    "PlainTextFormat",
    "to_markdown",
    "to_html",
    "to_plain_text",
]
