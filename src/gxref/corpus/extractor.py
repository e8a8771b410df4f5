"""Markdown extractor: pull grammar rules and mentions out of a chapter.

Rules are recognised in two places:

- Grammar lines in prose or block quotes, whose left-hand side is an
  italic category followed by the arrow::

      > *getter-setter-block* → **`{`** *getter-clause* *setter-clause*<sub>opt</sub> **`}`**

- Every line of a fenced block tagged ``grammar``, in plain notation.

A line that starts with ``|`` right after a rule continues that rule.
An ``<a id="...">`` or ``<a name="...">`` tag on the line before a rule
(or at the start of the rule line) gives the rule's anchor.

Inline mentions are Markdown links whose text is a single italic
category, ``[*pattern*](Patterns.md#grammar_pattern)``, anywhere outside
grammar lines and code blocks.
"""
from __future__ import annotations

import re
from typing import Final

from gxref.corpus.records import DocumentRecord, RuleDeclaration
from gxref.model.nodes import SourceLocation
from gxref.resolver.resolver import ReferenceMention

_FENCE: Final[re.Pattern[str]] = re.compile(r"^\s*(```+|~~~+)\s*([\w-]*)")
_ANCHOR_TAG: Final[re.Pattern[str]] = re.compile(
    r"""^<a\s+(?:id|name)\s*=\s*["']([^"']+)["']\s*/?>\s*(?:</a>)?\s*"""
)
_RULE_LINE: Final[re.Pattern[str]] = re.compile(
    r"^\*[A-Za-z][A-Za-z0-9-]*\*\s*(?:→|->)"
)
_MENTION: Final[re.Pattern[str]] = re.compile(
    r"\[\*([A-Za-z][A-Za-z0-9]*(?:-[A-Za-z0-9]+)*)\*\]\(([^)\s]*)\)"
)

_HARD_BREAK: Final[re.Pattern[str]] = re.compile(r"\s*(?<!\\)\\$")

GRAMMAR_FENCE_TAG: Final[str] = "grammar"


def _unquote(line: str) -> str:
    stripped = line.strip()
    while stripped.startswith(">"):
        stripped = stripped[1:].lstrip()
    return stripped


class MarkdownExtractor:
    """Scans one Markdown document.

    Parameters
    ----------
    document:
        Identifier recorded on every rule and mention.
    """

    def __init__(self, document: str) -> None:
        self._document = document
        self._rules: list[RuleDeclaration] = []
        self._mentions: list[ReferenceMention] = []
        self._pending_anchor = ""
        self._in_rule = False

    def extract(self, text: str) -> DocumentRecord:
        """Return the document's rules and mentions."""
        fence: str | None = None
        fence_is_grammar = False

        for number, raw in enumerate(text.splitlines(), start=1):
            fence_match = _FENCE.match(raw)
            if fence is not None:
                if fence_match and fence_match.group(1).startswith(fence):
                    fence = None
                    self._in_rule = False
                elif fence_is_grammar:
                    self._grammar_line(_unquote(raw), number)
                continue
            if fence_match:
                fence = fence_match.group(1)
                fence_is_grammar = fence_match.group(2) == GRAMMAR_FENCE_TAG
                self._in_rule = False
                continue
            self._prose_line(raw, number)

        return DocumentRecord(
            document=self._document,
            rules=tuple(self._rules),
            mentions=tuple(self._mentions),
        )

    # ------------------------------------------------------------------
    # Line handlers
    # ------------------------------------------------------------------

    def _take_anchor(self, line: str) -> str:
        match = _ANCHOR_TAG.match(line)
        if match is None:
            return line
        self._pending_anchor = match.group(1)
        return line[match.end():]

    def _grammar_line(self, line: str, number: int) -> None:
        line = self._take_anchor(line)
        if not line:
            return
        if line.startswith("|") and self._in_rule:
            self._continue_rule(line)
            return
        self._start_rule(line, number)

    def _prose_line(self, raw: str, number: int) -> None:
        line = _HARD_BREAK.sub("", self._take_anchor(_unquote(raw)))
        if not line:
            # A blank line ends a rule but keeps an anchor for the next one.
            self._in_rule = False
            return
        if line.startswith("|") and self._in_rule:
            self._continue_rule(line)
            return
        if _RULE_LINE.match(line):
            self._start_rule(line, number)
            return
        self._in_rule = False
        self._pending_anchor = ""
        for match in _MENTION.finditer(line):
            self._mentions.append(
                ReferenceMention(
                    name=match.group(1),
                    location=SourceLocation(self._document, line=number),
                    target=match.group(2),
                )
            )

    def _start_rule(self, line: str, number: int) -> None:
        self._rules.append(
            RuleDeclaration(text=line, anchor=self._pending_anchor, line=number)
        )
        self._pending_anchor = ""
        self._in_rule = True

    def _continue_rule(self, line: str) -> None:
        last = self._rules[-1]
        self._rules[-1] = RuleDeclaration(
            text=f"{last.text}\n{line}", anchor=last.anchor, line=last.line
        )


def extract_document(document: str, text: str) -> DocumentRecord:
    """Convenience function: extract rules and mentions from Markdown ``text``."""
    return MarkdownExtractor(document).extract(text)
