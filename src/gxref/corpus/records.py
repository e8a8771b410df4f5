"""Input records handed to the core by the authoring/build layer.

One ``DocumentRecord`` per chapter: its grammar-rule declarations, each
with the anchor it is declared under, and its inline prose mentions of
grammar symbols.
"""
from __future__ import annotations

from dataclasses import dataclass

from gxref.model.nodes import SourceLocation
from gxref.resolver.resolver import ReferenceMention


@dataclass(frozen=True, slots=True)
class RuleDeclaration:
    """One raw rule as written in a document.

    Parameters
    ----------
    text:
        Raw rule text in Markdown or plain notation.  Continuation
        lines starting with ``|`` may be included, separated by newlines.
    anchor:
        Anchor the rule is declared under.  Empty means "derive from the
        symbol name".
    line:
        1-based line of the rule in its document, 0 when unknown.
    """

    text: str
    anchor: str = ""
    line: int = 0


@dataclass(frozen=True, slots=True)
class DocumentRecord:
    """Everything the core needs from one document."""

    document: str
    rules: tuple[RuleDeclaration, ...] = ()
    mentions: tuple[ReferenceMention, ...] = ()

    def location(self, anchor: str = "", line: int = 0) -> SourceLocation:
        return SourceLocation(document=self.document, anchor=anchor, line=line)
