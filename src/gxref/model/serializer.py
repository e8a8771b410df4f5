"""Serialization of a resolved grammar graph to JSON and YAML.

The serialized form is what page renderers and other build tooling
consume: every symbol with its canonical anchor and rules, every
reference link, and the diagnostics.  Elements use a ``"kind"``
discriminator so the union is unambiguous.

Usage
-----
::

    from gxref.model.serializer import GraphSerializer

    text = GraphSerializer().to_json(graph, indent=2)
"""
from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

import yaml

from gxref.diagnostics.diagnostics import Diagnostic
from gxref.model.nodes import (
    Alternative,
    Element,
    Nonterminal,
    ProductionRule,
    SourceLocation,
    Symbol,
    Terminal,
)
from gxref.renderer.renderer import plain_rule_text

if TYPE_CHECKING:
    from gxref.pipeline import GrammarGraph
    from gxref.resolver.resolver import ReferenceLink


class GraphSerializer:
    """Converts a ``GrammarGraph`` into plain dicts, JSON or YAML."""

    def to_dict(self, graph: "GrammarGraph") -> dict[str, Any]:
        return {
            "documents": list(graph.documents),
            "symbols": [self.symbol_to_dict(s) for s in sorted(graph.table, key=lambda s: s.name)],
            "links": [
                self.link_to_dict(link)
                for link in sorted(
                    graph.resolution.links.values(),
                    key=lambda l: (l.site.location, l.site.symbol, l.site.rule_index,
                                   l.site.alternative_index, l.site.element_index,
                                   l.site.mention_index),
                )
            ],
            "diagnostics": [self.diagnostic_to_dict(d) for d in graph.diagnostics.diagnostics],
        }

    def to_json(self, graph: "GrammarGraph", indent: int | None = 2) -> str:
        return json.dumps(self.to_dict(graph), indent=indent, ensure_ascii=False)

    def to_yaml(self, graph: "GrammarGraph") -> str:
        return yaml.dump(
            self.to_dict(graph), default_flow_style=False, allow_unicode=True, sort_keys=False
        )

    # ------------------------------------------------------------------
    # Parts
    # ------------------------------------------------------------------

    def symbol_to_dict(self, symbol: Symbol) -> dict[str, Any]:
        return {
            "name": symbol.name,
            "anchor": symbol.anchor,
            "document": symbol.document,
            "conflicting_anchors": list(symbol.conflicting_anchors),
            "rules": [self.rule_to_dict(r) for r in symbol.rules],
        }

    def rule_to_dict(self, rule: ProductionRule) -> dict[str, Any]:
        return {
            "text": plain_rule_text(rule),
            "location": self.location_to_dict(rule.location),
            "alternatives": [self.alternative_to_list(a) for a in rule.alternatives],
        }

    def alternative_to_list(self, alternative: Alternative) -> list[dict[str, Any]]:
        return [self.element_to_dict(e) for e in alternative]

    @staticmethod
    def element_to_dict(element: Element) -> dict[str, Any]:
        if isinstance(element, Terminal):
            return {"kind": "terminal", "text": element.text}
        return {"kind": "nonterminal", "name": element.name, "optional": element.optional}

    @staticmethod
    def location_to_dict(location: SourceLocation) -> dict[str, Any]:
        return {"document": location.document, "anchor": location.anchor, "line": location.line}

    def link_to_dict(self, link: "ReferenceLink") -> dict[str, Any]:
        site = link.site
        data: dict[str, Any] = {
            "name": site.name,
            "target": link.target,
            "anchor": link.anchor,
            "document": link.document,
            "from": self.location_to_dict(site.location),
        }
        if site.is_mention:
            data["mention_index"] = site.mention_index
        else:
            data["symbol"] = site.symbol
            data["rule"] = site.rule_index
            data["alternative"] = site.alternative_index
            data["element"] = site.element_index
        return data

    def diagnostic_to_dict(self, diagnostic: Diagnostic) -> dict[str, Any]:
        return {
            "code": diagnostic.code,
            "kind": diagnostic.kind.name,
            "severity": diagnostic.severity.name,
            "message": diagnostic.message,
            "name": diagnostic.name,
            "anchors": list(diagnostic.anchors),
            "location": self.location_to_dict(diagnostic.location),
        }

    # ------------------------------------------------------------------
    # Elements back from dicts
    # ------------------------------------------------------------------

    @staticmethod
    def element_from_dict(data: dict[str, Any]) -> Element:
        """Rebuild an element from ``element_to_dict`` output.

        Raises
        ------
        ValueError
            If ``data`` has an unknown ``"kind"``.
        """
        kind = data.get("kind")
        if kind == "terminal":
            return Terminal(text=data["text"])
        if kind == "nonterminal":
            return Nonterminal(name=data["name"], optional=bool(data.get("optional", False)))
        raise ValueError(f"Unknown element kind: {kind!r}")
