"""Rule parser: raw grammar text → ``ProductionRule``.

``parse_rule`` turns one line such as::

    *getter-setter-block* → **`{`** *getter-clause* *setter-clause*<sub>opt</sub> **`}`**

into a ``ProductionRule``.  Content problems are never raised: the
parser returns a ``Diagnostic`` instead so that one malformed rule
cannot stop the rest of a document from being processed.

``parse_rules`` handles a whole grammar block, where a line starting
with ``|`` continues the rule on the previous line::

    *pattern* → *wildcard-pattern*
      | *identifier-pattern*
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace

from gxref.diagnostics.diagnostics import Diagnostic, empty_alternative, malformed_rule
from gxref.model.nodes import (
    Alternative,
    Element,
    Nonterminal,
    ProductionRule,
    SourceLocation,
    Terminal,
)
from gxref.notation.conventions import BAR
from gxref.notation.lexer import NotationError, tokenize
from gxref.notation.tokens import Token, TokenType


class RuleParser:
    """Parses one rule from its token list.

    Parameters
    ----------
    tokens:
        Tokens produced by ``gxref.notation.lexer.tokenize``.
    location:
        Where the rule was declared, for diagnostics.
    """

    def __init__(self, tokens: list[Token], location: SourceLocation) -> None:
        self._tokens = tokens
        self._location = location
        self._pos = 0

    def parse(self) -> ProductionRule | Diagnostic:
        """Parse the tokens into a rule, or return the first problem found."""
        head = self._advance()
        if head.type is not TokenType.NONTERMINAL:
            return malformed_rule(
                "Rule must start with the name of the symbol it defines",
                self._location,
            )
        name = head.value
        if self._peek().type is TokenType.OPT:
            return malformed_rule(
                f"The defined symbol {name!r} cannot be marked optional",
                self._location,
                name,
            )
        if self._advance().type is not TokenType.ARROW:
            return malformed_rule(
                f"Missing production arrow after {name!r}", self._location, name
            )

        segments: list[list[Token]] = [[]]
        while self._peek().type is not TokenType.EOF:
            token = self._advance()
            if token.type is TokenType.BAR:
                segments.append([])
            else:
                segments[-1].append(token)

        alternatives: list[Alternative] = []
        for index, segment in enumerate(segments):
            if not segment:
                return empty_alternative(self._location, name, index)
            elements = self._elements(segment, name)
            if isinstance(elements, Diagnostic):
                return elements
            alternatives.append(Alternative(elements=elements))

        return ProductionRule(
            name=name, alternatives=tuple(alternatives), location=self._location
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _peek(self) -> Token:
        return self._tokens[self._pos]

    def _advance(self) -> Token:
        token = self._tokens[self._pos]
        if token.type is not TokenType.EOF:
            self._pos += 1
        return token

    def _elements(
        self, segment: list[Token], name: str
    ) -> tuple[Element, ...] | Diagnostic:
        elements: list[Element] = []
        for token in segment:
            if token.type is TokenType.NONTERMINAL:
                elements.append(Nonterminal(name=token.value))
            elif token.type in (TokenType.TERMINAL, TokenType.ARROW):
                # Only the first arrow separates the sides; later ones are literals.
                elements.append(Terminal(text=token.value))
            elif token.type is TokenType.OPT:
                previous = elements[-1] if elements else None
                if isinstance(previous, Nonterminal) and not previous.optional:
                    elements[-1] = replace(previous, optional=True)
                elif isinstance(previous, Terminal):
                    return malformed_rule(
                        f"Column {token.col}: 'opt' can only follow a category, "
                        f"not the literal {previous.text!r}",
                        self._location,
                        name,
                    )
                else:
                    return malformed_rule(
                        f"Column {token.col}: 'opt' marker has no category to apply to",
                        self._location,
                        name,
                    )
        return tuple(elements)


def parse_rule(raw_text: str, location: SourceLocation | None = None) -> ProductionRule | Diagnostic:
    """Parse one raw rule line.

    Parameters
    ----------
    raw_text:
        The rule text, in Markdown or plain notation.
    location:
        Where the rule was declared.

    Returns
    -------
    ProductionRule | Diagnostic
        The rule, or an EMPTY_ALTERNATIVE / MALFORMED_RULE diagnostic.
    """
    where = location if location is not None else SourceLocation.unknown()
    try:
        tokens = tokenize(_strip_quote_marker(raw_text))
    except NotationError as exc:
        return malformed_rule(f"Cannot read rule: {exc}", where)
    return RuleParser(tokens, where).parse()


@dataclass
class ParseOutcome:
    """Rules and diagnostics from one grammar block or document."""

    rules: list[ProductionRule] = field(default_factory=list)
    diagnostics: list[Diagnostic] = field(default_factory=list)

    def add(self, result: ProductionRule | Diagnostic) -> None:
        if isinstance(result, Diagnostic):
            self.diagnostics.append(result)
        else:
            self.rules.append(result)

    def extend(self, other: "ParseOutcome") -> None:
        self.rules.extend(other.rules)
        self.diagnostics.extend(other.diagnostics)


def _strip_quote_marker(line: str) -> str:
    stripped = line.strip()
    while stripped.startswith(">"):
        stripped = stripped[1:].lstrip()
    return stripped


def join_continuations(text: str) -> list[tuple[int, str]]:
    """Split a grammar block into logical rules.

    Returns ``(line_offset, rule_text)`` pairs, where ``line_offset`` is
    the 0-based index of the rule's first physical line.  Lines that
    start with ``|`` are appended to the preceding rule.
    """
    logical: list[tuple[int, str]] = []
    for offset, physical in enumerate(text.splitlines()):
        line = _strip_quote_marker(physical)
        if not line:
            continue
        if line.startswith(BAR) and logical:
            first, so_far = logical[-1]
            logical[-1] = (first, f"{so_far} {line}")
        else:
            logical.append((offset, line))
    return logical


def parse_rules(text: str, location: SourceLocation | None = None) -> ParseOutcome:
    """Parse every rule in a multi-line grammar block.

    Parameters
    ----------
    text:
        The grammar block.
    location:
        Location of the block's first line; each rule gets its own line.

    Returns
    -------
    ParseOutcome
        All rules that parsed, plus a diagnostic for each that did not.
    """
    base = location if location is not None else SourceLocation.unknown()
    outcome = ParseOutcome()
    for offset, rule_text in join_continuations(text):
        line = base.line + offset if base.line else offset + 1
        outcome.add(parse_rule(rule_text, replace(base, line=line)))
    return outcome
