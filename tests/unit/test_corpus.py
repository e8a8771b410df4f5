"""Unit tests for gxref.corpus — the Markdown extractor and the corpus
file loader.
"""
from __future__ import annotations

import json
from pathlib import Path

import pytest

from gxref.corpus.extractor import extract_document
from gxref.corpus.loader import CorpusError, load_corpus, load_inputs, records_from_data
from gxref.corpus.records import DocumentRecord, RuleDeclaration
from gxref.model.nodes import Nonterminal, ProductionRule, SourceLocation
from gxref.production.parser import parse_rule

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

_CHAPTER = """\
# Declarations

A getter-setter block holds a [*getter-clause*](#grammar_getter-clause).

> Grammar of a getter-setter block
>
> <a id="grammar_getter-setter-block"></a>
> *getter-setter-block* → **`{`** *getter-clause* *setter-clause*<sub>opt</sub> **`}`**
> *getter-clause* → *attributes*<sub>opt</sub> **`get`** *code-block*

Patterns are described in [*pattern*](Patterns.md#grammar_pattern).

```swift
*not-a-rule* → nothing [*ignored*](#x)
```

```grammar
pattern → wildcard-pattern
  | identifier-pattern
```
"""


# ===========================================================================
# Markdown extraction
# ===========================================================================


class TestMarkdownExtractor:
    def test_rules_found(self) -> None:
        record = extract_document("Declarations.md", _CHAPTER)
        assert record.document == "Declarations.md"
        assert [r.text.split(" ", 1)[0] for r in record.rules] == [
            "*getter-setter-block*",
            "*getter-clause*",
            "pattern",
        ]

    def test_anchor_from_preceding_tag(self) -> None:
        record = extract_document("Declarations.md", _CHAPTER)
        assert record.rules[0].anchor == "grammar_getter-setter-block"
        assert record.rules[1].anchor == ""

    def test_line_numbers(self) -> None:
        record = extract_document("Declarations.md", _CHAPTER)
        assert record.rules[0].line == 8
        assert record.rules[2].line == 18

    def test_continuation_lines_are_joined(self) -> None:
        record = extract_document("Declarations.md", _CHAPTER)
        assert record.rules[2].text == "pattern → wildcard-pattern\n| identifier-pattern"

    def test_mentions(self) -> None:
        record = extract_document("Declarations.md", _CHAPTER)
        assert [(m.name, m.location, m.target) for m in record.mentions] == [
            ("getter-clause", SourceLocation("Declarations.md", "", 3), "#grammar_getter-clause"),
            ("pattern", SourceLocation("Declarations.md", "", 11), "Patterns.md#grammar_pattern"),
        ]

    def test_other_code_blocks_are_skipped(self) -> None:
        record = extract_document("Declarations.md", _CHAPTER)
        assert all("not-a-rule" not in r.text for r in record.rules)
        assert all(m.name != "ignored" for m in record.mentions)

    def test_inline_anchor_tag(self) -> None:
        record = extract_document("A.md", '<a name="custom"></a> *a* → *b*\n')
        assert record.rules == (RuleDeclaration(text="*a* → *b*", anchor="custom", line=1),)

    def test_prose_continuation(self) -> None:
        record = extract_document("A.md", "> *a* → *b*\n> | *c*\n")
        assert record.rules[0].text == "*a* → *b*\n| *c*"

    def test_prose_line_ends_rule(self) -> None:
        record = extract_document("A.md", "*a* → *b*\nSome prose.\n| *c*\n")
        assert record.rules[0].text == "*a* → *b*"

    def test_empty_document(self) -> None:
        assert extract_document("A.md", "") == DocumentRecord(document="A.md")

    def test_hard_line_break_is_dropped(self) -> None:
        record = extract_document("A.md", "> *a* → *b* \\\n> | *c*\\\n")
        assert record.rules[0].text == "*a* → *b*\n| *c*"
        rule = parse_rule(record.rules[0].text)
        assert isinstance(rule, ProductionRule)
        assert [alt.elements for alt in rule.alternatives] == [
            (Nonterminal("b"),),
            (Nonterminal("c"),),
        ]

    def test_backslash_terminal_is_kept(self) -> None:
        record = extract_document("A.md", "*a* → **`\\`**\n")
        assert record.rules[0].text == "*a* → **`\\`**"


# ===========================================================================
# Corpus data
# ===========================================================================


class TestRecordsFromData:
    def test_documents_key(self) -> None:
        records = records_from_data(
            {
                "documents": [
                    {
                        "document": "A.md",
                        "rules": [
                            {"text": "a → b", "anchor": "grammar_a", "line": 4},
                            "b → `x`",
                        ],
                        "mentions": ["a", {"name": "b", "line": 9, "target": "B.md#b"}],
                    }
                ]
            }
        )
        (record,) = records
        assert record.rules == (
            RuleDeclaration("a → b", "grammar_a", 4),
            RuleDeclaration("b → `x`"),
        )
        assert [m.name for m in record.mentions] == ["a", "b"]
        assert record.mentions[1].location == SourceLocation("A.md", "", 9)
        assert record.mentions[1].target == "B.md#b"
        assert record.mentions[0].target == ""

    def test_bare_list(self) -> None:
        assert records_from_data([{"document": "A.md"}]) == [DocumentRecord("A.md")]

    @pytest.mark.parametrize(
        "data",
        [
            None,
            "text",
            {"documents": "nope"},
            [{"rules": []}],
            [{"document": "A.md", "rules": [42]}],
            [{"document": "A.md", "mentions": [{"line": 3}]}],
            [{"document": "A.md", "rules": [{"text": "a → b", "line": "ten"}]}],
        ],
    )
    def test_bad_shapes(self, data: object) -> None:
        with pytest.raises(CorpusError):
            records_from_data(data, "corpus.yaml")

    def test_error_carries_source(self) -> None:
        with pytest.raises(CorpusError) as exc_info:
            records_from_data(None, "corpus.yaml")
        assert exc_info.value.source == "corpus.yaml"
        assert str(exc_info.value).startswith("corpus.yaml: ")

    def test_corpus_error_is_value_error(self) -> None:
        assert issubclass(CorpusError, ValueError)


# ===========================================================================
# Files
# ===========================================================================


class TestLoadInputs:
    def test_yaml_corpus(self, tmp_path: Path) -> None:
        path = tmp_path / "corpus.yaml"
        path.write_text(
            "documents:\n"
            "  - document: A.md\n"
            "    rules:\n"
            "      - \"a → b\"\n",
            encoding="utf-8",
        )
        (record,) = load_corpus(path)
        assert record.rules[0].text == "a → b"

    def test_json_corpus(self, tmp_path: Path) -> None:
        path = tmp_path / "corpus.json"
        path.write_text(
            json.dumps([{"document": "A.md", "rules": ["a → b"]}], ensure_ascii=False),
            encoding="utf-8",
        )
        assert load_inputs([path])[0].rules[0].text == "a → b"

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "corpus.yaml"
        path.write_text("documents: [unclosed\n", encoding="utf-8")
        with pytest.raises(CorpusError, match="cannot parse"):
            load_corpus(path)

    def test_directory_of_markdown(self, tmp_path: Path) -> None:
        (tmp_path / "Ref").mkdir()
        (tmp_path / "Ref" / "B.md").write_text("*b* → *c*\n", encoding="utf-8")
        (tmp_path / "A.md").write_text("*a* → *b*\n", encoding="utf-8")
        (tmp_path / "notes.txt").write_text("*x* → *y*\n", encoding="utf-8")

        records = load_inputs([tmp_path])
        assert [r.document for r in records] == ["A.md", "Ref/B.md"]

    def test_single_markdown_file(self, tmp_path: Path) -> None:
        path = tmp_path / "A.md"
        path.write_text("*a* → *b*\n", encoding="utf-8")
        assert load_inputs([str(path)])[0].document == "A.md"

    def test_missing_path(self, tmp_path: Path) -> None:
        with pytest.raises(CorpusError, match="no such file"):
            load_inputs([tmp_path / "missing.md"])

    def test_unsupported_file(self, tmp_path: Path) -> None:
        path = tmp_path / "notes.txt"
        path.write_text("hello", encoding="utf-8")
        with pytest.raises(CorpusError, match="unsupported"):
            load_inputs([path])

    def test_undecodable_markdown(self, tmp_path: Path) -> None:
        path = tmp_path / "A.md"
        path.write_bytes(b"*a* \xff\xfe\n")
        with pytest.raises(CorpusError, match="cannot read file"):
            load_inputs([path])

    def test_undecodable_corpus(self, tmp_path: Path) -> None:
        path = tmp_path / "corpus.yaml"
        path.write_bytes(b"documents: \xff\n")
        with pytest.raises(CorpusError, match="cannot read file") as exc_info:
            load_corpus(path)
        assert exc_info.value.source == str(path)
