"""Corpus loading: corpus files and Markdown chapters → ``DocumentRecord``.

A corpus file lists documents explicitly, in YAML or JSON::

    documents:
      - document: ReferenceManual/Declarations.md
        rules:
          - text: "getter-setter-block → { getter-clause setter-clause_opt }"
            anchor: grammar_getter-setter-block
            line: 12
          - "getter-clause → attributes_opt `get` code-block"
        mentions:
          - name: getter-clause
            line: 40
            target: "#grammar_getter-clause"

A bare top-level list of documents is accepted too, and a rule or
mention may be given as a plain string.
"""
from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

import yaml

from gxref.corpus.extractor import extract_document
from gxref.corpus.records import DocumentRecord, RuleDeclaration
from gxref.model.nodes import SourceLocation
from gxref.resolver.resolver import ReferenceMention

logger = logging.getLogger(__name__)

CORPUS_SUFFIXES = frozenset({".yaml", ".yml", ".json"})
MARKDOWN_SUFFIXES = frozenset({".md", ".markdown"})


class CorpusError(ValueError):
    """Raised when a corpus file or input path cannot be used.

    Parameters
    ----------
    message:
        Human-readable description of the problem.
    source:
        The file or path involved.
    """

    def __init__(self, message: str, source: str = "") -> None:
        super().__init__(f"{source}: {message}" if source else message)
        self.corpus_message = message
        self.source = source


# ---------------------------------------------------------------------------
# Corpus files
# ---------------------------------------------------------------------------


def _rule(item: Any, source: str) -> RuleDeclaration:
    if isinstance(item, str):
        return RuleDeclaration(text=item)
    if isinstance(item, Mapping) and isinstance(item.get("text"), str):
        return RuleDeclaration(
            text=item["text"],
            anchor=str(item.get("anchor") or ""),
            line=int(item.get("line") or 0),
        )
    raise CorpusError(f"rule entries need a 'text' string, got {item!r}", source)


def _mention(item: Any, document: str, source: str) -> ReferenceMention:
    if isinstance(item, str):
        return ReferenceMention(name=item, location=SourceLocation(document))
    if isinstance(item, Mapping) and isinstance(item.get("name"), str):
        location = SourceLocation(
            document=document,
            anchor=str(item.get("anchor") or ""),
            line=int(item.get("line") or 0),
        )
        return ReferenceMention(
            name=item["name"], location=location, target=str(item.get("target") or "")
        )
    raise CorpusError(f"mention entries need a 'name' string, got {item!r}", source)


def records_from_data(data: Any, source: str = "") -> list[DocumentRecord]:
    """Convert parsed corpus data into document records.

    Raises
    ------
    CorpusError
        If ``data`` does not have the corpus shape.
    """
    if isinstance(data, Mapping):
        data = data.get("documents")
    if not isinstance(data, list):
        raise CorpusError("expected a list of documents or a 'documents' key", source)

    records: list[DocumentRecord] = []
    for entry in data:
        if not isinstance(entry, Mapping) or not isinstance(entry.get("document"), str):
            raise CorpusError(f"document entries need a 'document' string, got {entry!r}", source)
        document = entry["document"]
        try:
            rules = tuple(_rule(item, source) for item in entry.get("rules") or ())
            mentions = tuple(
                _mention(item, document, source) for item in entry.get("mentions") or ()
            )
        except CorpusError:
            raise
        except (TypeError, ValueError) as exc:
            raise CorpusError(f"invalid entry in {document!r}: {exc}", source) from exc
        records.append(DocumentRecord(document=document, rules=rules, mentions=mentions))
    return records


def load_corpus(path: str | Path) -> list[DocumentRecord]:
    """Read a YAML or JSON corpus file.

    Raises
    ------
    CorpusError
        If the file cannot be read or parsed, or has the wrong shape.
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise CorpusError(f"cannot read file: {exc}", str(path)) from exc
    try:
        if path.suffix == ".json":
            data = json.loads(text)
        else:
            data = yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise CorpusError(f"cannot parse file: {exc}", str(path)) from exc
    records = records_from_data(data, str(path))
    logger.debug("Loaded %d document(s) from %s", len(records), path)
    return records


# ---------------------------------------------------------------------------
# Markdown chapters
# ---------------------------------------------------------------------------


def extract_path(path: str | Path, root: str | Path | None = None) -> DocumentRecord:
    """Extract one Markdown file; its document id is relative to ``root``."""
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise CorpusError(f"cannot read file: {exc}", str(path)) from exc
    document = path.relative_to(root).as_posix() if root is not None else path.name
    return extract_document(document, text)


def load_inputs(paths: Iterable[str | Path]) -> list[DocumentRecord]:
    """Load every input path: corpus files, Markdown files or directories.

    Directories are searched recursively for Markdown files, in sorted
    order, and document ids are relative to the directory.

    Raises
    ------
    CorpusError
        For missing paths or unsupported file types.
    """
    records: list[DocumentRecord] = []
    for raw in paths:
        path = Path(raw)
        if path.is_dir():
            for child in sorted(path.rglob("*")):
                if child.is_file() and child.suffix in MARKDOWN_SUFFIXES:
                    records.append(extract_path(child, root=path))
        elif not path.exists():
            raise CorpusError("no such file or directory", str(path))
        elif path.suffix in CORPUS_SUFFIXES:
            records.extend(load_corpus(path))
        elif path.suffix in MARKDOWN_SUFFIXES:
            records.append(extract_path(path, root=path.parent))
        else:
            raise CorpusError(
                "unsupported input; expected .md, .yaml, .yml or .json", str(path)
            )
    return records
