"""Corpus module.

Exports the document record types, the corpus-file loader and the
Markdown extractor.
"""
from __future__ import annotations

from gxref.corpus.extractor import MarkdownExtractor, extract_document
from gxref.corpus.loader import (
    CorpusError,
    extract_path,
    load_corpus,
    load_inputs,
    records_from_data,
)
from gxref.corpus.records import DocumentRecord, RuleDeclaration
from gxref.resolver.resolver import ReferenceMention

__all__ = [
    "DocumentRecord",
    "RuleDeclaration",
    "ReferenceMention",
    "MarkdownExtractor",
    "extract_document",
    "CorpusError",
    "extract_path",
    "load_corpus",
    "load_inputs",
    "records_from_data",
]
