"""Shared test fixtures for gxref.

Fixtures defined here are available to all tests in the suite without
needing an explicit import. Add project-wide fixtures here; keep
domain-specific fixtures close to the tests that use them.
"""
from __future__ import annotations

import pytest

from gxref.corpus.records import DocumentRecord, RuleDeclaration
from gxref.model.nodes import SourceLocation
from gxref.resolver.resolver import ReferenceMention


@pytest.fixture()
def package_name() -> str:
    """Return the importable package name for assertions."""
    return "gxref"


@pytest.fixture()
def expected_version() -> str:
    """Return the current expected version string.

    Update this fixture when cutting a release so that the version
    test immediately catches stale ``__version__`` values.
    """
    return "0.1.0"


@pytest.fixture()
def declarations_record() -> DocumentRecord:
    """A chapter defining the getter/setter block grammar."""
    return DocumentRecord(
        document="ReferenceManual/Declarations.md",
        rules=(
            RuleDeclaration(
                text="getter-setter-block → { getter-clause setter-clause_opt }",
                anchor="grammar_getter-setter-block",
                line=10,
            ),
            RuleDeclaration(
                text="getter-clause → attributes_opt `get` code-block",
                anchor="grammar_getter-clause",
                line=11,
            ),
            RuleDeclaration(
                text="setter-clause → attributes_opt `set` code-block",
                anchor="grammar_setter-clause",
                line=12,
            ),
        ),
        mentions=(
            ReferenceMention(
                name="getter-clause",
                location=SourceLocation("ReferenceManual/Declarations.md", "", 40),
            ),
        ),
    )


@pytest.fixture()
def statements_record() -> DocumentRecord:
    """A chapter defining the shared ``code-block`` and ``attributes`` symbols."""
    return DocumentRecord(
        document="ReferenceManual/Statements.md",
        rules=(
            RuleDeclaration(
                text="code-block → { statements_opt }",
                anchor="grammar_code-block",
                line=5,
            ),
            RuleDeclaration(
                text="statements → statement statements_opt",
                anchor="grammar_statements",
                line=6,
            ),
            RuleDeclaration(text="statement → expression ;", line=7),
            RuleDeclaration(text="attributes → @ attribute-name", line=8),
        ),
    )


@pytest.fixture()
def sample_documents(
    declarations_record: DocumentRecord, statements_record: DocumentRecord
) -> list[DocumentRecord]:
    """Two chapters that reference each other, with a few unresolved names."""
    return [declarations_record, statements_record]
