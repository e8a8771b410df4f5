"""Reference Resolver module.

Exports the ``Resolver`` class, the ``resolve_all`` convenience function
and the link types it produces.
"""
from __future__ import annotations

from gxref.resolver.resolver import (
    ReferenceLink,
    ReferenceMention,
    ReferenceSite,
    ResolutionResult,
    ResolveFn,
    Resolver,
    document_url,
    make_href,
    resolve_all,
)

__all__ = [
    "Resolver",
    "resolve_all",
    "ReferenceLink",
    "ReferenceMention",
    "ReferenceSite",
    "ResolutionResult",
    "ResolveFn",
    "document_url",
    "make_href",
]
