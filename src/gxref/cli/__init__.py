"""CLI package.

The ``cli`` sub-package contains the Click application and all command
implementations.  Commands load their inputs through ``gxref.corpus``
and build through ``gxref.pipeline``.
"""
from __future__ import annotations
