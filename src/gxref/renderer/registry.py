"""Output-format registry for rendered grammar rules.

Formats register under a short name with the ``register`` decorator.
Third-party packages add formats by declaring entry-points in the
``gxref.formats`` group of their own ``pyproject.toml``::

    [project.entry-points."gxref.formats"]
    asciidoc = "my_package.formats:AsciiDocFormat"

and the registry picks them up with ``load_entrypoints``.
"""
from __future__ import annotations

import importlib.metadata
import logging
from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from gxref.renderer.renderer import RenderedRule

logger = logging.getLogger(__name__)

ENTRYPOINT_GROUP = "gxref.formats"


class OutputFormat(ABC):
    """Turns a ``RenderedRule`` into text for one kind of page."""

    @abstractmethod
    def format_rule(self, rendered: "RenderedRule") -> str:
        """Return the text of one rendered rule."""

    def format_rules(self, rendered: list["RenderedRule"]) -> str:
        """Return the text of several rules, one block per rule."""
        return "\n\n".join(self.format_rule(r) for r in rendered)


class FormatNotFoundError(KeyError):
    """Raised when a requested format name is not registered."""

    def __init__(self, name: str, available: list[str]) -> None:
        self.format_name = name
        self.available = available
        super().__init__(
            f"Output format {name!r} is not registered. "
            f"Available formats: {', '.join(available) or '(none)'}."
        )


class FormatAlreadyRegisteredError(ValueError):
    """Raised when attempting to register a name that already exists."""

    def __init__(self, name: str) -> None:
        self.format_name = name
        super().__init__(
            f"Output format {name!r} is already registered. "
            "Use a unique name or deregister the existing format first."
        )


class FormatRegistry:
    """Registry of ``OutputFormat`` classes keyed by name."""

    def __init__(self) -> None:
        self._formats: dict[str, type[OutputFormat]] = {}

    def register(self, name: str) -> Callable[[type[OutputFormat]], type[OutputFormat]]:
        """Return a class decorator that registers the decorated format.

        Raises
        ------
        FormatAlreadyRegisteredError
            If ``name`` is already in use.
        TypeError
            If the decorated class does not subclass ``OutputFormat``.
        """

        def decorator(cls: type[OutputFormat]) -> type[OutputFormat]:
            self.register_class(name, cls)
            return cls

        return decorator

    def register_class(self, name: str, cls: type[OutputFormat]) -> None:
        """Register ``cls`` under ``name`` without the decorator syntax."""
        if name in self._formats:
            raise FormatAlreadyRegisteredError(name)
        if not (isinstance(cls, type) and issubclass(cls, OutputFormat)):
            raise TypeError(
                f"Cannot register {cls!r} as format {name!r}: "
                "it must be a subclass of OutputFormat."
            )
        self._formats[name] = cls
        logger.debug("Registered output format %r -> %s", name, cls.__qualname__)

    def deregister(self, name: str) -> None:
        if name not in self._formats:
            raise FormatNotFoundError(name, self.names())
        del self._formats[name]
        logger.debug("Deregistered output format %r", name)

    def get(self, name: str) -> type[OutputFormat]:
        """Return the format class registered under ``name``.

        Raises
        ------
        FormatNotFoundError
            If no format is registered under ``name``.
        """
        try:
            return self._formats[name]
        except KeyError:
            raise FormatNotFoundError(name, self.names()) from None

    def create(self, name: str) -> OutputFormat:
        """Return a new instance of the format registered under ``name``."""
        return self.get(name)()

    def names(self) -> list[str]:
        """Return all registered format names in alphabetical order."""
        return sorted(self._formats)

    def __contains__(self, name: object) -> bool:
        return name in self._formats

    def __len__(self) -> int:
        return len(self._formats)

    def __repr__(self) -> str:
        return f"FormatRegistry(formats={self.names()})"

    def load_entrypoints(self, group: str = ENTRYPOINT_GROUP) -> None:
        """Discover and register formats declared as package entry-points.

        Names that are already registered are skipped, so repeated calls
        are idempotent.  An entry-point that fails to import or is not an
        ``OutputFormat`` is logged and skipped.
        """
        for ep in importlib.metadata.entry_points(group=group):
            if ep.name in self._formats:
                logger.debug("Entry-point %r already registered; skipping.", ep.name)
                continue
            try:
                cls = ep.load()
            except Exception:
                logger.exception(
                    "Failed to load entry-point %r from group %r; skipping.",
                    ep.name,
                    group,
                )
                continue
            try:
                self.register_class(ep.name, cls)
            except (FormatAlreadyRegisteredError, TypeError):
                logger.warning(
                    "Entry-point %r loaded but could not be registered as an "
                    "output format; skipping.",
                    ep.name,
                )
