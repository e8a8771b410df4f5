"""Build configuration for the grammar cross-reference pipeline.

Settings may be passed directly to ``BuildConfig`` or read from a YAML
file such as::

    # gxref.yaml
    strict: true
    layout: auto
    max_width: 72
    workers: 4
    anchor_prefix: grammar_
    root_symbols: [top-level-declaration]
    include_hints: false

CLI options override file values through ``BuildConfig.with_overrides``.
"""
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any

import yaml

from gxref.notation.conventions import DEFAULT_ANCHOR_PREFIX
from gxref.renderer.renderer import Layout


class ConfigError(ValueError):
    """Raised when a configuration file or mapping is invalid."""


@dataclass(frozen=True)
class BuildConfig:
    """Settings for one build.

    Parameters
    ----------
    strict:
        When ``True``, unresolved references (warnings) fail the build.
    layout:
        Alternative layout used by the renderer.
    max_width:
        Column budget for ``Layout.AUTO``.
    workers:
        Threads used for document parsing and reference resolution.
    anchor_prefix:
        Prefix for anchors derived from a symbol name.
    root_symbols:
        Symbols that are entry points of the grammar and need no
        references (exempt from the unreferenced-symbol lint).
    include_hints:
        If ``False``, HINT-level lint findings are suppressed.
    """

    strict: bool = False
    layout: Layout = Layout.INLINE
    max_width: int = 80
    workers: int = 1
    anchor_prefix: str = DEFAULT_ANCHOR_PREFIX
    root_symbols: frozenset[str] = field(default_factory=frozenset)
    include_hints: bool = True

    def __post_init__(self) -> None:
        if self.workers < 1:
            raise ConfigError(f"workers must be at least 1, got {self.workers}")
        if self.max_width < 1:
            raise ConfigError(f"max_width must be positive, got {self.max_width}")

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "BuildConfig":
        """Build a config from a plain mapping, validating keys and types.

        Raises
        ------
        ConfigError
            On unknown keys or values of the wrong type.
        """
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigError(
                f"Unknown configuration key(s): {', '.join(unknown)}. "
                f"Valid keys: {', '.join(sorted(known))}"
            )
        values: dict[str, Any] = {}
        for key, value in data.items():
            values[key] = _coerce(key, value)
        return cls(**values)

    def with_overrides(self, **overrides: Any) -> "BuildConfig":
        """Return a copy with every non-``None`` override applied."""
        values = {k: _coerce(k, v) for k, v in overrides.items() if v is not None}
        return replace(self, **values) if values else self


def _coerce(key: str, value: Any) -> Any:
    if key in ("strict", "include_hints"):
        if not isinstance(value, bool):
            raise ConfigError(f"{key} must be true or false, got {value!r}")
        return value
    if key in ("max_width", "workers"):
        if isinstance(value, bool) or not isinstance(value, int):
            raise ConfigError(f"{key} must be an integer, got {value!r}")
        return value
    if key == "layout":
        if isinstance(value, Layout):
            return value
        try:
            return Layout[str(value).upper()]
        except KeyError:
            choices = ", ".join(m.name.lower() for m in Layout)
            raise ConfigError(f"layout must be one of {choices}, got {value!r}") from None
    if key == "anchor_prefix":
        if not isinstance(value, str):
            raise ConfigError(f"anchor_prefix must be a string, got {value!r}")
        return value
    if key == "root_symbols":
        if not isinstance(value, (list, tuple, set, frozenset)) or not all(
            isinstance(v, str) for v in value
        ):
            raise ConfigError(f"root_symbols must be a list of names, got {value!r}")
        return frozenset(value)
    return value


def load_config(path: str | Path) -> BuildConfig:
    """Read a YAML configuration file.

    Raises
    ------
    ConfigError
        If the file cannot be read or does not hold a mapping.
    """
    try:
        text = Path(path).read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Cannot read configuration {path}: {exc}") from exc
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {path}: {exc}") from exc
    if data is None:
        return BuildConfig()
    if not isinstance(data, Mapping):
        raise ConfigError(f"Configuration {path} must be a mapping, got {type(data).__name__}")
    return BuildConfig.from_mapping(data)
