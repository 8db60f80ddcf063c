"""Engine configuration.

Defaults live on :class:`EngineConfig`; an optional TOML file may override
them through an ``[engine]`` table::

    [engine]
    max_undo_per_call = 3
    strategic_max_depth = 10
"""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any


@dataclass(frozen=True)
class EngineConfig:
    max_undo_per_call: int = 3
    strategic_max_depth: int = 10
    strategic_branching: int = 3
    strategic_max_states: int = 20000
    empty_tube_reserve: int = 2
    cache_ttl_seconds: float = 30.0
    generation_retry_factor: int = 5


DEFAULT_CONFIG = EngineConfig()


# Settings that may be zero; every other setting must be positive.
_ZERO_ALLOWED = {"empty_tube_reserve"}


def config_from_mapping(values: dict[str, Any]) -> EngineConfig:
    """Build a config from TOML values, checking names, types and ranges."""
    known = {f.name for f in fields(EngineConfig)}
    unknown = sorted(set(values) - known)
    if unknown:
        raise ValueError(f"Unknown engine setting(s): {', '.join(unknown)}")
    for name, value in values.items():
        _check_setting(name, value)
    return replace(DEFAULT_CONFIG, **values)


def _check_setting(name: str, value: Any) -> None:
    expected = type(getattr(DEFAULT_CONFIG, name))
    allowed = (int, float) if expected is float else (int,)
    if isinstance(value, bool) or not isinstance(value, allowed):
        raise ValueError(
            f"Engine setting {name} must be {expected.__name__}, got {value!r}."
        )
    if value < 0 or (value == 0 and name not in _ZERO_ALLOWED):
        raise ValueError(f"Engine setting {name} is out of range: {value!r}.")


def load_config(path: Path | None) -> EngineConfig:
    """Load settings from *path*; a missing path or file yields the defaults."""
    if path is None or not path.exists():
        return DEFAULT_CONFIG
    with path.open("rb") as fh:
        data = tomllib.load(fh)
    table = data.get("engine", {})
    if not isinstance(table, dict):
        raise ValueError(f"[engine] in {path} must be a table.")
    return config_from_mapping(table)
