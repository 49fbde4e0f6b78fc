r"""
Workload presets and environment configuration.

Presets:
    - smoke: 1K vertices, 2 iterations (quick validation)
    - small: 100K vertices, 3 iterations (default)
    - reference: 1M vertices, 5 iterations (the classic fixed run)

Environment variables (all prefixed with INDEX_BENCH_) override preset
values, and explicit overrides passed to build_workload() win over both.

    from index_bench.config import build_workload

    workload = build_workload("smoke", create_index=True)
"""

import os
from dataclasses import asdict
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

from index_bench.types import WorkloadParameters

# Look for .env in current dir, then next to the package
_env_file = Path(".env")
if not _env_file.exists():
    _env_file = Path(__file__).parent.parent / ".env"
if _env_file.exists():
    load_dotenv(_env_file)

__all__ = [
    "PRESETS",
    "DEFAULT_PRESET",
    "ENV_PREFIX",
    "build_workload",
    "get_bool_env",
    "get_env",
    "get_int_env",
    "get_preset",
]

ENV_PREFIX = "INDEX_BENCH_"

PRESETS: dict[str, WorkloadParameters] = {
    "smoke": WorkloadParameters(vertex_count=1_000, iterations=2),
    "small": WorkloadParameters(vertex_count=100_000, iterations=3),
    "reference": WorkloadParameters(vertex_count=1_000_000, iterations=5),
}

DEFAULT_PRESET = "small"

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


def get_preset(name: str) -> WorkloadParameters:
    """Get workload preset by name.

    Args:
        name: Preset name (smoke, small, reference).

    Returns:
        WorkloadParameters for the preset.

    Raises:
        ValueError: If preset name is not recognized.
    """
    if name not in PRESETS:
        valid = ", ".join(PRESETS.keys())
        msg = f"Unknown preset '{name}'. Valid presets: {valid}"
        raise ValueError(msg)
    return PRESETS[name]


def get_env(key: str, *, default: str | None = None) -> str | None:
    """Get environment variable with INDEX_BENCH_ prefix.

    Args:
        key: Variable name without prefix (e.g., "VERTEX_COUNT").
        default: Default value if not set.

    Returns:
        Environment variable value or default.
    """
    return os.environ.get(f"{ENV_PREFIX}{key}", default)


def get_int_env(key: str) -> int | None:
    """Get an integer environment variable, None if unset."""
    value = get_env(key)
    if value is None or value.strip() == "":
        return None
    try:
        return int(value)
    except ValueError:
        msg = f"{ENV_PREFIX}{key} must be an integer, got '{value}'"
        raise ValueError(msg) from None


def get_bool_env(key: str) -> bool | None:
    """Get a boolean environment variable, None if unset."""
    value = get_env(key)
    if value is None or value.strip() == "":
        return None
    lowered = value.strip().lower()
    if lowered in _TRUE:
        return True
    if lowered in _FALSE:
        return False
    msg = f"{ENV_PREFIX}{key} must be a boolean, got '{value}'"
    raise ValueError(msg)


def _from_env() -> dict[str, Any]:
    values: dict[str, Any] = {
        "vertex_count": get_int_env("VERTEX_COUNT"),
        "iterations": get_int_env("ITERATIONS"),
        "create_index": get_bool_env("CREATE_INDEX"),
        "vertex_class": get_env("VERTEX_CLASS"),
        "property_name": get_env("PROPERTY"),
        "lookup_index": get_int_env("LOOKUP_INDEX"),
    }
    return {k: v for k, v in values.items() if v is not None}


def build_workload(preset: str | None = None, **overrides: Any) -> WorkloadParameters:
    """Resolve the workload for a run.

    Preset values are overridden by INDEX_BENCH_* environment variables,
    which are overridden by explicit non-None keyword arguments.

    Args:
        preset: Preset name (None = DEFAULT_PRESET).
        **overrides: WorkloadParameters fields.

    Returns:
        Immutable WorkloadParameters.
    """
    base = get_preset(preset or DEFAULT_PRESET)
    values = asdict(base)
    values.update(_from_env())
    values.update({k: v for k, v in overrides.items() if v is not None})
    return WorkloadParameters(**values)
