"""Helpers for parsing byte-sized configuration values."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from chunked_uploader.exceptions import ConfigLoadError

_UNIT_MULTIPLIERS: dict[str, int] = {
    "b": 1,
    "k": 1024,
    "kb": 1024,
    "m": 1024**2,
    "mb": 1024**2,
    "g": 1024**3,
    "gb": 1024**3,
}


def parse_bytes(value: int | str) -> int:
    """Parse a byte quantity from an integer or unit-suffixed string.

    Supported string units (case-insensitive):
        b, k, kb, m, mb, g, gb

    Args:
        value: Raw byte value as an ``int`` or string with an optional unit
            suffix, e.g. ``"5mb"``.

    Returns:
        The parsed value in bytes.

    Raises:
        ValueError: If the input cannot be parsed or contains an unknown unit.
    """
    if isinstance(value, int):
        return value

    normalized = str(value).strip().lower()
    if normalized.isdigit():
        return int(normalized)

    digits = ""
    index = 0
    while index < len(normalized) and normalized[index].isdigit():
        digits += normalized[index]
        index += 1
    unit = normalized[index:].strip()

    if not digits or not unit:
        raise ValueError(f"Invalid byte value: {value!r}")
    if unit not in _UNIT_MULTIPLIERS:
        raise ValueError(f"Unknown byte unit in value: {value!r}")

    return int(digits) * _UNIT_MULTIPLIERS[unit]


def load_config_file(path: Path) -> dict[str, Any]:
    """Read uploader settings from a YAML file.

    Args:
        path: Path to the YAML file.

    Returns:
        Mapping of configuration field names to raw values.

    Raises:
        ConfigLoadError: If the file is missing, unreadable or not a mapping.
    """
    if not path.exists():
        raise ConfigLoadError(f"Config file not found: {path}")

    try:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise ConfigLoadError(f"Failed to load config '{path}': {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigLoadError(f"Config file '{path}' must contain a mapping")

    if "chunk_size" in data:
        try:
            data["chunk_size"] = parse_bytes(data["chunk_size"])
        except ValueError as e:
            raise ConfigLoadError(f"Invalid chunk_size in '{path}': {e}") from e
    return data
