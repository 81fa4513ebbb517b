"""JSON/YAML document loading shared by the fee schedule and price snapshots."""

from __future__ import annotations

import json
from decimal import Decimal
from pathlib import Path
from typing import Any

import yaml

from tradecalc.errors import ConfigError

JSON_SUFFIXES = frozenset({".json"})
YAML_SUFFIXES = frozenset({".yaml", ".yml"})


def _decimalize(value: Any) -> Any:
    """Replace floats with Decimals built from their string form."""
    if isinstance(value, float):
        return Decimal(str(value))
    if isinstance(value, dict):
        return {key: _decimalize(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_decimalize(item) for item in value]
    return value


def parse_document(text: str, *, fmt: str) -> Any:
    """Parse document text as "json" or "yaml".

    Raises:
        ConfigError: If the text cannot be parsed or the format is unknown
    """
    if fmt == "json":
        try:
            return json.loads(text, parse_float=Decimal)
        except json.JSONDecodeError as exc:
            raise ConfigError(f"Invalid JSON document: {exc}") from exc
    if fmt == "yaml":
        try:
            return _decimalize(yaml.safe_load(text))
        except yaml.YAMLError as exc:
            raise ConfigError(f"Invalid YAML document: {exc}") from exc
    raise ConfigError(f"Unsupported document format: {fmt}")


def load_document(path: str | Path) -> Any:
    """Read and parse a JSON or YAML file, chosen by suffix.

    Args:
        path: File path ending in .json, .yaml or .yml

    Returns:
        Parsed document (lists/dicts with Decimal numbers)

    Raises:
        ConfigError: If the suffix is unsupported, the file cannot be read,
            or its content does not parse
    """
    p = Path(path)
    suffix = p.suffix.lower()
    if suffix in JSON_SUFFIXES:
        fmt = "json"
    elif suffix in YAML_SUFFIXES:
        fmt = "yaml"
    else:
        raise ConfigError(f"Unsupported document type '{suffix}' for {p}")

    try:
        text = p.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Cannot read {p}: {exc}") from exc

    return parse_document(text, fmt=fmt)
