#!/usr/bin/env python3
"""Load PanicPoint settings from config/panicpoint.yaml."""

from __future__ import annotations

import copy
from pathlib import Path
from typing import Any, Dict

import yaml

from core.errors import ConfigError

ROOT = Path(__file__).resolve().parents[1]
CONFIG_FILE = ROOT / "config" / "panicpoint.yaml"

DEFAULTS: Dict[str, Any] = {
    "output": {"prefix": "PanicPoint", "directory": "."},
    "document": {"creator": "PanicPoint"},
    "telemetry": {"enabled": True, "events_file": "logs/telemetry/events.jsonl"},
}


def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    out = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(out.get(key), dict):
            out[key] = _merge(out[key], value)
        else:
            out[key] = value
    return out


def load_config(path: Path = CONFIG_FILE) -> Dict[str, Any]:
    """Settings merged over DEFAULTS; a missing file means defaults only."""
    path = Path(path)
    if not path.exists():
        return copy.deepcopy(DEFAULTS)
    try:
        with path.open("r", encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigError(f"cannot read config {path}: {exc}", path=str(path)) from exc
    if not isinstance(raw, dict):
        raise ConfigError(f"config {path} must be a mapping", path=str(path))
    for section in DEFAULTS:
        if section in raw and not isinstance(raw[section], dict):
            raise ConfigError(f"config section '{section}' must be a mapping", path=str(path), section=section)
    return _merge(DEFAULTS, raw)
