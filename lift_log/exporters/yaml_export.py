"""YAML export helpers."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml


def dump_yaml(payload: Any) -> str:
    return yaml.safe_dump(payload, sort_keys=False, allow_unicode=True)


def write_yaml(path: Path, payload: Any) -> Path:
    """Write payload as block-style YAML and return path."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(dump_yaml(payload))
    return path
