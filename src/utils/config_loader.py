"""Config file loading for JSON, YAML and TOML dashboard configs."""

from __future__ import annotations

import json
import tomllib
from pathlib import Path
from typing import Any

import yaml

SUPPORTED_FORMATS = (".json", ".toml", ".yaml", ".yml")


def load_config(config_path: str | Path) -> dict[str, Any]:
    path = Path(config_path).expanduser()
    if not path.exists():
        raise FileNotFoundError(
            f"Config file not found: {path}. Ensure the path is correct and readable."
        )
    suffix = path.suffix.lower()
    if suffix not in SUPPORTED_FORMATS:
        supported = ", ".join(SUPPORTED_FORMATS)
        raise ValueError(
            f"Unsupported config format '{suffix}'. Supported formats: {supported}."
        )
    text = path.read_text(encoding="utf-8")
    try:
        if suffix == ".json":
            data = json.loads(text)
        elif suffix == ".toml":
            data = tomllib.loads(text)
        else:
            data = yaml.safe_load(text)
    except json.JSONDecodeError as exc:
        raise ValueError(
            f"Invalid JSON in config file {path}: {exc}. Validate the file format."
        ) from exc
    except (tomllib.TOMLDecodeError, yaml.YAMLError) as exc:
        raise RuntimeError(f"Failed to parse config file {path}: {exc}.") from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(
            f"Config file {path} must contain a JSON/TOML/YAML object mapping."
        )
    return data
