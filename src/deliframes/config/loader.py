"""Configuration loading and validation."""

from pathlib import Path
from typing import Any

import yaml

from deliframes.config.schema import PatchConfig


def load_config(path: Path | str) -> PatchConfig:
    """Load patch settings from a YAML file.

    Args:
        path: Path to YAML file

    Returns:
        Validated PatchConfig
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path) as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid config format in {path}: {e}") from e

    # An empty file means all defaults
    if data is None:
        data = {}

    if not isinstance(data, dict):
        raise ValueError(f"Invalid config format in {path}")

    return PatchConfig(**data)


def save_config(config: PatchConfig, path: Path | str) -> None:
    """Save patch settings to a YAML file.

    Args:
        config: Settings to save
        path: Output path for YAML file
    """
    path = Path(path)
    data = config.model_dump(exclude_none=True)

    with open(path, "w") as f:
        yaml.dump(data, f, default_flow_style=False, sort_keys=False)


def build_config(path: Path | str | None = None, overrides: dict[str, Any] | None = None) -> PatchConfig:
    """Combine an optional config file with command-line overrides.

    Overrides whose value is None are ignored.
    """
    base = load_config(path).model_dump() if path is not None else {}
    override = {k: v for k, v in (overrides or {}).items() if v is not None}
    return PatchConfig(**merge_configs(base, override))


def merge_configs(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Deep merge two configuration dictionaries.

    Args:
        base: Base configuration
        override: Override configuration (takes precedence)

    Returns:
        Merged configuration
    """
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = merge_configs(result[key], value)
        else:
            result[key] = value

    return result
