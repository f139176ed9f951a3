"""Configuration loading and validation."""

from deliframes.config.loader import build_config, load_config, save_config
from deliframes.config.schema import PatchConfig

__all__ = ["PatchConfig", "build_config", "load_config", "save_config"]
