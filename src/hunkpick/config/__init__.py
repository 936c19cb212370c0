"""Configuration loading, schema, and defaults."""

from hunkpick.config.loader import ConfigError, load_config
from hunkpick.config.schema import HunkpickConfig

__all__ = [
    "ConfigError",
    "HunkpickConfig",
    "load_config",
]
