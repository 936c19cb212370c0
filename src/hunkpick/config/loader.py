"""Load and merge configuration from .hunkpick.toml and env vars."""

from __future__ import annotations

import dataclasses
import logging
import os
import sys
from pathlib import Path
from typing import Any, Dict, Optional

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from hunkpick.config.schema import (
    BAD_HEADER_POLICIES,
    OUTPUT_FORMATS,
    VIEW_MODES,
    DiffConfig,
    HunkpickConfig,
    OutputConfig,
    PatchConfig,
    ViewConfig,
)

logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".hunkpick.toml"


class ConfigError(Exception):
    """Raised when config is malformed or unreadable."""


def find_config_file(repo_root: Path, override: Optional[str] = None) -> Optional[Path]:
    """Locate the config file. *override* takes precedence."""
    if override:
        p = Path(override)
        if not p.is_file():
            raise ConfigError(f"Config file not found: {override}")
        return p
    candidate = repo_root / CONFIG_FILENAME
    return candidate if candidate.is_file() else None


def _parse_toml(path: Path) -> Dict[str, Any]:
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as exc:
        raise ConfigError(f"Failed to parse {path}: {exc}") from exc


def _merge_env_overrides(cfg: HunkpickConfig) -> None:
    """Apply HUNKPICK_* environment variable overrides."""
    if val := os.environ.get("HUNKPICK_VIEW_MODE"):
        if val in VIEW_MODES:
            cfg.view.mode = val  # type: ignore[assignment]
    if val := os.environ.get("HUNKPICK_FORMAT"):
        if val in OUTPUT_FORMATS:
            cfg.output.format = val  # type: ignore[assignment]
    if val := os.environ.get("HUNKPICK_ON_BAD_HEADER"):
        if val in BAD_HEADER_POLICIES:
            cfg.patch.on_bad_header = val  # type: ignore[assignment]
    if val := os.environ.get("HUNKPICK_CONTEXT_LINES"):
        try:
            lines = int(val)
        except ValueError:
            logger.debug("Ignoring HUNKPICK_CONTEXT_LINES=%r", val)
        else:
            if lines >= 0:
                cfg.diff.context_lines = lines


def _build_section(data: Dict[str, Any], cls: type, section: str):
    """Build a dataclass from a TOML section dict, ignoring unknown keys."""
    raw = data.get(section, {})
    if not isinstance(raw, dict):
        raise ConfigError(f"[{section}] must be a table")
    valid_fields = {f.name for f in dataclasses.fields(cls)}
    filtered = {k: v for k, v in raw.items() if k in valid_fields}
    return cls(**filtered)


def _validate(cfg: HunkpickConfig) -> None:
    if cfg.view.mode not in VIEW_MODES:
        raise ConfigError(f"view.mode must be one of {', '.join(VIEW_MODES)}")
    if cfg.output.format not in OUTPUT_FORMATS:
        raise ConfigError(f"output.format must be one of {', '.join(OUTPUT_FORMATS)}")
    if cfg.patch.on_bad_header not in BAD_HEADER_POLICIES:
        raise ConfigError(
            f"patch.on_bad_header must be one of {', '.join(BAD_HEADER_POLICIES)}"
        )
    if not isinstance(cfg.diff.context_lines, int) or cfg.diff.context_lines < 0:
        raise ConfigError("diff.context_lines must be a non-negative integer")


def load_config(
    repo_root: Path,
    config_override: Optional[str] = None,
) -> HunkpickConfig:
    """Load, validate, and return a HunkpickConfig."""
    config_path = find_config_file(repo_root, config_override)

    if config_path is None:
        cfg = HunkpickConfig()
    else:
        raw = _parse_toml(config_path)
        cfg = HunkpickConfig(
            version=raw.get("version", "1.0"),
            view=_build_section(raw, ViewConfig, "view"),
            diff=_build_section(raw, DiffConfig, "diff"),
            patch=_build_section(raw, PatchConfig, "patch"),
            output=_build_section(raw, OutputConfig, "output"),
        )
        _validate(cfg)

    _merge_env_overrides(cfg)
    return cfg
