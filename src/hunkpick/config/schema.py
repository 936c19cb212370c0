"""Configuration schema — dataclasses for every config section."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

ViewMode = Literal["unified", "split"]
BadHeaderPolicy = Literal["error", "skip"]
OutputFormat = Literal["terminal", "json"]

VIEW_MODES = ("unified", "split")
BAD_HEADER_POLICIES = ("error", "skip")
OUTPUT_FORMATS = ("terminal", "json")


@dataclass
class ViewConfig:
    mode: ViewMode = "unified"
    show_line_numbers: bool = True


@dataclass
class DiffConfig:
    context_lines: int = 3  # passed to git diff --unified


@dataclass
class PatchConfig:
    on_bad_header: BadHeaderPolicy = "error"  # error | skip


@dataclass
class OutputConfig:
    format: OutputFormat = "terminal"


@dataclass
class HunkpickConfig:
    version: str = "1.0"
    view: ViewConfig = field(default_factory=ViewConfig)
    diff: DiffConfig = field(default_factory=DiffConfig)
    patch: PatchConfig = field(default_factory=PatchConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
