"""Configuration schema: dataclasses for every config section."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, Optional

OutputFormat = Literal["terminal", "json"]
UntrackedFiles = Literal["no", "normal", "all"]
IgnoredMode = Literal["traditional", "no", "matching"]
IgnoreSubmodules = Literal["none", "untracked", "dirty", "all"]

OUTPUT_FORMATS = ("terminal", "json")


@dataclass
class GitConfig:
    binary_path: Optional[str] = None  # None = search PATH
    timeout_after: Optional[float] = None  # seconds; None = no deadline
    normalize_encoding: bool = False
    locale: str = "en_US.UTF-8"


@dataclass
class StatusConfig:
    untracked_files: UntrackedFiles = "all"
    ignored: IgnoredMode = "no"
    ignore_submodules: IgnoreSubmodules = "all"


@dataclass
class OutputConfig:
    format: OutputFormat = "terminal"
    show_summary: bool = True


@dataclass
class GitReportConfig:
    version: str = "1.0"
    git: GitConfig = field(default_factory=GitConfig)
    status: StatusConfig = field(default_factory=StatusConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
