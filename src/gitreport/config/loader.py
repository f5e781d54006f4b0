"""Load and merge configuration from .gitreport.toml and env vars."""

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

from gitreport.config.schema import (
    OUTPUT_FORMATS,
    GitConfig,
    GitReportConfig,
    OutputConfig,
    StatusConfig,
)

CONFIG_FILENAME = ".gitreport.toml"

log = logging.getLogger(__name__)


class ConfigError(Exception):
    """Raised when config is malformed or unreadable."""


def find_config_file(root: Path, override: Optional[str] = None) -> Optional[Path]:
    """Locate the config file. *override* takes precedence."""
    if override:
        p = Path(override)
        if not p.is_file():
            raise ConfigError(f"Config file not found: {override}")
        return p
    candidate = root / CONFIG_FILENAME
    return candidate if candidate.is_file() else None


def _parse_toml(path: Path) -> Dict[str, Any]:
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except (OSError, ValueError) as exc:
        # TOMLDecodeError and UnicodeDecodeError are both ValueErrors
        raise ConfigError(f"Failed to parse {path}: {exc}") from exc


def _merge_env_overrides(cfg: GitReportConfig) -> None:
    """Apply GITREPORT_* environment variable overrides."""
    if val := os.environ.get("GITREPORT_GIT_BINARY"):
        cfg.git.binary_path = val
    if val := os.environ.get("GITREPORT_TIMEOUT"):
        try:
            timeout = float(val)
        except ValueError:
            log.warning("Ignoring GITREPORT_TIMEOUT=%r: not a number", val)
        else:
            if timeout >= 0:
                cfg.git.timeout_after = timeout
    if val := os.environ.get("GITREPORT_FORMAT"):
        if val in OUTPUT_FORMATS:
            cfg.output.format = val  # type: ignore[assignment]
    if os.environ.get("GITREPORT_NORMALIZE_ENCODING") == "1":
        cfg.git.normalize_encoding = True


def _build_section(data: Dict[str, Any], cls: type, section: str):
    """Build a dataclass from a TOML section dict, ignoring unknown keys."""
    valid_fields = {f.name for f in dataclasses.fields(cls)}
    filtered = {k: v for k, v in data.get(section, {}).items() if k in valid_fields}
    return cls(**filtered)


def load_config(
    root: Path,
    config_override: Optional[str] = None,
) -> GitReportConfig:
    """Load and return a GitReportConfig for the tree at *root*."""
    config_path = find_config_file(root, config_override)

    if config_path is None:
        cfg = GitReportConfig()
    else:
        log.debug("Loading config from %s", config_path)
        raw = _parse_toml(config_path)
        cfg = GitReportConfig(
            version=raw.get("version", "1.0"),
            git=_build_section(raw, GitConfig, "git"),
            status=_build_section(raw, StatusConfig, "status"),
            output=_build_section(raw, OutputConfig, "output"),
        )

    _merge_env_overrides(cfg)
    return cfg
