"""Configuration loading, schema, and defaults."""

from gitreport.config.loader import ConfigError, load_config
from gitreport.config.schema import GitConfig, GitReportConfig, OutputConfig, StatusConfig

__all__ = [
    "ConfigError",
    "GitConfig",
    "GitReportConfig",
    "OutputConfig",
    "StatusConfig",
    "load_config",
]
