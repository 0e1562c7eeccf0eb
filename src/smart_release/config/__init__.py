"""Configuration management for smart-release."""

from __future__ import annotations

from smart_release.config.loader import load_config
from smart_release.config.models import (
    ChangelogConfig,
    CommitsConfig,
    HistoryConfig,
    PackagesConfig,
    SmartReleaseConfig,
)

__all__ = [
    "ChangelogConfig",
    "CommitsConfig",
    "HistoryConfig",
    "PackagesConfig",
    "SmartReleaseConfig",
    "load_config",
]
