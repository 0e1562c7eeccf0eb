"""Pydantic models for smart-release configuration.

Configuration lives in ``[tool.smart-release]`` of the workspace
``pyproject.toml``. Every section has defaults, so an empty table (or
none at all) yields a usable configuration.
"""

from __future__ import annotations

import re

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_SECTIONS = {
    "feat": "### ✨ Features",
    "fix": "### 🐛 Bug Fixes",
    "perf": "### ⚡ Performance",
    "docs": "### 📚 Documentation",
    "refactor": "### ♻️ Refactoring",
    "test": "### 🧪 Tests",
    "build": "### 📦 Build",
    "ci": "### 🔧 CI",
    "style": "### 💄 Style",
    "chore": "### 🔨 Chores",
    "other": "### 📝 Other",
}


class _Section(BaseModel):
    model_config = ConfigDict(extra="forbid")


class PackagesConfig(_Section):
    """Workspace package layout.

    Attributes:
        paths: Package directories relative to the workspace root
        tag_prefixes: Tag prefix per package name, overriding the default
            (the package name, or plain version tags for the root package)
    """

    paths: list[str] = Field(default_factory=list)
    tag_prefixes: dict[str, str] = Field(default_factory=dict)

    @field_validator("tag_prefixes")
    @classmethod
    def _non_empty_prefixes(cls, value: dict[str, str]) -> dict[str, str]:
        for name, prefix in value.items():
            if not prefix or prefix.endswith("-"):
                raise ValueError(
                    f"Tag prefix for '{name}' must be non-empty and must not end with '-'"
                )
        return value


class HistoryConfig(_Section):
    """Object cache sizes (in bytes) used while reading history."""

    object_cache_size: int = Field(default=64 * 1024, ge=0)
    tree_lookup_cache_size: int = Field(default=1024 * 1024, ge=0)


class CommitsConfig(_Section):
    """Conventional commit classification."""

    breaking_pattern: str = r"BREAKING[ -]CHANGE:"

    @field_validator("breaking_pattern")
    @classmethod
    def _valid_pattern(cls, value: str) -> str:
        try:
            re.compile(value)
        except re.error as e:
            raise ValueError(f"Invalid breaking_pattern {value!r}: {e}") from e
        return value


class ChangelogConfig(_Section):
    """Changelog rendering."""

    include_sha: bool = False
    sections: dict[str, str] = Field(default_factory=lambda: dict(DEFAULT_SECTIONS))


class SmartReleaseConfig(_Section):
    """Root configuration model."""

    packages: PackagesConfig = Field(default_factory=PackagesConfig)
    history: HistoryConfig = Field(default_factory=HistoryConfig)
    commits: CommitsConfig = Field(default_factory=CommitsConfig)
    changelog: ChangelogConfig = Field(default_factory=ChangelogConfig)
