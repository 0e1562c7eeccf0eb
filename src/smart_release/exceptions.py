"""Exception hierarchy for smart-release.

All errors raised by smart-release derive from SmartReleaseError so
that callers (and the CLI) can handle them uniformly.
"""

from __future__ import annotations


class SmartReleaseError(Exception):
    """Base class for all smart-release errors."""


# =============================================================================
# Git
# =============================================================================


class GitError(SmartReleaseError):
    """A git command failed or returned unexpected output."""

    def __init__(self, message: str, stderr: str | None = None) -> None:
        super().__init__(message)
        self.stderr = stderr

    def __str__(self) -> str:
        message = super().__str__()
        if self.stderr:
            return f"{message}: {self.stderr.strip()}"
        return message


class NotARepositoryError(GitError):
    """The given path is not inside a git work tree."""


class DetachedHeadError(GitError):
    """HEAD does not point to a branch, so release history is ambiguous."""


class ObjectNotFoundError(GitError):
    """An object id could not be found in the object database."""

    def __init__(self, oid: str) -> None:
        super().__init__(f"Object {oid} not found in repository")
        self.oid = oid


# =============================================================================
# Configuration
# =============================================================================


class ConfigError(SmartReleaseError):
    """Base class for configuration errors."""


class ConfigNotFoundError(ConfigError):
    """No pyproject.toml could be located."""


class ConfigValidationError(ConfigError):
    """Configuration is present but invalid."""


# =============================================================================
# Workspace
# =============================================================================


class WorkspaceError(SmartReleaseError):
    """Workspace metadata is inconsistent."""


class PackageNotFoundError(WorkspaceError):
    """A package name is not part of the workspace."""

    def __init__(self, name: str, available: list[str] | None = None) -> None:
        message = f"Package '{name}' not found in workspace"
        if available:
            message += f" (available: {', '.join(sorted(available))})"
        super().__init__(message)
        self.name = name

