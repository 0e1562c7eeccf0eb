"""Workspace package discovery.

A workspace is a repository holding one or more Python packages, each
with its own pyproject.toml. The package at the workspace root (if its
pyproject.toml has a ``[project]`` table) is released with plain version
tags, every other package with ``<name>-<version>`` tags unless a prefix
is configured explicitly.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import TYPE_CHECKING

from smart_release.config.loader import get_project_name, load_pyproject_toml
from smart_release.exceptions import PackageNotFoundError, WorkspaceError

if TYPE_CHECKING:
    from smart_release.config.models import SmartReleaseConfig

ROOT_PATH = PurePosixPath(".")


@dataclass(frozen=True)
class Package:
    """A releasable package.

    Attributes:
        name: Distribution name from its pyproject.toml
        path: Package directory relative to the repository root
    """

    name: str
    path: PurePosixPath

    @property
    def is_root(self) -> bool:
        return self.path == ROOT_PATH


@dataclass(frozen=True)
class Workspace:
    """Packages of a repository and their tag conventions."""

    packages: tuple[Package, ...]
    tag_prefixes: dict[str, str]

    @property
    def names(self) -> list[str]:
        return [package.name for package in self.packages]

    def package_by_name(self, name: str) -> Package:
        """Look up a package.

        Raises:
            PackageNotFoundError: If no package has that name
        """
        for package in self.packages:
            if package.name == name:
                return package
        raise PackageNotFoundError(name, self.names)

    def tag_prefix(self, package: Package) -> str | None:
        """Tag prefix of a package, None meaning plain version tags."""
        if package.name in self.tag_prefixes:
            return self.tag_prefixes[package.name]
        if package.is_root:
            return None
        return package.name


def _repo_relative(directory: Path, repo_root: Path) -> PurePosixPath:
    try:
        relative = directory.resolve().relative_to(repo_root.resolve())
    except ValueError as e:
        raise WorkspaceError(f"{directory} is outside the repository {repo_root}") from e
    return PurePosixPath(relative.as_posix())


def load_workspace(
    root: Path,
    config: SmartReleaseConfig,
    repo_root: Path | None = None,
) -> Workspace:
    """Discover the packages of a workspace.

    Args:
        root: Workspace directory holding the top-level pyproject.toml
        config: Configuration listing additional package paths
        repo_root: Repository work tree root (defaults to root)

    Raises:
        WorkspaceError: If a package is outside the repository or listed twice
        ConfigNotFoundError: If a package directory has no pyproject.toml
    """
    repo_root = repo_root or root
    packages: list[Package] = []

    root_pyproject = root / "pyproject.toml"
    if root_pyproject.is_file() and "project" in load_pyproject_toml(root_pyproject):
        packages.append(Package(get_project_name(root), _repo_relative(root, repo_root)))

    for relative in config.packages.paths:
        directory = root / relative
        packages.append(Package(get_project_name(directory), _repo_relative(directory, repo_root)))

    seen: set[str] = set()
    for package in packages:
        if package.name in seen:
            raise WorkspaceError(f"Package '{package.name}' is listed more than once")
        seen.add(package.name)

    return Workspace(packages=tuple(packages), tag_prefixes=dict(config.packages.tag_prefixes))
