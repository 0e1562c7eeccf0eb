"""Package path filters.

A package's directory relative to the repository root decides how its
changes are detected: a root package sees every commit, a top-level
directory is looked up directly in the root tree, and nested directories
are resolved by walking through intermediate trees.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import PurePath, PurePosixPath
from typing import TYPE_CHECKING, Union

from smart_release.vcs.objects import find_entry

if TYPE_CHECKING:
    from smart_release.vcs.git import GitRepository
    from smart_release.vcs.objects import TreeEntry


@dataclass(frozen=True)
class NoFilter:
    """The package occupies the repository root."""


@dataclass(frozen=True)
class SingleComponent:
    """The package lives in a directory directly below the root."""

    name: bytes

    def lookup(self, tree_data: bytes, repo: GitRepository) -> TreeEntry | None:
        return find_entry(tree_data, self.name, repo.hash_size)


@dataclass(frozen=True)
class MultiComponent:
    """The package lives in a nested directory."""

    components: tuple[bytes, ...]

    def lookup(self, tree_data: bytes, repo: GitRepository) -> TreeEntry | None:
        """Resolve the component chain starting at a root tree."""
        *parents, last = self.components
        data = tree_data
        for component in parents:
            entry = find_entry(data, component, repo.hash_size)
            if entry is None or not entry.is_tree:
                return None
            data = repo.read_tree(entry.oid)
        return find_entry(data, last, repo.hash_size)


PathFilter = Union[NoFilter, SingleComponent, MultiComponent]


def select_path_filter(directory: str | os.PathLike[str] | None) -> PathFilter:
    """Choose the filter for a package directory relative to the repo root."""
    if directory is None:
        return NoFilter()

    parts = PurePosixPath(PurePath(directory).as_posix()).parts
    components = [os.fsencode(part) for part in parts]
    if not components:
        return NoFilter()
    if len(components) == 1:
        return SingleComponent(components[0])
    return MultiComponent(tuple(components))
