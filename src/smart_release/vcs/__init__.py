"""Version control access for smart-release."""

from __future__ import annotations

from smart_release.vcs.git import GitRepository, Head, HeadKind, Reference
from smart_release.vcs.objects import CommitObject, ObjectCache, RawObject, TreeEntry

__all__ = [
    "CommitObject",
    "GitRepository",
    "Head",
    "HeadKind",
    "ObjectCache",
    "RawObject",
    "Reference",
    "TreeEntry",
]
