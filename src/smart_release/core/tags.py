"""Release tag discovery.

Packages in a workspace are tagged either with their own prefix
(``<prefix>-<version>``, e.g. ``core-1.2.0``) or, for a package at the
repository root, with plain version tags (``v1.2.0``).
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING

from smart_release.core.version import Version, parse_tag_version
from smart_release.vcs.git import TAGS_NAMESPACE, Reference

if TYPE_CHECKING:
    from smart_release.vcs.git import GitRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TagRef(Reference):
    """A release tag, ``target`` being the commit it ultimately points at."""

    @property
    def version(self) -> Version | None:
        """Version encoded in the tag name, ignoring any package prefix."""
        name = self.short_name
        candidates = [name] + [name[i + 1 :] for i, char in enumerate(name) if char == "-"]
        for candidate in candidates:
            version = parse_tag_version(candidate)
            if version is not None:
                return version
        return None


def is_tag_name(prefix: str, tag_name: str) -> bool:
    """Whether tag_name is ``<prefix>-<version>``."""
    return parse_tag_version(tag_name, prefix) is not None


def is_tag_version(tag_name: str) -> bool:
    """Whether tag_name is a plain (optionally v-prefixed) version."""
    return parse_tag_version(tag_name) is not None


def build_tag_index(repo: GitRepository, tag_prefix: str | None) -> dict[str, TagRef]:
    """Map commit ids to the release tag pointing at them.

    Args:
        repo: Repository to scan
        tag_prefix: Package tag prefix, or None for global version tags

    Returns:
        Tags keyed by target commit id. If several tags point at the same
        commit, the one that sorts last by name wins.
    """
    start = time.perf_counter()
    if tag_prefix is not None:
        references = repo.tag_references(f"{TAGS_NAMESPACE}{tag_prefix}-*")
    else:
        references = repo.tag_references(TAGS_NAMESPACE)

    tags_by_commit: dict[str, TagRef] = {}
    for reference in references:
        tag = TagRef(name=reference.name, target=reference.target)
        if tag_prefix is not None:
            matches = is_tag_name(tag_prefix, tag.short_name)
        else:
            matches = is_tag_version(tag.short_name)
        if matches:
            tags_by_commit[tag.target] = tag

    elapsed = time.perf_counter() - start
    logger.debug(
        "%s: Mapped %d tags in %.2fs",
        tag_prefix or "<root>",
        len(tags_by_commit),
        elapsed,
    )
    return tags_by_commit
