"""Release segmentation of a linear history.

A single pass over the history splits it at every release tag of a
package. Each segment holds the commits governed by its boundary (HEAD
for the newest segment, a tag for every older one) that actually changed
the package.

Commits are compared against the next commit in traversal order, which
equals their parent for linear history.
"""

from __future__ import annotations

import logging
import time
from contextlib import nullcontext
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from smart_release.core.path_filter import MultiComponent, NoFilter, select_path_filter
from smart_release.core.tags import TagRef, build_tag_index

if TYPE_CHECKING:
    from smart_release.config.models import SmartReleaseConfig
    from smart_release.core.history import CommitRecord, History
    from smart_release.core.path_filter import PathFilter
    from smart_release.project.workspace import Workspace
    from smart_release.vcs.git import GitRepository, Reference

logger = logging.getLogger(__name__)

DEFAULT_TREE_LOOKUP_CACHE_SIZE = 1024 * 1024


@dataclass
class Segment:
    """A release window and the package-relevant commits inside it.

    Attributes:
        boundary: HEAD reference for the newest segment, the tag otherwise
        history: History the positions refer to
        positions: Indices into the history's commits, newest first
    """

    boundary: Reference
    history: History = field(repr=False, compare=False)
    positions: list[int] = field(default_factory=list)

    @property
    def is_head(self) -> bool:
        return not isinstance(self.boundary, TagRef)

    @property
    def commits(self) -> list[CommitRecord]:
        return [self.history.commits[i] for i in self.positions]

    @property
    def commit_ids(self) -> list[str]:
        return [self.history.commits[i].id for i in self.positions]

    def __len__(self) -> int:
        return len(self.positions)


@dataclass
class Segmentation:
    """Outcome of segmenting a history for one package.

    Attributes:
        segments: Segments ordered from HEAD towards the oldest tag
        ignored_tags: Tags on commits outside the traversed history
    """

    segments: list[Segment]
    ignored_tags: list[TagRef] = field(default_factory=list)

    @property
    def num_commits(self) -> int:
        return sum(len(segment) for segment in self.segments)


def _is_relevant(
    path_filter: PathFilter,
    commit: CommitRecord,
    baseline: CommitRecord | None,
    repo: GitRepository,
) -> bool:
    """Whether commit changed the filtered path compared to baseline.

    Without a baseline the commit is relevant if the path exists in it.
    """
    if isinstance(path_filter, NoFilter):
        return True

    current = path_filter.lookup(commit.tree_data, repo)
    if current is None:
        return False
    if baseline is None:
        return True
    previous = path_filter.lookup(baseline.tree_data, repo)
    return previous is None or previous.oid != current.oid


def segment_history(
    history: History,
    tags_by_commit: dict[str, TagRef],
    path_filter: PathFilter,
    repo: GitRepository,
    *,
    package_name: str = "",
    cache_size: int = DEFAULT_TREE_LOOKUP_CACHE_SIZE,
) -> Segmentation:
    """Split history into release segments for one package.

    Tagged commits always open a new segment and are always part of it;
    all other commits are kept only if they changed the package path.

    Args:
        history: History of the current branch
        tags_by_commit: Release tags keyed by target commit id (not modified)
        path_filter: How to detect changes to the package
        repo: Repository used to resolve nested trees
        package_name: Name used in log messages
        cache_size: Object cache capacity while resolving nested trees

    Returns:
        The segments and any tags that were never reached
    """
    start = time.perf_counter()
    remaining = dict(tags_by_commit)
    segments: list[Segment] = []
    segment = Segment(boundary=history.head, history=history)

    commits = history.commits
    # Nested lookups share intermediate trees between a commit and its baseline
    scope = (
        repo.object_cache(cache_size) if isinstance(path_filter, MultiComponent) else nullcontext()
    )
    with scope:
        for i, commit in enumerate(commits):
            tag = remaining.pop(commit.id, None)
            if tag is not None:
                segments.append(segment)
                segment = Segment(boundary=tag, positions=[i], history=history)
                continue

            baseline = commits[i + 1] if i + 1 < len(commits) else None
            if _is_relevant(path_filter, commit, baseline, repo):
                segment.positions.append(i)
    segments.append(segment)

    ignored = sorted(remaining.values(), key=lambda tag: tag.name)
    if ignored:
        logger.warning(
            "%s: The following tags were on branches which are ignored during traversal: %s",
            package_name,
            ", ".join(tag.short_name for tag in ignored),
        )

    result = Segmentation(segments=segments, ignored_tags=ignored)
    elapsed = time.perf_counter() - start
    logger.debug(
        "%s: Found %d relevant commits out of %d in %d segments in %.2fs",
        package_name,
        result.num_commits,
        len(commits),
        len(segments),
        elapsed,
    )
    return result


def ref_segments(
    package_name: str,
    workspace: Workspace,
    repo: GitRepository,
    history: History,
    config: SmartReleaseConfig | None = None,
) -> Segmentation:
    """Segment history for a workspace package.

    Args:
        package_name: Name of the package
        workspace: Workspace providing package paths and tag prefixes
        repo: Repository the history was built from
        history: History of the current branch
        config: Configuration providing cache sizes

    Raises:
        PackageNotFoundError: If the package is not part of the workspace
    """
    package = workspace.package_by_name(package_name)
    tags_by_commit = build_tag_index(repo, workspace.tag_prefix(package))
    path_filter = select_path_filter(package.path)
    cache_size = (
        config.history.tree_lookup_cache_size if config else DEFAULT_TREE_LOOKUP_CACHE_SIZE
    )
    return segment_history(
        history,
        tags_by_commit,
        path_filter,
        repo,
        package_name=package.name,
        cache_size=cache_size,
    )
