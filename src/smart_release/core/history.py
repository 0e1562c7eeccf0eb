"""Linear commit history snapshot.

The history of HEAD is walked exactly once per invocation. Every retained
commit keeps a copy of its root tree data so that per-package change
detection can compare trees without another pass over the repository.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from smart_release.exceptions import DetachedHeadError
from smart_release.vcs.git import HeadKind, Reference

if TYPE_CHECKING:
    from smart_release.vcs.git import GitRepository

logger = logging.getLogger(__name__)

DEFAULT_HISTORY_CACHE_SIZE = 64 * 1024


@dataclass(frozen=True)
class CommitRecord:
    """A commit as seen by the segmentation engine.

    Attributes:
        id: Hex object id of the commit
        message: Full commit message
        tree_data: Raw data of the commit's root tree
    """

    id: str
    message: str
    tree_data: bytes = field(repr=False)

    @property
    def summary(self) -> str:
        """First line of the message."""
        return self.message.split("\n", 1)[0].strip()


@dataclass(frozen=True)
class History:
    """All commits reachable from HEAD, children before their parents.

    Attributes:
        head: The branch HEAD pointed to when the history was built
        commits: Retained commits in traversal order
        skipped: Ids of commits dropped because their message was not UTF-8
    """

    head: Reference
    commits: tuple[CommitRecord, ...]
    skipped: tuple[str, ...] = ()

    def __len__(self) -> int:
        return len(self.commits)


def build_history(
    repo: GitRepository,
    *,
    cache_size: int = DEFAULT_HISTORY_CACHE_SIZE,
) -> History | None:
    """Snapshot the history of the current branch.

    Args:
        repo: Repository to read from
        cache_size: Object cache capacity to use while walking

    Returns:
        The history, or None if HEAD is unborn (no commits yet)

    Raises:
        DetachedHeadError: If HEAD is detached
        GitError: If any repository access fails
    """
    start = time.perf_counter()
    head = repo.head()
    if head.kind is HeadKind.DETACHED:
        raise DetachedHeadError("Refusing to operate on a detached head.")
    if head.kind is HeadKind.UNBORN or head.name is None or head.target is None:
        return None

    reference = Reference(name=head.name, target=head.target)
    commits: list[CommitRecord] = []
    skipped: list[str] = []

    with repo.object_cache(cache_size):
        for commit_id in repo.ancestors(reference.target):
            commit = repo.read_commit(commit_id)
            try:
                message = commit.message.decode("utf-8")
            except UnicodeDecodeError:
                logger.warning(
                    "Commit message of %s could not be decoded to UTF-8 - ignored", commit_id
                )
                skipped.append(commit_id)
                continue

            commits.append(
                CommitRecord(
                    id=commit_id,
                    message=message,
                    tree_data=repo.read_tree(commit.tree),
                )
            )

    elapsed = time.perf_counter() - start
    logger.debug(
        "Cached commit history of %d commits and trees in %.2fs (%.0f items/s)",
        len(commits),
        elapsed,
        len(commits) / elapsed if elapsed else 0,
    )
    return History(head=reference, commits=tuple(commits), skipped=tuple(skipped))
