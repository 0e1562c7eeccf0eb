"""Core business logic for smart-release.

This module contains the fundamental building blocks:
- Commit history snapshots of the current branch
- Release tag discovery per package
- Package path filters and release segmentation
- Conventional commit parsing and changelog rendering
"""

from __future__ import annotations

from smart_release.core.changelog import render_changelog
from smart_release.core.commits import (
    ParsedCommit,
    format_commit_for_changelog,
    get_breaking_changes,
    group_commits_by_type,
    parse_commits,
)
from smart_release.core.history import CommitRecord, History, build_history
from smart_release.core.path_filter import (
    MultiComponent,
    NoFilter,
    PathFilter,
    SingleComponent,
    select_path_filter,
)
from smart_release.core.segments import Segment, Segmentation, ref_segments, segment_history
from smart_release.core.tags import TagRef, build_tag_index, is_tag_name, is_tag_version
from smart_release.core.version import Version, parse_tag_version

__all__ = [
    # History
    "CommitRecord",
    "History",
    "build_history",
    # Tags
    "TagRef",
    "Version",
    "build_tag_index",
    "is_tag_name",
    "is_tag_version",
    "parse_tag_version",
    # Segmentation
    "MultiComponent",
    "NoFilter",
    "PathFilter",
    "Segment",
    "Segmentation",
    "SingleComponent",
    "ref_segments",
    "segment_history",
    "select_path_filter",
    # Changelog
    "ParsedCommit",
    "format_commit_for_changelog",
    "get_breaking_changes",
    "group_commits_by_type",
    "parse_commits",
    "render_changelog",
]
