"""Changelog rendering from release segments.

Each segment becomes one section: the newest (HEAD) segment is rendered
as ``Unreleased``, every tag segment under the version its tag encodes.
Commits are grouped by conventional commit type, breaking changes first.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from smart_release.core.commits import (
    format_commit_for_changelog,
    get_breaking_changes,
    group_commits_by_type,
    parse_commits,
)
from smart_release.core.tags import TagRef

if TYPE_CHECKING:
    from smart_release.config.models import SmartReleaseConfig
    from smart_release.core.segments import Segment


def segment_title(segment: Segment) -> str:
    """Heading text for a segment."""
    if not isinstance(segment.boundary, TagRef):
        return "Unreleased"
    version = segment.boundary.version
    return str(version) if version is not None else segment.boundary.short_name


def render_segment(segment: Segment, config: SmartReleaseConfig) -> list[str]:
    """Render one segment as markdown lines."""
    parsed = parse_commits(segment.commits, config.commits)
    grouped = group_commits_by_type(parsed)
    include_sha = config.changelog.include_sha

    lines = [f"## {segment_title(segment)}", ""]

    breaking = get_breaking_changes(parsed)
    if breaking:
        lines.append("### ⚠️ Breaking Changes")
        lines.append("")
        for pc in breaking:
            lines.append(format_commit_for_changelog(pc, include_sha=include_sha))
        lines.append("")

    for commit_type, label in config.changelog.sections.items():
        # Breaking changes were listed above
        commits_of_type = [pc for pc in grouped.get(commit_type, []) if not pc.is_breaking]
        if commits_of_type:
            lines.append(label)
            lines.append("")
            for pc in commits_of_type:
                lines.append(format_commit_for_changelog(pc, include_sha=include_sha))
            lines.append("")

    return lines


def render_changelog(
    package_name: str,
    segments: list[Segment],
    config: SmartReleaseConfig,
) -> str:
    """Render a markdown changelog for a package.

    Segments without relevant commits are omitted.

    Args:
        package_name: Package the segments belong to
        segments: Segments ordered from HEAD towards the oldest tag
        config: Configuration providing section labels

    Returns:
        Markdown text, empty if no segment has commits
    """
    lines: list[str] = []
    for segment in segments:
        if segment.positions:
            lines.extend(render_segment(segment, config))

    if not lines:
        return ""
    return "\n".join([f"# Changelog of {package_name}", "", *lines]).rstrip() + "\n"
