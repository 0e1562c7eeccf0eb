"""Conventional commit parsing.

Parses commit messages following the Conventional Commits format
(https://www.conventionalcommits.org/):

    <type>[optional scope][!]: <description>

    [optional body]

    [optional footer(s)]
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from smart_release.config.models import CommitsConfig
    from smart_release.core.history import CommitRecord

CONVENTIONAL_PATTERN = re.compile(
    r"^(?P<type>[a-zA-Z]+)(?:\((?P<scope>[^)]*)\))?(?P<breaking>!)?:\s*(?P<description>\S.*)$"
)


@dataclass(frozen=True)
class ParsedCommit:
    """A commit message split into its conventional parts."""

    commit: CommitRecord
    commit_type: str | None
    scope: str | None
    description: str
    is_breaking: bool

    @property
    def is_conventional(self) -> bool:
        return self.commit_type is not None

    @classmethod
    def from_record(cls, commit: CommitRecord, breaking_pattern: str) -> ParsedCommit:
        """Parse a commit record.

        Args:
            commit: Commit to parse
            breaking_pattern: Regex marking a breaking change in the body
        """
        summary = commit.summary
        match = CONVENTIONAL_PATTERN.match(summary)
        body_breaking = re.search(breaking_pattern, commit.message) is not None

        if match is None:
            return cls(
                commit=commit,
                commit_type=None,
                scope=None,
                description=summary,
                is_breaking=body_breaking,
            )

        return cls(
            commit=commit,
            commit_type=match["type"].lower(),
            scope=match["scope"] or None,
            description=match["description"].strip(),
            is_breaking=bool(match["breaking"]) or body_breaking,
        )


def parse_commits(commits: list[CommitRecord], config: CommitsConfig) -> list[ParsedCommit]:
    """Parse a list of commits in order."""
    return [ParsedCommit.from_record(commit, config.breaking_pattern) for commit in commits]


def group_commits_by_type(parsed: list[ParsedCommit]) -> dict[str, list[ParsedCommit]]:
    """Group parsed commits by type; non-conventional commits go under ``other``."""
    grouped: dict[str, list[ParsedCommit]] = {}
    for pc in parsed:
        grouped.setdefault(pc.commit_type or "other", []).append(pc)
    return grouped


def get_breaking_changes(parsed: list[ParsedCommit]) -> list[ParsedCommit]:
    return [pc for pc in parsed if pc.is_breaking]


def format_commit_for_changelog(
    pc: ParsedCommit,
    *,
    include_scope: bool = True,
    include_sha: bool = False,
) -> str:
    """Format a parsed commit as a changelog bullet."""
    parts = ["-"]
    if pc.is_breaking:
        parts.append("[BREAKING]")
    if include_scope and pc.scope:
        parts.append(f"**{pc.scope}:**")
    parts.append(pc.description)
    if include_sha:
        parts.append(f"({pc.commit.id[:7]})")
    return " ".join(parts)
