"""Tests for conventional commit parsing."""

from __future__ import annotations

import pytest

from smart_release.config.models import CommitsConfig
from smart_release.core.commits import (
    ParsedCommit,
    format_commit_for_changelog,
    get_breaking_changes,
    group_commits_by_type,
    parse_commits,
)
from smart_release.core.history import CommitRecord

BREAKING = r"BREAKING[ -]CHANGE:"


def record(message: str, sha: str = "abc1234def") -> CommitRecord:
    return CommitRecord(id=sha, message=message, tree_data=b"")


@pytest.fixture
def sample_commits() -> list[CommitRecord]:
    return [
        record("feat: add user authentication", "feat123"),
        record("fix(core): handle empty config", "fix4567"),
        record("docs: update readme", "docs890"),
        record("chore: bump deps", "chore12"),
        record("feat(api)!: drop v1 endpoints", "break34"),
        record("Updated the readme file", "other56"),
    ]


class TestParsedCommit:
    """Tests for ParsedCommit.from_record()."""

    def test_parse_simple_feat(self):
        """Parse a simple feat commit."""
        pc = ParsedCommit.from_record(record("feat: add new feature"), BREAKING)

        assert pc.is_conventional
        assert pc.commit_type == "feat"
        assert pc.scope is None
        assert pc.description == "add new feature"
        assert not pc.is_breaking

    def test_parse_with_scope(self):
        """Parse commit with scope."""
        pc = ParsedCommit.from_record(record("fix(api): handle null response"), BREAKING)

        assert pc.commit_type == "fix"
        assert pc.scope == "api"
        assert pc.description == "handle null response"

    def test_parse_breaking_with_exclamation(self):
        """Parse breaking change with ! indicator."""
        pc = ParsedCommit.from_record(record("feat(core)!: change config format"), BREAKING)

        assert pc.is_breaking
        assert pc.commit_type == "feat"
        assert pc.scope == "core"

    def test_parse_breaking_in_body(self):
        """Parse breaking change in commit body."""
        message = "feat: new feature\n\nBREAKING CHANGE: old API removed"
        pc = ParsedCommit.from_record(record(message), BREAKING)

        assert pc.is_breaking
        assert pc.description == "new feature"

    def test_parse_non_conventional(self):
        """Parse non-conventional commit."""
        pc = ParsedCommit.from_record(record("Updated the readme file"), BREAKING)

        assert not pc.is_conventional
        assert pc.commit_type is None
        assert pc.description == "Updated the readme file"

    def test_type_is_lowercased(self):
        """Commit types are case-insensitive."""
        pc = ParsedCommit.from_record(record("FEAT: uppercase type"), BREAKING)
        assert pc.commit_type == "feat"


class TestGrouping:
    """Tests for parse_commits() and friends."""

    def test_parse_multiple_commits(self, sample_commits):
        """Parse multiple commits in order."""
        parsed = parse_commits(sample_commits, CommitsConfig())

        assert [pc.commit.id for pc in parsed] == [c.id for c in sample_commits]

    def test_group_by_type(self, sample_commits):
        """Group commits by their type, others under 'other'."""
        grouped = group_commits_by_type(parse_commits(sample_commits, CommitsConfig()))

        assert set(grouped) == {"feat", "fix", "docs", "chore", "other"}
        assert len(grouped["feat"]) == 2

    def test_get_breaking_changes(self, sample_commits):
        """Get only breaking change commits."""
        breaking = get_breaking_changes(parse_commits(sample_commits, CommitsConfig()))

        assert [pc.commit.id for pc in breaking] == ["break34"]


class TestFormatCommitForChangelog:
    """Tests for format_commit_for_changelog()."""

    def test_format_simple(self):
        """Format simple commit."""
        pc = ParsedCommit.from_record(record("feat: add user authentication"), BREAKING)
        assert format_commit_for_changelog(pc) == "- add user authentication"

    def test_format_with_scope(self):
        """Format commit with scope."""
        pc = ParsedCommit.from_record(record("fix(core): handle it"), BREAKING)

        assert format_commit_for_changelog(pc) == "- **core:** handle it"
        assert format_commit_for_changelog(pc, include_scope=False) == "- handle it"

    def test_format_breaking(self):
        """Format breaking change commit."""
        pc = ParsedCommit.from_record(record("feat!: redesign"), BREAKING)
        assert "[BREAKING]" in format_commit_for_changelog(pc)

    def test_format_with_sha(self):
        """Format commit with abbreviated SHA."""
        pc = ParsedCommit.from_record(record("feat: x", sha="feat1234567890"), BREAKING)
        assert format_commit_for_changelog(pc, include_sha=True).endswith("(feat123)")
