"""Unit tests for changelog rendering."""

from __future__ import annotations

import pytest

from smart_release.config.models import ChangelogConfig, SmartReleaseConfig
from smart_release.core.changelog import render_changelog, segment_title
from smart_release.core.history import build_history
from smart_release.core.path_filter import NoFilter, SingleComponent
from smart_release.core.segments import segment_history
from smart_release.core.tags import build_tag_index


@pytest.fixture
def released_repo(fake_repo):
    """History with a 1.0.0 release followed by unreleased work."""
    fake_repo.commit({"core": {"a": b"1"}}, "feat: initial api")
    release = fake_repo.commit({"core": {"a": b"2"}}, "fix(core): handle empty input")
    fake_repo.tag("v1.0.0", release)
    fake_repo.commit({"core": {"a": b"3"}}, "feat!: new config format")
    fake_repo.commit({"core": {"a": b"4"}}, "docs: explain config")
    return fake_repo


def segments_of(repo, path_filter=None):
    history = build_history(repo)
    tags = build_tag_index(repo, None)
    return segment_history(history, tags, path_filter or NoFilter(), repo).segments


class TestSegmentTitle:
    """Tests for segment_title()."""

    def test_titles(self, released_repo):
        """HEAD is unreleased, tags show their version."""
        head, tagged = segments_of(released_repo)

        assert segment_title(head) == "Unreleased"
        assert segment_title(tagged) == "1.0.0"


class TestRenderChangelog:
    """Tests for render_changelog()."""

    def test_render_sections(self, released_repo):
        """Segments render newest first with typed sections."""
        content = render_changelog("core", segments_of(released_repo), SmartReleaseConfig())

        assert content.startswith("# Changelog of core\n")
        assert content.index("## Unreleased") < content.index("## 1.0.0")
        assert "### ⚠️ Breaking Changes" in content
        assert "- [BREAKING] new config format" in content
        assert "- **core:** handle empty input" in content
        assert "### 📚 Documentation" in content

    def test_breaking_changes_listed_once(self, released_repo):
        """Breaking commits are not repeated in their type section."""
        content = render_changelog("core", segments_of(released_repo), SmartReleaseConfig())
        assert content.count("new config format") == 1

    def test_empty_segments_skipped(self, fake_repo):
        """Segments without relevant commits are omitted."""
        fake_repo.commit({"docs": b"1"}, "docs: only docs")
        segments = segments_of(fake_repo, SingleComponent(b"core"))

        assert render_changelog("core", segments, SmartReleaseConfig()) == ""

    def test_custom_sections_and_sha(self, released_repo):
        """Configured labels and SHAs are used."""
        config = SmartReleaseConfig(
            changelog=ChangelogConfig(sections={"feat": "### New"}, include_sha=True)
        )
        segments = segments_of(released_repo)
        content = render_changelog("core", segments, config)

        assert "### New" in content
        assert "### 📚 Documentation" not in content
        first_feat = segments[1].commits[-1]
        assert f"({first_feat.id[:7]})" in content
