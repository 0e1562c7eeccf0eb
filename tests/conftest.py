"""Shared test fixtures for smart-release tests."""

from __future__ import annotations

import hashlib
import os
import subprocess
from contextlib import contextmanager
from typing import TYPE_CHECKING, Union

import pytest

from smart_release.exceptions import ObjectNotFoundError
from smart_release.vcs.git import TAGS_NAMESPACE, Head, HeadKind, Reference
from smart_release.vcs.objects import SHA1_SIZE, ObjectCache, RawObject, parse_commit

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path

    from smart_release.vcs.objects import CommitObject

FileTree = dict[str, Union[bytes, "FileTree"]]


class FakeRepository:
    """In-memory stand-in for GitRepository.

    Objects are stored with real git encodings and sha1 ids, so tree data
    produced here is parsed exactly like data read from git.
    """

    hash_size = SHA1_SIZE

    def __init__(self) -> None:
        self.objects: dict[str, RawObject] = {}
        self.tags: list[Reference] = []
        self.branch = "refs/heads/main"
        self.tip: str | None = None
        self.detached = False
        self.reads: list[str] = []
        self._cache = ObjectCache()
        self.cache_sizes: list[int] = []

    # objects -------------------------------------------------------------

    def store(self, kind: str, data: bytes) -> str:
        oid = hashlib.sha1(f"{kind} {len(data)}\0".encode() + data).hexdigest()
        self.objects[oid] = RawObject(kind=kind, data=data)
        return oid

    def tree(self, files: FileTree) -> str:
        entries = []
        for name, value in files.items():
            if isinstance(value, dict):
                entries.append((b"40000", name.encode(), self.tree(value), True))
            else:
                entries.append((b"100644", name.encode(), self.store("blob", value), False))
        # git orders directories as if their name ended with a slash
        entries.sort(key=lambda e: e[1] + b"/" if e[3] else e[1])
        data = b"".join(
            mode + b" " + name + b"\0" + bytes.fromhex(oid) for mode, name, oid, _ in entries
        )
        return self.store("tree", data)

    def commit(self, files: FileTree, message: str | bytes = "commit") -> str:
        """Create a commit on top of the current tip and advance the branch."""
        body = message if isinstance(message, bytes) else message.encode()
        header = f"tree {self.tree(files)}\n"
        if self.tip is not None:
            header += f"parent {self.tip}\n"
        header += "author T <t@t.com> 0 +0000\ncommitter T <t@t.com> 0 +0000\n"
        self.tip = self.store("commit", header.encode() + b"\n" + body)
        return self.tip

    def tag(self, name: str, target: str) -> Reference:
        reference = Reference(name=f"{TAGS_NAMESPACE}{name}", target=target)
        self.tags.append(reference)
        self.tags.sort(key=lambda r: r.name)
        return reference

    # GitRepository interface ---------------------------------------------

    def head(self) -> Head:
        if self.detached:
            return Head(HeadKind.DETACHED, None, self.tip)
        if self.tip is None:
            return Head(HeadKind.UNBORN, self.branch, None)
        return Head(HeadKind.SYMBOLIC, self.branch, self.tip)

    def ancestors(self, commit: str) -> Iterator[str]:
        current: str | None = commit
        while current is not None:
            yield current
            parents = self.read_commit(current).parents
            current = parents[0] if parents else None

    def tag_references(self, pattern: str = TAGS_NAMESPACE) -> list[Reference]:
        if pattern.endswith("*"):
            return [r for r in self.tags if r.name.startswith(pattern[:-1])]
        return [r for r in self.tags if r.name.startswith(pattern)]

    @property
    def object_cache_size(self) -> int:
        return self._cache.capacity

    @contextmanager
    def object_cache(self, size: int) -> Iterator[ObjectCache]:
        previous = self._cache.capacity
        self._cache.capacity = size
        self.cache_sizes.append(size)
        try:
            yield self._cache
        finally:
            self._cache.capacity = previous

    def read_object(self, oid: str) -> RawObject:
        cached = self._cache.get(oid)
        if cached is not None:
            return cached
        self.reads.append(oid)
        try:
            obj = self.objects[oid]
        except KeyError:
            raise ObjectNotFoundError(oid) from None
        self._cache.put(oid, obj)
        return obj

    def read_commit(self, oid: str) -> CommitObject:
        return parse_commit(self.read_object(oid).data)

    def read_tree(self, oid: str) -> bytes:
        return self.read_object(oid).data


@pytest.fixture
def fake_repo() -> FakeRepository:
    """An empty in-memory repository."""
    return FakeRepository()


# =============================================================================
# Real git repositories
# =============================================================================

GIT_ENV = {
    "GIT_AUTHOR_NAME": "Test",
    "GIT_AUTHOR_EMAIL": "test@test.com",
    "GIT_COMMITTER_NAME": "Test",
    "GIT_COMMITTER_EMAIL": "test@test.com",
    "GIT_CONFIG_NOSYSTEM": "1",
}


class GitWorkdir:
    """Helper driving a real git repository for integration tests."""

    def __init__(self, path: Path) -> None:
        self.path = path
        self._env = {**os.environ, **GIT_ENV, "HOME": str(path)}

    def git(self, *args: str) -> str:
        result = subprocess.run(
            ["git", "-c", "commit.gpgsign=false", "-c", "tag.gpgsign=false", *args],
            cwd=self.path,
            env=self._env,
            capture_output=True,
            check=True,
        )
        return result.stdout.decode().strip()

    def write(self, relative: str, content: str) -> None:
        file_path = self.path / relative
        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_path.write_text(content)

    def commit(self, message: str | bytes, **files: str) -> str:
        """Write files (keys use ``__`` for ``/``) and commit everything."""
        for relative, content in files.items():
            self.write(relative.replace("__", "/"), content)
        self.git("add", "-A")
        message_file = self.path.parent / f"{self.path.name}-message"
        message_file.write_bytes(message if isinstance(message, bytes) else message.encode())
        self.git("commit", "-q", "--allow-empty", "-F", str(message_file))
        return self.git("rev-parse", "HEAD")


@pytest.fixture
def git_workdir(tmp_path: Path) -> GitWorkdir:
    """An empty git repository on branch main."""
    repo_path = tmp_path / "repo"
    repo_path.mkdir()
    workdir = GitWorkdir(repo_path)
    workdir.git("init", "-q", "-b", "main")
    return workdir


@pytest.fixture
def temp_workspace(git_workdir: GitWorkdir) -> GitWorkdir:
    """Workspace files for a root package and two members, not yet committed."""
    git_workdir.write(
        "pyproject.toml",
        """\
[project]
name = "root-pkg"
version = "1.0.0"

[tool.smart-release.packages]
paths = ["core", "libs/util"]
""",
    )
    git_workdir.write("core/pyproject.toml", '[project]\nname = "core"\nversion = "0.1.0"\n')
    git_workdir.write(
        "libs/util/pyproject.toml", '[project]\nname = "util"\nversion = "0.1.0"\n'
    )
    return git_workdir
