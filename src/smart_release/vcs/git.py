"""Git repository access.

All repository access goes through the ``git`` executable. Short-lived
queries (references, ancestry) run as one-off subprocesses, while object
reads share a single long-running ``git cat-file --batch`` process.

Objects read through the repository pass through an LRU cache whose
capacity is only ever changed for the duration of a ``with
repo.object_cache(size):`` block.
"""

from __future__ import annotations

import logging
import subprocess
from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import IO, TYPE_CHECKING

from smart_release.exceptions import (
    GitError,
    NotARepositoryError,
    ObjectNotFoundError,
)
from smart_release.vcs.objects import (
    SHA1_SIZE,
    SHA256_SIZE,
    CommitObject,
    ObjectCache,
    RawObject,
    parse_commit,
)

if TYPE_CHECKING:
    from collections.abc import Iterator

logger = logging.getLogger(__name__)

TAGS_NAMESPACE = "refs/tags/"


class HeadKind(str, Enum):
    """What HEAD currently points at."""

    SYMBOLIC = "symbolic"
    DETACHED = "detached"
    UNBORN = "unborn"


@dataclass(frozen=True)
class Head:
    """Snapshot of HEAD.

    Attributes:
        kind: Classification of HEAD
        name: Branch reference HEAD points to (None when detached)
        target: Commit id the branch points to (None when unborn)
    """

    kind: HeadKind
    name: str | None
    target: str | None


@dataclass(frozen=True)
class Reference:
    """A named reference and the commit it resolves to."""

    name: str
    target: str

    @property
    def short_name(self) -> str:
        for prefix in (TAGS_NAMESPACE, "refs/heads/"):
            if self.name.startswith(prefix):
                return self.name[len(prefix) :]
        return self.name


class _BatchReader:
    """Reads objects through a persistent ``git cat-file --batch`` process."""

    def __init__(self, path: Path) -> None:
        self._path = path
        self._process: subprocess.Popen[bytes] | None = None

    def _start(self) -> subprocess.Popen[bytes]:
        if self._process is None or self._process.poll() is not None:
            try:
                self._process = subprocess.Popen(
                    ["git", "cat-file", "--batch"],
                    cwd=self._path,
                    stdin=subprocess.PIPE,
                    stdout=subprocess.PIPE,
                    stderr=subprocess.DEVNULL,
                )
            except FileNotFoundError as e:
                raise GitError("git executable not found") from e
            logger.debug("Started object reader for %s", self._path)
        return self._process

    def read(self, oid: str) -> RawObject:
        process = self._start()
        stdin: IO[bytes] = process.stdin  # type: ignore[assignment]
        stdout: IO[bytes] = process.stdout  # type: ignore[assignment]

        stdin.write(oid.encode("ascii") + b"\n")
        stdin.flush()

        header = stdout.readline()
        if not header:
            raise GitError(f"git cat-file exited while reading {oid}")

        parts = header.split()
        if len(parts) != 3:
            # "<oid> missing" or "<oid> ambiguous"
            raise ObjectNotFoundError(oid)

        _, kind, size = parts
        data = stdout.read(int(size) + 1)
        if len(data) != int(size) + 1:
            raise GitError(f"Short read while reading object {oid}")
        return RawObject(kind=kind.decode("ascii"), data=data[:-1])

    def close(self) -> None:
        if self._process is None:
            return
        process, self._process = self._process, None
        if process.stdin:
            process.stdin.close()
        if process.stdout:
            process.stdout.close()
        process.wait()


class GitRepository:
    """Read-only access to a git repository.

    Args:
        path: Any path inside the work tree

    Raises:
        NotARepositoryError: If path is not inside a git repository
    """

    def __init__(self, path: Path | str | None = None) -> None:
        start = Path(path) if path is not None else Path.cwd()
        try:
            result = subprocess.run(
                ["git", "rev-parse", "--show-toplevel"],
                cwd=start,
                capture_output=True,
                text=True,
                check=True,
            )
        except FileNotFoundError as e:
            raise GitError("git executable not found") from e
        except subprocess.CalledProcessError as e:
            raise NotARepositoryError(f"Not a git repository: {start}", stderr=e.stderr) from e

        self.path = Path(result.stdout.strip())
        self._cache = ObjectCache()
        self._reader = _BatchReader(self.path)
        self._hash_size: int | None = None

    def __enter__(self) -> GitRepository:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        """Stop the object reader process."""
        self._reader.close()

    def _run(self, *args: str, check: bool = True) -> subprocess.CompletedProcess[str]:
        """Run a git command in the repository.

        Raises:
            GitError: If the command fails and check is True
        """
        try:
            result = subprocess.run(
                ["git", *args],
                cwd=self.path,
                capture_output=True,
                text=True,
                check=False,
            )
        except FileNotFoundError as e:
            raise GitError("git executable not found") from e

        if check and result.returncode != 0:
            raise GitError(
                f"git {args[0]} failed with exit code {result.returncode}",
                stderr=result.stderr,
            )
        return result

    # -------------------------------------------------------------------------
    # References
    # -------------------------------------------------------------------------

    def head(self) -> Head:
        """Classify and resolve HEAD."""
        result = self._run("symbolic-ref", "-q", "HEAD", check=False)
        if result.returncode == 1:
            target = self._run("rev-parse", "--verify", "-q", "HEAD", check=False)
            return Head(HeadKind.DETACHED, None, target.stdout.strip() or None)
        if result.returncode != 0:
            raise GitError("git symbolic-ref failed", stderr=result.stderr)

        name = result.stdout.strip()
        target = self._run("rev-parse", "--verify", "-q", f"{name}^{{commit}}", check=False)
        if target.returncode != 0:
            return Head(HeadKind.UNBORN, name, None)
        return Head(HeadKind.SYMBOLIC, name, target.stdout.strip())

    def tag_references(self, pattern: str = TAGS_NAMESPACE) -> list[Reference]:
        """List tags matching a for-each-ref pattern, peeled to their targets.

        Annotated tags resolve to the commit they point at, following
        chains of tags, lightweight tags to their own target. Results are
        sorted by ref name.

        Args:
            pattern: Ref prefix or glob, e.g. ``refs/tags/`` or ``refs/tags/core-*``
        """
        result = self._run(
            "for-each-ref",
            "--sort=refname",
            "--format=%(refname)%00%(objectname)%00%(*objecttype)%00%(*objectname)",
            pattern,
        )
        references = []
        for line in result.stdout.splitlines():
            if not line:
                continue
            name, objectname, peeled_type, peeled = line.split("\0")
            target = peeled or objectname
            if peeled_type == "tag":
                target = self._peel_to_commit(name) or target
            references.append(Reference(name=name, target=target))
        return references

    def _peel_to_commit(self, name: str) -> str | None:
        """Resolve a tag pointing at another tag down to its commit."""
        result = self._run("rev-parse", "--verify", "-q", f"{name}^{{commit}}", check=False)
        return result.stdout.strip() or None

    # -------------------------------------------------------------------------
    # Objects
    # -------------------------------------------------------------------------

    @property
    def hash_size(self) -> int:
        """Size in bytes of object ids in this repository."""
        if self._hash_size is None:
            result = self._run("rev-parse", "--show-object-format", check=False)
            fmt = result.stdout.strip()
            self._hash_size = SHA256_SIZE if fmt == "sha256" else SHA1_SIZE
        return self._hash_size

    @property
    def object_cache_size(self) -> int:
        return self._cache.capacity

    @contextmanager
    def object_cache(self, size: int) -> Iterator[ObjectCache]:
        """Temporarily set the object cache capacity.

        The previous capacity is restored when the block exits, whether
        normally or through an exception.
        """
        previous = self._cache.capacity
        self._cache.capacity = size
        try:
            yield self._cache
        finally:
            self._cache.capacity = previous

    def read_object(self, oid: str) -> RawObject:
        """Read an object, consulting the cache first.

        Raises:
            ObjectNotFoundError: If the object does not exist
        """
        cached = self._cache.get(oid)
        if cached is not None:
            return cached
        obj = self._reader.read(oid)
        self._cache.put(oid, obj)
        return obj

    def _read_kind(self, oid: str, kind: str) -> bytes:
        obj = self.read_object(oid)
        if obj.kind != kind:
            raise GitError(f"Expected {oid} to be a {kind}, found {obj.kind}")
        return obj.data

    def read_commit(self, oid: str) -> CommitObject:
        return parse_commit(self._read_kind(oid, "commit"))

    def read_tree(self, oid: str) -> bytes:
        """Return the raw data of a tree object."""
        return self._read_kind(oid, "tree")

    def ancestors(self, commit: str) -> Iterator[str]:
        """Yield commit and all of its ancestors, children before parents."""
        result = self._run("rev-list", "--topo-order", commit)
        for line in result.stdout.splitlines():
            if line:
                yield line
