"""Raw git object decoding and caching.

Trees are kept as the raw bytes git stores for them and decoded lazily,
entry by entry, so that looking up a single name never materializes the
whole tree.

Tree format: a sequence of ``<mode> SP <name> NUL <binary id>`` entries.
Commit format: header lines, an empty line, then the message bytes.
"""

from __future__ import annotations

from collections import OrderedDict
from dataclasses import dataclass
from typing import TYPE_CHECKING

from smart_release.exceptions import GitError

if TYPE_CHECKING:
    from collections.abc import Iterator

SHA1_SIZE = 20
SHA256_SIZE = 32

TREE_MODE = b"40000"


@dataclass(frozen=True)
class RawObject:
    """An object as returned by the object database."""

    kind: str
    data: bytes


@dataclass(frozen=True)
class TreeEntry:
    """A single entry of a tree object."""

    mode: bytes
    name: bytes
    oid: str

    @property
    def is_tree(self) -> bool:
        return self.mode == TREE_MODE


@dataclass(frozen=True)
class CommitObject:
    """The parts of a commit object the history builder needs."""

    tree: str
    parents: tuple[str, ...]
    message: bytes


def iter_tree(data: bytes, hash_size: int = SHA1_SIZE) -> Iterator[TreeEntry]:
    """Iterate the entries of raw tree data in stored order.

    Raises:
        GitError: If the data is truncated or malformed
    """
    pos = 0
    end = len(data)
    while pos < end:
        space = data.find(b" ", pos)
        nul = data.find(b"\0", space + 1)
        if space == -1 or nul == -1 or nul + 1 + hash_size > end:
            raise GitError(f"Malformed tree entry at offset {pos}")
        oid = data[nul + 1 : nul + 1 + hash_size].hex()
        yield TreeEntry(mode=data[pos:space], name=data[space + 1 : nul], oid=oid)
        pos = nul + 1 + hash_size


def find_entry(data: bytes, name: bytes, hash_size: int = SHA1_SIZE) -> TreeEntry | None:
    """Find a direct child of a tree by name."""
    for entry in iter_tree(data, hash_size):
        if entry.name == name:
            return entry
    return None


def parse_commit(data: bytes) -> CommitObject:
    """Parse raw commit data.

    Raises:
        GitError: If the commit has no tree header
    """
    header, sep, message = data.partition(b"\n\n")
    if not sep:
        # A commit without a message still ends its headers with a newline
        header = header.rstrip(b"\n")

    tree = None
    parents: list[str] = []
    for line in header.split(b"\n"):
        if line.startswith(b"tree "):
            tree = line[5:].decode("ascii")
        elif line.startswith(b"parent "):
            parents.append(line[7:].decode("ascii"))
        elif line.startswith(b" "):
            # continuation of a multi-line header such as gpgsig
            continue

    if tree is None:
        raise GitError("Malformed commit object: missing tree header")

    return CommitObject(tree=tree, parents=tuple(parents), message=message)


class ObjectCache:
    """LRU cache of raw objects bounded by the total size of their data.

    A capacity of zero disables caching. Shrinking the capacity evicts
    the least recently used objects immediately.
    """

    def __init__(self, capacity: int = 0) -> None:
        if capacity < 0:
            raise ValueError("Cache capacity cannot be negative")
        self._capacity = capacity
        self._size = 0
        self._entries: OrderedDict[str, RawObject] = OrderedDict()

    @property
    def capacity(self) -> int:
        return self._capacity

    @capacity.setter
    def capacity(self, value: int) -> None:
        if value < 0:
            raise ValueError("Cache capacity cannot be negative")
        self._capacity = value
        self._evict()

    @property
    def size(self) -> int:
        return self._size

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, oid: str) -> RawObject | None:
        obj = self._entries.get(oid)
        if obj is not None:
            self._entries.move_to_end(oid)
        return obj

    def put(self, oid: str, obj: RawObject) -> None:
        if len(obj.data) > self._capacity or oid in self._entries:
            return
        self._entries[oid] = obj
        self._size += len(obj.data)
        self._evict()

    def _evict(self) -> None:
        while self._entries and self._size > self._capacity:
            _, evicted = self._entries.popitem(last=False)
            self._size -= len(evicted.data)
