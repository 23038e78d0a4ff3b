"""
The virtual file system tree.

A VFS owns a single root directory named "/". Paths are absolute, POSIX
style, and resolved one component at a time from the root.
"""

from __future__ import annotations

import posixpath
from typing import Iterator

from .errors import InvalidPathError, NotFoundError
from .locks import RWLock
from .node import VFile, VFileHandle

ROOT = "/"


def clean_path(path: str) -> str:
    """
    Normalize an absolute path.

    Collapses ".", ".." and repeated separators, drops any trailing
    separator, and never climbs above the root.
    """
    cleaned = posixpath.normpath(path)
    # normpath keeps a leading "//" as POSIX allows; the tree does not
    if cleaned.startswith("//"):
        cleaned = ROOT + cleaned.lstrip("/")
    return cleaned


def path_components(path: str) -> list[str]:
    """Split a cleaned absolute path into ["/", part, part, ...]."""
    stripped = path.strip(ROOT)
    if not stripped:
        return [ROOT]
    return [ROOT, *stripped.split(ROOT)]


class VFS:
    """
    An in-memory tree of VFile nodes.

    Lookups take a shared lock on the tree; insert() takes it exclusively.
    Per-node state is guarded by the nodes and handles themselves.

    Usage:
        fs = VFS()
        fs.insert("/", VFile.file("hello.txt", b"hello essence\\n"))
        with fs.open("/hello.txt") as f:
            f.read()
    """

    def __init__(self, root: VFile | None = None) -> None:
        if root is None:
            root = VFile.directory(ROOT)
        if not root.is_dir or root.name != ROOT:
            raise ValueError(f"root must be a directory named {ROOT!r}, got {root!r}")
        self._root = root
        self._mu = RWLock()

    @property
    def root(self) -> VFile:
        return self._root

    def _resolve(self, op: str, path: str) -> VFile:
        if not posixpath.isabs(path):
            raise InvalidPathError(op, path)

        components = path_components(clean_path(path))

        with self._mu.read_locked():
            node = self._root
            # components[0] is always the root marker
            for name in components[1:]:
                child = node.child(name)
                if child is None:
                    raise NotFoundError(op, path)
                node = child

        return node

    def lookup(self, path: str) -> VFile:
        """
        Return the node at an absolute path.

        Raises:
            InvalidPathError: If path is not absolute
            NotFoundError: If no node exists at path
        """
        return self._resolve("lookup", path)

    def open(self, path: str) -> VFileHandle:
        """
        Open the node at an absolute path.

        Every call returns a fresh handle positioned at the start of the
        data, independent of any other handle to the same node.

        Raises:
            InvalidPathError: If path is not absolute
            NotFoundError: If no node exists at path
        """
        return self._resolve("open", path).open()

    def insert(self, dir_path: str, node: VFile) -> None:
        """
        Append node to the directory at dir_path.

        Raises:
            InvalidPathError: If dir_path is not absolute
            NotFoundError: If dir_path does not name a directory
            DuplicateNameError: If the directory already has a child with that name
        """
        if not posixpath.isabs(dir_path):
            raise InvalidPathError("insert", dir_path)

        with self._mu.write_locked():
            parent = self._root
            for name in path_components(clean_path(dir_path))[1:]:
                child = parent.child(name)
                if child is None:
                    raise NotFoundError("insert", dir_path)
                parent = child
            if not parent.is_dir:
                raise NotFoundError("insert", dir_path)
            parent.append(node)

    def walk(self) -> Iterator[tuple[str, VFile]]:
        """Yield (absolute path, node) for every node, depth-first pre-order."""

        def visit(prefix: str, node: VFile) -> Iterator[tuple[str, VFile]]:
            for child in node.children:
                path = posixpath.join(prefix, child.name)
                yield path, child
                if child.is_dir:
                    yield from visit(path, child)

        yield ROOT, self._root
        yield from visit(ROOT, self._root)

    def stats(self) -> dict[str, int]:
        """Count files, directories (excluding the root) and bytes."""
        stats = {"files": 0, "directories": 0, "bytes": 0}
        for path, node in self.walk():
            if path == ROOT:
                continue
            if node.is_dir:
                stats["directories"] += 1
            else:
                stats["files"] += 1
                stats["bytes"] += node.size
        return stats
