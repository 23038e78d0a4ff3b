"""
Virtual file nodes and the handles used to read them.

A VFile is one element of the tree: a directory with ordered children,
or a regular file with an immutable byte blob. Nodes carry no read
position. Reading goes through a VFileHandle, which owns its own cursor,
so any number of handles can read the same node without interfering.
"""

from __future__ import annotations

import os
import stat
import threading
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Iterable

from .errors import DuplicateNameError, InvalidWhenceError, OffsetOutOfRangeError

DIR_MODE = 0o755
FILE_MODE = 0o644


class FileKind(Enum):
    """The two kinds of node."""

    DIRECTORY = "directory"
    REGULAR = "regular"


@dataclass(frozen=True, slots=True)
class VFileInfo:
    """
    Snapshot of a node's metadata.

    Attributes:
        name: Last path segment
        size: Length of the data in bytes (0 for directories)
        mode: Permission bits combined with the S_IFDIR/S_IFREG type bit
        mod_time: Modification time captured at build time
        is_dir: True for directories
    """

    name: str
    size: int
    mode: int
    mod_time: datetime
    is_dir: bool

    @property
    def kind(self) -> FileKind:
        return FileKind.DIRECTORY if self.is_dir else FileKind.REGULAR

    @property
    def permissions(self) -> int:
        """Permission bits without the file type."""
        return stat.S_IMODE(self.mode)


def _now() -> datetime:
    return datetime.now(timezone.utc).replace(microsecond=0)


class VFile:
    """
    A node in the virtual file system.

    Use VFile.directory() and VFile.file() rather than the constructor.
    """

    __slots__ = ("name", "kind", "data", "mod_time", "mode", "_children", "_mu")

    def __init__(
        self,
        name: str,
        kind: FileKind,
        *,
        data: bytes = b"",
        mod_time: datetime | None = None,
        mode: int | None = None,
    ) -> None:
        if kind is FileKind.DIRECTORY and data:
            raise ValueError(f"directory {name!r} cannot carry data")
        self.name = name
        self.kind = kind
        self.data = bytes(data)
        self.mod_time = mod_time or _now()
        if mode is None:
            mode = DIR_MODE if kind is FileKind.DIRECTORY else FILE_MODE
        self.mode = stat.S_IMODE(mode)
        self._children: dict[str, VFile] = {}
        self._mu = threading.Lock()

    @classmethod
    def directory(
        cls,
        name: str,
        *,
        mod_time: datetime | None = None,
        mode: int = DIR_MODE,
        children: Iterable[VFile] = (),
    ) -> VFile:
        """Create a directory node, appending children in the given order."""
        node = cls(name, FileKind.DIRECTORY, mod_time=mod_time, mode=mode)
        for child in children:
            node.append(child)
        return node

    @classmethod
    def file(
        cls,
        name: str,
        data: bytes = b"",
        *,
        mod_time: datetime | None = None,
        mode: int = FILE_MODE,
    ) -> VFile:
        """Create a regular file node holding data."""
        return cls(name, FileKind.REGULAR, data=data, mod_time=mod_time, mode=mode)

    def __repr__(self) -> str:
        if self.is_dir:
            return f"VFile.directory({self.name!r}, children={len(self._children)})"
        return f"VFile.file({self.name!r}, size={len(self.data)})"

    @property
    def is_dir(self) -> bool:
        return self.kind is FileKind.DIRECTORY

    @property
    def size(self) -> int:
        return len(self.data)

    @property
    def children(self) -> list[VFile]:
        """Direct children in tree order (empty for regular files)."""
        with self._mu:
            return list(self._children.values())

    def child(self, name: str) -> VFile | None:
        """Return the direct child called name, if any."""
        with self._mu:
            return self._children.get(name)

    def append(self, node: VFile) -> None:
        """
        Add a child to this directory.

        Appending to a regular file does nothing.

        Raises:
            DuplicateNameError: If a sibling already has the same name
        """
        if not self.is_dir:
            return
        with self._mu:
            if node.name in self._children:
                raise DuplicateNameError(self.name, node.name)
            self._children[node.name] = node

    def stat(self) -> VFileInfo:
        type_bits = stat.S_IFDIR if self.is_dir else stat.S_IFREG
        return VFileInfo(
            name=self.name,
            size=len(self.data),
            mode=type_bits | self.mode,
            mod_time=self.mod_time,
            is_dir=self.is_dir,
        )

    def readdir(self, count: int = -1) -> list[VFileInfo]:
        """
        Return info for every direct child, in tree order.

        count is accepted for compatibility with file APIs that page
        through directory listings; the full listing is always returned.
        """
        return [child.stat() for child in self.children]

    def open(self) -> VFileHandle:
        """Return a new handle positioned at the start of the data."""
        return VFileHandle(self)


class VFileHandle:
    """
    An open reference to a VFile with its own read position.

    Reading never goes past the end of the data. Seeking outside the data
    is an error rather than being clamped. close() rewinds to the start
    and may be called any number of times; the handle stays usable.
    """

    def __init__(self, node: VFile) -> None:
        self._node = node
        self._pos = 0
        self._mu = threading.Lock()

    def __repr__(self) -> str:
        return f"<VFileHandle {self._node.name!r} at {self._pos}>"

    def __enter__(self) -> VFileHandle:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    @property
    def name(self) -> str:
        return self._node.name

    @property
    def node(self) -> VFile:
        return self._node

    def readable(self) -> bool:
        return True

    def seekable(self) -> bool:
        return True

    def readinto(self, buffer: bytearray | memoryview) -> int:
        """Copy bytes from the cursor into buffer. Returns 0 at end of data."""
        data = self._node.data
        with self._mu:
            chunk = data[self._pos : self._pos + len(buffer)]
            n = len(chunk)
            buffer[:n] = chunk
            self._pos += n
            return n

    def read(self, size: int = -1) -> bytes:
        """Read up to size bytes (all remaining if negative). Returns b"" at end of data."""
        data = self._node.data
        with self._mu:
            if size is None or size < 0:
                end = len(data)
            else:
                end = min(self._pos + size, len(data))
            chunk = data[self._pos : end]
            self._pos += len(chunk)
            return chunk

    def seek(self, offset: int, whence: int = os.SEEK_SET) -> int:
        """
        Move the cursor and return the new position.

        From SEEK_END, offset counts backwards from the last byte, so
        seek(0, SEEK_END) lands on the final byte. The result must lie in
        [0, size - 1]; an empty file only admits position 0.

        Raises:
            OffsetOutOfRangeError: If the position falls outside the data
            InvalidWhenceError: If whence is not SEEK_SET, SEEK_CUR or SEEK_END
        """
        size = len(self._node.data)
        last = max(size - 1, 0)

        with self._mu:
            if whence == os.SEEK_SET:
                target = offset
            elif whence == os.SEEK_CUR:
                target = self._pos + offset
            elif whence == os.SEEK_END:
                target = last - offset
            else:
                raise InvalidWhenceError(whence)

            if target < 0 or target > last:
                raise OffsetOutOfRangeError(target, size)

            self._pos = target
            return self._pos

    def tell(self) -> int:
        with self._mu:
            return self._pos

    def close(self) -> None:
        with self._mu:
            self._pos = 0

    def stat(self) -> VFileInfo:
        return self._node.stat()

    def readdir(self, count: int = -1) -> list[VFileInfo]:
        return self._node.readdir(count)
