"""
Openable sources.

Two interchangeable implementations sit behind the OpenableSource protocol:
- VFS: the in-memory tree embedded by the generator
- DiskSource: a live view of a real directory, used by development builds

Both take absolute, "/"-separated paths and return handles with the same
read/seek/close/stat/readdir surface.
"""

from __future__ import annotations

import os
import posixpath
import stat
from datetime import datetime, timezone
from pathlib import Path
from typing import BinaryIO, Protocol, runtime_checkable

from .errors import InvalidPathError, NotFoundError
from .node import VFileInfo
from .tree import clean_path


# -----------------------------------------------------------------------------
# Protocols
# -----------------------------------------------------------------------------


@runtime_checkable
class Handle(Protocol):
    """An open file or directory."""

    def read(self, size: int = -1) -> bytes: ...

    def readinto(self, buffer: bytearray | memoryview) -> int: ...

    def seek(self, offset: int, whence: int = os.SEEK_SET) -> int: ...

    def tell(self) -> int: ...

    def close(self) -> None: ...

    def stat(self) -> VFileInfo: ...

    def readdir(self, count: int = -1) -> list[VFileInfo]: ...


@runtime_checkable
class OpenableSource(Protocol):
    """Anything that can open an absolute path."""

    def open(self, path: str) -> Handle: ...


# -----------------------------------------------------------------------------
# Disk source
# -----------------------------------------------------------------------------


def _info(name: str, st: os.stat_result) -> VFileInfo:
    return VFileInfo(
        name=name,
        size=0 if stat.S_ISDIR(st.st_mode) else st.st_size,
        mode=st.st_mode,
        mod_time=datetime.fromtimestamp(int(st.st_mtime), tz=timezone.utc),
        is_dir=stat.S_ISDIR(st.st_mode),
    )


class DiskHandle:
    """
    A handle on a real file or directory.

    Reads and seeks go straight to the underlying file, with Python's own
    seek semantics. close() releases the descriptor and may be repeated.
    """

    def __init__(self, path: Path, name: str) -> None:
        self._file: BinaryIO | None = None
        self._path = path
        self._name = name
        self._st = path.stat()
        if not self.is_dir:
            self._file = open(path, "rb")  # noqa: SIM115

    def __repr__(self) -> str:
        return f"<DiskHandle {str(self._path)!r}>"

    def __enter__(self) -> DiskHandle:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def __del__(self) -> None:
        if self._file is not None:
            self._file.close()

    @property
    def name(self) -> str:
        return self._name

    @property
    def is_dir(self) -> bool:
        return stat.S_ISDIR(self._st.st_mode)

    def readable(self) -> bool:
        return True

    def seekable(self) -> bool:
        return True

    def _opened(self) -> BinaryIO:
        if self._file is None:
            raise ValueError(f"I/O operation on closed file: {self._path}")
        return self._file

    def read(self, size: int = -1) -> bytes:
        if self.is_dir:
            return b""
        return self._opened().read(size)

    def readinto(self, buffer: bytearray | memoryview) -> int:
        if self.is_dir:
            return 0
        return self._opened().readinto(buffer) or 0

    def seek(self, offset: int, whence: int = os.SEEK_SET) -> int:
        if self.is_dir:
            return 0
        return self._opened().seek(offset, whence)

    def tell(self) -> int:
        if self.is_dir:
            return 0
        return self._opened().tell()

    def close(self) -> None:
        if self._file is not None:
            self._file.close()
            self._file = None

    def stat(self) -> VFileInfo:
        return _info(self._name, self._st)

    def readdir(self, count: int = -1) -> list[VFileInfo]:
        """List the directory's entries sorted by name; empty for files."""
        if not self.is_dir:
            return []
        with os.scandir(self._path) as it:
            entries = sorted(it, key=lambda e: e.name)
        return [_info(e.name, e.stat()) for e in entries]


class DiskSource:
    """
    A live, read-only view of a real directory.

    Paths are cleaned before being joined to the root, so ".." can never
    escape it.

    Usage:
        source = DiskSource("./static")
        with source.open("/hello.txt") as f:
            print(f.read())
    """

    def __init__(self, root: str | Path) -> None:
        self.root = Path(root).resolve()

    def __repr__(self) -> str:
        return f"DiskSource({str(self.root)!r})"

    def open(self, path: str) -> DiskHandle:
        """
        Open a file or directory under the root.

        Raises:
            InvalidPathError: If path is not absolute
            NotFoundError: If nothing exists at path
        """
        if not posixpath.isabs(path):
            raise InvalidPathError("open", path)

        cleaned = clean_path(path)
        full = self.root.joinpath(*[p for p in cleaned.split("/") if p])
        name = posixpath.basename(cleaned) or "/"

        try:
            return DiskHandle(full, name)
        except (FileNotFoundError, NotADirectoryError) as e:
            raise NotFoundError("open", path) from e
