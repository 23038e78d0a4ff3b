"""
pyessence virtual file system.

An in-memory tree of files that behaves like a read-only file system,
plus a disk-backed twin used during development. Generated asset packages
build one of these at import time and wrap it in Extended.

Usage:
    from pyessence.vfs import VFS, VFile, Extended

    fs = VFS()
    fs.insert("/", VFile.file("hello.txt", b"hello essence\\n"))

    with fs.open("/hello.txt") as f:
        f.seek(6)
        f.read()  # b"essence\\n"

    Extended(fs).read_text("/hello.txt")
"""

from .errors import (
    BadPatternError,
    BuildError,
    CompactError,
    ConfigurationError,
    DuplicateNameError,
    EmitError,
    EssenceError,
    InvalidPathError,
    InvalidWhenceError,
    NoFilesError,
    NotFoundError,
    OffsetOutOfRangeError,
    PathError,
    RangeError,
    TemplateNotFoundError,
)
from .extended import Extended
from .node import DIR_MODE, FILE_MODE, FileKind, VFile, VFileHandle, VFileInfo
from .sources import DiskHandle, DiskSource, Handle, OpenableSource
from .templates import TemplateSet, VFSLoader
from .tree import VFS, clean_path

__all__ = [
    # Tree
    "VFS",
    "VFile",
    "VFileHandle",
    "VFileInfo",
    "FileKind",
    "DIR_MODE",
    "FILE_MODE",
    "clean_path",
    # Sources
    "OpenableSource",
    "Handle",
    "DiskSource",
    "DiskHandle",
    # Facade
    "Extended",
    "TemplateSet",
    "VFSLoader",
    # Exceptions
    "EssenceError",
    "PathError",
    "InvalidPathError",
    "NotFoundError",
    "RangeError",
    "OffsetOutOfRangeError",
    "InvalidWhenceError",
    "ConfigurationError",
    "NoFilesError",
    "BadPatternError",
    "TemplateNotFoundError",
    "DuplicateNameError",
    "BuildError",
    "CompactError",
    "EmitError",
]
