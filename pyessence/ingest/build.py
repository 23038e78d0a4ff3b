"""
Tree builder.

Walks a real directory and mirrors it as a VFS. This is the first stage of
generation: everything that ends up in the embedded module passes through
here.
"""

from __future__ import annotations

import os
import stat
from datetime import datetime, timezone
from fnmatch import fnmatch
from pathlib import Path
from typing import Iterable

from pyessence.vfs import VFS, VFile
from pyessence.vfs.errors import BuildError, CompactError, DuplicateNameError
from pyessence.vfs.tree import ROOT

from .compact import compact_json

JSON_EXTENSION = ".json"


def should_exclude(name: str, exclude: Iterable[str]) -> bool:
    """Check if an entry name matches any of the exclude globs."""
    return any(fnmatch(name, pattern) for pattern in exclude)


def _mod_time(st: os.stat_result) -> datetime:
    # Whole seconds, so the embedded literal round-trips exactly
    return datetime.fromtimestamp(int(st.st_mtime), tz=timezone.utc)


def _read_file(path: Path, name: str, st: os.stat_result, compact: bool) -> VFile:
    try:
        data = path.read_bytes()
    except OSError as e:
        raise BuildError(str(path), f"read failed: {e}") from e

    if compact and name.endswith(JSON_EXTENSION):
        try:
            data = compact_json(data)
        except CompactError as e:
            raise BuildError(str(path), str(e)) from e

    return VFile.file(name, data, mod_time=_mod_time(st), mode=stat.S_IMODE(st.st_mode))


def _build_dir(
    path: Path,
    parent: VFile,
    *,
    compact_json: bool,
    sort_entries: bool,
    exclude: tuple[str, ...],
    verbose: bool,
) -> None:
    try:
        with os.scandir(path) as it:
            entries = list(it)
    except OSError as e:
        raise BuildError(str(path), f"list failed: {e}") from e

    if sort_entries:
        entries.sort(key=lambda e: e.name)

    for entry in entries:
        if should_exclude(entry.name, exclude):
            continue

        entry_path = Path(entry.path)

        try:
            st = entry.stat()
        except OSError as e:
            raise BuildError(str(entry_path), f"stat failed: {e}") from e

        if stat.S_ISDIR(st.st_mode):
            node = VFile.directory(
                entry.name, mod_time=_mod_time(st), mode=stat.S_IMODE(st.st_mode)
            )
            _append(parent, node, entry_path)
            _build_dir(
                entry_path,
                node,
                compact_json=compact_json,
                sort_entries=sort_entries,
                exclude=exclude,
                verbose=verbose,
            )
        elif stat.S_ISREG(st.st_mode):
            node = _read_file(entry_path, entry.name, st, compact_json)
            _append(parent, node, entry_path)
            if verbose:
                print(f"ESSENCE: embedded file: {entry_path}")
        else:
            raise BuildError(str(entry_path), "unsupported file type")


def _append(parent: VFile, node: VFile, path: Path) -> None:
    try:
        parent.append(node)
    except DuplicateNameError as e:
        raise BuildError(str(path), str(e)) from e


def build_tree(
    src_dir: str | Path,
    *,
    compact_json: bool = True,
    sort_entries: bool = True,
    exclude: Iterable[str] = (),
    verbose: bool = False,
) -> VFS:
    """
    Mirror a directory as a VFS.

    Directories become directory nodes and regular files become file
    nodes holding their full contents. Symlinks are followed.

    Args:
        src_dir: Directory to embed
        compact_json: Strip whitespace from *.json files
        sort_entries: Order siblings by name instead of listing order
        exclude: Glob patterns matched against entry names to skip
        verbose: Print one line per embedded file

    Returns:
        A VFS whose root mirrors src_dir

    Raises:
        BuildError: If anything cannot be listed, read or compacted
    """
    root = Path(src_dir).resolve()
    try:
        st = root.stat()
    except OSError as e:
        raise BuildError(str(root), "not a directory") from e
    if not stat.S_ISDIR(st.st_mode):
        raise BuildError(str(root), "not a directory")

    fs = VFS(VFile.directory(ROOT, mod_time=_mod_time(st), mode=stat.S_IMODE(st.st_mode)))
    _build_dir(
        root,
        fs.root,
        compact_json=compact_json,
        sort_entries=sort_entries,
        exclude=tuple(exclude),
        verbose=verbose,
    )
    return fs
