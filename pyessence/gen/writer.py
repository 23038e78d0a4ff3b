"""
Source emitter.

Renders an asset package from a source directory:

    <out_dir>/<package>/__init__.py       picks a profile at import time
    <out_dir>/<package>/<package>.py      embedded profile (literal tree)
    <out_dir>/<package>/<package>_dev.py  passthrough profile (live disk)

Everything is rendered and formatted in memory before the first file is
touched. Every file is then staged next to its destination, and only once
all of them are staged are they renamed into place, so a failed run never
leaves a half-written or mixed package behind.
"""

from __future__ import annotations

import contextlib
import os
import tempfile
from pathlib import Path
from typing import Iterable, Mapping

from jinja2 import TemplateError
from pydantic import ValidationError

from pyessence import __version__
from pyessence.ingest import build_tree
from pyessence.runtime import RuntimeConfig, get_global_config
from pyessence.vfs import VFS
from pyessence.vfs.errors import ConfigurationError, EmitError

from .format import FormatError, format_source
from .spec import SourceSpec, check_package_name
from .templates import render

# (template, file name suffix)
PROFILES: list[tuple[str, str]] = [
    ("embedded", ""),
    ("passthrough", "_dev"),
]


def render_package(spec: SourceSpec) -> dict[str, str]:
    """
    Render and format every module of the package.

    Returns:
        Mapping of file name to formatted source

    Raises:
        EmitError: If a template fails or its output is not valid Python
    """
    files: dict[str, str] = {}
    jobs = [(name, f"{spec.package}{suffix}.py") for name, suffix in PROFILES]
    jobs.append(("selector", "__init__.py"))

    for template, filename in jobs:
        try:
            files[filename] = format_source(render(template, spec))
        except (TemplateError, FormatError) as e:
            raise EmitError(filename, str(e)) from e

    return files


def _discard(temp_path: str) -> None:
    with contextlib.suppress(FileNotFoundError):
        os.unlink(temp_path)


def _stage(path: Path, text: str) -> str:
    """Write text to a temporary file beside path and return its name."""
    fd, temp_path = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(text)
        os.chmod(temp_path, 0o644)
    except OSError:
        _discard(temp_path)
        raise
    return temp_path


def write_files(files: Mapping[Path, str]) -> list[Path]:
    """
    Replace every path in files with its text, all or nothing.

    All files are staged before the first rename. If staging any of them
    fails, the destinations are left untouched.

    Returns:
        Absolute paths of the files written, in order

    Raises:
        EmitError: If a file cannot be written
    """
    staged: list[tuple[str, Path]] = []
    current: Path | None = None
    try:
        for current, text in files.items():
            staged.append((_stage(current, text), current))
        for temp_path, current in staged:
            os.replace(temp_path, current)
    except OSError as e:
        for temp_path, _ in staged:
            _discard(temp_path)
        raise EmitError(str(current), str(e)) from e

    return [path.resolve() for _, path in staged]


def write_file(path: Path, text: str) -> Path:
    """
    Atomically replace path with text.

    Raises:
        EmitError: If the file cannot be written
    """
    return write_files({path: text})[0]


def emit(
    fs: VFS,
    package_name: str,
    src_dir: str | Path,
    *,
    out_dir: str | Path = ".",
    verbose: bool = False,
) -> list[Path]:
    """
    Write the asset package for an already built tree.

    Returns:
        Absolute paths of the files written

    Raises:
        ConfigurationError: If the package name or source directory is unusable
        EmitError: If rendering or writing fails
    """
    try:
        spec = SourceSpec(
            package=package_name,
            src_dir=Path(src_dir).resolve(),
            fs=fs,
            version=__version__,
        )
    except ValidationError as e:
        raise ConfigurationError(str(e)) from e

    files = render_package(spec)

    package_dir = Path(out_dir) / spec.package
    try:
        package_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise EmitError(str(package_dir), f"create directory: {e}") from e

    written = write_files({package_dir / filename: text for filename, text in files.items()})
    if verbose:
        for path in written:
            print(f"ESSENCE: file written: {path}")

    return written


def generate(
    package_name: str | None = None,
    src_dir: str | Path | None = None,
    *,
    out_dir: str | Path | None = None,
    compact_json: bool | None = None,
    sort_entries: bool | None = None,
    exclude: Iterable[str] | None = None,
    verbose: bool | None = None,
    config: RuntimeConfig | None = None,
) -> list[Path]:
    """
    Embed src_dir into a generated package called package_name.

    Any argument left as None is taken from config, or from the global
    runtime configuration when no config is given.

    Args:
        package_name: Name of the generated package (a Python identifier)
        src_dir: Directory of assets to embed
        out_dir: Directory the package is written into
        compact_json: Strip whitespace from *.json assets
        sort_entries: Order siblings by name for reproducible output
        exclude: Glob patterns of entry names to leave out
        verbose: Print one line per embedded file and per file written
        config: Runtime configuration

    Returns:
        Absolute paths of the files written

    Raises:
        ConfigurationError: If the package name is unusable
        BuildError: If the source directory cannot be read
        EmitError: If rendering or writing fails

    Example:
        generate("assets", "./static")
    """
    cfg = config or get_global_config()
    package_name = cfg.package_name if package_name is None else package_name
    src_dir = cfg.src_dir if src_dir is None else src_dir
    out_dir = cfg.out_dir if out_dir is None else out_dir
    compact_json = cfg.compact_json if compact_json is None else compact_json
    sort_entries = cfg.sort_entries if sort_entries is None else sort_entries
    exclude = cfg.exclude if exclude is None else exclude
    verbose = cfg.verbose if verbose is None else verbose

    try:
        check_package_name(package_name)
    except ValueError as e:
        raise ConfigurationError(str(e)) from e

    src_path = Path(src_dir).resolve()
    fs = build_tree(
        src_path,
        compact_json=compact_json,
        sort_entries=sort_entries,
        exclude=exclude,
        verbose=verbose,
    )
    return emit(fs, package_name, src_path, out_dir=out_dir, verbose=verbose)
