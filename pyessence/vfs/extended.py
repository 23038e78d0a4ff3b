"""
Convenience layer over an openable source.

Extended wraps either the embedded VFS or a DiskSource and adds whole-file
reads and template loading, so application code never has to care which
one it was given.
"""

from __future__ import annotations

import posixpath
from typing import Any, Iterator

from jinja2 import Environment

from . import pathmatch
from .errors import NoFilesError
from .sources import Handle, OpenableSource
from .templates import FuncMap, TemplateSet, VFSLoader, make_environment, parse_sources
from .tree import ROOT


class Extended:
    """
    A source plus read_bytes/read_text and template parsing.

    Usage:
        fs = Extended(VFS())
        text = fs.read_text("/hello.txt")
        views = fs.parse_glob("/views/*.html")
        print(views.execute_template("index.html", {"title": "Home"}))
    """

    def __init__(self, source: OpenableSource) -> None:
        self.source = source

    def __repr__(self) -> str:
        return f"Extended({self.source!r})"

    def open(self, path: str) -> Handle:
        """Open an absolute path in the wrapped source."""
        return self.source.open(path)

    def read_bytes(self, path: str) -> bytes:
        """Return the full contents of the file at path."""
        handle = self.open(path)
        try:
            return handle.read()
        finally:
            handle.close()

    def read_text(self, path: str, encoding: str = "utf-8") -> str:
        """Return the full contents of the file at path, decoded."""
        return self.read_bytes(path).decode(encoding)

    # -------------------------------------------------------------------------
    # Templates
    # -------------------------------------------------------------------------

    def parse_files_with_func_map(
        self, func_map: FuncMap | None, *paths: str
    ) -> TemplateSet:
        """
        Parse the files at paths into one template set.

        Each template is named after the last segment of its path. The
        function map is shared by every template in the set.

        Raises:
            NoFilesError: If no paths are given
            NotFoundError: If a path does not exist
            jinja2.TemplateSyntaxError: If a file is not a valid template
        """
        if not paths:
            raise NoFilesError()

        def sources() -> Iterator[tuple[str, str]]:
            for path in paths:
                yield path, self.read_text(path)

        return parse_sources(sources(), func_map)

    def parse_files(self, *paths: str) -> TemplateSet:
        """Parse the files at paths into one template set."""
        return self.parse_files_with_func_map(None, *paths)

    def parse_glob_with_func_map(
        self, func_map: FuncMap | None, pattern: str
    ) -> TemplateSet:
        """
        Parse every file whose absolute path matches pattern.

        The pattern is checked before the tree is walked. A pattern that
        matches nothing is an error, not an empty set.

        Raises:
            BadPatternError: If the pattern is malformed
            NoFilesError: If nothing matches
        """
        regex = pathmatch.compile_pattern(pattern)
        matches = [path for path in self.walk() if regex.match(path)]
        return self.parse_files_with_func_map(func_map, *matches)

    def parse_glob(self, pattern: str) -> TemplateSet:
        """Parse every file whose absolute path matches pattern."""
        return self.parse_glob_with_func_map(None, pattern)

    def environment(self, func_map: FuncMap | None = None, **options: Any) -> Environment:
        """
        Return an environment that loads templates from this source on demand.

        Template names are absolute paths, e.g. env.get_template("/views/index.html").
        """
        return make_environment(VFSLoader(self.source), func_map, **options)

    # -------------------------------------------------------------------------
    # Traversal
    # -------------------------------------------------------------------------

    def walk(self) -> Iterator[str]:
        """Yield the absolute path of every regular file, depth-first."""

        def visit(path: str) -> Iterator[str]:
            handle = self.open(path)
            try:
                info = handle.stat()
                children = handle.readdir(0) if info.is_dir else []
            finally:
                handle.close()

            if not info.is_dir:
                yield path
                return

            for child in children:
                yield from visit(posixpath.join(path, child.name))

        yield from visit(ROOT)
