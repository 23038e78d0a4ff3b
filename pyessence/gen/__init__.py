"""
pyessence source generation.

Builds the tree for a source directory and writes a Python package that
embeds it, with a development twin that reads the directory live.

Usage:
    from pyessence.gen import generate

    generate("assets", "./static", verbose=True)

    # then, in application code
    import assets
    assets.read_text("/index.html")
"""

from .format import FormatError, format_source
from .spec import SourceSpec, check_package_name
from .templates import encode_bytes, render
from .writer import emit, generate, render_package, write_file, write_files

__all__ = [
    "generate",
    "emit",
    "render_package",
    "write_file",
    "write_files",
    "render",
    "encode_bytes",
    "format_source",
    "FormatError",
    "SourceSpec",
    "check_package_name",
]
