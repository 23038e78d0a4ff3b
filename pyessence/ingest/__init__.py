"""
pyessence ingest layer.

Turns a directory on disk into an in-memory VFS, compacting JSON assets
on the way in.

Usage:
    from pyessence.ingest import build_tree

    fs = build_tree("./static", verbose=True)
    fs.open("/index.html").read()
"""

from .build import build_tree, should_exclude
from .compact import compact_json

__all__ = [
    "build_tree",
    "should_exclude",
    "compact_json",
]
