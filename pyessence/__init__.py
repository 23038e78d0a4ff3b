"""
pyessence: embed a directory of static assets into a Python package.

The assets are served from an in-memory virtual file system in production
and straight off disk during development.

Usage:
    essence generate --package-name assets --src-dir ./static

    # application code
    import assets

    html = assets.read_text("/index.html")
    page = assets.parse_glob("/templates/*.html")

Set ESSENCE_DEV=1 to make the generated package read the source directory
instead of the embedded copy.
"""

__version__ = "0.3.0"

__all__ = ["__version__"]
