"""Exceptions raised by the virtual file system and the generator."""

from __future__ import annotations


class EssenceError(Exception):
    """Base exception for pyessence."""

    pass


# -----------------------------------------------------------------------------
# Path errors
# -----------------------------------------------------------------------------


class PathError(EssenceError):
    """An operation on a path failed."""

    def __init__(self, op: str, path: str, reason: str) -> None:
        self.op = op
        self.path = path
        self.reason = reason
        super().__init__(f"{op} {path}: {reason}")


class InvalidPathError(PathError):
    """Raised when a path is not absolute."""

    def __init__(self, op: str, path: str) -> None:
        super().__init__(op, path, "path must be absolute")


class NotFoundError(PathError):
    """Raised when no node exists at a path."""

    def __init__(self, op: str, path: str) -> None:
        super().__init__(op, path, "file does not exist")


# -----------------------------------------------------------------------------
# Range errors
# -----------------------------------------------------------------------------


class RangeError(EssenceError):
    """A seek could not be performed."""

    pass


class OffsetOutOfRangeError(RangeError):
    """Raised when a seek lands outside the byte range."""

    def __init__(self, offset: int, size: int) -> None:
        self.offset = offset
        self.size = size
        super().__init__(f"offset outside byte range: {offset} (size {size})")


class InvalidWhenceError(RangeError):
    """Raised for an unknown seek origin."""

    def __init__(self, whence: object) -> None:
        self.whence = whence
        super().__init__(f"invalid seek constant: {whence!r}")


# -----------------------------------------------------------------------------
# Configuration errors
# -----------------------------------------------------------------------------


class ConfigurationError(EssenceError):
    """A call was made with unusable arguments."""

    pass


class NoFilesError(ConfigurationError):
    """Raised when template parsing is given no files."""

    def __init__(self, call: str = "parse_files") -> None:
        super().__init__(f"template: no files named in call to {call}")


class BadPatternError(ConfigurationError):
    """Raised for a syntactically invalid glob pattern."""

    def __init__(self, pattern: str, reason: str) -> None:
        self.pattern = pattern
        self.reason = reason
        super().__init__(f"syntax error in pattern {pattern!r}: {reason}")


class TemplateNotFoundError(ConfigurationError):
    """Raised when a template set has no template with the given name."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"template: no template {name!r} associated with set")


class DuplicateNameError(ConfigurationError):
    """Raised when a directory already has a child with the same name."""

    def __init__(self, parent: str, name: str) -> None:
        self.parent = parent
        self.name = name
        super().__init__(f"directory {parent!r} already contains {name!r}")


# -----------------------------------------------------------------------------
# Build errors
# -----------------------------------------------------------------------------


class BuildError(EssenceError):
    """Raised when the tree cannot be built from the source directory."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"build tree: {path}: {reason}")


class CompactError(EssenceError, ValueError):
    """Raised when a JSON asset cannot be decoded for compaction."""

    pass


class EmitError(EssenceError):
    """Raised when a generated module cannot be rendered, formatted or written."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"write file: {path}: {reason}")
