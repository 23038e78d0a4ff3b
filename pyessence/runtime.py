"""
Runtime configuration for pyessence.

Holds the generator settings that flow from the CLI into generate(), and
the development switch that generated packages read at import time.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

DEFAULT_PACKAGE_NAME = "essence"
DEFAULT_SRC_DIR = "./static"

# Environment variables
DEV_ENV = "ESSENCE_DEV"
PACKAGE_NAME_ENV = "ESSENCE_PACKAGE_NAME"
SRC_DIR_ENV = "ESSENCE_SRC_DIR"

TRUTHY = frozenset({"1", "true", "yes", "on"})


def dev_mode_enabled() -> bool:
    """True when generated packages should read assets from disk."""
    return os.environ.get(DEV_ENV, "").strip().lower() in TRUTHY


@dataclass
class RuntimeConfig:
    """
    Generator configuration.

    Attributes:
        package_name: Name of the generated package
        src_dir: Directory of assets to embed
        out_dir: Directory the generated package is written into
        compact_json: Strip whitespace from *.json assets
        sort_entries: Order siblings by name for reproducible output
        exclude: Glob patterns of entry names to leave out
        verbose: Print progress lines
    """

    package_name: str = DEFAULT_PACKAGE_NAME
    src_dir: str = DEFAULT_SRC_DIR
    out_dir: str = "."

    # Build settings
    compact_json: bool = True
    sort_entries: bool = True
    exclude: tuple[str, ...] = field(default_factory=tuple)

    # Output
    verbose: bool = False

    def __post_init__(self):
        """Normalize paths and patterns."""
        self.src_dir = str(Path(self.src_dir).expanduser())
        self.out_dir = str(Path(self.out_dir).expanduser())
        self.exclude = tuple(self.exclude)

    @classmethod
    def from_env(cls, **overrides) -> RuntimeConfig:
        """Build a config whose defaults come from ESSENCE_* variables."""
        values: dict = {}
        if os.environ.get(PACKAGE_NAME_ENV):
            values["package_name"] = os.environ[PACKAGE_NAME_ENV]
        if os.environ.get(SRC_DIR_ENV):
            values["src_dir"] = os.environ[SRC_DIR_ENV]
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)


def get_runtime_config(
    package_name: str | None = None,
    src_dir: str | None = None,
    out_dir: str | None = None,
    compact_json: bool = True,
    sort_entries: bool = True,
    exclude: list[str] | None = None,
    verbose: bool = False,
) -> RuntimeConfig:
    """
    Create a configuration, falling back to the environment and defaults.

    Args:
        package_name: Override the package name
        src_dir: Override the source directory
        out_dir: Override the output directory
        compact_json: Compact JSON assets
        sort_entries: Sort directory entries
        exclude: Entry name globs to skip
        verbose: Print progress lines

    Returns:
        Configured RuntimeConfig instance
    """
    return RuntimeConfig.from_env(
        package_name=package_name,
        src_dir=src_dir,
        out_dir=out_dir,
        compact_json=compact_json,
        sort_entries=sort_entries,
        exclude=tuple(exclude or ()),
        verbose=verbose,
    )


# Global config instance (set by the CLI)
_global_config: RuntimeConfig | None = None


def set_global_config(config: RuntimeConfig) -> None:
    """Set the global runtime configuration."""
    global _global_config
    _global_config = config


def get_global_config() -> RuntimeConfig:
    """Get the global runtime configuration, creating one from the environment if needed."""
    global _global_config
    if _global_config is None:
        _global_config = RuntimeConfig.from_env()
    return _global_config
