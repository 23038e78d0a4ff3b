"""Validated inputs for source generation."""

from __future__ import annotations

import keyword
from pathlib import Path

from pydantic import BaseModel, ConfigDict, field_validator

from pyessence.vfs import VFS


def check_package_name(value: str) -> str:
    """Ensure value can be imported as a package name."""
    if not value.isidentifier() or keyword.iskeyword(value):
        raise ValueError(f"package name must be a Python identifier, got {value!r}")
    return value


class SourceSpec(BaseModel):
    """Everything the templates need to render one asset package."""

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    package: str
    src_dir: Path
    fs: VFS
    version: str

    @field_validator("package")
    @classmethod
    def check_package(cls, value: str) -> str:
        return check_package_name(value)

    @field_validator("src_dir")
    @classmethod
    def check_src_dir(cls, value: Path) -> Path:
        if not value.is_absolute():
            raise ValueError(f"source directory must be absolute, got {str(value)!r}")
        return value

    @property
    def dev_module(self) -> str:
        return f"{self.package}_dev"
