import sys
from pathlib import Path

import pytest

from pyessence import runtime
from pyessence.ingest import build_tree
from pyessence.vfs import DiskSource, Extended

FIXTURES = Path(__file__).resolve().parent / "fixtures" / "static"

# Regular files under FIXTURES in depth-first, name-sorted order
FIXTURE_FILES = [
    "/data.json",
    "/empty.txt",
    "/functions.tmpl",
    "/hello.txt",
    "/subdir/nested/deep.tmpl",
    "/subdir/other.txt",
    "/subdir/subtmpl.tmpl",
    "/tmpl.tmpl",
]


@pytest.fixture(autouse=True)
def fresh_global_config(monkeypatch):
    """Start every test without a global runtime configuration."""
    monkeypatch.setattr(runtime, "_global_config", None)


@pytest.fixture
def static_dir() -> Path:
    return FIXTURES


@pytest.fixture
def built_fs():
    return build_tree(FIXTURES)


@pytest.fixture(params=["embedded", "disk"])
def assets(request) -> Extended:
    """The same fixture directory, once from memory and once from disk."""
    if request.param == "embedded":
        return Extended(build_tree(FIXTURES))
    return Extended(DiskSource(FIXTURES))


@pytest.fixture
def clean_modules():
    """Forget generated assets_* packages imported during a test."""
    before = set(sys.modules)
    yield
    for name in set(sys.modules) - before:
        if name.startswith("assets_"):
            del sys.modules[name]
