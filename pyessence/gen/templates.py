"""
Source templates for generated asset packages.

Three modules are rendered per package:
- embedded: the whole tree as a flat list of literal VFile expressions,
  inserted under their parent paths so nesting depth stays constant
- passthrough: a DiskSource pointing at the original directory
- selector: the package __init__, which picks one of the two at import

The embedded and passthrough modules include the same public interface so
application code works unchanged with either.

Layout inside brackets is not significant here; format_source re-indents
the rendered text.
"""

from __future__ import annotations

import posixpath
from datetime import datetime

from jinja2 import DictLoader, Environment, StrictUndefined

from pyessence.vfs import VFS, VFile
from pyessence.vfs.tree import ROOT

from .spec import SourceSpec

HEADER = """\
# Code generated by pyessence {{ spec.version }}. DO NOT EDIT.
"""

INTERFACE = '''\
def instance() -> Extended:
    """Return the file system behind this package."""
    return _fs


def open(path: str) -> Handle:  # noqa: A001
    """Open an absolute path."""
    return _fs.open(path)


def read_bytes(path: str) -> bytes:
    return _fs.read_bytes(path)


def read_text(path: str, encoding: str = "utf-8") -> str:
    return _fs.read_text(path, encoding)


def parse_files(*paths: str) -> TemplateSet:
    return _fs.parse_files(*paths)


def parse_glob(pattern: str) -> TemplateSet:
    return _fs.parse_glob(pattern)


def parse_files_with_func_map(func_map: FuncMap | None, *paths: str) -> TemplateSet:
    return _fs.parse_files_with_func_map(func_map, *paths)


def parse_glob_with_func_map(func_map: FuncMap | None, pattern: str) -> TemplateSet:
    return _fs.parse_glob_with_func_map(func_map, pattern)


__all__ = [
    "instance",
    "open",
    "read_bytes",
    "read_text",
    "parse_files",
    "parse_glob",
    "parse_files_with_func_map",
    "parse_glob_with_func_map",
]
'''

EMBEDDED = '''\
{% include "header" %}
"""Assets for the {{ spec.package }} package, embedded in memory."""

from __future__ import annotations

from datetime import datetime, timezone
from functools import partial

from pyessence.vfs import VFS, Extended, Handle, VFile
from pyessence.vfs.templates import FuncMap, TemplateSet

_t = partial(datetime.fromtimestamp, tz=timezone.utc)

_tree = VFS(
root=VFile.directory(
{{ root.name|pyrepr }},
mod_time=_t({{ root.mod_time|timestamp }}),
mode={{ root.mode|octal }},
),
)

# (parent directory, node) in pre-order, so parents exist before children
for _parent, _node in [
{% for parent, node in entries %}
(
{{ parent|pyrepr }},
{% if node.is_dir %}
VFile.directory(
{{ node.name|pyrepr }},
mod_time=_t({{ node.mod_time|timestamp }}),
mode={{ node.mode|octal }},
),
{% else %}
VFile.file(
{{ node.name|pyrepr }},
{{ node.data|pybytes }},
mod_time=_t({{ node.mod_time|timestamp }}),
mode={{ node.mode|octal }},
),
{% endif %}
),
{% endfor %}
]:
    _tree.insert(_parent, _node)

_fs = Extended(_tree)


{% include "interface" %}
'''

PASSTHROUGH = '''\
{% include "header" %}
"""Assets for the {{ spec.package }} package, read live from disk."""

from __future__ import annotations

from pyessence.vfs import DiskSource, Extended, Handle
from pyessence.vfs.templates import FuncMap, TemplateSet

_fs = Extended(DiskSource({{ spec.src_dir|string|pyrepr }}))


{% include "interface" %}
'''

SELECTOR = '''\
{% include "header" %}
"""
Assets for the {{ spec.package }} package.

The embedded copy is used unless ESSENCE_DEV is set, in which case files
are read from the source directory on every access.
"""

from pyessence.runtime import dev_mode_enabled

if dev_mode_enabled():
    from .{{ spec.dev_module }} import *  # noqa: F403
    from .{{ spec.dev_module }} import __all__
else:
    from .{{ spec.package }} import *  # noqa: F403
    from .{{ spec.package }} import __all__
'''

TEMPLATES: dict[str, str] = {
    "header": HEADER,
    "interface": INTERFACE,
    "embedded": EMBEDDED,
    "passthrough": PASSTHROUGH,
    "selector": SELECTOR,
}

BYTES_PER_LINE = 24


def encode_bytes(data: bytes, width: int = BYTES_PER_LINE) -> str:
    """Render data as a bytes literal of \\xHH escapes, wrapped every width bytes."""
    if not data:
        return 'b""'
    lines = [
        'b"' + "".join(f"\\x{b:02x}" for b in data[i : i + width]) + '"'
        for i in range(0, len(data), width)
    ]
    if len(lines) == 1:
        return lines[0]
    return "(\n" + "\n".join(lines) + "\n)"


def _timestamp(value: datetime) -> int:
    return int(value.timestamp())


def _octal(value: int) -> str:
    return f"0o{value:o}"


def make_environment() -> Environment:
    env = Environment(
        loader=DictLoader(TEMPLATES),
        autoescape=False,
        keep_trailing_newline=True,
        trim_blocks=True,
        lstrip_blocks=True,
        undefined=StrictUndefined,
    )
    env.filters["pyrepr"] = repr
    env.filters["pybytes"] = encode_bytes
    env.filters["timestamp"] = _timestamp
    env.filters["octal"] = _octal
    return env


def tree_entries(fs: VFS) -> list[tuple[str, VFile]]:
    """List (parent directory, node) for every node but the root, in pre-order."""
    return [(posixpath.dirname(path), node) for path, node in fs.walk() if path != ROOT]


def render(name: str, spec: SourceSpec) -> str:
    """Render one of the TEMPLATES for spec."""
    template = make_environment().get_template(name)
    return template.render(spec=spec, root=spec.fs.root, entries=tree_entries(spec.fs))
