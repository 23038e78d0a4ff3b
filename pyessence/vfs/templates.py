"""
Jinja2 glue for templates stored in a virtual file system.

Templates are registered under their base name ("/views/page.html" becomes
"page.html") and can pull each other in with {% include "name" %}. The
environment mirrors an HTML template engine: output is autoescaped,
trailing newlines are kept, and referencing an undefined value is an error.
"""

from __future__ import annotations

import posixpath
from collections.abc import Callable, Iterable, Mapping
from typing import TYPE_CHECKING, Any

from jinja2 import BaseLoader, DictLoader, Environment, StrictUndefined, Template
from jinja2 import TemplateNotFound

from .errors import EssenceError, TemplateNotFoundError
from .tree import VFS

if TYPE_CHECKING:
    from .sources import OpenableSource

FuncMap = Mapping[str, Callable[..., Any]]

DEFAULT_OPTIONS: dict[str, Any] = {
    "autoescape": True,
    "keep_trailing_newline": True,
    "undefined": StrictUndefined,
}


def make_environment(
    loader: BaseLoader,
    func_map: FuncMap | None = None,
    **options: Any,
) -> Environment:
    """
    Create an environment with the given loader.

    Every entry of func_map is registered both as a global, callable as
    {{ name(value) }}, and as a filter, usable as {{ value|name }}.
    """
    env = Environment(loader=loader, **{**DEFAULT_OPTIONS, **options})
    if func_map:
        env.globals.update(func_map)
        env.filters.update(func_map)
    return env


class VFSLoader(BaseLoader):
    """
    Load templates lazily from an openable source.

    Template names are absolute paths within the source.
    """

    def __init__(self, source: OpenableSource, encoding: str = "utf-8") -> None:
        self.source = source
        self.encoding = encoding

    def get_source(
        self, environment: Environment, template: str
    ) -> tuple[str, str | None, Callable[[], bool] | None]:
        path = template if posixpath.isabs(template) else "/" + template
        try:
            handle = self.source.open(path)
        except EssenceError as e:
            raise TemplateNotFound(template) from e
        try:
            text = handle.read().decode(self.encoding)
        finally:
            handle.close()
        if isinstance(self.source, VFS):
            # Embedded content never changes
            return text, path, None
        return text, path, lambda: False


class TemplateSet:
    """
    A named collection of parsed templates sharing one environment.

    The first registered template is the set's default.
    """

    def __init__(self, environment: Environment, names: list[str]) -> None:
        self.environment = environment
        self.names = list(names)

    def __repr__(self) -> str:
        return f"TemplateSet({self.names!r})"

    def __contains__(self, name: object) -> bool:
        return name in self.names

    @property
    def name(self) -> str:
        return self.names[0]

    def lookup(self, name: str) -> Template | None:
        """Return the template called name, or None."""
        if name not in self.names:
            return None
        return self.environment.get_template(name)

    def execute_template(
        self, name: str, data: Mapping[str, Any] | None = None, **kwargs: Any
    ) -> str:
        """
        Render the template called name.

        Raises:
            TemplateNotFoundError: If the set has no such template
        """
        template = self.lookup(name)
        if template is None:
            raise TemplateNotFoundError(name)
        return template.render({**(data or {}), **kwargs})

    def execute(self, data: Mapping[str, Any] | None = None, **kwargs: Any) -> str:
        """Render the set's default template."""
        return self.execute_template(self.name, data, **kwargs)


def parse_sources(
    sources: Iterable[tuple[str, str]],
    func_map: FuncMap | None = None,
) -> TemplateSet:
    """
    Register (path, text) pairs in a fresh environment and compile them.

    sources is consumed lazily and each template is compiled as soon as it
    is registered, so the first failure stops the whole call before later
    paths are read.
    """
    mapping: dict[str, str] = {}
    env = make_environment(DictLoader(mapping), func_map)
    names: list[str] = []

    for path, text in sources:
        name = posixpath.basename(path)
        mapping[name] = text
        if name not in names:
            names.append(name)
        env.get_template(name)

    return TemplateSet(env, names)
