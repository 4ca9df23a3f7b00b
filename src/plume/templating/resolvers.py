"""Template name resolvers.

A resolver turns a template name into a file path or raises
``TemplateNotFound``. Three are provided:

- ``TemplateMapResolver``: explicit name -> file entries.
- ``NamespacedPathStackResolver``: directory search, optionally
  namespaced with ``"ns::name"``.
- ``AggregateResolver``: tries a sequence of resolvers in order.

``plume.factory`` wires them as map first, path stack second, so an
explicit map entry always beats a file found by convention.

All three are populated at startup and only read while rendering, so
they can be shared across concurrent requests without locking.
"""

import logging
import os
from collections.abc import Iterable, Iterator, Mapping
from pathlib import Path, PurePosixPath
from typing import Protocol

from plume.errors import TemplateNotFound
from plume.templating.paths import TemplatePath

logger = logging.getLogger("plume.templating")

NAMESPACE_SEPARATOR = "::"
DEFAULT_SUFFIX = "html"


class Resolver(Protocol):
    """Anything that can resolve a template name to a file path."""

    def resolve(self, name: str) -> str: ...


class TemplateMapResolver:
    """Exact template name -> file path entries.

    No suffixing and no filesystem access: an entry is returned as
    configured. Later entries for the same name overwrite earlier ones::

        resolver = TemplateMapResolver({"layout": "/srv/app/layout.html"})
        resolver.get("layout")  # "/srv/app/layout.html"
    """

    __slots__ = ("_map",)

    def __init__(self, entries: Mapping[str, str] | None = None) -> None:
        self._map: dict[str, str] = {}
        if entries:
            self.merge(entries)

    def add(self, name: str, path: str | os.PathLike[str]) -> None:
        self._map[name] = os.fspath(path)

    def merge(self, entries: Mapping[str, str | os.PathLike[str]]) -> None:
        for name, path in entries.items():
            self.add(name, path)

    def has(self, name: str) -> bool:
        return name in self._map

    def get(self, name: str) -> str:
        """Return the mapped path. Raises ``TemplateNotFound`` if unmapped."""
        try:
            return self._map[name]
        except KeyError:
            raise TemplateNotFound(name, "no template map entry") from None

    resolve = get

    def __contains__(self, name: object) -> bool:
        return name in self._map

    def __iter__(self) -> Iterator[str]:
        return iter(self._map)

    def __len__(self) -> int:
        return len(self._map)

    def __repr__(self) -> str:
        return f"<TemplateMapResolver {len(self._map)} entries>"


class NamespacedPathStackResolver:
    """Search registered directories for a template file.

    ``"ns::view"`` only searches directories registered under ``ns``;
    ``"view"`` only searches directories registered without a
    namespace. A bare name without an extension gets
    ``"." + default_suffix`` appended. Directories are tried in
    registration order and the first one holding the file wins.

    Usage::

        resolver = NamespacedPathStackResolver(default_suffix="html")
        resolver.add_path("templates")
        resolver.add_path("plugins/blog/templates", "blog")
        resolver.resolve("home")        # templates/home.html
        resolver.resolve("blog::post")  # plugins/blog/templates/post.html
    """

    __slots__ = ("_default_suffix", "_paths")

    def __init__(self, paths: Iterable[TemplatePath] = (), default_suffix: str = DEFAULT_SUFFIX) -> None:
        self._paths: list[TemplatePath] = list(paths)
        self._default_suffix = default_suffix.lstrip(".")

    @property
    def default_suffix(self) -> str:
        return self._default_suffix

    @default_suffix.setter
    def default_suffix(self, suffix: str) -> None:
        self._default_suffix = suffix.lstrip(".")

    @property
    def paths(self) -> tuple[TemplatePath, ...]:
        """All registered paths, in registration order."""
        return tuple(self._paths)

    def paths_for(self, namespace: str | None) -> list[TemplatePath]:
        return [p for p in self._paths if p.namespace == namespace]

    def add_path(self, path: str | os.PathLike[str], namespace: str | None = None) -> TemplatePath:
        template_path = TemplatePath(path, namespace)
        self._paths.append(template_path)
        return template_path

    def add_paths(self, paths: Iterable[str | os.PathLike[str]], namespace: str | None = None) -> None:
        for path in paths:
            self.add_path(path, namespace)

    def has(self, name: str) -> bool:
        try:
            self.resolve(name)
        except TemplateNotFound:
            return False
        return True

    def resolve(self, name: str) -> str:
        """Return the path of the first matching file.

        Raises ``TemplateNotFound`` if the name or its namespace is empty,
        if it escapes its directory, names an unknown namespace, or
        matches no file.
        """
        namespace, bare = split_name(name)

        if namespace == "":
            raise TemplateNotFound(name, "empty namespace before '::'")
        if not bare:
            raise TemplateNotFound(name, "empty template name")

        relative = PurePosixPath(bare)
        if relative.is_absolute() or ".." in relative.parts:
            logger.warning("Refusing template name outside its directory: %r", name)
            raise TemplateNotFound(name, "parent directory traversal is not allowed")

        if not relative.suffix and self._default_suffix:
            relative = relative.with_name(f"{relative.name}.{self._default_suffix}")

        candidates = self.paths_for(namespace)
        if not candidates:
            detail = (
                f"no paths registered for namespace {namespace!r}"
                if namespace is not None
                else "no paths registered"
            )
            raise TemplateNotFound(name, detail)

        for template_path in candidates:
            candidate = Path(template_path.path, *relative.parts)
            if candidate.is_file():
                logger.debug("Resolved template %r -> %s", name, candidate)
                return str(candidate)

        searched = ", ".join(p.path for p in candidates)
        raise TemplateNotFound(name, f"{relative.as_posix()} not found in: {searched}")

    def list_templates(self) -> list[str]:
        """Names of every file carrying the default suffix.

        Namespaced directories contribute ``"ns::relative/name.ext"``.
        """
        names: dict[str, None] = {}
        pattern = f"*.{self._default_suffix}" if self._default_suffix else "*"
        for template_path in self._paths:
            root = Path(template_path.path)
            if not root.is_dir():
                continue
            for file in sorted(root.rglob(pattern)):
                if not file.is_file():
                    continue
                relative = file.relative_to(root).as_posix()
                if template_path.namespace is not None:
                    relative = f"{template_path.namespace}{NAMESPACE_SEPARATOR}{relative}"
                names[relative] = None
        return list(names)

    def __repr__(self) -> str:
        return f"<NamespacedPathStackResolver {len(self._paths)} paths, suffix={self._default_suffix!r}>"


class AggregateResolver:
    """Try resolvers in attachment order; the first success wins."""

    __slots__ = ("_resolvers",)

    def __init__(self, resolvers: Iterable[Resolver] = ()) -> None:
        self._resolvers: list[Resolver] = list(resolvers)

    def attach(self, resolver: Resolver) -> None:
        self._resolvers.append(resolver)

    def resolve(self, name: str) -> str:
        """Raises ``TemplateNotFound`` if every resolver fails."""
        for resolver in self._resolvers:
            try:
                return resolver.resolve(name)
            except TemplateNotFound:
                continue
        raise TemplateNotFound(name, f"tried {len(self._resolvers)} resolvers")

    def __iter__(self) -> Iterator[Resolver]:
        return iter(self._resolvers)

    def __len__(self) -> int:
        return len(self._resolvers)

    def __repr__(self) -> str:
        return f"<AggregateResolver {self._resolvers!r}>"


def split_name(name: str) -> tuple[str | None, str]:
    """Split ``"ns::view"`` into ``("ns", "view")``; ``"view"`` -> ``(None, "view")``."""
    if NAMESPACE_SEPARATOR in name:
        namespace, bare = name.split(NAMESPACE_SEPARATOR, 1)
        return namespace, bare
    return None, name
