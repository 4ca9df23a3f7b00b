"""Kida environment setup backed by plume resolvers.

``ResolverLoader`` adapts any resolver (normally the map + path stack
chain built by ``plume.factory``) to kida's loader protocol, so
``env.get_template("blog::post")`` goes through the same precedence
rules as every other lookup. The environment is created once at
startup and shared read-only by every request.
"""

import logging
from collections.abc import Callable, Mapping
from pathlib import Path
from typing import Any

from kida import Environment
from kida.environment.exceptions import TemplateNotFoundError

from plume.config import RendererConfig
from plume.errors import TemplateNotFound
from plume.templating.resolvers import (
    AggregateResolver,
    NamespacedPathStackResolver,
    Resolver,
    TemplateMapResolver,
)

logger = logging.getLogger("plume.templating")


class ResolverLoader:
    """Kida loader that reads whatever file the resolver points at."""

    __slots__ = ("_resolver",)

    def __init__(self, resolver: Resolver) -> None:
        self._resolver = resolver

    @property
    def resolver(self) -> Resolver:
        return self._resolver

    def get_source(self, name: str) -> tuple[str, str]:
        """Return ``(source, filename)``.

        Raises kida's ``TemplateNotFoundError`` when no resolver finds
        the name, so kida's own error reporting applies.
        """
        try:
            filename = self._resolver.resolve(name)
        except TemplateNotFound as exc:
            raise TemplateNotFoundError(str(exc)) from exc
        try:
            source = Path(filename).read_text(encoding="utf-8")
        except OSError as exc:
            msg = f"Unable to read template {name!r} from {filename}: {exc.strerror or exc}"
            raise TemplateNotFoundError(msg) from exc
        return source, filename

    def list_templates(self) -> list[str]:
        names: dict[str, None] = {}
        for resolver in _leaves(self._resolver):
            if isinstance(resolver, TemplateMapResolver):
                names.update(dict.fromkeys(resolver))
            elif isinstance(resolver, NamespacedPathStackResolver):
                names.update(dict.fromkeys(resolver.list_templates()))
        return sorted(names)


def _leaves(resolver: Resolver) -> list[Resolver]:
    """Flatten nested aggregate resolvers."""
    if not isinstance(resolver, AggregateResolver):
        return [resolver]
    leaves: list[Resolver] = []
    for child in resolver:
        leaves.extend(_leaves(child))
    return leaves


def create_environment(
    config: RendererConfig,
    resolver: Resolver,
    globals_: Mapping[str, Any] | None = None,
    filters: Mapping[str, Callable[..., Any]] | None = None,
) -> Environment:
    """Create a kida Environment that loads templates through *resolver*.

    *globals_* typically carries the view helpers (``url``,
    ``serverurl``) so templates can call them directly.
    """
    env = Environment(
        loader=ResolverLoader(resolver),
        autoescape=config.autoescape,
        auto_reload=config.auto_reload,
        trim_blocks=config.trim_blocks,
        lstrip_blocks=config.lstrip_blocks,
    )

    if filters:
        env.update_filters(dict(filters))

    for name, value in (globals_ or {}).items():
        env.add_global(name, value)

    logger.debug("Created kida environment with globals %s", sorted(globals_ or {}))
    return env
