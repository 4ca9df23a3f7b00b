"""Named route table with reverse routing.

Routes are registered during setup and frozen with ``compile()``.
``generate_uri()`` builds a path back from a route name and parameters,
which is the capability ``UrlHelper`` delegates to. Matching requests
is the host's job; it hands the outcome over as a ``RouteResult``.
"""

import re
from collections.abc import Mapping
from typing import Any
from urllib.parse import quote

from plume.errors import ConfigurationError, RouterError
from plume.routing.params import compile_converter
from plume.routing.route import PathSegment, Route

_FLASK_PARAM = re.compile(r"<[^>]*>")


def parse_path(path: str) -> list[PathSegment]:
    """Parse a route path string into segments.

    Examples::

        "/users"          -> [PathSegment("users")]
        "/users/{id}"     -> [PathSegment("users"), PathSegment("{id}", is_param=True, ...)]
        "/users/{id:int}" -> [PathSegment("{id:int}", is_param=True, param_type="int")]

    Raises ``ConfigurationError`` for ``<param>`` segments, unknown
    converters, and a ``path`` parameter that is not the last segment.
    """
    if _FLASK_PARAM.search(path):
        msg = (
            f"Route path {path!r} uses <param> syntax. "
            "Use {param} or {param:type} for path parameters."
        )
        raise ConfigurationError(msg)

    segments: list[PathSegment] = []
    for part in path.strip("/").split("/"):
        if not part:
            continue
        if segments and segments[-1].param_type == "path":
            msg = f"A {{name:path}} parameter must be the last segment of {path!r}"
            raise ConfigurationError(msg)
        if not (part.startswith("{") and part.endswith("}")):
            segments.append(PathSegment(value=part))
            continue

        param_name, _, param_type = part[1:-1].partition(":")
        param_type = param_type or "str"
        try:
            compile_converter(param_type)
        except KeyError:
            msg = f"Unknown converter {param_type!r} in route path {path!r}"
            raise ConfigurationError(msg) from None
        segments.append(
            PathSegment(value=part, is_param=True, param_name=param_name, param_type=param_type)
        )
    return segments


class Router:
    """Route table keyed by route name.

    Usage::

        router = Router()
        router.add(Route("/users/{id:int}", name="user"))
        router.compile()
        router.generate_uri("user", {"id": 7})  # "/users/7"
    """

    __slots__ = ("_compiled", "_named")

    def __init__(self) -> None:
        self._compiled = False
        self._named: dict[str, tuple[Route, list[PathSegment]]] = {}

    def add(self, route: Route) -> None:
        """Register a named route. Must be called before compile()."""
        if self._compiled:
            msg = "Cannot add routes after compilation."
            raise RuntimeError(msg)

        segments = parse_path(route.path)
        if route.name in self._named:
            existing = self._named[route.name][0]
            msg = (
                f"Duplicate route name {route.name!r}: "
                f"{existing.path!r} and {route.path!r}"
            )
            raise ConfigurationError(msg)
        self._named[route.name] = (route, segments)

    @property
    def routes(self) -> list[Route]:
        """Registered routes, in registration order."""
        return [route for route, _ in self._named.values()]

    def compile(self) -> None:
        """Freeze the router. No more routes can be added."""
        self._compiled = True

    def generate_uri(self, name: str, params: Mapping[str, Any] | None = None) -> str:
        """Build the path for the route called *name*.

        Values are converted with ``str()`` and URL-quoted; ``path``
        parameters keep their slashes. Keys that are not path parameters
        of the route are ignored.

        Raises ``RouterError`` if the route is unknown, a parameter is
        missing, or a value does not satisfy its converter.
        """
        try:
            route, segments = self._named[name]
        except KeyError:
            msg = f"Cannot generate URI for unknown route {name!r}"
            raise RouterError(msg, route_name=name) from None

        params = params or {}
        if not isinstance(params, Mapping):
            msg = f"Cannot generate URI for route {name!r}: parameters must be a mapping, got {params!r}"
            raise RouterError(msg, route_name=name)

        parts: list[str] = []
        for seg in segments:
            if not seg.is_param:
                parts.append(seg.value)
                continue

            param_name = seg.param_name or ""
            if param_name not in params:
                msg = (
                    f"Cannot generate URI for route {name!r}: "
                    f"missing parameter {param_name!r} (path {route.path!r})"
                )
                raise RouterError(msg, route_name=name)

            value = str(params[param_name])
            if not compile_converter(seg.param_type).match(value):
                msg = (
                    f"Cannot generate URI for route {name!r}: "
                    f"{value!r} is not a valid {seg.param_type} for {param_name!r}"
                )
                raise RouterError(msg, route_name=name)

            safe = "/" if seg.param_type == "path" else ""
            parts.append(quote(value, safe=safe))

        return "/" + "/".join(parts)
