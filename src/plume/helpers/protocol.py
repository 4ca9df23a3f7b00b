"""Router capability the URL helper depends on.

Any object with a matching ``generate_uri`` works::

    class MyRouter:
        def generate_uri(self, name: str, params: Mapping[str, Any] | None = None) -> str: ...

No base class required. The helper checks the shape, not the lineage.
``plume.routing.router.Router`` is the bundled implementation.
"""

from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable

from plume.routing.route import RouteResult


@runtime_checkable
class UriGenerator(Protocol):
    """Builds a URI from a route name and parameters.

    Implementations raise ``RouterError`` when they cannot.
    """

    def generate_uri(self, name: str, params: Mapping[str, Any] | None = None) -> str: ...


@runtime_checkable
class RouteResultObserver(Protocol):
    """Receives the route result of the current request."""

    def update(self, result: RouteResult) -> None: ...
