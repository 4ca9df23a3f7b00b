"""Route-aware URL generation for templates.

``UrlHelper`` is registered as the ``url`` template global. Called with
no route name it rebuilds the URL of the current request's matched
route; called with the matched route's own name it reuses the matched
parameters so templates only pass what changes::

    {{ url() }}                            current page
    {{ url(params={"page": 2}) }}          current route, page swapped
    {{ url("user", {"id": 7}) }}           other route, nothing merged
"""

import logging
from collections.abc import Mapping
from typing import Any

from plume.errors import RenderingError
from plume.helpers.protocol import UriGenerator
from plume.routing.route import RouteResult
from plume.routing.tracker import RouteResultTracker

logger = logging.getLogger("plume.helpers")


class UrlHelper:
    """Generate URIs, merging in the tracked route result's parameters.

    Args:
        router: Anything with ``generate_uri(name, params)``.
        tracker: Where the current request's ``RouteResult`` lives.
            Defaults to a private tracker; share one with the host when
            the host publishes results through the tracker directly.
    """

    __slots__ = ("_router", "_tracker")

    def __init__(self, router: UriGenerator, tracker: RouteResultTracker | None = None) -> None:
        self._router = router
        self._tracker = tracker if tracker is not None else RouteResultTracker()

    @property
    def tracker(self) -> RouteResultTracker:
        return self._tracker

    def update(self, result: RouteResult) -> None:
        """Observer hook: record the route result of the current request."""
        self._tracker.update(result)

    set_route_result = update

    def __call__(self, route_name: str | None = None, params: Any = None) -> str:
        return self.generate(route_name, params)

    def generate(self, route_name: str | None = None, params: Any = None) -> str:
        """Build a URI.

        Raises ``RenderingError`` if *route_name* is omitted and there
        is no usable route result. ``RouterError`` from the router
        propagates unchanged.
        """
        if params is None:
            params = {}
        result = self._tracker.result

        if route_name is None:
            if result is None:
                msg = "Attempting to use matched result when none was injected; aborting"
                raise RenderingError(msg)
            return self._generate_from_result(result, params)

        if result is not None:
            params = self._merge_params(route_name, result, params)

        logger.debug("url(%r) -> %r", route_name, params)
        return self._router.generate_uri(route_name, params)

    def _generate_from_result(self, result: RouteResult, params: Mapping[str, Any]) -> str:
        if result.is_failure:
            msg = "Attempting to use matched result when routing failed; aborting"
            raise RenderingError(msg)

        name = result.matched_route_name
        if name is None:
            msg = "Attempting to use matched result of an unnamed route; aborting"
            raise RenderingError(msg)

        merged = {**result.matched_params, **params}
        logger.debug("url() -> %r %r", name, merged)
        return self._router.generate_uri(name, merged)

    @staticmethod
    def _merge_params(route_name: str, result: RouteResult, params: Any) -> Any:
        """Merge matched parameters under *params*.

        Returns *params* verbatim when it is not a mapping, when the
        result is a routing failure, or when the result matched a
        different route. Otherwise the caller's values win key by key.
        """
        if not isinstance(params, Mapping):
            return params

        if result.is_failure:
            return params

        if result.matched_route_name != route_name:
            return params

        return {**result.matched_params, **params}

    def __repr__(self) -> str:
        return f"<UrlHelper router={self._router!r}>"
