"""Request-scoped holder for the current RouteResult.

The hosting framework matches a request, then calls ``update()`` once.
Helpers read ``result`` while the request renders.

Thread safety:
    The value lives in a ``ContextVar``, which is task-local under
    asyncio and thread-local under threads. A single tracker can be
    shared by every request without one request seeing another's
    result. No locks needed.
"""

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from itertools import count

from plume.routing.route import RouteResult

_ids = count()


class RouteResultTracker:
    """Holds the most recently observed RouteResult for this request.

    Usage::

        tracker = RouteResultTracker()

        with tracker.request_scope():
            tracker.update(RouteResult.from_route("user", {"id": "42"}))
            ...  # render; helpers read tracker.result
    """

    __slots__ = ("_var",)

    def __init__(self) -> None:
        self._var: ContextVar[RouteResult | None] = ContextVar(
            f"plume_route_result_{next(_ids)}", default=None
        )

    @property
    def result(self) -> RouteResult | None:
        """The tracked result, or ``None`` before the first update."""
        return self._var.get()

    def update(self, result: RouteResult) -> None:
        """Replace the tracked result. Never merges with the previous one."""
        self._var.set(result)

    set_route_result = update

    @contextmanager
    def request_scope(self) -> Iterator["RouteResultTracker"]:
        """Bound tracked state to one request.

        Inside the block the tracker starts empty; on exit the value
        visible before the block is restored.
        """
        token = self._var.set(None)
        try:
            yield self
        finally:
            self._var.reset(token)

    def __repr__(self) -> str:
        return f"<RouteResultTracker {self.result!r}>"
