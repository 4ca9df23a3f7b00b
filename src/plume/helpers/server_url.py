"""Absolute URI helper.

Registered as the ``serverurl`` template global. Combine with ``url``
to produce links that leave the page, e.g. in emails or feeds::

    {{ serverurl(url("post", {"slug": post.slug})) }}

Thread safety:
    A per-request base set with ``set_uri()`` lives in a ``ContextVar``,
    like the route result in ``RouteResultTracker``. One helper can be
    registered as a global and shared by every request.
"""

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from itertools import count
from urllib.parse import urljoin, urlsplit, urlunsplit

_ids = count()


def _normalize_base(uri: str) -> str:
    parts = urlsplit(uri)
    return urlunsplit((parts.scheme, parts.netloc, parts.path or "/", "", ""))


class ServerUrlHelper:
    """Turn a path into an absolute URI on the base's scheme and host.

    *base_uri* is the fixed origin used when no per-request base has
    been set. Hosts serving several origins set one per request::

        helper = ServerUrlHelper("https://example.com/blog/")
        helper("/about")   # "https://example.com/about"
        helper("archive")  # "https://example.com/blog/archive"
        helper()           # "https://example.com/blog/"

        with helper.request_scope():
            helper.set_uri("https://other.example/")
            helper("/about")  # "https://other.example/about"

    Only the path, query and fragment of *path* are used. A scheme or
    host inside *path* never replaces the base's.
    """

    __slots__ = ("_default", "_var")

    def __init__(self, base_uri: str | None = None) -> None:
        self._default = _normalize_base(base_uri) if base_uri is not None else None
        self._var: ContextVar[str | None] = ContextVar(
            f"plume_server_url_{next(_ids)}", default=None
        )

    @property
    def base_uri(self) -> str | None:
        """The base for the current request, else the fixed origin."""
        base = self._var.get()
        return base if base is not None else self._default

    def set_uri(self, uri: str) -> None:
        """Set the base for the current request. Query string and fragment are dropped."""
        self._var.set(_normalize_base(uri))

    @contextmanager
    def request_scope(self) -> Iterator["ServerUrlHelper"]:
        """Bound a per-request base to one request.

        Inside the block the fixed origin applies until ``set_uri()``;
        on exit the base visible before the block is restored.
        """
        token = self._var.set(None)
        try:
            yield self
        finally:
            self._var.reset(token)

    def __call__(self, path: str | None = None) -> str:
        base = self.base_uri
        if base is None:
            return path or "/"
        if not path:
            return base

        origin = urlsplit(base)
        target = urlsplit(path)
        if target.path.startswith("/"):
            resolved = target.path
        elif target.path:
            resolved = urljoin(origin.path, target.path)
        else:
            resolved = origin.path
        return urlunsplit((origin.scheme, origin.netloc, resolved, target.query, target.fragment))

    def __repr__(self) -> str:
        return f"<ServerUrlHelper base={self.base_uri!r}>"
