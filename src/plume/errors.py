"""Plume exception hierarchy.

Shared across the router, the helpers, and the template resolvers so
every module raises and catches the same types.
"""


class PlumeError(Exception):
    """Base for all plume-specific errors."""


class ConfigurationError(PlumeError):
    """Raised when renderer settings or the route table are invalid.

    Typically raised while building objects at startup, never while
    rendering.
    """


class RenderingError(PlumeError):
    """Raised when a helper is asked to reuse route context it cannot use.

    Either no route result was tracked for the current request, or the
    tracked result is a routing failure. Callers recover by passing an
    explicit route name.
    """


class RouterError(PlumeError):
    """The router could not build a URI.

    Unknown route name, missing required parameter, or a value that
    does not satisfy the parameter's converter.
    """

    def __init__(self, message: str, *, route_name: str | None = None) -> None:
        super().__init__(message)
        self.route_name = route_name


class TemplateNotFound(PlumeError):  # noqa: N818
    """No resolver produced a file for the requested template name."""

    def __init__(self, name: str, detail: str = "") -> None:
        message = f"Unable to resolve template {name!r}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)
        self.name = name
        self.detail = detail
