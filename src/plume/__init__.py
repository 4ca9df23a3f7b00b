"""Plume — route-aware URL helpers and namespaced template resolution.

Links that reuse the current route's parameters, and template lookup
across namespaced directories with explicit overrides.

Basic usage::

    from plume import Route, RouteResult, Router, configure_renderer

    router = Router()
    router.add(Route("/users/{id:int}", name="user"))
    router.compile()

    renderer = configure_renderer(
        {"templates": {"paths": {0: "templates", "blog": "blog/templates"}}},
        router,
    )
    renderer.helpers["url"].update(RouteResult.from_route("user", {"id": "42"}))
    html = renderer.render("profile")   # {{ url() }} -> "/users/42"

Rendering needs kida (``pip install plume[kida]``).
"""

__version__ = "0.1.0.dev0"
__all__ = [
    "AggregateResolver",
    "ConfigurationError",
    "NamespacedPathStackResolver",
    "PlumeError",
    "RendererConfig",
    "RenderingError",
    "Route",
    "RouteResult",
    "RouteResultTracker",
    "Router",
    "RouterError",
    "ServerUrlHelper",
    "TemplateMapResolver",
    "TemplateNotFound",
    "TemplatePath",
    "UrlHelper",
    "ViewRenderer",
    "configure_renderer",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import plume`` fast and kida-free until rendering is used.
    """
    if name in ("Route", "RouteResult"):
        from plume.routing import route as _route

        return getattr(_route, name)

    if name == "Router":
        from plume.routing.router import Router

        return Router

    if name == "RouteResultTracker":
        from plume.routing.tracker import RouteResultTracker

        return RouteResultTracker

    if name in ("UrlHelper", "ServerUrlHelper"):
        from plume import helpers as _helpers

        return getattr(_helpers, name)

    if name == "TemplatePath":
        from plume.templating.paths import TemplatePath

        return TemplatePath

    if name in ("AggregateResolver", "NamespacedPathStackResolver", "TemplateMapResolver"):
        from plume.templating import resolvers as _resolvers

        return getattr(_resolvers, name)

    if name == "RendererConfig":
        from plume.config import RendererConfig

        return RendererConfig

    if name == "ViewRenderer":
        from plume.templating.renderer import ViewRenderer

        return ViewRenderer

    if name == "configure_renderer":
        from plume.factory import configure_renderer

        return configure_renderer

    if name in (
        "ConfigurationError",
        "PlumeError",
        "RenderingError",
        "RouterError",
        "TemplateNotFound",
    ):
        from plume import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
