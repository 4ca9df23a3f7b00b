"""Renderer assembly from a settings mapping.

``configure_renderer`` is the one place that turns configuration into
objects: template map, namespaced path stack, resolver chain, view
helpers, kida environment, and layout binding. Nothing below it looks
anything up at runtime; every collaborator is passed in explicitly.
"""

import logging
from collections.abc import Mapping, MutableMapping
from typing import Any

from plume.config import RendererConfig
from plume.helpers.protocol import UriGenerator
from plume.helpers.server_url import ServerUrlHelper
from plume.helpers.url import UrlHelper
from plume.routing.tracker import RouteResultTracker
from plume.templating.integration import create_environment
from plume.templating.renderer import Layout, ViewRenderer
from plume.templating.resolvers import (
    AggregateResolver,
    NamespacedPathStackResolver,
    TemplateMapResolver,
)

logger = logging.getLogger("plume.factory")


def build_resolver(config: RendererConfig) -> tuple[AggregateResolver, NamespacedPathStackResolver]:
    """Build the resolver chain: template map first, path stack second.

    Returns the chain and its path stack, which the renderer exposes
    through ``add_path()``/``get_paths()``.
    """
    template_map = TemplateMapResolver(dict(config.template_map))

    path_stack = NamespacedPathStackResolver(default_suffix=config.extension)
    for namespace, directory in config.paths:
        path_stack.add_path(directory, namespace)

    chain = AggregateResolver()
    chain.attach(template_map)
    chain.attach(path_stack)
    return chain, path_stack


def build_helpers(
    router: UriGenerator | None,
    *,
    tracker: RouteResultTracker | None = None,
    helpers: MutableMapping[str, Any] | None = None,
    server_url: ServerUrlHelper | None = None,
) -> MutableMapping[str, Any]:
    """Add the ``url`` and ``serverurl`` helpers to *helpers*.

    Entries already present are left alone, so applications can supply
    their own implementations. ``url`` needs a router and is skipped
    without one.
    """
    helpers = helpers if helpers is not None else {}

    if "url" not in helpers:
        if router is not None:
            helpers["url"] = UrlHelper(router, tracker)
        else:
            logger.debug("No router configured; 'url' helper not registered")

    if "serverurl" not in helpers:
        helpers["serverurl"] = server_url if server_url is not None else ServerUrlHelper()

    return helpers


def configure_renderer(
    settings: Mapping[str, Any] | RendererConfig | None = None,
    router: UriGenerator | None = None,
    *,
    tracker: RouteResultTracker | None = None,
    helpers: MutableMapping[str, Any] | None = None,
    server_url: ServerUrlHelper | None = None,
) -> ViewRenderer:
    """Build a ``ViewRenderer`` from settings.

    Args:
        settings: A settings mapping with a ``templates`` section (see
            ``RendererConfig.from_mapping``) or a ready ``RendererConfig``.
        router: Router used by the ``url`` helper.
        tracker: Route result tracker the host publishes into. When
            omitted, publish through ``renderer.helpers["url"].update()``.
        helpers: Existing helper mapping to extend; becomes the
            environment's globals.
        server_url: Preconfigured ``ServerUrlHelper``.
    """
    if isinstance(settings, RendererConfig):
        config = settings
    else:
        config = RendererConfig.from_mapping(settings)

    chain, path_stack = build_resolver(config)
    globals_ = build_helpers(router, tracker=tracker, helpers=helpers, server_url=server_url)
    environment = create_environment(config, chain, globals_=globals_)

    layout = Layout(config.layout) if config.layout else None

    logger.debug(
        "Configured renderer: %d paths, %d map entries, extension=%r, layout=%r",
        len(config.paths),
        len(config.template_map),
        config.extension,
        config.layout,
    )
    return ViewRenderer(environment, chain, path_stack, layout, helpers=globals_)
