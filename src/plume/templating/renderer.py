"""View renderer facade.

Ties the kida environment, the resolver chain, default parameters, and
the layout binding together behind ``render(name, params)``::

    html = renderer.render("blog::post", {"post": post})

When a layout is configured the rendered template is passed to the
layout template as ``content``. A ``layout`` parameter overrides that
per call: ``False`` renders without a layout, a string picks another
layout template.
"""

import os
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from kida import Environment
from kida.template import Markup

from plume.templating.paths import TemplatePath
from plume.templating.resolvers import AggregateResolver, NamespacedPathStackResolver

ALL_TEMPLATES = "*"


@dataclass(frozen=True, slots=True)
class Layout:
    """The layout template a rendered page is wrapped in.

    *variable* is the name the page's HTML is exposed under.
    """

    template: str
    variable: str = "content"


class ViewRenderer:
    """Render templates found through the resolver chain.

    Built by ``plume.factory.configure_renderer``; the path stack is
    the same object the chain searches, so ``add_path()`` is visible to
    later renders.
    """

    __slots__ = ("_defaults", "_environment", "_helpers", "_layout", "_path_stack", "_resolver")

    def __init__(
        self,
        environment: Environment,
        resolver: AggregateResolver,
        path_stack: NamespacedPathStackResolver,
        layout: Layout | None = None,
        helpers: Mapping[str, Any] | None = None,
    ) -> None:
        self._environment = environment
        self._resolver = resolver
        self._path_stack = path_stack
        self._layout = layout
        self._helpers: Mapping[str, Any] = helpers if helpers is not None else {}
        self._defaults: dict[str, dict[str, Any]] = {}

    @property
    def environment(self) -> Environment:
        return self._environment

    @property
    def resolver(self) -> AggregateResolver:
        return self._resolver

    @property
    def layout(self) -> Layout | None:
        return self._layout

    @property
    def helpers(self) -> Mapping[str, Any]:
        """View helpers registered as template globals, by name."""
        return self._helpers

    # -- Paths --

    def add_path(self, path: str | os.PathLike[str], namespace: str | None = None) -> None:
        self._path_stack.add_path(path, namespace)

    def get_paths(self) -> list[TemplatePath]:
        return list(self._path_stack.paths)

    # -- Default parameters --

    def add_default_param(self, template_name: str, param: str, value: Any) -> None:
        """Make *param* available to *template_name* unless a call overrides it.

        Use ``"*"`` as *template_name* for every template.
        """
        self._defaults.setdefault(template_name, {})[param] = value

    def _params_for(self, name: str, params: Mapping[str, Any]) -> dict[str, Any]:
        return {
            **self._defaults.get(ALL_TEMPLATES, {}),
            **self._defaults.get(name, {}),
            **params,
        }

    # -- Rendering --

    def render(self, name: str, params: Mapping[str, Any] | None = None) -> str:
        """Render *name*, wrapped in the layout when one applies.

        Template lookup failures surface as kida's
        ``TemplateNotFoundError``.
        """
        context = self._params_for(name, params or {})
        layout = self._select_layout(context.pop("layout", None))

        content = self._environment.get_template(name).render(context)
        if layout is None:
            return content

        layout_context = self._params_for(layout.template, params or {})
        layout_context.pop("layout", None)
        layout_context[layout.variable] = Markup(content)
        return self._environment.get_template(layout.template).render(layout_context)

    def _select_layout(self, override: Any) -> Layout | None:
        if override is False:
            return None
        if isinstance(override, str) and override:
            variable = self._layout.variable if self._layout else "content"
            return Layout(override, variable)
        if isinstance(override, Layout):
            return override
        return self._layout

    def __repr__(self) -> str:
        return f"<ViewRenderer paths={len(self._path_stack.paths)} layout={self._layout!r}>"
