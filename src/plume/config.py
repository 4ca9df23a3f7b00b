"""Renderer configuration.

RendererConfig is a frozen dataclass — immutable after creation,
IDE-autocompletable. ``from_mapping()`` translates the nested settings
structure most applications load from files::

    settings = {
        "templates": {
            "extension": "html",
            "layout": "layout::default",
            "map": {"error": "/srv/app/error.html"},
            "paths": {
                "layout": "/srv/app/layouts",
                "blog": ["/srv/blog/templates", "/srv/blog/overrides"],
                0: "/srv/app/templates",
            },
        },
    }
    config = RendererConfig.from_mapping(settings)
"""

import logging
import os
import warnings
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from plume.errors import ConfigurationError
from plume.templating.resolvers import DEFAULT_SUFFIX

logger = logging.getLogger("plume.config")


@dataclass(frozen=True, slots=True)
class RendererConfig:
    """Template renderer configuration. Immutable after creation.

    *paths* is a tuple of ``(namespace, directory)`` pairs in
    registration order; ``None`` is the default namespace.
    """

    paths: tuple[tuple[str | None, str], ...] = ()
    template_map: tuple[tuple[str, str], ...] = ()
    extension: str = DEFAULT_SUFFIX
    layout: str | None = None

    # kida environment options
    autoescape: bool = True
    trim_blocks: bool = True
    lstrip_blocks: bool = True
    auto_reload: bool = False

    @classmethod
    def from_mapping(cls, settings: Mapping[str, Any] | None) -> "RendererConfig":
        """Build a config from ``settings["templates"]``.

        Recognized keys: ``paths``, ``map``, ``extension``,
        ``default_suffix`` (deprecated alias of ``extension``; when both
        are present ``extension`` wins), ``layout``, ``autoescape``,
        ``trim_blocks``, ``lstrip_blocks``, ``auto_reload``.

        Raises ``ConfigurationError`` when a value has the wrong shape.
        """
        templates = (settings or {}).get("templates") or {}
        if not isinstance(templates, Mapping):
            msg = f"'templates' settings must be a mapping, got {type(templates).__name__}"
            raise ConfigurationError(msg)

        extension = _read_extension(templates)

        layout = templates.get("layout")
        if layout is not None and not isinstance(layout, str):
            msg = f"'templates.layout' must be a template name, got {layout!r}"
            raise ConfigurationError(msg)

        options = {
            key: bool(templates[key])
            for key in ("autoescape", "trim_blocks", "lstrip_blocks", "auto_reload")
            if key in templates
        }

        return cls(
            paths=_read_paths(templates.get("paths") or {}),
            template_map=_read_map(templates.get("map") or {}),
            extension=extension,
            layout=layout or None,
            **options,
        )


def _read_extension(templates: Mapping[str, Any]) -> str:
    if "default_suffix" in templates:
        warnings.warn(
            "'templates.default_suffix' is deprecated; use 'templates.extension'",
            DeprecationWarning,
            stacklevel=3,
        )

    suffix = templates.get("extension")
    if suffix is None:
        suffix = templates.get("default_suffix")
    elif "default_suffix" in templates and templates["default_suffix"] != suffix:
        logger.info(
            "Both 'extension' (%r) and 'default_suffix' (%r) set; using 'extension'",
            suffix,
            templates["default_suffix"],
        )

    if suffix is None:
        return DEFAULT_SUFFIX
    if not isinstance(suffix, str):
        msg = f"Template extension must be a string, got {suffix!r}"
        raise ConfigurationError(msg)
    return suffix.lstrip(".")


def _read_paths(paths: Any) -> tuple[tuple[str | None, str], ...]:
    """Flatten ``{namespace: path | [paths]}`` into ordered pairs.

    Integer (and ``None``) keys register into the default namespace,
    so a plain list of directories works as well as a mapping.
    """
    if isinstance(paths, (str, os.PathLike)):
        paths = [paths]
    if isinstance(paths, Sequence):
        paths = dict(enumerate(paths))
    if not isinstance(paths, Mapping):
        msg = f"'templates.paths' must be a mapping or a list, got {type(paths).__name__}"
        raise ConfigurationError(msg)

    result: list[tuple[str | None, str]] = []
    for key, value in paths.items():
        namespace = _namespace_for(key)
        for directory in _as_path_list(key, value):
            result.append((namespace, directory))
    return tuple(result)


def _namespace_for(key: Any) -> str | None:
    if key is None or (isinstance(key, int) and not isinstance(key, bool)):
        return None
    if isinstance(key, str) and key:
        return key
    msg = f"Invalid template namespace {key!r}; use a non-empty string or an integer index"
    raise ConfigurationError(msg)


def _as_path_list(key: Any, value: Any) -> list[str]:
    if isinstance(value, (str, os.PathLike)):
        return [os.fspath(value)]
    if isinstance(value, Sequence):
        directories: list[str] = []
        for item in value:
            if not isinstance(item, (str, os.PathLike)):
                msg = f"Template path under {key!r} must be a string, got {item!r}"
                raise ConfigurationError(msg)
            directories.append(os.fspath(item))
        return directories
    msg = f"Template paths under {key!r} must be a path or a list of paths, got {value!r}"
    raise ConfigurationError(msg)


def _read_map(entries: Any) -> tuple[tuple[str, str], ...]:
    if not isinstance(entries, Mapping):
        msg = f"'templates.map' must be a mapping, got {type(entries).__name__}"
        raise ConfigurationError(msg)
    result: dict[str, str] = {}
    for name, path in entries.items():
        if not isinstance(path, (str, os.PathLike)):
            msg = f"Template map entry {name!r} must be a path, got {path!r}"
            raise ConfigurationError(msg)
        result[str(name)] = os.fspath(path)
    return tuple(result.items())
