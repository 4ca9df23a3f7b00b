"""TemplatePath value type."""

import os
from dataclasses import dataclass

from plume.errors import ConfigurationError


@dataclass(frozen=True, slots=True)
class TemplatePath:
    """One template directory, optionally under a namespace.

    *path* is normalized to end with exactly one separator; ``None``
    *namespace* is the default namespace::

        TemplatePath("/srv/app/templates")          # default namespace
        TemplatePath("/srv/blog/templates/", "blog")
    """

    path: str
    namespace: str | None = None

    def __init__(self, path: str | os.PathLike[str], namespace: str | None = None) -> None:
        object.__setattr__(self, "path", normalize_path(path))
        object.__setattr__(self, "namespace", namespace)

    def __str__(self) -> str:
        return self.path


def normalize_path(path: str | os.PathLike[str]) -> str:
    """Return *path* with exactly one trailing separator.

    Raises ``ConfigurationError`` for an empty path.
    """
    raw = os.fspath(path)
    if not raw:
        msg = "Template path must not be empty"
        raise ConfigurationError(msg)

    stripped = raw.rstrip("/" + os.sep)
    if not stripped:
        # Filesystem root
        return raw[0]
    return stripped + os.sep
