"""View helpers exposed to templates as globals (``url``, ``serverurl``)."""

from plume.helpers.server_url import ServerUrlHelper
from plume.helpers.url import UrlHelper

__all__ = ["ServerUrlHelper", "UrlHelper"]
