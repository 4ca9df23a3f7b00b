"""Route, PathSegment, and RouteResult frozen dataclasses."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType


@dataclass(frozen=True, slots=True)
class PathSegment:
    """A parsed segment of a route path.

    Static:  ``/users``  (is_param=False)
    Param:   ``/{id}``   (is_param=True, param_name="id")
    Typed:   ``/{id:int}`` (is_param=True, param_name="id", param_type="int")
    """

    value: str
    is_param: bool = False
    param_name: str | None = None
    param_type: str = "str"


@dataclass(frozen=True, slots=True)
class Route:
    """A frozen route definition.

    Registered with the router during setup. *name* is what URL helpers
    and ``RouteResult.matched_route_name`` refer to.
    """

    path: str
    name: str


@dataclass(frozen=True, slots=True)
class RouteResult:
    """Outcome of the host matching one request to a route.

    Build with :meth:`from_route` or :meth:`from_failure`; never mutated
    after creation. ``matched_params`` is a read-only view.
    """

    is_failure: bool
    matched_route_name: str | None = None
    matched_params: Mapping[str, str] = field(default_factory=dict)
    allowed_methods: frozenset[str] | None = None

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "matched_params", MappingProxyType(dict(self.matched_params))
        )

    @classmethod
    def from_route(cls, name: str | None, params: Mapping[str, str] | None = None) -> "RouteResult":
        """Successful match of the route called *name*."""
        return cls(is_failure=False, matched_route_name=name, matched_params=params or {})

    @classmethod
    def from_failure(cls, allowed_methods: frozenset[str] | None = None) -> "RouteResult":
        """Failed match. Pass *allowed_methods* when only the method was wrong."""
        return cls(is_failure=True, allowed_methods=allowed_methods)

    @property
    def is_success(self) -> bool:
        return not self.is_failure

    @property
    def is_method_failure(self) -> bool:
        return self.is_failure and self.allowed_methods is not None
