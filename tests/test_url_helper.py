"""Tests for plume.helpers.url — route-aware URL generation."""

from collections.abc import Mapping
from typing import Any

import pytest

from plume.errors import RenderingError, RouterError
from plume.helpers.protocol import RouteResultObserver, UriGenerator
from plume.helpers.url import UrlHelper
from plume.routing.route import Route, RouteResult
from plume.routing.router import Router
from plume.routing.tracker import RouteResultTracker


class RecordingRouter:
    """Records generate_uri calls and returns a deterministic URI."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, Any]] = []

    def generate_uri(self, name: str, params: Mapping[str, Any] | None = None) -> str:
        self.calls.append((name, params))
        return f"/{name}"


@pytest.fixture
def router() -> RecordingRouter:
    return RecordingRouter()


@pytest.fixture
def helper(router: RecordingRouter) -> UrlHelper:
    return UrlHelper(router)


def _real_router() -> Router:
    r = Router()
    r.add(Route("/users/{id:int}", name="user"))
    r.add(Route("/users/{id:int}/posts/{page:int}", name="user-posts"))
    r.add(Route("/about", name="about"))
    r.compile()
    return r


class TestProtocols:
    def test_router_satisfies_uri_generator(self) -> None:
        assert isinstance(Router(), UriGenerator)

    def test_helper_is_route_result_observer(self, helper: UrlHelper) -> None:
        assert isinstance(helper, RouteResultObserver)


class TestWithoutRouteName:
    def test_no_result_raises(self, helper: UrlHelper, router: RecordingRouter) -> None:
        with pytest.raises(RenderingError, match="none was injected"):
            helper()
        assert router.calls == []

    def test_failure_result_raises(self, helper: UrlHelper) -> None:
        helper.update(RouteResult.from_failure())
        with pytest.raises(RenderingError, match="routing failed"):
            helper()

    def test_method_failure_raises(self, helper: UrlHelper) -> None:
        helper.update(RouteResult.from_failure(allowed_methods=frozenset({"GET"})))
        with pytest.raises(RenderingError):
            helper(None, {})

    def test_uses_matched_route_and_params(self, helper: UrlHelper, router: RecordingRouter) -> None:
        helper.update(RouteResult.from_route("user", {"id": "42"}))
        assert helper() == "/user"
        assert router.calls == [("user", {"id": "42"})]

    def test_caller_params_override(self, helper: UrlHelper, router: RecordingRouter) -> None:
        helper.update(RouteResult.from_route("posts", {"id": "42", "page": "1"}))
        helper(params={"page": "2", "sort": "new"})
        assert router.calls == [("posts", {"id": "42", "page": "2", "sort": "new"})]

    def test_none_params_means_empty(self, helper: UrlHelper, router: RecordingRouter) -> None:
        helper.update(RouteResult.from_route("user", {"id": "42"}))
        helper(None, None)
        assert router.calls == [("user", {"id": "42"})]

    def test_unnamed_matched_route_raises(self, helper: UrlHelper) -> None:
        helper.update(RouteResult.from_route(None, {"id": "42"}))
        with pytest.raises(RenderingError, match="unnamed route"):
            helper()


class TestWithRouteName:
    def test_no_result_passes_params_through(self, helper: UrlHelper, router: RecordingRouter) -> None:
        params = {"id": "7"}
        helper("user", params)
        assert router.calls == [("user", params)]

    def test_same_route_merges(self, helper: UrlHelper, router: RecordingRouter) -> None:
        helper.update(RouteResult.from_route("user", {"id": "42", "tab": "posts"}))
        helper("user", {"tab": "likes"})
        assert router.calls == [("user", {"id": "42", "tab": "likes"})]

    def test_other_route_passes_params_through(self, helper: UrlHelper, router: RecordingRouter) -> None:
        helper.update(RouteResult.from_route("user", {"id": "42"}))
        params = {"page": "3"}
        helper("archive", params)
        assert router.calls == [("archive", params)]
        assert router.calls[0][1] is params

    def test_failure_result_passes_params_through(self, helper: UrlHelper, router: RecordingRouter) -> None:
        helper.update(RouteResult.from_failure())
        params = {"page": "3"}
        helper("archive", params)
        assert router.calls[0][1] is params

    def test_non_mapping_params_pass_through(self, helper: UrlHelper, router: RecordingRouter) -> None:
        helper.update(RouteResult.from_route("user", {"id": "42"}))
        helper("user", ["positional"])
        assert router.calls == [("user", ["positional"])]

    def test_none_params_merge_on_same_route(self, helper: UrlHelper, router: RecordingRouter) -> None:
        helper.update(RouteResult.from_route("user", {"id": "42"}))
        helper("user")
        assert router.calls == [("user", {"id": "42"})]


class TestAgainstRealRouter:
    def test_current_url_equals_explicit_url(self) -> None:
        router = _real_router()
        helper = UrlHelper(router)
        result = RouteResult.from_route("user-posts", {"id": "42", "page": "3"})
        helper.update(result)

        assert helper(None, {}) == helper(result.matched_route_name, dict(result.matched_params))
        assert helper() == "/users/42/posts/3"

    def test_swap_one_param(self) -> None:
        router = _real_router()
        helper = UrlHelper(router)
        helper.update(RouteResult.from_route("user-posts", {"id": "42", "page": "3"}))
        assert helper(params={"page": 4}) == "/users/42/posts/4"
        assert helper("user-posts", {"page": 5}) == "/users/42/posts/5"

    def test_other_route_does_not_inherit(self) -> None:
        router = _real_router()
        helper = UrlHelper(router)
        helper.update(RouteResult.from_route("user-posts", {"id": "42", "page": "3"}))
        with pytest.raises(RouterError, match="missing parameter 'id'"):
            helper("user", {})

    def test_router_error_propagates(self) -> None:
        helper = UrlHelper(_real_router())
        with pytest.raises(RouterError, match="unknown route"):
            helper("nope")

    def test_url_from_failed_match_raises(self) -> None:
        router = _real_router()
        helper = UrlHelper(router)
        helper.update(RouteResult.from_failure())
        with pytest.raises(RenderingError):
            helper()
        assert helper("about") == "/about"


class TestSharedTracker:
    def test_host_publishes_through_tracker(self, router: RecordingRouter) -> None:
        tracker = RouteResultTracker()
        helper = UrlHelper(router, tracker)
        tracker.update(RouteResult.from_route("user", {"id": "1"}))
        helper()
        assert router.calls == [("user", {"id": "1"})]
        assert helper.tracker is tracker

    def test_request_scope_isolates_helper(self, router: RecordingRouter) -> None:
        helper = UrlHelper(router)
        with helper.tracker.request_scope():
            helper.set_route_result(RouteResult.from_route("user", {"id": "1"}))
            helper()
        with pytest.raises(RenderingError):
            helper()

    def test_generate_is_pure(self, helper: UrlHelper) -> None:
        result = RouteResult.from_route("user", {"id": "1"})
        helper.update(result)
        helper(params={"id": "2"})
        assert helper.tracker.result is result
        assert dict(result.matched_params) == {"id": "1"}
