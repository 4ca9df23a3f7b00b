"""Tests for plume.routing.tracker — request-scoped route result cell."""

import asyncio
import threading

from plume.routing.route import RouteResult
from plume.routing.tracker import RouteResultTracker


class TestRouteResultTracker:
    def test_empty_before_first_update(self) -> None:
        assert RouteResultTracker().result is None

    def test_update_sets_result(self) -> None:
        tracker = RouteResultTracker()
        result = RouteResult.from_route("home")
        tracker.update(result)
        assert tracker.result is result

    def test_update_replaces_not_merges(self) -> None:
        tracker = RouteResultTracker()
        tracker.update(RouteResult.from_route("user", {"id": "1", "tab": "posts"}))
        second = RouteResult.from_route("user", {"id": "2"})
        tracker.update(second)
        assert tracker.result is second
        assert dict(tracker.result.matched_params) == {"id": "2"}

    def test_set_route_result_alias(self) -> None:
        tracker = RouteResultTracker()
        result = RouteResult.from_failure()
        tracker.set_route_result(result)
        assert tracker.result is result

    def test_trackers_are_independent(self) -> None:
        a = RouteResultTracker()
        b = RouteResultTracker()
        a.update(RouteResult.from_route("home"))
        assert b.result is None


class TestRequestScope:
    def test_scope_starts_empty_and_restores(self) -> None:
        tracker = RouteResultTracker()
        outer = RouteResult.from_route("outer")
        tracker.update(outer)

        with tracker.request_scope():
            assert tracker.result is None
            tracker.update(RouteResult.from_route("inner"))
            assert tracker.result.matched_route_name == "inner"

        assert tracker.result is outer

    def test_scope_restores_after_error(self) -> None:
        tracker = RouteResultTracker()
        try:
            with tracker.request_scope():
                tracker.update(RouteResult.from_route("inner"))
                raise ValueError("handler failed")
        except ValueError:
            pass
        assert tracker.result is None


class TestConcurrentRequests:
    def test_threads_do_not_share_results(self) -> None:
        tracker = RouteResultTracker()
        barrier = threading.Barrier(2)
        seen: dict[str, str | None] = {}

        def handle(name: str) -> None:
            with tracker.request_scope():
                tracker.update(RouteResult.from_route(name))
                barrier.wait()
                seen[name] = tracker.result.matched_route_name

        threads = [threading.Thread(target=handle, args=(n,)) for n in ("a", "b")]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert seen == {"a": "a", "b": "b"}

    def test_tasks_do_not_share_results(self) -> None:
        tracker = RouteResultTracker()

        async def handle(name: str) -> str | None:
            tracker.update(RouteResult.from_route(name))
            await asyncio.sleep(0)
            return tracker.result.matched_route_name

        async def main() -> list[str | None]:
            return list(await asyncio.gather(handle("a"), handle("b")))

        assert asyncio.run(main()) == ["a", "b"]
