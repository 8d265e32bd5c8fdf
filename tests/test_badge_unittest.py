from __future__ import annotations

import sys
import unittest
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from robyn_nav.core import (  # noqa: E402
    Badge,
    BadgeEvaluationError,
    BadgeType,
    ConfigurationError,
    InMemoryCacheStore,
    MenuItem,
)
from tests.fakes import Counter, Exploding, FakeClock, admin_request, staff_request  # noqa: E402


class BadgeTestCase(unittest.TestCase):
    def test_static_value_is_returned_as_is(self):
        badge = Badge.make("New", BadgeType.SUCCESS)
        self.assertEqual(badge.resolve(), "New")
        self.assertEqual(badge.resolve_type(), "success")
        self.assertFalse(badge.is_dynamic)

    def test_callback_receives_request_or_none(self):
        seen = []
        badge = Badge.make(lambda request: seen.append(request) or 7)
        request = admin_request()
        self.assertEqual(badge.resolve(request), 7)
        self.assertEqual(badge.resolve(), 7)
        self.assertEqual(seen, [request, None])

    def test_callback_without_arguments(self):
        self.assertEqual(Badge.make(lambda: 3).resolve(admin_request()), 3)

    def test_invalid_type_is_rejected(self):
        with self.assertRaises(ConfigurationError):
            Badge.make(1, "purple")

    def test_callable_type(self):
        badge = Badge.make(12, lambda request: "danger" if request else "info")
        self.assertEqual(badge.resolve_type(admin_request()), "danger")
        self.assertEqual(badge.resolve_type(None), "info")

    def test_guard_false_yields_none(self):
        badge = Badge.make(5).when(lambda request: request is not None)
        self.assertIsNone(badge.resolve(None))
        self.assertEqual(badge.resolve(admin_request()), 5)

    def test_callback_error_is_wrapped(self):
        badge = Badge.make(Exploding())
        with self.assertRaises(BadgeEvaluationError) as ctx:
            badge.resolve()
        self.assertIsInstance(ctx.exception.__cause__, RuntimeError)

    def test_builders_return_new_badges(self):
        badge = Badge.make(1)
        cached = badge.cache(60)
        self.assertIsNone(badge.cache_ttl)
        self.assertEqual(cached.cache_ttl, 60)


class NodeBadgeCacheTestCase(unittest.TestCase):
    def setUp(self):
        self.clock = FakeClock()
        self.cache = InMemoryCacheStore(clock=self.clock)

    def test_cached_badge_is_evaluated_once_within_ttl(self):
        counter = Counter(result=lambda request: 42)
        item = MenuItem.make("Orders", "/orders").with_badge(Badge.make(counter, "info").cache(60))
        request = admin_request()

        self.assertEqual(item.resolve_badge(request, self.cache), 42)
        self.assertEqual(item.resolve_badge(request, self.cache), 42)
        self.assertEqual(counter.calls, 1)

        item.clear_badge_cache(self.cache, request)
        item.resolve_badge(request, self.cache)
        self.assertEqual(counter.calls, 2)

    def test_cached_badge_expires_after_ttl(self):
        counter = Counter(result=lambda request: 1)
        item = MenuItem.make("Orders", "/orders").with_badge(counter).cache_badge(30)

        item.resolve_badge(None, self.cache)
        self.clock.advance(29)
        item.resolve_badge(None, self.cache)
        self.assertEqual(counter.calls, 1)

        self.clock.advance(2)
        item.resolve_badge(None, self.cache)
        self.assertEqual(counter.calls, 2)

    def test_cache_is_scoped_per_actor(self):
        counter = Counter(result=lambda request: request.user.id)
        item = MenuItem.make("Inbox", "/inbox").with_badge(counter).cache_badge(60)

        self.assertEqual(item.resolve_badge(admin_request(), self.cache), 1)
        self.assertEqual(item.resolve_badge(staff_request(), self.cache), 2)
        self.assertEqual(counter.calls, 2)

    def test_cached_false_guard_result_is_not_reevaluated(self):
        guard = Counter(result=False)
        item = MenuItem.make("Tasks", "/tasks").with_badge_if(3, "warning", guard).cache_badge(60)

        self.assertIsNone(item.resolve_badge(None, self.cache))
        self.assertIsNone(item.resolve_badge(None, self.cache))
        self.assertEqual(guard.calls, 1)

    def test_uncached_guard_runs_every_time(self):
        guard = Counter(result=True)
        item = MenuItem.make("Tasks", "/tasks").with_badge_if(3, "warning", guard)

        item.resolve_badge(None, self.cache)
        item.resolve_badge(None, self.cache)
        self.assertEqual(guard.calls, 2)


if __name__ == "__main__":
    unittest.main()
