"""Unit tests for fetch resolution at the async boundary."""

import logging
import threading

import pytest

from servicebus_tui.core.events import FetchFailed, FetchTarget, SubscriptionsLoaded
from servicebus_tui.core.fetch import FetchRequest, describe_error, resolve_fetch, resolve_fetch_sync
from servicebus_tui.errors import ProviderError


def subscriptions_request(call, description="list subscriptions for orders"):
    return FetchRequest(
        target=FetchTarget.SUBSCRIPTIONS,
        call=call,
        on_success=lambda names: SubscriptionsLoaded("topic-orders", tuple(names)),
        key="topic-orders",
        description=description,
    )


class TestResolveFetch:

    async def test_success_maps_result(self):
        event = await resolve_fetch(subscriptions_request(lambda: ["billing", "audit"]))
        assert event == SubscriptionsLoaded("topic-orders", ("billing", "audit"))

    async def test_runs_off_the_calling_thread(self):
        caller = threading.get_ident()
        seen = []

        def call():
            seen.append(threading.get_ident())
            return []

        await resolve_fetch(subscriptions_request(call))
        assert seen and seen[0] != caller

    async def test_provider_error_becomes_fetch_failed(self):
        def call():
            raise ProviderError("list subscriptions for orders", "unauthorized")

        event = await resolve_fetch(subscriptions_request(call))
        assert event == FetchFailed(
            target=FetchTarget.SUBSCRIPTIONS,
            error="failed to list subscriptions for orders: unauthorized",
            key="topic-orders",
        )

    async def test_unexpected_error_is_contained(self):
        def call():
            raise RuntimeError("socket closed")

        event = await resolve_fetch(subscriptions_request(call))
        assert isinstance(event, FetchFailed)
        assert event.error == "socket closed"

    async def test_timeout(self):
        release = threading.Event()
        try:
            event = await resolve_fetch(
                subscriptions_request(lambda: release.wait(5)),
                timeout=0.05,
            )
        finally:
            release.set()

        assert isinstance(event, FetchFailed)
        assert event.error == "list subscriptions for orders: timed out after 0.05s"
        assert event.key == "topic-orders"

    async def test_timeout_label_falls_back_to_target(self):
        release = threading.Event()
        try:
            event = await resolve_fetch(
                subscriptions_request(lambda: release.wait(5), description=""),
                timeout=0.05,
            )
        finally:
            release.set()
        assert event.error == "subscriptions: timed out after 0.05s"


class TestFailureLogging:

    async def test_provider_error_logged_once(self, caplog):
        def call():
            raise ProviderError("list subscriptions for orders", "unauthorized")

        with caplog.at_level(logging.ERROR, logger="servicebus_tui.core.fetch"):
            await resolve_fetch(subscriptions_request(call))

        assert caplog.messages == ["Fetch failed: failed to list subscriptions for orders: unauthorized"]

    def test_unexpected_error_keeps_label(self, caplog):
        def call():
            raise RuntimeError("socket closed")

        with caplog.at_level(logging.ERROR, logger="servicebus_tui.core.fetch"):
            resolve_fetch_sync(subscriptions_request(call))

        assert caplog.messages == ["Fetch failed: list subscriptions for orders: socket closed"]


class TestResolveFetchSync:

    def test_success(self):
        event = resolve_fetch_sync(subscriptions_request(lambda: ["billing"]))
        assert event.subscriptions == ("billing",)

    def test_failure(self):
        def call():
            raise ProviderError("list subscriptions for orders", "not found")

        event = resolve_fetch_sync(subscriptions_request(call))
        assert event.error == "failed to list subscriptions for orders: not found"


class TestDescribeError:

    @pytest.mark.parametrize("exc,expected", [
        (ProviderError("peek messages", "boom"), "failed to peek messages: boom"),
        (ValueError("bad value"), "bad value"),
        (TimeoutError(), "TimeoutError"),
    ])
    def test_describe(self, exc, expected):
        assert describe_error(exc) == expected
