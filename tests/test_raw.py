from __future__ import annotations

import asyncio

import httpx
import pytest

from momo_sdk import MomoClient, RequestAborted, RequestOptions
from momo_sdk.instrumentation import request_stats
from momo_sdk.raw import expand_path, serialize_query


def test_expand_path_quotes_values():
    assert expand_path("/api/v1/documents/{documentId}", {"documentId": "a b"}) == "/api/v1/documents/a%20b"


def test_expand_path_missing_param():
    with pytest.raises(ValueError):
        expand_path("/api/v1/memories/{memoryId}", {})


def test_expand_path_without_placeholders():
    assert expand_path("/api/v1/documents:batch") == "/api/v1/documents:batch"


def test_serialize_query_skips_none_and_repeats_lists():
    pairs = serialize_query({"tags": ["x", "y"], "limit": 3, "cursor": None, "rerank": True})
    assert pairs == [("tags[]", "x"), ("tags[]", "y"), ("limit", "3"), ("rerank", "true")]


def test_serialize_query_empty():
    assert serialize_query(None) == []


def test_request_options_rejects_negative_timeout():
    with pytest.raises(ValueError):
        RequestOptions(timeout_ms=-1)


def slow_client(delay: float) -> tuple[MomoClient, list[httpx.Request]]:
    seen: list[httpx.Request] = []

    async def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        await asyncio.sleep(delay)
        return httpx.Response(200, json={"data": {"status": "ok"}})

    client = MomoClient(base_url="http://localhost:3000", transport=httpx.MockTransport(handler))
    return client, seen


@pytest.mark.asyncio
async def test_fast_response_within_timeout():
    client, _ = slow_client(0)
    async with client:
        result = await client.health.check(options=RequestOptions(timeout_ms=2000))
    assert result == {"status": "ok"}


@pytest.mark.asyncio
async def test_timeout_aborts_request():
    client, seen = slow_client(5)
    async with client:
        with pytest.raises(httpx.TimeoutException):
            await client.health.check(options=RequestOptions(timeout_ms=20))
    assert len(seen) == 1


@pytest.mark.asyncio
async def test_presignalled_request_is_never_sent():
    client, seen = slow_client(0)
    signal = asyncio.Event()
    signal.set()
    async with client:
        with pytest.raises(RequestAborted):
            await client.health.check(options=RequestOptions(signal=signal))
    assert seen == []


@pytest.mark.asyncio
async def test_signal_fires_before_timeout():
    client, _ = slow_client(5)
    signal = asyncio.Event()
    asyncio.get_running_loop().call_later(0.02, signal.set)
    async with client:
        with pytest.raises(RequestAborted):
            await client.health.check(options=RequestOptions(signal=signal, timeout_ms=5000))


@pytest.mark.asyncio
async def test_timeout_fires_before_signal():
    client, _ = slow_client(5)
    signal = asyncio.Event()
    async with client:
        with pytest.raises(httpx.TimeoutException):
            await client.health.check(options=RequestOptions(signal=signal, timeout_ms=20))
    assert not signal.is_set()


@pytest.mark.asyncio
async def test_requests_are_recorded_per_endpoint():
    client, _ = slow_client(0)
    async with client:
        await client.health.check()
        await client.health.check()
    stats = request_stats.snapshot()["GET /api/v1/health"]
    assert stats.count == 2
    assert stats.errors == {}


@pytest.mark.asyncio
async def test_timeouts_are_counted_by_exception_class():
    client, _ = slow_client(5)
    async with client:
        with pytest.raises(httpx.TimeoutException):
            await client.health.check(options=RequestOptions(timeout_ms=20))
    assert request_stats.snapshot()["GET /api/v1/health"].errors == {"TimeoutException": 1}
