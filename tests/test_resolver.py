from __future__ import annotations

import json
import logging

import pytest
from conftest import FakeTransport, json_response

from cachingfetch._transport import TransportResponse
from cachingfetch.codec import FALLBACK_TEXT, serialize
from cachingfetch.exceptions import FetchTransportError
from cachingfetch.models import FailureKind
from cachingfetch.resolver import preload_fetch, resolve_fetch
from cachingfetch.store import CacheStore


@pytest.mark.asyncio
async def test_success_is_stored_and_returned(transport: FakeTransport, store: CacheStore) -> None:
    entry = await resolve_fetch("/api/people", transport=transport, store=store)

    assert entry.ok
    assert entry.payload == [{"name": "Ada"}]
    assert store.get("/api/people") == entry
    assert transport.calls == ["/api/people"]


@pytest.mark.asyncio
async def test_non_success_status_becomes_http_failure(transport: FakeTransport, store: CacheStore) -> None:
    entry = await resolve_fetch("/api/missing", transport=transport, store=store)

    assert entry.payload is None
    assert entry.failure is not None
    assert entry.failure.kind is FailureKind.HTTP
    assert entry.failure.message == "HTTP error Status:404"
    assert entry.failure.status_code == 404
    assert store.get("/api/missing") == entry


@pytest.mark.asyncio
@pytest.mark.parametrize("status", [199, 300, 304, 500])
async def test_status_outside_2xx_is_failure(status: int, store: CacheStore) -> None:
    transport = FakeTransport(responses={"/x": json_response({"ok": True}, status=status)})

    entry = await resolve_fetch("/x", transport=transport, store=store)

    assert entry.failure is not None
    assert str(status) in entry.failure.message


@pytest.mark.asyncio
async def test_any_2xx_is_success(store: CacheStore) -> None:
    transport = FakeTransport(responses={"/x": json_response({"id": 1}, status=201)})

    entry = await resolve_fetch("/x", transport=transport, store=store)

    assert entry.ok
    assert entry.payload == {"id": 1}


@pytest.mark.asyncio
async def test_transport_error_is_caught(store: CacheStore) -> None:
    transport = FakeTransport(responses={"/x": FetchTransportError("Request to /x failed: refused", key="/x")})

    entry = await resolve_fetch("/x", transport=transport, store=store)

    assert entry.failure is not None
    assert entry.failure.kind is FailureKind.TRANSPORT
    assert "refused" in entry.failure.message


@pytest.mark.asyncio
async def test_unexpected_exception_gets_generic_message(store: CacheStore) -> None:
    transport = FakeTransport(responses={"/x": RuntimeError()})

    entry = await resolve_fetch("/x", transport=transport, store=store)

    assert entry.failure is not None
    assert entry.failure.kind is FailureKind.UNKNOWN
    assert entry.failure.message == "An error happened while fetching the data."


@pytest.mark.asyncio
async def test_unparseable_body_becomes_parse_failure(store: CacheStore) -> None:
    transport = FakeTransport(responses={"/x": TransportResponse(status=200, text="<html>oops</html>")})

    entry = await resolve_fetch("/x", transport=transport, store=store)

    assert entry.payload is None
    assert entry.failure is not None
    assert entry.failure.kind is FailureKind.PARSE


@pytest.mark.asyncio
async def test_failure_is_logged_as_warning(store: CacheStore, caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.WARNING, logger="cachingfetch.resolver")
    transport = FakeTransport()

    await resolve_fetch("/nowhere", transport=transport, store=store)

    assert "Fetch of /nowhere failed: HTTP error Status:404" in caplog.text


@pytest.mark.asyncio
async def test_second_resolution_overwrites(store: CacheStore) -> None:
    transport = FakeTransport(
        responses={"/x": [json_response({"v": 1}), TransportResponse(status=500, text="")]}
    )

    await resolve_fetch("/x", transport=transport, store=store)
    await resolve_fetch("/x", transport=transport, store=store)

    entry = store.get("/x")
    assert entry is not None
    assert entry.payload is None
    assert entry.failure is not None
    assert entry.failure.status_code == 500


@pytest.mark.asyncio
async def test_preload_waits_for_store_write(transport: FakeTransport, store: CacheStore) -> None:
    result = await preload_fetch("/api/people", transport=transport, store=store)

    assert result is None
    assert store.has("/api/people")


@pytest.mark.asyncio
@pytest.mark.parametrize("body", ["NaN", "Infinity", "-Infinity", '{"ratio": NaN}', '[1, Infinity]'])
async def test_non_json_constants_become_parse_failure(body: str, store: CacheStore) -> None:
    transport = FakeTransport(responses={"/api/stats": TransportResponse(status=200, text=body)})

    entry = await resolve_fetch("/api/stats", transport=transport, store=store)

    assert entry.payload is None
    assert entry.failure is not None
    assert entry.failure.kind is FailureKind.PARSE


@pytest.mark.asyncio
async def test_nan_body_does_not_poison_serialization(transport: FakeTransport, store: CacheStore) -> None:
    transport.responses["/api/stats"] = TransportResponse(status=200, text='{"ratio": NaN}')

    await preload_fetch("/api/people", transport=transport, store=store)
    await preload_fetch("/api/stats", transport=transport, store=store)

    text = serialize(store)
    assert text != FALLBACK_TEXT
    document = json.loads(text)
    assert document["/api/people"]["payload"] == [{"name": "Ada"}]
    assert document["/api/stats"]["failure"]["kind"] == "parse"
