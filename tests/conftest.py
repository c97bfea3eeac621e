from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

import pytest

from cachingfetch import api
from cachingfetch._transport import TransportResponse
from cachingfetch.hook import AsyncioTaskRunner
from cachingfetch.store import CacheStore


def json_response(body: Any, status: int = 200) -> TransportResponse:
    return TransportResponse(status=status, text=json.dumps(body))


@dataclass
class FakeTransport:
    """Scripted transport: key -> response, exception, or list of either (consumed in order)."""

    responses: dict[str, Any] = field(default_factory=dict)
    calls: list[str] = field(default_factory=list)

    async def fetch(self, key: str) -> TransportResponse:
        self.calls.append(key)
        outcome = self.responses.get(key, TransportResponse(status=404, text="Not Found"))
        if isinstance(outcome, list):
            outcome = outcome.pop(0)
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome


class ExplodingTransport:
    """Fails the test if any fetch happens."""

    async def fetch(self, key: str) -> TransportResponse:
        raise AssertionError(f"Unexpected network call for {key}")


@pytest.fixture
def store() -> CacheStore:
    return CacheStore()


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport(
        responses={
            "/api/people": json_response([{"name": "Ada"}]),
            "/api/missing": TransportResponse(status=404, text="Not Found"),
        }
    )


@pytest.fixture
def runner() -> AsyncioTaskRunner:
    return AsyncioTaskRunner()


@pytest.fixture(autouse=True)
def _reset_default_client() -> Any:
    yield
    api.set_default_client(None)
