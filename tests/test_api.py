from __future__ import annotations

import pytest
from conftest import ExplodingTransport, FakeTransport

from cachingfetch import api
from cachingfetch.client import CachingFetchClient
from cachingfetch.models import FetchState


@pytest.mark.asyncio
async def test_module_surface_round_trip(transport: FakeTransport) -> None:
    api.set_default_client(CachingFetchClient(transport=transport))

    await api.preload_caching_fetch("/api/people")
    serialized = api.serialize_cache()
    assert api.is_cached("/api/people")

    api.set_default_client(CachingFetchClient(transport=ExplodingTransport()))
    assert not api.is_cached("/api/people")
    api.initialize_cache(serialized)

    hook = api.use_caching_fetch("/api/people")
    assert hook.state == FetchState(is_loading=False, data=[{"name": "Ada"}], error=None)

    api.wipe_cache()
    assert not api.is_cached("/api/people")


def test_default_client_is_built_lazily_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CACHINGFETCH_BASE_URL", "http://ssr.local")
    api.set_default_client(None)

    client = api.get_default_client()

    assert client.config.base_url == "http://ssr.local"
    assert api.get_default_client() is client


def test_wipe_keeps_the_same_store_instance(transport: FakeTransport) -> None:
    client = CachingFetchClient(transport=transport)
    api.set_default_client(client)
    held = client.store

    api.wipe_cache()
    api.wipe_cache()

    assert api.get_default_client().store is held
    assert len(held) == 0
