"""Process-wide default client and the module-level surface.

These functions keep the familiar single-page shape
(``use_caching_fetch(url)``, ``serialize_cache()``, ...) on top of one
shared :class:`CachingFetchClient`.  Servers handling several users at
once should create a client per request instead.
"""

from __future__ import annotations

from cachingfetch.client import CachingFetchClient
from cachingfetch.config import CachingFetchConfig
from cachingfetch.hook import FetchHook

_default_client: CachingFetchClient | None = None


def get_default_client() -> CachingFetchClient:
    """Return the shared client, building it from the environment on first use."""
    global _default_client
    if _default_client is None:
        _default_client = CachingFetchClient(CachingFetchConfig.from_env())
    return _default_client


def set_default_client(client: CachingFetchClient | None) -> None:
    """Replace the shared client (``None`` rebuilds it lazily)."""
    global _default_client
    _default_client = client


def use_caching_fetch(url: str) -> FetchHook:
    return get_default_client().use(url)


async def preload_caching_fetch(url: str) -> None:
    await get_default_client().preload(url)


def serialize_cache() -> str:
    return get_default_client().serialize()


def initialize_cache(serialized_cache: str) -> None:
    get_default_client().initialize(serialized_cache)


def wipe_cache() -> None:
    get_default_client().wipe()


def is_cached(url: str) -> bool:
    return get_default_client().is_cached(url)
