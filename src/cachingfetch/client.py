"""High-level async facade tying one store, transport and task runner together."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import aiohttp

from cachingfetch import codec as _codec
from cachingfetch._transport import HttpTransport, Transport
from cachingfetch.config import CachingFetchConfig
from cachingfetch.hook import AsyncioTaskRunner, FetchHook, TaskRunner
from cachingfetch.models.codec import DecodeResult, EncodeResult
from cachingfetch.resolver import preload_fetch
from cachingfetch.store import CacheStore


class CachingFetchClient:
    """Response cache for one page lifecycle (or one server request).

    Every collaborator is injectable.  Two clients created without an
    explicit ``store`` never share cached entries, which is what keeps
    concurrent server requests for different users apart.

    Usage::

        async with CachingFetchClient(config) as client:
            await client.preload("/api/people")
            html_state = client.serialize()

        # later, in another context
        client = CachingFetchClient(config)
        client.initialize(html_state)
        hook = client.use("/api/people")  # served from cache, no fetch
    """

    def __init__(
        self,
        config: CachingFetchConfig | None = None,
        *,
        store: CacheStore | None = None,
        transport: Transport | None = None,
        runner: TaskRunner | None = None,
        session: aiohttp.ClientSession | None = None,
        on_restore_error: Callable[[str], None] | None = None,
    ) -> None:
        self._config = config or CachingFetchConfig()
        self._store = store if store is not None else CacheStore(
            log_payloads=self._config.log_payloads,
            log_max_string=self._config.log_max_string,
        )
        self._external_session = session is not None
        self._http_session = session
        self._explicit_transport = transport is not None
        self._transport: Transport = transport or HttpTransport(self._config, session)
        self._runner: TaskRunner = runner or AsyncioTaskRunner()
        self._on_restore_error = on_restore_error

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> CachingFetchClient:
        if not self._explicit_transport and self._http_session is None:
            self._http_session = aiohttp.ClientSession()
            self._transport = HttpTransport(self._config, self._http_session)
        return self

    async def __aexit__(self, *exc: Any) -> None:
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
            if not self._explicit_transport:
                self._transport = HttpTransport(self._config)

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def config(self) -> CachingFetchConfig:
        return self._config

    @property
    def store(self) -> CacheStore:
        return self._store

    @property
    def transport(self) -> Transport:
        return self._transport

    @property
    def runner(self) -> TaskRunner:
        return self._runner

    # ------------------------------------------------------------------
    # Surface
    # ------------------------------------------------------------------

    def use(self, key: str) -> FetchHook:
        """Create and activate a reactive fetch hook for *key*.

        Must be called with a running event loop when the default task
        runner is used and *key* is not cached; otherwise
        :class:`CachingFetchError` is raised.
        """
        hook = FetchHook(key, store=self._store, transport=self._transport, runner=self._runner)
        hook.activate()
        return hook

    async def preload(self, key: str) -> None:
        """Fetch *key* into the store and wait for the write to land."""
        await preload_fetch(key, transport=self._transport, store=self._store)

    def is_cached(self, key: str) -> bool:
        return self._store.has(key)

    def serialize(self) -> str:
        return _codec.serialize(self._store)

    def encode(self) -> EncodeResult:
        return _codec.encode_cache(self._store)

    def initialize(self, serialized: str) -> None:
        _codec.restore(self._store, serialized, on_error=self._on_restore_error)

    def decode(self, serialized: str) -> DecodeResult:
        """Decode without touching the store (inspect before merging)."""
        return _codec.decode_cache(serialized)

    def wipe(self) -> None:
        self._store.wipe()
