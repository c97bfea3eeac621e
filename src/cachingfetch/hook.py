"""Reactive fetch hook.

A :class:`FetchHook` is one activation of ``use_caching_fetch(key)``: it
seeds local state from the shared store, fetches on a miss, and publishes
each state change to its subscribers.  Transitions::

    IDLE --activate(hit)--> RESOLVED
    IDLE --activate(miss)--> FETCHING --resolution--> RESOLVED

The asynchronous part runs through an injected :class:`TaskRunner`, so the
state machine can be driven without any rendering framework.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Coroutine
from typing import Any, Protocol, TypeVar

from cachingfetch._transport import Transport
from cachingfetch.exceptions import CachingFetchError
from cachingfetch.models.entry import CacheEntry, FetchFailure
from cachingfetch.models.state import FetchState, HookPhase
from cachingfetch.resolver import resolve_fetch
from cachingfetch.store import CacheStore

_logger = logging.getLogger(__name__)

T = TypeVar("T")

Listener = Callable[[FetchState], None]


class TaskRunner(Protocol):
    """Schedules a coroutine and returns a future for its result."""

    def spawn(self, coro: Coroutine[Any, Any, T]) -> asyncio.Future[T]:
        ...


class AsyncioTaskRunner:
    """Run coroutines as tasks on the running (or given) event loop.

    Strong references are held until each task finishes so that a fetch
    whose hook was dropped still runs to completion.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop
        self._tasks: set[asyncio.Task[Any]] = set()

    def spawn(self, coro: Coroutine[Any, Any, T]) -> asyncio.Future[T]:
        loop = self._loop
        if loop is None:
            try:
                loop = asyncio.get_running_loop()
            except RuntimeError:
                coro.close()
                raise CachingFetchError(
                    "Fetching an uncached key needs a running event loop (or a runner bound to one)"
                ) from None
        task = loop.create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    @property
    def pending(self) -> int:
        return len(self._tasks)

    async def drain(self) -> None:
        """Wait until every spawned task (including ones spawned meanwhile) is done."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)


def _is_present(data: Any) -> bool:
    # Falsy payloads ([], {}, "", 0, None) count as missing and are re-fetched.
    return bool(data)


class FetchHook:
    """One activation of the reactive fetch hook for a resource key.

    Local state is copied from the store once, at :meth:`activate`, and is
    never re-read from it afterwards; a resolution updates both the store
    (through the resolver) and the local state.

    Two activations for the same uncached key that both activate before
    either resolves will both fetch.  The store keeps whichever resolves
    last.
    """

    def __init__(
        self,
        key: str,
        *,
        store: CacheStore,
        transport: Transport,
        runner: TaskRunner,
    ) -> None:
        self._key = key
        self._store = store
        self._transport = transport
        self._runner = runner
        self._state = FetchState.loading()
        self._phase = HookPhase.IDLE
        self._active = False
        self._pending: asyncio.Future[CacheEntry] | None = None
        self._listeners: list[Listener] = []

    @property
    def key(self) -> str:
        return self._key

    @property
    def state(self) -> FetchState:
        return self._state

    @property
    def phase(self) -> HookPhase:
        return self._phase

    @property
    def active(self) -> bool:
        return self._active

    @property
    def is_loading(self) -> bool:
        return self._state.is_loading

    @property
    def data(self) -> Any:
        return self._state.data

    @property
    def error(self) -> FetchFailure | None:
        return self._state.error

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def activate(self) -> FetchState:
        """Seed local state from the store and fetch on a miss.

        Returns the seeded state synchronously; calling it again on a live
        activation is a no-op.
        """
        if self._active:
            return self._state
        self._active = True
        self._seed(self._key)
        return self._state

    def set_key(self, key: str) -> None:
        """Point the activation at another resource key.

        Data and error from the previous key are kept as long as the local
        data is populated: no fetch happens in that case.  Otherwise the
        new key is seeded from the store and fetched on a miss.
        """
        if key == self._key:
            return
        self._key = key
        if not self._active or _is_present(self._state.data):
            return
        self._seed(key)

    def close(self) -> None:
        """Tear down the activation.

        Listeners are dropped.  An in-flight fetch is not cancelled: it
        still writes the store and this (now defunct) local state.
        """
        self._active = False
        self._listeners.clear()

    def __enter__(self) -> FetchHook:
        self.activate()
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()

    async def wait(self) -> FetchState:
        """Wait for the in-flight fetch, if any, and return the local state."""
        pending = self._pending
        if pending is not None:
            await pending
        return self._state

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call *listener* with every new state while the activation is live."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    # ------------------------------------------------------------------
    # State machine
    # ------------------------------------------------------------------

    def _seed(self, key: str) -> None:
        entry = self._store.get(key)
        if entry is not None and _is_present(entry.payload):
            _logger.debug("Hook seeded from cache for %s", key)
            self._phase = HookPhase.RESOLVED
            self._set_state(FetchState.from_entry(entry))
            return

        if entry is not None:
            # Cached failure or falsy payload: expose it while re-fetching.
            self._set_state(FetchState.from_entry(entry, is_loading=True))
        elif not self._state.is_loading:
            self._set_state(self._state.model_copy(update={"is_loading": True}))
        self._trigger(key)

    def _trigger(self, key: str) -> None:
        _logger.debug("Hook cache miss for %s, fetching", key)
        self._phase = HookPhase.FETCHING
        self._pending = self._runner.spawn(self._resolve(key))

    async def _resolve(self, key: str) -> CacheEntry:
        entry = await resolve_fetch(key, transport=self._transport, store=self._store)
        if key != self._key:
            # Superseded by set_key(); the store write above still landed.
            _logger.debug("Dropping stale resolution for %s", key)
            return entry
        self._phase = HookPhase.RESOLVED
        self._set_state(FetchState.from_entry(entry))
        return entry

    def _set_state(self, state: FetchState) -> None:
        self._state = state
        if not self._active:
            return
        for listener in list(self._listeners):
            try:
                listener(state)
            except Exception:
                _logger.debug("FetchHook listener failed", exc_info=True)
