"""Fetch outcome resolution shared by the hook and the preload function."""

from __future__ import annotations

import json
import logging

from cachingfetch._constants import http_error_message, is_success_status
from cachingfetch._transport import Transport
from cachingfetch.exceptions import FetchTransportError
from cachingfetch.models.entry import CacheEntry, FetchFailure
from cachingfetch.store import CacheStore

_logger = logging.getLogger(__name__)


def _reject_constant(name: str) -> None:
    # NaN and Infinity are accepted by json.loads but are not JSON.
    raise ValueError(f"Invalid JSON body: non-JSON constant {name!r}")


async def resolve_fetch(key: str, *, transport: Transport, store: CacheStore) -> CacheEntry:
    """Fetch *key* once, store the outcome and return the stored entry.

    1. Call the transport; a raised failure becomes a ``transport`` outcome.
    2. A status outside 200-299 becomes an ``http`` outcome with message
       ``HTTP error Status:<code>``.
    3. Decode the body as JSON; a decode error becomes a ``parse`` outcome.
    4. Merge ``{key: entry}`` into *store*.

    Never raises (cancellation aside): every failure ends up in the
    returned entry's ``failure`` field.
    """
    try:
        response = await transport.fetch(key)
        if not is_success_status(response.status):
            raise FetchTransportError(
                http_error_message(response.status),
                status_code=response.status,
                key=key,
            )
        payload = json.loads(response.text, parse_constant=_reject_constant)
        entry = CacheEntry.success(payload)
    except Exception as exc:
        _logger.warning("Fetch of %s failed: %s", key, exc, exc_info=_logger.isEnabledFor(logging.DEBUG))
        entry = CacheEntry.failed(FetchFailure.from_error(exc))

    store.merge({key: entry})
    return entry


async def preload_fetch(key: str, *, transport: Transport, store: CacheStore) -> None:
    """Resolve *key* into *store* and wait for the write to land.

    Intended to run before any hook activates for *key* so that the hook
    seeds from the store instead of fetching.
    """
    await resolve_fetch(key, transport=transport, store=store)
