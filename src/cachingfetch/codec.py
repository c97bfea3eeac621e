"""Transfer codec: move a cache store between execution contexts.

The server preloads, calls :func:`serialize`, and embeds the text in the
page; the client calls :func:`restore` with that text before any hook
activates.  Neither direction raises: failures come back as
:class:`EncodeResult`/:class:`DecodeResult` variants, and :func:`restore`
reports them through the log and an optional callback.

Wire format is a JSON object keyed by resource key::

    {"/api/people": {"failure": null, "payload": [{"name": "Ada"}]}}
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable
from typing import Any

from pydantic import TypeAdapter, ValidationError

from cachingfetch._constants import INITIALIZE_ERROR, SERIALIZE_ERROR, SERIALIZE_ERROR_MARKER_KEY
from cachingfetch.exceptions import CacheCodecError
from cachingfetch.models.codec import DecodeResult, EncodeResult
from cachingfetch.models.entry import CacheEntry
from cachingfetch.store import CacheStore

_logger = logging.getLogger(__name__)

_ENTRIES_ADAPTER: TypeAdapter[dict[str, CacheEntry]] = TypeAdapter(dict[str, CacheEntry])

#: Text returned by :func:`serialize` when the store cannot be encoded.
FALLBACK_TEXT = json.dumps({SERIALIZE_ERROR_MARKER_KEY: SERIALIZE_ERROR}, separators=(",", ":"))


def _dumps(value: Any) -> str:
    return json.dumps(value, sort_keys=True, separators=(",", ":"), allow_nan=False)


def _reject_constant(name: str) -> Any:
    raise ValueError(f"non-JSON constant {name!r}")


def encode_cache(store: CacheStore) -> EncodeResult:
    """Encode the whole store deterministically (sorted keys, compact)."""
    try:
        document = {key: entry.model_dump(mode="python") for key, entry in store.snapshot().items()}
        return EncodeResult(ok=True, text=_dumps(document))
    except (TypeError, ValueError, RecursionError) as exc:
        _logger.error("%s: %s", SERIALIZE_ERROR, exc)
        return EncodeResult(ok=False, text=FALLBACK_TEXT, error=f"{SERIALIZE_ERROR}: {exc}")


def decode_cache(serialized: str) -> DecodeResult:
    """Decode text produced by :func:`encode_cache` into validated entries."""
    try:
        document = json.loads(serialized, parse_constant=_reject_constant)
        if not isinstance(document, dict):
            raise CacheCodecError(f"expected a JSON object, got {type(document).__name__}")
        if document == {SERIALIZE_ERROR_MARKER_KEY: SERIALIZE_ERROR}:
            raise CacheCodecError("serialized cache carries the serialization error marker")
        entries = _ENTRIES_ADAPTER.validate_python(document)
    except (TypeError, ValueError, RecursionError, CacheCodecError) as exc:
        # json.JSONDecodeError and pydantic.ValidationError are ValueErrors;
        # RecursionError comes from pathologically nested input.
        reason = _describe(exc)
        return DecodeResult(ok=False, error=f"{INITIALIZE_ERROR}: {reason}")
    return DecodeResult(ok=True, entries=entries)


def _describe(exc: Exception) -> str:
    if isinstance(exc, ValidationError):
        return f"{exc.error_count()} invalid entries"
    return str(exc)


def serialize(store: CacheStore) -> str:
    """Return the encoded store, or the fallback marker text on failure."""
    return encode_cache(store).text


def restore(
    store: CacheStore,
    serialized: str,
    *,
    on_error: Callable[[str], None] | None = None,
) -> None:
    """Merge a serialized cache into *store*.

    All-or-nothing: on any decode failure the store is left untouched, the
    failure is logged at ERROR and passed to *on_error*.
    """
    result = decode_cache(serialized)
    if not result.ok:
        _logger.error("%s", result.error)
        if on_error is not None and result.error is not None:
            try:
                on_error(result.error)
            except Exception:
                _logger.debug("restore on_error callback failed", exc_info=True)
        return
    store.merge(result.entries)
