"""Result variants returned by the transfer codec."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from cachingfetch.models.entry import CacheEntry


class EncodeResult(BaseModel):
    """Outcome of encoding a cache store.

    ``text`` is always usable: on failure it holds the fallback error
    marker encoding.
    """

    model_config = ConfigDict(frozen=True)

    ok: bool
    text: str
    error: str | None = None


class DecodeResult(BaseModel):
    """Outcome of decoding a serialized cache.

    ``entries`` is empty whenever ``ok`` is ``False``.
    """

    model_config = ConfigDict(frozen=True)

    ok: bool
    entries: dict[str, CacheEntry] = Field(default_factory=dict)
    error: str | None = None
