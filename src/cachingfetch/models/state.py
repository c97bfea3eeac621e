"""Per-activation state exposed by the reactive fetch hook."""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict

from cachingfetch.models.entry import CacheEntry, FetchFailure


class HookPhase(StrEnum):
    IDLE = "idle"
    FETCHING = "fetching"
    RESOLVED = "resolved"


class FetchState(BaseModel):
    """Read-only ``{is_loading, data, error}`` triple returned to consumers.

    Consumers branch on ``error`` being set to render a failure; the hook
    never raises.
    """

    model_config = ConfigDict(frozen=True)

    is_loading: bool = True
    data: Any = None
    error: FetchFailure | None = None

    @classmethod
    def loading(cls) -> FetchState:
        return cls(is_loading=True, data=None, error=None)

    @classmethod
    def from_entry(cls, entry: CacheEntry, *, is_loading: bool = False) -> FetchState:
        return cls(is_loading=is_loading, data=entry.payload, error=entry.failure)
