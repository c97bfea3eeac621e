"""Data models for cached fetch outcomes."""

from cachingfetch.models.codec import DecodeResult, EncodeResult
from cachingfetch.models.entry import CacheEntry, FailureKind, FetchFailure
from cachingfetch.models.state import FetchState, HookPhase

__all__ = [
    "CacheEntry",
    "DecodeResult",
    "EncodeResult",
    "FailureKind",
    "FetchFailure",
    "FetchState",
    "HookPhase",
]
