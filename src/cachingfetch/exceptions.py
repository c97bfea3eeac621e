"""Custom exception hierarchy for cachingfetch."""

from __future__ import annotations


class CachingFetchError(Exception):
    """Base exception for all cachingfetch errors."""


class CachingFetchConfigError(CachingFetchError):
    """Invalid or missing configuration."""


class FetchTransportError(CachingFetchError):
    """HTTP-level failure (network, timeout, non-2xx status).

    Only raised below the resolver.  The resolver always converts it into a
    stored failure outcome, so callers of the hook or the preload function
    never see it.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        key: str = "",
    ) -> None:
        self.status_code = status_code
        self.key = key
        super().__init__(message)


class CacheCodecError(CachingFetchError):
    """Cache serialization or deserialization failure.

    Carried inside :class:`~cachingfetch.models.EncodeResult` and
    :class:`~cachingfetch.models.DecodeResult` rather than raised.
    """
