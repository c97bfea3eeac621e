"""Cache entry and failure models."""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, model_validator

from cachingfetch._constants import GENERIC_FETCH_ERROR, http_error_message
from cachingfetch.exceptions import FetchTransportError


class FailureKind(StrEnum):
    HTTP = "http"
    TRANSPORT = "transport"
    PARSE = "parse"
    UNKNOWN = "unknown"


class FetchFailure(BaseModel):
    """Description of a failed fetch, stored in place of a payload.

    Parameters
    ----------
    kind : FailureKind
        Which stage of the fetch failed.
    message : str
        Human-readable description.  ``HTTP error Status:<code>`` for
        non-success responses.
    status_code : int or None
        Response status, only set for :attr:`FailureKind.HTTP`.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    kind: FailureKind = FailureKind.UNKNOWN
    message: str = GENERIC_FETCH_ERROR
    status_code: int | None = None

    @classmethod
    def for_status(cls, status: int) -> FetchFailure:
        return cls(kind=FailureKind.HTTP, message=http_error_message(status), status_code=status)

    @classmethod
    def from_error(cls, error: object) -> FetchFailure:
        """Normalize any failure value into a :class:`FetchFailure`.

        Exceptions keep their message; anything else (or an exception with
        an empty message) gets the generic fetch error message.
        """
        if isinstance(error, FetchTransportError):
            if error.status_code is not None:
                return cls.for_status(error.status_code)
            return cls(kind=FailureKind.TRANSPORT, message=str(error) or GENERIC_FETCH_ERROR)
        if isinstance(error, ValueError):
            # json.JSONDecodeError and aiohttp.ContentTypeError both land here.
            return cls(kind=FailureKind.PARSE, message=str(error) or GENERIC_FETCH_ERROR)
        if isinstance(error, Exception):
            return cls(kind=FailureKind.UNKNOWN, message=str(error) or GENERIC_FETCH_ERROR)
        return cls()


class CacheEntry(BaseModel):
    """Resolved outcome of fetching one resource key.

    Exactly one of ``payload``/``failure`` is meaningful: a success stores
    the decoded body with ``failure=None``, a failure stores
    ``payload=None``.  A success payload may itself be ``None`` when the
    body decoded to JSON ``null``.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    payload: Any = None
    failure: FetchFailure | None = None

    @model_validator(mode="after")
    def _check_exclusive(self) -> CacheEntry:
        if self.failure is not None and self.payload is not None:
            raise ValueError("a failed entry cannot carry a payload")
        return self

    @classmethod
    def success(cls, payload: Any) -> CacheEntry:
        return cls(payload=payload, failure=None)

    @classmethod
    def failed(cls, failure: FetchFailure) -> CacheEntry:
        return cls(payload=None, failure=failure)

    @property
    def ok(self) -> bool:
        return self.failure is None
