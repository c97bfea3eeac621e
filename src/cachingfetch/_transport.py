"""HTTP transport for resource fetches."""

from __future__ import annotations

import asyncio
import dataclasses
import logging
from typing import Protocol

import aiohttp

from cachingfetch.config import CachingFetchConfig
from cachingfetch.exceptions import FetchTransportError

_logger = logging.getLogger(__name__)


@dataclasses.dataclass(frozen=True)
class TransportResponse:
    """Status code and undecoded body of one fetch."""

    status: int
    text: str


class Transport(Protocol):
    """Structural transport interface used by the resolver.

    Having a protocol here makes it easy to pass test doubles/mocks while
    keeping the production implementation (`HttpTransport`) concrete.
    Implementations raise :class:`FetchTransportError` (or any other
    exception) on transport-level failure and return non-2xx responses
    normally.
    """

    async def fetch(self, key: str) -> TransportResponse:
        ...


class HttpTransport:
    """GET transport backed by :mod:`aiohttp`.

    When no session is given, a short-lived :class:`aiohttp.ClientSession`
    is opened per fetch.  Pass a session to reuse its connection pool; the
    transport never closes a session it did not create.
    """

    def __init__(
        self,
        config: CachingFetchConfig,
        http_session: aiohttp.ClientSession | None = None,
    ) -> None:
        self._config = config
        self._http = http_session

    async def fetch(self, key: str) -> TransportResponse:
        url = self._config.target_for(key)
        headers = {"accept": "application/json", "user-agent": self._config.user_agent}
        timeout = aiohttp.ClientTimeout(total=self._config.request_timeout)

        _logger.debug("GET %s", url)

        try:
            if self._http is not None:
                return await self._get(self._http, url, headers, timeout)
            async with aiohttp.ClientSession() as session:
                return await self._get(session, url, headers, timeout)
        except aiohttp.ClientError as exc:
            raise FetchTransportError(f"Request to {url} failed: {exc}", key=key) from exc
        except asyncio.TimeoutError as exc:
            raise FetchTransportError(
                f"Request to {url} timed out after {self._config.request_timeout}s",
                key=key,
            ) from exc

    @staticmethod
    async def _get(
        session: aiohttp.ClientSession,
        url: str,
        headers: dict[str, str],
        timeout: aiohttp.ClientTimeout,
    ) -> TransportResponse:
        async with session.get(url, headers=headers, timeout=timeout) as resp:
            text = await resp.text()
            return TransportResponse(status=resp.status, text=text)
