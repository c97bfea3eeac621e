"""In-memory cache store for resolved fetch outcomes.

This is the only component allowed to hold cached entries.  Writers are
the fetch resolver (one entry per resolution) and the transfer codec
(bulk merge on restore).
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping

from cachingfetch._redact import redact_for_log
from cachingfetch.models.entry import CacheEntry

_logger = logging.getLogger(__name__)


class CacheStore:
    """Mapping of resource key to :class:`CacheEntry`.

    Keys are used verbatim; ``"/api/people"`` and ``"/api/people/"`` are
    distinct entries.  Every write is a whole-entry overwrite, last write
    wins.  There is no expiry and no size bound.

    A store is a plain object: share one instance between the hook, the
    preload function and the codec to get a page-wide cache, or create one
    per request for isolation.
    """

    def __init__(self, *, log_payloads: bool = False, log_max_string: int = 256) -> None:
        self._entries: dict[str, CacheEntry] = {}
        self._log_payloads = log_payloads
        self._log_max_string = log_max_string

    def has(self, key: str) -> bool:
        """Return ``True`` iff an entry exists for *key*."""
        return key in self._entries

    def get(self, key: str) -> CacheEntry | None:
        return self._entries.get(key)

    def merge(self, entries: Mapping[str, CacheEntry]) -> None:
        """Insert or overwrite every entry in *entries*."""
        if not entries:
            return
        self._entries.update(entries)
        if _logger.isEnabledFor(logging.DEBUG):
            if self._log_payloads:
                _logger.debug(
                    "Cache merge %s (size=%d)",
                    redact_for_log(
                        {key: entry.model_dump(mode="python") for key, entry in entries.items()},
                        max_string=self._log_max_string,
                    ),
                    len(self._entries),
                )
            else:
                _logger.debug("Cache merge keys=%s (size=%d)", sorted(entries), len(self._entries))

    def wipe(self) -> None:
        """Remove every entry in place; held references see the empty store."""
        self._entries.clear()
        _logger.debug("Cache wiped")

    def snapshot(self) -> dict[str, CacheEntry]:
        """Shallow copy of the current contents (entries are immutable)."""
        return dict(self._entries)

    def keys(self) -> list[str]:
        return list(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._entries))
