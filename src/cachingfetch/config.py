"""Client configuration for cachingfetch."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from cachingfetch._constants import USER_AGENT
from cachingfetch.exceptions import CachingFetchConfigError


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


def _env_number(env_key: str, value: str, cast: type[int] | type[float]) -> int | float:
    try:
        return cast(value)
    except ValueError as exc:
        raise CachingFetchConfigError(f"{env_key} must be a number, got {value!r}") from exc


@dataclasses.dataclass(frozen=True)
class CachingFetchConfig:
    """Client configuration.

    Parameters
    ----------
    base_url : str
        Prefix joined to relative resource keys (keys starting with ``/``)
        to form the transport target.  The cache key itself is always the
        verbatim resource key.  Empty by default, meaning keys are used
        as-is.
    request_timeout : float
        Total timeout in seconds for a single fetch.
    user_agent : str
        ``User-Agent`` header sent by the HTTP transport.
    log_payloads : bool
        Include redacted payload summaries in DEBUG merge logs.
    log_max_string : int
        Truncation width for strings in logged payloads.
    """

    base_url: str = ""
    request_timeout: float = 30.0
    user_agent: str = USER_AGENT
    log_payloads: bool = False
    log_max_string: int = 256

    def __post_init__(self) -> None:
        if self.request_timeout <= 0:
            raise CachingFetchConfigError(f"request_timeout must be positive, got {self.request_timeout}")
        if self.log_max_string <= 0:
            raise CachingFetchConfigError(f"log_max_string must be positive, got {self.log_max_string}")

    def target_for(self, key: str) -> str:
        """Return the transport target for *key*.

        Relative keys are joined to :attr:`base_url`; absolute keys and
        keys without a configured base URL pass through untouched.
        """
        if self.base_url and key.startswith("/"):
            return f"{self.base_url.rstrip('/')}{key}"
        return key

    @classmethod
    def from_env(cls, **overrides: Any) -> CachingFetchConfig:
        """Create configuration from environment variables.

        Reads the optional ``CACHINGFETCH_*`` variables.  Explicit keyword
        arguments override environment values.

        Parameters
        ----------
        **overrides
            Explicit field values that take precedence over env vars.

        Returns
        -------
        CachingFetchConfig
            Populated configuration.
        """
        env = os.environ

        config_kwargs: dict[str, Any] = {}
        _ENV_STR_MAP = {
            "CACHINGFETCH_BASE_URL": "base_url",
            "CACHINGFETCH_USER_AGENT": "user_agent",
        }
        for env_key, field_name in _ENV_STR_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        timeout_env = env.get("CACHINGFETCH_REQUEST_TIMEOUT")
        if timeout_env is not None and "request_timeout" not in overrides:
            config_kwargs["request_timeout"] = float(
                _env_number("CACHINGFETCH_REQUEST_TIMEOUT", timeout_env, float)
            )

        max_string_env = env.get("CACHINGFETCH_LOG_MAX_STRING")
        if max_string_env is not None and "log_max_string" not in overrides:
            config_kwargs["log_max_string"] = int(
                _env_number("CACHINGFETCH_LOG_MAX_STRING", max_string_env, int)
            )

        if "log_payloads" not in overrides:
            config_kwargs["log_payloads"] = _env_bool(env.get("CACHINGFETCH_LOG_PAYLOADS"), False)

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
