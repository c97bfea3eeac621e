"""cachingfetch - Shared async response cache with server-to-client transfer."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("cachingfetch")
except PackageNotFoundError:
    __version__ = "0+local"
from cachingfetch._transport import HttpTransport, Transport, TransportResponse
from cachingfetch.api import (
    get_default_client,
    initialize_cache,
    is_cached,
    preload_caching_fetch,
    serialize_cache,
    set_default_client,
    use_caching_fetch,
    wipe_cache,
)
from cachingfetch.client import CachingFetchClient
from cachingfetch.codec import decode_cache, encode_cache, restore, serialize
from cachingfetch.config import CachingFetchConfig
from cachingfetch.exceptions import (
    CacheCodecError,
    CachingFetchConfigError,
    CachingFetchError,
    FetchTransportError,
)
from cachingfetch.hook import AsyncioTaskRunner, FetchHook, TaskRunner
from cachingfetch.models import (
    CacheEntry,
    DecodeResult,
    EncodeResult,
    FailureKind,
    FetchFailure,
    FetchState,
    HookPhase,
)
from cachingfetch.resolver import preload_fetch, resolve_fetch
from cachingfetch.store import CacheStore

__all__ = [
    "__version__",
    "AsyncioTaskRunner",
    "CacheCodecError",
    "CacheEntry",
    "CacheStore",
    "CachingFetchClient",
    "CachingFetchConfig",
    "CachingFetchConfigError",
    "CachingFetchError",
    "DecodeResult",
    "EncodeResult",
    "FailureKind",
    "FetchFailure",
    "FetchHook",
    "FetchState",
    "FetchTransportError",
    "HookPhase",
    "HttpTransport",
    "TaskRunner",
    "Transport",
    "TransportResponse",
    "decode_cache",
    "encode_cache",
    "get_default_client",
    "initialize_cache",
    "is_cached",
    "preload_caching_fetch",
    "preload_fetch",
    "resolve_fetch",
    "restore",
    "serialize",
    "serialize_cache",
    "set_default_client",
    "use_caching_fetch",
    "wipe_cache",
]
