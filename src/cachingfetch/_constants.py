"""Internal constants shared across the library."""

USER_AGENT = "cachingfetch/1.0"

#: Inclusive bounds of the status codes treated as a successful fetch.
SUCCESS_STATUS_MIN = 200
SUCCESS_STATUS_MAX = 299

GENERIC_FETCH_ERROR = "An error happened while fetching the data."
SERIALIZE_ERROR = "An error happened while serializing cache"
INITIALIZE_ERROR = "An error happened while initializing the cache"

#: Key of the marker object emitted when the cache cannot be encoded.
SERIALIZE_ERROR_MARKER_KEY = "error"


def is_success_status(status: int) -> bool:
    """Return ``True`` when *status* falls in the 2xx success range."""
    return SUCCESS_STATUS_MIN <= status <= SUCCESS_STATUS_MAX


def http_error_message(status: int) -> str:
    """Message stored for a response with a non-success status."""
    return f"HTTP error Status:{status}"
