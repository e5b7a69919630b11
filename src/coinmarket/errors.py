"""
Error taxonomy for the market-data client.

Every failure surfaced by the client is a MarketDataError subclass. The
retryability predicate used by RetryPolicy lives here so that the client and
the retry layer agree on the classification.
"""

import errno

import httpx


class MarketDataError(Exception):
    """Base class for all market-data client errors."""

    description = "Unknown market data error"

    def __str__(self) -> str:
        return self.description


class InvalidURLError(MarketDataError):
    """A request URL could not be built."""

    description = "Invalid URL"


class InvalidResponseError(MarketDataError):
    """Bad status without a structured message, malformed JSON or a missing key."""

    description = "Invalid response from server"


class DecodingError(MarketDataError):
    """A structured decode of a response payload failed."""

    def __init__(self, cause: Exception) -> None:
        super().__init__(cause)
        self.cause = cause

    @property
    def description(self) -> str:  # type: ignore[override]
        return f"Failed to process data: {self.cause}"


class NetworkError(MarketDataError):
    """Transport-level failure."""

    def __init__(self, cause: BaseException) -> None:
        super().__init__(cause)
        self.cause = cause

    @property
    def description(self) -> str:  # type: ignore[override]
        return f"Network error: {self.cause}"


class APIError(MarketDataError):
    """Error reported by the server in the response status envelope."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    @property
    def description(self) -> str:  # type: ignore[override]
        return f"API error: {self.message}"


class NoConnectionError(MarketDataError):
    """No network path is available."""

    description = "No internet connection. Check your connection and try again."


_OFFLINE_ERRNOS = frozenset({errno.ENETUNREACH, errno.ENETDOWN})


def is_offline_error(error: BaseException) -> bool:
    """Check whether a transport error means the host has no network at all."""
    if not isinstance(error, httpx.ConnectError):
        return False

    cause: BaseException | None = error
    while cause is not None:
        if isinstance(cause, OSError) and cause.errno in _OFFLINE_ERRNOS:
            return True
        cause = cause.__cause__ or cause.__context__
    return False


def is_retryable(error: BaseException) -> bool:
    """
    Decide whether a failed operation may be attempted again.

    Network and invalid-response errors are retryable; API errors and a
    missing connection are not. Raw httpx transport errors are retryable
    for timeouts, connect/DNS failures and dropped connections, except when
    the host is offline.
    """
    match error:
        case NetworkError() | InvalidResponseError():
            return True
        case MarketDataError():
            return False
        case httpx.TimeoutException() | httpx.RemoteProtocolError():
            return True
        case httpx.NetworkError():
            return not is_offline_error(error)
        case _:
            return False
