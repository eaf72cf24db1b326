from __future__ import annotations
from typing import Any, Optional


class StardogError(Exception):
    """Base class for every error raised by the client."""


class ConfigurationError(StardogError):
    """Client misconfigured (malformed base URL, missing trailing slash)."""


class MissingContextError(StardogError):
    """A request was sent without a call context."""


class SerializationError(StardogError):
    """Request body could not be encoded as JSON."""


class TransportError(StardogError):
    """Network level failure (DNS, connection refused, TLS, read timeout)."""

    def __init__(self, message: str, url: Optional[str] = None):
        super().__init__(message)
        self.url = url


class CancellationError(StardogError):
    """The call context was cancelled or expired."""


class ContextCancelledError(CancellationError):
    def __init__(self, message: str = 'context canceled'):
        super().__init__(message)


class DeadlineExceededError(CancellationError):
    def __init__(self, message: str = 'context deadline exceeded'):
        super().__init__(message)


class DecodeError(StardogError):
    """Response body is not valid JSON for the requested shape."""


class ApiRequestError(StardogError):
    """Generic API request error (4xx/5xx not otherwise classified)."""

    def __init__(self, message: str, status_code: Optional[int] = None, response: Any = None):
        super().__init__(message)
        self.status_code = status_code
        self.response = response


class ApiAuthError(ApiRequestError):
    """Authentication or authorization failure (401/403)."""


class ApiRateLimitError(ApiRequestError):
    """Rate limiting encountered (429)."""

    @property
    def rate(self):
        return self.response.rate if self.response is not None else None
