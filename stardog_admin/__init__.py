"""Client for the Stardog administrative HTTP API.

Usage example:
    from stardog_admin import CallContext, Client
    client = Client.from_env()
    users, resp = client.users.list(CallContext.with_timeout(10))
"""
from .auth import BasicAuth  # noqa: F401
from .client import Client, DEFAULT_BASE_URL, sanitize_url  # noqa: F401
from .context import CallContext  # noqa: F401
from .exceptions import (  # noqa: F401
    ApiAuthError,
    ApiRateLimitError,
    ApiRequestError,
    CancellationError,
    ConfigurationError,
    ContextCancelledError,
    DeadlineExceededError,
    DecodeError,
    MissingContextError,
    SerializationError,
    StardogError,
    TransportError,
)
from .request import RequestDescriptor, with_header  # noqa: F401
from .response import DecodeInto, Discard, Response, WriteTo  # noqa: F401
from .users import UserList, UsersService  # noqa: F401
