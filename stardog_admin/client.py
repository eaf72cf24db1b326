from __future__ import annotations
import logging
import os
import re
import threading
from typing import Any, Optional
from urllib.parse import unquote_plus, urlsplit, urlunsplit

import requests

from .auth import BasicAuth
from .context import CallContext
from .exceptions import (
    ApiAuthError,
    ApiRateLimitError,
    ApiRequestError,
    ConfigurationError,
    DeadlineExceededError,
    MissingContextError,
    TransportError,
)
from .request import RequestDescriptor, RequestOption, build_request
from .response import Destination, Response, decode_response
from .users import UsersService

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = 'http://localhost:5820/'
DEFAULT_TIMEOUT = 30.0
REDACTED = 'REDACTED'

_SECRET_IN_TEXT = re.compile(r'(client_secret=)[^&\s\'"]+')


def sanitize_url(url: Optional[str]) -> Optional[str]:
    """Redact the client_secret query parameter; everything else is left as is."""
    if not url:
        return url
    parts = urlsplit(url)
    if not parts.query:
        return url
    pairs = parts.query.split('&')
    secret_set = False
    for pair in pairs:
        name, _, value = pair.partition('=')
        if unquote_plus(name) == 'client_secret' and value:
            secret_set = True
            break
    if not secret_set:
        return url
    redacted = []
    for pair in pairs:
        name = pair.partition('=')[0]
        if unquote_plus(name) == 'client_secret':
            redacted.append(f"{name}={REDACTED}")
        else:
            redacted.append(pair)
    return urlunsplit(parts._replace(query='&'.join(redacted)))


def _sanitize_text(text: str) -> str:
    return _SECRET_IN_TEXT.sub(r'\g<1>' + REDACTED, text)


def _validate_base_url(base_url: str) -> str:
    try:
        parts = urlsplit(base_url)
        parts.port  # raises ValueError on an invalid port
    except ValueError as e:
        raise ConfigurationError(f"Error parsing base URL {base_url!r}: {e}") from e
    if parts.scheme not in ('http', 'https') or not parts.hostname:
        raise ConfigurationError(f"Error parsing base URL {base_url!r}: expected http(s)://host[:port]/")
    return base_url


class Client:
    """Client for the Stardog admin HTTP API.

    One instance is meant to be shared across calls. Credentials set with
    ``set_basic_auth`` are read under a lock when a request is built, so the
    setter is safe to call while other threads build requests. Requests that
    were already built keep the credentials they were built with.

    Example:
        client = Client(base_url='http://127.0.0.1:5820/')
        client.set_basic_auth('admin', 'admin')
        users, resp = client.users.list(CallContext.background())
    """

    def __init__(self, session: Optional[requests.Session] = None, base_url: Optional[str] = None, *,
                 user_agent: Optional[str] = None, auth: Optional[BasicAuth] = None,
                 timeout: Optional[float] = DEFAULT_TIMEOUT):
        if session is None:
            session = requests.Session()
            logger.info('HTTP session not provided, using default session.')
        if not base_url:
            base_url = DEFAULT_BASE_URL
            logger.info('Base URL not provided, using default URL: %s', base_url)

        self.session = session
        self.base_url = _validate_base_url(base_url)
        self.user_agent = user_agent
        self.timeout = timeout
        self._auth = auth
        self._auth_lock = threading.Lock()

        self.users = UsersService(self)
        logger.info('New client created for %s', sanitize_url(self.base_url))

    @classmethod
    def from_env(cls, session: Optional[requests.Session] = None) -> 'Client':
        base_url = Client.env('STARDOG_URL', required=False)
        username = Client.env('STARDOG_USERNAME', required=False)
        password = Client.env('STARDOG_PASSWORD', required=False)
        user_agent = Client.env('STARDOG_USER_AGENT', required=False)
        timeout_value = Client.env('STARDOG_TIMEOUT', required=False)

        timeout = DEFAULT_TIMEOUT
        if timeout_value:
            try:
                timeout = float(timeout_value)
            except ValueError as e:
                raise ConfigurationError(f"STARDOG_TIMEOUT must be a number, got {timeout_value!r}") from e

        auth = None
        if username:
            if password is None:
                raise ConfigurationError('STARDOG_PASSWORD is required when STARDOG_USERNAME is set')
            auth = BasicAuth(username, password)
        return cls(session, base_url or None, user_agent=user_agent or None, auth=auth, timeout=timeout)

    @staticmethod
    def env(name: str, required: bool = True) -> Optional[str]:
        val = os.getenv(name)
        if required and (val is None or val.strip() == ''):
            raise ConfigurationError(f"Missing required environment variable: {name}")
        return val

    @property
    def auth(self) -> Optional[BasicAuth]:
        with self._auth_lock:
            return self._auth

    def set_basic_auth(self, username: str, password: str) -> None:
        with self._auth_lock:
            self._auth = BasicAuth(username, password)

    def with_basic_auth(self, username: str, password: str) -> 'Client':
        """Return a new client sharing this session but using other credentials."""
        return Client(self.session, self.base_url, user_agent=self.user_agent,
                      auth=BasicAuth(username, password), timeout=self.timeout)

    def new_request(self, method: str, path: str, body: Any = None, *opts: RequestOption) -> RequestDescriptor:
        return build_request(self.base_url, method, path, body,
                             user_agent=self.user_agent, auth=self.auth, options=opts)

    def _send_timeout(self, remaining: Optional[float]) -> Optional[float]:
        if remaining is None:
            return self.timeout
        if self.timeout is None:
            return remaining
        return min(self.timeout, remaining)

    def bare_do(self, ctx: CallContext, req: RequestDescriptor) -> Response:
        """Send ``req`` once and return the wrapped response.

        The body is left open; callers must close the returned Response (``do``
        does this for them).
        """
        if ctx is None:
            raise MissingContextError('context must be non-None')
        remaining = ctx.remaining()
        ctx_err = ctx.err()
        if ctx_err is not None:
            raise ctx_err
        if remaining is not None and remaining <= 0:
            raise DeadlineExceededError()

        timeout = self._send_timeout(remaining)
        bounded_by_ctx = remaining is not None and timeout == remaining
        logger.debug('%s %s', req.method, sanitize_url(req.url))
        try:
            resp = self.session.send(req.prepare(), timeout=timeout, stream=True)
        except requests.RequestException as e:
            # a cancelled context says more than the transport error
            ctx_err = ctx.err()
            if ctx_err is not None:
                raise ctx_err from e
            if bounded_by_ctx and isinstance(e, requests.Timeout):
                raise DeadlineExceededError() from e
            failed = e.request.url if getattr(e, 'request', None) is not None else req.url
            raise TransportError(_sanitize_text(f"{req.method} {failed}: {e}"), url=sanitize_url(failed)) from e

        try:
            response = Response.from_http(resp)
        except Exception:
            resp.close()
            raise
        logger.debug('%s %s -> %s', req.method, sanitize_url(req.url), resp.status_code)
        check_response(response)
        return response

    def do(self, ctx: CallContext, req: RequestDescriptor, destination: Destination = None) -> Response:
        response = self.bare_do(ctx, req)
        decode_response(response, destination)
        return response

    def close(self) -> None:
        self.session.close()

    def __enter__(self) -> 'Client':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


def check_response(response: Response) -> None:
    """Raise an ApiRequestError for 4xx/5xx responses, releasing the body."""
    code = response.status_code
    if code < 400:
        return
    try:
        text = response.raw_response.text[:200]
    finally:
        response.close()
    if code in (401, 403):
        raise ApiAuthError(f"Auth error {code}: {text}", code, response)
    if code == 429:
        raise ApiRateLimitError(f"Rate limit hit (429): {text}", code, response)
    if code >= 500:
        raise ApiRequestError(f"Server error {code}: {text}", code, response)
    raise ApiRequestError(f"Client error {code}: {text}", code, response)
