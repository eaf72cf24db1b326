from __future__ import annotations
import json
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Callable, Iterable, Mapping, Optional
from urllib.parse import urljoin, urlsplit

import requests
from requests.structures import CaseInsensitiveDict

from .auth import BasicAuth
from .exceptions import ConfigurationError, SerializationError

MEDIA_TYPE_JSON = 'application/json'

# Mutates the prepared request after all defaults are set.
RequestOption = Callable[[requests.PreparedRequest], None]


def with_header(name: str, value: str) -> RequestOption:
    def _apply(prepared: requests.PreparedRequest) -> None:
        prepared.headers[name] = value
    return _apply


@dataclass(frozen=True)
class RequestDescriptor:
    """Fully built outgoing request. Never modified once built."""
    method: str
    url: str
    headers: Mapping[str, str]
    body: Optional[bytes] = None

    def json(self) -> Any:
        if not self.body:
            return None
        return json.loads(self.body.decode('utf-8'))

    def prepare(self) -> requests.PreparedRequest:
        """Return a fresh PreparedRequest for the transport to send."""
        prepared = requests.PreparedRequest()
        prepared.method = self.method
        prepared.url = self.url
        prepared.headers = CaseInsensitiveDict(self.headers)
        prepared.body = self.body
        return prepared


def encode_body(body: Any) -> bytes:
    try:
        text = json.dumps(body, ensure_ascii=False, allow_nan=False)
    except (TypeError, ValueError) as e:
        raise SerializationError(f"Cannot encode request body as JSON: {e}") from e
    return (text + '\n').encode('utf-8')


def build_request(base_url: str, method: str, path: str, body: Any = None, *,
                  user_agent: Optional[str] = None, auth: Optional[BasicAuth] = None,
                  options: Iterable[RequestOption] = ()) -> RequestDescriptor:
    if not urlsplit(base_url).path.endswith('/'):
        raise ConfigurationError(f"BaseURL must have a trailing slash, but {base_url!r} does not")

    url = urljoin(base_url, path)
    data = encode_body(body) if body is not None else None

    headers = {'Accept': MEDIA_TYPE_JSON}
    if data is not None:
        headers['Content-Type'] = MEDIA_TYPE_JSON
    if user_agent:
        headers['User-Agent'] = user_agent

    try:
        prepared = requests.Request(method.upper(), url, headers=headers, data=data).prepare()
    except requests.RequestException as e:
        raise ConfigurationError(f"Invalid request URL {url!r}: {e}") from e

    if auth is not None:
        auth.apply(prepared)

    for opt in options:
        opt(prepared)

    final_body = prepared.body
    if isinstance(final_body, str):
        final_body = final_body.encode('utf-8')
    return RequestDescriptor(
        method=prepared.method,
        url=prepared.url,
        headers=MappingProxyType(prepared.headers.copy()),
        body=final_body,
    )
