from __future__ import annotations
import json
from dataclasses import dataclass, field
from typing import Any, Callable, Optional, Union

import requests

from .exceptions import DecodeError
from .pagination import PageValues, Rate, parse_link_header, parse_rate

CHUNK_SIZE = 32 * 1024


@dataclass
class Response:
    """HTTP response plus the pagination and rate data derived from its headers.

    Only one pagination style is populated per response: the offset fields
    (next_page, prev_page, first_page, last_page, next_page_token, before,
    after) or the cursor field, depending on the endpoint.
    """
    raw_response: requests.Response
    next_page: int = 0
    prev_page: int = 0
    first_page: int = 0
    last_page: int = 0
    next_page_token: str = ''
    cursor: str = ''
    before: str = ''
    after: str = ''
    rate: Rate = field(default_factory=Rate)

    @classmethod
    def from_http(cls, resp: requests.Response) -> 'Response':
        pages: PageValues = parse_link_header(resp.headers.get('Link'))
        return cls(
            raw_response=resp,
            next_page=pages.next_page,
            prev_page=pages.prev_page,
            first_page=pages.first_page,
            last_page=pages.last_page,
            next_page_token=pages.next_page_token,
            cursor=pages.cursor,
            before=pages.before,
            after=pages.after,
            rate=parse_rate(resp.headers),
        )

    @property
    def status_code(self) -> int:
        return self.raw_response.status_code

    @property
    def headers(self):
        return self.raw_response.headers

    def close(self) -> None:
        self.raw_response.close()


# Decode destinations. Exactly these three kinds are supported.

@dataclass
class Discard:
    """Drop the body."""


@dataclass
class WriteTo:
    """Copy the raw body bytes into ``sink`` (anything with write(bytes))."""
    sink: Any


@dataclass
class DecodeInto:
    """Decode the JSON body, optionally through ``factory``; result lands in ``value``."""
    factory: Optional[Callable[[Any], Any]] = None
    value: Any = None


Destination = Union[Discard, WriteTo, DecodeInto, None]


def decode_response(response: Response, destination: Destination = None) -> None:
    resp = response.raw_response
    try:
        if destination is None or isinstance(destination, Discard):
            return
        if isinstance(destination, WriteTo):
            for chunk in resp.iter_content(chunk_size=CHUNK_SIZE):
                destination.sink.write(chunk)
            return
        if isinstance(destination, DecodeInto):
            _decode_json(resp, destination)
            return
        raise TypeError(f"Unsupported decode destination: {type(destination).__name__}")
    finally:
        resp.close()


def _decode_json(resp: requests.Response, destination: DecodeInto) -> None:
    content = resp.content
    if not content or not content.strip():
        # empty body, nothing to decode
        return
    try:
        payload = json.loads(content)
    except ValueError as e:
        raise DecodeError(f"Failed to decode JSON response: {e}") from e
    if destination.factory is None:
        destination.value = payload
        return
    try:
        destination.value = destination.factory(payload)
    except (TypeError, ValueError, KeyError) as e:
        raise DecodeError(f"Response does not match {getattr(destination.factory, '__name__', 'target')}: {e}") from e
