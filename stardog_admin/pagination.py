"""Pagination hints carried by the ``Link`` response header.

Stardog endpoints page either by number (``page``/``since``/``before``/
``after`` query parameters) or by an opaque ``cursor``. Example header:

    <http://host:5820/admin/users?page=3>; rel="next",
    <http://host:5820/admin/users?page=9>; rel="last"
"""
from __future__ import annotations
import re
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Mapping, Optional
from urllib.parse import parse_qs, urlsplit


@dataclass
class PageValues:
    # offset pagination
    next_page: int = 0
    prev_page: int = 0
    first_page: int = 0
    last_page: int = 0
    # opaque token in place of a next page number
    next_page_token: str = ''
    # cursor pagination
    cursor: str = ''
    # before/after pagination
    before: str = ''
    after: str = ''


@dataclass
class Rate:
    """Rate limit snapshot taken from the X-RateLimit-* headers."""
    limit: int = 0
    remaining: int = 0
    reset: Optional[datetime] = None


_DIGITS = re.compile(r'[+-]?[0-9]+')


def _atoi(value: str) -> Optional[int]:
    if not _DIGITS.fullmatch(value):
        return None
    return int(value)


def _first(query: dict, name: str) -> str:
    values = query.get(name)
    return values[0] if values else ''


def parse_link_header(value: Optional[str]) -> PageValues:
    pages = PageValues()
    if not value:
        return pages

    for link in value.split(','):
        segments = link.strip().split(';')

        # link must at least have href and rel
        if len(segments) < 2:
            continue

        href = segments[0].strip()
        if not (href.startswith('<') and href.endswith('>')):
            continue

        try:
            query = parse_qs(urlsplit(href[1:-1]).query)
        except ValueError:
            continue

        rels = [seg.strip() for seg in segments[1:]]

        cursor = _first(query, 'cursor')
        if cursor:
            if 'rel="next"' in rels:
                pages.cursor = cursor
            continue

        page = _first(query, 'page')
        since = _first(query, 'since')
        before = _first(query, 'before')
        after = _first(query, 'after')

        if not (page or before or after or since):
            continue

        if since and not page:
            page = since

        for rel in rels:
            if rel == 'rel="next"':
                number = _atoi(page)
                if number is None:
                    pages.next_page = 0
                    pages.next_page_token = page
                else:
                    pages.next_page = number
                pages.after = after
            elif rel == 'rel="prev"':
                pages.prev_page = _atoi(page) or 0
                pages.before = before
            elif rel == 'rel="first"':
                pages.first_page = _atoi(page) or 0
            elif rel == 'rel="last"':
                pages.last_page = _atoi(page) or 0

    return pages


def parse_rate(headers: Mapping[str, str]) -> Rate:
    rate = Rate()
    limit = _atoi(headers.get('X-RateLimit-Limit', '') or '')
    if limit is not None:
        rate.limit = limit
    remaining = _atoi(headers.get('X-RateLimit-Remaining', '') or '')
    if remaining is not None:
        rate.remaining = remaining
    reset = _atoi(headers.get('X-RateLimit-Reset', '') or '')
    if reset is not None:
        try:
            rate.reset = datetime.fromtimestamp(reset, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            rate.reset = None
    return rate
