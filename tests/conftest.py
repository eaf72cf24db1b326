import io
import json

import pytest
import requests
from requests.adapters import BaseAdapter
from requests.structures import CaseInsensitiveDict
from requests.utils import get_encoding_from_headers

from stardog_admin import Client


class TrackingResponse(requests.Response):
    def __init__(self):
        super().__init__()
        self.close_calls = 0

    def close(self):
        self.close_calls += 1
        super().close()


class StubAdapter(BaseAdapter):
    """Transport adapter that replays queued responses or errors."""

    def __init__(self):
        super().__init__()
        self.queue = []
        self.sent = []
        self.responses = []

    def add(self, status=200, body=b'', headers=None, json_body=None):
        if json_body is not None:
            body = json.dumps(json_body).encode('utf-8')
            headers = {'Content-Type': 'application/json', **(headers or {})}
        self.queue.append(('response', status, body, headers or {}))

    def add_error(self, exc, before_raise=None):
        self.queue.append(('error', exc, before_raise))

    def send(self, request, stream=False, timeout=None, verify=True, cert=None, proxies=None):
        self.sent.append((request, timeout))
        item = self.queue.pop(0)
        if item[0] == 'error':
            _, exc, before_raise = item
            if before_raise is not None:
                before_raise()
            exc.request = request
            raise exc
        _, status, body, headers = item
        resp = TrackingResponse()
        resp.status_code = status
        resp.headers = CaseInsensitiveDict(headers)
        resp.encoding = get_encoding_from_headers(resp.headers)
        resp.raw = io.BytesIO(body)
        resp.url = request.url
        resp.request = request
        self.responses.append(resp)
        return resp

    def close(self):
        pass


@pytest.fixture
def adapter():
    return StubAdapter()


@pytest.fixture
def session(adapter):
    s = requests.Session()
    s.mount('http://', adapter)
    s.mount('https://', adapter)
    return s


@pytest.fixture
def client(session):
    return Client(session, 'http://stardog.test:5820/')
