import base64

import pytest
import requests

from stardog_admin import CallContext, ContextCancelledError, DecodeError, UserList


def test_list_users(client, adapter):
    client.set_basic_auth('admin', 'admin')
    adapter.add(json_body={'users': ['admin', 'anonymous', 'reader']})
    users, resp = client.users.list(CallContext.background())
    assert users.users == ['admin', 'anonymous', 'reader']
    assert resp.status_code == 200

    sent, _ = adapter.sent[0]
    assert sent.method == 'GET'
    assert sent.url == 'http://stardog.test:5820/admin/users'
    assert sent.headers['Accept'] == 'application/json'
    assert sent.headers['Authorization'] == 'Basic ' + base64.b64encode(b'admin:admin').decode('ascii')


def test_list_users_empty_body(client, adapter):
    adapter.add(body=b'')
    users, _ = client.users.list(CallContext.background())
    assert users == UserList()


def test_list_users_unexpected_shape(client, adapter):
    adapter.add(json_body=['admin'])
    with pytest.raises(DecodeError):
        client.users.list(CallContext.background())


def test_list_users_with_cancelled_context(client, adapter):
    ctx = CallContext.background()
    ctx.cancel()
    adapter.add_error(requests.ConnectionError('should not be reached'))
    with pytest.raises(ContextCancelledError):
        client.users.list(ctx)
    assert adapter.sent == []


def test_user_list_from_dict():
    assert UserList.from_dict({'users': ['a', 'b']}).users == ['a', 'b']
    assert UserList.from_dict({}).users == []
    with pytest.raises(TypeError):
        UserList.from_dict({'users': 'a'})


def test_list_users_rejects_non_string_names(client, adapter):
    adapter.add(json_body={'users': [1, None, {'a': 2}]})
    with pytest.raises(DecodeError):
        client.users.list(CallContext.background())


def test_list_users_with_out_of_range_rate_reset(client, adapter):
    adapter.add(json_body={'users': ['admin']}, headers={'X-RateLimit-Reset': '99999999999999999'})
    users, resp = client.users.list(CallContext.background())
    assert users.users == ['admin']
    assert resp.rate.reset is None
