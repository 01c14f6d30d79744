from urllib.parse import parse_qs, urlsplit

import pytest

from igdb.token import AuthError, TokenCache
from tests.app_helpers import FakeOpener, http_error


class FakeClock:
    def __init__(self, start=1_000.0):
        self.now = start

    def __call__(self):
        return self.now


def make_cache(opener, clock=None, **kwargs):
    return TokenCache(
        client_id=kwargs.pop('client_id', 'client-abc'),
        client_secret=kwargs.pop('client_secret', 'secret-xyz'),
        clock=clock or FakeClock(),
        opener=opener,
        **kwargs,
    )


def test_token_reused_within_validity_window():
    opener = FakeOpener({'access_token': 'tok-1', 'expires_in': 3600})
    clock = FakeClock()
    cache = make_cache(opener, clock)

    assert cache.get_token() == 'tok-1'
    clock.now += 3599
    assert cache.get_token() == 'tok-1'
    assert len(opener.requests) == 1
    assert cache.expires_at == pytest.approx(1_000.0 + 3600)


def test_token_refreshed_once_after_expiry():
    opener = FakeOpener(
        {'access_token': 'tok-1', 'expires_in': 60},
        {'access_token': 'tok-2', 'expires_in': 60},
    )
    clock = FakeClock()
    cache = make_cache(opener, clock)

    assert cache.get_token() == 'tok-1'
    clock.now += 60
    assert cache.get_token() == 'tok-2'
    assert cache.get_token() == 'tok-2'
    assert len(opener.requests) == 2


def test_exchange_sends_credentials_as_query_parameters():
    opener = FakeOpener({'access_token': 'tok', 'expires_in': 10})
    cache = make_cache(opener, timeout=5.0)

    cache.get_token()

    request = opener.requests[0]
    parts = urlsplit(request.full_url)
    assert f"{parts.scheme}://{parts.netloc}{parts.path}" == TokenCache.TOKEN_URL
    params = parse_qs(parts.query)
    assert params == {
        'client_id': ['client-abc'],
        'client_secret': ['secret-xyz'],
        'grant_type': ['client_credentials'],
    }
    assert request.get_method() == 'POST'
    assert opener.timeouts == [5.0]


def test_invalidate_forces_new_exchange():
    opener = FakeOpener(
        {'access_token': 'tok-1', 'expires_in': 3600},
        {'access_token': 'tok-2', 'expires_in': 3600},
    )
    cache = make_cache(opener)

    cache.get_token()
    cache.invalidate()
    assert cache.get_token() == 'tok-2'


def test_missing_credentials_raise_without_network_call():
    opener = FakeOpener()
    cache = make_cache(opener, client_secret='')

    with pytest.raises(AuthError):
        cache.get_token()
    assert opener.requests == []


def test_http_error_raises_auth_error():
    opener = FakeOpener(http_error(TokenCache.TOKEN_URL, 400, b'invalid client'))
    cache = make_cache(opener)

    with pytest.raises(AuthError) as excinfo:
        cache.get_token()
    assert '400' in str(excinfo.value)
    assert 'invalid client' in str(excinfo.value)


def test_network_error_raises_auth_error():
    opener = FakeOpener(OSError('connection refused'))
    cache = make_cache(opener)

    with pytest.raises(AuthError) as excinfo:
        cache.get_token()
    assert isinstance(excinfo.value.__cause__, OSError)


@pytest.mark.parametrize(
    'body',
    [
        b'not json',
        {'expires_in': 60},
        {'access_token': 'tok'},
        {'access_token': 'tok', 'expires_in': 'soon'},
        ['tok'],
    ],
)
def test_malformed_response_raises_auth_error(body):
    cache = make_cache(FakeOpener(body))

    with pytest.raises(AuthError):
        cache.get_token()


def test_expired_token_not_returned_when_refresh_fails():
    opener = FakeOpener(
        {'access_token': 'tok-1', 'expires_in': 10},
        http_error(TokenCache.TOKEN_URL, 500),
    )
    clock = FakeClock()
    cache = make_cache(opener, clock)

    cache.get_token()
    clock.now += 11
    with pytest.raises(AuthError):
        cache.get_token()
