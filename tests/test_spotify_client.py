import httpx
import pytest

from menu_site.error_handler import SourceUnavailable
from menu_site.integrations.clients.real_http.spotify import SpotifyClient


class SpotifyStub:
    def __init__(self, albums=None, token_status=200):
        self.token_calls = 0
        self.album_calls = 0
        self.albums = albums if albums is not None else [{"id": "ALB1", "name": "New Single"}]
        self.token_status = token_status

    def __call__(self, request: httpx.Request) -> httpx.Response:
        if request.url.host == "accounts.spotify.com":
            self.token_calls += 1
            if self.token_status != 200:
                return httpx.Response(self.token_status, json={"error": "invalid_client"})
            return httpx.Response(200, json={"access_token": f"tok-{self.token_calls}", "expires_in": 3600})
        self.album_calls += 1
        assert request.headers["Authorization"] == f"Bearer tok-{self.token_calls}"
        assert request.url.params["include_groups"] == "single,album"
        assert request.url.params["limit"] == "1"
        return httpx.Response(200, json={"items": self.albums})


def _client(stub, clock):
    return SpotifyClient("id", "secret", clock=clock, transport=httpx.MockTransport(stub))


@pytest.mark.asyncio
async def test_latest_release_returns_first_album(clock):
    stub = SpotifyStub()

    latest = await _client(stub, clock).get_latest_release("ARTIST")

    assert latest == {"id": "ALB1", "name": "New Single"}


@pytest.mark.asyncio
async def test_token_is_reused_until_close_to_expiry(clock):
    stub = SpotifyStub()
    client = _client(stub, clock)

    await client.get_latest_release("ARTIST")
    clock.advance(3000)
    await client.get_latest_release("ARTIST")
    assert stub.token_calls == 1

    clock.advance(560)  # inside the 60s renewal margin
    await client.get_latest_release("ARTIST")
    assert stub.token_calls == 2


@pytest.mark.asyncio
async def test_no_releases_returns_none(clock):
    assert await _client(SpotifyStub(albums=[]), clock).get_latest_release("ARTIST") is None


@pytest.mark.asyncio
async def test_token_failure_is_source_unavailable(clock):
    with pytest.raises(SourceUnavailable):
        await _client(SpotifyStub(token_status=400), clock).get_latest_release("ARTIST")


@pytest.mark.asyncio
async def test_missing_credentials_is_source_unavailable(clock):
    client = SpotifyClient("", "", clock=clock, transport=httpx.MockTransport(SpotifyStub()))

    with pytest.raises(SourceUnavailable):
        await client.get_latest_release("ARTIST")
