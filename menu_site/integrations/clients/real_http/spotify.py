"""
Spotify Web API client (latest release only).

Uses the client-credentials flow. The access token is cached in memory and
renewed a minute before it expires.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Callable, Dict, Optional

import httpx

from menu_site.error_handler import SourceUnavailable
from menu_site.utils.site_config_loader import SpotifyConfig

logger = logging.getLogger(__name__)

TOKEN_URL = "https://accounts.spotify.com/api/token"
API_BASE_URL = "https://api.spotify.com/v1"
TOKEN_REFRESH_MARGIN_SECONDS = 60


class SpotifyClient:
    def __init__(
        self,
        client_id: str,
        client_secret: str,
        *,
        market: str = "US",
        timeout_seconds: float = 10.0,
        clock: Callable[[], float] = time.monotonic,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.client_id = client_id
        self.client_secret = client_secret
        self.market = market
        self.timeout_seconds = timeout_seconds
        self._clock = clock
        self._transport = transport
        self._token: Optional[str] = None
        self._token_expires_at = 0.0

    @classmethod
    def from_config(cls, cfg: SpotifyConfig, **kwargs) -> "SpotifyClient":
        return cls(cfg.client_id, cfg.client_secret, market=cfg.market, timeout_seconds=cfg.timeout_seconds, **kwargs)

    @property
    def configured(self) -> bool:
        return bool(self.client_id and self.client_secret)

    async def get_latest_release(self, artist_id: str) -> Optional[Dict[str, Any]]:
        async with httpx.AsyncClient(timeout=self.timeout_seconds, transport=self._transport) as client:
            token = await self._get_token(client)
            try:
                response = await client.get(
                    f"{API_BASE_URL}/artists/{artist_id}/albums",
                    params={"include_groups": "single,album", "market": self.market, "limit": 1},
                    headers={"Authorization": f"Bearer {token}"},
                )
                response.raise_for_status()
                data = response.json()
            except (httpx.HTTPError, ValueError) as e:
                logger.error("Spotify albums request failed for artist %s: %s", artist_id, e)
                raise SourceUnavailable("Spotify albums request failed") from e

        items = data.get("items") if isinstance(data, dict) else None
        if not items:
            return None
        return items[0]

    async def _get_token(self, client: httpx.AsyncClient) -> str:
        now = self._clock()
        if self._token and now < self._token_expires_at - TOKEN_REFRESH_MARGIN_SECONDS:
            return self._token
        if not self.configured:
            raise SourceUnavailable("SPOTIFY_CLIENT_ID / SPOTIFY_CLIENT_SECRET are not configured")

        try:
            response = await client.post(
                TOKEN_URL,
                data={"grant_type": "client_credentials"},
                auth=(self.client_id, self.client_secret),
            )
            response.raise_for_status()
            data = response.json()
            token = str(data["access_token"])
            expires_in = float(data.get("expires_in", 3600))
        except (httpx.HTTPError, ValueError, KeyError, TypeError) as e:
            logger.error("Spotify token request failed: %s", e)
            raise SourceUnavailable("Spotify token request failed") from e

        self._token = token
        self._token_expires_at = now + expires_in
        return token
