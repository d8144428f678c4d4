"""
Shared plumbing for the Square REST clients.

Holds the base URL, auth headers and per-call timeout, and turns transport
errors, non-2xx responses and non-JSON bodies into one of our error types.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Type

import httpx

from menu_site.error_handler import MerchError
from menu_site.integrations.policy.response_wrappers import describe_provider_errors
from menu_site.utils.site_config_loader import SQUARE_BASE_URLS

logger = logging.getLogger(__name__)


class SquareHTTP:
    def __init__(
        self,
        access_token: str,
        *,
        environment: str = "sandbox",
        api_version: str = "2024-10-17",
        timeout_seconds: float = 15.0,
        base_url: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.access_token = access_token or ""
        self.base_url = (base_url or SQUARE_BASE_URLS.get(environment, SQUARE_BASE_URLS["sandbox"])).rstrip("/")
        self.api_version = api_version
        self.timeout_seconds = timeout_seconds
        self._transport = transport
        if not self.access_token:
            logger.warning("Square access token is not set.")

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout_seconds,
            transport=self._transport,
            headers={
                "Authorization": f"Bearer {self.access_token}",
                "Square-Version": self.api_version,
                "Content-Type": "application/json",
                "Accept": "application/json",
            },
        )

    async def request(
        self,
        client: httpx.AsyncClient,
        method: str,
        path: str,
        *,
        error_cls: Type[MerchError],
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        if not self.access_token:
            raise error_cls("SQUARE_ACCESS_TOKEN is not configured.", context={"path": path})
        try:
            response = await client.request(method, path, params=params, json=json)
        except httpx.RequestError as e:
            logger.error("Request error calling Square %s %s: %s", method, path, e)
            raise error_cls(f"Square request failed: {e}", context={"path": path}) from e

        if response.status_code >= 400:
            detail = describe_provider_errors(_safe_json(response))
            logger.error("Square %s %s returned %s: %s", method, path, response.status_code, detail)
            raise error_cls(
                f"Square returned HTTP {response.status_code}",
                context={"path": path, "status": response.status_code, "errors": detail},
            )

        body = _safe_json(response)
        if not isinstance(body, dict):
            raise error_cls("Square returned a non-JSON body", context={"path": path})
        return body


def _safe_json(response: httpx.Response) -> Any:
    if not response.content:
        return {}
    try:
        return response.json()
    except ValueError:
        return None
