"""
Square Online Checkout client.

Creates a hosted payment link for already-priced line items. Prices and names
sent here always come from the catalog cache, never from the browser.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx

from menu_site.error_handler import CheckoutSessionFailed
from menu_site.integrations.clients.real_http.square_http import SquareHTTP
from menu_site.integrations.contracts.checkout import (
    PaymentLinkProvider,
    PaymentLinkRequest,
    PaymentLinkResponse,
)
from menu_site.integrations.policy.response_wrappers import (
    IntegrationResponseError,
    normalize_payment_link_response,
)
from menu_site.utils.site_config_loader import SquareConfig

logger = logging.getLogger(__name__)


class SquarePaymentLinkClient(PaymentLinkProvider):
    def __init__(
        self,
        access_token: str,
        *,
        location_id: Optional[str] = None,
        environment: str = "sandbox",
        api_version: str = "2024-10-17",
        timeout_seconds: float = 15.0,
        base_url: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.location_id = (location_id or "").strip() or None
        self.http = SquareHTTP(
            access_token,
            environment=environment,
            api_version=api_version,
            timeout_seconds=timeout_seconds,
            base_url=base_url,
            transport=transport,
        )

    @classmethod
    def from_config(cls, cfg: SquareConfig, **kwargs) -> "SquarePaymentLinkClient":
        kwargs.setdefault("base_url", cfg.base_url)
        return cls(
            cfg.access_token,
            location_id=cfg.location_id,
            environment=cfg.environment,
            api_version=cfg.api_version,
            timeout_seconds=cfg.timeout_seconds,
            **kwargs,
        )

    def build_payload(self, request: PaymentLinkRequest) -> Dict[str, Any]:
        return {
            "idempotency_key": request.idempotency_key,
            "order": {
                "location_id": self.location_id,
                "line_items": [
                    {
                        "name": li.name,
                        "quantity": str(li.quantity),
                        "base_price_money": {"amount": li.unit_price_cents, "currency": request.currency},
                        "catalog_object_id": li.catalog_reference_id,
                    }
                    for li in request.line_items
                ],
            },
            "checkout_options": {"redirect_url": request.redirect_url},
        }

    async def create_payment_link(self, request: PaymentLinkRequest) -> PaymentLinkResponse:
        if not self.location_id:
            logger.error("SQUARE_LOCATION_ID is required to create payment links")
            raise CheckoutSessionFailed("SQUARE_LOCATION_ID is not set")

        async with self.http.client() as client:
            raw = await self.http.request(
                client,
                "POST",
                "/v2/online-checkout/payment-links",
                json=self.build_payload(request),
                error_cls=CheckoutSessionFailed,
            )

        try:
            response = normalize_payment_link_response(raw)
        except IntegrationResponseError as e:
            raise CheckoutSessionFailed(f"Malformed payment link response: {e}") from e

        logger.info("Created Square payment link %s (order %s)", response.link_id, response.order_id)
        return response
