"""
Mock Payment Link Client.

Purpose:
- Fake hosted-checkout integration for development/testing
- Does NOT make any network calls
- Records every request so tests can assert on what would have been sent

Swap:
Replaced by clients/real_http/square_checkout.py in real integrations mode.
"""

import logging
from typing import List

from menu_site.error_handler import CheckoutSessionFailed
from menu_site.integrations.contracts.checkout import (
    PaymentLinkProvider,
    PaymentLinkRequest,
    PaymentLinkResponse,
)

logger = logging.getLogger(__name__)


class MockPaymentLinkClient(PaymentLinkProvider):
    def __init__(self, base_url: str = "https://sandbox.checkout.local/pay", *, fail: bool = False) -> None:
        self.base_url = base_url.rstrip("/")
        self.fail = fail
        self.requests: List[PaymentLinkRequest] = []

    async def create_payment_link(self, request: PaymentLinkRequest) -> PaymentLinkResponse:
        self.requests.append(request)
        if self.fail:
            raise CheckoutSessionFailed("mock payment link provider configured to fail")
        link_id = f"MOCK-{request.idempotency_key[:12]}"
        logger.info("[MOCK] Payment link %s for %d line items", link_id, len(request.line_items))
        return PaymentLinkResponse(
            url=f"{self.base_url}/{request.idempotency_key}",
            link_id=link_id,
            order_id=f"ORDER-{request.idempotency_key[:12]}",
        )
