"""
Checkout contracts.

Defines the request/response structures for creating a hosted payment link:
- cart lines as submitted by the browser (untrusted)
- priced line items resolved on the server
- the payment-link request/response exchanged with the provider

These contracts must be used by both:
- clients/mocks/payment_links.py (fake links for development/testing)
- clients/real_http/square_checkout.py (Square Online Checkout API)
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Tuple


@dataclass(frozen=True)
class CartLine:
    variation_id: str
    quantity: int


@dataclass(frozen=True)
class CheckoutLineItem:
    name: str
    quantity: int
    unit_price_cents: int
    catalog_reference_id: str


@dataclass
class PaymentLinkRequest:
    idempotency_key: str
    line_items: List[CheckoutLineItem]
    currency: str
    redirect_url: str


@dataclass
class PaymentLinkResponse:
    url: str
    link_id: str = ""
    order_id: str = ""


@dataclass(frozen=True)
class CheckoutSession:
    url: str
    idempotency_key: str
    line_items: Tuple[CheckoutLineItem, ...]


class PaymentLinkProvider(ABC):
    """Every hosted-checkout client must implement this interface."""

    @abstractmethod
    async def create_payment_link(self, request: PaymentLinkRequest) -> PaymentLinkResponse:
        """Create a hosted payment page for the given line items."""


def order_total_cents(line_items: List[CheckoutLineItem]) -> int:
    return sum(li.unit_price_cents * li.quantity for li in line_items)
