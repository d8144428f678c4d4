"""
Cart resolution and checkout assembly.

The browser submits ``[{id, qty}]``. Everything else (names, prices, stock)
is re-derived from the catalog cache so a tampered cart can only ever change
which variations are bought and how many.
"""

from __future__ import annotations

import logging
import math
import re
import uuid
from typing import Any, List

from menu_site.error_handler import (
    CheckoutSessionFailed,
    EmptyCart,
    InvalidLineItem,
    NoValidItems,
    SourceUnavailable,
)
from menu_site.integrations.contracts.checkout import (
    CartLine,
    CheckoutLineItem,
    CheckoutSession,
    PaymentLinkProvider,
    PaymentLinkRequest,
    order_total_cents,
)
from menu_site.merch.lookup import MerchLookupService

logger = logging.getLogger(__name__)

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")
MAX_IDEMPOTENCY_KEY_LENGTH = 192


def coerce_quantity(value: Any) -> int:
    """Integer prefix of ``value`` (``"2 shirts"`` -> 2, ``2.9`` -> 2); 0 when there is none."""
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else 0
    if isinstance(value, str):
        match = _LEADING_INT.match(value)
        return int(match.group(1)) if match else 0
    return 0


def parse_cart_line(raw: Any) -> CartLine:
    if not isinstance(raw, dict):
        raise InvalidLineItem("cart line is not an object", context={"line": raw})
    variation_id = raw.get("id")
    if not isinstance(variation_id, str) or not variation_id.strip():
        raise InvalidLineItem("cart line has no id", context={"line": raw})
    quantity = coerce_quantity(raw.get("qty"))
    if quantity <= 0:
        raise InvalidLineItem("cart line quantity must be positive", context={"line": raw})
    return CartLine(variation_id=variation_id.strip(), quantity=quantity)


class CheckoutAssembler:
    def __init__(
        self,
        lookup: MerchLookupService,
        payment_links: PaymentLinkProvider,
        *,
        currency: str = "USD",
        redirect_url: str = "https://menuband.com",
        block_out_of_stock: bool = True,
    ) -> None:
        self.lookup = lookup
        self.payment_links = payment_links
        self.currency = currency
        self.redirect_url = redirect_url
        self.block_out_of_stock = block_out_of_stock

    async def resolve_line_items(self, cart_lines: Any) -> List[CheckoutLineItem]:
        """
        Validate the submitted cart and price it from the catalog.

        Bad lines are logged and skipped; the cart fails only when it is not a
        non-empty list (``EmptyCart``) or when nothing survives (``NoValidItems``).
        """
        if not isinstance(cart_lines, list) or not cart_lines:
            raise EmptyCart()

        line_items: List[CheckoutLineItem] = []
        for raw in cart_lines:
            try:
                line_items.append(await self._resolve_line(raw))
            except InvalidLineItem as e:
                logger.warning("Skipping invalid merch item in checkout: %s (%s)", e, e.context)

        if not line_items:
            raise NoValidItems()
        return line_items

    async def build_checkout_session(
        self,
        cart_lines: Any,
        idempotency_key: Any = None,
    ) -> CheckoutSession:
        try:
            line_items = await self.resolve_line_items(cart_lines)
        except SourceUnavailable as e:
            raise CheckoutSessionFailed("catalog unavailable during checkout") from e

        key = self._idempotency_key(idempotency_key)
        request = PaymentLinkRequest(
            idempotency_key=key,
            line_items=line_items,
            currency=self.currency,
            redirect_url=self.redirect_url,
        )
        logger.info(
            "Creating payment link: %d line items, total=%d %s, key=%s",
            len(line_items),
            order_total_cents(line_items),
            self.currency,
            key,
        )
        response = await self.payment_links.create_payment_link(request)
        return CheckoutSession(url=response.url, idempotency_key=key, line_items=tuple(line_items))

    async def _resolve_line(self, raw: Any) -> CheckoutLineItem:
        line = parse_cart_line(raw)
        merch = await self.lookup.find_variation(line.variation_id)
        if merch is None or merch.price_cents <= 0:
            raise InvalidLineItem("unknown or unpriced variation", context={"id": line.variation_id})
        if self.block_out_of_stock and not merch.in_stock:
            raise InvalidLineItem("variation is out of stock", context={"id": line.variation_id})
        return CheckoutLineItem(
            name=merch.name,
            quantity=line.quantity,
            unit_price_cents=merch.price_cents,
            catalog_reference_id=merch.id,
        )

    @staticmethod
    def _idempotency_key(candidate: Any) -> str:
        if isinstance(candidate, str):
            candidate = candidate.strip()
            if 0 < len(candidate) <= MAX_IDEMPOTENCY_KEY_LENGTH:
                return candidate
            logger.warning("Ignoring malformed idempotency key of length %d", len(candidate))
        elif candidate is not None:
            logger.warning("Ignoring non-string idempotency key of type %s", type(candidate).__name__)
        return str(uuid.uuid4())
