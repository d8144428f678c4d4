"""Error taxonomy for the merch pipeline and its translation to HTTP payloads."""
from typing import Any, Dict, Optional, Tuple
import logging

logger = logging.getLogger(__name__)


class MerchError(Exception):
    """Base class for every failure raised by the merch/checkout pipeline."""

    status_code = 500
    public_message = "Something went wrong. Please try again later."

    def __init__(self, message: str = "", *, context: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message or self.public_message)
        self.context = context or {}


class SourceUnavailable(MerchError):
    """Catalog, inventory or music provider could not be reached or answered garbage."""

    status_code = 500
    public_message = "Unable to load merch right now."


class ConfigurationIncomplete(MerchError):
    """A deployment setting (e.g. the Square location id) is missing."""

    status_code = 500
    public_message = "The store is not configured yet."


class CartError(MerchError):
    status_code = 400


class EmptyCart(CartError):
    public_message = "Cart is empty."


class NoValidItems(CartError):
    public_message = "No valid cart items."


class InvalidLineItem(CartError):
    """A single cart line failed validation. Absorbed by the resolver, never returned."""

    public_message = "Invalid cart item."


class CheckoutSessionFailed(MerchError):
    status_code = 502
    public_message = "Unable to create checkout link."


class ErrorHandler:
    def to_response(self, exc: Exception, context: Optional[Dict[str, Any]] = None) -> Tuple[int, Dict[str, Any]]:
        """Map an exception to ``(status_code, {"error": message})``.

        Only the public message of the error class is exposed; provider details
        stay in the server log.
        """
        if isinstance(exc, CartError):
            logger.info("Rejected checkout request: %s", exc)
            return exc.status_code, {"error": exc.public_message}
        if isinstance(exc, MerchError):
            logger.error("%s: %s (context=%s)", type(exc).__name__, exc, {**exc.context, **(context or {})})
            return exc.status_code, {"error": exc.public_message}
        logger.error("Unhandled exception in merch API: %s", exc, exc_info=True)
        return 500, {"error": MerchError.public_message}
