import pytest

from menu_site.error_handler import (
    CheckoutSessionFailed,
    EmptyCart,
    ErrorHandler,
    NoValidItems,
    SourceUnavailable,
)


@pytest.mark.parametrize(
    "exc, status, message",
    [
        (EmptyCart(), 400, "Cart is empty."),
        (NoValidItems("all 3 lines dropped"), 400, "No valid cart items."),
        (SourceUnavailable("square 401 UNAUTHORIZED"), 500, "Unable to load merch right now."),
        (CheckoutSessionFailed("INVALID_REQUEST_ERROR"), 502, "Unable to create checkout link."),
    ],
)
def test_to_response_uses_public_message(exc, status, message):
    assert ErrorHandler().to_response(exc) == (status, {"error": message})


def test_unexpected_exception_is_generic_500():
    status, payload = ErrorHandler().to_response(RuntimeError("secret token abc"), context={"k": "v"})

    assert status == 500
    assert "secret" not in payload["error"]


def test_context_is_kept_on_the_exception():
    exc = SourceUnavailable("boom", context={"status": 503})

    assert exc.context == {"status": 503}
    assert str(exc) == "boom"
    assert str(SourceUnavailable()) == "Unable to load merch right now."
