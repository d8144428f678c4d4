from .cart_resolver import CheckoutAssembler, coerce_quantity, parse_cart_line

__all__ = ["CheckoutAssembler", "coerce_quantity", "parse_cart_line"]
