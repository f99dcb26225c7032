"""Shipping fee rules: a flat fee below the free-shipping threshold, free at or above it."""
from storefront.core.constants import FREE_SHIPPING_THRESHOLD, SHIPPING_FEE


def shipping_fee(subtotal: int) -> int:
    return 0 if subtotal >= FREE_SHIPPING_THRESHOLD else SHIPPING_FEE


def remaining_for_free_shipping(subtotal: int) -> int:
    """How much more the customer must add to qualify (0 once free)."""
    return max(0, FREE_SHIPPING_THRESHOLD - subtotal)
