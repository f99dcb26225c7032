"""Tests for the shipping fee rules."""

import pytest

from storefront.services.shipping import remaining_for_free_shipping, shipping_fee


@pytest.mark.parametrize(
    "subtotal,fee",
    [(0, 3000), (1, 3000), (40000, 3000), (49999, 3000), (50000, 0), (120000, 0)],
)
def test_shipping_fee_step(subtotal, fee):
    assert shipping_fee(subtotal) == fee


def test_remaining_for_free_shipping():
    assert remaining_for_free_shipping(40000) == 10000
    assert remaining_for_free_shipping(50000) == 0
    assert remaining_for_free_shipping(75000) == 0
