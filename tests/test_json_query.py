"""Tests for core.json_query."""

import pytest

from core.errors import ExtractionError
from core.json_query import extract, project_cart, shipping_target_total

CART = {
    "id": "cart-1",
    "version": 3,
    "currency": "EUR",
    "lineItems": [
        {
            "id": "li-1",
            "quantity": 100,
            "price": {"value": {"centAmount": 4200}},
            "shippingDetails": {
                "targets": [
                    {"addressKey": "berlin", "quantity": 30},
                    {"addressKey": "munich", "quantity": 70},
                ],
                "valid": True,
            },
        }
    ],
    "itemShippingAddresses": [{"key": "berlin"}, {"key": "munich"}],
}


def test_extract_top_level():
    assert extract(CART, "id") == "cart-1"
    assert extract(CART, "version") == 3


def test_extract_indexed_path():
    assert extract(CART, "lineItems[0].id") == "li-1"
    assert extract(CART, "lineItems[0].shippingDetails.targets[1].quantity") == 70


@pytest.mark.parametrize("path", ["missing", "lineItems[1].id", "lineItems[0].nope", "id.inner"])
def test_extract_missing_raises(path):
    with pytest.raises(ExtractionError) as exc_info:
        extract(CART, path)
    assert exc_info.value.path == path


def test_extract_null_raises():
    with pytest.raises(ExtractionError):
        extract({"id": None}, "id")


@pytest.mark.parametrize("path", ["", "a..b", "a[x]"])
def test_extract_invalid_path(path):
    with pytest.raises(ExtractionError):
        extract(CART, path)


def test_project_cart_keeps_shipping_fields_only():
    projected = project_cart(CART)
    assert projected == {
        "id": "cart-1",
        "version": 3,
        "lineItems": [
            {
                "id": "li-1",
                "quantity": 100,
                "shippingDetails": CART["lineItems"][0]["shippingDetails"],
            }
        ],
        "itemShippingAddresses": CART["itemShippingAddresses"],
    }


def test_project_empty_cart():
    assert project_cart({"id": "c", "version": 1})["lineItems"] == []


def test_shipping_target_total():
    assert shipping_target_total(CART["lineItems"][0]) == 100
    assert shipping_target_total({"id": "li-2", "quantity": 5}) == 0
