"""Shared fixtures: an in-memory stand-in for the commercetools cart endpoints.

FakeCartPlatform follows the platform rules the scenarios rely on:
  - every update must carry the cart's current version (else HTTP 409)
  - each successful update increments the version by one
  - added line items get fresh ids
  - changing a quantity below the shipping target total without new
    shipping details is rejected (HTTP 400)
"""

import copy
import itertools

import pytest

from core.errors import ApiError, ConcurrentModificationError


def _body(draft):
    return draft.to_dict() if hasattr(draft, "to_dict") else draft


def _target_total(details):
    return sum(t["quantity"] for t in (details or {}).get("targets", []))


class FakeCartPlatform:

    def __init__(self):
        self.carts = {}
        self.updates = []
        self._ids = itertools.count(1)

    def _new_id(self, prefix):
        return f"{prefix}-{next(self._ids)}"

    def _line_item(self, product_id, quantity, shipping_details=None):
        item = {"id": self._new_id("li"), "productId": product_id, "quantity": quantity}
        if shipping_details:
            item["shippingDetails"] = self._details(shipping_details, quantity)
        return item

    @staticmethod
    def _details(details, quantity):
        targets = [dict(t) for t in details["targets"]]
        return {"targets": targets, "valid": _target_total(details) == quantity}

    def _error(self, status, message, **extra):
        error = {"code": "InvalidOperation", "message": message}
        error.update(extra)
        cls = ConcurrentModificationError if status == 409 else ApiError
        return cls(status, "POST", "https://api.test/project/carts", {"errors": [error]})

    def create_cart(self, draft):
        body = _body(draft)
        cart = {
            "id": self._new_id("cart"),
            "version": 1,
            "lineItems": [
                self._line_item(li["productId"], li["quantity"], li.get("shippingDetails"))
                for li in body.get("lineItems", [])
            ],
            "itemShippingAddresses": [],
        }
        self.carts[cart["id"]] = cart
        return copy.deepcopy(cart)

    def update_cart(self, cart_id, update):
        body = _body(update)
        self.updates.append((cart_id, copy.deepcopy(body)))
        cart = copy.deepcopy(self.carts[cart_id])
        if body["version"] != cart["version"]:
            raise self._error(
                409,
                f"Object {cart_id} has a different version than expected.",
                currentVersion=cart["version"],
            )
        for action in body["actions"]:
            getattr(self, f"_apply_{action['action']}")(cart, action)
        cart["version"] += 1
        self.carts[cart_id] = cart
        return copy.deepcopy(cart)

    def _find(self, cart, line_item_id):
        for item in cart["lineItems"]:
            if item["id"] == line_item_id:
                return item
        raise self._error(400, f"A line item with ID '{line_item_id}' not found.")

    def _apply_addItemShippingAddress(self, cart, action):
        cart["itemShippingAddresses"].append(dict(action["address"]))

    def _apply_setLineItemShippingDetails(self, cart, action):
        item = self._find(cart, action["lineItemId"])
        item["shippingDetails"] = self._details(action["shippingDetails"], item["quantity"])

    def _apply_addLineItem(self, cart, action):
        cart["lineItems"].append(
            self._line_item(action["productId"], action["quantity"], action.get("shippingDetails"))
        )

    def _apply_removeLineItem(self, cart, action):
        item = self._find(cart, action["lineItemId"])
        quantity = action.get("quantity")
        if quantity is None or quantity >= item["quantity"]:
            cart["lineItems"].remove(item)
            return
        item["quantity"] -= quantity
        to_remove = {t["addressKey"]: t["quantity"] for t in action.get("shippingDetailsToRemove", {}).get("targets", [])}
        if "shippingDetails" in item:
            targets = []
            for target in item["shippingDetails"]["targets"]:
                remaining = target["quantity"] - to_remove.get(target["addressKey"], 0)
                if remaining > 0:
                    targets.append({"addressKey": target["addressKey"], "quantity": remaining})
            item["shippingDetails"] = self._details({"targets": targets}, item["quantity"])

    def _apply_changeLineItemQuantity(self, cart, action):
        item = self._find(cart, action["lineItemId"])
        if "shippingDetails" in action:
            item["quantity"] = action["quantity"]
            item["shippingDetails"] = self._details(action["shippingDetails"], action["quantity"])
            return
        if _target_total(item.get("shippingDetails")) > action["quantity"]:
            raise self._error(400, "The sum of the shipping target quantities exceeds the line item quantity.")
        item["quantity"] = action["quantity"]


@pytest.fixture
def platform():
    return FakeCartPlatform()


@pytest.fixture
def cart(platform):
    return platform.create_cart({
        "currency": "EUR",
        "country": "DE",
        "lineItems": [{"productId": "prod-1", "quantity": 100}],
    })


@pytest.fixture
def platform_factory():
    return FakeCartPlatform
