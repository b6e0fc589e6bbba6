"""
Request Drafts — Typed builders for commercetools request bodies.

Each draft is a dataclass whose to_dict() renders the JSON body the API
expects (camelCase keys, unset optional fields omitted). Version and
references are plain fields, so there is no template text to substitute into.

    CartUpdate(version=3, actions=[
        SetLineItemShippingDetails(
            line_item_id="9b7c...",
            shipping_details=ItemShippingDetailsDraft([
                ItemShippingTarget("berlin", 30),
                ItemShippingTarget("munich", 70),
            ]),
        ),
    ]).to_dict()
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


def _compact(data: Dict[str, Any]) -> Dict[str, Any]:
    """Drop keys whose value is None."""
    return {k: v for k, v in data.items() if v is not None}


def _reference(type_id: str, resource_id: str) -> Dict[str, str]:
    return {"typeId": type_id, "id": resource_id}


# ---------------------------------------------------------------------------
# Addresses and shipping details
# ---------------------------------------------------------------------------

@dataclass
class Address:
    key: str
    country: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    street_name: Optional[str] = None
    street_number: Optional[str] = None
    postal_code: Optional[str] = None
    city: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Address":
        return cls(
            key=data["key"],
            country=data["country"],
            first_name=data.get("firstName"),
            last_name=data.get("lastName"),
            street_name=data.get("streetName"),
            street_number=data.get("streetNumber"),
            postal_code=data.get("postalCode"),
            city=data.get("city"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return _compact({
            "key": self.key,
            "firstName": self.first_name,
            "lastName": self.last_name,
            "streetName": self.street_name,
            "streetNumber": self.street_number,
            "postalCode": self.postal_code,
            "city": self.city,
            "country": self.country,
        })


@dataclass
class ItemShippingTarget:
    address_key: str
    quantity: int

    def to_dict(self) -> Dict[str, Any]:
        return {"addressKey": self.address_key, "quantity": self.quantity}


@dataclass
class ItemShippingDetailsDraft:
    targets: List[ItemShippingTarget] = field(default_factory=list)

    @property
    def total_quantity(self) -> int:
        return sum(t.quantity for t in self.targets)

    def to_dict(self) -> Dict[str, Any]:
        return {"targets": [t.to_dict() for t in self.targets]}


# ---------------------------------------------------------------------------
# Setup drafts (product type, tax category, product)
# ---------------------------------------------------------------------------

@dataclass
class ProductTypeDraft:
    name: str
    description: str

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "description": self.description}


@dataclass
class TaxRateDraft:
    name: str
    amount: float
    included_in_price: bool
    country: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "amount": self.amount,
            "includedInPrice": self.included_in_price,
            "country": self.country,
        }


@dataclass
class TaxCategoryDraft:
    name: str
    rates: List[TaxRateDraft] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "rates": [r.to_dict() for r in self.rates]}


@dataclass
class ProductDraft:
    product_type_id: str
    tax_category_id: str
    name: Dict[str, str]
    slug: Dict[str, str]
    currency_code: str
    cent_amount: int
    publish: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return {
            "productType": _reference("product-type", self.product_type_id),
            "name": self.name,
            "slug": self.slug,
            "taxCategory": _reference("tax-category", self.tax_category_id),
            "masterVariant": {
                "prices": [
                    {"value": {"currencyCode": self.currency_code, "centAmount": self.cent_amount}}
                ]
            },
            "publish": self.publish,
        }


# ---------------------------------------------------------------------------
# Cart drafts and update actions
# ---------------------------------------------------------------------------

@dataclass
class LineItemDraft:
    product_id: str
    quantity: int
    shipping_details: Optional[ItemShippingDetailsDraft] = None

    def to_dict(self) -> Dict[str, Any]:
        return _compact({
            "productId": self.product_id,
            "quantity": self.quantity,
            "shippingDetails": self.shipping_details.to_dict() if self.shipping_details else None,
        })


@dataclass
class CartDraft:
    currency: str
    country: Optional[str] = None
    line_items: List[LineItemDraft] = field(default_factory=list)
    item_shipping_addresses: List[Address] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        body = _compact({"currency": self.currency, "country": self.country})
        if self.line_items:
            body["lineItems"] = [li.to_dict() for li in self.line_items]
        if self.item_shipping_addresses:
            body["itemShippingAddresses"] = [a.to_dict() for a in self.item_shipping_addresses]
        return body


@dataclass
class AddItemShippingAddress:
    address: Address
    action: str = field(default="addItemShippingAddress", init=False)

    def to_dict(self) -> Dict[str, Any]:
        return {"action": self.action, "address": self.address.to_dict()}


@dataclass
class SetLineItemShippingDetails:
    line_item_id: str
    shipping_details: Optional[ItemShippingDetailsDraft] = None
    action: str = field(default="setLineItemShippingDetails", init=False)

    def to_dict(self) -> Dict[str, Any]:
        return _compact({
            "action": self.action,
            "lineItemId": self.line_item_id,
            "shippingDetails": self.shipping_details.to_dict() if self.shipping_details else None,
        })


@dataclass
class AddLineItem:
    product_id: str
    quantity: int
    shipping_details: Optional[ItemShippingDetailsDraft] = None
    action: str = field(default="addLineItem", init=False)

    def to_dict(self) -> Dict[str, Any]:
        return _compact({
            "action": self.action,
            "productId": self.product_id,
            "quantity": self.quantity,
            "shippingDetails": self.shipping_details.to_dict() if self.shipping_details else None,
        })


@dataclass
class RemoveLineItem:
    """Remove a line item entirely, or only `quantity` of it.

    When the line item has shipping details, shipping_details_to_remove says
    which address targets the removed quantity is taken from.
    """
    line_item_id: str
    quantity: Optional[int] = None
    shipping_details_to_remove: Optional[ItemShippingDetailsDraft] = None
    action: str = field(default="removeLineItem", init=False)

    def to_dict(self) -> Dict[str, Any]:
        return _compact({
            "action": self.action,
            "lineItemId": self.line_item_id,
            "quantity": self.quantity,
            "shippingDetailsToRemove": (
                self.shipping_details_to_remove.to_dict()
                if self.shipping_details_to_remove else None
            ),
        })


@dataclass
class ChangeLineItemQuantity:
    line_item_id: str
    quantity: int
    shipping_details: Optional[ItemShippingDetailsDraft] = None
    action: str = field(default="changeLineItemQuantity", init=False)

    def to_dict(self) -> Dict[str, Any]:
        return _compact({
            "action": self.action,
            "lineItemId": self.line_item_id,
            "quantity": self.quantity,
            "shippingDetails": self.shipping_details.to_dict() if self.shipping_details else None,
        })


@dataclass
class CartUpdate:
    version: int
    actions: List[Any] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"version": self.version, "actions": [a.to_dict() for a in self.actions]}
