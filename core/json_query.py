"""
JSON field extraction for API responses.

Paths use dotted keys with optional list indexes:

    extract(cart, "id")                 -> "2f1c..."
    extract(cart, "lineItems[0].id")    -> "9b7c..."
    extract(cart, "lineItems[0].shippingDetails.targets[1].quantity")

A missing key, out-of-range index or null value raises ExtractionError, so
an absent id or version is never passed silently to the next request.
"""

import re
from typing import Any, Dict, List, Union

from .errors import ExtractionError

_SEGMENT = re.compile(r'^([^\[\]]*)((?:\[\d+\])*)$')
_INDEX = re.compile(r'\[(\d+)\]')


def _parse(path: str) -> List[Union[str, int]]:
    if not path:
        raise ExtractionError(path, "Empty extraction path")
    tokens = []
    for segment in path.split("."):
        match = _SEGMENT.match(segment)
        if not match or (not match.group(1) and not match.group(2)):
            raise ExtractionError(path, f"Invalid extraction path '{path}'")
        if match.group(1):
            tokens.append(match.group(1))
        tokens.extend(int(i) for i in _INDEX.findall(match.group(2)))
    return tokens


def extract(document: Any, path: str) -> Any:
    """Return the value at path, raising ExtractionError if it is absent or null."""
    current = document
    for token in _parse(path):
        if isinstance(token, int):
            if not isinstance(current, list) or token >= len(current):
                raise ExtractionError(path)
        elif not isinstance(current, dict) or token not in current:
            raise ExtractionError(path)
        current = current[token]
    if current is None:
        raise ExtractionError(path)
    return current


def project_cart(cart: Dict[str, Any]) -> Dict[str, Any]:
    """Reduce a cart to the fields relevant for shipping addresses.

    {id, version, lineItems: [{id, quantity, shippingDetails}], itemShippingAddresses}
    """
    return {
        "id": cart.get("id"),
        "version": cart.get("version"),
        "lineItems": [
            {
                "id": item.get("id"),
                "quantity": item.get("quantity"),
                "shippingDetails": item.get("shippingDetails"),
            }
            for item in cart.get("lineItems") or []
        ],
        "itemShippingAddresses": cart.get("itemShippingAddresses"),
    }


def shipping_target_total(line_item: Dict[str, Any]) -> int:
    """Sum of the target quantities in a line item's shippingDetails (0 if none)."""
    details = line_item.get("shippingDetails") or {}
    return sum(t.get("quantity", 0) for t in details.get("targets") or [])
