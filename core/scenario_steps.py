"""
Scenario Steps — The cart update sequences of the multiple shipping addresses tutorial.

Scenario 1: Setting the shipping address quantity when the line item is already in the cart
    add-itemShippingAddresses     two item shipping addresses on the cart
    setLineItemShippingDetails    distribute the line item quantity over both addresses

Scenario 2: Setting the shipping address quantity when managing a line item
    (prerequisite)                remove the line item entirely, the cart becomes empty
    addLineItem                   add a line item with its shipping details in one request
    removeLineItem                reduce the quantity together with the shipping details quantity
    changeLineItemQuantity        set absolute quantities

The request and response snapshot names match the files the tutorial
documentation refers to.
"""

from typing import List

from .drafts import (
    Address,
    AddItemShippingAddress,
    AddLineItem,
    CartUpdate,
    ChangeLineItemQuantity,
    ItemShippingDetailsDraft,
    ItemShippingTarget,
    RemoveLineItem,
    SetLineItemShippingDetails,
)
from .pipeline import MutationStep

LINE_ITEM_ID = "lineItemId"
PRODUCT_ID = "productId"
FIRST_LINE_ITEM_ID_PATH = "lineItems[0].id"


def allocate(quantity: int, address_keys: List[str], first_share: float) -> ItemShippingDetailsDraft:
    """Split quantity between two addresses; the second address gets the remainder.

    Targets with a zero quantity are left out.
    """
    first = int(quantity * first_share)
    targets = [
        ItemShippingTarget(address_keys[0], first),
        ItemShippingTarget(address_keys[1], quantity - first),
    ]
    return ItemShippingDetailsDraft([t for t in targets if t.quantity > 0])


def existing_line_item_steps(
    addresses: List[Address],
    quantity: int,
    first_share: float,
) -> List[MutationStep]:
    """Scenario 1 steps. Requires the lineItemId of the cart's line item."""
    address_keys = [a.key for a in addresses]

    def add_addresses(version, refs):
        return CartUpdate(version, [AddItemShippingAddress(a) for a in addresses])

    def set_shipping_details(version, refs):
        return CartUpdate(version, [
            SetLineItemShippingDetails(
                line_item_id=refs[LINE_ITEM_ID],
                shipping_details=allocate(quantity, address_keys, first_share),
            )
        ])

    return [
        MutationStep(
            name="add item shipping addresses",
            build=add_addresses,
            request_artifact="add-itemShippingAddresses",
            artifact="cartWithItemShippingAddresses",
        ),
        MutationStep(
            name="set line item shipping details",
            build=set_shipping_details,
            requires=(LINE_ITEM_ID,),
            request_artifact="setLineItemShippingDetails",
            artifact="cartWithItemShippingDetailsSet",
        ),
    ]


def managed_line_item_steps(
    address_keys: List[str],
    quantity: int,
    first_share: float,
) -> List[MutationStep]:
    """Scenario 2 steps. Requires lineItemId and productId.

    The line item added in the second step gets a new id; every later step
    uses that one, never the id of the removed line item.
    """
    reduce_by = max(1, quantity // 10)
    changed_quantity = max(1, quantity // 2)

    def remove_line_item(version, refs):
        return CartUpdate(version, [RemoveLineItem(line_item_id=refs[LINE_ITEM_ID])])

    def add_line_item(version, refs):
        return CartUpdate(version, [
            AddLineItem(
                product_id=refs[PRODUCT_ID],
                quantity=quantity,
                shipping_details=allocate(quantity, address_keys, first_share),
            )
        ])

    def reduce_quantity(version, refs):
        return CartUpdate(version, [
            RemoveLineItem(
                line_item_id=refs[LINE_ITEM_ID],
                quantity=reduce_by,
                shipping_details_to_remove=allocate(reduce_by, address_keys, first_share),
            )
        ])

    def change_quantity(version, refs):
        return CartUpdate(version, [
            ChangeLineItemQuantity(
                line_item_id=refs[LINE_ITEM_ID],
                quantity=changed_quantity,
                shipping_details=allocate(changed_quantity, address_keys, first_share),
            )
        ])

    return [
        MutationStep(
            name="remove line item",
            build=remove_line_item,
            requires=(LINE_ITEM_ID,),
            invalidates=(LINE_ITEM_ID,),
            artifact="cartReadyForAddLineItem",
        ),
        MutationStep(
            name="add line item with shipping details",
            build=add_line_item,
            requires=(PRODUCT_ID,),
            extracts={LINE_ITEM_ID: FIRST_LINE_ITEM_ID_PATH},
            request_artifact="addLineItem",
            artifact="cartWithAddedLineItem",
        ),
        MutationStep(
            name="reduce line item quantity",
            build=reduce_quantity,
            requires=(LINE_ITEM_ID,),
            request_artifact="removeLineItem",
            artifact="cartWithRemovedLineItem",
        ),
        MutationStep(
            name="change line item quantity",
            build=change_quantity,
            requires=(LINE_ITEM_ID,),
            request_artifact="changeLineItemQuantity",
            artifact="cartWithChangedLineItemQuantity",
        ),
    ]
