"""Domain events for the Order aggregate."""

from protean.fields import DateTime, Identifier, Integer, String

from marketplace.domain import marketplace


@marketplace.event(part_of="Order")
class OrderPlaced:
    """A checkout produced an order for one curator."""

    __version__ = "v1"

    order_id = Identifier(required=True)
    buyer_id = Identifier(required=True)
    curator_id = Identifier(required=True)
    status = String(required=True)
    payment_method = String(required=True)
    item_count = Integer(required=True)
    total_amount = Integer(required=True)
    commission = Integer(required=True)
    curator_amount = Integer(required=True)
    currency = String(required=True)
    placed_at = DateTime(required=True)


@marketplace.event(part_of="Order")
class OrderCancelled:
    """The buyer cancelled the order and its stock went back on the shelf."""

    __version__ = "v1"

    order_id = Identifier(required=True)
    buyer_id = Identifier(required=True)
    curator_id = Identifier(required=True)
    previous_status = String(required=True)
    restocked_lines = Integer(required=True)
    cancelled_at = DateTime(required=True)


@marketplace.event(part_of="Order")
class OrderStatusChanged:
    __version__ = "v1"

    order_id = Identifier(required=True)
    previous_status = String(required=True)
    new_status = String(required=True)
    changed_by = Identifier(required=True)
    changed_at = DateTime(required=True)


@marketplace.event(part_of="Order")
class PaymentIntentRecorded:
    __version__ = "v1"

    order_id = Identifier(required=True)
    payment_intent_id = String(required=True)
    amount = Integer(required=True)
    currency = String(required=True)
