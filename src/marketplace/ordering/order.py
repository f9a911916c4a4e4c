"""Order aggregate — one curator's share of a buyer's checkout.

A checkout spanning several curators produces one Order per curator. Prices
are captured per line at purchase time and the commission split is fixed when
the order is placed.

State machine:
    PENDING → PENDING_PAYMENT → PAID → CONFIRMED → PROCESSING → SHIPPED → DELIVERED
    PENDING_VERIFICATION → PAID | REJECTED        (manual wallet transfers)
    PAID → REFUNDED
    CANCELLED from any non-terminal state before SHIPPED
"""

from datetime import UTC, datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import (
    DateTime,
    Float,
    HasMany,
    Identifier,
    Integer,
    String,
    Text,
    ValueObject,
)

from marketplace.config import CURRENCY
from marketplace.domain import marketplace
from marketplace.ordering.events import (
    OrderCancelled,
    OrderPlaced,
    OrderStatusChanged,
    PaymentIntentRecorded,
)
from marketplace.payments.settings import MANUAL_PAYMENT_METHODS, PaymentMethod
from marketplace.shared.errors import ForbiddenError, InvalidTransitionError
from marketplace.shared.money import split_commission


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class OrderStatus(Enum):
    PENDING = "PENDING"
    PENDING_VERIFICATION = "PENDING_VERIFICATION"
    PENDING_PAYMENT = "PENDING_PAYMENT"
    PAID = "PAID"
    REJECTED = "REJECTED"
    CONFIRMED = "CONFIRMED"
    PROCESSING = "PROCESSING"
    SHIPPED = "SHIPPED"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"
    REFUNDED = "REFUNDED"


_VALID_TRANSITIONS = {
    OrderStatus.PENDING: {
        OrderStatus.PENDING_PAYMENT,
        OrderStatus.PAID,
        OrderStatus.CONFIRMED,
        OrderStatus.CANCELLED,
    },
    OrderStatus.PENDING_VERIFICATION: {
        OrderStatus.PAID,
        OrderStatus.REJECTED,
        OrderStatus.CANCELLED,
    },
    OrderStatus.PENDING_PAYMENT: {
        OrderStatus.PAID,
        OrderStatus.REJECTED,
        OrderStatus.CANCELLED,
    },
    OrderStatus.PAID: {OrderStatus.CONFIRMED, OrderStatus.CANCELLED, OrderStatus.REFUNDED},
    OrderStatus.REJECTED: {OrderStatus.CANCELLED},
    OrderStatus.CONFIRMED: {OrderStatus.PROCESSING, OrderStatus.CANCELLED},
    OrderStatus.PROCESSING: {OrderStatus.SHIPPED, OrderStatus.CANCELLED},
    OrderStatus.SHIPPED: {OrderStatus.DELIVERED},
    OrderStatus.DELIVERED: set(),  # Terminal
    OrderStatus.CANCELLED: set(),  # Terminal
    OrderStatus.REFUNDED: set(),  # Terminal
}


def initial_status(payment_method: str) -> OrderStatus:
    if payment_method in MANUAL_PAYMENT_METHODS:
        return OrderStatus.PENDING_VERIFICATION
    return OrderStatus.PENDING


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@marketplace.value_object(part_of="Order")
class ShippingAddress:
    """Delivery details captured at checkout. Every order keeps its own copy."""

    name = String(required=True, max_length=255)
    email = String(required=True, max_length=254)
    phone = String(max_length=50)
    address = String(required=True, max_length=500)
    city = String(required=True, max_length=100)
    state = String(required=True, max_length=100)
    zip_code = String(required=True, max_length=20)
    country = String(required=True, max_length=100)


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@marketplace.entity(part_of="Order")
class OrderItem:
    product_id = Identifier(required=True)
    title = String(required=True, max_length=255)
    quantity = Integer(required=True, min_value=1)
    unit_price = Integer(required=True, min_value=0)  # minor units
    size = String(max_length=50)
    color = String(max_length=50)

    @property
    def line_total(self) -> int:
        return self.unit_price * self.quantity

    @property
    def has_variant(self) -> bool:
        return bool(self.size and self.color)


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@marketplace.aggregate
class Order:
    buyer_id = Identifier(required=True)
    curator_id = Identifier(required=True)
    status = String(choices=OrderStatus, default=OrderStatus.PENDING.value)
    items = HasMany(OrderItem)
    shipping_address = ValueObject(ShippingAddress)
    total_amount = Integer(default=0, min_value=0)
    commission = Integer(default=0, min_value=0)
    curator_amount = Integer(default=0, min_value=0)
    commission_rate = Float(required=True)
    currency = String(max_length=3, default=CURRENCY)
    payment_method = String(required=True, choices=PaymentMethod)
    transaction_code = String(max_length=100)
    payment_proof = Text()
    payment_intent_id = String(max_length=255)
    cancelled_at = DateTime()
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def commission_must_reconcile_with_total(self):
        if self.items and self.total_amount != sum(item.line_total for item in self.items):
            raise ValidationError({"total_amount": ["Total must equal the sum of the line totals"]})
        if (self.commission or 0) + (self.curator_amount or 0) != (self.total_amount or 0):
            raise ValidationError({"commission": ["Commission and curator amount must add up to the total"]})

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def place(
        cls,
        buyer_id,
        curator_id,
        lines,
        shipping_address,
        payment_method,
        commission_rate,
        transaction_code=None,
        payment_proof=None,
    ):
        """Create a new order for one curator.

        Args:
            lines: List of dicts with product_id, title, quantity, unit_price
                   (minor units) and optional size and color.
            shipping_address: Dict with the ShippingAddress fields.
            commission_rate: The curator's commission rate, a fraction in [0, 1].
        """
        if not lines:
            raise ValidationError({"items": ["An order needs at least one item"]})

        items = [
            OrderItem(
                product_id=line["product_id"],
                title=line["title"],
                quantity=line["quantity"],
                unit_price=line["unit_price"],
                size=line.get("size"),
                color=line.get("color"),
            )
            for line in lines
        ]
        total = sum(item.line_total for item in items)
        commission, curator_amount = split_commission(total, commission_rate)
        now = datetime.now(UTC)

        order = cls(
            buyer_id=buyer_id,
            curator_id=curator_id,
            status=initial_status(payment_method).value,
            items=items,
            shipping_address=ShippingAddress(**shipping_address),
            total_amount=total,
            commission=commission,
            curator_amount=curator_amount,
            commission_rate=float(commission_rate),
            payment_method=payment_method,
            transaction_code=transaction_code,
            payment_proof=payment_proof,
            created_at=now,
            updated_at=now,
        )
        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                buyer_id=str(buyer_id),
                curator_id=str(curator_id),
                status=order.status,
                payment_method=payment_method,
                item_count=len(items),
                total_amount=total,
                commission=commission,
                curator_amount=curator_amount,
                currency=order.currency,
                placed_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # State transition helpers
    # -------------------------------------------------------------------
    def can_transition_to(self, target_status: OrderStatus) -> bool:
        return target_status in _VALID_TRANSITIONS.get(OrderStatus(self.status), set())

    def _assert_can_transition(self, target_status: OrderStatus):
        if not self.can_transition_to(target_status):
            raise InvalidTransitionError(
                f"Cannot change order status from {self.status} to {target_status.value}",
                status=self.status,
                target=target_status.value,
            )

    def _transition(self, target_status: OrderStatus, changed_by):
        previous = self.status
        self.status = target_status.value
        self.updated_at = datetime.now(UTC)
        self.raise_(
            OrderStatusChanged(
                order_id=str(self.id),
                previous_status=previous,
                new_status=self.status,
                changed_by=str(changed_by),
                changed_at=self.updated_at,
            )
        )

    def _assert_curator(self, curator_id):
        if str(self.curator_id) != str(curator_id):
            raise ForbiddenError("Only the curator of this order can update it")

    # -------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------
    def cancel(self, cancelled_by):
        """Buyer-initiated cancellation. Stock is restored by the caller."""
        if str(self.buyer_id) != str(cancelled_by):
            raise ForbiddenError("You can only cancel your own orders")
        if not self.can_transition_to(OrderStatus.CANCELLED):
            raise InvalidTransitionError(
                f"Cannot cancel order with status {self.status}",
                status=self.status,
            )

        previous = self.status
        now = datetime.now(UTC)
        self.status = OrderStatus.CANCELLED.value
        self.cancelled_at = now
        self.updated_at = now
        self.raise_(
            OrderCancelled(
                order_id=str(self.id),
                buyer_id=str(self.buyer_id),
                curator_id=str(self.curator_id),
                previous_status=previous,
                restocked_lines=sum(1 for item in self.items if item.has_variant),
                cancelled_at=now,
            )
        )

    def update_status(self, target_status: OrderStatus, curator_id):
        """Curator-driven progression along the transition table."""
        self._assert_curator(curator_id)
        if target_status == OrderStatus.CANCELLED:
            raise ValidationError({"status": ["Orders are cancelled through the cancel operation"]})
        self._assert_can_transition(target_status)
        self._transition(target_status, curator_id)

    def verify_payment(self, approved: bool, curator_id):
        """Approve or reject a manual wallet transfer."""
        self._assert_curator(curator_id)
        if self.payment_method not in MANUAL_PAYMENT_METHODS:
            raise ValidationError({"payment_method": ["Only wallet transfers need manual verification"]})
        if OrderStatus(self.status) != OrderStatus.PENDING_VERIFICATION:
            raise InvalidTransitionError(
                f"Order with status {self.status} is not awaiting payment verification",
                status=self.status,
            )
        self._transition(OrderStatus.PAID if approved else OrderStatus.REJECTED, curator_id)

    def record_payment_intent(self, payment_intent_id, buyer_id):
        """Attach a card gateway payment intent and wait for its confirmation."""
        if str(self.buyer_id) != str(buyer_id):
            raise ForbiddenError("You can only pay for your own orders")
        if self.payment_method != PaymentMethod.STRIPE.value:
            raise ValidationError({"payment_method": ["Payment intents apply to card payments only"]})
        self._assert_can_transition(OrderStatus.PENDING_PAYMENT)

        self.payment_intent_id = payment_intent_id
        self._transition(OrderStatus.PENDING_PAYMENT, buyer_id)
        self.raise_(
            PaymentIntentRecorded(
                order_id=str(self.id),
                payment_intent_id=payment_intent_id,
                amount=self.total_amount,
                currency=self.currency,
            )
        )

    def is_visible_to(self, user_id, curator_id=None) -> bool:
        if str(self.buyer_id) == str(user_id):
            return True
        return curator_id is not None and str(self.curator_id) == str(curator_id)


@marketplace.repository(part_of=Order)
class OrderRepository:
    def page_for_buyer(self, buyer_id, page: int, limit: int):
        return self._page(page, limit, buyer_id=str(buyer_id))

    def page_for_curator(self, curator_id, page: int, limit: int):
        return self._page(page, limit, curator_id=str(curator_id))

    def _page(self, page, limit, **filters):
        """Newest first. The result's ``total`` counts every match, not just the page."""
        return (
            self._dao.query.filter(**filters)
            .order_by("-created_at")
            .offset((page - 1) * limit)
            .limit(limit)
            .all()
        )

    def fresh(self, order_id) -> Order:
        """Read straight from the store, bypassing the unit of work's identity map."""
        return self._dao.get(order_id)
