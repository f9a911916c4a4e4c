"""Curator and payment driven status changes — commands and handler."""

from protean import handle
from protean.fields import Boolean, Identifier, String
from protean.utils.globals import current_domain

from marketplace.curator.curator import Curator
from marketplace.domain import logger, marketplace
from marketplace.ordering.order import Order, OrderStatus


@marketplace.command(part_of="Order")
class UpdateOrderStatus:
    order_id = Identifier(required=True)
    user_id = Identifier(required=True)
    status = String(required=True, choices=OrderStatus)


@marketplace.command(part_of="Order")
class VerifyManualPayment:
    order_id = Identifier(required=True)
    user_id = Identifier(required=True)
    approved = Boolean(required=True)


@marketplace.command(part_of="Order")
class RecordPaymentIntent:
    order_id = Identifier(required=True)
    user_id = Identifier(required=True)
    payment_intent_id = String(required=True, max_length=255)


@marketplace.command_handler(part_of=Order)
class OrderStatusHandler:
    @handle(UpdateOrderStatus)
    def update_status(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        curator = current_domain.repository_for(Curator).acting_curator(
            command.user_id, "Only the curator of this order can update it"
        )

        previous = order.status
        order.update_status(OrderStatus(command.status), curator.id)
        repo.add(order)
        logger.info(
            "order.status_changed",
            order_id=str(order.id),
            previous_status=previous,
            new_status=order.status,
        )

    @handle(VerifyManualPayment)
    def verify_payment(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        curator = current_domain.repository_for(Curator).acting_curator(
            command.user_id, "Only the curator of this order can verify payments"
        )

        order.verify_payment(command.approved, curator.id)
        repo.add(order)
        logger.info(
            "order.payment_verified",
            order_id=str(order.id),
            approved=command.approved,
            status=order.status,
        )

    @handle(RecordPaymentIntent)
    def record_payment_intent(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.record_payment_intent(command.payment_intent_id, command.user_id)
        repo.add(order)
