"""Buyer cancellation — command and handler.

The order write goes first and is version-checked, so when two cancellations
race only one of them gets to release the stock.
"""

from protean import handle
from protean.exceptions import ExpectedVersionError
from protean.fields import Identifier
from protean.utils.globals import current_domain

from marketplace.domain import logger, marketplace
from marketplace.ordering.order import Order, OrderStatus
from marketplace.ordering.reservation import StockLine, release_stock
from marketplace.shared.errors import ConflictError, InvalidTransitionError


@marketplace.command(part_of="Order")
class CancelOrder:
    order_id = Identifier(required=True)
    user_id = Identifier(required=True)


def cancel_order(order: Order, user_id) -> Order:
    """Cancel an order that has already been loaded and restore its stock."""
    repo = current_domain.repository_for(Order)
    order.cancel(cancelled_by=user_id)
    try:
        repo.add(order)
    except ExpectedVersionError:
        current = repo.fresh(order.id)
        if current.status == OrderStatus.CANCELLED.value:
            raise InvalidTransitionError(
                f"Cannot cancel order with status {current.status}",
                status=current.status,
            ) from None
        raise ConflictError("Order was modified concurrently, please retry") from None

    release_stock([StockLine.from_item(item) for item in order.items], order_id=order.id)
    logger.info(
        "order.cancelled",
        order_id=str(order.id),
        buyer_id=str(order.buyer_id),
        items=len(order.items),
    )
    return order


@marketplace.command_handler(part_of=Order)
class CancelOrderHandler:
    @handle(CancelOrder)
    def cancel(self, command):
        order = current_domain.repository_for(Order).get(command.order_id)
        cancel_order(order, command.user_id)
        return str(order.id)
