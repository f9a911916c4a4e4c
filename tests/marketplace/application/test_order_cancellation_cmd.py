"""Application tests for CancelOrder."""

import pytest
from marketplace.catalogue.product import Product
from marketplace.catalogue.variant import ProductVariant
from marketplace.ordering.cancellation import CancelOrder
from marketplace.ordering.order import Order, OrderStatus
from marketplace.ordering.status import UpdateOrderStatus
from marketplace.shared.errors import ForbiddenError, InvalidTransitionError
from protean import current_domain


def _cancel(order_id, user_id="buyer-1"):
    return current_domain.process(CancelOrder(order_id=order_id, user_id=user_id), asynchronous=False)


def _advance(order_id, *statuses):
    for status in statuses:
        current_domain.process(
            UpdateOrderStatus(order_id=order_id, user_id="curator-user-1", status=status.value),
            asynchronous=False,
        )


@pytest.fixture()
def product_id(register_curator, create_product):
    register_curator()
    return create_product(title="Alpaca Sweater", sizes="M,L", colors="Red", stock_quantity=10)


@pytest.fixture()
def order_id(product_id, place_order):
    return place_order(
        [
            {"product_id": product_id, "quantity": 3, "size": "M", "color": "Red"},
            {"product_id": product_id, "quantity": 2, "size": "L", "color": "Red"},
        ]
    )[0]


class TestCancelOrder:
    def test_restores_each_variant_and_cancels(self, product_id, order_id, variant_stock):
        assert variant_stock(product_id, "M", "Red") == 2
        assert variant_stock(product_id, "L", "Red") == 3

        result = _cancel(order_id)

        assert result == order_id
        order = current_domain.repository_for(Order).get(order_id)
        assert order.status == OrderStatus.CANCELLED.value
        assert order.cancelled_at is not None
        assert variant_stock(product_id, "M", "Red") == 5
        assert variant_stock(product_id, "L", "Red") == 5

    def test_restores_product_level_stock(self, register_curator, create_product, place_order):
        register_curator()
        poster = create_product(title="Poster", sizes=None, colors=None, stock_quantity=4)
        order_id = place_order([{"product_id": poster, "quantity": 3}])[0]

        _cancel(order_id)
        assert current_domain.repository_for(Product).get(poster).stock_quantity == 4

    def test_cancel_after_payment_confirmed(self, product_id, order_id, variant_stock):
        _advance(order_id, OrderStatus.PAID, OrderStatus.CONFIRMED, OrderStatus.PROCESSING)
        _cancel(order_id)
        assert variant_stock(product_id, "M", "Red") == 5

    def test_only_the_buyer(self, product_id, order_id, variant_stock):
        with pytest.raises(ForbiddenError):
            _cancel(order_id, user_id="buyer-2")
        assert variant_stock(product_id, "M", "Red") == 2
        assert current_domain.repository_for(Order).get(order_id).status == OrderStatus.PENDING.value

    def test_shipped_orders_cannot_be_cancelled(self, product_id, order_id, variant_stock):
        _advance(order_id, OrderStatus.PAID, OrderStatus.CONFIRMED, OrderStatus.PROCESSING, OrderStatus.SHIPPED)

        with pytest.raises(InvalidTransitionError) as exc:
            _cancel(order_id)

        assert "SHIPPED" in exc.value.message
        assert variant_stock(product_id, "M", "Red") == 2
        assert current_domain.repository_for(Order).get(order_id).status == OrderStatus.SHIPPED.value

    def test_delivered_orders_cannot_be_cancelled(self, order_id):
        _advance(
            order_id,
            OrderStatus.PAID,
            OrderStatus.CONFIRMED,
            OrderStatus.PROCESSING,
            OrderStatus.SHIPPED,
            OrderStatus.DELIVERED,
        )
        with pytest.raises(InvalidTransitionError):
            _cancel(order_id)

    def test_second_cancel_fails_and_restores_nothing(self, product_id, order_id, variant_stock):
        _cancel(order_id)
        with pytest.raises(InvalidTransitionError) as exc:
            _cancel(order_id)

        assert "CANCELLED" in exc.value.message
        assert variant_stock(product_id, "M", "Red") == 5

    def test_removed_variant_is_skipped(self, product_id, order_id, variant_stock):
        repo = current_domain.repository_for(ProductVariant)
        repo._dao.delete(repo.get_combination(product_id, "L", "Red"))

        _cancel(order_id)
        assert variant_stock(product_id, "M", "Red") == 5
        assert current_domain.repository_for(Order).get(order_id).status == OrderStatus.CANCELLED.value
