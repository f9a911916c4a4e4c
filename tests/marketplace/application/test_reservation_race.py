"""Interleaved checkouts and cancellations over the same stock records.

Each test loads a copy of a record, lets another operation commit a change to
it, then continues with the now stale copy, the way a concurrent request
would.
"""

import pytest
from marketplace.catalogue.product import Product
from marketplace.catalogue.variant import ProductVariant
from marketplace.ordering.cancellation import CancelOrder, cancel_order
from marketplace.ordering.order import Order, OrderStatus
from marketplace.ordering.reservation import reserve_product, reserve_variant
from marketplace.shared.errors import ConflictError, InsufficientStockError, InvalidTransitionError
from protean import UnitOfWork, current_domain


@pytest.fixture()
def last_unit(register_curator, create_product):
    register_curator()
    return create_product(title="Alpaca Sweater", sizes="M", colors="Red", stock_quantity=1)


def _variant(product_id):
    return current_domain.repository_for(ProductVariant).get_combination(product_id, "M", "Red")


class TestLastUnitRace:
    def test_only_one_checkout_gets_the_last_unit(self, last_unit, place_order, variant_stock):
        stale = _variant(last_unit)

        place_order([{"product_id": last_unit, "quantity": 1, "size": "M", "color": "Red"}])

        with pytest.raises(InsufficientStockError) as exc:
            with UnitOfWork():
                reserve_variant(stale, 1)

        assert exc.value.available == 0
        assert variant_stock(last_unit) == 0

    def test_stale_write_with_enough_fresh_stock_is_a_conflict(self, register_curator, create_product, variant_stock):
        register_curator()
        product_id = create_product(title="Alpaca Sweater", sizes="M", colors="Red", stock_quantity=5)
        stale = _variant(product_id)

        with UnitOfWork():
            reserve_variant(_variant(product_id), 1)

        with pytest.raises(ConflictError) as exc:
            with UnitOfWork():
                reserve_variant(stale, 1)

        assert not isinstance(exc.value, InsufficientStockError)
        assert variant_stock(product_id) == 4

    def test_product_level_stock_is_guarded_too(self, register_curator, create_product, place_order):
        register_curator()
        poster = create_product(title="Poster", sizes=None, colors=None, stock_quantity=1)
        stale = current_domain.repository_for(Product).get(poster)

        place_order([{"product_id": poster, "quantity": 1}])

        with pytest.raises(InsufficientStockError):
            with UnitOfWork():
                reserve_product(stale, 1)
        assert current_domain.repository_for(Product).get(poster).stock_quantity == 0


class TestDoubleCancel:
    def test_stock_is_restored_once(self, register_curator, create_product, place_order, variant_stock):
        register_curator()
        product_id = create_product(title="Alpaca Sweater", sizes="M", colors="Red", stock_quantity=5)
        order_id = place_order([{"product_id": product_id, "quantity": 3, "size": "M", "color": "Red"}])[0]
        assert variant_stock(product_id) == 2

        stale = current_domain.repository_for(Order).get(order_id)
        current_domain.process(CancelOrder(order_id=order_id, user_id="buyer-1"), asynchronous=False)
        assert variant_stock(product_id) == 5

        with pytest.raises(InvalidTransitionError):
            with UnitOfWork():
                cancel_order(stale, "buyer-1")

        assert variant_stock(product_id) == 5
        assert current_domain.repository_for(Order).get(order_id).status == OrderStatus.CANCELLED.value
