"""Shared BDD fixtures and step definitions for checkout scenarios."""

import pytest
from marketplace.catalogue.variant import ProductVariant
from marketplace.ordering.order import Order
from protean import current_domain
from pytest_bdd import given, parsers, then


@pytest.fixture()
def catalogue():
    """Product ids and curator ids by name."""
    return {"products": {}, "curators": {}}


@pytest.fixture()
def checkout():
    """Outcome of the last checkout: created order ids or the raised error."""
    return {"order_ids": [], "error": None}


@given(
    parsers.cfparse(
        'a curator "{slug}" selling "{title}" at {price:d} in size "{size}" and color "{color}" with {stock:d} units'
    )
)
def _(catalogue, register_curator, create_product, slug, title, price, size, color, stock):
    user_id = f"user-{slug}"
    catalogue["curators"][slug] = register_curator(user_id=user_id, store_name=slug.title(), slug=slug)
    catalogue["products"][title] = create_product(
        user_id=user_id, title=title, price=price, sizes=size, colors=color, stock_quantity=stock
    )


@then(parsers.cfparse('"{title}" has {stock:d} units left in size "{size}" and color "{color}"'))
def _(catalogue, title, stock, size, color):
    variant = current_domain.repository_for(ProductVariant).get_combination(
        catalogue["products"][title], size, color
    )
    assert variant.stock_quantity == stock


@then(parsers.cfparse("{count:d} order is created"))
@then(parsers.cfparse("{count:d} orders are created"))
def _(checkout, count):
    assert checkout["error"] is None
    assert len(checkout["order_ids"]) == count


@then("no orders exist")
def _():
    assert current_domain.repository_for(Order)._dao.query.all().items == []


@then(
    parsers.cfparse(
        'the order for "{slug}" totals {total:d} with commission {commission:d} and curator amount {curator_amount:d}'
    )
)
def _(catalogue, checkout, slug, total, commission, curator_amount):
    orders = [current_domain.repository_for(Order).get(oid) for oid in checkout["order_ids"]]
    order = next(o for o in orders if str(o.curator_id) == str(catalogue["curators"][slug]))
    assert order.total_amount == total
    assert order.commission == commission
    assert order.curator_amount == curator_amount
