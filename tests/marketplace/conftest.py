import json
import os

import pytest
from protean import current_domain

DEFAULT_ADDRESS = {
    "name": "Ana Quispe",
    "email": "ana@example.com",
    "phone": "+51 999 888 777",
    "address": "Av. Larco 123",
    "city": "Lima",
    "state": "Lima",
    "zip_code": "15074",
    "country": "PE",
}


@pytest.fixture(scope="session")
def _marketplace_domain(request):
    """Initialize the marketplace domain once per session."""
    os.environ["PROTEAN_ENV"] = request.config.option.env

    from marketplace.domain import marketplace

    # init() reuses element modules already in sys.modules; the routes import them all
    from marketplace.api import routes  # noqa: F401

    marketplace.init()
    return marketplace


@pytest.fixture(scope="session", autouse=True)
def setup_db(_marketplace_domain):
    from marketplace.utils.db import drop_db, setup_db

    setup_db(_marketplace_domain)

    yield

    drop_db(_marketplace_domain)


@pytest.fixture(autouse=True)
def run_around_tests(_marketplace_domain):
    """Push domain context before each test, cleanup after."""
    ctx = _marketplace_domain.domain_context()
    ctx.push()

    yield

    for _, provider in current_domain.providers.items():
        provider._data_reset()

    for _, broker in current_domain.brokers.items():
        broker._data_reset()

    current_domain.event_store.store._data_reset()
    ctx.pop()


# ---------------------------------------------------------------------------
# Builders
# ---------------------------------------------------------------------------
@pytest.fixture()
def register_curator():
    from marketplace.curator.registration import RegisterCurator

    def _register(user_id="curator-user-1", store_name="Alpaca Threads", slug="alpaca-threads"):
        return current_domain.process(
            RegisterCurator(user_id=user_id, store_name=store_name, slug=slug),
            asynchronous=False,
        )

    return _register


@pytest.fixture()
def create_product():
    from marketplace.catalogue.creation import CreateProduct

    def _create(user_id="curator-user-1", title="Alpaca Sweater", price=5000, sizes="M", colors="Red", **kwargs):
        kwargs.setdefault("stock_quantity", 5)
        return current_domain.process(
            CreateProduct(user_id=user_id, title=title, price=price, sizes=sizes, colors=colors, **kwargs),
            asynchronous=False,
        )

    return _create


@pytest.fixture()
def place_order():
    from marketplace.ordering.checkout import PlaceOrder

    def _place(items, buyer_id="buyer-1", payment_method="stripe", address=None, **kwargs):
        return current_domain.process(
            PlaceOrder(
                buyer_id=buyer_id,
                items=json.dumps(items),
                shipping_address=json.dumps(address or DEFAULT_ADDRESS),
                payment_method=payment_method,
                **kwargs,
            ),
            asynchronous=False,
        )

    return _place


@pytest.fixture()
def variant_stock():
    from marketplace.catalogue.variant import ProductVariant

    def _stock(product_id, size="M", color="Red"):
        return current_domain.repository_for(ProductVariant).get_combination(product_id, size, color).stock_quantity

    return _stock


@pytest.fixture()
def shipping_address():
    return dict(DEFAULT_ADDRESS)
