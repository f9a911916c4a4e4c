"""Faker-based data generators for Locust load test scenarios.

Each generator produces payloads that pass the API's Pydantic request
schemas and the domain's validation rules (url-safe slugs, complete shipping
addresses, amounts in minor units).
"""

import random
import uuid

from faker import Faker

fake = Faker("es_ES")

SIZES = ["XS", "S", "M", "L", "XL"]
COLORS = ["Red", "Grey", "Black", "Natural", "Terracotta"]


def user_id(prefix: str = "lt") -> str:
    """Generate unique user ids like 'lt-buyer-a1b2c3d4'."""
    return f"{prefix}-{uuid.uuid4().hex[:8]}"


def user_headers(uid: str) -> dict:
    return {"X-User-Id": uid}


def curator_data() -> dict:
    """Generate RegisterCuratorRequest payload with a unique url-safe slug."""
    store = fake.company()[:80]
    return {
        "store_name": store,
        "slug": f"store-{uuid.uuid4().hex[:10]}",
    }


def product_data(sizes: int = 2, colors: int = 2, stock: int | None = None) -> dict:
    """Generate CreateProductRequest payload. Prices are in cents."""
    return {
        "title": fake.catch_phrase()[:120],
        "description": fake.paragraph(nb_sentences=2),
        "price": random.randint(500, 50000),
        "category": random.choice(["knitwear", "ceramics", "jewelry", "textiles"]),
        "tags": ",".join(fake.words(nb=3)),
        "sizes": ",".join(random.sample(SIZES, sizes)),
        "colors": ",".join(random.sample(COLORS, colors)),
        "stock_quantity": stock if stock is not None else random.randint(20, 200),
    }


def shipping_address() -> dict:
    """Generate a complete ShippingAddressSchema payload."""
    return {
        "name": fake.name()[:255],
        "email": f"{uuid.uuid4().hex[:6]}.{fake.free_email()}",
        "phone": fake.phone_number()[:50],
        "address": fake.street_address()[:500],
        "city": fake.city()[:100],
        "state": fake.state()[:100],
        "zip_code": fake.postcode()[:20],
        "country": "PE",
    }


def checkout_data(lines: list[dict], payment_method: str = "stripe") -> dict:
    """Generate PlaceOrderRequest payload for the given cart lines."""
    payload = {
        "items": lines,
        "shipping_address": shipping_address(),
        "payment_method": payment_method,
    }
    if payment_method in ("yape", "plin"):
        payload["transaction_code"] = f"{payment_method[:2].upper()}-{random.randint(100000, 999999)}"
    return payload


def payment_settings_data() -> dict:
    """Generate a PaymentSettingsUpdateRequest enabling one wallet."""
    wallet = random.choice(["yape", "plin"])
    return {
        f"{wallet}_enabled": True,
        f"{wallet}_phone_number": f"+51 9{random.randint(10000000, 99999999)}",
        "commission_rate": round(random.uniform(0.05, 0.2), 3),
    }
