"""Checkout load test scenarios.

CheckoutJourney models a buyer who checks out and sometimes cancels.
LastUnitRaceUser hammers one scarce variant from many users at once: every
checkout must end in 201 or a 409 insufficient-stock conflict, and the
variant must never go negative.
"""

import random

import requests
from locust import HttpUser, SequentialTaskSet, between, constant_pacing, events, task

from loadtests.data_generators import (
    checkout_data,
    curator_data,
    product_data,
    user_headers,
    user_id,
)
from loadtests.helpers.response import error_code, extract_error_detail
from loadtests.helpers.state import BuyerState

# Shared across users: the catalogue seeded at test start
SEED = {"products": [], "scarce_product_id": None}

SCARCE_STOCK = 25


def _first_variant(client, product_id):
    resp = client.get(f"/products/{product_id}/variants", name="GET /products/{id}/variants")
    variants = resp.json()["variants"] if resp.status_code == 200 else []
    return variants[0] if variants else None


@events.test_start.add_listener
def seed_catalogue(environment, **_kwargs):
    """Create one curator with a few products and one scarce single-variant product."""
    headers = user_headers(user_id("lt-seed"))
    base = environment.host
    requests.post(f"{base}/curators", json=curator_data(), headers=headers, timeout=10).raise_for_status()

    for _ in range(5):
        resp = requests.post(f"{base}/products", json=product_data(), headers=headers, timeout=10)
        resp.raise_for_status()
        SEED["products"].append(resp.json()["product_id"])

    resp = requests.post(
        f"{base}/products",
        json={**product_data(sizes=1, colors=1, stock=SCARCE_STOCK), "title": "Last Units"},
        headers=headers,
        timeout=10,
    )
    resp.raise_for_status()
    SEED["scarce_product_id"] = resp.json()["product_id"]


class CheckoutJourney(SequentialTaskSet):
    """Browse Variants -> Checkout -> View Order -> Cancel (1 in 3)."""

    def on_start(self):
        self.state = BuyerState(user_id=user_id("lt-buyer"))
        self.headers = user_headers(self.state.user_id)
        self.line = None

    @task
    def browse(self):
        if not SEED["products"]:
            self.interrupt()
        product_id = random.choice(SEED["products"])
        variant = _first_variant(self.client, product_id)
        if variant is None:
            self.interrupt()
        self.line = {
            "product_id": product_id,
            "quantity": random.randint(1, 2),
            "size": variant["size"],
            "color": variant["color"],
        }

    @task
    def checkout(self):
        with self.client.post(
            "/orders",
            json=checkout_data([self.line]),
            headers=self.headers,
            catch_response=True,
            name="POST /orders",
        ) as resp:
            if resp.status_code == 201:
                self.state.order_ids.extend(o["id"] for o in resp.json()["orders"])
            elif resp.status_code == 409 and error_code(resp) == "insufficient_stock":
                self.state.out_of_stock += 1
                resp.success()
                self.interrupt()
            else:
                resp.failure(f"Checkout failed: {resp.status_code} — {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def view_order(self):
        order_id = self.state.order_ids[-1]
        self.client.get(f"/orders/{order_id}", headers=self.headers, name="GET /orders/{id}")

    @task
    def maybe_cancel(self):
        if random.random() < 0.33:
            order_id = self.state.order_ids[-1]
            with self.client.post(
                f"/orders/{order_id}/cancel",
                headers=self.headers,
                catch_response=True,
                name="POST /orders/{id}/cancel",
            ) as resp:
                if resp.status_code == 200:
                    self.state.cancelled += 1
                else:
                    resp.failure(f"Cancel failed: {resp.status_code} — {extract_error_detail(resp)}")
        self.interrupt()


class BuyerUser(HttpUser):
    tasks = [CheckoutJourney]
    wait_time = between(0.5, 2)


class LastUnitRaceUser(HttpUser):
    """Concurrent checkouts over the last units of a single variant."""

    wait_time = constant_pacing(0.2)

    def on_start(self):
        self.headers = user_headers(user_id("lt-racer"))

    @task
    def grab_last_unit(self):
        product_id = SEED["scarce_product_id"]
        if product_id is None:
            return
        variant = _first_variant(self.client, product_id)
        if variant is None:
            return

        line = {"product_id": product_id, "quantity": 1, "size": variant["size"], "color": variant["color"]}
        with self.client.post(
            "/orders",
            json=checkout_data([line]),
            headers=self.headers,
            catch_response=True,
            name="[RACE] POST /orders",
        ) as resp:
            if resp.status_code == 201 or error_code(resp) in ("insufficient_stock", "conflict"):
                resp.success()
            else:
                resp.failure(f"Unexpected outcome: {resp.status_code} — {extract_error_detail(resp)}")
