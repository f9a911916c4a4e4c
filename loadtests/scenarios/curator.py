"""Curator-side load test scenarios.

A curator registers, lists products, turns on a wallet payment method and
adjusts variant stock.
"""

import random

from locust import HttpUser, SequentialTaskSet, between, task

from loadtests.data_generators import (
    curator_data,
    payment_settings_data,
    product_data,
    user_headers,
    user_id,
)
from loadtests.helpers.response import extract_error_detail
from loadtests.helpers.state import CuratorState


class CuratorOnboardingJourney(SequentialTaskSet):
    """Register -> Create Products -> Payment Settings -> Restock -> Inspect Variants."""

    def on_start(self):
        self.state = CuratorState(user_id=user_id("lt-curator"))
        self.headers = user_headers(self.state.user_id)

    @task
    def register(self):
        with self.client.post(
            "/curators",
            json=curator_data(),
            headers=self.headers,
            catch_response=True,
            name="POST /curators",
        ) as resp:
            if resp.status_code == 201:
                self.state.curator_id = resp.json()["curator_id"]
            else:
                resp.failure(f"Register curator failed: {resp.status_code} — {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def create_products(self):
        for _ in range(3):
            with self.client.post(
                "/products",
                json=product_data(),
                headers=self.headers,
                catch_response=True,
                name="POST /products",
            ) as resp:
                if resp.status_code == 201:
                    self.state.product_ids.append(resp.json()["product_id"])
                else:
                    resp.failure(f"Create product failed: {resp.status_code} — {extract_error_detail(resp)}")

    @task
    def enable_wallet(self):
        with self.client.put(
            "/curator/payment-settings",
            json=payment_settings_data(),
            headers=self.headers,
            catch_response=True,
            name="PUT /curator/payment-settings",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Payment settings failed: {resp.status_code} — {extract_error_detail(resp)}")

    @task
    def restock(self):
        if not self.state.product_ids:
            return
        product_id = random.choice(self.state.product_ids)
        resp = self.client.get(f"/products/{product_id}/variants", name="GET /products/{id}/variants")
        if resp.status_code != 200 or not resp.json()["variants"]:
            return

        variant = random.choice(resp.json()["variants"])
        with self.client.put(
            f"/inventory/{variant['id']}",
            json={"stock_quantity": variant["stock_quantity"] + random.randint(1, 20)},
            headers=self.headers,
            catch_response=True,
            name="PUT /inventory/{id}",
        ) as inv:
            if inv.status_code != 200:
                inv.failure(f"Restock failed: {inv.status_code} — {extract_error_detail(inv)}")

    @task
    def review_orders(self):
        self.client.get("/orders", params={"view": "curator"}, headers=self.headers, name="GET /orders?view=curator")
        self.interrupt()


class CuratorUser(HttpUser):
    tasks = [CuratorOnboardingJourney]
    wait_time = between(1, 3)
