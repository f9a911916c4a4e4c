"""Marketplace Load Testing — Locust entry point.

Discovers all user classes from the scenarios package.
Run specific scenarios with Locust's class selection.

Usage:
    # All scenarios (web UI):
    locust -f loadtests/locustfile.py --host http://localhost:8000

    # Last-unit race only (headless):
    locust -f loadtests/locustfile.py LastUnitRaceUser --headless \
           -u 50 -r 10 -t 60s --host http://localhost:8000
"""

import logging
import time

import requests
from locust import events

# Import all user classes so Locust discovers them
from loadtests.helpers.response import extract_error_detail
from loadtests.scenarios.checkout import SCARCE_STOCK, SEED, BuyerUser, LastUnitRaceUser  # noqa: F401
from loadtests.scenarios.curator import CuratorUser  # noqa: F401

logger = logging.getLogger("loadtest")


@events.request.add_listener
def on_request(request_type, name, response, exception, **_kw):
    """Log error details for every failed request.

    Extracts the API error body so you see "Insufficient stock for variant M/Red ..."
    instead of just "409".
    """
    if exception:
        logger.error("[EXCEPTION] %s %s: %s", request_type, name, exception)
    elif response is not None and response.status_code >= 400:
        detail = extract_error_detail(response)
        logger.error("[%s] %s %s: %s", response.status_code, request_type, name, detail)


@events.test_start.add_listener
def on_test_start(environment, **_kwargs):
    print(f"\n[LOADTEST] Started at {time.strftime('%H:%M:%S')}")
    print(f"[LOADTEST] Target host: {environment.host}")
    print()


@events.test_stop.add_listener
def on_test_stop(environment, **_kwargs):
    """Check the scarce variant never oversold."""
    print(f"\n[LOADTEST] Stopped at {time.strftime('%H:%M:%S')}")
    product_id = SEED["scarce_product_id"]
    if product_id is None:
        return
    try:
        resp = requests.get(f"{environment.host}/products/{product_id}/variants", timeout=5)
        stock = resp.json()["variants"][0]["stock_quantity"]
    except Exception as e:
        print(f"[LOADTEST] Could not read scarce variant stock: {e}\n")
        return

    status = "OK" if 0 <= stock <= SCARCE_STOCK else "OVERSOLD"
    print(f"[LOADTEST] Scarce variant stock: {stock}/{SCARCE_STOCK} [{status}]\n")
