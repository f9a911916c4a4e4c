"""Marketplace settings read from the environment."""

import os

DEFAULT_COMMISSION_RATE = float(os.getenv("DEFAULT_COMMISSION_RATE", "0.10"))
CURRENCY = os.getenv("CURRENCY", "PEN")

# Orders listing
DEFAULT_PAGE_SIZE = int(os.getenv("ORDERS_PAGE_SIZE", "10"))
MAX_PAGE_SIZE = 100
