"""Per-user state tracking for Locust load test scenarios.

Each Locust user instance maintains its own state; only the scarce product
used by the race scenario is shared (see ``scenarios.checkout``).
"""

from dataclasses import dataclass, field


@dataclass
class CuratorState:
    """Tracks state for a simulated curator."""

    user_id: str | None = None
    curator_id: str | None = None
    product_ids: list[str] = field(default_factory=list)
    variant_ids: list[str] = field(default_factory=list)


@dataclass
class BuyerState:
    """Tracks state for a simulated buyer."""

    user_id: str | None = None
    order_ids: list[str] = field(default_factory=list)
    cancelled: int = 0
    out_of_stock: int = 0
