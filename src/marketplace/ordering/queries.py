"""Order read helpers for buyers and curators."""

from math import ceil

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from marketplace.config import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from marketplace.curator.curator import Curator
from marketplace.ordering.order import Order
from marketplace.shared.errors import NotFoundError

BUYER_VIEW = "buyer"
CURATOR_VIEW = "curator"


def list_orders(user_id, view=BUYER_VIEW, page=1, limit=DEFAULT_PAGE_SIZE) -> dict:
    """A page of the user's orders, newest first.

    The curator view lists orders placed with the user's store and requires a
    curator profile.
    """
    page = max(int(page or 1), 1)
    limit = min(max(int(limit or DEFAULT_PAGE_SIZE), 1), MAX_PAGE_SIZE)

    repo = current_domain.repository_for(Order)
    if view == CURATOR_VIEW:
        curator = current_domain.repository_for(Curator).acting_curator(
            user_id, "Only curators can view store orders"
        )
        results = repo.page_for_curator(curator.id, page, limit)
    else:
        results = repo.page_for_buyer(user_id, page, limit)

    total = results.total
    return {
        "orders": results.items,
        "pagination": {
            "page": page,
            "limit": limit,
            "total": total,
            "pages": ceil(total / limit) if total else 0,
        },
    }


def get_order(order_id, user_id) -> Order:
    """Load an order visible to ``user_id`` as its buyer or its curator."""
    try:
        order = current_domain.repository_for(Order).get(order_id)
    except ObjectNotFoundError:
        raise NotFoundError("Order not found", order_id=str(order_id)) from None

    curator = current_domain.repository_for(Curator).find_by_user(user_id)
    if not order.is_visible_to(user_id, curator.id if curator else None):
        raise NotFoundError("Order not found", order_id=str(order_id))
    return order
