"""Marketplace bounded context — curators, catalogue, orders and payment settings.

Orders and the stock they reserve live in the same domain so that a checkout
(order rows + variant decrements) commits or rolls back as one unit of work.
"""

from protean.domain import Domain

from marketplace.utils.logging import get_logger

marketplace = Domain(name="marketplace")

logger = get_logger(__name__)
