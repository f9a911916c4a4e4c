"""ProductVariant aggregate — one purchasable (size, color) of a product.

Each variant is its own aggregate so that stock changes are version-checked
per variant: a write based on a stale read of the same variant is rejected by
the repository with ``ExpectedVersionError``.
"""

from datetime import UTC, datetime

from protean.exceptions import ValidationError
from protean.fields import DateTime, Identifier, Integer, String

from marketplace.catalogue.events import StockReleased, StockReserved, VariantStockSet
from marketplace.domain import marketplace
from marketplace.shared.errors import InsufficientStockError, NotFoundError


@marketplace.aggregate
class ProductVariant:
    product_id = Identifier(required=True)
    size = String(required=True, max_length=50)
    color = String(required=True, max_length=50)
    stock_quantity = Integer(default=0, min_value=0)
    sku = String(max_length=100)
    updated_at = DateTime()

    @property
    def label(self) -> str:
        return f"variant {self.size}/{self.color} of product {self.product_id}"

    @property
    def is_available(self) -> bool:
        return (self.stock_quantity or 0) > 0

    def reserve(self, quantity: int, order_id=None):
        """Take ``quantity`` units out of stock."""
        if quantity <= 0:
            raise ValidationError({"quantity": ["Quantity must be positive"]})

        available = self.stock_quantity or 0
        if available < quantity:
            raise InsufficientStockError(self.label, available, quantity)

        self.stock_quantity = available - quantity
        self.updated_at = datetime.now(UTC)
        self.raise_(
            StockReserved(
                variant_id=str(self.id),
                product_id=str(self.product_id),
                order_id=str(order_id) if order_id else None,
                quantity=quantity,
                previous_stock=available,
                new_stock=self.stock_quantity,
                reserved_at=self.updated_at,
            )
        )

    def release(self, quantity: int, order_id=None):
        """Return ``quantity`` units to stock (order cancellation)."""
        if quantity <= 0:
            raise ValidationError({"quantity": ["Quantity must be positive"]})

        previous = self.stock_quantity or 0
        self.stock_quantity = previous + quantity
        self.updated_at = datetime.now(UTC)
        self.raise_(
            StockReleased(
                variant_id=str(self.id),
                product_id=str(self.product_id),
                order_id=str(order_id) if order_id else None,
                quantity=quantity,
                previous_stock=previous,
                new_stock=self.stock_quantity,
                released_at=self.updated_at,
            )
        )

    def set_stock(self, stock_quantity: int, sku=None):
        """Curator-side stock correction."""
        if stock_quantity is None or stock_quantity < 0:
            raise ValidationError({"stock_quantity": ["Valid stock quantity is required"]})

        previous = self.stock_quantity or 0
        self.stock_quantity = stock_quantity
        if sku is not None:
            self.sku = sku or None
        self.updated_at = datetime.now(UTC)
        self.raise_(
            VariantStockSet(
                variant_id=str(self.id),
                product_id=str(self.product_id),
                previous_stock=previous,
                new_stock=stock_quantity,
                set_at=self.updated_at,
            )
        )


@marketplace.repository(part_of=ProductVariant)
class ProductVariantRepository:
    def find_combination(self, product_id, size, color) -> ProductVariant | None:
        results = self._dao.query.filter(product_id=str(product_id), size=size, color=color).all().items
        return results[0] if results else None

    def get_combination(self, product_id, size, color) -> ProductVariant:
        variant = self.find_combination(product_id, size, color)
        if variant is None:
            raise NotFoundError(
                f"Variant not found: size {size}, color {color} of product {product_id}",
                product_id=str(product_id),
                size=size,
                color=color,
            )
        return variant

    def has_variants(self, product_id) -> bool:
        return self._dao.query.filter(product_id=str(product_id)).limit(1).all().total > 0

    def for_product(self, product_id) -> list[ProductVariant]:
        query = self._dao.query.filter(product_id=str(product_id))
        results = query.all()
        if results.total > len(results.items):
            results = query.limit(results.total).all()
        return sorted(results.items, key=lambda v: (v.size, v.color))
