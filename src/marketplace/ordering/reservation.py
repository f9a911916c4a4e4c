"""Stock reservation step for checkout and cancellation.

Lines with a size and color reserve from the matching ``ProductVariant``;
lines without one fall back to the product-level ``stock_quantity``. Every
write is version-checked by the repository, so two checkouts that read the
same stock cannot both take the last unit: the stale writer gets
``ExpectedVersionError``, which is turned into an insufficient-stock conflict
when the fresh stock no longer covers the request.
"""

from dataclasses import dataclass

from protean.exceptions import ExpectedVersionError, ValidationError
from protean.utils.globals import current_domain

from marketplace.catalogue.product import Product
from marketplace.catalogue.variant import ProductVariant
from marketplace.domain import logger
from marketplace.shared.errors import ConflictError, InsufficientStockError


@dataclass(frozen=True)
class StockLine:
    """A quantity of one product configuration to reserve or release."""

    product_id: str
    quantity: int
    size: str | None = None
    color: str | None = None

    @property
    def has_variant(self) -> bool:
        return bool(self.size and self.color)

    @classmethod
    def from_item(cls, item) -> "StockLine":
        return cls(
            product_id=str(item.product_id),
            quantity=item.quantity,
            size=item.size,
            color=item.color,
        )


def _write(repo, record, fresh_stock, quantity, label):
    """Persist a stock change, mapping a stale write to a conflict."""
    try:
        repo.add(record)
    except ExpectedVersionError:
        available = fresh_stock()
        logger.warning(
            "reservation.stale_write",
            record_id=str(record.id),
            available=available,
            requested=quantity,
        )
        if available < quantity:
            raise InsufficientStockError(label, available, quantity) from None
        raise ConflictError(
            f"Stock for {label} was modified concurrently, please retry",
            item=label,
        ) from None


def reserve_variant(variant: ProductVariant, quantity: int, order_id=None):
    """Decrement one variant that has already been loaded."""
    repo = current_domain.repository_for(ProductVariant)
    variant.reserve(quantity, order_id=order_id)
    _write(
        repo,
        variant,
        lambda: repo._dao.get(variant.id).stock_quantity or 0,
        quantity,
        variant.label,
    )


def reserve_product(product: Product, quantity: int):
    """Decrement the product-level stock of a line without size/color."""
    repo = current_domain.repository_for(Product)
    product.reserve_stock(quantity)
    _write(
        repo,
        product,
        lambda: repo._dao.get(product.id).stock_quantity or 0,
        quantity,
        f"product '{product.title}'",
    )


def reserve_stock(lines: list[StockLine], order_id=None):
    """Take stock for every line. Fails on the first line that cannot be covered."""
    variant_repo = current_domain.repository_for(ProductVariant)
    product_repo = current_domain.repository_for(Product)

    for line in lines:
        if line.has_variant:
            variant = variant_repo.get_combination(line.product_id, line.size, line.color)
            reserve_variant(variant, line.quantity, order_id=order_id)
        elif line.size or line.color:
            raise ValidationError({"items": ["Both size and color are required to select a variant"]})
        elif variant_repo.has_variants(line.product_id):
            raise ValidationError({"items": [f"Select a size and color for product {line.product_id}"]})
        else:
            reserve_product(product_repo.get(line.product_id), line.quantity)

        logger.info(
            "reservation.reserved",
            product_id=line.product_id,
            size=line.size,
            color=line.color,
            quantity=line.quantity,
            order_id=str(order_id) if order_id else None,
        )


def release_stock(lines: list[StockLine], order_id=None):
    """Return stock taken by ``reserve_stock``.

    Variants that were removed since the order was placed are skipped.
    """
    variant_repo = current_domain.repository_for(ProductVariant)
    product_repo = current_domain.repository_for(Product)

    for line in lines:
        if line.has_variant:
            variant = variant_repo.find_combination(line.product_id, line.size, line.color)
            if variant is None:
                logger.warning(
                    "reservation.variant_missing",
                    product_id=line.product_id,
                    size=line.size,
                    color=line.color,
                    order_id=str(order_id) if order_id else None,
                )
                continue
            variant.release(line.quantity, order_id=order_id)
            variant_repo.add(variant)
        else:
            product = product_repo.get(line.product_id)
            product.restore_stock(line.quantity)
            product_repo.add(product)

        logger.info(
            "reservation.released",
            product_id=line.product_id,
            size=line.size,
            color=line.color,
            quantity=line.quantity,
            order_id=str(order_id) if order_id else None,
        )
