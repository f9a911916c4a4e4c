"""Domain events for the Product and ProductVariant aggregates."""

from protean.fields import Boolean, DateTime, Identifier, Integer, String

from marketplace.domain import marketplace


@marketplace.event(part_of="Product")
class ProductCreated:
    """A curator listed a new product."""

    __version__ = "v1"

    product_id = Identifier(required=True)
    curator_id = Identifier(required=True)
    title = String(required=True)
    price = Integer(required=True)
    stock_quantity = Integer(required=True)
    created_at = DateTime(required=True)


@marketplace.event(part_of="Product")
class ProductDetailsUpdated:
    __version__ = "v1"

    product_id = Identifier(required=True)
    title = String(required=True)
    price = Integer(required=True)
    updated_at = DateTime(required=True)


@marketplace.event(part_of="Product")
class ProductActivationChanged:
    """The product was enabled or soft-disabled."""

    __version__ = "v1"

    product_id = Identifier(required=True)
    is_active = Boolean(required=True)
    changed_at = DateTime(required=True)


@marketplace.event(part_of="ProductVariant")
class StockReserved:
    """Units of a variant were taken by an order."""

    __version__ = "v1"

    variant_id = Identifier(required=True)
    product_id = Identifier(required=True)
    order_id = Identifier()
    quantity = Integer(required=True)
    previous_stock = Integer(required=True)
    new_stock = Integer(required=True)
    reserved_at = DateTime(required=True)


@marketplace.event(part_of="ProductVariant")
class StockReleased:
    """Units of a variant were returned by a cancelled order."""

    __version__ = "v1"

    variant_id = Identifier(required=True)
    product_id = Identifier(required=True)
    order_id = Identifier()
    quantity = Integer(required=True)
    previous_stock = Integer(required=True)
    new_stock = Integer(required=True)
    released_at = DateTime(required=True)


@marketplace.event(part_of="ProductVariant")
class VariantStockSet:
    """A curator corrected the stock count of a variant."""

    __version__ = "v1"

    variant_id = Identifier(required=True)
    product_id = Identifier(required=True)
    previous_stock = Integer(required=True)
    new_stock = Integer(required=True)
    set_at = DateTime(required=True)
