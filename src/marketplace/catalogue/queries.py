"""Read-side helpers for product variants."""

from protean.utils.globals import current_domain

from marketplace.catalogue.product import Product
from marketplace.catalogue.variant import ProductVariant


def product_variants(product_id) -> dict:
    """Variants of a product plus a ``{size: {color: {...}}}`` lookup map."""
    current_domain.repository_for(Product).get(product_id)

    variants = current_domain.repository_for(ProductVariant).for_product(product_id)
    variant_map: dict[str, dict[str, dict]] = {}
    for variant in variants:
        variant_map.setdefault(variant.size, {})[variant.color] = {
            "id": str(variant.id),
            "stock_quantity": variant.stock_quantity,
            "available": variant.is_available,
        }
    return {"variants": variants, "variant_map": variant_map}
