"""Curator inventory management — variant commands and handler."""

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, Integer, String
from protean.utils.globals import current_domain

from marketplace.catalogue.product import Product
from marketplace.catalogue.variant import ProductVariant
from marketplace.curator.curator import Curator
from marketplace.domain import logger, marketplace


@marketplace.command(part_of="ProductVariant")
class AddVariant:
    product_id = Identifier(required=True)
    user_id = Identifier(required=True)
    size = String(required=True, max_length=50)
    color = String(required=True, max_length=50)
    stock_quantity = Integer(default=0, min_value=0)
    sku = String(max_length=100)


@marketplace.command(part_of="ProductVariant")
class SetVariantStock:
    variant_id = Identifier(required=True)
    user_id = Identifier(required=True)
    stock_quantity = Integer(required=True)
    sku = String(max_length=100)


@marketplace.command(part_of="ProductVariant")
class RemoveVariant:
    variant_id = Identifier(required=True)
    user_id = Identifier(required=True)


def _owned_product(product_id, user_id) -> Product:
    product = current_domain.repository_for(Product).get(product_id)
    curator = current_domain.repository_for(Curator).acting_curator(
        user_id, "Only curators can manage inventory"
    )
    product.assert_owned_by(curator.id)
    return product


@marketplace.command_handler(part_of=ProductVariant)
class ManageInventoryHandler:
    @handle(AddVariant)
    def add_variant(self, command):
        product = _owned_product(command.product_id, command.user_id)
        repo = current_domain.repository_for(ProductVariant)

        size = command.size.strip()
        color = command.color.strip()
        if repo.find_combination(product.id, size, color) is not None:
            raise ValidationError({"variant": [f"Variant {size}/{color} already exists for this product"]})

        variant = ProductVariant(
            product_id=product.id,
            size=size,
            color=color,
            stock_quantity=command.stock_quantity or 0,
            sku=command.sku,
        )
        repo.add(variant)
        return str(variant.id)

    @handle(SetVariantStock)
    def set_variant_stock(self, command):
        repo = current_domain.repository_for(ProductVariant)
        variant = repo.get(command.variant_id)
        _owned_product(variant.product_id, command.user_id)

        variant.set_stock(command.stock_quantity, sku=command.sku)
        repo.add(variant)
        logger.info(
            "inventory.stock_set",
            variant_id=str(variant.id),
            stock_quantity=variant.stock_quantity,
        )

    @handle(RemoveVariant)
    def remove_variant(self, command):
        repo = current_domain.repository_for(ProductVariant)
        variant = repo.get(command.variant_id)
        _owned_product(variant.product_id, command.user_id)

        repo._dao.delete(variant)
        logger.info("inventory.variant_removed", variant_id=str(variant.id))
