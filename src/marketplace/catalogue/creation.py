"""Product creation — command and handler.

A product with both sizes and colors gets one variant per size × color pair,
with the initial stock spread evenly across them.
"""

from protean import handle
from protean.fields import Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from marketplace.catalogue.product import Product
from marketplace.catalogue.variant import ProductVariant
from marketplace.curator.curator import Curator
from marketplace.domain import logger, marketplace


@marketplace.command(part_of="Product")
class CreateProduct:
    user_id = Identifier(required=True)
    title = String(required=True, max_length=255)
    description = Text()
    price = Integer(required=True, min_value=0)
    category = String(max_length=100)
    tags = String(max_length=500)
    sizes = String(max_length=255)
    colors = String(max_length=255)
    stock_quantity = Integer(default=0, min_value=0)


@marketplace.command_handler(part_of=Product)
class CreateProductHandler:
    @handle(CreateProduct)
    def create_product(self, command):
        curator = current_domain.repository_for(Curator).for_user(command.user_id)

        product = Product.create(
            curator_id=curator.id,
            title=command.title,
            price=command.price,
            description=command.description,
            category=command.category,
            tags=command.tags,
            sizes=command.sizes,
            colors=command.colors,
            stock_quantity=command.stock_quantity or 0,
        )
        current_domain.repository_for(Product).add(product)

        variant_repo = current_domain.repository_for(ProductVariant)
        combinations = product.variant_combinations()
        for size, color, stock in combinations:
            variant_repo.add(
                ProductVariant(
                    product_id=product.id,
                    size=size,
                    color=color,
                    stock_quantity=stock,
                )
            )

        logger.info(
            "product.created",
            product_id=str(product.id),
            curator_id=str(curator.id),
            variants=len(combinations),
        )
        return str(product.id)
