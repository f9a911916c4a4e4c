"""Product details and activation — commands and handler."""

from protean import handle
from protean.fields import Boolean, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from marketplace.catalogue.product import Product
from marketplace.curator.curator import Curator
from marketplace.domain import marketplace


@marketplace.command(part_of="Product")
class UpdateProductDetails:
    product_id = Identifier(required=True)
    user_id = Identifier(required=True)
    title = String(max_length=255)
    description = Text()
    price = Integer(min_value=0)
    category = String(max_length=100)
    tags = String(max_length=500)


@marketplace.command(part_of="Product")
class SetProductActive:
    product_id = Identifier(required=True)
    user_id = Identifier(required=True)
    is_active = Boolean(required=True)


@marketplace.command_handler(part_of=Product)
class ManageProductHandler:
    @handle(UpdateProductDetails)
    def update_details(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        curator = current_domain.repository_for(Curator).acting_curator(command.user_id)
        product.assert_owned_by(curator.id)

        product.update_details(
            title=command.title,
            description=command.description,
            price=command.price,
            category=command.category,
            tags=command.tags,
        )
        repo.add(product)

    @handle(SetProductActive)
    def set_active(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        curator = current_domain.repository_for(Curator).acting_curator(command.user_id)
        product.assert_owned_by(curator.id)

        product.set_active(command.is_active)
        repo.add(product)
