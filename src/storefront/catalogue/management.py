"""Product management: commands and handler used by store admins."""

import json

from protean import handle
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from storefront.catalogue.product import Product
from storefront.domain import storefront


@storefront.command(part_of="Product")
class CreateProduct:
    name = String(required=True, max_length=255)
    product_type = String(required=True, max_length=20)
    offerings = Text(required=True)  # JSON: list of offering dicts
    status = String(max_length=20)


@storefront.command(part_of="Product")
class ChangeProductStatus:
    product_id = Identifier(required=True)
    status = String(required=True, max_length=20)


@storefront.command(part_of="Product")
class UpdateOffering:
    """Patch price or stock of the product's primary offering."""

    product_id = Identifier(required=True)
    changes = Text(required=True)  # JSON: subset of regular_price, sale_price, stock


@storefront.command(part_of="Product")
class TrashProduct:
    product_id = Identifier(required=True)


@storefront.command_handler(part_of=Product)
class ManageProductHandler:
    @handle(CreateProduct)
    def create_product(self, command):
        offerings = json.loads(command.offerings) if isinstance(command.offerings, str) else command.offerings
        product = Product.create(
            name=command.name,
            product_type=command.product_type,
            offerings=offerings,
            status=command.status,
        )
        current_domain.repository_for(Product).add(product)
        return str(product.id)

    @handle(ChangeProductStatus)
    def change_status(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get_live(command.product_id)
        product.change_status(command.status)
        repo.add(product)

    @handle(UpdateOffering)
    def update_offering(self, command):
        changes = json.loads(command.changes) if isinstance(command.changes, str) else command.changes
        repo = current_domain.repository_for(Product)
        product = repo.get_live(command.product_id)
        product.update_offering(changes)
        repo.add(product)

    @handle(TrashProduct)
    def trash_product(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get_live(command.product_id)
        product.trash()
        repo.add(product)
