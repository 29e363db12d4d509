"""Product catalogue management: commands and handler for admin edits."""

import json

import structlog
from protean import handle
from protean.fields import Boolean, Float, Identifier, String, Text
from protean.utils.globals import current_domain

from storefront.catalogue.product import Product
from storefront.domain import storefront

logger = structlog.get_logger(__name__)


def _load(value):
    if value is None:
        return None
    return json.loads(value) if isinstance(value, str) else value


@storefront.command(part_of="Product")
class CreateProduct:
    title = String(required=True, max_length=100)
    description = Text(required=True)
    brand = String(required=True, max_length=100)
    watch_shape = String(required=True, max_length=20)
    product_type = String(max_length=20)
    gender = String(max_length=10)
    price = Float(min_value=0.0)
    model_number = String(max_length=100)
    colors = Text()  # JSON: [{"name": ..., "quantity": int | null}]
    specifications = Text()  # JSON: [{"key": ..., "value": ...}]
    images = Text()  # JSON: list of URLs
    video = String(max_length=500)
    featured = Boolean(default=False)


@storefront.command(part_of="Product")
class UpdateProductDetails:
    product_id = Identifier(required=True)
    title = String(max_length=100)
    description = Text()
    brand = String(max_length=100)
    watch_shape = String(max_length=20)
    product_type = String(max_length=20)
    gender = String(max_length=10)
    price = Float(min_value=0.0)
    model_number = String(max_length=100)
    specifications = Text()
    images = Text()
    video = String(max_length=500)


@storefront.command(part_of="Product")
class SetProductColors:
    product_id = Identifier(required=True)
    colors = Text(required=True)


@storefront.command(part_of="Product")
class ActivateProduct:
    product_id = Identifier(required=True)


@storefront.command(part_of="Product")
class DeactivateProduct:
    product_id = Identifier(required=True)


@storefront.command(part_of="Product")
class MarkFeatured:
    product_id = Identifier(required=True)
    featured = Boolean(default=True)


@storefront.command(part_of="Product")
class DeleteProduct:
    product_id = Identifier(required=True)


@storefront.command_handler(part_of=Product)
class ManageProductHandler:
    @handle(CreateProduct)
    def create_product(self, command):
        product = Product.create(
            title=command.title,
            description=command.description,
            brand=command.brand,
            watch_shape=command.watch_shape,
            product_type=command.product_type,
            gender=command.gender,
            price=command.price,
            model_number=command.model_number,
            colors=_load(command.colors),
            specifications=_load(command.specifications),
            images=_load(command.images),
            video=command.video,
            featured=command.featured,
        )
        current_domain.repository_for(Product).add(product)
        logger.info("Product created", product_id=str(product.id), title=product.title)
        return str(product.id)

    @handle(UpdateProductDetails)
    def update_product_details(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.update_details(
            title=command.title,
            description=command.description,
            brand=command.brand,
            watch_shape=command.watch_shape,
            product_type=command.product_type,
            gender=command.gender,
            price=command.price,
            model_number=command.model_number,
            images=_load(command.images),
            video=command.video,
        )
        specifications = _load(command.specifications)
        if specifications is not None:
            product.replace_specifications(specifications)
        repo.add(product)

    @handle(SetProductColors)
    def set_product_colors(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.replace_colors(_load(command.colors))
        repo.add(product)
        logger.info("Product colours replaced", product_id=str(product.id), colors=len(product.colors))

    @handle(ActivateProduct)
    def activate_product(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.activate()
        repo.add(product)

    @handle(DeactivateProduct)
    def deactivate_product(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.deactivate()
        repo.add(product)

    @handle(MarkFeatured)
    def mark_featured(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.mark_featured(command.featured)
        repo.add(product)

    @handle(DeleteProduct)
    def delete_product(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        repo._dao.delete(product)
        logger.info("Product deleted", product_id=str(command.product_id))
