"""Per-colour stock decrement: command and handler.

Each call adjusts a single order line in its own unit of work. Missing
products, unknown colours and untracked stock are skipped, not errors.
"""

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier, Integer, String
from protean.utils.globals import current_domain

from storefront.catalogue.product import Product
from storefront.domain import storefront

logger = structlog.get_logger(__name__)


@storefront.command(part_of="Product")
class DecrementColorStock:
    product_id = Identifier(required=True)
    color = String(required=True, max_length=50)
    quantity = Integer(required=True, min_value=1)
    order_id = Identifier()


@storefront.command_handler(part_of=Product)
class DecrementColorStockHandler:
    @handle(DecrementColorStock)
    def decrement_color_stock(self, command):
        repo = current_domain.repository_for(Product)
        try:
            product = repo.get(command.product_id)
        except ObjectNotFoundError:
            logger.info(
                "Skipping stock decrement for missing product",
                product_id=str(command.product_id),
                order_id=str(command.order_id),
            )
            return False

        if not product.decrement_color_stock(command.color, command.quantity):
            logger.info(
                "Skipping stock decrement for unknown or untracked colour",
                product_id=str(command.product_id),
                color=command.color,
                order_id=str(command.order_id),
            )
            return False

        repo.add(product)
        logger.info(
            "Decremented colour stock",
            product_id=str(command.product_id),
            color=command.color,
            quantity=command.quantity,
            remaining=product.find_color(command.color).quantity,
            order_id=str(command.order_id),
        )
        return True
