"""Admin order review: status and receipt-verification updates."""

import structlog
from protean import handle
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.ordering.order import Order

logger = structlog.get_logger(__name__)


@storefront.command(part_of="Order")
class UpdateOrderStatus:
    order_id = Identifier(required=True)
    status = String(max_length=20)
    receipt_status = String(max_length=20)
    admin_notes = Text()


@storefront.command_handler(part_of=Order)
class UpdateOrderStatusHandler:
    @handle(UpdateOrderStatus)
    def update_order_status(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.update_status(
            status=command.status,
            receipt_status=command.receipt_status,
            admin_notes=command.admin_notes,
        )
        repo.add(order)
        logger.info(
            "Order status updated",
            order_id=str(order.id),
            status=order.status,
            receipt_status=order.receipt_status,
            stock_applied=order.stock_applied,
        )
