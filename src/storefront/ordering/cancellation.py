"""Customer cancellation of an unpaid order."""

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.ordering.order import Order

logger = structlog.get_logger(__name__)


def get_owned_order(order_id, customer_id):
    """Load an order only if it belongs to the customer; otherwise it does not exist."""
    try:
        order = current_domain.repository_for(Order).get(order_id)
    except ObjectNotFoundError:
        raise ObjectNotFoundError("Order not found") from None
    if not order.is_owned_by(customer_id):
        raise ObjectNotFoundError("Order not found")
    return order


@storefront.command(part_of="Order")
class CancelOrder:
    order_id = Identifier(required=True)
    customer_id = Identifier(required=True)


@storefront.command_handler(part_of=Order)
class CancelOrderHandler:
    @handle(CancelOrder)
    def cancel_order(self, command):
        """Delete the order and return its receipt path so the caller can remove the file."""
        order = get_owned_order(command.order_id, command.customer_id)
        order.ensure_cancellable()

        receipt = order.receipt
        current_domain.repository_for(Order)._dao.delete(order)
        logger.info("Order cancelled", order_id=str(command.order_id), customer_id=str(command.customer_id))
        return receipt
