"""Catalogue reacts to Order events: verified receipts reduce colour stock.

Each order line is dispatched as its own DecrementColorStock command, so a
failure on one line is logged and the remaining lines are still adjusted.
Concurrent edits to the same product are caught by the aggregate version
check and retried a bounded number of times.
"""

import json

import structlog
from protean.exceptions import ExpectedVersionError
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from storefront.catalogue.product import Product
from storefront.catalogue.stock import DecrementColorStock
from storefront.domain import storefront
from storefront.ordering.events import ReceiptVerified

MAX_ATTEMPTS = 3


@storefront.event_handler(part_of=Product, stream_category="storefront::order")
class OrderStockEventHandler:
    """Applies stock decrements once an order's receipt is verified."""

    @handle(ReceiptVerified)
    def on_receipt_verified(self, event: ReceiptVerified) -> None:
        logger = structlog.get_logger(__name__).bind(order_id=str(event.order_id))

        items = json.loads(event.items) if isinstance(event.items, str) else event.items
        logger.info("Applying stock for verified order", lines=len(items))

        adjusted = 0
        for line in items:
            command = DecrementColorStock(
                product_id=line["product_id"],
                color=line["selected_color"],
                quantity=line["quantity"],
                order_id=event.order_id,
            )
            for attempt in range(1, MAX_ATTEMPTS + 1):
                try:
                    if current_domain.process(command, asynchronous=False):
                        adjusted += 1
                    break
                except ExpectedVersionError:
                    logger.warning(
                        "Concurrent product edit during stock decrement",
                        product_id=line["product_id"],
                        attempt=attempt,
                    )
                except Exception as exc:
                    logger.error(
                        "Stock decrement failed",
                        product_id=line["product_id"],
                        color=line["selected_color"],
                        error=str(exc),
                    )
                    break
            else:
                logger.error(
                    "Gave up on stock decrement after repeated conflicts",
                    product_id=line["product_id"],
                    color=line["selected_color"],
                )

        logger.info("Stock applied for verified order", adjusted=adjusted, lines=len(items))
