"""Domain events for the Order aggregate."""

from protean.fields import DateTime, Float, Identifier, String, Text

from storefront.domain import storefront


@storefront.event(part_of="Order")
class OrderPlaced:
    """A customer checked out their cart with a bank-transfer receipt."""

    __version__ = 1

    order_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    items = Text(required=True)  # JSON: list of line dicts
    total_amount = Float(required=True)
    placed_at = DateTime(required=True)


@storefront.event(part_of="Order")
class OrderStatusUpdated:
    """An admin changed the order's fulfillment status, receipt status or notes."""

    __version__ = 1

    order_id = Identifier(required=True)
    status = String(required=True)
    receipt_status = String(required=True)
    previous_status = String(required=True)
    previous_receipt_status = String(required=True)


@storefront.event(part_of="Order")
class ReceiptVerified:
    """The receipt was verified for the first time; stock must now be adjusted."""

    __version__ = 1

    order_id = Identifier(required=True)
    items = Text(required=True)  # JSON: [{product_id, selected_color, quantity}]
    verified_at = DateTime(required=True)
