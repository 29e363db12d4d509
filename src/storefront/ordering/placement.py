"""Checkout: turn the customer's selections into an Order and empty the cart.

Unit prices are read from the catalogue, never from the client. The total
the client declares must match the server's total within one cent.
The order insert and the cart clear commit in the same unit of work.
"""

import json

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Float, Identifier, String, Text
from protean.utils.globals import current_domain

from storefront.catalogue.product import Product
from storefront.customer.customer import Customer
from storefront.domain import storefront
from storefront.ordering.order import Order

logger = structlog.get_logger(__name__)


@storefront.command(part_of="Order")
class PlaceOrder:
    customer_id = Identifier(required=True)
    items = Text(required=True)  # JSON: [{product_id, selected_color, quantity}]
    total_amount = Float(required=True, min_value=0.0)
    receipt = String(required=True, max_length=500)


def parse_order_items(raw):
    """Decode and shape-check the requested lines."""
    try:
        items = json.loads(raw) if isinstance(raw, str) else raw
    except json.JSONDecodeError:
        raise ValidationError({"items": ["Invalid items format"]}) from None

    if not isinstance(items, list) or not items:
        raise ValidationError({"items": ["No order items"]})

    for item in items:
        if not isinstance(item, dict) or not item.get("product_id") or not item.get("selected_color"):
            raise ValidationError({"items": ["Each item needs a product_id and a selected_color"]})
        quantity = item.get("quantity")
        if not isinstance(quantity, int) or isinstance(quantity, bool) or quantity < 1:
            raise ValidationError({"items": ["Each item quantity must be a whole number of at least 1"]})
    return items


def price_lines(items):
    """Attach the catalogue's current unit price to every requested line."""
    product_repo = current_domain.repository_for(Product)
    priced = []
    for item in items:
        try:
            product = product_repo.get(item["product_id"])
        except ObjectNotFoundError:
            raise ValidationError({"items": [f"Product {item['product_id']} does not exist"]}) from None
        if product.price is None:
            raise ValidationError({"items": [f"Product {item['product_id']} has no price"]})
        priced.append(
            {
                "product_id": str(product.id),
                "selected_color": item["selected_color"],
                "quantity": item["quantity"],
                "unit_price": product.price,
            }
        )
    return priced


@storefront.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        lines = price_lines(parse_order_items(command.items))

        order = Order.place(
            customer_id=command.customer_id,
            lines=lines,
            receipt=command.receipt,
        )
        if not order.total_matches(command.total_amount):
            raise ValidationError(
                {"total_amount": [f"Total does not match current prices (expected {order.total_amount:.2f})"]}
            )

        customer_repo = current_domain.repository_for(Customer)
        customer = customer_repo.get(command.customer_id)

        current_domain.repository_for(Order).add(order)
        customer.clear_cart()
        customer_repo.add(customer)

        logger.info(
            "Order placed",
            order_id=str(order.id),
            customer_id=str(command.customer_id),
            total_amount=order.total_amount,
            lines=len(lines),
        )
        return str(order.id)
