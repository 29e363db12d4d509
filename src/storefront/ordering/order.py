"""Order aggregate (CQRS): a snapshot of the cart taken at checkout.

Line prices, colours and quantities are frozen when the order is placed and
the total is never recomputed. Two status axes move independently under
admin control: the receipt-verification status and the fulfillment status.
The first transition of the receipt into ``verified`` marks the order's stock
as applied and raises ``ReceiptVerified``; later transitions never do.
"""

import json
from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import InvalidStateError, ValidationError
from protean.fields import Boolean, DateTime, Float, HasMany, Identifier, Integer, String, Text

from storefront.domain import storefront
from storefront.ordering.events import OrderPlaced, OrderStatusUpdated, ReceiptVerified

# A declared total may differ from the server total by at most one cent.
TOTAL_TOLERANCE_CENTS = 1


def to_cents(amount) -> int:
    return round(amount * 100)


class OrderStatus(Enum):
    PENDING_PAYMENT = "pending_payment"
    PROCESSING = "processing"
    CONFIRMED = "confirmed"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class ReceiptStatus(Enum):
    PENDING = "pending"
    VERIFIED = "verified"
    REJECTED = "rejected"


class PaymentMethod(Enum):
    BANK_TRANSFER = "bank_transfer"


@storefront.entity(part_of="Order")
class OrderItem:
    product_id = Identifier(required=True)
    selected_color = String(required=True, max_length=50)
    quantity = Integer(required=True, min_value=1)
    unit_price = Float(required=True, min_value=0.0)

    @property
    def line_total(self) -> float:
        return self.unit_price * self.quantity


@storefront.aggregate
class Order:
    customer_id = Identifier(required=True)
    items = HasMany(OrderItem)
    total_amount = Float(required=True, min_value=0.0)
    payment_method = String(choices=PaymentMethod, default=PaymentMethod.BANK_TRANSFER.value)
    receipt = String(required=True, max_length=500)
    receipt_status = String(choices=ReceiptStatus, default=ReceiptStatus.PENDING.value)
    status = String(choices=OrderStatus, default=OrderStatus.PENDING_PAYMENT.value)
    admin_notes = Text()
    stock_applied = Boolean(default=False)
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def place(cls, customer_id, lines, receipt):
        """Create an order from priced lines.

        Args:
            lines: list of dicts with product_id, selected_color, quantity and
                unit_price (already read from the catalogue).
        """
        if not lines:
            raise ValidationError({"items": ["No order items"]})

        now = datetime.now(UTC)
        items = [
            OrderItem(
                product_id=line["product_id"],
                selected_color=line["selected_color"],
                quantity=line["quantity"],
                unit_price=line["unit_price"],
            )
            for line in lines
        ]
        total = round(sum(item.line_total for item in items), 2)

        order = cls(
            customer_id=customer_id,
            total_amount=total,
            payment_method=PaymentMethod.BANK_TRANSFER.value,
            receipt=receipt,
            receipt_status=ReceiptStatus.PENDING.value,
            status=OrderStatus.PENDING_PAYMENT.value,
            stock_applied=False,
            created_at=now,
            updated_at=now,
        )
        for item in items:
            order.add_items(item)

        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                customer_id=str(customer_id),
                items=json.dumps(order.line_snapshot()),
                total_amount=total,
                placed_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    def line_snapshot(self):
        return [
            {
                "product_id": str(item.product_id),
                "selected_color": item.selected_color,
                "quantity": item.quantity,
                "unit_price": item.unit_price,
            }
            for item in self.items
        ]

    def is_owned_by(self, customer_id) -> bool:
        return str(self.customer_id) == str(customer_id)

    def total_matches(self, declared_total) -> bool:
        """Compare in whole cents so a one-cent difference is accepted exactly."""
        return abs(to_cents(self.total_amount) - to_cents(declared_total)) <= TOTAL_TOLERANCE_CENTS

    # -------------------------------------------------------------------
    # Admin review
    # -------------------------------------------------------------------
    def update_status(self, status=None, receipt_status=None, admin_notes=None):
        """Apply a partial admin update.

        Raises ValidationError when a supplied status is outside its enumeration.
        """
        errors = {}
        if status is not None and status not in {s.value for s in OrderStatus}:
            errors["status"] = [f"Invalid status '{status}'"]
        if receipt_status is not None and receipt_status not in {s.value for s in ReceiptStatus}:
            errors["receipt_status"] = [f"Invalid receipt status '{receipt_status}'"]
        if errors:
            raise ValidationError(errors)

        previous_status = self.status
        previous_receipt_status = self.receipt_status

        if status is not None:
            self.status = status
        if receipt_status is not None:
            self.receipt_status = receipt_status
        if admin_notes is not None:
            self.admin_notes = admin_notes

        now = datetime.now(UTC)
        self.updated_at = now

        self.raise_(
            OrderStatusUpdated(
                order_id=str(self.id),
                status=self.status,
                receipt_status=self.receipt_status,
                previous_status=previous_status,
                previous_receipt_status=previous_receipt_status,
            )
        )

        if self.receipt_status == ReceiptStatus.VERIFIED.value and not self.stock_applied:
            self.stock_applied = True
            self.raise_(
                ReceiptVerified(
                    order_id=str(self.id),
                    items=json.dumps(self.line_snapshot()),
                    verified_at=now,
                )
            )

    # -------------------------------------------------------------------
    # Cancellation
    # -------------------------------------------------------------------
    def ensure_cancellable(self):
        if self.status != OrderStatus.PENDING_PAYMENT.value:
            raise InvalidStateError(f"Cannot cancel order. Order status is {self.status}")
