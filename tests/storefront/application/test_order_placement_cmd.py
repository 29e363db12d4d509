"""Application tests for checkout: PlaceOrder pricing, validation and cart clearing."""

import json

import pytest
from protean import current_domain
from protean.exceptions import ValidationError
from storefront.cart.items import AddToCart
from storefront.customer.customer import Customer
from storefront.ordering.order import Order, OrderStatus, ReceiptStatus
from storefront.ordering.placement import PlaceOrder, parse_order_items


def _place(customer_id, items, total_amount, receipt="memory://receipts/receipt-1.pdf"):
    return current_domain.process(
        PlaceOrder(
            customer_id=customer_id,
            items=json.dumps(items),
            total_amount=total_amount,
            receipt=receipt,
        ),
        asynchronous=False,
    )


class TestParseOrderItems:
    def test_valid_items(self):
        items = parse_order_items('[{"product_id": "p1", "selected_color": "Red", "quantity": 2}]')
        assert items[0]["quantity"] == 2

    def test_malformed_json(self):
        with pytest.raises(ValidationError) as exc:
            parse_order_items("[not json")
        assert exc.value.messages["items"] == ["Invalid items format"]

    def test_empty_list(self):
        with pytest.raises(ValidationError) as exc:
            parse_order_items("[]")
        assert exc.value.messages["items"] == ["No order items"]

    def test_missing_color(self):
        with pytest.raises(ValidationError):
            parse_order_items('[{"product_id": "p1", "quantity": 1}]')

    @pytest.mark.parametrize("quantity", [0, -1, 1.5, "2", True])
    def test_quantity_must_be_positive_integer(self, quantity):
        with pytest.raises(ValidationError):
            parse_order_items(json.dumps([{"product_id": "p1", "selected_color": "Red", "quantity": quantity}]))


class TestPlaceOrder:
    def test_creates_pending_order(self, create_product, customer_id):
        product_id = create_product(price=120.0)
        order_id = _place(
            customer_id,
            [{"product_id": product_id, "selected_color": "Red", "quantity": 2}],
            240.0,
        )

        order = current_domain.repository_for(Order).get(order_id)
        assert order.status == OrderStatus.PENDING_PAYMENT.value
        assert order.receipt_status == ReceiptStatus.PENDING.value
        assert order.total_amount == pytest.approx(240.0)
        assert order.receipt == "memory://receipts/receipt-1.pdf"
        assert len(order.items) == 1
        assert order.items[0].unit_price == pytest.approx(120.0)
        assert order.items[0].selected_color == "Red"

    def test_prices_come_from_catalogue(self, create_product, customer_id):
        product_id = create_product(price=50.0)
        with pytest.raises(ValidationError) as exc:
            _place(
                customer_id,
                [{"product_id": product_id, "selected_color": "Red", "quantity": 1, "price": 1.0}],
                1.0,
            )
        assert "total_amount" in exc.value.messages

    def test_total_within_tolerance_accepted(self, create_product, customer_id):
        product_id = create_product(price=33.33)
        order_id = _place(
            customer_id,
            [{"product_id": product_id, "selected_color": "Red", "quantity": 3}],
            100.0,
        )
        order = current_domain.repository_for(Order).get(order_id)
        assert order.total_amount == pytest.approx(99.99)

    def test_total_one_cent_over_accepted(self, create_product, customer_id):
        product_id = create_product(price=0.10)
        order_id = _place(
            customer_id,
            [{"product_id": product_id, "selected_color": "Red", "quantity": 3}],
            0.31,
        )
        assert current_domain.repository_for(Order).get(order_id).total_amount == pytest.approx(0.30)

    def test_total_two_cents_over_rejected(self, create_product, customer_id):
        product_id = create_product(price=0.10)
        with pytest.raises(ValidationError) as exc:
            _place(
                customer_id,
                [{"product_id": product_id, "selected_color": "Red", "quantity": 3}],
                0.32,
            )
        assert "total_amount" in exc.value.messages

    def test_unknown_product_rejected(self, customer_id):
        with pytest.raises(ValidationError) as exc:
            _place(customer_id, [{"product_id": "missing", "selected_color": "Red", "quantity": 1}], 10.0)
        assert "items" in exc.value.messages

    def test_unpriced_product_rejected(self, create_product, customer_id):
        product_id = create_product(price=None)
        with pytest.raises(ValidationError):
            _place(customer_id, [{"product_id": product_id, "selected_color": "Red", "quantity": 1}], 0.0)

    def test_clears_the_cart(self, create_product, customer_id):
        product_id = create_product()
        current_domain.process(
            AddToCart(customer_id=customer_id, product_id=product_id, selected_color="Red", quantity=2),
            asynchronous=False,
        )

        _place(customer_id, [{"product_id": product_id, "selected_color": "Red", "quantity": 2}], 200.0)

        customer = current_domain.repository_for(Customer).get(customer_id)
        assert len(customer.cart_lines) == 0

    def test_rejected_checkout_keeps_the_cart(self, create_product, customer_id):
        product_id = create_product()
        current_domain.process(
            AddToCart(customer_id=customer_id, product_id=product_id, selected_color="Red", quantity=2),
            asynchronous=False,
        )

        with pytest.raises(ValidationError):
            _place(customer_id, [{"product_id": product_id, "selected_color": "Red", "quantity": 2}], 1.0)

        customer = current_domain.repository_for(Customer).get(customer_id)
        assert len(customer.cart_lines) == 1
        assert current_domain.repository_for(Order)._dao.query.all().items == []

    def test_stock_is_not_touched_at_checkout(self, create_product, customer_id):
        from storefront.catalogue.product import Product

        product_id = create_product()
        _place(customer_id, [{"product_id": product_id, "selected_color": "Red", "quantity": 4}], 400.0)

        product = current_domain.repository_for(Product).get(product_id)
        assert product.find_color("Red").quantity == 10
