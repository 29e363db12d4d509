"""Shared BDD fixtures and step definitions for the Storefront domain.

Steps drive the HTTP surface so that receipt storage and cleanup, which live
in the checkout route, are part of every scenario.
"""

import json
from unittest.mock import patch

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from protean import current_domain
from pytest_bdd import given, parsers, then, when
from shared.auth import ADMIN_ROLE, CUSTOMER_ROLE, issue_token
from shared.errors import register_error_handlers
from storefront.api.routes import admin_router, cart_router, order_router
from storefront.catalogue.product import Product
from storefront.ordering.order import Order


@pytest.fixture()
def client():
    app = FastAPI()
    register_error_handlers(app)
    app.include_router(cart_router)
    app.include_router(order_router)
    app.include_router(admin_router)
    return TestClient(app, raise_server_exceptions=False)


@pytest.fixture()
def checkout():
    """Container for the last checkout response."""
    return {"response": None}


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(
    parsers.cfparse('a product with colour "{color}" stocked at {quantity:d} and priced {price:f}'),
    target_fixture="product_id",
)
def product_with_color(create_product, color, quantity, price):
    return create_product(price=price, colors=[{"name": color, "quantity": quantity}])


@given("a signed-in customer", target_fixture="customer_headers")
def signed_in_customer(customer_id):
    return {"Authorization": f"Bearer {issue_token(customer_id, CUSTOMER_ROLE)}"}


@pytest.fixture()
def admin_headers():
    return {"Authorization": f"Bearer {issue_token('admin-bdd', ADMIN_ROLE)}"}


# ---------------------------------------------------------------------------
# When steps
# ---------------------------------------------------------------------------
@when(parsers.cfparse('the customer adds {quantity:d} "{color}" to the cart'))
def add_to_cart(client, customer_headers, product_id, quantity, color):
    response = client.post(
        "/cart",
        headers=customer_headers,
        json={"product_id": product_id, "selected_color": color, "quantity": quantity},
    )
    assert response.status_code == 200


def _submit_cart(client, headers, declared_total=None):
    lines = client.get("/cart", headers=headers).json()["items"]
    items = [
        {"product_id": line["product_id"], "selected_color": line["selected_color"], "quantity": line["quantity"]}
        for line in lines
    ]
    total = declared_total
    if total is None:
        total = sum(line["product"]["price"] * line["quantity"] for line in lines)
    return client.post(
        "/orders",
        headers=headers,
        data={"items": json.dumps(items), "total_amount": str(total)},
        files={"receipt": ("transfer.pdf", b"%PDF-1.4 bank slip", "application/pdf")},
    )


@when("the customer checks out with a receipt")
def check_out(client, customer_headers, checkout):
    checkout["response"] = _submit_cart(client, customer_headers)
    assert checkout["response"].status_code == 201


@when(parsers.cfparse("the customer checks out with a receipt declaring a total of {total:f}"))
def check_out_with_total(client, customer_headers, checkout, total):
    checkout["response"] = _submit_cart(client, customer_headers, declared_total=total)


@when("the order store fails during checkout")
def check_out_with_failing_store(client, customer_headers, checkout):
    with patch.object(Order, "place", side_effect=RuntimeError("connection lost")):
        checkout["response"] = _submit_cart(client, customer_headers)


@when(parsers.cfparse('the admin sets the receipt status to "{receipt_status}"'))
def admin_sets_receipt_status(client, admin_headers, checkout, receipt_status):
    order_id = checkout["response"].json()["id"]
    response = client.put(
        f"/admin/orders/{order_id}/status",
        headers=admin_headers,
        json={"receipt_status": receipt_status},
    )
    assert response.status_code == 200


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse("the cart has {count:d} line with quantity {quantity:d}"))
def cart_has_line(client, customer_headers, count, quantity):
    lines = client.get("/cart", headers=customer_headers).json()["items"]
    assert len(lines) == count
    assert lines[0]["quantity"] == quantity


@then(parsers.cfparse('the "{color}" stock is {quantity:d}'))
def color_stock_is(product_id, color, quantity):
    product = current_domain.repository_for(Product).get(product_id)
    assert product.find_color(color).quantity == quantity


@then(parsers.cfparse("the checkout is refused with status {status:d}"))
def checkout_refused(checkout, status):
    assert checkout["response"].status_code == status


@then("no receipt file remains")
def no_receipt_file(file_storage):
    assert file_storage.files == {}
