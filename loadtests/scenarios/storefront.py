"""Storefront load test scenarios.

ShopperJourney walks register -> browse -> cart -> checkout with a receipt
upload -> order history. AdminReviewUser seeds the catalogue and verifies
receipts, which drives the stock-decrement workflow under load.

Admin credentials come from LOADTEST_ADMIN_USERNAME / LOADTEST_ADMIN_PASSWORD
(create the account first with ``python src/manage.py create-admin``).
"""

import json
import os
import random

from locust import HttpUser, SequentialTaskSet, between, task

from loadtests.data_generators import PDF_BYTES, cart_line, product_data, registration_data
from loadtests.helpers.state import AdminState, ShopperState


def admin_login(client) -> str | None:
    resp = client.post(
        "/auth/login",
        json={
            "username": os.getenv("LOADTEST_ADMIN_USERNAME", "admin"),
            "password": os.getenv("LOADTEST_ADMIN_PASSWORD", "admin-password"),
        },
        name="POST /auth/login",
    )
    return resp.json()["token"] if resp.status_code == 200 else None


class ShopperJourney(SequentialTaskSet):
    """Register -> Browse -> Add to cart (x2) -> View cart -> Checkout -> Orders.

    Steps execute in order; each depends on the previous step succeeding.
    """

    def on_start(self):
        self.state = ShopperState()

    @task
    def register(self):
        with self.client.post(
            "/customers/register",
            json=registration_data(),
            catch_response=True,
            name="POST /customers/register",
        ) as resp:
            if resp.status_code == 201:
                body = resp.json()
                self.state.token = body["token"]
                self.state.customer_id = body["principal_id"]
            else:
                resp.failure(f"Registration failed: {resp.status_code}")
                self.interrupt()

    @task
    def browse(self):
        with self.client.get("/products", catch_response=True, name="GET /products") as resp:
            products = resp.json() if resp.status_code == 200 else []
            self.state.products = [p for p in products if p["colors"] and p["price"] is not None]
            if not self.state.products:
                resp.failure("No purchasable products in the catalogue")
                self.interrupt()

    @task
    def add_first_line(self):
        self._add_line()

    @task
    def add_second_line(self):
        self._add_line()

    def _add_line(self):
        product = random.choice(self.state.products)
        with self.client.post(
            "/cart",
            json=cart_line(product),
            headers=self.state.headers,
            catch_response=True,
            name="POST /cart",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Add to cart failed: {resp.status_code}")

    @task
    def view_cart(self):
        with self.client.get("/cart", headers=self.state.headers, catch_response=True, name="GET /cart") as resp:
            if resp.status_code != 200 or not resp.json()["items"]:
                resp.failure("Cart is empty before checkout")
                self.interrupt()
            self.lines = resp.json()["items"]

    @task
    def checkout(self):
        items = [
            {"product_id": line["product_id"], "selected_color": line["selected_color"], "quantity": line["quantity"]}
            for line in self.lines
        ]
        total = round(sum(line["product"]["price"] * line["quantity"] for line in self.lines if line["product"]), 2)
        with self.client.post(
            "/orders",
            data={"items": json.dumps(items), "total_amount": str(total)},
            files={"receipt": ("transfer.pdf", PDF_BYTES, "application/pdf")},
            headers=self.state.headers,
            catch_response=True,
            name="POST /orders",
        ) as resp:
            if resp.status_code == 201:
                self.state.order_ids.append(resp.json()["id"])
            else:
                resp.failure(f"Checkout failed: {resp.status_code}")

    @task
    def order_history(self):
        self.client.get("/orders", headers=self.state.headers, name="GET /orders")
        self.interrupt()


class ShopperUser(HttpUser):
    """Customers checking out with bank-transfer receipts."""

    wait_time = between(1.0, 3.0)
    tasks = [ShopperJourney]


class AdminReviewUser(HttpUser):
    """Back-office admin: keeps the catalogue stocked and verifies receipts."""

    wait_time = between(2.0, 5.0)
    weight = 1

    def on_start(self):
        self.state = AdminState(token=admin_login(self.client))

    @task(1)
    def create_product(self):
        with self.client.post(
            "/products",
            json=product_data(),
            headers=self.state.headers,
            catch_response=True,
            name="POST /products",
        ) as resp:
            if resp.status_code == 201:
                self.state.product_ids.append(resp.json()["product_id"])
            else:
                resp.failure(f"Create product failed: {resp.status_code}")

    @task(3)
    def verify_pending_receipts(self):
        resp = self.client.get("/admin/orders", headers=self.state.headers, name="GET /admin/orders")
        if resp.status_code != 200:
            return
        pending = [
            o for o in resp.json() if o["receipt_status"] == "pending" and o["id"] not in self.state.reviewed_order_ids
        ]
        for order in pending[:5]:
            with self.client.put(
                f"/admin/orders/{order['id']}/status",
                json={"receipt_status": "verified", "status": "confirmed"},
                headers=self.state.headers,
                catch_response=True,
                name="PUT /admin/orders/{id}/status",
            ) as review:
                if review.status_code == 200:
                    self.state.reviewed_order_ids.add(order["id"])
                else:
                    review.failure(f"Verify receipt failed: {review.status_code}")
