import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from shared.auth import ADMIN_ROLE, CUSTOMER_ROLE, issue_token
from shared.errors import register_error_handlers
from storefront.api.routes import (
    admin_router,
    auth_router,
    cart_router,
    customer_router,
    order_router,
    product_router,
)


def build_app() -> FastAPI:
    app = FastAPI()
    register_error_handlers(app)
    app.include_router(auth_router)
    app.include_router(customer_router)
    app.include_router(product_router)
    app.include_router(cart_router)
    app.include_router(order_router)
    app.include_router(admin_router)
    return app


@pytest.fixture()
def client():
    return TestClient(build_app())


@pytest.fixture()
def admin_headers():
    return {"Authorization": f"Bearer {issue_token('admin-001', ADMIN_ROLE)}"}


@pytest.fixture()
def customer_headers(customer_id):
    return {"Authorization": f"Bearer {issue_token(customer_id, CUSTOMER_ROLE)}"}


@pytest.fixture()
def lenient_client():
    """Client that returns 500 responses instead of re-raising server errors."""
    return TestClient(build_app(), raise_server_exceptions=False)
