"""FastAPI routes for the Storefront domain: auth, customers, products, cart, orders and admin."""

import json

import structlog
from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.utils.globals import current_domain

from shared.auth import ADMIN_ROLE, CUSTOMER_ROLE, current_customer_id, issue_token, require_admin
from shared.storage import get_storage, stored_file_response
from shared.storage.port import RECEIPT_POLICY, read_upload
from storefront.api.schemas import (
    AddToCartRequest,
    AdminProfileResponse,
    CartResponse,
    ChangeAdminPasswordRequest,
    ChangeAdminUsernameRequest,
    CreateProductRequest,
    CustomerResponse,
    LoginRequest,
    MarkFeaturedRequest,
    OrderResponse,
    ProductIdResponse,
    ProductResponse,
    RegisterCustomerRequest,
    SetColorsRequest,
    SetCustomerStatusRequest,
    StatusResponse,
    TokenResponse,
    UpdateCartLineRequest,
    UpdateOrderStatusRequest,
    UpdateProductRequest,
    UpdateProfileRequest,
)
from storefront.cart.items import AddToCart, ClearCart, RemoveFromCart, UpdateCartLine
from storefront.cart.view import populated_cart
from storefront.catalogue.management import (
    ActivateProduct,
    CreateProduct,
    DeactivateProduct,
    DeleteProduct,
    MarkFeatured,
    SetProductColors,
    UpdateProductDetails,
)
from storefront.catalogue.product import Product, ProductStatus
from storefront.customer.admin_user import (
    AdminUser,
    ChangeAdminPassword,
    ChangeAdminUsername,
    authenticate_admin,
    confirm_admin_password,
)
from storefront.customer.customer import Customer
from storefront.customer.management import DeleteCustomer, SetCustomerActive, UpdateCustomerProfile
from storefront.customer.registration import RegisterCustomer, authenticate_customer
from storefront.ordering.cancellation import CancelOrder, get_owned_order
from storefront.ordering.order import Order
from storefront.ordering.placement import PlaceOrder
from storefront.ordering.review import UpdateOrderStatus

logger = structlog.get_logger(__name__)


async def signed_in_customer_id(customer_id: str = Depends(current_customer_id)) -> str:
    """Resolve the bearer token to a customer that still exists."""
    try:
        current_domain.repository_for(Customer).get(customer_id)
    except ObjectNotFoundError:
        raise HTTPException(status_code=401, detail="Not authorized, customer not found") from None
    return customer_id


# ---------------------------------------------------------------------------
# Serializers
# ---------------------------------------------------------------------------
def product_response(product: Product) -> ProductResponse:
    return ProductResponse(
        id=str(product.id),
        title=product.title,
        description=product.description,
        brand=product.brand,
        gender=product.gender,
        price=product.price,
        model_number=product.model_number,
        watch_shape=product.watch_shape,
        product_type=product.product_type,
        colors=[{"name": c.name, "quantity": c.quantity} for c in product.colors],
        specifications=[{"key": s.key, "value": s.value} for s in product.specifications],
        images=product.image_urls,
        video=product.video,
        featured=product.featured,
        status=product.status,
        created_at=product.created_at,
        updated_at=product.updated_at,
    )


def order_response(order: Order) -> OrderResponse:
    return OrderResponse(
        id=str(order.id),
        customer_id=str(order.customer_id),
        items=order.line_snapshot(),
        total_amount=order.total_amount,
        payment_method=order.payment_method,
        receipt=order.receipt,
        receipt_status=order.receipt_status,
        status=order.status,
        admin_notes=order.admin_notes,
        stock_applied=order.stock_applied,
        created_at=order.created_at,
        updated_at=order.updated_at,
    )


def customer_response(customer: Customer) -> CustomerResponse:
    return CustomerResponse(
        id=str(customer.id),
        full_name=customer.full_name,
        date_of_birth=customer.date_of_birth,
        country=customer.country,
        province=customer.province,
        city=customer.city,
        address=customer.address,
        mobile_number=customer.mobile_number,
        email=customer.email,
        username=customer.username,
        business_details=customer.business_details.to_dict() if customer.business_details else None,
        is_active=customer.is_active,
        is_verified=customer.is_verified,
        created_at=customer.created_at,
    )


def cart_response(customer_id: str) -> CartResponse:
    return CartResponse(items=populated_cart(customer_id))


# ---------------------------------------------------------------------------
# Admin Auth Router
# ---------------------------------------------------------------------------
auth_router = APIRouter(prefix="/auth", tags=["auth"])


@auth_router.post("/login", response_model=TokenResponse)
async def admin_login(body: LoginRequest) -> TokenResponse:
    admin = authenticate_admin(body.username, body.password)
    if admin is None:
        raise HTTPException(status_code=401, detail="Invalid credentials")
    return TokenResponse(token=issue_token(str(admin.id), ADMIN_ROLE), principal_id=str(admin.id), role=ADMIN_ROLE)


# ---------------------------------------------------------------------------
# Customer Router
# ---------------------------------------------------------------------------
customer_router = APIRouter(prefix="/customers", tags=["customers"])


@customer_router.post("/register", status_code=201, response_model=TokenResponse)
async def register_customer(body: RegisterCustomerRequest) -> TokenResponse:
    command = RegisterCustomer(
        full_name=body.full_name,
        date_of_birth=body.date_of_birth.isoformat(),
        country=body.country,
        province=body.province,
        city=body.city,
        address=body.address,
        mobile_number=body.mobile_number,
        email=body.email,
        username=body.username,
        password=body.password,
        business_details=json.dumps(body.business_details.model_dump()) if body.business_details else None,
    )
    customer_id = current_domain.process(command, asynchronous=False)
    return TokenResponse(token=issue_token(customer_id, CUSTOMER_ROLE), principal_id=customer_id, role=CUSTOMER_ROLE)


@customer_router.post("/login", response_model=TokenResponse)
async def login_customer(body: LoginRequest) -> TokenResponse:
    customer = authenticate_customer(body.username, body.password)
    if customer is None:
        raise HTTPException(status_code=401, detail="Invalid credentials")
    if not customer.is_active:
        raise HTTPException(status_code=403, detail="Account is deactivated")
    customer_id = str(customer.id)
    return TokenResponse(token=issue_token(customer_id, CUSTOMER_ROLE), principal_id=customer_id, role=CUSTOMER_ROLE)


@customer_router.get("/profile", response_model=CustomerResponse)
async def get_profile(customer_id: str = Depends(signed_in_customer_id)) -> CustomerResponse:
    customer = current_domain.repository_for(Customer).get(customer_id)
    return customer_response(customer)


@customer_router.put("/profile", response_model=CustomerResponse)
async def update_profile(
    body: UpdateProfileRequest, customer_id: str = Depends(signed_in_customer_id)
) -> CustomerResponse:
    command = UpdateCustomerProfile(
        customer_id=customer_id,
        full_name=body.full_name,
        date_of_birth=body.date_of_birth.isoformat() if body.date_of_birth else None,
        country=body.country,
        province=body.province,
        city=body.city,
        address=body.address,
        mobile_number=body.mobile_number,
        email=body.email,
        business_details=json.dumps(body.business_details.model_dump()) if body.business_details else None,
    )
    current_domain.process(command, asynchronous=False)
    return customer_response(current_domain.repository_for(Customer).get(customer_id))


# ---------------------------------------------------------------------------
# Product Router
# ---------------------------------------------------------------------------
product_router = APIRouter(prefix="/products", tags=["products"])


@product_router.get("", response_model=list[ProductResponse])
async def list_products() -> list[ProductResponse]:
    products = (
        current_domain.repository_for(Product)
        ._dao.query.filter(status=ProductStatus.ACTIVE.value)
        .order_by("-created_at")
        .all()
        .items
    )
    return [product_response(p) for p in products]


@product_router.get("/featured", response_model=list[ProductResponse])
async def list_featured_products() -> list[ProductResponse]:
    products = (
        current_domain.repository_for(Product)
        ._dao.query.filter(status=ProductStatus.ACTIVE.value, featured=True)
        .order_by("-created_at")
        .all()
        .items
    )
    return [product_response(p) for p in products]


@product_router.get("/admin", response_model=list[ProductResponse])
async def list_all_products(_admin: str = Depends(require_admin)) -> list[ProductResponse]:
    products = current_domain.repository_for(Product)._dao.query.order_by("-created_at").all().items
    return [product_response(p) for p in products]


@product_router.get("/{product_id}", response_model=ProductResponse)
async def get_product(product_id: str) -> ProductResponse:
    product = current_domain.repository_for(Product).get(product_id)
    if not product.is_active:
        raise ObjectNotFoundError("Product not found")
    return product_response(product)


@product_router.post("", status_code=201, response_model=ProductIdResponse)
async def create_product(body: CreateProductRequest, _admin: str = Depends(require_admin)) -> ProductIdResponse:
    command = CreateProduct(
        title=body.title,
        description=body.description,
        brand=body.brand,
        watch_shape=body.watch_shape,
        product_type=body.product_type,
        gender=body.gender,
        price=body.price,
        model_number=body.model_number,
        colors=json.dumps([c.model_dump() for c in body.colors]),
        specifications=json.dumps([s.model_dump() for s in body.specifications]),
        images=json.dumps(body.images),
        video=body.video,
        featured=body.featured,
    )
    result = current_domain.process(command, asynchronous=False)
    return ProductIdResponse(product_id=result)


@product_router.put("/{product_id}", response_model=ProductResponse)
async def update_product(
    product_id: str, body: UpdateProductRequest, _admin: str = Depends(require_admin)
) -> ProductResponse:
    command = UpdateProductDetails(
        product_id=product_id,
        title=body.title,
        description=body.description,
        brand=body.brand,
        watch_shape=body.watch_shape,
        product_type=body.product_type,
        gender=body.gender,
        price=body.price,
        model_number=body.model_number,
        specifications=json.dumps([s.model_dump() for s in body.specifications])
        if body.specifications is not None
        else None,
        images=json.dumps(body.images) if body.images is not None else None,
        video=body.video,
    )
    current_domain.process(command, asynchronous=False)
    return product_response(current_domain.repository_for(Product).get(product_id))


@product_router.put("/{product_id}/colors", response_model=ProductResponse)
async def set_product_colors(
    product_id: str, body: SetColorsRequest, _admin: str = Depends(require_admin)
) -> ProductResponse:
    command = SetProductColors(product_id=product_id, colors=json.dumps([c.model_dump() for c in body.colors]))
    current_domain.process(command, asynchronous=False)
    return product_response(current_domain.repository_for(Product).get(product_id))


@product_router.put("/{product_id}/activate", response_model=StatusResponse)
async def activate_product(product_id: str, _admin: str = Depends(require_admin)) -> StatusResponse:
    current_domain.process(ActivateProduct(product_id=product_id), asynchronous=False)
    return StatusResponse(status="active")


@product_router.put("/{product_id}/deactivate", response_model=StatusResponse)
async def deactivate_product(product_id: str, _admin: str = Depends(require_admin)) -> StatusResponse:
    current_domain.process(DeactivateProduct(product_id=product_id), asynchronous=False)
    return StatusResponse(status="inactive")


@product_router.put("/{product_id}/featured", response_model=StatusResponse)
async def mark_product_featured(
    product_id: str, body: MarkFeaturedRequest, _admin: str = Depends(require_admin)
) -> StatusResponse:
    current_domain.process(MarkFeatured(product_id=product_id, featured=body.featured), asynchronous=False)
    return StatusResponse()


@product_router.delete("/{product_id}", response_model=StatusResponse)
async def delete_product(product_id: str, _admin: str = Depends(require_admin)) -> StatusResponse:
    current_domain.process(DeleteProduct(product_id=product_id), asynchronous=False)
    return StatusResponse(status="deleted")


# ---------------------------------------------------------------------------
# Cart Router
# ---------------------------------------------------------------------------
cart_router = APIRouter(prefix="/cart", tags=["cart"])


@cart_router.get("", response_model=CartResponse)
async def view_cart(customer_id: str = Depends(signed_in_customer_id)) -> CartResponse:
    return cart_response(customer_id)


@cart_router.post("", response_model=CartResponse)
async def add_to_cart(body: AddToCartRequest, customer_id: str = Depends(signed_in_customer_id)) -> CartResponse:
    command = AddToCart(
        customer_id=customer_id,
        product_id=body.product_id,
        selected_color=body.selected_color,
        quantity=body.quantity,
    )
    current_domain.process(command, asynchronous=False)
    return cart_response(customer_id)


@cart_router.put("/{line_id}", response_model=CartResponse)
async def update_cart_line(
    line_id: str, body: UpdateCartLineRequest, customer_id: str = Depends(signed_in_customer_id)
) -> CartResponse:
    command = UpdateCartLine(
        customer_id=customer_id,
        line_id=line_id,
        quantity=body.quantity,
        selected_color=body.selected_color,
    )
    current_domain.process(command, asynchronous=False)
    return cart_response(customer_id)


@cart_router.delete("/{line_id}", response_model=CartResponse)
async def remove_cart_line(line_id: str, customer_id: str = Depends(signed_in_customer_id)) -> CartResponse:
    current_domain.process(RemoveFromCart(customer_id=customer_id, line_id=line_id), asynchronous=False)
    return cart_response(customer_id)


@cart_router.delete("", response_model=CartResponse)
async def clear_cart(customer_id: str = Depends(signed_in_customer_id)) -> CartResponse:
    current_domain.process(ClearCart(customer_id=customer_id), asynchronous=False)
    return cart_response(customer_id)


# ---------------------------------------------------------------------------
# Order Router
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/orders", tags=["orders"])


@order_router.post("", status_code=201, response_model=OrderResponse)
async def place_order(
    receipt: UploadFile | None = File(default=None),
    items: str | None = Form(default=None),
    total_amount: float | None = Form(default=None),
    customer_id: str = Depends(signed_in_customer_id),
) -> OrderResponse:
    """Check out with a bank-transfer receipt.

    The receipt is stored first; any failure afterwards removes it again.
    """
    if not items:
        raise ValidationError({"items": ["No order items"]})
    if receipt is None:
        raise ValidationError({"receipt": ["Payment receipt is required"]})

    content = await read_upload(RECEIPT_POLICY, receipt)

    storage = get_storage()
    path = storage.save("receipts", "receipt", receipt.filename, content)
    try:
        command = PlaceOrder(
            customer_id=customer_id,
            items=items,
            total_amount=total_amount,
            receipt=path,
        )
        order_id = current_domain.process(command, asynchronous=False)
    except Exception:
        try:
            storage.delete(path)
        except OSError as exc:
            logger.error("Failed to remove receipt after aborted checkout", path=path, error=str(exc))
        raise

    return order_response(current_domain.repository_for(Order).get(order_id))


@order_router.get("", response_model=list[OrderResponse])
async def list_my_orders(customer_id: str = Depends(signed_in_customer_id)) -> list[OrderResponse]:
    orders = (
        current_domain.repository_for(Order)
        ._dao.query.filter(customer_id=customer_id)
        .order_by("-created_at")
        .all()
        .items
    )
    return [order_response(o) for o in orders]


@order_router.get("/{order_id}", response_model=OrderResponse)
async def get_my_order(order_id: str, customer_id: str = Depends(signed_in_customer_id)) -> OrderResponse:
    return order_response(get_owned_order(order_id, customer_id))


@order_router.delete("/{order_id}", response_model=StatusResponse)
async def cancel_order(order_id: str, customer_id: str = Depends(signed_in_customer_id)) -> StatusResponse:
    receipt = current_domain.process(CancelOrder(order_id=order_id, customer_id=customer_id), asynchronous=False)
    if receipt:
        try:
            get_storage().delete(receipt)
        except OSError as exc:
            logger.warning("Failed to remove receipt of cancelled order", order_id=order_id, error=str(exc))
    return StatusResponse(status="cancelled")


# ---------------------------------------------------------------------------
# Admin Router
# ---------------------------------------------------------------------------
admin_router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(require_admin)])


@admin_router.get("/orders", response_model=list[OrderResponse])
async def list_all_orders() -> list[OrderResponse]:
    orders = current_domain.repository_for(Order)._dao.query.order_by("-created_at").all().items
    return [order_response(o) for o in orders]


@admin_router.get("/orders/{order_id}", response_model=OrderResponse)
async def get_any_order(order_id: str) -> OrderResponse:
    return order_response(current_domain.repository_for(Order).get(order_id))


@admin_router.get("/orders/{order_id}/receipt")
async def download_receipt(order_id: str):
    """Serve the bank-transfer receipt attached to an order."""
    order = current_domain.repository_for(Order).get(order_id)
    return stored_file_response(order.receipt)


@admin_router.put("/orders/{order_id}/status", response_model=OrderResponse)
async def update_order_status(order_id: str, body: UpdateOrderStatusRequest) -> OrderResponse:
    command = UpdateOrderStatus(
        order_id=order_id,
        status=body.status,
        receipt_status=body.receipt_status,
        admin_notes=body.admin_notes,
    )
    current_domain.process(command, asynchronous=False)
    return order_response(current_domain.repository_for(Order).get(order_id))


@admin_router.get("/customers", response_model=list[CustomerResponse])
async def list_customers() -> list[CustomerResponse]:
    customers = current_domain.repository_for(Customer)._dao.query.order_by("-created_at").all().items
    return [customer_response(c) for c in customers]


@admin_router.get("/customers/{customer_id}", response_model=CustomerResponse)
async def get_customer(customer_id: str) -> CustomerResponse:
    return customer_response(current_domain.repository_for(Customer).get(customer_id))


@admin_router.put("/customers/{customer_id}/status", response_model=CustomerResponse)
async def set_customer_status(customer_id: str, body: SetCustomerStatusRequest) -> CustomerResponse:
    current_domain.process(SetCustomerActive(customer_id=customer_id, is_active=body.is_active), asynchronous=False)
    return customer_response(current_domain.repository_for(Customer).get(customer_id))


@admin_router.delete("/customers/{customer_id}", response_model=StatusResponse)
async def delete_customer(customer_id: str) -> StatusResponse:
    current_domain.process(DeleteCustomer(customer_id=customer_id), asynchronous=False)
    return StatusResponse(status="deleted")


# ---------------------------------------------------------------------------
# Admin Profile
# ---------------------------------------------------------------------------
def _admin_profile(admin: AdminUser) -> AdminProfileResponse:
    return AdminProfileResponse(
        id=str(admin.id), username=admin.username, email=admin.email, created_at=admin.created_at
    )


def _confirmed_admin(admin_id: str, current_password: str) -> AdminUser:
    admin = confirm_admin_password(admin_id, current_password)
    if admin is None:
        raise HTTPException(status_code=401, detail="Current password is incorrect")
    return admin


@admin_router.get("/profile", response_model=AdminProfileResponse)
async def get_admin_profile(admin_id: str = Depends(require_admin)) -> AdminProfileResponse:
    return _admin_profile(current_domain.repository_for(AdminUser).get(admin_id))


@admin_router.put("/profile/username", response_model=AdminProfileResponse)
async def change_admin_username(
    body: ChangeAdminUsernameRequest, admin_id: str = Depends(require_admin)
) -> AdminProfileResponse:
    _confirmed_admin(admin_id, body.current_password)
    current_domain.process(
        ChangeAdminUsername(admin_id=admin_id, new_username=body.new_username), asynchronous=False
    )
    return _admin_profile(current_domain.repository_for(AdminUser).get(admin_id))


@admin_router.put("/profile/password", response_model=StatusResponse)
async def change_admin_password(
    body: ChangeAdminPasswordRequest, admin_id: str = Depends(require_admin)
) -> StatusResponse:
    _confirmed_admin(admin_id, body.current_password)
    current_domain.process(
        ChangeAdminPassword(admin_id=admin_id, new_password=body.new_password), asynchronous=False
    )
    return StatusResponse(status="password_updated")
