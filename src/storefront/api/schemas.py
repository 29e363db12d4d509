"""Pydantic request/response schemas for the Storefront API.

These are external contracts (anti-corruption layer), separate from
internal Protean commands.
"""

from datetime import date, datetime

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Shared sub-models
# ---------------------------------------------------------------------------
class ColorSchema(BaseModel):
    name: str = Field(min_length=1, max_length=50)
    quantity: int | None = Field(default=None, ge=0)


class SpecificationSchema(BaseModel):
    key: str = Field(min_length=1)
    value: str = Field(min_length=1)


class BusinessDetailsSchema(BaseModel):
    sells_watches: bool = False
    has_watch_shop: bool = False
    shop_name: str | None = None
    shop_address: str | None = None
    business_type: str | None = None


# ---------------------------------------------------------------------------
# Auth / Customer Request Schemas
# ---------------------------------------------------------------------------
class LoginRequest(BaseModel):
    username: str
    password: str


class RegisterCustomerRequest(BaseModel):
    full_name: str
    date_of_birth: date
    country: str
    province: str
    city: str | None = None
    address: str | None = None
    mobile_number: str
    email: str | None = None
    username: str
    password: str
    business_details: BusinessDetailsSchema | None = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "full_name": "Nimal Perera",
                    "date_of_birth": "1990-04-12",
                    "country": "Sri Lanka",
                    "province": "Western",
                    "mobile_number": "0771234567",
                    "username": "nimal",
                    "password": "secret123",
                }
            ]
        }
    }


class UpdateProfileRequest(BaseModel):
    full_name: str | None = None
    date_of_birth: date | None = None
    country: str | None = None
    province: str | None = None
    city: str | None = None
    address: str | None = None
    mobile_number: str | None = None
    email: str | None = None
    business_details: BusinessDetailsSchema | None = None


class SetCustomerStatusRequest(BaseModel):
    is_active: bool


class ChangeAdminUsernameRequest(BaseModel):
    current_password: str
    new_username: str


class ChangeAdminPasswordRequest(BaseModel):
    current_password: str
    new_password: str


# ---------------------------------------------------------------------------
# Product Request Schemas
# ---------------------------------------------------------------------------
class CreateProductRequest(BaseModel):
    title: str = Field(max_length=100)
    description: str
    brand: str
    watch_shape: str
    product_type: str = "watch"
    gender: str | None = None
    price: float | None = Field(default=None, ge=0)
    model_number: str | None = None
    colors: list[ColorSchema] = []
    specifications: list[SpecificationSchema] = []
    images: list[str] = []
    video: str | None = None
    featured: bool = False


class UpdateProductRequest(BaseModel):
    title: str | None = Field(default=None, max_length=100)
    description: str | None = None
    brand: str | None = None
    watch_shape: str | None = None
    product_type: str | None = None
    gender: str | None = None
    price: float | None = Field(default=None, ge=0)
    model_number: str | None = None
    specifications: list[SpecificationSchema] | None = None
    images: list[str] | None = None
    video: str | None = None


class SetColorsRequest(BaseModel):
    colors: list[ColorSchema]


class MarkFeaturedRequest(BaseModel):
    featured: bool = True


# ---------------------------------------------------------------------------
# Cart Request Schemas
# ---------------------------------------------------------------------------
class AddToCartRequest(BaseModel):
    product_id: str
    selected_color: str | None = None
    quantity: int | None = None


class UpdateCartLineRequest(BaseModel):
    quantity: int | None = None
    selected_color: str | None = None


# ---------------------------------------------------------------------------
# Order Request Schemas
# ---------------------------------------------------------------------------
class UpdateOrderStatusRequest(BaseModel):
    status: str | None = None
    receipt_status: str | None = None
    admin_notes: str | None = None


# ---------------------------------------------------------------------------
# Response Schemas
# ---------------------------------------------------------------------------
class StatusResponse(BaseModel):
    status: str = "ok"


class TokenResponse(BaseModel):
    token: str
    principal_id: str
    role: str


class ProductIdResponse(BaseModel):
    product_id: str


class OrderIdResponse(BaseModel):
    order_id: str


class ProductResponse(BaseModel):
    id: str
    title: str
    description: str
    brand: str
    gender: str | None = None
    price: float | None = None
    model_number: str
    watch_shape: str
    product_type: str
    colors: list[ColorSchema]
    specifications: list[SpecificationSchema]
    images: list[str]
    video: str | None = None
    featured: bool
    status: str
    created_at: datetime | None = None
    updated_at: datetime | None = None


class CartProductSummary(BaseModel):
    id: str
    title: str
    brand: str
    price: float | None = None
    image: str | None = None
    status: str
    colors: list[ColorSchema]


class CartLineResponse(BaseModel):
    id: str
    product_id: str
    selected_color: str
    quantity: int
    product: CartProductSummary | None = None


class CartResponse(BaseModel):
    items: list[CartLineResponse]


class OrderItemResponse(BaseModel):
    product_id: str
    selected_color: str
    quantity: int
    unit_price: float


class OrderResponse(BaseModel):
    id: str
    customer_id: str
    items: list[OrderItemResponse]
    total_amount: float
    payment_method: str
    receipt: str
    receipt_status: str
    status: str
    admin_notes: str | None = None
    stock_applied: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None


class CustomerResponse(BaseModel):
    id: str
    full_name: str
    date_of_birth: date
    country: str
    province: str
    city: str | None = None
    address: str | None = None
    mobile_number: str
    email: str | None = None
    username: str
    business_details: BusinessDetailsSchema | None = None
    is_active: bool
    is_verified: bool
    created_at: datetime | None = None


class AdminProfileResponse(BaseModel):
    id: str
    username: str
    email: str
    created_at: datetime | None = None
