"""Customer aggregate with its embedded shopping cart.

The cart lives inside the Customer record: each CartLine is a (product,
colour, quantity) selection, and at most one line exists per product and
colour. Adding a pair that is already in the cart, or recolouring a line onto
a pair that is already there, merges the quantities into a single line.
"""

from datetime import UTC, date, datetime
from enum import Enum

from protean import atomic_change, invariant
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Boolean, Date, DateTime, HasMany, Identifier, Integer, String, Text, ValueObject

from shared.email import is_valid_email
from storefront.domain import storefront


class BusinessType(Enum):
    RETAIL = "retail"
    WHOLESALE = "wholesale"
    INDEPENDENT_WATCHMAKER = "independent_watchmaker"
    COLLECTOR = "collector"
    OTHER = "other"


@storefront.value_object(part_of="Customer")
class BusinessDetails:
    """Optional trade information for customers who sell watches."""

    sells_watches: Boolean(default=False)
    has_watch_shop: Boolean(default=False)
    shop_name: String(max_length=200)
    shop_address: Text()
    business_type: String(choices=BusinessType)


@storefront.entity(part_of="Customer")
class CartLine:
    """A product and colour selection in the customer's cart."""

    product_id: Identifier(required=True)
    selected_color: String(required=True, max_length=50)
    quantity: Integer(required=True, min_value=1)
    added_at: DateTime()


@storefront.aggregate
class Customer:
    """A registered shopper. Owns the account details and the cart."""

    full_name: String(required=True, max_length=100)
    date_of_birth: Date(required=True)
    country: String(required=True, max_length=100)
    province: String(required=True, max_length=100)
    city: String(max_length=100)
    address: Text()
    mobile_number: String(required=True, min_length=8, max_length=20)
    email: String(max_length=254)
    username: String(required=True, min_length=3, max_length=30)
    password_hash: String(required=True, max_length=255)
    business_details: ValueObject(BusinessDetails)
    is_active: Boolean(default=True)
    is_verified: Boolean(default=False)
    cart_lines: HasMany(CartLine)
    created_at: DateTime()
    updated_at: DateTime()

    @invariant.post
    def date_of_birth_must_be_in_the_past(self):
        if self.date_of_birth and self.date_of_birth >= date.today():
            raise ValidationError({"date_of_birth": ["Date of birth must be in the past"]})

    @invariant.post
    def email_must_be_valid(self):
        if self.email and not is_valid_email(self.email):
            raise ValidationError({"email": ["Please provide a valid email"]})

    @invariant.post
    def one_cart_line_per_product_and_color(self):
        keys = [(str(line.product_id), line.selected_color) for line in self.cart_lines]
        if len(keys) != len(set(keys)):
            raise ValidationError({"cart": ["Each product and colour may appear only once in the cart"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def register(
        cls,
        full_name,
        date_of_birth,
        country,
        province,
        mobile_number,
        username,
        password_hash,
        city=None,
        address=None,
        email=None,
        business_details=None,
    ):
        now = datetime.now(UTC)
        return cls(
            full_name=full_name.strip(),
            date_of_birth=date_of_birth,
            country=country,
            province=province,
            city=city,
            address=address,
            mobile_number=mobile_number.strip(),
            email=email.strip().lower() if email else None,
            username=username.strip(),
            password_hash=password_hash,
            business_details=BusinessDetails(**business_details) if business_details else None,
            created_at=now,
            updated_at=now,
        )

    # -------------------------------------------------------------------
    # Profile
    # -------------------------------------------------------------------
    def update_profile(self, **changes):
        """Apply a partial profile edit. Keys whose value is None are left unchanged."""
        for field_name, value in changes.items():
            if value is None:
                continue
            if field_name == "business_details":
                value = BusinessDetails(**value)
            elif field_name == "email":
                value = value.strip().lower()
            setattr(self, field_name, value)
        self.updated_at = datetime.now(UTC)

    def set_active(self, is_active: bool):
        self.is_active = is_active
        self.updated_at = datetime.now(UTC)

    # -------------------------------------------------------------------
    # Cart
    # -------------------------------------------------------------------
    def find_cart_line(self, line_id):
        return next((line for line in self.cart_lines if str(line.id) == str(line_id)), None)

    def _line_for(self, product_id, selected_color, exclude=None):
        return next(
            (
                line
                for line in self.cart_lines
                if str(line.product_id) == str(product_id)
                and line.selected_color == selected_color
                and line is not exclude
            ),
            None,
        )

    def add_to_cart(self, product_id, selected_color, quantity):
        """Add a selection, merging into an existing line for the same product and colour."""
        if not selected_color:
            raise ValidationError({"selected_color": ["Colour selection is required"]})
        if quantity is None or quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be at least 1"]})

        now = datetime.now(UTC)
        existing = self._line_for(product_id, selected_color)
        if existing:
            existing.quantity += quantity
            line = existing
        else:
            line = CartLine(
                product_id=product_id,
                selected_color=selected_color,
                quantity=quantity,
                added_at=now,
            )
            self.add_cart_lines(line)

        self.updated_at = now
        return line

    def update_cart_line(self, line_id, quantity=None, selected_color=None):
        """Change a line's quantity (clamped to at least 1) and/or colour.

        Recolouring onto a product and colour already in the cart folds this
        line into the existing one.
        """
        line = self.find_cart_line(line_id)
        if line is None:
            raise ObjectNotFoundError("Item not found in cart")

        with atomic_change(self):
            if quantity is not None:
                line.quantity = max(1, quantity)

            if selected_color and selected_color != line.selected_color:
                twin = self._line_for(line.product_id, selected_color, exclude=line)
                if twin:
                    twin.quantity += line.quantity
                    self.remove_cart_lines(line)
                    line = twin
                else:
                    line.selected_color = selected_color

        self.updated_at = datetime.now(UTC)
        return line

    def remove_cart_line(self, line_id):
        line = self.find_cart_line(line_id)
        if line is None:
            raise ObjectNotFoundError("Item not found in cart")

        self.remove_cart_lines(line)
        self.updated_at = datetime.now(UTC)

    def clear_cart(self):
        for line in list(self.cart_lines):
            self.remove_cart_lines(line)
        self.updated_at = datetime.now(UTC)
