"""Product aggregate root with its colour-keyed stock ledger and specifications."""

import json
from datetime import UTC, datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Float, HasMany, Integer, String, Text

from storefront.domain import storefront


class ProductStatus(Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class ProductType(Enum):
    WATCH = "watch"
    WALL_CLOCK = "wall_clock"


class Gender(Enum):
    MEN = "men"
    WOMEN = "women"
    KIDS = "kids"
    UNISEX = "unisex"


class WatchShape(Enum):
    ROUND = "Round"
    SQUARE = "Square"
    RECTANGULAR = "Rectangular"
    OVAL = "Oval"
    TONNEAU = "Tonneau"
    OTHER = "Other"


@storefront.entity(part_of="Product")
class ColorVariant:
    """One colour of a product. A null quantity means stock is not tracked."""

    name = String(required=True, max_length=50)
    quantity = Integer(min_value=0)


@storefront.entity(part_of="Product")
class Specification:
    key = String(required=True, max_length=100)
    value = String(required=True, max_length=500)


@storefront.aggregate
class Product:
    title = String(required=True, max_length=100)
    description = Text(required=True)
    brand = String(required=True, max_length=100)
    gender = String(choices=Gender)
    price = Float(min_value=0.0)
    model_number = String(max_length=100, default="N/A")
    watch_shape = String(choices=WatchShape, required=True)
    product_type = String(choices=ProductType, default=ProductType.WATCH.value)
    colors = HasMany(ColorVariant)
    specifications = HasMany(Specification)
    images = Text()  # JSON array of image URLs
    video = String(max_length=500)
    featured = Boolean(default=False)
    status = String(choices=ProductStatus, default=ProductStatus.ACTIVE.value)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def color_names_must_be_unique(self):
        names = [color.name.strip().lower() for color in self.colors]
        if len(names) != len(set(names)):
            raise ValidationError({"colors": ["Colour names must be unique per product"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(
        cls,
        title,
        description,
        brand,
        watch_shape,
        product_type=ProductType.WATCH.value,
        gender=None,
        price=None,
        model_number=None,
        colors=None,
        specifications=None,
        images=None,
        video=None,
        featured=False,
    ):
        now = datetime.now(UTC)
        product = cls(
            title=title,
            description=description,
            brand=brand,
            watch_shape=watch_shape,
            product_type=product_type or ProductType.WATCH.value,
            gender=gender,
            price=price,
            model_number=model_number or "N/A",
            images=json.dumps(images or []),
            video=video,
            featured=featured,
            status=ProductStatus.ACTIVE.value,
            created_at=now,
            updated_at=now,
        )
        product.replace_colors(colors or [])
        product.replace_specifications(specifications or [])
        return product

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    @property
    def is_active(self) -> bool:
        return self.status == ProductStatus.ACTIVE.value

    @property
    def image_urls(self) -> list[str]:
        return json.loads(self.images) if self.images else []

    def find_color(self, name):
        return next((c for c in self.colors if c.name == name), None)

    # -------------------------------------------------------------------
    # Admin edits
    # -------------------------------------------------------------------
    def update_details(self, **details):
        """Apply a partial edit. Keys whose value is None are left unchanged."""
        for field_name, value in details.items():
            if value is None:
                continue
            if field_name == "images":
                self.images = json.dumps(value)
            else:
                setattr(self, field_name, value)
        self.updated_at = datetime.now(UTC)

    def replace_colors(self, colors):
        """Replace the stock ledger wholesale with ``[{name, quantity}]`` dicts."""
        for existing in list(self.colors):
            self.remove_colors(existing)
        for color in colors:
            self.add_colors(ColorVariant(name=color["name"].strip(), quantity=color.get("quantity")))
        self.updated_at = datetime.now(UTC)

    def replace_specifications(self, specifications):
        for existing in list(self.specifications):
            self.remove_specifications(existing)
        for spec in specifications:
            self.add_specifications(Specification(key=spec["key"].strip(), value=spec["value"].strip()))
        self.updated_at = datetime.now(UTC)

    def activate(self):
        self.status = ProductStatus.ACTIVE.value
        self.updated_at = datetime.now(UTC)

    def deactivate(self):
        self.status = ProductStatus.INACTIVE.value
        self.updated_at = datetime.now(UTC)

    def mark_featured(self, featured=True):
        self.featured = featured
        self.updated_at = datetime.now(UTC)

    # -------------------------------------------------------------------
    # Stock
    # -------------------------------------------------------------------
    def decrement_color_stock(self, color_name, quantity) -> bool:
        """Subtract from a tracked colour's stock, flooring at zero.

        Returns False (and changes nothing) when the colour is unknown or its
        stock is untracked.
        """
        color = self.find_color(color_name)
        if color is None or color.quantity is None:
            return False

        color.quantity = max(0, color.quantity - quantity)
        self.updated_at = datetime.now(UTC)
        return True
