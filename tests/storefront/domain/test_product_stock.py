"""Tests for the Product aggregate and its colour stock ledger."""

import pytest
from protean.exceptions import ValidationError
from storefront.catalogue.product import Product, ProductStatus


def _make_product(colors=None, **overrides):
    defaults = {
        "title": "Casio G-Shock",
        "description": "Shock resistant digital watch",
        "brand": "Casio",
        "watch_shape": "Square",
        "price": 85.0,
        "colors": colors if colors is not None else [{"name": "Red", "quantity": 10}],
    }
    defaults.update(overrides)
    return Product.create(**defaults)


class TestProductCreation:
    def test_defaults(self):
        product = _make_product()
        assert product.status == ProductStatus.ACTIVE.value
        assert product.model_number == "N/A"
        assert product.product_type == "watch"
        assert product.featured is False

    def test_colors_and_images(self):
        product = _make_product(
            colors=[{"name": "Red", "quantity": 3}, {"name": "Gold", "quantity": None}],
            images=["https://cdn.example.com/a.jpg"],
        )
        assert [c.name for c in product.colors] == ["Red", "Gold"]
        assert product.find_color("Gold").quantity is None
        assert product.image_urls == ["https://cdn.example.com/a.jpg"]

    def test_title_limited_to_100_characters(self):
        with pytest.raises(ValidationError):
            _make_product(title="x" * 101)

    def test_negative_price_rejected(self):
        with pytest.raises(ValidationError):
            _make_product(price=-1.0)

    def test_unknown_watch_shape_rejected(self):
        with pytest.raises(ValidationError):
            _make_product(watch_shape="Hexagon")

    def test_negative_color_quantity_rejected(self):
        with pytest.raises(ValidationError):
            _make_product(colors=[{"name": "Red", "quantity": -1}])

    def test_duplicate_color_names_rejected(self):
        with pytest.raises(ValidationError):
            _make_product(colors=[{"name": "Red", "quantity": 1}, {"name": "red", "quantity": 2}])

    def test_price_is_optional(self):
        product = _make_product(price=None)
        assert product.price is None


class TestDecrementColorStock:
    def test_subtracts_quantity(self):
        product = _make_product()
        assert product.decrement_color_stock("Red", 6) is True
        assert product.find_color("Red").quantity == 4

    def test_floors_at_zero(self):
        product = _make_product(colors=[{"name": "Red", "quantity": 2}])
        product.decrement_color_stock("Red", 5)
        assert product.find_color("Red").quantity == 0

    def test_unknown_color_is_skipped(self):
        product = _make_product()
        assert product.decrement_color_stock("Green", 1) is False
        assert product.find_color("Red").quantity == 10

    def test_untracked_color_is_skipped(self):
        product = _make_product(colors=[{"name": "Blue", "quantity": None}])
        assert product.decrement_color_stock("Blue", 1) is False
        assert product.find_color("Blue").quantity is None


class TestProductEdits:
    def test_replace_colors(self):
        product = _make_product()
        product.replace_colors([{"name": "Black", "quantity": 4}])
        assert [c.name for c in product.colors] == ["Black"]

    def test_update_details_ignores_none(self):
        product = _make_product()
        product.update_details(title="New title", brand=None)
        assert product.title == "New title"
        assert product.brand == "Casio"

    def test_deactivate_and_activate(self):
        product = _make_product()
        product.deactivate()
        assert product.is_active is False
        product.activate()
        assert product.is_active is True
