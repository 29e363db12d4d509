"""Application tests for product catalogue management commands."""

import json

import pytest
from protean import current_domain
from protean.exceptions import ObjectNotFoundError, ValidationError
from storefront.catalogue.management import (
    ActivateProduct,
    DeactivateProduct,
    DeleteProduct,
    MarkFeatured,
    SetProductColors,
    UpdateProductDetails,
)
from storefront.catalogue.product import Product


def _get(product_id):
    return current_domain.repository_for(Product).get(product_id)


class TestCreateProduct:
    def test_persists_colors_and_specifications(self, create_product):
        product_id = create_product(specifications=[{"key": "Movement", "value": "Automatic"}])

        product = _get(product_id)
        assert product.title == "Seiko Presage"
        assert {c.name: c.quantity for c in product.colors} == {"Red": 10, "Blue": None}
        assert product.specifications[0].value == "Automatic"

    def test_invalid_watch_shape(self, create_product):
        with pytest.raises(ValidationError):
            create_product(watch_shape="Triangle")


class TestUpdateProduct:
    def test_partial_update(self, create_product):
        product_id = create_product()
        current_domain.process(
            UpdateProductDetails(product_id=product_id, price=130.0, images=json.dumps(["a.jpg", "b.jpg"])),
            asynchronous=False,
        )
        product = _get(product_id)
        assert product.price == 130.0
        assert product.image_urls == ["a.jpg", "b.jpg"]
        assert product.brand == "Seiko"

    def test_set_colors_replaces_ledger(self, create_product):
        product_id = create_product()
        current_domain.process(
            SetProductColors(product_id=product_id, colors=json.dumps([{"name": "Silver", "quantity": 7}])),
            asynchronous=False,
        )
        product = _get(product_id)
        assert [(c.name, c.quantity) for c in product.colors] == [("Silver", 7)]

    def test_status_and_featured(self, create_product):
        product_id = create_product()
        current_domain.process(DeactivateProduct(product_id=product_id), asynchronous=False)
        assert _get(product_id).is_active is False

        current_domain.process(ActivateProduct(product_id=product_id), asynchronous=False)
        current_domain.process(MarkFeatured(product_id=product_id, featured=True), asynchronous=False)
        product = _get(product_id)
        assert product.is_active is True
        assert product.featured is True

    def test_delete(self, create_product):
        product_id = create_product()
        current_domain.process(DeleteProduct(product_id=product_id), asynchronous=False)
        with pytest.raises(ObjectNotFoundError):
            _get(product_id)
