"""Read-side assembly of a customer's cart with product details filled in."""

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from storefront.catalogue.product import Product
from storefront.customer.customer import Customer


def _product_summary(product):
    if product is None:
        return None
    images = product.image_urls
    return {
        "id": str(product.id),
        "title": product.title,
        "brand": product.brand,
        "price": product.price,
        "image": images[0] if images else None,
        "status": product.status,
        "colors": [{"name": c.name, "quantity": c.quantity} for c in product.colors],
    }


def populated_cart(customer_id):
    """Return the cart lines of a customer, each with its product summary.

    Lines whose product has since been deleted are returned with ``product``
    set to None.
    """
    customer = current_domain.repository_for(Customer).get(customer_id)
    product_repo = current_domain.repository_for(Product)

    lines = []
    for line in customer.cart_lines:
        try:
            product = product_repo.get(line.product_id)
        except ObjectNotFoundError:
            product = None
        lines.append(
            {
                "id": str(line.id),
                "product_id": str(line.product_id),
                "selected_color": line.selected_color,
                "quantity": line.quantity,
                "product": _product_summary(product),
            }
        )
    return lines
