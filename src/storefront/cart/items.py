"""Cart item management: commands and handler.

The cart is embedded in the Customer aggregate, so every command loads and
saves the customer record.
"""

from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier, Integer, String
from protean.utils.globals import current_domain

from storefront.catalogue.product import Product
from storefront.customer.customer import Customer
from storefront.domain import storefront


@storefront.command(part_of="Customer")
class AddToCart:
    customer_id = Identifier(required=True)
    product_id = Identifier(required=True)
    selected_color = String(max_length=50)
    quantity = Integer()


@storefront.command(part_of="Customer")
class UpdateCartLine:
    customer_id = Identifier(required=True)
    line_id = Identifier(required=True)
    quantity = Integer()
    selected_color = String(max_length=50)


@storefront.command(part_of="Customer")
class RemoveFromCart:
    customer_id = Identifier(required=True)
    line_id = Identifier(required=True)


@storefront.command(part_of="Customer")
class ClearCart:
    customer_id = Identifier(required=True)


def get_active_product(product_id):
    """Load a product that shoppers may see; inactive products count as missing."""
    try:
        product = current_domain.repository_for(Product).get(product_id)
    except ObjectNotFoundError:
        raise ObjectNotFoundError("Product not found or unavailable") from None
    if not product.is_active:
        raise ObjectNotFoundError("Product not found or unavailable")
    return product


@storefront.command_handler(part_of=Customer)
class ManageCartHandler:
    @handle(AddToCart)
    def add_to_cart(self, command):
        get_active_product(command.product_id)

        repo = current_domain.repository_for(Customer)
        customer = repo.get(command.customer_id)
        line = customer.add_to_cart(
            product_id=command.product_id,
            selected_color=command.selected_color,
            quantity=command.quantity,
        )
        repo.add(customer)
        return str(line.id)

    @handle(UpdateCartLine)
    def update_cart_line(self, command):
        repo = current_domain.repository_for(Customer)
        customer = repo.get(command.customer_id)
        customer.update_cart_line(
            line_id=command.line_id,
            quantity=command.quantity,
            selected_color=command.selected_color,
        )
        repo.add(customer)

    @handle(RemoveFromCart)
    def remove_from_cart(self, command):
        repo = current_domain.repository_for(Customer)
        customer = repo.get(command.customer_id)
        customer.remove_cart_line(command.line_id)
        repo.add(customer)

    @handle(ClearCart)
    def clear_cart(self, command):
        repo = current_domain.repository_for(Customer)
        customer = repo.get(command.customer_id)
        customer.clear_cart()
        repo.add(customer)
