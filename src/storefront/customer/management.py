"""Customer profile edits and admin account management."""

import json

import structlog
from protean import handle
from protean.fields import Boolean, Identifier, String, Text
from protean.utils.globals import current_domain

from storefront.customer.customer import Customer
from storefront.customer.registration import parse_date_of_birth
from storefront.domain import storefront

logger = structlog.get_logger(__name__)


@storefront.command(part_of="Customer")
class UpdateCustomerProfile:
    customer_id: Identifier(required=True)
    full_name: String(max_length=100)
    date_of_birth: String(max_length=10)
    country: String(max_length=100)
    province: String(max_length=100)
    city: String(max_length=100)
    address: Text()
    mobile_number: String(min_length=8, max_length=20)
    email: String(max_length=254)
    business_details: Text()


@storefront.command(part_of="Customer")
class SetCustomerActive:
    customer_id: Identifier(required=True)
    is_active: Boolean(required=True)


@storefront.command(part_of="Customer")
class DeleteCustomer:
    customer_id: Identifier(required=True)


@storefront.command_handler(part_of=Customer)
class ManageCustomerHandler:
    @handle(UpdateCustomerProfile)
    def update_customer_profile(self, command):
        repo = current_domain.repository_for(Customer)
        customer = repo.get(command.customer_id)

        business_details = command.business_details
        if isinstance(business_details, str):
            business_details = json.loads(business_details)

        customer.update_profile(
            full_name=command.full_name,
            date_of_birth=parse_date_of_birth(command.date_of_birth) if command.date_of_birth else None,
            country=command.country,
            province=command.province,
            city=command.city,
            address=command.address,
            mobile_number=command.mobile_number,
            email=command.email,
            business_details=business_details,
        )
        repo.add(customer)

    @handle(SetCustomerActive)
    def set_customer_active(self, command):
        repo = current_domain.repository_for(Customer)
        customer = repo.get(command.customer_id)
        customer.set_active(command.is_active)
        repo.add(customer)
        logger.info("Customer status changed", customer_id=str(customer.id), is_active=customer.is_active)

    @handle(DeleteCustomer)
    def delete_customer(self, command):
        repo = current_domain.repository_for(Customer)
        customer = repo.get(command.customer_id)
        repo._dao.delete(customer)
        logger.info("Customer deleted", customer_id=str(command.customer_id))
