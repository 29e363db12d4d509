"""Customer registration and login."""

import json
from datetime import date

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import String, Text
from protean.utils.globals import current_domain

from shared.auth import hash_password, verify_password
from storefront.customer.customer import Customer
from storefront.domain import storefront

logger = structlog.get_logger(__name__)


def parse_date_of_birth(value):
    try:
        return date.fromisoformat(value)
    except (TypeError, ValueError):
        raise ValidationError({"date_of_birth": ["Date of birth must be an ISO date (YYYY-MM-DD)"]}) from None


def find_customer_by_username(username):
    matches = (
        current_domain.repository_for(Customer)._dao.query.filter(username=username.strip()).all().items
    )
    return matches[0] if matches else None


@storefront.command(part_of="Customer")
class RegisterCustomer:
    """Create a customer account."""

    full_name: String(required=True, max_length=100)
    date_of_birth: String(required=True, max_length=10)
    country: String(required=True, max_length=100)
    province: String(required=True, max_length=100)
    city: String(max_length=100)
    address: Text()
    mobile_number: String(required=True, min_length=8, max_length=20)
    email: String(max_length=254)
    username: String(required=True, min_length=3, max_length=30)
    password: String(required=True, min_length=6, max_length=128)
    business_details: Text()  # JSON object


@storefront.command_handler(part_of=Customer)
class RegisterCustomerHandler:
    @handle(RegisterCustomer)
    def register_customer(self, command):
        repo = current_domain.repository_for(Customer)

        if find_customer_by_username(command.username):
            raise ValidationError({"username": ["Username already exists"]})

        if repo._dao.query.filter(mobile_number=command.mobile_number.strip()).all().items:
            raise ValidationError({"mobile_number": ["Mobile number already registered"]})

        business_details = None
        if command.business_details:
            business_details = (
                json.loads(command.business_details)
                if isinstance(command.business_details, str)
                else command.business_details
            )

        customer = Customer.register(
            full_name=command.full_name,
            date_of_birth=parse_date_of_birth(command.date_of_birth),
            country=command.country,
            province=command.province,
            city=command.city,
            address=command.address,
            mobile_number=command.mobile_number,
            email=command.email,
            username=command.username,
            password_hash=hash_password(command.password),
            business_details=business_details,
        )
        repo.add(customer)
        logger.info("Customer registered", customer_id=str(customer.id), username=customer.username)
        return str(customer.id)


def authenticate_customer(username, password):
    """Return the customer for valid credentials, or None."""
    customer = find_customer_by_username(username)
    if customer is None or not verify_password(password, customer.password_hash):
        logger.info("Customer login failed", username=username)
        return None
    return customer
