"""Application tests for customer registration, login, admin management and admin credentials."""

import json

import pytest
from protean import current_domain
from protean.exceptions import ObjectNotFoundError, ValidationError
from storefront.customer.admin_user import (
    ChangeAdminPassword,
    ChangeAdminUsername,
    CreateAdminUser,
    authenticate_admin,
    confirm_admin_password,
)
from storefront.customer.customer import Customer
from storefront.customer.management import DeleteCustomer, SetCustomerActive, UpdateCustomerProfile
from storefront.customer.registration import authenticate_customer


class TestRegisterCustomer:
    def test_registers(self, register_customer):
        customer_id = register_customer(username="sunil", email="Sunil@Example.com")

        customer = current_domain.repository_for(Customer).get(customer_id)
        assert customer.username == "sunil"
        assert customer.email == "sunil@example.com"
        assert customer.is_active is True
        assert customer.password_hash != "secret123"

    def test_business_details(self, register_customer):
        customer_id = register_customer(
            business_details=json.dumps({"sells_watches": True, "has_watch_shop": True, "shop_name": "Tick Tock"})
        )
        customer = current_domain.repository_for(Customer).get(customer_id)
        assert customer.business_details.shop_name == "Tick Tock"

    def test_duplicate_username(self, register_customer):
        register_customer(username="dup")
        with pytest.raises(ValidationError) as exc:
            register_customer(username="dup")
        assert "username" in exc.value.messages

    def test_duplicate_mobile_number(self, register_customer):
        register_customer(mobile_number="0779999999")
        with pytest.raises(ValidationError) as exc:
            register_customer(mobile_number="0779999999")
        assert "mobile_number" in exc.value.messages

    def test_short_password(self, register_customer):
        with pytest.raises(ValidationError):
            register_customer(password="123")

    def test_bad_date_of_birth(self, register_customer):
        with pytest.raises(ValidationError) as exc:
            register_customer(date_of_birth="12/04/1990")
        assert "date_of_birth" in exc.value.messages


class TestAuthenticateCustomer:
    def test_valid_credentials(self, register_customer):
        customer_id = register_customer(username="login1", password="hunter22")
        customer = authenticate_customer("login1", "hunter22")
        assert str(customer.id) == customer_id

    def test_wrong_password(self, register_customer):
        register_customer(username="login2", password="hunter22")
        assert authenticate_customer("login2", "nope") is None

    def test_unknown_user(self):
        assert authenticate_customer("ghost", "whatever") is None


class TestManageCustomer:
    def test_update_profile(self, customer_id):
        current_domain.process(
            UpdateCustomerProfile(customer_id=customer_id, city="Kandy", email="new@example.com"),
            asynchronous=False,
        )
        customer = current_domain.repository_for(Customer).get(customer_id)
        assert customer.city == "Kandy"
        assert customer.email == "new@example.com"
        assert customer.full_name == "Nimal Perera"

    def test_deactivate(self, customer_id):
        current_domain.process(SetCustomerActive(customer_id=customer_id, is_active=False), asynchronous=False)
        assert current_domain.repository_for(Customer).get(customer_id).is_active is False

    def test_delete(self, customer_id):
        current_domain.process(DeleteCustomer(customer_id=customer_id), asynchronous=False)
        with pytest.raises(ObjectNotFoundError):
            current_domain.repository_for(Customer).get(customer_id)


class TestAdminUser:
    def test_create_and_authenticate(self):
        admin_id = current_domain.process(
            CreateAdminUser(username="boss", email="Boss@Example.com", password="longpassword"),
            asynchronous=False,
        )
        admin = authenticate_admin("boss", "longpassword")
        assert str(admin.id) == admin_id
        assert admin.email == "boss@example.com"

    def test_wrong_password(self):
        current_domain.process(
            CreateAdminUser(username="boss2", email="boss2@example.com", password="longpassword"),
            asynchronous=False,
        )
        assert authenticate_admin("boss2", "shortpw") is None

    def test_duplicate_username(self):
        current_domain.process(
            CreateAdminUser(username="boss3", email="boss3@example.com", password="longpassword"),
            asynchronous=False,
        )
        with pytest.raises(ValidationError):
            current_domain.process(
                CreateAdminUser(username="boss3", email="other@example.com", password="longpassword"),
                asynchronous=False,
            )


class TestAdminCredentials:
    @pytest.fixture()
    def admin_id(self):
        return current_domain.process(
            CreateAdminUser(username="keeper", email="keeper@example.com", password="longpassword"),
            asynchronous=False,
        )

    def test_confirm_password(self, admin_id):
        assert str(confirm_admin_password(admin_id, "longpassword").id) == admin_id
        assert confirm_admin_password(admin_id, "wrongpassword") is None

    def test_change_username(self, admin_id):
        current_domain.process(ChangeAdminUsername(admin_id=admin_id, new_username="warden"), asynchronous=False)
        assert str(authenticate_admin("warden", "longpassword").id) == admin_id
        assert authenticate_admin("keeper", "longpassword") is None

    def test_keeping_own_username_is_allowed(self, admin_id):
        current_domain.process(ChangeAdminUsername(admin_id=admin_id, new_username="keeper"), asynchronous=False)
        assert authenticate_admin("keeper", "longpassword") is not None

    def test_username_taken_by_another_admin(self, admin_id):
        current_domain.process(
            CreateAdminUser(username="warden", email="warden@example.com", password="longpassword"),
            asynchronous=False,
        )
        with pytest.raises(ValidationError) as exc:
            current_domain.process(ChangeAdminUsername(admin_id=admin_id, new_username="warden"), asynchronous=False)
        assert "username" in exc.value.messages

    def test_change_password(self, admin_id):
        current_domain.process(ChangeAdminPassword(admin_id=admin_id, new_password="fresh-pass"), asynchronous=False)
        assert authenticate_admin("keeper", "fresh-pass") is not None
        assert authenticate_admin("keeper", "longpassword") is None

    def test_new_password_minimum_length(self, admin_id):
        with pytest.raises(ValidationError):
            ChangeAdminPassword(admin_id=admin_id, new_password="short")

    def test_unknown_admin(self):
        with pytest.raises(ObjectNotFoundError):
            current_domain.process(ChangeAdminPassword(admin_id="missing", new_password="fresh-pass"), asynchronous=False)
