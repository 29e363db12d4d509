import json

import pytest
from protean.integrations.pytest import DomainFixture
from protean.utils.globals import current_domain


@pytest.fixture(scope="session")
def storefront_bed():
    from storefront.domain import storefront

    bed = DomainFixture(storefront)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(storefront_bed):
    with storefront_bed.domain_context():
        yield

        # Clear all databases
        for _, provider in current_domain.providers.items():
            provider._data_reset()

        # Drain event stores
        current_domain.event_store.store._data_reset()


@pytest.fixture()
def create_product():
    """Factory: create a product through the catalogue command and return its id."""
    from storefront.catalogue.management import CreateProduct

    def _create(**overrides):
        payload = {
            "title": "Seiko Presage",
            "description": "Automatic dress watch",
            "brand": "Seiko",
            "watch_shape": "Round",
            "product_type": "watch",
            "price": 100.0,
            "colors": [{"name": "Red", "quantity": 10}, {"name": "Blue", "quantity": None}],
            "images": ["https://cdn.example.com/presage.jpg"],
        }
        payload.update(overrides)
        for key in ("colors", "specifications", "images"):
            if key in payload and not isinstance(payload[key], str):
                payload[key] = json.dumps(payload[key])
        return current_domain.process(CreateProduct(**payload), asynchronous=False)

    return _create


@pytest.fixture()
def register_customer():
    """Factory: register a customer and return their id."""
    from storefront.customer.registration import RegisterCustomer

    counter = {"n": 0}

    def _register(**overrides):
        counter["n"] += 1
        payload = {
            "full_name": "Nimal Perera",
            "date_of_birth": "1990-04-12",
            "country": "Sri Lanka",
            "province": "Western",
            "mobile_number": f"07712345{counter['n']:02d}",
            "username": f"nimal{counter['n']}",
            "password": "secret123",
        }
        payload.update(overrides)
        return current_domain.process(RegisterCustomer(**payload), asynchronous=False)

    return _register


@pytest.fixture()
def customer_id(register_customer):
    return register_customer()
