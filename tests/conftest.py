"""
Shared fixtures for the Carrier Service App tests.

``FakeAdminClient`` stands in for the Shopify Admin API. It doubles as its
own client factory, so it can be passed wherever ``AdminApiClient`` is.
"""

import random

import pytest

from api.app import create_app
from carrier.carrier_services import CarrierServiceManager
from carrier.errors import RemoteServiceError
from carrier.product_seeder import ProductSeeder
from carrier.session import MerchantSession, SessionStore

TEST_SHOP = "test-store.myshopify.com"
TEST_TOKEN = "shpat_test_token"
TEST_API_KEY = "test-api-key"


class FakeAdminClient:
    """In-memory Admin API with call recording and failure injection."""

    def __init__(self, carrier_services=None, product_total=0):
        self.carrier_services = [dict(s) for s in (carrier_services or [])]
        self.product_total = product_total
        self.created_products = []
        self.create_carrier_calls = []
        self.list_calls = 0
        self.sessions = []
        self.open_clients = 0
        self.closed_clients = 0
        # operation name -> RemoteServiceError to raise
        self.failures = {}
        # create_product fails once this many products were created
        self.fail_product_after = None

    def __call__(self, session):
        self.sessions.append(session)
        return self

    def __enter__(self):
        self.open_clients += 1
        return self

    def __exit__(self, *exc_info):
        self.open_clients -= 1
        self.closed_clients += 1

    def _maybe_fail(self, operation):
        if operation in self.failures:
            raise self.failures[operation]

    def count_products(self):
        self._maybe_fail("count_products")
        return self.product_total

    def create_product(self, product):
        self._maybe_fail("create_product")
        if self.fail_product_after is not None and len(self.created_products) >= self.fail_product_after:
            raise RemoteServiceError("Title can't be blank", status_code=422)
        self.created_products.append(product)
        self.product_total += 1
        return {"id": len(self.created_products), **product}

    def list_carrier_services(self):
        self.list_calls += 1
        self._maybe_fail("list_carrier_services")
        return [dict(s) for s in self.carrier_services]

    def create_carrier_service(self, carrier_service):
        self.create_carrier_calls.append(carrier_service)
        self._maybe_fail("create_carrier_service")
        created = {
            "id": 1000 + len(self.carrier_services),
            "active": True,
            "carrier_service_type": "api",
            "format": "json",
            **carrier_service,
        }
        self.carrier_services.append(created)
        return created


@pytest.fixture
def session():
    return MerchantSession(TEST_SHOP, TEST_TOKEN)


@pytest.fixture
def make_client():
    return FakeAdminClient


@pytest.fixture
def fake_client():
    return FakeAdminClient()


@pytest.fixture
def manager(fake_client):
    return CarrierServiceManager(client_factory=fake_client)


@pytest.fixture
def seeder(fake_client):
    return ProductSeeder(client_factory=fake_client, rng=random.Random(42))


@pytest.fixture
def session_store():
    store = SessionStore()
    store.store_session(TEST_SHOP, TEST_TOKEN)
    return store


@pytest.fixture
def app(manager, seeder, session_store, monkeypatch):
    monkeypatch.setattr("carrier.session.APP_API_KEYS", [TEST_API_KEY])
    app = create_app(
        carrier_manager=manager,
        product_seeder=seeder,
        session_store=session_store,
    )
    app.config["TESTING"] = True
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def auth_headers():
    return {
        "X-Shopify-Shop-Domain": TEST_SHOP,
        "X-API-KEY": TEST_API_KEY,
    }
