"""
Tests for the Carrier Service Manager.
"""

import pytest

from carrier.carrier_services import CarrierServiceManager
from carrier.errors import DuplicateNameError, RemoteServiceError, ValidationError

EXISTING = [
    {"id": 1, "name": "DHL", "callback_url": "https://dhl.example.com/rates", "service_discovery": True},
    {"id": 2, "name": "FedEx", "callback_url": "https://fedex.example.com/rates", "service_discovery": True},
]


@pytest.fixture
def populated_client(make_client):
    return make_client(carrier_services=EXISTING)


@pytest.fixture
def populated_manager(populated_client):
    return CarrierServiceManager(client_factory=populated_client)


class TestListCarrierServices:

    def test_empty(self, manager, session):
        assert manager.list_carrier_services(session) == []

    def test_normalized_records(self, populated_manager, session):
        services = populated_manager.list_carrier_services(session)

        assert [s["name"] for s in services] == ["DHL", "FedEx"]
        assert services[0]["id"] == 1
        assert services[0]["callback_url"] == "https://dhl.example.com/rates"
        assert services[0]["service_discovery"] is True

    def test_uses_session(self, populated_manager, populated_client, session):
        populated_manager.list_carrier_services(session)
        assert populated_client.sessions == [session]

    def test_remote_failure_propagates(self, manager, fake_client, session):
        fake_client.failures["list_carrier_services"] = RemoteServiceError("Unavailable", status_code=503)

        with pytest.raises(RemoteServiceError) as exc_info:
            manager.list_carrier_services(session)
        assert exc_info.value.status_code == 503


class TestCreateCarrierService:

    def test_create_returns_submitted_values(self, manager, fake_client, session):
        created = manager.create_carrier_service(session, "DHL", "https://x/cb")

        assert created["name"] == "DHL"
        assert created["callback_url"] == "https://x/cb"
        assert created["service_discovery"] is True
        assert created["id"] is not None
        assert len(fake_client.create_carrier_calls) == 1

    def test_service_discovery_always_enabled(self, manager, fake_client, session):
        manager.create_carrier_service(session, "UPS", "https://ups.example.com")

        assert fake_client.create_carrier_calls == [{
            "name": "UPS",
            "callback_url": "https://ups.example.com",
            "service_discovery": True,
        }]

    @pytest.mark.parametrize("name", [s["name"] for s in EXISTING])
    def test_duplicate_name_makes_no_remote_call(self, populated_manager, populated_client, session, name):
        with pytest.raises(DuplicateNameError) as exc_info:
            populated_manager.create_carrier_service(session, name, "https://other/cb")

        assert exc_info.value.name == name
        assert exc_info.value.status_code == 409
        assert populated_client.create_carrier_calls == []

    def test_name_match_is_case_sensitive(self, populated_manager, session):
        created = populated_manager.create_carrier_service(session, "dhl", "https://x/cb")
        assert created["name"] == "dhl"

    @pytest.mark.parametrize("name", ["Aramex", "Blue Dart", "DHL Express"])
    def test_distinct_names_succeed(self, populated_manager, session, name):
        created = populated_manager.create_carrier_service(session, name, "https://x/cb")
        assert created["name"] == name

    def test_second_create_with_same_name_rejected(self, manager, fake_client, session):
        manager.create_carrier_service(session, "DHL", "https://x/cb")

        with pytest.raises(DuplicateNameError):
            manager.create_carrier_service(session, "DHL", "https://x/cb")
        assert len(fake_client.create_carrier_calls) == 1

    @pytest.mark.parametrize("name,callback_url", [
        ("", "https://x/cb"),
        ("   ", "https://x/cb"),
        ("DHL", ""),
        (None, None),
    ])
    def test_blank_fields_rejected(self, manager, fake_client, session, name, callback_url):
        with pytest.raises(ValidationError):
            manager.create_carrier_service(session, name, callback_url)
        assert fake_client.list_calls == 0
        assert fake_client.create_carrier_calls == []

    def test_remote_failure_carries_context(self, manager, fake_client, session):
        fake_client.failures["create_carrier_service"] = RemoteServiceError(
            "base Carrier service is already configured", status_code=422
        )

        with pytest.raises(RemoteServiceError) as exc_info:
            manager.create_carrier_service(session, "DHL", "https://x/cb")

        error = exc_info.value
        assert error.status_code == 422
        assert error.context == {"name": "DHL", "callback_url": "https://x/cb"}
        assert "DHL" in error.message
        assert "already configured" in error.message


class TestClientLifecycle:

    def test_client_closed_after_create(self, manager, fake_client, session):
        manager.create_carrier_service(session, "DHL", "https://x/cb")

        assert fake_client.open_clients == 0
        assert fake_client.closed_clients == 1

    def test_client_closed_after_duplicate(self, populated_manager, populated_client, session):
        with pytest.raises(DuplicateNameError):
            populated_manager.create_carrier_service(session, "DHL", "https://x/cb")

        assert populated_client.open_clients == 0

    def test_client_closed_after_list(self, populated_manager, populated_client, session):
        populated_manager.list_carrier_services(session)
        assert populated_client.closed_clients == 1


class TestNameWhitespace:

    def test_surrounding_whitespace_collides(self, populated_manager, populated_client, session):
        with pytest.raises(DuplicateNameError) as exc_info:
            populated_manager.create_carrier_service(session, "  DHL ", "https://x/cb")

        assert exc_info.value.name == "DHL"
        assert populated_client.create_carrier_calls == []

    def test_stripped_name_is_created(self, manager, fake_client, session):
        created = manager.create_carrier_service(session, " UPS ", " https://ups/cb ")

        assert created["name"] == "UPS"
        assert fake_client.create_carrier_calls[0]["callback_url"] == "https://ups/cb"

    def test_inner_whitespace_is_significant(self, populated_manager, session):
        created = populated_manager.create_carrier_service(session, "D HL", "https://x/cb")
        assert created["name"] == "D HL"
