"""
Tests for scripts/register_carrier_service.py.
"""

import importlib.util
import json
from pathlib import Path

import pytest

from carrier.carrier_services import CarrierServiceManager
from carrier.session import SessionStore

SCRIPT_PATH = Path(__file__).parent.parent / "scripts" / "register_carrier_service.py"


@pytest.fixture
def script():
    spec = importlib.util.spec_from_file_location("register_carrier_service", SCRIPT_PATH)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


@pytest.fixture(autouse=True)
def singletons(monkeypatch, manager):
    monkeypatch.setattr(SessionStore, "_instance", SessionStore())
    monkeypatch.setattr(CarrierServiceManager, "_instance", manager)


ARGS = ["--shop", "test-store.myshopify.com", "--name", "DHL", "--callback-url", "https://x/cb"]


def test_creates_carrier_service(script, fake_client, capsys):
    code = script.register_carrier_service(ARGS + ["--access-token", "shpat_x"])

    assert code == 0
    assert json.loads(capsys.readouterr().out)["name"] == "DHL"
    assert fake_client.sessions[0].access_token == "shpat_x"


def test_duplicate_exits_with_error(script, fake_client, capsys):
    fake_client.carrier_services = [{"id": 1, "name": "DHL"}]

    code = script.register_carrier_service(ARGS + ["--access-token", "shpat_x"])

    assert code == 1
    assert "already exists" in capsys.readouterr().out
    assert fake_client.create_carrier_calls == []


def test_missing_session(script, fake_client):
    assert script.register_carrier_service(ARGS) == 2
    assert fake_client.sessions == []
