"""
Tests for routes.py — API endpoint tests via FastAPI TestClient.

Covers:
  - /health
  - /gas (adjuster state, live parameters, misconfiguration → 503)
  - /gas/price (suggestion, replacement bump, validation)
  - 503 before initialization
"""

from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

import config
from app import app
from gas_adjuster import GasAdjuster
from parameters import EnvParameters, FixedParameters

GWEI = 10**9


@pytest.fixture
def chain():
    chain = MagicMock()
    chain.get_gas_price.return_value = 20 * GWEI
    return chain


@pytest.fixture(autouse=True)
def _setup_routes(chain):
    """Initialize routes with a fixed-parameters adjuster over a mocked chain."""
    import routes

    adjuster = GasAdjuster(chain, FixedParameters())
    adjuster.keep_updated()
    routes.init(gas_adjuster=adjuster, parameters=adjuster.parameters)

    yield adjuster

    routes.init(gas_adjuster=None, parameters=None)


@pytest.fixture
def client():
    return TestClient(app, raise_server_exceptions=False)


class TestHealth:
    def test_health(self, client):
        resp = client.get("/health")
        assert resp.status_code == 200
        assert resp.json() == {"status": "healthy"}


class TestGasStatus:
    def test_reports_state_and_parameters(self, client):
        resp = client.get("/gas")
        assert resp.status_code == 200
        data = resp.json()
        assert data["chain_id"] == config.CHAIN_ID
        assert data["max_gas_price"] == 30 * GWEI
        assert data["average_price"] == 20 * GWEI
        assert data["samples"] == 1
        assert data["parameters"] == {
            "source": "fixed",
            "renewal_interval_seconds": 0,
            "scale_factor": 1.5,
        }

    def test_live_parameters_reflect_env_changes(self, client, chain, monkeypatch):
        import routes

        monkeypatch.setenv(config.MAX_GAS_PRICE_RENEWAL_INTERVAL_VAR, "30")
        monkeypatch.setenv(config.MAX_GAS_PRICE_SCALE_FACTOR_VAR, "2.0")
        routes.init(gas_adjuster=GasAdjuster(chain, EnvParameters()), parameters=EnvParameters())

        first = client.get("/gas").json()["parameters"]
        monkeypatch.setenv(config.MAX_GAS_PRICE_SCALE_FACTOR_VAR, "1.2")
        second = client.get("/gas").json()["parameters"]

        assert first == {"source": "env", "renewal_interval_seconds": 30, "scale_factor": 2.0}
        assert second["scale_factor"] == 1.2

    def test_misconfiguration_returns_503(self, client, chain, monkeypatch):
        import routes

        monkeypatch.delenv(config.MAX_GAS_PRICE_RENEWAL_INTERVAL_VAR, raising=False)
        monkeypatch.delenv(config.MAX_GAS_PRICE_SCALE_FACTOR_VAR, raising=False)
        routes.init(gas_adjuster=GasAdjuster(chain, EnvParameters()), parameters=EnvParameters())

        resp = client.get("/gas")
        assert resp.status_code == 503
        data = resp.json()
        assert data["code"] == "misconfiguration"
        assert config.MAX_GAS_PRICE_RENEWAL_INTERVAL_VAR in data["message"]


class TestGasPrice:
    def test_suggests_network_price_under_ceiling(self, client):
        resp = client.get("/gas/price")
        assert resp.status_code == 200
        assert resp.json() == {"gas_price": 20 * GWEI, "max_gas_price": 30 * GWEI}

    def test_replacement_bump(self, client):
        resp = client.get("/gas/price", params={"previous": 20 * GWEI})
        assert resp.status_code == 200
        assert resp.json()["gas_price"] == 23 * GWEI

    def test_capped_when_network_spikes(self, client, chain):
        chain.get_gas_price.return_value = 90 * GWEI
        resp = client.get("/gas/price")
        assert resp.json()["gas_price"] == 30 * GWEI

    def test_negative_previous_rejected(self, client):
        resp = client.get("/gas/price", params={"previous": -1})
        assert resp.status_code == 422
        data = resp.json()
        assert set(data) == {"code", "message"}
        assert data["code"] == "validation_error"
        assert "previous" in data["message"]

    def test_non_integer_previous_rejected(self, client):
        resp = client.get("/gas/price", params={"previous": "lots"})
        assert resp.status_code == 422
        assert resp.json()["code"] == "validation_error"


def test_uninitialized_returns_503(client):
    import routes

    routes.init(gas_adjuster=None, parameters=None)

    resp = client.get("/gas")
    assert resp.status_code == 503
    assert resp.json() == {
        "code": "service_unavailable",
        "message": "Service unavailable: initializing",
    }
