"""Integration tests for the HTTP API"""

import pytest
from fastapi.testclient import TestClient

from wallet_selector.api.app import create_app
from wallet_selector.api.dependencies import DependencyContainer, set_container
from wallet_selector.config import create_test_config
from wallet_selector.domain import TimeoutConfig

WALLET_URL = "https://wallet.example.com"


@pytest.fixture
def container():
    """Fresh dependency container with the default test wallet"""
    config = create_test_config(
        wallets=[
            {
                "id": "wallet-1",
                "name": "Example Wallet",
                "url": WALLET_URL,
                "protocols": ["openid4vp", "w3c-vc"],
                "jwks": [{"kty": "EC", "crv": "P-256", "kid": "k1", "x": "x", "y": "y"}],
            }
        ],
        timeouts=TimeoutConfig(request_seconds=0.5, protocol_refresh_seconds=0.5, wallet_response_seconds=1.0),
    )
    container = DependencyContainer(config=config)
    set_container(container)
    yield container
    set_container(None)


@pytest.fixture
def client(container):
    """Test client; entering it runs the application lifespan"""
    with TestClient(create_app()) as test_client:
        yield test_client


def test_health_check(client):
    """Test health check endpoint"""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "service": "wallet-selector"}


def test_protocols(client):
    """Supported protocols come from the enabled wallets; plugins from the registry"""
    response = client.get("/protocols")

    assert response.status_code == 200
    assert response.json() == {"protocols": ["openid4vp", "w3c-vc"], "plugins": ["openid4vp"]}


class TestCredentialRequests:
    """Requests that settle without user interaction"""

    def test_non_protocol_request_is_handed_back(self, client):
        options = {"password": True}

        response = client.post("/credentials/get", json={"options": options})

        assert response.status_code == 200
        assert response.json() == {"credential": None, "result": {"use_native": True, "options": options}}

    def test_unsupported_protocol_is_handed_back(self, client):
        options = {"digital": {"requests": [{"protocol": "p9", "data": {}}]}}

        response = client.post("/credentials/get", json={"options": options})

        assert response.json()["result"] == {"use_native": True, "options": options}

    def test_disabled_selector_goes_native(self, client):
        client.post("/settings/enabled", json={"enabled": False})
        options = {
            "digital": {
                "requests": [
                    {"protocol": "openid4vp", "data": {"client_id": "verifier", "request_uri": "https://v.example.com/r"}}
                ]
            }
        }

        response = client.post("/credentials/get", json={"options": options})

        assert response.status_code == 200
        assert response.json()["result"] == {"use_native": True, "options": options}

    def test_cancel_unknown_request(self, client):
        response = client.delete("/credentials/dc-req-9-0")

        assert response.status_code == 404
        assert response.json()["detail"]["error"] == "request_not_found"


class TestWallets:
    """Wallet listing and self-registration"""

    def test_list_wallets(self, client):
        wallets = client.get("/wallets").json()

        assert [wallet["id"] for wallet in wallets] == ["wallet-1"]
        assert wallets[0]["endpoint"] == WALLET_URL

    def test_register_wallet_refreshes_protocols(self, client):
        response = client.post(
            "/wallets/register",
            json={"name": "New Wallet", "url": "https://new-wallet.example.com", "protocols": ["iso-mdoc"]},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["already_registered"] is False
        assert data["wallet"]["id"].startswith("wallet-")
        assert data["wallet"]["auto_registered"] is True
        assert data["wallet"]["registered_at"] is not None

        assert "iso-mdoc" in client.get("/protocols").json()["protocols"]
        assert client.get("/wallets/check", params={"url": "https://new-wallet.example.com"}).json() == {
            "is_registered": True
        }

    def test_register_known_endpoint(self, client):
        response = client.post(
            "/wallets/register", json={"name": "Again", "url": WALLET_URL, "protocols": ["openid4vp"]}
        )

        assert response.json()["already_registered"] is True
        assert response.json()["wallet"]["id"] == "wallet-1"
        assert len(client.get("/wallets").json()) == 1

    @pytest.mark.parametrize(
        "payload",
        [
            {"name": "Bad", "url": "https://bad.example.com", "protocols": ["Not Valid"]},
            {"name": "Bad", "url": "not-a-url", "protocols": ["openid4vp"]},
        ],
    )
    def test_register_invalid_wallet(self, client, payload):
        response = client.post("/wallets/register", json=payload)

        assert response.status_code == 400
        assert response.json()["detail"]["error"] == "invalid_wallet"

    def test_check_unknown_wallet(self, client):
        response = client.get("/wallets/check", params={"url": "https://unknown.example.com"})
        assert response.json() == {"is_registered": False}

    def test_configured_verifiers(self, client):
        assert client.get("/wallets/verifiers").json() == [WALLET_URL]


class TestSettings:
    """Enable flag and statistics"""

    def test_settings(self, client):
        data = client.get("/settings").json()
        assert data == {"enabled": True, "stats": {"intercept_count": 0, "wallet_uses": {}}}

    def test_toggle_enabled(self, client):
        assert client.post("/settings/enabled", json={"enabled": False}).json() == {"success": True, "enabled": False}
        assert client.get("/settings").json()["enabled"] is False


class TestNothingPending:
    """Selection and wallet endpoints for unknown correlation ids"""

    def test_no_selections(self, client):
        assert client.get("/selections").json() == []

    def test_unknown_selection(self, client):
        assert client.get("/selections/dc-req-9-0").status_code == 404
        assert client.post("/selections/dc-req-9-0", json={"action": "native"}).status_code == 404

    def test_wallet_choice_requires_wallet_id(self, client):
        response = client.post("/selections/dc-req-9-0", json={"action": "wallet"})
        assert response.status_code == 400

    def test_unknown_invocation(self, client):
        assert client.get("/wallet/invocations/dc-req-9-0").status_code == 404
        assert client.post("/wallet/native/dc-req-9-0").status_code == 404
        assert client.post("/wallet/cancel/dc-req-9-0").status_code == 404

    def test_wallet_response_for_unknown_request(self, client):
        response = client.post("/wallet/response/dc-req-9-0", data={"response": '{"vp_token": "abc"}'})
        assert response.status_code == 404

    def test_wallet_response_must_be_json(self, client):
        response = client.post("/wallet/response/dc-req-9-0", data={"response": "{not json"})
        assert response.status_code == 400
