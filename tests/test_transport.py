"""Transport and configuration tests using httpx.MockTransport."""

import json

import httpx
import pytest

from foodadmin.config import ApiConfig, Endpoints
from foodadmin.transport import HttpTransport, TransportError, UnauthorizedError


CONFIG = ApiConfig(
    server_host="https://api.example.test/",
    access_token=lambda: "access-123",
    id_token=lambda: "id-456",
)


def _transport(handler) -> HttpTransport:
    return HttpTransport(CONFIG, client=httpx.Client(transport=httpx.MockTransport(handler)))


def test_endpoints_from_config() -> None:
    endpoints = Endpoints.from_config(CONFIG)
    assert endpoints.get_users == "https://api.example.test/FoodUserManagement/GetUserList"
    assert endpoints.get_foods == "https://api.example.test/food-management/GetFoodList"
    assert endpoints.get_orders == "https://api.example.test/food-purchase-management/GetFoodPurchaseList"
    assert endpoints.deliveries == "https://api.example.test/food-delivery-management/Deliveries"


def test_user_service_gets_id_token() -> None:
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["id"] = request.headers.get("X-User-IdToken")
        seen["auth"] = request.headers.get("Authorization")
        return httpx.Response(200, json={"Users": []})

    with _transport(handler) as transport:
        assert transport.get(Endpoints.from_config(CONFIG).get_users) == {"Users": []}
    assert seen == {"id": "id-456", "auth": None}


def test_other_services_get_bearer_token() -> None:
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["auth"] = request.headers.get("authorization")
        seen["query"] = dict(request.url.params)
        return httpx.Response(200, json=[])

    transport = _transport(handler)
    transport.get(Endpoints.from_config(CONFIG).get_foods, params={"admin": "true"})
    assert seen == {"auth": "Bearer access-123", "query": {"admin": "true"}}


def test_no_tokens_means_no_auth_headers() -> None:
    transport = HttpTransport(ApiConfig(), client=httpx.Client())
    assert transport.auth_headers("https://tanawal-apim.azure-api.net/food-management/x") == {}
    transport.client.close()


def test_send_encodes_json_and_handles_empty_body() -> None:
    bodies = []

    def handler(request: httpx.Request) -> httpx.Response:
        bodies.append((request.method, json.loads(request.content)))
        return httpx.Response(204)

    transport = _transport(handler)
    url = "https://api.example.test/food-management/UpdateFoodList"
    assert transport.send("PUT", url, body={"id": "1"}) is None
    assert bodies == [("PUT", {"id": "1"})]


def test_unauthorized_raises() -> None:
    transport = _transport(lambda request: httpx.Response(401))
    with pytest.raises(UnauthorizedError) as excinfo:
        transport.get("https://api.example.test/food-management/GetFoodList")
    assert excinfo.value.status_code == 401


def test_http_error_raises_transport_error() -> None:
    transport = _transport(lambda request: httpx.Response(500, text="boom"))
    with pytest.raises(TransportError) as excinfo:
        transport.get("https://api.example.test/food-management/GetFoodList")
    assert excinfo.value.status_code == 500
    assert not isinstance(excinfo.value, UnauthorizedError)


def test_network_error_raises_transport_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    with pytest.raises(TransportError):
        _transport(handler).get("https://api.example.test/food-management/GetFoodList")


def test_non_json_body_raises() -> None:
    transport = _transport(lambda request: httpx.Response(200, text="<html>"))
    with pytest.raises(TransportError):
        transport.get("https://api.example.test/food-management/GetFoodList")


def test_config_from_env(monkeypatch) -> None:
    monkeypatch.setenv("FOODADMIN_SERVER_HOST", "https://env.example.test")
    monkeypatch.setenv("FOODADMIN_TIMEOUT", "3.5")
    monkeypatch.setenv("FOODADMIN_ACCESS_TOKEN", "tok")
    monkeypatch.delenv("FOODADMIN_ID_TOKEN", raising=False)
    config = ApiConfig.from_env(dotenv=False)
    assert config.server_host == "https://env.example.test"
    assert config.timeout == 3.5
    assert config.access_token is not None and config.access_token() == "tok"
    assert config.id_token is None


def test_config_rejects_bad_timeout(monkeypatch) -> None:
    monkeypatch.setenv("FOODADMIN_TIMEOUT", "soon")
    with pytest.raises(ValueError):
        ApiConfig.from_env(dotenv=False)
