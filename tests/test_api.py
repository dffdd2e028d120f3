import pytest
from fastapi.testclient import TestClient

from inventory.api import main
from inventory.cache import FeedCache
from inventory.errors import FetchError
from inventory.revalidate import InvalidationGateway, STALE_ROUTES

from conftest import CountingLoader


@pytest.fixture()
def cache(loader):
    return FeedCache(loader, ttl=300)


@pytest.fixture()
def client(cache):
    main.app.dependency_overrides[main.get_cache] = lambda: cache
    main.stale_routes.pop_stale()
    yield TestClient(main.app)
    main.app.dependency_overrides.clear()


def test_list_vehicles(client, loader):
    response = client.get("/api/vehicles")
    assert response.status_code == 200
    data = response.json()
    assert [v["stockNo"] for v in data] == ["4471", "123", "5020"]
    assert data[1]["thumbnailImage"].endswith("/toyota/corolla/123/1.jpg")
    assert len(data[1]["images"]) == 10
    client.get("/api/vehicles")
    assert loader.calls == 1


def test_list_vehicles_filters_and_sorts(client):
    assert [v["id"] for v in client.get("/api/vehicles", params={"manufacturer": "ford"}).json()] == ["4471"]
    by_model = client.get("/api/vehicles", params={"manufacturer": "mazda", "model": "cx-5"}).json()
    assert [v["id"] for v in by_model] == ["5020"]
    searched = client.get("/api/vehicles", params={"q": "toyota 2018"}).json()
    assert [v["id"] for v in searched] == ["123"]
    by_price = client.get("/api/vehicles", params={"sort": "price"}).json()
    assert [v["price"] for v in by_price] == ["42990", "31500", "17990"]


def test_model_filter_requires_manufacturer(client):
    assert client.get("/api/vehicles", params={"model": "ranger"}).status_code == 400


def test_unknown_sort_rejected(client):
    assert client.get("/api/vehicles", params={"sort": "colour"}).status_code == 422


def test_feed_failure_returns_500(cache, client, loader):
    loader.error = FetchError("Feed unreachable")
    response = client.get("/api/vehicles")
    assert response.status_code == 500
    assert response.json() == {"error": "Failed to fetch vehicles"}
    assert client.get("/api/vehicles/123").status_code == 500
    assert client.get("/api/search", params={"q": "ford"}).status_code == 500


def test_get_vehicle(client):
    response = client.get("/api/vehicles/123")
    assert response.status_code == 200
    assert response.json()["model"] == "Corolla"
    missing = client.get("/api/vehicles/999")
    assert missing.status_code == 404
    assert missing.json() == {"error": "Vehicle not found"}


def test_search(client):
    lower = client.get("/api/search", params={"q": "ford"}).json()
    upper = client.get("/api/search", params={"q": "FORD"}).json()
    assert [v["id"] for v in lower] == ["4471"]
    assert upper == lower


def test_manufacturers(client):
    data = client.get("/api/manufacturers").json()
    assert data[0] == {"name": "Ford", "slug": "ford", "count": 1}
    assert [m["slug"] for m in data] == ["ford", "mazda", "toyota"]


def test_revalidate_success(client, cache, loader, monkeypatch):
    monkeypatch.setenv("WEBHOOK_SECRET", "abc")
    client.get("/api/vehicles")
    response = client.post("/api/revalidate", json={"secret": "abc"})
    assert response.status_code == 200
    body = response.json()
    assert body["revalidated"] is True
    assert body["timestamp"]
    assert cache.snapshot is None
    assert main.stale_routes.pop_stale() == [path for path, _ in STALE_ROUTES]
    client.get("/api/vehicles")
    assert loader.calls == 2


def test_revalidate_wrong_secret(client, monkeypatch):
    monkeypatch.setenv("WEBHOOK_SECRET", "abc")
    response = client.post("/api/revalidate", json={"secret": "xyz"})
    assert response.status_code == 401
    assert response.json() == {"error": "Invalid secret"}


def test_revalidate_not_configured(client):
    response = client.post("/api/revalidate", json={"secret": "abc"})
    assert response.status_code == 500
    assert response.json() == {"error": "Webhook not configured"}


def test_revalidate_unexpected_error(client, cache, monkeypatch):
    class BrokenRevalidator:
        def revalidate_path(self, path, kind=None):
            raise RuntimeError("router unavailable")

    monkeypatch.setenv("WEBHOOK_SECRET", "abc")
    main.app.dependency_overrides[main.get_gateway] = lambda: InvalidationGateway(cache, BrokenRevalidator())
    response = client.post("/api/revalidate", json={"secret": "abc"})
    assert response.status_code == 500
    assert response.json() == {"error": "Revalidation failed"}


def test_healthz(client, monkeypatch):
    monkeypatch.setenv("IMAGE_UNOPTIMIZED", "true")
    before = client.get("/healthz").json()
    assert before["cachedVehicles"] is None
    assert before["imagesUnoptimized"] is True
    client.get("/api/vehicles")
    after = client.get("/healthz").json()
    assert after["cachedVehicles"] == 3
    assert after["snapshotAgeSeconds"] >= 0


def test_empty_inventory_is_not_a_failure():
    empty = FeedCache(CountingLoader([]), ttl=300)
    main.app.dependency_overrides[main.get_cache] = lambda: empty
    try:
        response = TestClient(main.app).get("/api/vehicles")
    finally:
        main.app.dependency_overrides.clear()
    assert response.status_code == 200
    assert response.json() == []


def test_revalidate_numeric_secret_is_rejected(client, monkeypatch):
    monkeypatch.setenv("WEBHOOK_SECRET", "abc")
    response = client.post("/api/revalidate", json={"secret": 123})
    assert response.status_code == 401
    assert response.json() == {"error": "Invalid secret"}


def test_revalidate_numeric_secret_without_server_secret(client):
    response = client.post("/api/revalidate", json={"secret": 123})
    assert response.status_code == 500
    assert response.json() == {"error": "Webhook not configured"}


@pytest.mark.parametrize("server_secret", ["abc", None])
def test_revalidate_malformed_body(client, monkeypatch, server_secret):
    if server_secret:
        monkeypatch.setenv("WEBHOOK_SECRET", server_secret)
    response = client.post(
        "/api/revalidate", content=b"not json", headers={"Content-Type": "application/json"}
    )
    assert response.status_code == 500
    assert response.json() == {"error": "Revalidation failed"}


@pytest.mark.parametrize("server_secret, status", [("abc", 401), (None, 500)])
def test_revalidate_non_object_body(client, monkeypatch, server_secret, status):
    if server_secret:
        monkeypatch.setenv("WEBHOOK_SECRET", server_secret)
    response = client.post("/api/revalidate", json=["abc"])
    assert response.status_code == status


def test_stale_routes_consumed_by_page_layer(client, monkeypatch):
    monkeypatch.setenv("WEBHOOK_SECRET", "abc")
    client.post("/api/revalidate", json={"secret": "abc"})
    assert client.get("/api/stale-routes").status_code == 401
    response = client.get("/api/stale-routes", headers={"X-Webhook-Secret": "abc"})
    assert response.status_code == 200
    assert response.json() == {"routes": [path for path, _ in STALE_ROUTES]}
    again = client.get("/api/stale-routes", headers={"X-Webhook-Secret": "abc"})
    assert again.json() == {"routes": []}


def test_stale_routes_not_configured(client):
    response = client.get("/api/stale-routes", headers={"X-Webhook-Secret": "abc"})
    assert response.status_code == 500
    assert response.json() == {"error": "Webhook not configured"}


def test_site_config(client, monkeypatch):
    assert client.get("/api/config").json() == {
        "imageBaseUrl": "https://img.example.com/brands",
        "imagesUnoptimized": False,
    }
    monkeypatch.setenv("IMAGE_UNOPTIMIZED", "true")
    assert client.get("/api/config").json()["imagesUnoptimized"] is True
