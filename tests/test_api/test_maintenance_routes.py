from fastapi.testclient import TestClient

from freshgrupo.crud import catalog as crud_catalog
from freshgrupo.main import app


def test_health_reports_database_and_monitoring(client):
    response = client.get("/health")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "OK"
    assert body["database"] == "connected"
    assert "success_rate" in body["monitoring"]


def test_api_index_lists_endpoints(client):
    body = client.get("/api").json()
    assert body["endpoints"]["orders"] == "/api/orders"


def test_unknown_route_is_404_route_not_found(client):
    response = client.get("/api/does-not-exist")
    assert response.status_code == 404
    assert response.json() == {"detail": "Route not found"}


def test_own_404s_keep_their_detail(client):
    assert client.get("/api/categories/999").json() == {"detail": "Category not found"}


def test_unhandled_errors_are_500_something_went_wrong(client, monkeypatch):
    def explode(*args, **kwargs):
        raise RuntimeError("boom")

    monkeypatch.setattr(crud_catalog, "list_categories", explode)

    response = TestClient(app, raise_server_exceptions=False).get("/api/categories/")

    assert response.status_code == 500
    assert response.json() == {"detail": "Something went wrong!"}


def test_db_stats_is_admin_only(client, customer_headers, admin_headers, pack):
    assert client.get("/api/db-stats", headers=customer_headers).status_code == 403

    tables = client.get("/api/db-stats", headers=admin_headers).json()["tables"]
    assert tables["Packs"] == 1
    assert tables["PackProducts"] == 2
    assert tables["Users"] == 2


def test_seed_endpoint_populates_empty_database(client):
    response = client.post("/api/seed")

    assert response.status_code == 200
    counts = response.json()["counts"]
    assert counts["Users"] == 3
    assert counts["Packs"] == counts["Categories"] * counts["PackTypes"]


def test_force_sync_requires_admin(client, customer_headers):
    assert client.post("/api/force-sync", headers=customer_headers).status_code == 403
