"""HTTP tests for the visitors and health routes."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from fastapi.testclient import TestClient
from gatekeeper.config import Settings
from gatekeeper.main import create_app


class TestPing:
    def test_ping(self, client):
        resp = client.get("/ping")
        assert resp.status_code == 200
        assert resp.json() == {"message": "pong"}

    def test_health_ok(self, client):
        resp = client.get("/health")
        assert resp.status_code == 200
        assert resp.json()["database"] == "ok"
        assert resp.json()["status"] == "ok"


class TestGetVisitors:
    def test_empty_list(self, client):
        resp = client.get("/visitors")
        assert resp.status_code == 200
        assert resp.json() == []

    def test_list_after_adding(self, client):
        client.post("/visitors", json={"name": "Jordy", "plate": "ABC-123"})
        client.post("/visitors", json={"name": "Piet", "plate": "DEF-456"})
        resp = client.get("/visitors")
        assert resp.status_code == 200
        assert resp.json() == [
            {"name": "Jordy", "plate": "ABC-123"},
            {"name": "Piet", "plate": "DEF-456"},
        ]

    def test_lookup_by_plate(self, client):
        client.post("/visitors", json={"name": "Jordy", "plate": "ABC-123"})
        resp = client.get("/visitors/ABC-123")
        assert resp.status_code == 200
        assert resp.json() == [{"name": "Jordy", "plate": "ABC-123"}]

    def test_unknown_plate_is_404(self, client):
        resp = client.get("/visitors/UNKNOWN-PLATE")
        assert resp.status_code == 404
        assert "message" in resp.json()


class TestAddVisitor:
    def test_created(self, client):
        body = {"name": "Jordy", "plate": "ABC-123"}
        resp = client.post("/visitors", json=body)
        assert resp.status_code == 201
        assert resp.json() == body

    def test_empty_name_is_400(self, client):
        resp = client.post("/visitors", json={"name": "", "plate": "X"})
        assert resp.status_code == 400
        assert resp.json() == {"message": "Name and plate are required"}

    def test_missing_plate_is_400(self, client):
        resp = client.post("/visitors", json={"name": "Jordy"})
        assert resp.status_code == 400

    def test_malformed_body_is_400(self, client):
        resp = client.post("/visitors", content=b"not json", headers={"content-type": "application/json"})
        assert resp.status_code == 400

    def test_duplicate_plate_is_409(self, client):
        client.post("/visitors", json={"name": "Jordy", "plate": "ABC-123"})
        resp = client.post("/visitors", json={"name": "Piet", "plate": "ABC-123"})
        assert resp.status_code == 409
        assert resp.json() == {"message": "Plate already in database"}
        assert client.get("/visitors/ABC-123").json() == [{"name": "Jordy", "plate": "ABC-123"}]


class TestRemoveVisitor:
    def test_removed(self, client):
        client.post("/visitors", json={"name": "Jordy", "plate": "ABC-123"})
        resp = client.delete("/visitors/ABC-123")
        assert resp.status_code == 200
        assert resp.json() == {"message": "Plate removed"}
        assert client.get("/visitors/ABC-123").status_code == 404

    def test_unknown_plate_is_404(self, client):
        resp = client.delete("/visitors/UNKNOWN-PLATE")
        assert resp.status_code == 404
        assert resp.json() == {"message": "Plate is not found in the database"}


class TestDatabaseDown:
    def test_requests_fail_with_500_and_server_survives(self, tmp_path):
        url = f"sqlite:///{tmp_path / 'missing' / 'gatekeeper.db'}"
        app = create_app(Settings(database={"url": url}))
        with TestClient(app) as client:
            resp = client.get("/visitors")
            assert resp.status_code == 500
            assert resp.json() == {"message": "Internal server error"}

            resp = client.post("/visitors", json={"name": "Jordy", "plate": "ABC-123"})
            assert resp.status_code == 500

            assert client.get("/ping").status_code == 200
            health = client.get("/health").json()
            assert health["status"] == "degraded"

    def test_database_coming_up_after_startup(self, tmp_path):
        db_dir = tmp_path / "mysql"
        app = create_app(Settings(database={"url": f"sqlite:///{db_dir / 'gatekeeper.db'}"}))
        with TestClient(app) as client:
            assert client.get("/visitors").status_code == 500

            db_dir.mkdir()
            assert client.get("/health").json()["status"] == "ok"
            resp = client.get("/visitors")
            assert resp.status_code == 200
            assert resp.json() == []

            resp = client.post("/visitors", json={"name": "Jordy", "plate": "ABC-123"})
            assert resp.status_code == 201
            assert client.get("/visitors/ABC-123").status_code == 200
