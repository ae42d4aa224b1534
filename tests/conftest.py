import mongomock
import pytest
from fastapi.testclient import TestClient

from portfolio import database, storage
from portfolio.routes import auth_admin

ADMIN_USERNAME = "admin"
ADMIN_PASSWORD = "s3cret-pass"


def jpeg_bytes(size: int = 2048) -> bytes:
    return b"\xff\xd8\xff\xe0" + b"\0" * (size - 4)


def artwork_form(**overrides) -> dict:
    values = {
        "title": "Untitled",
        "year": "2025",
        "medium": "Oil",
        "size": "50x50",
        "availability": "available",
        "featured": "false",
    }
    values.update(overrides)
    return values


@pytest.fixture(autouse=True)
def _env(monkeypatch, tmp_path):
    # Mongo en mémoire et dossier d'upload temporaire
    monkeypatch.setattr(database, "_db", mongomock.MongoClient()["portfolio_test"])
    monkeypatch.setattr(storage, "UPLOAD_DIR", tmp_path / "uploads")
    monkeypatch.setattr(auth_admin, "ADMIN_USERNAME", ADMIN_USERNAME)
    monkeypatch.setattr(auth_admin, "ADMIN_PASSWORD", ADMIN_PASSWORD)
    monkeypatch.setattr(auth_admin, "SECRET_KEY", "test-secret-key")
    yield


@pytest.fixture
def app():
    from portfolio.main import app
    return app


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def admin_client(client):
    r = client.post("/api/admin/login", json={"username": ADMIN_USERNAME, "password": ADMIN_PASSWORD})
    assert r.status_code == 200
    return client


@pytest.fixture
def upload_dir():
    return storage.UPLOAD_DIR
