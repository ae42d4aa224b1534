from fastapi.testclient import TestClient

from portfolio.client.upload import MAX_FILE_SIZE
from portfolio.crud import paintings
from tests.conftest import ADMIN_PASSWORD, ADMIN_USERNAME, artwork_form, jpeg_bytes


def _upload(client, image=None, **overrides):
    files = {"image": image or ("painting.jpg", jpeg_bytes(), "image/jpeg")}
    return client.post("/api/admin/paintings", data=artwork_form(**overrides), files=files)


def test_public_list_is_empty_initially(client):
    r = client.get("/api/paintings")
    assert r.status_code == 200
    assert r.json() == []


def test_upload_requires_admin_session(app):
    r = _upload(TestClient(app))
    assert r.status_code == 401
    assert r.json()["message"] == "Authentication required"


def test_upload_creates_painting_and_stores_image(admin_client, upload_dir):
    r = _upload(admin_client, description="Soft light", tags="abstract, , contemporary")
    assert r.status_code == 201
    body = r.json()
    assert body["title"] == "Untitled"
    assert body["year"] == 2025
    assert body["availability"] == "available"
    assert body["featured"] is False
    assert body["description"] == "Soft light"
    assert body["tags"] == "abstract, contemporary"
    assert body["imageUrl"].startswith("/uploads/untitled-")
    assert body["createdAt"]

    stored = upload_dir / body["imageUrl"].rsplit("/", 1)[-1]
    assert stored.read_bytes() == jpeg_bytes()

    listed = admin_client.get("/api/paintings").json()
    assert [p["id"] for p in listed] == [body["id"]]


def test_upload_without_image_is_rejected(admin_client):
    r = admin_client.post("/api/admin/paintings", data=artwork_form())
    assert r.status_code == 400
    assert r.json()["message"] == "Image is required"
    assert admin_client.get("/api/paintings").json() == []


def test_upload_with_invalid_year_returns_field_errors(admin_client, upload_dir):
    r = _upload(admin_client, year="1850", title="")
    assert r.status_code == 400
    body = r.json()
    assert set(body["errors"]) == {"year", "title"}
    assert "message" in body
    assert not upload_dir.exists() or not any(upload_dir.iterdir())


def test_upload_with_absurdly_long_year_is_a_field_error(admin_client):
    r = _upload(admin_client, year="9" * 5000)
    assert r.status_code == 400
    assert r.json()["errors"] == {"year": "Year must be a number"}


def test_upload_rejects_non_image_file(admin_client):
    r = _upload(admin_client, image=("notes.txt", b"hello", "text/plain"))
    assert r.status_code == 400
    assert r.json()["message"] == "Please select an image file."


def test_upload_rejects_file_over_limit(admin_client):
    big = ("big.jpg", b"\0" * (MAX_FILE_SIZE + 1), "image/jpeg")
    r = _upload(admin_client, image=big)
    assert r.status_code == 400
    assert "10MB" in r.json()["message"]


def test_get_single_painting_and_unknown_ids(admin_client):
    created = _upload(admin_client).json()
    assert admin_client.get(f"/api/paintings/{created['id']}").json()["id"] == created["id"]
    assert admin_client.get("/api/paintings/not-an-id").status_code == 404
    assert admin_client.get("/api/paintings/0123456789abcdef01234567").status_code == 404


def test_list_is_newest_first_and_filters(admin_client):
    first = _upload(admin_client, title="First", tags="Landscape").json()
    second = _upload(admin_client, title="Second", featured="true", tags="portrait, ink").json()

    ids = [p["id"] for p in admin_client.get("/api/paintings").json()]
    assert ids == [second["id"], first["id"]]

    featured = admin_client.get("/api/paintings", params={"featured": "true"}).json()
    assert [p["id"] for p in featured] == [second["id"]]

    tagged = admin_client.get("/api/paintings", params={"tag": "landscape"}).json()
    assert [p["id"] for p in tagged] == [first["id"]]


def test_update_keeps_image_when_none_sent(admin_client):
    created = _upload(admin_client).json()
    r = admin_client.put(
        f"/api/admin/paintings/{created['id']}",
        data=artwork_form(title="Renamed", availability="sold"),
    )
    assert r.status_code == 200
    body = r.json()
    assert body["title"] == "Renamed"
    assert body["availability"] == "sold"
    assert body["imageUrl"] == created["imageUrl"]


def test_update_with_new_image_replaces_file(admin_client, upload_dir):
    created = _upload(admin_client).json()
    old_file = upload_dir / created["imageUrl"].rsplit("/", 1)[-1]

    r = admin_client.put(
        f"/api/admin/paintings/{created['id']}",
        data=artwork_form(),
        files={"image": ("new.png", b"\x89PNG....", "image/png")},
    )
    assert r.status_code == 200
    assert r.json()["imageUrl"].endswith(".png")
    assert not old_file.exists()


def test_update_unknown_painting_is_404(admin_client):
    r = admin_client.put("/api/admin/paintings/0123456789abcdef01234567", data=artwork_form())
    assert r.status_code == 404
    assert r.json()["message"] == "Painting not found"


def test_delete_removes_record_and_image(admin_client, upload_dir):
    created = _upload(admin_client).json()
    stored = upload_dir / created["imageUrl"].rsplit("/", 1)[-1]

    r = admin_client.delete(f"/api/admin/paintings/{created['id']}")
    assert r.status_code == 200
    assert admin_client.get(f"/api/paintings/{created['id']}").status_code == 404
    assert not stored.exists()
    assert admin_client.delete(f"/api/admin/paintings/{created['id']}").status_code == 404


def test_failed_insert_removes_stored_image(app, upload_dir, monkeypatch):
    def broken_insert(data, image_file):
        raise RuntimeError("insert failed")

    monkeypatch.setattr(paintings, "create_painting", broken_insert)
    client = TestClient(app, raise_server_exceptions=False)
    client.post("/api/admin/login", json={"username": ADMIN_USERNAME, "password": ADMIN_PASSWORD})

    r = _upload(client)
    assert r.status_code == 500
    assert not any(upload_dir.iterdir())


def test_update_of_concurrently_deleted_painting_removes_new_image(admin_client, upload_dir, monkeypatch):
    created = _upload(admin_client).json()
    kept = upload_dir / created["imageUrl"].rsplit("/", 1)[-1]
    monkeypatch.setattr(paintings, "update_painting", lambda painting_id, data: False)

    r = admin_client.put(
        f"/api/admin/paintings/{created['id']}",
        data=artwork_form(),
        files={"image": ("new.png", b"\x89PNG....", "image/png")},
    )
    assert r.status_code == 404
    assert [p.name for p in upload_dir.iterdir()] == [kept.name]
