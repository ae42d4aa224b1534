import asyncio

import httpx
import pytest

from portfolio.client.errors import FetchError, UploadError
from portfolio.client.remote import RemoteDataClient, Resource, resource_key


class Recorder:
    """Transport factice qui compte les requêtes par (méthode, chemin)."""

    def __init__(self, responder=None):
        self.requests = []
        self.responder = responder or (lambda request: httpx.Response(200, json=[]))

    def __call__(self, request: httpx.Request):
        self.requests.append(request)
        return self.responder(request)

    def count(self, method, path):
        return sum(1 for r in self.requests if r.method == method and r.url.path == path)


def make_client(handler) -> RemoteDataClient:
    return RemoteDataClient(base_url="http://testserver", transport=httpx.MockTransport(handler))


def test_resource_key_normalizes_known_paths():
    assert resource_key("/api/paintings") is Resource.PAINTINGS
    assert resource_key("api/paintings/") is Resource.PAINTINGS
    assert resource_key(Resource.MESSAGES) is Resource.MESSAGES
    assert resource_key("/api/other") == "/api/other"


@pytest.mark.asyncio
async def test_fetch_uses_cache_until_invalidated():
    rec = Recorder(lambda request: httpx.Response(200, json=[{"id": "1"}]))
    async with make_client(rec) as client:
        assert await client.fetch(Resource.PAINTINGS) == [{"id": "1"}]
        assert await client.fetch("/api/paintings") == [{"id": "1"}]
        assert rec.count("GET", "/api/paintings") == 1

        client.invalidate(Resource.PAINTINGS)
        await client.fetch(Resource.PAINTINGS)
        assert rec.count("GET", "/api/paintings") == 2


@pytest.mark.asyncio
async def test_invalidate_twice_is_same_as_once():
    rec = Recorder()
    async with make_client(rec) as client:
        await client.fetch(Resource.PAINTINGS)
        client.invalidate(Resource.PAINTINGS)
        client.invalidate(Resource.PAINTINGS)
        await client.fetch(Resource.PAINTINGS)
        await client.fetch(Resource.PAINTINGS)
        assert rec.count("GET", "/api/paintings") == 2


@pytest.mark.asyncio
async def test_invalidate_unknown_key_is_harmless():
    async with make_client(Recorder()) as client:
        client.invalidate(Resource.MESSAGES)
        assert client.peek(Resource.MESSAGES) is None


@pytest.mark.asyncio
async def test_concurrent_fetches_share_one_request():
    rec = Recorder(lambda request: httpx.Response(200, json=["a"]))
    async with make_client(rec) as client:
        first, second = await asyncio.gather(
            client.fetch("/api/paintings"),
            client.fetch(Resource.PAINTINGS),
        )
        assert first == second == ["a"]
        assert rec.count("GET", "/api/paintings") == 1


@pytest.mark.asyncio
async def test_disabled_fetch_makes_no_request():
    rec = Recorder()
    async with make_client(rec) as client:
        assert await client.fetch(Resource.MESSAGES, enabled=False) is None
        assert rec.requests == []


@pytest.mark.asyncio
async def test_fetch_error_is_not_cached():
    responses = [httpx.Response(500, json={"message": "boom"}), httpx.Response(200, json=["ok"])]
    rec = Recorder(lambda request: responses.pop(0))
    async with make_client(rec) as client:
        with pytest.raises(FetchError) as exc:
            await client.fetch(Resource.PAINTINGS)
        assert exc.value.message == "boom"
        assert exc.value.status_code == 500

        assert await client.fetch(Resource.PAINTINGS) == ["ok"]
        assert rec.count("GET", "/api/paintings") == 2


@pytest.mark.asyncio
async def test_invalidation_during_inflight_fetch_forces_new_request():
    release = asyncio.Event()
    calls = []

    async def handler(request):
        calls.append(request)
        if len(calls) == 1:
            await release.wait()
            return httpx.Response(200, json=["old"])
        return httpx.Response(200, json=["new"])

    async with make_client(handler) as client:
        pending = asyncio.ensure_future(client.fetch(Resource.PAINTINGS))
        await asyncio.sleep(0.01)
        client.invalidate(Resource.PAINTINGS)
        release.set()

        assert await pending == ["old"]
        assert await client.fetch(Resource.PAINTINGS) == ["new"]
        assert len(calls) == 2


@pytest.mark.asyncio
async def test_mutate_returns_body_on_success():
    rec = Recorder(lambda request: httpx.Response(201, json={"id": "abc"}))
    async with make_client(rec) as client:
        body = await client.mutate(Resource.ADMIN_PAINTINGS, data={"title": "x"}, files={"image": ("a.jpg", b"1", "image/jpeg")})
        assert body == {"id": "abc"}
        request = rec.requests[0]
        assert request.method == "POST"
        assert request.url.path == "/api/admin/paintings"
        assert request.headers["content-type"].startswith("multipart/form-data")


@pytest.mark.asyncio
async def test_mutate_surfaces_server_message_verbatim():
    rec = Recorder(lambda request: httpx.Response(400, json={"message": "Image is required"}))
    async with make_client(rec) as client:
        with pytest.raises(UploadError) as exc:
            await client.mutate(Resource.ADMIN_PAINTINGS, data={})
        assert exc.value.message == "Image is required"
        assert exc.value.status_code == 400


@pytest.mark.asyncio
async def test_mutate_falls_back_to_generic_message():
    rec = Recorder(lambda request: httpx.Response(502, text="<html>bad gateway</html>"))
    async with make_client(rec) as client:
        with pytest.raises(UploadError) as exc:
            await client.mutate(Resource.ADMIN_PAINTINGS, data={})
        assert exc.value.message == "Upload failed"


@pytest.mark.asyncio
async def test_timeout_is_reported_as_upload_failure():
    def handler(request):
        raise httpx.ReadTimeout("timed out", request=request)

    async with make_client(handler) as client:
        with pytest.raises(UploadError) as exc:
            await client.mutate(Resource.ADMIN_PAINTINGS, data={})
        assert "timed out" in exc.value.message
        assert exc.value.status_code is None


@pytest.mark.asyncio
async def test_delete_without_body_returns_none():
    rec = Recorder(lambda request: httpx.Response(204))
    async with make_client(rec) as client:
        assert await client.mutate(Resource.ADMIN_PAINTINGS.item("42"), method="DELETE") is None
        assert rec.count("DELETE", "/api/admin/paintings/42") == 1


@pytest.mark.asyncio
async def test_login_reports_refusal():
    rec = Recorder(lambda request: httpx.Response(401, json={"message": "Invalid credentials"}))
    async with make_client(rec) as client:
        assert await client.login("admin", "wrong") is False
