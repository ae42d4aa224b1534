"""
Client REST asynchrone avec cache de lecture par ressource.

- fetch(): lecture mise en cache, une seule requête en vol par ressource
- mutate(): requête d'écriture (POST multipart, PUT, DELETE)
- invalidate(): marque une ressource comme périmée
"""
import asyncio
import logging
import os
from enum import Enum
from typing import Any, Dict, Optional, Union

import httpx

from portfolio.client.errors import FetchError, UploadError

logger = logging.getLogger(__name__)

API_URL = os.getenv("PORTFOLIO_API_URL", "http://localhost:8000")
DEFAULT_TIMEOUT = 15.0
GENERIC_UPLOAD_ERROR = "Upload failed"
GENERIC_FETCH_ERROR = "Failed to load data"


class Resource(str, Enum):
    PAINTINGS = "/api/paintings"
    MESSAGES = "/api/admin/messages"
    ADMIN_PAINTINGS = "/api/admin/paintings"

    def item(self, item_id: str) -> str:
        return f"{self.value}/{item_id}"


CacheKey = Union[Resource, str]


def resource_key(key: CacheKey) -> CacheKey:
    """Ramène un chemin brut à sa ressource connue quand elle existe."""
    if isinstance(key, Resource):
        return key
    path = "/" + str(key).strip().strip("/")
    try:
        return Resource(path)
    except ValueError:
        return path


def _path(key: CacheKey) -> str:
    return key.value if isinstance(key, Resource) else key


def _error_message(response: httpx.Response, fallback: str) -> str:
    try:
        body = response.json()
    except ValueError:
        return fallback
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return fallback


class _CacheEntry:
    __slots__ = ("data", "stale")

    def __init__(self, data):
        self.data = data
        self.stale = False


class RemoteDataClient:
    """Client de l'API du site; les cookies de session sont renvoyés automatiquement."""

    def __init__(
        self,
        base_url: str = API_URL,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._http = httpx.AsyncClient(
            base_url=base_url,
            timeout=httpx.Timeout(timeout),
            transport=transport,
        )
        self._cache: Dict[CacheKey, _CacheEntry] = {}
        self._inflight: Dict[CacheKey, asyncio.Task] = {}

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        await self.aclose()

    async def aclose(self):
        await self._http.aclose()

    # --- Lecture ---

    async def fetch(self, key: CacheKey, enabled: bool = True):
        """
        Retourne les données de la ressource, depuis le cache si elles sont
        fraîches. Ne fait aucune requête si `enabled` est faux.
        """
        if not enabled:
            return None
        key = resource_key(key)

        entry = self._cache.get(key)
        if entry is not None and not entry.stale:
            logger.debug("Cache hit for %s", _path(key))
            return entry.data

        task = self._inflight.get(key)
        if task is None:
            logger.debug("Cache miss for %s", _path(key))
            task = asyncio.ensure_future(self._load(key))
            self._inflight[key] = task
        # shield: l'annulation d'un appelant n'annule pas la requête partagée
        return await asyncio.shield(task)

    async def _load(self, key: CacheKey):
        task = asyncio.current_task()
        try:
            response = await self._send("GET", _path(key), FetchError, GENERIC_FETCH_ERROR)
            if not response.is_success:
                message = _error_message(response, GENERIC_FETCH_ERROR)
                logger.warning("GET %s failed (%s): %s", _path(key), response.status_code, message)
                raise FetchError(message, response.status_code)
            try:
                data = response.json()
            except ValueError as exc:
                raise FetchError(GENERIC_FETCH_ERROR, response.status_code) from exc
        finally:
            detached = self._inflight.get(key) is not task
            if not detached:
                del self._inflight[key]

        # une invalidation pendant la requête rend ce résultat inutilisable pour le cache
        if not detached:
            self._cache[key] = _CacheEntry(data)
        return data

    def peek(self, key: CacheKey):
        """Dernières données connues (même périmées), sans requête."""
        entry = self._cache.get(resource_key(key))
        return entry.data if entry is not None else None

    # --- Écriture ---

    async def mutate(
        self,
        path: CacheKey,
        data: Optional[Dict[str, str]] = None,
        files: Optional[Dict[str, Any]] = None,
        json: Optional[Any] = None,
        method: str = "POST",
    ):
        response = await self._send(
            method, _path(resource_key(path)), UploadError, GENERIC_UPLOAD_ERROR,
            data=data, files=files or None, json=json,
        )
        if not response.is_success:
            message = _error_message(response, GENERIC_UPLOAD_ERROR)
            logger.warning("%s %s failed (%s): %s", method, _path(path), response.status_code, message)
            raise UploadError(message, response.status_code)
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return {}

    def invalidate(self, key: CacheKey) -> None:
        """Marque la ressource comme périmée; le prochain fetch refait la requête."""
        key = resource_key(key)
        entry = self._cache.get(key)
        if entry is not None:
            entry.stale = True
        # la requête en vol éventuelle ne doit plus alimenter le cache
        self._inflight.pop(key, None)
        logger.debug("Invalidated %s", _path(key))

    def clear(self) -> None:
        """Oublie tout le cache (ex: après déconnexion)."""
        self._cache.clear()
        self._inflight.clear()

    # --- Session admin ---

    async def login(self, username: str, password: str) -> bool:
        response = await self._send(
            "POST", "/api/admin/login", FetchError, "Login failed",
            json={"username": username, "password": password},
        )
        if response.status_code == 401:
            return False
        if not response.is_success:
            raise FetchError(_error_message(response, "Login failed"), response.status_code)
        return True

    async def check_session(self) -> bool:
        response = await self._send("GET", "/api/admin/verify", FetchError, GENERIC_FETCH_ERROR)
        return response.is_success

    async def logout(self) -> None:
        await self._send("POST", "/api/admin/logout", FetchError, "Logout failed")
        self._http.cookies.clear()

    async def _send(self, method: str, path: str, error_cls, fallback: str, **kwargs) -> httpx.Response:
        try:
            return await self._http.request(method, path, **kwargs)
        except httpx.TimeoutException as exc:
            logger.error("%s %s timed out: %s", method, path, exc)
            raise error_cls(f"{fallback}: request timed out") from exc
        except httpx.HTTPError as exc:
            logger.error("%s %s failed: %s", method, path, exc)
            raise error_cls(fallback) from exc
