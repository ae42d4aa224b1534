"""
Panneau d'administration: gestion des œuvres et derniers messages de contact.

Le panneau n'existe que lorsqu'il est ouvert par une session authentifiée:
sinon render() retourne None et aucune requête admin n'est émise.
"""
import asyncio
import logging
import textwrap
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import BaseModel

from portfolio.client.errors import FetchError
from portfolio.client.events import AppEvent, EventBus
from portfolio.client.remote import RemoteDataClient, Resource
from portfolio.client.session import SessionState
from portfolio.client.upload import ImageFile, build_multipart, check_image
from portfolio.client.validation import validate_artwork
from portfolio.models.contact import ContactMessage
from portfolio.models.painting import Painting

logger = logging.getLogger(__name__)

MESSAGE_PREVIEW_LIMIT = 5
PREVIEW_WIDTH = 140
NO_ARTWORKS_TEXT = "No artworks uploaded yet."
NO_MESSAGES_TEXT = "No messages yet."


class ArtworkRow(BaseModel):
    id: str
    thumbnail: str
    title: str
    year: int
    availability: str


class MessagePreview(BaseModel):
    id: str
    name: str
    email: str
    subject: str
    created_at: Optional[datetime] = None
    preview: str


class AdminPanelView(BaseModel):
    artworks: List[ArtworkRow] = []
    artworks_empty_text: Optional[str] = None
    messages: List[MessagePreview] = []
    messages_empty_text: Optional[str] = None


def _sort_key(message: ContactMessage) -> datetime:
    created = message.created_at
    if created is None:
        return datetime.min.replace(tzinfo=timezone.utc)
    if created.tzinfo is None:
        return created.replace(tzinfo=timezone.utc)
    return created


def recent_messages(raw_messages: List[Dict[str, Any]], limit: int = MESSAGE_PREVIEW_LIMIT) -> List[ContactMessage]:
    """Les `limit` messages les plus récents, du plus récent au plus ancien."""
    messages = [ContactMessage(**raw) for raw in raw_messages]
    messages.sort(key=_sort_key, reverse=True)
    return messages[:limit]


class AdminPanel:
    def __init__(self, client: RemoteDataClient, session: SessionState, bus: EventBus):
        self.client = client
        self.session = session
        self.is_open = False
        self.pending_refresh: Optional[asyncio.Task] = None
        self._unsubscribe = bus.subscribe(AppEvent.OPEN_ADMIN_PANEL, self._on_open_requested)

    @property
    def is_visible(self) -> bool:
        return self.session.is_authenticated and self.is_open

    def _on_open_requested(self) -> None:
        if not self.session.is_authenticated:
            logger.debug("Open admin panel ignored: not authenticated")
            return
        self.is_open = True
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # hors boucle: l'appelant rafraîchira lui-même
            return
        if self.pending_refresh is not None and not self.pending_refresh.done():
            return
        self.pending_refresh = loop.create_task(self._refresh_quietly())

    async def _refresh_quietly(self) -> None:
        try:
            await self.refresh()
        except FetchError as exc:
            logger.warning(f"Admin panel refresh failed: {exc.message}")

    def close(self) -> None:
        self.is_open = False

    def dispose(self) -> None:
        self._unsubscribe()

    async def refresh(self) -> None:
        enabled = self.is_visible
        await asyncio.gather(
            self.client.fetch(Resource.PAINTINGS, enabled=enabled),
            self.client.fetch(Resource.MESSAGES, enabled=enabled),
        )

    def render(self) -> Optional[AdminPanelView]:
        if not self.is_visible:
            return None

        raw_paintings = self.client.peek(Resource.PAINTINGS)
        raw_messages = self.client.peek(Resource.MESSAGES)
        paintings = [Painting(**raw) for raw in raw_paintings or []]
        messages = recent_messages(raw_messages or [])

        view = AdminPanelView(
            artworks=[
                ArtworkRow(
                    id=p.id,
                    thumbnail=p.image_url,
                    title=p.title,
                    year=p.year,
                    availability=p.availability.value,
                )
                for p in paintings
            ],
            messages=[
                MessagePreview(
                    id=m.id,
                    name=m.name,
                    email=m.email,
                    subject=m.subject,
                    created_at=m.created_at,
                    preview=textwrap.shorten(m.message, width=PREVIEW_WIDTH, placeholder="…"),
                )
                for m in messages
            ],
        )
        # pas encore chargé: ni lignes ni texte vide
        if raw_paintings is not None and not view.artworks:
            view.artworks_empty_text = NO_ARTWORKS_TEXT
        if raw_messages is not None and not view.messages:
            view.messages_empty_text = NO_MESSAGES_TEXT
        return view

    # --- Actions sur les œuvres ---

    async def edit_painting(self, painting_id: str, values: Dict[str, Any], image: Optional[ImageFile] = None) -> dict:
        record = validate_artwork(values)
        if image is not None:
            check_image(image)
        data, files = build_multipart(record, image)
        updated = await self.client.mutate(
            Resource.ADMIN_PAINTINGS.item(painting_id), data=data, files=files, method="PUT"
        )
        self.client.invalidate(Resource.PAINTINGS)
        logger.info(f"Painting {painting_id} updated")
        return updated

    async def delete_painting(self, painting_id: str) -> None:
        await self.client.mutate(Resource.ADMIN_PAINTINGS.item(painting_id), method="DELETE")
        self.client.invalidate(Resource.PAINTINGS)
        logger.info(f"Painting {painting_id} deleted")
