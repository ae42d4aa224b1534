"""
Contrôleur du formulaire d'ajout d'une œuvre.

Gère le fichier sélectionné (clic ou glisser-déposer), la validation des
champs et le cycle de vie de l'envoi multipart vers l'API admin.
"""
import logging
import mimetypes
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, Optional, Tuple

from pydantic import BaseModel

from portfolio.client.errors import (
    FileTooLarge,
    InvalidFileType,
    MissingImage,
    SubmissionInProgress,
    UploadError,
    ValidationError,
)
from portfolio.client.remote import RemoteDataClient, Resource
from portfolio.client.validation import validate_artwork
from portfolio.models.painting import Availability, PaintingBase

logger = logging.getLogger(__name__)

MAX_FILE_SIZE = 10 * 1024 * 1024  # 10 Mo


class ImageFile(BaseModel):
    filename: str
    content_type: str
    content: bytes

    @property
    def size(self) -> int:
        return len(self.content)

    @classmethod
    def from_path(cls, path) -> "ImageFile":
        path = Path(path)
        content_type, _ = mimetypes.guess_type(path.name)
        return cls(
            filename=path.name,
            content_type=content_type or "application/octet-stream",
            content=path.read_bytes(),
        )


class SubmissionStatus(str, Enum):
    IDLE = "idle"
    PENDING = "pending"
    SUCCESS = "success"
    ERROR = "error"


class Notification(BaseModel):
    """Message éphémère (toast) affiché à l'utilisateur."""
    title: str
    description: str
    variant: str = "default"


Notifier = Callable[[Notification], None]


def default_values() -> Dict[str, Any]:
    return {
        "title": "",
        "year": datetime.now().year,
        "medium": "",
        "size": "",
        "description": "",
        "availability": Availability.AVAILABLE.value,
        "tags": "",
        "featured": False,
    }


def check_image(file: ImageFile) -> None:
    """Lève FileTooLarge ou InvalidFileType si le fichier est refusé."""
    if file.size > MAX_FILE_SIZE:
        raise FileTooLarge(file.filename, file.size, MAX_FILE_SIZE)
    if not (file.content_type or "").startswith("image/"):
        raise InvalidFileType(file.filename, file.content_type)


def build_multipart(record: PaintingBase, image: Optional[ImageFile]) -> Tuple[Dict[str, str], Dict[str, Any]]:
    """
    Construit le corps multipart: l'image en binaire et tous les autres
    champs en texte. description et tags sont omis s'ils sont vides.
    """
    data = {
        "title": record.title,
        "year": str(record.year),
        "medium": record.medium,
        "size": record.size,
        "availability": record.availability.value,
        "featured": "true" if record.featured else "false",
    }
    if record.description:
        data["description"] = record.description
    if record.tags:
        data["tags"] = record.tags

    files = {}
    if image is not None:
        files["image"] = (image.filename, image.content, image.content_type)
    return data, files


class ArtworkUploadForm:
    def __init__(self, client: RemoteDataClient, notify: Optional[Notifier] = None):
        self.client = client
        self._notify_cb = notify
        self.values: Dict[str, Any] = default_values()
        self.selected_file: Optional[ImageFile] = None
        self.drag_over = False
        self.status = SubmissionStatus.IDLE
        self.field_errors: Dict[str, str] = {}
        self.last_error: Optional[str] = None

    @property
    def is_pending(self) -> bool:
        return self.status is SubmissionStatus.PENDING

    def _notify(self, title: str, description: str, variant: str = "default") -> None:
        if self._notify_cb is not None:
            self._notify_cb(Notification(title=title, description=description, variant=variant))

    # --- Fichier ---

    def select_file(self, file: ImageFile) -> None:
        try:
            check_image(file)
        except FileTooLarge:
            self._notify("File too large", "Please select an image smaller than 10MB.", "destructive")
            raise
        except InvalidFileType:
            self._notify("Invalid file type", "Please select an image file.", "destructive")
            raise
        self.selected_file = file
        logger.debug(f"Selected {file.filename} ({file.size} bytes)")

    def drag_enter(self) -> None:
        self.drag_over = True

    def drag_leave(self) -> None:
        self.drag_over = False

    def drop(self, files: Iterable[ImageFile]) -> None:
        self.drag_over = False
        files = list(files)
        if files:
            self.select_file(files[0])

    # --- Champs ---

    def update(self, **values) -> None:
        self.values.update(values)

    def reset(self) -> None:
        self.values = default_values()
        self.selected_file = None
        self.drag_over = False
        self.field_errors = {}
        self.last_error = None

    # --- Envoi ---

    async def submit(self, values: Optional[Dict[str, Any]] = None) -> dict:
        """
        Valide puis envoie l'œuvre. Un seul envoi à la fois par formulaire.
        Retourne l'œuvre créée renvoyée par l'API.
        """
        if self.is_pending:
            raise SubmissionInProgress()
        if values is not None:
            self.values.update(values)

        if self.selected_file is None:
            self._notify("Image required", "Please select an image file.", "destructive")
            raise MissingImage()

        try:
            record = validate_artwork(self.values)
        except ValidationError as exc:
            self.field_errors = exc.errors
            raise
        self.field_errors = {}

        data, files = build_multipart(record, self.selected_file)
        self.status = SubmissionStatus.PENDING
        self.last_error = None
        try:
            created = await self.client.mutate(Resource.ADMIN_PAINTINGS, data=data, files=files)
        except UploadError as exc:
            self.status = SubmissionStatus.ERROR
            self.last_error = exc.message
            logger.warning(f"Artwork upload failed: {exc.message}")
            self._notify("Upload failed", exc.message, "destructive")
            raise
        except BaseException:
            # annulation ou erreur inattendue: le formulaire redevient utilisable
            self.status = SubmissionStatus.ERROR
            raise

        self.reset()
        self.status = SubmissionStatus.SUCCESS
        self.client.invalidate(Resource.PAINTINGS)
        logger.info(f"Artwork uploaded: {record.title}")
        self._notify("Success!", "Artwork uploaded successfully.")
        return created
