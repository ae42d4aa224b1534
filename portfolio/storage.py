"""
Stockage des images d'œuvres sur disque, servies sous /uploads.
"""
import logging
import mimetypes
import os
import uuid
from pathlib import Path

from dotenv import load_dotenv

from portfolio.utils.string_utils import slugify

load_dotenv()

logger = logging.getLogger(__name__)

UPLOAD_DIR = Path(os.getenv("UPLOAD_DIR", "uploads"))
PUBLIC_BASE_URL = os.getenv("PUBLIC_BASE_URL", "")
UPLOADS_ROUTE = "/uploads"


def get_upload_dir() -> Path:
    UPLOAD_DIR.mkdir(parents=True, exist_ok=True)
    return UPLOAD_DIR


def image_url(name: str) -> str:
    return f"{PUBLIC_BASE_URL.rstrip('/')}{UPLOADS_ROUTE}/{name}"


def save_image(content: bytes, filename: str, content_type: str, title: str = "") -> str:
    """
    Écrit l'image et retourne le nom de fichier stocké.
    """
    ext = Path(filename or "").suffix.lower() or mimetypes.guess_extension(content_type or "") or ""
    name = f"{slugify(title) or 'artwork'}-{uuid.uuid4().hex[:12]}{ext}"
    (get_upload_dir() / name).write_bytes(content)
    logger.info(f"Stored image {name} ({len(content)} bytes)")
    return name


def delete_image(name: str) -> None:
    if not name:
        return
    path = get_upload_dir() / Path(name).name
    if path.exists():
        path.unlink()
        logger.info(f"Deleted image {name}")
