from fastapi import APIRouter, Depends, HTTPException, Request
from starlette.datastructures import UploadFile
from typing import List, Optional
import logging

from portfolio.client.upload import MAX_FILE_SIZE
from portfolio.client.validation import RULES, validate_artwork
from portfolio.crud import messages, paintings
from portfolio.models.contact import ContactMessage
from portfolio.models.painting import Painting
from portfolio.routes.auth_admin import require_admin_auth
from portfolio import storage

logger = logging.getLogger(__name__)
router = APIRouter(dependencies=[Depends(require_admin_auth)])


async def _read_form(request: Request):
    """Retourne (valeurs texte, fichier image éventuel) du formulaire multipart."""
    form = await request.form()
    values = {field: form.get(field) for field in RULES if form.get(field) is not None}
    image = form.get("image")
    if not isinstance(image, UploadFile) or not image.filename:
        image = None
    return values, image


async def _store_image(image: UploadFile, title: str) -> str:
    content_type = image.content_type or ""
    if not content_type.startswith("image/"):
        raise HTTPException(status_code=400, detail="Please select an image file.")
    content = await image.read()
    if len(content) > MAX_FILE_SIZE:
        raise HTTPException(status_code=400, detail="Please select an image smaller than 10MB.")
    return storage.save_image(content, image.filename, content_type, title)


@router.post("/paintings", response_model=Painting, status_code=201)
async def create_painting(request: Request):
    """
    Ajoute une œuvre (multipart: image + champs texte).
    """
    values, image = await _read_form(request)
    if image is None:
        raise HTTPException(status_code=400, detail="Image is required")
    record = validate_artwork(values)

    image_file = await _store_image(image, record.title)
    try:
        created_id = paintings.create_painting(record.model_dump(mode="json"), image_file)
    except Exception:
        storage.delete_image(image_file)
        raise
    created = paintings.get_painting_by_id(created_id)
    if not created:
        raise HTTPException(status_code=500, detail="Could not read back the created painting")

    logger.info(f"Painting created: {created_id} ({record.title})")
    return paintings.serialize_painting(created)


@router.put("/paintings/{painting_id}", response_model=Painting)
async def update_painting(painting_id: str, request: Request):
    existing = paintings.get_painting_by_id(painting_id)
    if not existing:
        raise HTTPException(status_code=404, detail="Painting not found")

    values, image = await _read_form(request)
    record = validate_artwork(values)
    update_data = record.model_dump(mode="json")

    old_image: Optional[str] = None
    new_image: Optional[str] = None
    if image is not None:
        new_image = await _store_image(image, record.title)
        update_data["image_file"] = new_image
        old_image = existing.get("image_file")

    try:
        updated = paintings.update_painting(painting_id, update_data)
    except Exception:
        storage.delete_image(new_image)
        raise
    if not updated:
        # supprimée entre-temps
        storage.delete_image(new_image)
        raise HTTPException(status_code=404, detail="Painting not found")
    if old_image:
        storage.delete_image(old_image)

    logger.info(f"Painting updated: {painting_id}")
    return paintings.serialize_painting(paintings.get_painting_by_id(painting_id))


@router.delete("/paintings/{painting_id}")
def delete_painting(painting_id: str):
    deleted = paintings.delete_painting(painting_id)
    if not deleted:
        raise HTTPException(status_code=404, detail="Painting not found")
    storage.delete_image(deleted.get("image_file"))
    logger.info(f"Painting deleted: {painting_id}")
    return {"message": "Painting deleted successfully"}


@router.get("/messages", response_model=List[ContactMessage])
def list_messages():
    """Messages du formulaire de contact, les plus récents en premier."""
    return [messages.serialize_message(m) for m in messages.get_messages()]
