from fastapi import APIRouter
from portfolio.models.contact import ContactMessage, ContactMessageCreate
from portfolio.crud import messages
import logging

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("", response_model=ContactMessage, status_code=201)
def send_contact_message(payload: ContactMessageCreate):
    """Enregistre un message du formulaire de contact public."""
    created = messages.create_message(payload.model_dump())
    logger.info(f"New contact message from {payload.email}")
    return messages.serialize_message(created)
