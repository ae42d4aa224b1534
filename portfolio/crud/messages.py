from typing import List, Optional
from datetime import datetime, timezone
from pymongo import DESCENDING
from portfolio.database import get_collection, MESSAGES_COLLECTION


def _collection():
    return get_collection(MESSAGES_COLLECTION)


def serialize_message(raw: dict) -> dict:
    return {
        "id": str(raw["_id"]),
        "name": raw["name"],
        "email": raw["email"],
        "subject": raw["subject"],
        "message": raw["message"],
        "createdAt": raw.get("created_at"),
    }


def get_messages(limit: Optional[int] = None) -> List[dict]:
    """
    Renvoie les messages de contact, les plus récents en premier.
    """
    cursor = _collection().find().sort([("created_at", DESCENDING), ("_id", DESCENDING)])
    if limit:
        cursor = cursor.limit(limit)
    return list(cursor)


def create_message(data: dict) -> dict:
    """
    Enregistre un message du formulaire de contact et le retourne.
    """
    data = dict(data)
    data["created_at"] = datetime.now(timezone.utc)
    result = _collection().insert_one(data)
    data["_id"] = result.inserted_id
    return data
