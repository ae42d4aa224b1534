from typing import List, Optional
from datetime import datetime, timezone
from bson.objectid import ObjectId
from bson.errors import InvalidId
from pymongo import DESCENDING
from portfolio.database import get_collection, PAINTINGS_COLLECTION
from portfolio.storage import image_url


def _collection():
    return get_collection(PAINTINGS_COLLECTION)


def _object_id(painting_id: str) -> Optional[ObjectId]:
    try:
        return ObjectId(painting_id)
    except (InvalidId, TypeError):
        return None


def serialize_painting(raw: dict) -> dict:
    """
    Convertit un document MongoDB au format de l'API (id en chaîne,
    clés camelCase pour l'image et la date).
    """
    return {
        "id": str(raw["_id"]),
        "title": raw["title"],
        "year": raw["year"],
        "medium": raw["medium"],
        "size": raw["size"],
        "description": raw.get("description"),
        "availability": raw.get("availability", "available"),
        "tags": raw.get("tags"),
        "featured": raw.get("featured", False),
        "imageUrl": image_url(raw["image_file"]),
        "createdAt": raw.get("created_at"),
    }


def get_all_paintings(featured: Optional[bool] = None) -> List[dict]:
    """
    Renvoie toutes les œuvres, les plus récentes en premier.
    """
    query = {} if featured is None else {"featured": featured}
    cursor = _collection().find(query).sort([("created_at", DESCENDING), ("_id", DESCENDING)])
    return list(cursor)


def get_painting_by_id(painting_id: str) -> Optional[dict]:
    oid = _object_id(painting_id)
    if oid is None:
        return None
    return _collection().find_one({"_id": oid})


def create_painting(data: dict, image_file: str) -> str:
    """
    Insère une nouvelle œuvre. `image_file` est obligatoire: une œuvre
    n'existe jamais sans image.
    Retourne l'_id de la nouvelle entrée sous forme de chaîne.
    """
    if not image_file:
        raise ValueError("A painting cannot be stored without an image")
    data = dict(data)
    data.pop("_id", None)
    data["image_file"] = image_file
    data["created_at"] = datetime.now(timezone.utc)
    result = _collection().insert_one(data)
    return str(result.inserted_id)


def update_painting(painting_id: str, update_data: dict) -> bool:
    """
    Met à jour l'œuvre au _id donné.
    Retourne True si l'œuvre existe (même si rien n'a changé).
    """
    oid = _object_id(painting_id)
    if oid is None:
        return False
    update_data = dict(update_data)
    update_data.pop("_id", None)
    update_data.pop("created_at", None)
    result = _collection().update_one({"_id": oid}, {"$set": update_data})
    return result.matched_count > 0


def delete_painting(painting_id: str) -> Optional[dict]:
    """
    Supprime l'œuvre et retourne le document supprimé (None si absent).
    """
    oid = _object_id(painting_id)
    if oid is None:
        return None
    return _collection().find_one_and_delete({"_id": oid})
