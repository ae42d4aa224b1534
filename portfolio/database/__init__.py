from dotenv import load_dotenv
import logging
import os
from pymongo import MongoClient

load_dotenv()

logger = logging.getLogger(__name__)

MONGO_URI = os.getenv("MONGO_URI", "mongodb://localhost:27017/")
DB_NAME = os.getenv("MONGO_DB", "portfolio")

PAINTINGS_COLLECTION = "paintings"
MESSAGES_COLLECTION = "messages"

_client = None
_db = None


def get_database():
    """Retourne l'instance de la base MongoDB (connexion paresseuse)"""
    global _client, _db
    if _db is None:
        # pymongo ne se connecte réellement qu'à la première opération
        _client = MongoClient(MONGO_URI, serverSelectionTimeoutMS=5000)
        _db = _client[DB_NAME]
        logger.info(f"MongoDB client ready for database '{DB_NAME}'")
    return _db


def get_collection(name: str):
    return get_database()[name]
