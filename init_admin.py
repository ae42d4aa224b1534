#!/usr/bin/env python3
"""
Script d'initialisation: vérifie la configuration admin, crée les index
MongoDB et le dossier d'upload des images.
"""
import sys

from dotenv import load_dotenv
from pymongo import DESCENDING

# Charger les variables d'environnement avant les modules du projet
load_dotenv()

from portfolio.database import get_database, PAINTINGS_COLLECTION, MESSAGES_COLLECTION
from portfolio.routes import auth_admin
from portfolio import storage


def init_admin():
    """Prépare la base et signale une configuration admin incomplète"""
    ok = True

    if not auth_admin.ADMIN_PASSWORD:
        print("❌ ADMIN_PASSWORD n'est pas défini: la connexion admin est désactivée")
        ok = False
    if auth_admin.SECRET_KEY == "change-this-secret-in-production":
        print("⚠️ SECRET_KEY utilise la valeur par défaut, à changer en production")

    try:
        db = get_database()
        db[PAINTINGS_COLLECTION].create_index([("created_at", DESCENDING)])
        db[MESSAGES_COLLECTION].create_index([("created_at", DESCENDING)])
        print(f"✅ Index créés sur '{db.name}'")
    except Exception as e:
        print(f"❌ Impossible de préparer MongoDB: {e}")
        ok = False

    upload_dir = storage.get_upload_dir()
    print(f"✅ Dossier d'upload: {upload_dir.resolve()}")
    print(f"👤 Admin: {auth_admin.ADMIN_USERNAME}")
    return ok


if __name__ == "__main__":
    sys.exit(0 if init_admin() else 1)
