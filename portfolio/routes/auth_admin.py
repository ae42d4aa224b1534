from fastapi import APIRouter, Request, Response, HTTPException, Depends
from pydantic import BaseModel
from dotenv import load_dotenv
import os
import hmac
import hashlib
import base64
import json
import logging
from datetime import datetime, timedelta, timezone

load_dotenv()

logger = logging.getLogger(__name__)
router = APIRouter()

# Admin unique défini par variables d'environnement
ADMIN_USERNAME = os.getenv("ADMIN_USERNAME", "admin")
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD")
SECRET_KEY = os.getenv("SECRET_KEY", "change-this-secret-in-production")
SESSION_DURATION_HOURS = int(os.getenv("SESSION_DURATION_HOURS", "2"))
COOKIE_NAME = "auth_token"


def authenticate_admin(username: str, password: str) -> bool:
    """Vérifier les identifiants admin"""
    if not ADMIN_PASSWORD:
        logger.error("ADMIN_PASSWORD is not configured, admin login disabled")
        return False
    return hmac.compare_digest(username, ADMIN_USERNAME) and hmac.compare_digest(password, ADMIN_PASSWORD)


def _b64encode(raw: bytes) -> str:
    return base64.urlsafe_b64encode(raw).decode().rstrip('=')


def _sign(payload_b64: str) -> str:
    signature = hmac.new(SECRET_KEY.encode(), payload_b64.encode(), hashlib.sha256).digest()
    return _b64encode(signature)


def create_signed_cookie() -> str:
    """Cookie signé 'payload.signature' contenant seulement l'expiration (timestamp UTC)"""
    expiry = datetime.now(timezone.utc) + timedelta(hours=SESSION_DURATION_HOURS)
    payload_json = json.dumps({"exp": int(expiry.timestamp())}, separators=(',', ':'))
    payload_b64 = _b64encode(payload_json.encode())
    return f"{payload_b64}.{_sign(payload_b64)}"


def verify_signed_cookie(cookie_value: str) -> bool:
    """Vérifier la signature et l'expiration d'un cookie signé"""
    if not cookie_value:
        return False

    parts = cookie_value.split('.')
    if len(parts) != 2:
        return False
    payload_b64, signature_b64 = parts

    if not hmac.compare_digest(signature_b64, _sign(payload_b64)):
        return False

    try:
        padded = payload_b64 + '=' * (-len(payload_b64) % 4)
        payload = json.loads(base64.urlsafe_b64decode(padded).decode())
        expiry_timestamp = int(payload["exp"])
    except (ValueError, KeyError, TypeError):
        return False

    return int(datetime.now(timezone.utc).timestamp()) <= expiry_timestamp


def get_cookie_settings(request: Request) -> dict:
    """Paramètres du cookie selon l'environnement (https => secure, cross-site autorisé)"""
    secure = request.url.scheme == "https"
    return {
        "httponly": True,
        "max_age": SESSION_DURATION_HOURS * 3600,
        "secure": secure,
        "samesite": "none" if secure else "lax",
    }


# === Dépendance FastAPI pour l'authentification ===

async def require_admin_auth(request: Request) -> bool:
    """
    Dépendance FastAPI pour vérifier l'authentification admin.
    À utiliser avec Depends() dans les routes protégées.
    """
    auth_token = request.cookies.get(COOKIE_NAME)
    if not auth_token:
        raise HTTPException(status_code=401, detail="Authentication required")

    if not verify_signed_cookie(auth_token):
        raise HTTPException(status_code=401, detail="Invalid or expired session")

    return True


# === Routes API ===

class LoginRequest(BaseModel):
    username: str
    password: str


@router.post("/login")
async def login(request: Request, response: Response, creds: LoginRequest):
    if not authenticate_admin(creds.username, creds.password):
        logger.warning(f"Failed admin login for '{creds.username}' from {request.client.host if request.client else 'unknown'}")
        raise HTTPException(status_code=401, detail="Invalid credentials")

    response.set_cookie(key=COOKIE_NAME, value=create_signed_cookie(), **get_cookie_settings(request))
    logger.info("Admin logged in")
    return {"success": True, "message": "Logged in"}


@router.get("/verify")
async def verify(response: Response, _: bool = Depends(require_admin_auth)):
    # Pas de mise en cache de l'état de session
    response.headers["Cache-Control"] = "no-store, no-cache, must-revalidate, private"
    response.headers["Pragma"] = "no-cache"
    return {"valid": True, "username": ADMIN_USERNAME}


@router.post("/logout")
async def logout(request: Request, response: Response):
    settings = get_cookie_settings(request)
    response.delete_cookie(
        key=COOKIE_NAME,
        httponly=True,
        secure=settings["secure"],
        samesite=settings["samesite"],
    )
    return {"message": "Logged out"}
