from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from dotenv import load_dotenv
import logging
import os

from portfolio import storage
from portfolio.errors import register_exception_handlers
from portfolio.routes.admin import router as admin_router
from portfolio.routes.auth_admin import router as auth_router
from portfolio.routes.contact import router as contact_router
from portfolio.routes.paintings import router as paintings_router

# Configuration du logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

load_dotenv()

app = FastAPI(
    title="Artist Portfolio API",
    description="API du site portfolio: galerie publique, contact et back-office",
    version="1.0.0"
)

# Configuration CORS
allowed_origins_str = os.getenv("FRONTEND_URL", "http://localhost:5173")
allowed_origins = [origin.strip() for origin in allowed_origins_str.split(",")]

# Si on utilise "*" (wildcard), désactiver credentials
allow_credentials = "*" not in allowed_origins

app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=allow_credentials,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# Routes
app.include_router(auth_router, prefix="/api/admin", tags=["admin-auth"])
app.include_router(admin_router, prefix="/api/admin", tags=["admin"])
app.include_router(paintings_router, prefix="/api/paintings", tags=["paintings"])
app.include_router(contact_router, prefix="/api/contact", tags=["contact"])

# Images des œuvres
app.mount(
    storage.UPLOADS_ROUTE,
    StaticFiles(directory=str(storage.UPLOAD_DIR), check_dir=False),
    name="uploads",
)


@app.get("/api")
async def api_root():
    return {
        "message": "Artist Portfolio API",
        "status": "healthy",
        "endpoints": {
            "paintings": "/api/paintings",
            "contact": "/api/contact",
            "admin": "/api/admin"
        }
    }
