"""
Gestionnaires d'erreurs globaux: toutes les réponses d'erreur portent un
champ `message` lisible par le front (et `detail` pour FastAPI).
"""
import logging
import traceback

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from portfolio.client.errors import ValidationError

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "An unexpected error occurred. Please try again later."


def register_exception_handlers(app: FastAPI) -> None:

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        message = exc.detail if isinstance(exc.detail, str) else "Request failed"
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.detail, "message": message},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=422,
            content={"detail": jsonable_encoder(exc.errors()), "message": "Invalid request"},
        )

    @app.exception_handler(ValidationError)
    async def artwork_validation_handler(request: Request, exc: ValidationError):
        logger.info(f"Rejected artwork on {request.url.path}: {exc.errors}")
        return JSONResponse(
            status_code=400,
            content={"detail": str(exc), "message": str(exc), "errors": exc.errors},
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.error(
            f"Unhandled exception on {request.method} {request.url.path}:\n"
            f"{traceback.format_exc()}"
        )
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal Server Error", "message": GENERIC_ERROR_MESSAGE},
        )
