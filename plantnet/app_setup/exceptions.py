"""
Gestionnaires d’exceptions.
- AppError (taxonomie plantnet.errors) -> code HTTP porté par l'erreur.
- HTTPException (ex: 429 du rate limiter) et erreurs de validation FastAPI (-> 400).
- toute autre exception -> 500 "Internal server error" (journalisée avec la trace).
Toutes les réponses d'erreur utilisent l'enveloppe {"status": false, "message", "error"?}.
"""
import logging
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from plantnet.errors import AppError
from plantnet.utils.responses import failure

logger = logging.getLogger(__name__)

def register_exception_handlers(app: FastAPI) -> None:
    """
    Enregistre les handlers d'erreurs au bord des routes.
    - 5xx: journalisées (logger.error) avec le détail d'origine
    - aucune erreur n'est rejouée; chaque requête échoue indépendamment
    """
    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s (%s)", request.method, request.url.path, exc.message, exc.error)
        return failure(exc.message, exc.status_code, exc.error)

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        return failure(str(exc.detail), exc.status_code)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return failure("Invalid request data", 400, exc.errors())

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception("%s %s unhandled error", request.method, request.url.path)
        return failure("Internal server error", 500)
