"""
Taxonomie d'erreurs de l'application.

Chaque erreur porte son code HTTP (status_code); le handler enregistré dans
plantnet.app_setup.exceptions la convertit en enveloppe JSON
{"status": false, "message": ..., "error": ...}.
"""
from typing import Any, Optional


class AppError(Exception):
    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: Optional[str] = None, error: Any = None):
        self.message = message or self.default_message
        self.error = error
        super().__init__(self.message)


class ValidationError(AppError):
    status_code = 400
    default_message = "Invalid request data"


class InvalidPrice(ValidationError):
    default_message = "Invalid price"


class PaymentIncomplete(AppError):
    status_code = 400
    default_message = "Payment not completed"


class Unauthorized(AppError):
    status_code = 401
    default_message = "Unauthorized Access!"


class Forbidden(AppError):
    status_code = 403
    default_message = "Forbidden Access!"


class NotFound(AppError):
    status_code = 404
    default_message = "Not found"


class InvalidIdentifier(NotFound):
    # identifiant mal formé: introuvable par définition, mais 400 côté HTTP
    status_code = 400
    default_message = "Invalid id"


class Conflict(AppError):
    status_code = 409
    default_message = "Order already exists"


class InsufficientStock(AppError):
    status_code = 409
    default_message = "Insufficient stock"


class GatewayError(AppError):
    status_code = 500
    default_message = "Payment gateway error"


class StoreError(AppError):
    status_code = 500
    default_message = "Database error"
