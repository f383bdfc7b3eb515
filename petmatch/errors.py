"""
Errores de la API y su traducción a respuestas HTTP.

Todas las respuestas de error comparten la forma ``{"error": <mensaje>}``:

    ValidationError         -> 400 (faltan campos obligatorios)
    RequestValidationError  -> 400 (cuerpo que no es un objeto JSON, page no numérico...)
    StoreError              -> 400 (el datastore rechazó la operación)
    NotFoundError           -> 404 (sólo GET /pets/{id})
    Exception               -> 500 (mensaje genérico, traza completa en el log)
"""
import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class PetMatchError(Exception):
    """Base de los errores propios de la aplicación."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(PetMatchError):
    """Faltan campos obligatorios en el cuerpo de la petición."""


class NotFoundError(PetMatchError):
    """El registro pedido por id no existe."""


class StoreError(PetMatchError):
    """El datastore informó de un fallo (restricción, consulta mal formada, conexión)."""

    def __init__(self, message: str, code: Optional[str] = None):
        super().__init__(message)
        self.code = code

    def __str__(self) -> str:
        if self.code:
            return f"[{self.code}] {self.message}"
        return self.message


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def _describe(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        parts.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    return "; ".join(parts) or "Invalid request."


def register_exception_handlers(app: FastAPI) -> None:

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        logger.info("Validation error on %s %s: %s", request.method, request.url.path, exc.message)
        return _error(400, exc.message)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError):
        message = _describe(exc)
        logger.info("Malformed request on %s %s: %s", request.method, request.url.path, message)
        return _error(400, message)

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return _error(404, exc.message)

    @app.exception_handler(StoreError)
    async def handle_store_error(request: Request, exc: StoreError):
        # ya registrado por quien desenvolvió el resultado
        return _error(400, exc.message)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.error(
            "Unexpected error in %s %s: %s",
            request.method,
            request.url.path,
            exc,
            exc_info=exc,
        )
        return _error(500, "Internal server error")
