"""Error types shared by services and the HTTP layer."""

from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from .utils.logger import get_app_logger


class RagChatError(Exception):
    """Base class for all application errors."""

    status_code = 500
    default_message = "An unexpected error occurred"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class NotFoundError(RagChatError):
    """Unknown chat or document id."""

    status_code = 404
    default_message = "Resource not found"


class InvalidRoleError(RagChatError):
    """Message role outside user/assistant/system."""

    status_code = 400
    default_message = "Invalid message role"


class ModelUnavailableError(RagChatError):
    """Model client call failed or timed out."""

    status_code = 503
    default_message = "Language model unavailable"


class IndexingFailureError(RagChatError):
    """Vector index rejected a chunk batch."""

    status_code = 502
    default_message = "Indexing failed"


class StorageFailureError(RagChatError):
    """Transactional write or read failed."""

    status_code = 500
    default_message = "Storage failure"


def register_exception_handlers(app: FastAPI) -> None:
    """
    Render RagChatError subclasses as JSON error responses.

    Args:
        app: FastAPI application
    """
    logger = get_app_logger()

    @app.exception_handler(RagChatError)
    async def handle_ragchat_error(request: Request, exc: RagChatError):
        if exc.status_code >= 500:
            logger.error(f"{exc.__class__.__name__} on {request.url.path}: {exc.message}")
        else:
            logger.info(f"{exc.__class__.__name__} on {request.url.path}: {exc.message}")
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})
