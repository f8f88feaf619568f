"""
Custom exceptions and error handlers for the web application.
"""
from typing import Optional

from fastapi import Request
from fastapi.responses import JSONResponse

from .logging_utils import get_logger

logger = get_logger(__name__)

SERVICE_BUSY_MESSAGE = (
    "The AI service is currently busy. Please try again in a few minutes."
)


class JobMatchError(Exception):
    """Base exception for errors that map onto a client-facing response."""

    status_code = 500

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class InvalidRequestError(JobMatchError):
    """Raised for a missing/unsupported upload or a malformed request body."""
    status_code = 400


class DocumentParsingError(JobMatchError):
    """Raised when text cannot be extracted from an uploaded document."""
    status_code = 400


class ResumeNotFoundError(JobMatchError):
    """Raised when no uploaded or parsed resume exists yet."""
    status_code = 404


class InvalidResumeDataError(JobMatchError):
    """Raised when a stored parsed resume has no usable text."""
    status_code = 400


class StorageError(JobMatchError):
    """Raised when a blob cannot be written or read."""
    status_code = 500


class AnalysisError(JobMatchError):
    """Raised when the AI analysis chain fails."""
    status_code = 500


class LLMResponseError(AnalysisError):
    """Raised when the provider never returned a decodable payload."""


class ServiceBusyError(JobMatchError):
    """Raised when the provider stayed at capacity through every retry."""
    status_code = 503

    def __init__(self, message: str = SERVICE_BUSY_MESSAGE):
        super().__init__(message)


class GeminiAPIError(Exception):
    """Non-2xx response from the Gemini REST API."""

    def __init__(self, status_code: int, message: str):
        super().__init__(message)
        self.status_code = status_code


async def jobmatch_exception_handler(request: Request, exc: JobMatchError) -> JSONResponse:
    """
    Handle service layer exceptions.

    Args:
        request: The FastAPI request.
        exc: The service exception.

    Returns:
        JSONResponse with the error message and the exception's status.
    """
    if exc.status_code >= 500:
        logger.error(f"Service error in {request.url.path}: {exc.message}")
    else:
        logger.warning(f"Rejected request to {request.url.path}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(f"Unexpected error in {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"error": "An unexpected error occurred"},
    )
