# api/errors.py
"""
Error taxonomy for the folder API and the centralized handler for anything
unexpected.

The four expected failures are HTTPException subclasses so FastAPI renders
them as {"detail": ...} with the right status. Everything else reaches
report_exception, which logs it and answers a generic 500.
"""

from fastapi import HTTPException, Request, status
from fastapi.responses import JSONResponse

from api.logger import get_request_logger

logger = get_request_logger(__name__)


class Unauthenticated(HTTPException):
    def __init__(self, detail: str = "Unauthorized: User not authenticated."):
        super().__init__(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)


class NotFound(HTTPException):
    def __init__(self, detail: str = "Not found."):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class Forbidden(HTTPException):
    def __init__(self, detail: str = "Forbidden."):
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


class InvalidReference(HTTPException):
    def __init__(self, detail: str = "Invalid reference."):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


async def report_exception(request: Request, exc: Exception) -> JSONResponse:
    """Log an unexpected failure and hide its internals from the caller."""
    logger.error(
        f"Unhandled error on {request.method} {request.url.path}: {exc}",
        exc_info=exc,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )
