"""
Application errors and the handlers that turn them into {"error": ...} bodies.
"""

from typing import Any, Dict, List, Optional
import logging

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class ListShareError(Exception):
    """Base error. Every subclass maps to one HTTP status."""

    status_code: int = 500

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"error": self.message}
        if self.details:
            body["details"] = self.details
        return body


class NotFound(ListShareError):
    """Entity missing, or the path's parent chain does not match."""

    status_code = 404


class ValidationError(ListShareError):
    """Missing or empty required field, malformed id or position."""

    status_code = 400


class Unauthorized(ListShareError):
    """No usable credential (session or group password) was presented."""

    status_code = 401


class Forbidden(ListShareError):
    """Caller is identified but lacks membership, ownership or email match."""

    status_code = 403


class AlreadyAccepted(ListShareError):
    status_code = 409

    def __init__(self, group_id: Optional[str] = None):
        super().__init__(
            "This invite has already been accepted.",
            details={"group_id": group_id} if group_id else None,
        )


class StoreError(ListShareError):
    """The Supabase call itself failed."""

    status_code = 502


class PartialBatchFailure(ListShareError):
    status_code = 500

    def __init__(self, message: str, failed_ids: List[str], rolled_back: bool):
        super().__init__(message, details={"failed_ids": failed_ids, "rolled_back": rolled_back})
        self.failed_ids = failed_ids
        self.rolled_back = rolled_back


# =============================================================================
# Exception Handlers
# =============================================================================

async def listshare_exception_handler(request: Request, exc: ListShareError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Collapse pydantic's error list into a single readable message."""
    messages = []
    for err in exc.errors():
        loc = ".".join(str(part) for part in err.get("loc", ()) if part != "body")
        messages.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    return JSONResponse(
        status_code=400,
        content={"error": "; ".join(messages) or "Invalid request"},
    )
