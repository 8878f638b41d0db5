"""
Exception to HTTP error mapping shared by the routers
"""
import logging

from fastapi import HTTPException

from app.domain.errors import NotFoundError, PermissionDeniedError

logger = logging.getLogger(__name__)


def to_http_exception(error: Exception, action: str) -> HTTPException:
    """
    NotFoundError -> 404, PermissionDeniedError -> 403, ValueError -> 400,
    anything else -> 500 "Error <action>: ..."
    """
    if isinstance(error, HTTPException):
        return error
    if isinstance(error, NotFoundError):
        return HTTPException(status_code=404, detail=str(error))
    if isinstance(error, PermissionDeniedError):
        return HTTPException(status_code=403, detail=str(error) or "Access denied")
    if isinstance(error, ValueError):
        return HTTPException(status_code=400, detail=str(error))

    logger.error(f"Error {action}: {error}", exc_info=True)
    return HTTPException(status_code=500, detail=f"Error {action}: {str(error)}")
