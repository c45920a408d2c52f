# app/core/exceptions.py
import functools
import logging
from http import HTTPStatus

from fastapi import HTTPException, status

logger = logging.getLogger(__name__)


class ValidationFailure(HTTPException):
    def __init__(self, detail: str = "Invalid request"):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class Unauthorized(HTTPException):
    def __init__(self, detail: str = "Not authenticated"):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
        )


class Forbidden(HTTPException):
    def __init__(self, detail: str = "Forbidden"):
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


class NotFound(HTTPException):
    def __init__(self, detail: str = "Not found"):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class InternalError(HTTPException):
    def __init__(self, detail: str = "Internal server error"):
        super().__init__(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=detail)


def translate_errors(message: str):
    """
    Wrap a service operation so that anything other than a domain error
    is logged and surfaces as InternalError(message).
    """

    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except HTTPException:
                # domain errors (and already translated ones) pass through
                raise
            except Exception:
                logger.exception("%s (%s)", message, func.__qualname__)
                raise InternalError(message)

        return wrapper

    return decorator


def error_body(status_code: int, message: str) -> dict:
    try:
        reason = HTTPStatus(status_code).phrase
    except ValueError:
        reason = "Error"
    return {"status": status_code, "error": reason, "message": message}
