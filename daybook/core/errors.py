from __future__ import annotations

import logging
from http import HTTPStatus
from typing import Any, TypeVar

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette import status
from starlette.exceptions import HTTPException as StarletteHTTPException

from .results import ErrorKind, Result

T = TypeVar("T")

logger = logging.getLogger("daybook.errors")

STATUS_BY_KIND: dict[ErrorKind, int] = {
    ErrorKind.INVALID_INPUT: status.HTTP_400_BAD_REQUEST,
    ErrorKind.UNAUTHENTICATED: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.INVALID_CREDENTIALS: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.FORBIDDEN: status.HTTP_403_FORBIDDEN,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.DUPLICATE_IDENTIFIER: status.HTTP_409_CONFLICT,
    ErrorKind.DUPLICATE_NAME: status.HTTP_409_CONFLICT,
    ErrorKind.INTERNAL_FAILURE: status.HTTP_500_INTERNAL_SERVER_ERROR,
}

DEFAULT_MESSAGES: dict[ErrorKind, str] = {
    ErrorKind.INVALID_INPUT: "Please check your information and try again.",
    ErrorKind.UNAUTHENTICATED: "Please log in to continue.",
    ErrorKind.INVALID_CREDENTIALS: "Invalid username or password.",
    ErrorKind.FORBIDDEN: "Access denied.",
    ErrorKind.NOT_FOUND: "Not found.",
    ErrorKind.DUPLICATE_IDENTIFIER: "This username or email is already in use.",
    ErrorKind.DUPLICATE_NAME: "This name already exists.",
    ErrorKind.INTERNAL_FAILURE: "Something went wrong. Please try again later.",
}


class ErrorEnvelope(JSONResponse):
    def __init__(
        self,
        *,
        status_code: int,
        code: str,
        message: str,
        details: Any | None = None,
        headers: dict[str, str] | None = None,
    ) -> None:
        payload: dict[str, Any] = {"code": code, "message": message}
        if details is not None:
            payload["details"] = details
        super().__init__(payload, status_code=status_code, headers=headers)


class OperationFailed(Exception):
    """Carries a failed :class:`Result` up to the exception handler."""

    def __init__(self, kind: ErrorKind, message: str | None = None) -> None:
        self.kind = kind
        self.message = message or DEFAULT_MESSAGES[kind]
        super().__init__(self.message)


def unwrap(result: Result[T]) -> T:
    if result.ok:
        return result.value  # type: ignore[return-value]
    raise OperationFailed(result.error, result.message)  # type: ignore[arg-type]


def envelope_for(kind: ErrorKind, message: str | None = None) -> ErrorEnvelope:
    return ErrorEnvelope(
        status_code=STATUS_BY_KIND[kind],
        code=kind.value,
        message=message or DEFAULT_MESSAGES[kind],
    )


async def operation_failed_handler(request: Request, exc: OperationFailed):
    return envelope_for(exc.kind, exc.message)


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    detail = exc.detail
    if isinstance(detail, str):
        message = detail
    else:
        try:
            message = HTTPStatus(exc.status_code).phrase
        except ValueError:
            message = "Error"
    details = detail if isinstance(detail, dict) else None
    return ErrorEnvelope(
        status_code=exc.status_code,
        code="http_error",
        message=message,
        details=details,
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return ErrorEnvelope(
        status_code=STATUS_BY_KIND[ErrorKind.INVALID_INPUT],
        code=ErrorKind.INVALID_INPUT.value,
        message=DEFAULT_MESSAGES[ErrorKind.INVALID_INPUT],
        details={"errors": _jsonable_errors(exc.errors())},
    )


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(
        "request.failed",
        exc_info=exc,
        extra={
            "extra_data": {
                "method": request.method,
                "path": request.url.path,
                "principal": getattr(request.state, "principal", None),
            }
        },
    )
    return envelope_for(ErrorKind.INTERNAL_FAILURE)


def _jsonable_errors(errors: Any) -> list[dict[str, Any]]:
    cleaned: list[dict[str, Any]] = []
    for error in errors or []:
        item = {key: value for key, value in dict(error).items() if key in {"loc", "msg", "type"}}
        item["loc"] = [str(part) for part in item.get("loc", ())]
        cleaned.append(item)
    return cleaned


__all__ = [
    "ErrorEnvelope",
    "OperationFailed",
    "STATUS_BY_KIND",
    "envelope_for",
    "http_exception_handler",
    "operation_failed_handler",
    "unhandled_exception_handler",
    "unwrap",
    "validation_exception_handler",
]
