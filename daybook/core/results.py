"""Tagged results returned by the store layer.

Store functions never raise for expected outcomes such as a missing row or a
name collision. They return a :class:`Result` carrying either the value or an
:class:`ErrorKind`, and the routers hand it to ``core.errors.unwrap`` which is
the only place that turns a failure into an HTTP response.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

T = TypeVar("T")


class ErrorKind(str, Enum):
    INVALID_INPUT = "invalid_input"
    UNAUTHENTICATED = "unauthenticated"
    INVALID_CREDENTIALS = "invalid_credentials"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"
    DUPLICATE_IDENTIFIER = "duplicate_identifier"
    DUPLICATE_NAME = "duplicate_name"
    INTERNAL_FAILURE = "internal_failure"


@dataclass(frozen=True)
class Result(Generic[T]):
    value: T | None = None
    error: ErrorKind | None = None
    message: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: T | None = None) -> "Result[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: ErrorKind, message: str | None = None) -> "Result[T]":
        return cls(error=error, message=message)


__all__ = ["ErrorKind", "Result"]
