# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import StrEnum
from http import HTTPStatus
from typing import Any, cast


class ErrorKind(StrEnum):
    VALIDATION = "ValidationError"
    UNAUTHORIZED = "Unauthorized"
    INVALID_CREDENTIALS = "InvalidCredentials"
    INVALID_PASSWORD = "InvalidPassword"
    NOT_FOUND = "NotFound"
    EMAIL_IN_USE = "EmailInUse"
    ALREADY_FAVORITED = "AlreadyFavorited"
    RATE_LIMITED = "RateLimited"
    UPSTREAM = "UpstreamError"
    SERVICE_UNAVAILABLE = "ServiceUnavailable"
    INTERNAL = "InternalError"

    @property
    def status(self) -> HTTPStatus:
        return _KIND_STATUS[self]


_KIND_STATUS: dict[ErrorKind, HTTPStatus] = {
    ErrorKind.VALIDATION: HTTPStatus.BAD_REQUEST,
    ErrorKind.UNAUTHORIZED: HTTPStatus.UNAUTHORIZED,
    ErrorKind.INVALID_CREDENTIALS: HTTPStatus.UNAUTHORIZED,
    ErrorKind.INVALID_PASSWORD: HTTPStatus.UNAUTHORIZED,
    ErrorKind.NOT_FOUND: HTTPStatus.NOT_FOUND,
    ErrorKind.EMAIL_IN_USE: HTTPStatus.CONFLICT,
    ErrorKind.ALREADY_FAVORITED: HTTPStatus.CONFLICT,
    ErrorKind.RATE_LIMITED: HTTPStatus.TOO_MANY_REQUESTS,
    ErrorKind.UPSTREAM: HTTPStatus.BAD_GATEWAY,
    ErrorKind.SERVICE_UNAVAILABLE: HTTPStatus.SERVICE_UNAVAILABLE,
    ErrorKind.INTERNAL: HTTPStatus.INTERNAL_SERVER_ERROR,
}


@dataclass(slots=True)
class AppError(Exception):
    kind: ErrorKind
    message: str
    status: HTTPStatus
    context: Mapping[str, Any] | None = None

    def __post_init__(self) -> None:
        Exception.__init__(self, f"{self.kind}: {self.message}")

    @property
    def code(self) -> str:
        return str(self.kind)

    def to_dict(self) -> dict[str, Any]:
        error: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.context:
            error.update(self.context)
        return {"error": error}


class DomainError(AppError):
    """Base for errors raised by use cases; subclasses set ``kind`` and ``message``."""

    kind = ErrorKind.INTERNAL
    message = "Something went wrong"

    def __init__(
        self,
        message: str | None = None,
        *,
        status: HTTPStatus | None = None,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        kind = cast(ErrorKind, type(self).kind)
        resolved_message = message or cast(str, type(self).message)
        super().__init__(
            kind=kind,
            message=resolved_message,
            status=status or kind.status,
            context=context,
        )


class InfrastructureError(AppError):
    def __init__(
        self,
        kind: ErrorKind = ErrorKind.INTERNAL,
        message: str = "Something went wrong",
        *,
        status: HTTPStatus | None = None,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        super().__init__(
            kind=kind, message=message, status=status or kind.status, context=context
        )


class ValidationError(AppError):
    def __init__(
        self,
        message: str = "Invalid input",
        *,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        super().__init__(
            kind=ErrorKind.VALIDATION,
            message=message,
            status=HTTPStatus.BAD_REQUEST,
            context=context,
        )


class UnauthorizedError(AppError):
    def __init__(self, message: str = "Authentication required") -> None:
        super().__init__(
            kind=ErrorKind.UNAUTHORIZED,
            message=message,
            status=HTTPStatus.UNAUTHORIZED,
        )


class RateLimitedError(AppError):
    def __init__(self, retry_after: float) -> None:
        super().__init__(
            kind=ErrorKind.RATE_LIMITED,
            message="Too many requests, slow down",
            status=HTTPStatus.TOO_MANY_REQUESTS,
            context={"retryAfter": round(retry_after, 1)},
        )


class UpstreamError(InfrastructureError):
    def __init__(
        self,
        message: str = "Upstream error",
        *,
        status: HTTPStatus | int | None = None,
        code: str | None = None,
    ) -> None:
        resolved = HTTPStatus(status) if status else HTTPStatus.BAD_GATEWAY
        context = {"upstreamCode": code} if code else None
        super().__init__(ErrorKind.UPSTREAM, message, status=resolved, context=context)


class ServiceUnavailableError(InfrastructureError):
    def __init__(self, message: str) -> None:
        super().__init__(ErrorKind.SERVICE_UNAVAILABLE, message)
