from .base import (AppError, DomainError, ErrorKind, InfrastructureError,
                   RateLimitedError, ServiceUnavailableError,
                   UnauthorizedError, UpstreamError, ValidationError)
from .http import handle_app_error, register_error_handler

__all__ = [
    "AppError",
    "DomainError",
    "ErrorKind",
    "InfrastructureError",
    "RateLimitedError",
    "ServiceUnavailableError",
    "UnauthorizedError",
    "UpstreamError",
    "ValidationError",
    "handle_app_error",
    "register_error_handler",
]
