# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from newshub.shared.errors.base import DomainError, ErrorKind


class EmailInUseError(DomainError):
    kind = ErrorKind.EMAIL_IN_USE
    message = "A user with this email already exists"


class InvalidCredentialsError(DomainError):
    kind = ErrorKind.INVALID_CREDENTIALS
    message = "Invalid email or password"


class InvalidPasswordError(DomainError):
    kind = ErrorKind.INVALID_PASSWORD
    message = "Current password is incorrect"


class UserNotFoundError(DomainError):
    kind = ErrorKind.NOT_FOUND
    message = "User not found"
