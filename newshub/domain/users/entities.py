# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(slots=True, frozen=True)
class User:

    id: str
    name: str
    email: str
    password_hash: str
    created_at: datetime
    updated_at: datetime


@dataclass(slots=True, frozen=True)
class SessionToken:

    user_id: str
    token: str
    expires_at: datetime


@dataclass(slots=True, frozen=True)
class AuthContext:
    """Identity of the caller, resolved from the session once per request."""

    user_id: str
    name: str
    email: str

    @classmethod
    def for_user(cls, user: User) -> AuthContext:
        return cls(user_id=user.id, name=user.name, email=user.email)
