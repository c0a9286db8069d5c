# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Protocol

from .entities import SessionToken, User


class UserRepository(Protocol):
    def find_by_email(self, email: str) -> User | None: ...
    def find_by_id(self, user_id: str) -> User | None: ...
    def add(self, user: User) -> User: ...
    def update(
        self,
        user_id: str,
        *,
        name: str | None = None,
        email: str | None = None,
        password_hash: str | None = None,
    ) -> User | None: ...


class SessionTokenRepository(Protocol):
    def create(self, user_id: str, ttl: timedelta) -> SessionToken: ...
    def find(self, token: str) -> SessionToken | None: ...
    def renew(self, token: str, expires_at: datetime) -> None: ...
    def revoke(self, token: str) -> None: ...


class PasswordHasher(Protocol):
    def hash(self, password: str) -> str: ...
    def verify(self, password: str, hashed: str) -> bool: ...
