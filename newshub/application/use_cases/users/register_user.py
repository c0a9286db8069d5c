# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import UTC, datetime, timedelta

from newshub.domain.users.entities import User
from newshub.domain.users.exceptions import EmailInUseError
from newshub.domain.users.repositories import PasswordHasher, SessionTokenRepository, UserRepository
from newshub.domain.users.rules import normalize_email


class RegisterUserUseCase:
    def __init__(
        self,
        *,
        users: UserRepository,
        tokens: SessionTokenRepository,
        password_hasher: PasswordHasher,
        session_ttl: timedelta,
    ) -> None:
        self._users = users
        self._tokens = tokens
        self._password_hasher = password_hasher
        self._session_ttl = session_ttl

    def execute(self, name: str, email: str, password: str) -> tuple[User, str]:
        email = normalize_email(email)
        if self._users.find_by_email(email):
            raise EmailInUseError()
        now = datetime.now(UTC)
        hashed = self._password_hasher.hash(password)
        user = User(
            id="",
            name=name.strip(),
            email=email,
            password_hash=hashed,
            created_at=now,
            updated_at=now,
        )
        persisted = self._users.add(user)
        token = self._tokens.create(persisted.id, self._session_ttl)
        return persisted, token.token
