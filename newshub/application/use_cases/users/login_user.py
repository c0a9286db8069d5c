# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import timedelta

from newshub.domain.users.entities import User
from newshub.domain.users.exceptions import InvalidCredentialsError
from newshub.domain.users.repositories import PasswordHasher, SessionTokenRepository, UserRepository
from newshub.domain.users.rules import normalize_email


class LoginUserUseCase:
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

    def execute(self, email: str, password: str) -> tuple[User, str]:
        user = self._users.find_by_email(normalize_email(email))
        password_valid = user is not None and self._password_hasher.verify(
            password, user.password_hash
        )

        # Unknown email and wrong password must look the same to the caller.
        if not password_valid or user is None:
            raise InvalidCredentialsError()

        token = self._tokens.create(user.id, self._session_ttl)
        return user, token.token
