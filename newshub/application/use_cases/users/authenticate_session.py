# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import UTC, datetime, timedelta

from newshub.domain.users.entities import AuthContext
from newshub.domain.users.repositories import SessionTokenRepository, UserRepository
from newshub.shared.errors import UnauthorizedError
from newshub.shared.logging import logger


class AuthenticateSessionUseCase:
    """Resolve a session token to the caller's identity, renewing its expiry."""

    def __init__(
        self,
        *,
        users: UserRepository,
        tokens: SessionTokenRepository,
        session_ttl: timedelta,
    ) -> None:
        self._users = users
        self._tokens = tokens
        self._session_ttl = session_ttl

    def execute(self, token: str | None) -> AuthContext:
        if not token:
            raise UnauthorizedError()

        session = self._tokens.find(token)
        if session is None:
            raise UnauthorizedError("Invalid session")

        now = datetime.now(UTC)
        if session.expires_at <= now:
            self._tokens.revoke(token)
            raise UnauthorizedError("Session expired")

        user = self._users.find_by_id(session.user_id)
        if user is None:
            logger.warning(f"auth.session: purging session of missing user_id={session.user_id}")
            self._tokens.revoke(token)
            raise UnauthorizedError("Invalid session")

        self._tokens.renew(token, now + self._session_ttl)
        return AuthContext.for_user(user)
