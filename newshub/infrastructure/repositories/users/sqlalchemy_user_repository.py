# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import secrets
from datetime import UTC, datetime, timedelta

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError

from newshub.domain.users.entities import SessionToken as DomainSessionToken
from newshub.domain.users.entities import User as DomainUser
from newshub.domain.users.exceptions import EmailInUseError
from newshub.domain.users.repositories import SessionTokenRepository, UserRepository
from newshub.infrastructure.db import Database
from newshub.infrastructure.db.models import SessionToken, User, as_utc, new_id
from newshub.shared.logging import logger


def _to_domain(row: User) -> DomainUser:
    return DomainUser(
        id=row.id,
        name=row.name,
        email=row.email,
        password_hash=row.password_hash,
        created_at=as_utc(row.created_at),
        updated_at=as_utc(row.updated_at),
    )


class SqlAlchemyUserRepository(UserRepository):
    def __init__(self, db: Database) -> None:
        self._db = db

    def find_by_email(self, email: str) -> DomainUser | None:
        with self._db.session_scope() as session:
            row = session.scalars(select(User).where(User.email == email)).first()
            return _to_domain(row) if row else None

    def find_by_id(self, user_id: str) -> DomainUser | None:
        with self._db.session_scope() as session:
            row = session.get(User, user_id)
            return _to_domain(row) if row else None

    def add(self, user: DomainUser) -> DomainUser:
        try:
            with self._db.session_scope() as session:
                row = User(
                    id=user.id or new_id(),
                    name=user.name,
                    email=user.email,
                    password_hash=user.password_hash,
                    created_at=user.created_at,
                    updated_at=user.updated_at,
                )
                session.add(row)
                session.flush()
                return _to_domain(row)
        except IntegrityError as exc:
            # lost a race against a concurrent registration with the same email
            logger.info("users.add: unique email violated")
            raise EmailInUseError() from exc

    def update(
        self,
        user_id: str,
        *,
        name: str | None = None,
        email: str | None = None,
        password_hash: str | None = None,
    ) -> DomainUser | None:
        try:
            with self._db.session_scope() as session:
                row = session.get(User, user_id)
                if row is None:
                    return None
                if name is not None:
                    row.name = name
                if email is not None:
                    row.email = email
                if password_hash is not None:
                    row.password_hash = password_hash
                row.updated_at = datetime.now(UTC)
                session.flush()
                return _to_domain(row)
        except IntegrityError as exc:
            logger.info(f"users.update: unique email violated user_id={user_id}")
            raise EmailInUseError() from exc


class SqlAlchemySessionTokenRepository(SessionTokenRepository):
    def __init__(self, db: Database) -> None:
        self._db = db

    def create(self, user_id: str, ttl: timedelta) -> DomainSessionToken:
        with self._db.session_scope() as session:
            token_value = secrets.token_urlsafe(48)
            expires_at = datetime.now(UTC) + ttl
            session.add(SessionToken(user_id=user_id, token=token_value, expires_at=expires_at))
            logger.info(f"sessions.create: user_id={user_id} exp={expires_at.isoformat()}")
            return DomainSessionToken(user_id=user_id, token=token_value, expires_at=expires_at)

    def find(self, token: str) -> DomainSessionToken | None:
        with self._db.session_scope() as session:
            row = session.scalars(select(SessionToken).where(SessionToken.token == token)).first()
            if not row:
                return None
            return DomainSessionToken(
                user_id=row.user_id, token=row.token, expires_at=as_utc(row.expires_at)
            )

    def renew(self, token: str, expires_at: datetime) -> None:
        with self._db.session_scope() as session:
            session.execute(
                update(SessionToken)
                .where(SessionToken.token == token)
                .values(expires_at=expires_at)
            )

    def revoke(self, token: str) -> None:
        with self._db.session_scope() as session:
            session.execute(delete(SessionToken).where(SessionToken.token == token))

    def purge_expired(self) -> int:
        with self._db.session_scope() as session:
            result = session.execute(
                delete(SessionToken).where(SessionToken.expires_at <= datetime.now(UTC))
            )
            return result.rowcount or 0
