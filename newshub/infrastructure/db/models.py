# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

import itertools
import secrets
import threading
import time
from datetime import UTC, datetime

from sqlalchemy import DateTime, ForeignKey, Index, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from newshub.infrastructure.db.session import Base


_PROCESS_TAG = secrets.token_hex(5)
_COUNTER = itertools.count()
_COUNTER_LOCK = threading.Lock()


def new_id() -> str:
    """ObjectId-style id: 4 bytes of epoch seconds, 5 bytes per process, 3 bytes of counter.

    Ids created by one process sort in creation order, so they double as an
    insertion-order tie-break.
    """
    with _COUNTER_LOCK:
        seq = next(_COUNTER) & 0xFFFFFF
    return f"{int(time.time()):08x}{_PROCESS_TAG}{seq:06x}"


def utcnow() -> datetime:
    return datetime.now(UTC)


class User(Base):
    __tablename__ = "users"
    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String(120))
    email: Mapped[str] = mapped_column(String(254), unique=True, index=True)
    password_hash: Mapped[str] = mapped_column(String(256))
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow
    )
    sessions: Mapped[list["SessionToken"]] = relationship(
        "SessionToken", cascade="all,delete", passive_deletes=True
    )
    favorites: Mapped[list["Favorite"]] = relationship(
        "Favorite", cascade="all,delete", passive_deletes=True
    )


class SessionToken(Base):
    __tablename__ = "sessions"
    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True)
    token: Mapped[str] = mapped_column(String(128), unique=True, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), index=True)


class Favorite(Base):
    __tablename__ = "favorites"
    __table_args__ = (
        UniqueConstraint("user_id", "url", name="u_favorite_user_url"),
        Index("ix_favorite_user_published", "user_id", "published_at"),
        Index("ix_favorite_user_added", "user_id", "added_at"),
    )
    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_id)
    user_id: Mapped[str] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True)
    url: Mapped[str] = mapped_column(String(2048))
    title: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    source: Mapped[str | None] = mapped_column(String(256), nullable=True)
    url_to_image: Mapped[str | None] = mapped_column(String(2048), nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    content: Mapped[str | None] = mapped_column(Text, nullable=True)
    language: Mapped[str | None] = mapped_column(String(16), nullable=True, index=True)
    published_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    added_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)


def as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; everything is stored in UTC.
    return value if value.tzinfo else value.replace(tzinfo=UTC)
