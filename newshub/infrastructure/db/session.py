# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker
from sqlalchemy.pool import StaticPool

from newshub.shared.config.settings import DatabaseConfig
from newshub.shared.logging import logger


class Base(DeclarativeBase):
    pass


def _engine_kwargs(config: DatabaseConfig) -> dict[str, Any]:
    if not config.url.startswith("sqlite"):
        return {
            "pool_pre_ping": True,
            "pool_size": config.pool_size,
            "max_overflow": config.max_overflow,
            "pool_timeout": config.pool_timeout,
        }

    connect_args: dict[str, object] = {
        "check_same_thread": False,
        "timeout": int(config.pool_timeout),
    }
    if ":memory:" in config.url or config.url.rstrip("/") in ("sqlite:", "sqlite+pysqlite:"):
        # one shared connection, otherwise every checkout sees an empty database
        return {"connect_args": connect_args, "poolclass": StaticPool}
    return {"connect_args": connect_args}


class Database:
    """Engine plus session factory, built once per application."""

    def __init__(self, config: DatabaseConfig) -> None:
        self.engine: Engine = create_engine(config.url, echo=config.echo, **_engine_kwargs(config))
        self._session_factory = sessionmaker(
            bind=self.engine, autoflush=False, autocommit=False, expire_on_commit=False
        )

    @contextmanager
    def session_scope(self) -> Iterator[Session]:
        session = self._session_factory()
        logger.debug("db.session: opened session")
        try:
            yield session
            session.commit()
            logger.debug("db.session: committed session")
        except Exception:
            logger.debug("db.session: error, rolling back")
            session.rollback()
            raise
        finally:
            session.close()

    def init_db(self) -> None:
        from . import models  # noqa: F401  registers tables on Base.metadata

        Base.metadata.create_all(bind=self.engine)
        logger.info("Database schema ensured")

    def drop_all(self) -> None:
        Base.metadata.drop_all(bind=self.engine)

    def ping(self) -> None:
        with self.engine.connect() as conn:
            conn.execute(text("SELECT 1"))

    def dispose(self) -> None:
        self.engine.dispose()
