# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from sqlalchemy import ColumnElement, delete, func, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from newshub.domain.favorites.entities import ArticleSnapshot
from newshub.domain.favorites.entities import Favorite as DomainFavorite
from newshub.domain.favorites.entities import FavoriteQuery, FavoriteSort
from newshub.domain.favorites.repositories import FavoriteRepository
from newshub.infrastructure.db import Database
from newshub.infrastructure.db.models import Favorite, as_utc, new_id
from newshub.shared.logging import logger

_UPSERT_INSERTS = {
    "sqlite": sqlite_insert,
    "postgresql": pg_insert,
}

_ORDERING = {
    FavoriteSort.PUBLISHED_AT: (Favorite.published_at.desc().nulls_last(), Favorite.id.desc()),
    FavoriteSort.OLDEST: (Favorite.published_at.asc().nulls_first(), Favorite.id.asc()),
    FavoriteSort.TITLE: (Favorite.title.asc().nulls_first(), Favorite.id.asc()),
    FavoriteSort.ADDED_AT: (Favorite.added_at.desc(), Favorite.id.desc()),
}


def _to_domain(row: Favorite) -> DomainFavorite:
    return DomainFavorite(
        id=row.id,
        user_id=row.user_id,
        url=row.url,
        added_at=as_utc(row.added_at),
        title=row.title,
        source=row.source,
        url_to_image=row.url_to_image,
        description=row.description,
        content=row.content,
        language=row.language,
        published_at=as_utc(row.published_at) if row.published_at else None,
    )


def _filters(user_id: str, query: FavoriteQuery) -> list[ColumnElement[bool]]:
    conditions: list[ColumnElement[bool]] = [Favorite.user_id == user_id]
    if query.language:
        conditions.append(func.lower(Favorite.language) == query.language.lower())
    if query.published_from:
        conditions.append(Favorite.published_at >= query.published_from)
    if query.published_to:
        conditions.append(Favorite.published_at <= query.published_to)
    return conditions


class SqlAlchemyFavoriteRepository(FavoriteRepository):
    def __init__(self, db: Database) -> None:
        self._db = db

    def add(self, user_id: str, article: ArticleSnapshot) -> tuple[DomainFavorite, bool]:
        values: dict[str, Any] = {
            **article.present_fields(),
            "id": new_id(),
            "user_id": user_id,
            "added_at": datetime.now(UTC),
        }
        insert = _UPSERT_INSERTS.get(self._db.engine.dialect.name)
        if insert is None:
            return self._insert_or_lookup(values)

        # A no-op update on conflict makes RETURNING yield the existing row,
        # so creation and discovery happen in one atomic statement.
        stmt = insert(Favorite).values(**values)
        stmt = stmt.on_conflict_do_update(
            index_elements=[Favorite.user_id, Favorite.url],
            set_={"url": stmt.excluded.url},
        ).returning(Favorite)
        with self._db.session_scope() as session:
            row = session.scalars(stmt).one()
            return _to_domain(row), row.id == values["id"]

    def _insert_or_lookup(self, values: dict[str, Any]) -> tuple[DomainFavorite, bool]:
        try:
            with self._db.session_scope() as session:
                row = Favorite(**values)
                session.add(row)
                session.flush()
                return _to_domain(row), True
        except IntegrityError:
            logger.debug("favorites.add: unique (user_id, url) violated, looking up existing")
        with self._db.session_scope() as session:
            existing = self._find_by_url(session, values["user_id"], values["url"])
            if existing is None:
                # removed between the failed insert and the lookup; try once more
                row = Favorite(**values)
                session.add(row)
                session.flush()
                return _to_domain(row), True
            return _to_domain(existing), False

    @staticmethod
    def _find_by_url(session: Session, user_id: str, url: str) -> Favorite | None:
        return session.scalars(
            select(Favorite).where(Favorite.user_id == user_id, Favorite.url == url)
        ).first()

    def list(self, user_id: str, query: FavoriteQuery) -> tuple[list[DomainFavorite], int]:
        conditions = _filters(user_id, query)
        with self._db.session_scope() as session:
            total = session.scalar(select(func.count(Favorite.id)).where(*conditions)) or 0
            rows = session.scalars(
                select(Favorite)
                .where(*conditions)
                .order_by(*_ORDERING[query.sort_by])
                .offset(query.offset)
                .limit(query.page_size)
            ).all()
            return [_to_domain(row) for row in rows], int(total)

    def delete(self, user_id: str, favorite_id: str) -> bool:
        with self._db.session_scope() as session:
            result = session.execute(
                delete(Favorite).where(Favorite.id == favorite_id, Favorite.user_id == user_id)
            )
            return bool(result.rowcount)
