# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from dataclasses import dataclass, fields
from datetime import datetime
from enum import StrEnum


class FavoriteSort(StrEnum):
    PUBLISHED_AT = "publishedAt"
    OLDEST = "oldest"
    TITLE = "title"
    ADDED_AT = "addedAt"


@dataclass(slots=True, frozen=True)
class ArticleSnapshot:
    """Article metadata as the client saw it when bookmarking."""

    url: str
    title: str | None = None
    source: str | None = None
    url_to_image: str | None = None
    description: str | None = None
    content: str | None = None
    language: str | None = None
    published_at: datetime | None = None

    def present_fields(self) -> dict[str, object]:
        values = {f.name: getattr(self, f.name) for f in fields(self)}
        return {key: value for key, value in values.items() if value not in (None, "")}


@dataclass(slots=True, frozen=True)
class Favorite:

    id: str
    user_id: str
    url: str
    added_at: datetime
    title: str | None = None
    source: str | None = None
    url_to_image: str | None = None
    description: str | None = None
    content: str | None = None
    language: str | None = None
    published_at: datetime | None = None


@dataclass(slots=True, frozen=True)
class FavoriteQuery:
    page: int = 1
    page_size: int = 12
    sort_by: FavoriteSort = FavoriteSort.PUBLISHED_AT
    language: str | None = None
    published_from: datetime | None = None
    published_to: datetime | None = None

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size


@dataclass(slots=True, frozen=True)
class FavoritePage:
    items: list[Favorite]
    total: int
    page: int
    page_size: int
