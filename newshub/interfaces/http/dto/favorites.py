from __future__ import annotations

import re
from datetime import UTC, date, datetime, time
from typing import Any
from urllib.parse import urlsplit

from pydantic import (BaseModel, ConfigDict, Field, ValidationInfo,
                      field_validator, model_validator)
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError

from newshub.domain.favorites.entities import (ArticleSnapshot, Favorite,
                                               FavoritePage, FavoriteQuery,
                                               FavoriteSort)

_DATE_ONLY_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def _blank_to_none(value: Any) -> Any:
    if value is None:
        return None
    if isinstance(value, str) and not value.strip():
        return None
    return value


def _normalize_language(value: str | None) -> str | None:
    if value is None:
        return None
    stripped = value.strip().lower()
    return stripped or None


def _to_utc(value: datetime | None) -> datetime | None:
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def is_absolute_url(value: str) -> bool:
    parts = urlsplit(value)
    return parts.scheme in ("http", "https") and bool(parts.netloc) and " " not in value


class AddFavoriteRequestDTO(BaseModel):
    url: str = Field(max_length=2048)
    title: str | None = None
    source: str | None = None
    url_to_image: str | None = Field(None, max_length=2048)
    description: str | None = None
    content: str | None = None
    language: str | None = Field(None, max_length=16)
    published_at: datetime | None = None

    model_config = ConfigDict(alias_generator=to_camel, validate_by_name=True, validate_by_alias=True)

    @field_validator(
        "title", "source", "url_to_image", "description", "content", "language", "published_at",
        mode="before",
    )
    @classmethod
    def _strip_empty(cls, value: Any) -> Any:
        return _blank_to_none(value)

    @field_validator("url")
    @classmethod
    def validate_url(cls, value: str) -> str:
        value = value.strip()
        if not is_absolute_url(value):
            raise PydanticCustomError("url_invalid", "A valid article URL is required", {})
        return value

    @field_validator("url_to_image")
    @classmethod
    def validate_image_url(cls, value: str | None) -> str | None:
        if value is not None and not is_absolute_url(value.strip()):
            raise PydanticCustomError("url_invalid", "urlToImage must be a valid URL", {})
        return value.strip() if value is not None else None

    @field_validator("language")
    @classmethod
    def validate_language(cls, value: str | None) -> str | None:
        return _normalize_language(value)

    @field_validator("published_at")
    @classmethod
    def validate_published_at(cls, value: datetime | None) -> datetime | None:
        return _to_utc(value)

    def to_snapshot(self) -> ArticleSnapshot:
        return ArticleSnapshot(**self.model_dump())


class ListFavoritesQueryDTO(BaseModel):
    page: int = Field(1, ge=1)
    page_size: int = Field(12, ge=1, le=100)
    sort_by: FavoriteSort = FavoriteSort.PUBLISHED_AT
    language: str | None = None
    published_from: datetime | None = Field(None, alias="from")
    published_to: datetime | None = Field(None, alias="to")

    model_config = ConfigDict(alias_generator=to_camel, validate_by_name=True, validate_by_alias=True)

    @field_validator("page", "page_size", "sort_by", mode="before")
    @classmethod
    def _blank_is_default(cls, value: Any, info: ValidationInfo) -> Any:
        if _blank_to_none(value) is None:
            return cls.model_fields[info.field_name].default
        return value

    @field_validator("language", "published_from", mode="before")
    @classmethod
    def _strip_empty(cls, value: Any) -> Any:
        return _blank_to_none(value)

    @field_validator("published_to", mode="before")
    @classmethod
    def _whole_day_upper_bound(cls, value: Any) -> Any:
        value = _blank_to_none(value)
        if isinstance(value, str) and _DATE_ONLY_RE.match(value.strip()):
            # a bare date includes everything published that day
            return datetime.combine(date.fromisoformat(value.strip()), time.max, tzinfo=UTC)
        return value

    @field_validator("language")
    @classmethod
    def validate_language(cls, value: str | None) -> str | None:
        return _normalize_language(value)

    @field_validator("published_from", "published_to")
    @classmethod
    def validate_bounds(cls, value: datetime | None) -> datetime | None:
        return _to_utc(value)

    @model_validator(mode="after")
    def _check_range(self) -> "ListFavoritesQueryDTO":
        if (
            self.published_from is not None
            and self.published_to is not None
            and self.published_from > self.published_to
        ):
            raise PydanticCustomError("range_invalid", "'from' must not be after 'to'", {})
        return self

    def to_query(self) -> FavoriteQuery:
        return FavoriteQuery(
            page=self.page,
            page_size=self.page_size,
            sort_by=self.sort_by,
            language=self.language,
            published_from=self.published_from,
            published_to=self.published_to,
        )


class FavoriteDTO(BaseModel):
    id: str
    url: str
    title: str | None = None
    source: str | None = None
    url_to_image: str | None = None
    description: str | None = None
    content: str | None = None
    language: str | None = None
    published_at: datetime | None = None
    added_at: datetime

    model_config = ConfigDict(alias_generator=to_camel, validate_by_name=True)

    @classmethod
    def from_favorite(cls, favorite: Favorite) -> FavoriteDTO:
        return cls(
            id=favorite.id,
            url=favorite.url,
            title=favorite.title,
            source=favorite.source,
            url_to_image=favorite.url_to_image,
            description=favorite.description,
            content=favorite.content,
            language=favorite.language,
            published_at=favorite.published_at,
            added_at=favorite.added_at,
        )

    def to_json(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class FavoriteCreatedDTO(BaseModel):
    id: str
    added_at: datetime

    model_config = ConfigDict(alias_generator=to_camel, validate_by_name=True)


class FavoriteListDTO(BaseModel):
    total: int
    items: list[FavoriteDTO]
    page: int
    page_size: int

    model_config = ConfigDict(alias_generator=to_camel, validate_by_name=True)

    @classmethod
    def from_page(cls, page: FavoritePage) -> FavoriteListDTO:
        return cls(
            total=page.total,
            items=[FavoriteDTO.from_favorite(item) for item in page.items],
            page=page.page,
            page_size=page.page_size,
        )

    def to_json(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
