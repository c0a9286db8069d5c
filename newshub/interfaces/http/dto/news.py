from __future__ import annotations

from typing import Any, Literal

from pydantic import (BaseModel, ConfigDict, Field, ValidationInfo,
                      field_validator, model_validator)
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError

Category = Literal[
    "business", "entertainment", "general", "health", "science", "sports", "technology"
]


class _NewsQuery(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel, validate_by_name=True, validate_by_alias=True, extra="ignore"
    )

    @field_validator("*", mode="before")
    @classmethod
    def _blank_is_default(cls, value: Any, info: ValidationInfo) -> Any:
        if value is None or (isinstance(value, str) and not value.strip()):
            return cls.model_fields[info.field_name].default
        return value

    def to_params(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class _Paged(_NewsQuery):
    page: int = Field(1, ge=1)
    page_size: int = Field(12, ge=1, le=100)


class TopHeadlinesQueryDTO(_Paged):
    country: str | None = Field(None, min_length=2, max_length=2)
    category: Category | None = None
    sources: str | None = None
    q: str | None = Field(None, max_length=500)

    @field_validator("country", "category", mode="before")
    @classmethod
    def _lower(cls, value: Any) -> Any:
        return value.strip().lower() if isinstance(value, str) else value

    @field_validator("q")
    @classmethod
    def _trim(cls, value: str | None) -> str | None:
        return value.strip() if value is not None else None

    @model_validator(mode="after")
    def _exclusive_sources(self) -> "TopHeadlinesQueryDTO":
        if self.sources and (self.country or self.category):
            raise PydanticCustomError(
                "sources_exclusive", "You can't mix 'sources' with 'country' or 'category'.", {}
            )
        return self


class EverythingQueryDTO(_Paged):
    q: str | None = Field(None, max_length=500)
    search_in: str | None = None
    sources: str | None = None
    domains: str | None = None
    exclude_domains: str | None = None
    published_from: str | None = Field(None, alias="from")
    published_to: str | None = Field(None, alias="to")
    language: str | None = Field(None, min_length=2, max_length=2)
    sort_by: Literal["relevancy", "popularity", "publishedAt"] = "publishedAt"

    @field_validator("language", mode="before")
    @classmethod
    def _lower(cls, value: Any) -> Any:
        return value.strip().lower() if isinstance(value, str) else value

    @field_validator("q")
    @classmethod
    def _trim(cls, value: str | None) -> str | None:
        return value.strip() if value is not None else None

    @model_validator(mode="after")
    def _needs_scope(self) -> "EverythingQueryDTO":
        if not self.q and not self.sources and not self.domains:
            raise PydanticCustomError(
                "scope_missing", "Provide 'q', 'sources', or 'domains'.", {}
            )
        return self


class SourcesQueryDTO(_NewsQuery):
    category: Category | None = None
    language: str | None = Field(None, min_length=2, max_length=2)
    country: str | None = Field(None, min_length=2, max_length=2)

    @field_validator("category", "language", "country", mode="before")
    @classmethod
    def _lower(cls, value: Any) -> Any:
        return value.strip().lower() if isinstance(value, str) else value
