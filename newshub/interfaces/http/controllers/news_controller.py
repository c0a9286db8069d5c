# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from flask import Blueprint, Response, jsonify, request
from pydantic import BaseModel, ValidationError

from newshub.infrastructure.news_api import NewsApiClient
from newshub.interfaces.http.dto.news import (EverythingQueryDTO,
                                              SourcesQueryDTO,
                                              TopHeadlinesQueryDTO)
from newshub.shared.errors import ServiceUnavailableError
from newshub.shared.errors.validation import raise_validation_error


class NewsController:
    """Pass-through to the upstream news API."""

    def __init__(self, *, client: NewsApiClient) -> None:
        self._client = client

    def _relay(
        self, dto_type: type[BaseModel], fetch: Callable[[dict[str, Any]], dict[str, Any]]
    ) -> tuple[Response, int]:
        if not self._client.configured:
            raise ServiceUnavailableError("NEWS_API_KEY not configured")
        try:
            dto = dto_type.model_validate(request.args.to_dict())
        except ValidationError as exc:
            raise_validation_error(exc)
        return jsonify(fetch(dto.to_params())), 200

    def top_headlines(self) -> tuple[Response, int]:
        return self._relay(TopHeadlinesQueryDTO, self._client.top_headlines)

    def everything(self) -> tuple[Response, int]:
        return self._relay(EverythingQueryDTO, self._client.everything)

    def sources(self) -> tuple[Response, int]:
        return self._relay(SourcesQueryDTO, self._client.sources)

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("news", __name__, url_prefix="/api/news")
        bp.add_url_rule("/top-headlines", view_func=self.top_headlines, methods=["GET"])
        bp.add_url_rule("/everything", view_func=self.everything, methods=["GET"])
        bp.add_url_rule("/sources", view_func=self.sources, methods=["GET"])
        return bp
