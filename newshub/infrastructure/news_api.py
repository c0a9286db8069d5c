# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Client for the upstream news API with a short-lived response cache."""

from __future__ import annotations

from collections.abc import Mapping
from http import HTTPStatus
from typing import Any
from urllib.parse import urlencode

import httpx
from tenacity import (Retrying, retry_if_exception_type, stop_after_attempt,
                      wait_exponential)

from newshub.infrastructure.cache import InMemoryTTLCache
from newshub.shared.config.settings import NewsApiConfig
from newshub.shared.errors import ServiceUnavailableError, UpstreamError
from newshub.shared.logging import logger

TOP_HEADLINES_PATH = "/v2/top-headlines"
EVERYTHING_PATH = "/v2/everything"
SOURCES_PATH = "/v2/top-headlines/sources"

# newsapi.org error codes -> status relayed to our clients
UPSTREAM_ERROR_STATUS: dict[str, HTTPStatus] = {
    "apiKeyMissing": HTTPStatus.UNAUTHORIZED,
    "apiKeyInvalid": HTTPStatus.UNAUTHORIZED,
    "apiKeyDisabled": HTTPStatus.UNAUTHORIZED,
    "rateLimited": HTTPStatus.TOO_MANY_REQUESTS,
    "maximumResultsReached": HTTPStatus.TOO_MANY_REQUESTS,
    "sourcesTooMany": HTTPStatus.BAD_REQUEST,
    "parametersMissing": HTTPStatus.BAD_REQUEST,
    "parametersIncompatible": HTTPStatus.BAD_REQUEST,
    "unexpectedError": HTTPStatus.BAD_GATEWAY,
}


def make_cache_key(path: str, params: Mapping[str, Any]) -> str:
    present = sorted((key, str(value)) for key, value in params.items() if value is not None)
    return f"{path}?{urlencode(present)}"


def _error_from_body(body: Any) -> UpstreamError | None:
    if not isinstance(body, dict) or body.get("status") != "error":
        return None
    code = str(body.get("code") or "upstreamError")
    message = str(body.get("message") or "Upstream error")
    status = UPSTREAM_ERROR_STATUS.get(code, HTTPStatus.BAD_GATEWAY)
    return UpstreamError(message, status=status, code=code)


class NewsApiClient:
    def __init__(
        self,
        config: NewsApiConfig,
        cache: InMemoryTTLCache[str, dict[str, Any]],
        *,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._config = config
        self._cache = cache
        self._http = httpx.Client(
            base_url=config.base_url,
            timeout=config.timeout,
            headers={"X-Api-Key": config.api_key or ""},
            transport=transport,
        )

    @property
    def configured(self) -> bool:
        return bool(self._config.api_key)

    def top_headlines(self, params: Mapping[str, Any]) -> dict[str, Any]:
        return self._get_cached(TOP_HEADLINES_PATH, params, self._config.headlines_ttl)

    def everything(self, params: Mapping[str, Any]) -> dict[str, Any]:
        return self._get_cached(EVERYTHING_PATH, params, self._config.headlines_ttl)

    def sources(self, params: Mapping[str, Any]) -> dict[str, Any]:
        return self._get_cached(SOURCES_PATH, params, self._config.sources_ttl)

    def close(self) -> None:
        self._http.close()

    def _get_cached(self, path: str, params: Mapping[str, Any], ttl: float) -> dict[str, Any]:
        if not self.configured:
            raise ServiceUnavailableError("NEWS_API_KEY not configured")
        query = {key: value for key, value in params.items() if value is not None}
        key = make_cache_key(path, query)
        return self._cache.get_or_set(key, lambda: self._fetch(path, query), ttl)

    def _fetch(self, path: str, query: dict[str, Any]) -> dict[str, Any]:
        retrying = Retrying(
            stop=stop_after_attempt(self._config.max_retries + 1),
            wait=wait_exponential(multiplier=self._config.backoff_base, max=5),
            retry=retry_if_exception_type(httpx.TransportError),
            reraise=True,
        )
        try:
            for attempt in retrying:
                with attempt:
                    logger.debug(
                        f"news_api: attempt={attempt.retry_state.attempt_number} path={path}"
                    )
                    response = self._http.get(path, params=query)
        except httpx.TransportError as exc:
            logger.warning(f"news_api: transport failure path={path}: {type(exc).__name__}")
            raise UpstreamError(f"News API unreachable: {type(exc).__name__}") from exc

        try:
            body = response.json()
        except ValueError:
            body = None

        error = _error_from_body(body)
        if error is not None:
            logger.warning(f"news_api: upstream error path={path} code={body.get('code')}")
            raise error
        if response.is_error:
            logger.warning(f"news_api: upstream status={response.status_code} path={path}")
            raise UpstreamError(status=response.status_code)
        if not isinstance(body, dict):
            raise UpstreamError("Upstream returned a malformed body")

        logger.info(f"news_api: ok path={path} status={response.status_code}")
        return body


__all__ = ["NewsApiClient", "UPSTREAM_ERROR_STATUS", "make_cache_key"]
