# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import timedelta
from functools import cached_property
from typing import Any

import httpx

from newshub.application.services.password_hashing import BcryptPasswordHasher
from newshub.application.use_cases.favorites.add_favorite import \
    AddFavoriteUseCase
from newshub.application.use_cases.favorites.list_favorites import \
    ListFavoritesUseCase
from newshub.application.use_cases.favorites.remove_favorite import \
    RemoveFavoriteUseCase
from newshub.application.use_cases.users.authenticate_session import \
    AuthenticateSessionUseCase
from newshub.application.use_cases.users.login_user import LoginUserUseCase
from newshub.application.use_cases.users.logout_user import LogoutUserUseCase
from newshub.application.use_cases.users.register_user import \
    RegisterUserUseCase
from newshub.application.use_cases.users.update_profile import \
    UpdateProfileUseCase
from newshub.infrastructure.cache import InMemoryTTLCache
from newshub.infrastructure.db import Database
from newshub.infrastructure.news_api import NewsApiClient
from newshub.infrastructure.repositories.favorites.sqlalchemy_favorite_repository import \
    SqlAlchemyFavoriteRepository
from newshub.infrastructure.repositories.users.sqlalchemy_user_repository import (
    SqlAlchemySessionTokenRepository, SqlAlchemyUserRepository)
from newshub.interfaces.http.controllers.auth_controller import AuthController
from newshub.interfaces.http.controllers.favorites_controller import \
    FavoritesController
from newshub.interfaces.http.controllers.misc_controller import MiscController
from newshub.interfaces.http.controllers.news_controller import NewsController
from newshub.interfaces.http.session import SessionCookie, SessionGuard
from newshub.shared.config import AppConfig
from newshub.shared.middleware.rate_limit import InMemoryRateLimiter


class Container:
    def __init__(
        self, config: AppConfig, *, news_transport: httpx.BaseTransport | None = None
    ) -> None:
        self.config = config
        self._news_transport = news_transport

    @cached_property
    def database(self) -> Database:
        return Database(self.config.database)

    @cached_property
    def session_ttl(self) -> timedelta:
        return timedelta(days=self.config.security.session_ttl_days)

    @cached_property
    def password_hasher(self) -> BcryptPasswordHasher:
        return BcryptPasswordHasher(rounds=self.config.security.bcrypt_rounds)

    @cached_property
    def user_repository(self) -> SqlAlchemyUserRepository:
        return SqlAlchemyUserRepository(self.database)

    @cached_property
    def session_token_repository(self) -> SqlAlchemySessionTokenRepository:
        return SqlAlchemySessionTokenRepository(self.database)

    @cached_property
    def favorite_repository(self) -> SqlAlchemyFavoriteRepository:
        return SqlAlchemyFavoriteRepository(self.database)

    # Auth

    @cached_property
    def register_user_use_case(self) -> RegisterUserUseCase:
        return RegisterUserUseCase(
            users=self.user_repository,
            tokens=self.session_token_repository,
            password_hasher=self.password_hasher,
            session_ttl=self.session_ttl,
        )

    @cached_property
    def login_user_use_case(self) -> LoginUserUseCase:
        return LoginUserUseCase(
            users=self.user_repository,
            tokens=self.session_token_repository,
            password_hasher=self.password_hasher,
            session_ttl=self.session_ttl,
        )

    @cached_property
    def logout_user_use_case(self) -> LogoutUserUseCase:
        return LogoutUserUseCase(tokens=self.session_token_repository)

    @cached_property
    def authenticate_session_use_case(self) -> AuthenticateSessionUseCase:
        return AuthenticateSessionUseCase(
            users=self.user_repository,
            tokens=self.session_token_repository,
            session_ttl=self.session_ttl,
        )

    @cached_property
    def update_profile_use_case(self) -> UpdateProfileUseCase:
        return UpdateProfileUseCase(
            users=self.user_repository, password_hasher=self.password_hasher
        )

    @cached_property
    def session_cookie(self) -> SessionCookie:
        security = self.config.security
        return SessionCookie(
            name=security.session_cookie_name,
            max_age=security.session_ttl_seconds,
            secure=security.cookie_secure,
        )

    @cached_property
    def session_guard(self) -> SessionGuard:
        return SessionGuard(
            authenticate=self.authenticate_session_use_case, cookie=self.session_cookie
        )

    @cached_property
    def auth_rate_limiter(self) -> InMemoryRateLimiter | None:
        security = self.config.security
        if not security.enable_rate_limit:
            return None
        return InMemoryRateLimiter(security.rate_limit_requests, security.rate_limit_window)

    # Favorites

    @cached_property
    def add_favorite_use_case(self) -> AddFavoriteUseCase:
        return AddFavoriteUseCase(favorites=self.favorite_repository)

    @cached_property
    def list_favorites_use_case(self) -> ListFavoritesUseCase:
        return ListFavoritesUseCase(favorites=self.favorite_repository)

    @cached_property
    def remove_favorite_use_case(self) -> RemoveFavoriteUseCase:
        return RemoveFavoriteUseCase(favorites=self.favorite_repository)

    # News proxy

    @cached_property
    def news_cache(self) -> InMemoryTTLCache[str, dict[str, Any]]:
        return InMemoryTTLCache(self.config.news.headlines_ttl)

    @cached_property
    def news_client(self) -> NewsApiClient:
        return NewsApiClient(self.config.news, self.news_cache, transport=self._news_transport)

    # Controllers

    @cached_property
    def auth_controller(self) -> AuthController:
        return AuthController(
            register_use_case=self.register_user_use_case,
            login_use_case=self.login_user_use_case,
            logout_use_case=self.logout_user_use_case,
            update_profile_use_case=self.update_profile_use_case,
            guard=self.session_guard,
            cookie=self.session_cookie,
            rate_limiter=self.auth_rate_limiter,
        )

    @cached_property
    def favorites_controller(self) -> FavoritesController:
        return FavoritesController(
            add_use_case=self.add_favorite_use_case,
            list_use_case=self.list_favorites_use_case,
            remove_use_case=self.remove_favorite_use_case,
            guard=self.session_guard,
        )

    @cached_property
    def news_controller(self) -> NewsController:
        return NewsController(client=self.news_client)

    @cached_property
    def misc_controller(self) -> MiscController:
        return MiscController(db=self.database)

    def close(self) -> None:
        if "news_client" in self.__dict__:
            self.news_client.close()
        if "database" in self.__dict__:
            self.database.dispose()
