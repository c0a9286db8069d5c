# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from newshub.domain.favorites.entities import FavoritePage, FavoriteQuery
from newshub.domain.favorites.repositories import FavoriteRepository
from newshub.domain.users.entities import AuthContext


class ListFavoritesUseCase:
    def __init__(self, *, favorites: FavoriteRepository) -> None:
        self._favorites = favorites

    def execute(self, auth: AuthContext, query: FavoriteQuery) -> FavoritePage:
        items, total = self._favorites.list(auth.user_id, query)
        return FavoritePage(items=items, total=total, page=query.page, page_size=query.page_size)
