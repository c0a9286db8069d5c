# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from newshub.domain.favorites.exceptions import FavoriteNotFoundError
from newshub.domain.favorites.repositories import FavoriteRepository
from newshub.domain.users.entities import AuthContext


class RemoveFavoriteUseCase:
    def __init__(self, *, favorites: FavoriteRepository) -> None:
        self._favorites = favorites

    def execute(self, auth: AuthContext, favorite_id: str) -> None:
        # Foreign and missing ids are reported the same way.
        if not self._favorites.delete(auth.user_id, favorite_id):
            raise FavoriteNotFoundError()
