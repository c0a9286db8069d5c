# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from newshub.domain.favorites.entities import ArticleSnapshot, Favorite
from newshub.domain.favorites.exceptions import AlreadyFavoritedError
from newshub.domain.favorites.repositories import FavoriteRepository
from newshub.domain.users.entities import AuthContext
from newshub.shared.logging import logger


class AddFavoriteUseCase:
    def __init__(self, *, favorites: FavoriteRepository) -> None:
        self._favorites = favorites

    def execute(self, auth: AuthContext, article: ArticleSnapshot) -> Favorite:
        favorite, created = self._favorites.add(auth.user_id, article)
        if not created:
            logger.info(
                f"favorites.add: duplicate user_id={auth.user_id} favorite_id={favorite.id}"
            )
            raise AlreadyFavoritedError(favorite.id)
        logger.info(f"favorites.add: ok user_id={auth.user_id} favorite_id={favorite.id}")
        return favorite
