# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .favorites.entities import (ArticleSnapshot, Favorite, FavoritePage,
                                 FavoriteQuery, FavoriteSort)
from .users.entities import AuthContext, SessionToken, User

__all__ = [
    "ArticleSnapshot",
    "AuthContext",
    "Favorite",
    "FavoritePage",
    "FavoriteQuery",
    "FavoriteSort",
    "SessionToken",
    "User",
]
