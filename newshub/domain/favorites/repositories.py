# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from typing import Protocol

from .entities import ArticleSnapshot, Favorite, FavoriteQuery


class FavoriteRepository(Protocol):
    def add(self, user_id: str, article: ArticleSnapshot) -> tuple[Favorite, bool]:
        """Insert or find the user's favorite for ``article.url``; the flag is True when created."""
        ...

    def list(self, user_id: str, query: FavoriteQuery) -> tuple[list[Favorite], int]: ...
    def delete(self, user_id: str, favorite_id: str) -> bool: ...
