# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from newshub.shared.errors.base import DomainError, ErrorKind


class AlreadyFavoritedError(DomainError):
    kind = ErrorKind.ALREADY_FAVORITED
    message = "Article already in favorites"

    def __init__(self, favorite_id: str) -> None:
        super().__init__(context={"id": favorite_id})
        self.favorite_id = favorite_id


class FavoriteNotFoundError(DomainError):
    kind = ErrorKind.NOT_FOUND
    message = "Favorite not found"
