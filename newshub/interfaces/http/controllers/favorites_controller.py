# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from flask import Blueprint, Response, jsonify, request
from pydantic import ValidationError

from newshub.application.use_cases.favorites.add_favorite import \
    AddFavoriteUseCase
from newshub.application.use_cases.favorites.list_favorites import \
    ListFavoritesUseCase
from newshub.application.use_cases.favorites.remove_favorite import \
    RemoveFavoriteUseCase
from newshub.domain.users.entities import AuthContext
from newshub.interfaces.http.dto.favorites import (AddFavoriteRequestDTO,
                                                   FavoriteCreatedDTO,
                                                   FavoriteListDTO,
                                                   ListFavoritesQueryDTO)
from newshub.interfaces.http.session import SessionGuard
from newshub.shared.errors.validation import raise_validation_error
from newshub.shared.logging import logger


class FavoritesController:
    """Bookmarks of the signed-in user; every route runs behind the session guard."""

    def __init__(
        self,
        *,
        add_use_case: AddFavoriteUseCase,
        list_use_case: ListFavoritesUseCase,
        remove_use_case: RemoveFavoriteUseCase,
        guard: SessionGuard,
    ) -> None:
        self._add_use_case = add_use_case
        self._list_use_case = list_use_case
        self._remove_use_case = remove_use_case
        self._guard = guard

    def list_favorites(self, auth: AuthContext) -> tuple[Response, int]:
        try:
            dto = ListFavoritesQueryDTO.model_validate(request.args.to_dict())
        except ValidationError as exc:
            raise_validation_error(exc)

        page = self._list_use_case.execute(auth, dto.to_query())
        logger.debug(
            f"favorites.list: user_id={auth.user_id} page={page.page} "
            f"returned={len(page.items)} total={page.total}"
        )
        return jsonify(FavoriteListDTO.from_page(page).to_json()), 200

    def add_favorite(self, auth: AuthContext) -> tuple[Response, int]:
        try:
            dto = AddFavoriteRequestDTO.model_validate(request.get_json(silent=True) or {})
        except ValidationError as exc:
            raise_validation_error(exc)

        favorite = self._add_use_case.execute(auth, dto.to_snapshot())
        created = FavoriteCreatedDTO(id=favorite.id, added_at=favorite.added_at)
        return jsonify(created.model_dump(mode="json", by_alias=True)), 201

    def remove_favorite(self, auth: AuthContext, favorite_id: str) -> tuple[Response, int]:
        self._remove_use_case.execute(auth, favorite_id)
        logger.info(f"favorites.remove: ok user_id={auth.user_id} favorite_id={favorite_id}")
        return Response(status=204), 204

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("favorites", __name__, url_prefix="/api/favorites")
        bp.add_url_rule(
            "", view_func=self._guard.required(self.list_favorites), methods=["GET"]
        )
        bp.add_url_rule(
            "", view_func=self._guard.required(self.add_favorite), methods=["POST"]
        )
        bp.add_url_rule(
            "/<favorite_id>",
            view_func=self._guard.required(self.remove_favorite),
            methods=["DELETE"],
        )
        return bp
