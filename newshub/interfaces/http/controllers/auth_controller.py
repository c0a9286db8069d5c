# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from flask import Blueprint, Response, jsonify, request
from pydantic import ValidationError

from newshub.application.use_cases.users.login_user import LoginUserUseCase
from newshub.application.use_cases.users.logout_user import LogoutUserUseCase
from newshub.application.use_cases.users.register_user import \
    RegisterUserUseCase
from newshub.application.use_cases.users.update_profile import (
    ProfileChanges, UpdateProfileUseCase)
from newshub.domain.users.entities import AuthContext
from newshub.interfaces.http.dto.auth import (AuthSuccessDTO, LoginRequestDTO,
                                              RegisterRequestDTO,
                                              UpdateProfileRequestDTO, UserDTO)
from newshub.interfaces.http.session import SessionCookie, SessionGuard
from newshub.shared.errors.validation import raise_validation_error
from newshub.shared.logging import logger
from newshub.shared.middleware.rate_limit import InMemoryRateLimiter, rate_limit


class AuthController:
    def __init__(
        self,
        *,
        register_use_case: RegisterUserUseCase,
        login_use_case: LoginUserUseCase,
        logout_use_case: LogoutUserUseCase,
        update_profile_use_case: UpdateProfileUseCase,
        guard: SessionGuard,
        cookie: SessionCookie,
        rate_limiter: InMemoryRateLimiter | None = None,
    ) -> None:
        self._register_use_case = register_use_case
        self._login_use_case = login_use_case
        self._logout_use_case = logout_use_case
        self._update_profile_use_case = update_profile_use_case
        self._guard = guard
        self._cookie = cookie
        self._rate_limiter = rate_limiter

    def register(self) -> tuple[Response, int]:
        try:
            dto = RegisterRequestDTO.model_validate(request.get_json(silent=True) or {})
        except ValidationError as exc:
            raise_validation_error(exc)

        user, token = self._register_use_case.execute(dto.name, dto.email, dto.password)

        response = jsonify(AuthSuccessDTO(user=UserDTO.from_user(user)).to_json())
        self._cookie.set(response, token)
        logger.info(f"auth.register: ok user_id={user.id}")
        return response, 201

    def login(self) -> tuple[Response, int]:
        try:
            dto = LoginRequestDTO.model_validate(request.get_json(silent=True) or {})
        except ValidationError as exc:
            raise_validation_error(exc)

        try:
            user, token = self._login_use_case.execute(dto.email, dto.password)
        except Exception:
            logger.info("auth.login: rejected")
            raise

        response = jsonify(AuthSuccessDTO(user=UserDTO.from_user(user)).to_json())
        self._cookie.set(response, token)
        logger.info(f"auth.login: ok user_id={user.id}")
        return response, 200

    def logout(self) -> tuple[Response, int]:
        self._logout_use_case.execute(self._cookie.read())

        response = Response(status=204)
        self._cookie.clear(response)
        logger.info("auth.logout: ok")
        return response, 204

    def me(self, auth: AuthContext) -> tuple[Response, int]:
        return jsonify({"user": UserDTO.from_auth(auth).to_json()}), 200

    def update_profile(self, auth: AuthContext) -> tuple[Response, int]:
        try:
            dto = UpdateProfileRequestDTO.model_validate(request.get_json(silent=True) or {})
        except ValidationError as exc:
            raise_validation_error(exc)

        user = self._update_profile_use_case.execute(
            auth.user_id,
            ProfileChanges(
                name=dto.name,
                email=dto.email,
                current_password=dto.current_password,
                new_password=dto.new_password,
            ),
        )
        logger.info(f"auth.profile: updated user_id={user.id}")
        return jsonify(AuthSuccessDTO(user=UserDTO.from_user(user)).to_json()), 200

    def as_blueprint(self) -> Blueprint:
        limited = rate_limit(self._rate_limiter)
        bp = Blueprint("auth", __name__, url_prefix="/api/auth")
        bp.add_url_rule("/register", view_func=limited(self.register), methods=["POST"])
        bp.add_url_rule("/login", view_func=limited(self.login), methods=["POST"])
        bp.add_url_rule("/logout", view_func=self.logout, methods=["POST"])
        bp.add_url_rule("/me", view_func=self._guard.required(self.me), methods=["GET"])
        bp.add_url_rule(
            "/profile", view_func=self._guard.required(self.update_profile), methods=["PUT"]
        )
        return bp
