# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable
from functools import wraps

from flask import Flask, Response, g, request

from newshub.application.use_cases.users.authenticate_session import \
    AuthenticateSessionUseCase
from newshub.shared.errors import UnauthorizedError
from newshub.shared.logging import logger


class SessionCookie:
    """Writes and clears the opaque session cookie."""

    def __init__(self, *, name: str, max_age: int, secure: bool | None = None) -> None:
        self.name = name
        self._max_age = max_age
        self._secure = secure

    def _is_secure(self) -> bool:
        if self._secure is not None:
            return self._secure
        return request.is_secure

    def read(self) -> str:
        return request.cookies.get(self.name, "")

    def set(self, response: Response, token: str) -> None:
        response.set_cookie(
            self.name,
            token,
            max_age=self._max_age,
            httponly=True,
            secure=self._is_secure(),
            samesite="Lax",
        )

    def clear(self, response: Response) -> None:
        response.delete_cookie(
            self.name, httponly=True, secure=self._is_secure(), samesite="Lax"
        )


class SessionGuard:
    """Resolves the session cookie to an ``AuthContext`` before a view runs."""

    def __init__(self, *, authenticate: AuthenticateSessionUseCase, cookie: SessionCookie) -> None:
        self._authenticate = authenticate
        self._cookie = cookie

    def required(self, view: Callable) -> Callable:
        @wraps(view)
        def inner(*args, **kwargs):
            token = self._cookie.read()
            try:
                auth = self._authenticate.execute(token)
            except UnauthorizedError:
                logger.warning(f"Auth failed on {request.method} {request.path}")
                if token:
                    g.clear_session_cookie = True
                raise

            g.user_id = auth.user_id
            g.renew_session_token = token
            logger.debug(f"Auth OK: user={auth.user_id} {request.method} {request.path}")
            return view(*args, auth=auth, **kwargs)

        return inner

    def install(self, app: Flask) -> None:
        @app.after_request
        def _sync_session_cookie(response: Response) -> Response:
            if getattr(g, "clear_session_cookie", False):
                self._cookie.clear(response)
            elif getattr(g, "renew_session_token", None):
                # cookie lifetime follows the renewed server-side expiry
                self._cookie.set(response, g.renew_session_token)
            return response


__all__ = ["SessionCookie", "SessionGuard"]
