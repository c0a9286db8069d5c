# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import math
from http import HTTPStatus

from flask import Flask, Response, jsonify, request
from werkzeug.exceptions import HTTPException

from newshub.shared.logging import logger

from .base import AppError, ErrorKind

_HTTP_KINDS: dict[int, ErrorKind] = {
    HTTPStatus.BAD_REQUEST: ErrorKind.VALIDATION,
    HTTPStatus.UNAUTHORIZED: ErrorKind.UNAUTHORIZED,
    HTTPStatus.NOT_FOUND: ErrorKind.NOT_FOUND,
    HTTPStatus.REQUEST_ENTITY_TOO_LARGE: ErrorKind.VALIDATION,
    HTTPStatus.TOO_MANY_REQUESTS: ErrorKind.RATE_LIMITED,
}


def handle_app_error(error: AppError) -> tuple[Response, HTTPStatus]:
    response = jsonify(error.to_dict())
    if error.kind is ErrorKind.RATE_LIMITED and error.context:
        response.headers["Retry-After"] = str(math.ceil(error.context["retryAfter"]))
    return response, error.status


def register_error_handler(
    app: Flask,
    *,
    debug_mode: bool = False,
    default_status: HTTPStatus = HTTPStatus.INTERNAL_SERVER_ERROR,
) -> None:
    @app.errorhandler(AppError)
    def _handle_app_error(exc: AppError):
        logger.info(f"Handled {exc.code} on {request.method} {request.path}")
        return handle_app_error(exc)

    @app.errorhandler(HTTPException)
    def _handle_http(exc: HTTPException):
        status = exc.code or default_status
        kind = _HTTP_KINDS.get(status, ErrorKind.INTERNAL)
        if status == HTTPStatus.METHOD_NOT_ALLOWED:
            kind = ErrorKind.NOT_FOUND
        payload = {"error": {"code": str(kind), "message": exc.description or exc.name}}
        response = jsonify(payload)
        return response, status

    @app.errorhandler(Exception)
    def _handle_unexpected(exc: Exception):
        if debug_mode:
            logger.exception(
                f"Unhandled exception: {request.method} {request.path} "
                f"query={dict(request.args)}, body_size={len(request.data)}"
            )
        else:
            logger.opt(exception=exc).error(
                f"Error: {type(exc).__name__} on {request.method} {request.path}"
            )

        response = jsonify(
            {"error": {"code": str(ErrorKind.INTERNAL), "message": "Something went wrong"}}
        )
        return response, default_status
