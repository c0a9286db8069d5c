# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import UTC, datetime

from flask import Blueprint, jsonify
from sqlalchemy.exc import SQLAlchemyError

from newshub.infrastructure.db import Database
from newshub.shared.logging import logger


class MiscController:
    def __init__(self, *, db: Database) -> None:
        self._db = db

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("misc", __name__)
        bp.add_url_rule("/api/health", view_func=self.health, methods=["GET"])
        return bp

    def health(self):
        status: dict[str, object] = {
            "status": "ok",
            "time": datetime.now(UTC).isoformat(),
        }
        try:
            self._db.ping()
            status["database"] = "ok"
        except SQLAlchemyError as exc:
            logger.error(f"health: database check failed: {type(exc).__name__}")
            status["status"] = "degraded"
            status["database"] = "error"
            return jsonify(status), 503
        return jsonify(status), 200
