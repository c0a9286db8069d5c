# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import httpx
from flask import Flask, Response
from flask_cors import CORS
from werkzeug.middleware.proxy_fix import ProxyFix

from newshub.container import Container
from newshub.shared.config import AppConfig, load_config
from newshub.shared.logging import logger, setup_logging
from newshub.shared.middleware.error_handler import configure_error_handling
from newshub.shared.middleware.request_logger import configure_request_logging


def _configure_security_headers(app: Flask, *, enable_hsts: bool) -> None:
    @app.after_request
    def _add_security_headers(resp: Response) -> Response:
        resp.headers.setdefault("X-Frame-Options", "DENY")

        resp.headers.setdefault("Referrer-Policy", "no-referrer")

        resp.headers.setdefault("X-Content-Type-Options", "nosniff")

        resp.headers.setdefault("Cross-Origin-Opener-Policy", "same-origin")

        resp.headers.setdefault(
            "Permissions-Policy",
            "geolocation=(), microphone=(), camera=(), payment=(), usb=()",
        )

        resp.headers.setdefault("X-Permitted-Cross-Domain-Policies", "none")

        if enable_hsts:
            resp.headers.setdefault(
                "Strict-Transport-Security",
                "max-age=31536000; includeSubDomains",
            )

        return resp


def create_app(
    config: AppConfig | None = None, *, news_transport: httpx.BaseTransport | None = None
) -> Flask:
    config = config or load_config()
    setup_logging(level="DEBUG" if config.debug_logging else config.log_level, log_file=config.log_file)

    container = Container(config, news_transport=news_transport)
    container.database.init_db()
    purged = container.session_token_repository.purge_expired()
    if purged:
        logger.info(f"sessions: purged {purged} expired tokens")

    app = Flask(__name__)
    app.config.update(
        SECRET_KEY=config.security.secret_key,
        MAX_CONTENT_LENGTH=config.max_content_length,
    )
    if config.security.trust_proxy:
        app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1)  # type: ignore[method-assign]

    configure_error_handling(app, debug_mode=config.debug_logging)
    configure_request_logging(app, debug_mode=config.debug_logging)

    CORS(
        app,
        resources={r"/api/*": {"origins": config.security.client_origin}},
        supports_credentials=True,
    )
    container.session_guard.install(app)

    app.register_blueprint(container.misc_controller.as_blueprint())
    app.register_blueprint(container.auth_controller.as_blueprint())
    app.register_blueprint(container.favorites_controller.as_blueprint())
    app.register_blueprint(container.news_controller.as_blueprint())

    _configure_security_headers(app, enable_hsts=config.security.enable_hsts)

    app.extensions["newshub"] = container
    logger.info(f"Flask app initialized env={config.app_env}")
    return app


def main() -> None:
    create_app().run(host="0.0.0.0", port=5000)


if __name__ == "__main__":
    main()
