# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import time

from flask import Flask, Response, g, request
from flask_cors import CORS

from uni_schedule.infrastructure.container import Container, container as default_container
from uni_schedule.infrastructure.db import SessionLocal, init_db
from uni_schedule.infrastructure.observability import observe_request, render_metrics
from uni_schedule.shared.config import load_config
from uni_schedule.shared.logging import logger, setup_logging
from uni_schedule.shared.middleware.error_handler import configure_error_handling
from uni_schedule.shared.middleware.request_logger import configure_request_logging


def create_app(container: Container | None = None) -> Flask:
    config = load_config()
    setup_logging(debug_mode=config.debug_logging)
    init_db()

    container = container or default_container

    app = Flask(__name__)
    app.config.update(SECRET_KEY=config.secret_key)
    configure_error_handling(app)
    configure_request_logging(app)

    cors_kwargs: dict[str, object] = {
        "resources": {r"/api/*": {"origins": config.security.allowed_origins}}
    }
    CORS(app, **cors_kwargs)

    app.register_blueprint(container.auth_controller.as_blueprint())
    app.register_blueprint(container.schedules_controller.as_blueprint())
    app.register_blueprint(container.classes_controller.as_blueprint())

    @app.teardown_appcontext
    def _release_session(_exc: BaseException | None) -> None:
        SessionLocal.remove()

    @app.get("/api/health")
    def _health():
        return {"status": "ok"}

    @app.get("/metrics")
    def _metrics():
        payload, content_type = render_metrics()
        return Response(payload, content_type=content_type)

    @app.before_request
    def _start_timer() -> None:
        g.metrics_start = time.perf_counter()

    @app.after_request
    def _observe(resp: Response) -> Response:
        started = getattr(g, "metrics_start", None)
        if started is not None:
            endpoint = request.url_rule.rule if request.url_rule else "unmatched"
            observe_request(endpoint, resp.status_code, time.perf_counter() - started)
        return resp

    @app.after_request
    def _add_security_headers(resp):
        resp.headers.setdefault("X-Content-Type-Options", "nosniff")
        resp.headers.setdefault("X-Frame-Options", "DENY")
        resp.headers.setdefault("Referrer-Policy", "no-referrer")
        return resp

    logger.info(f"Flask app initialized env={config.app_env}")
    return app


if __name__ == "__main__":
    create_app().run(host="0.0.0.0", port=5000, debug=True)
