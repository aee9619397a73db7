from __future__ import annotations

import logging
import sys

from flask import Flask, jsonify
from pydantic import ValidationError
from werkzeug.exceptions import HTTPException

from .config import load_settings
from .db import init_db
from .engine.errors import BingoError
from .routes.admin import bp as admin_bp
from .routes.health import bp as health_bp
from .routes.participants import bp as participants_bp
from .routes.rounds import bp as rounds_bp


def configure_logging(level_name: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        stream=sys.stdout,
    )
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


def create_app() -> Flask:
    settings = load_settings()
    configure_logging(settings.log_level)

    app = Flask(__name__)
    app.config["SECRET_KEY"] = settings.flask.secret_key
    app.config["DEBUG"] = settings.flask.debug
    init_db()

    app.register_blueprint(health_bp)
    app.register_blueprint(rounds_bp, url_prefix="/rounds")
    app.register_blueprint(participants_bp, url_prefix="/participants")
    app.register_blueprint(admin_bp, url_prefix="/admin/api")

    @app.errorhandler(BingoError)
    def handle_bingo_error(exc: BingoError):
        return jsonify({"error": exc.code, "message": exc.message, "details": exc.details}), exc.status_code

    @app.errorhandler(ValidationError)
    def handle_validation_error(exc: ValidationError):
        details = [
            {"field": ".".join(str(p) for p in err["loc"]), "message": err["msg"]}
            for err in exc.errors()
        ]
        return jsonify({"error": "validation_error", "message": "invalid request", "details": details}), 400

    @app.errorhandler(HTTPException)
    def handle_http_error(exc: HTTPException):
        code = exc.code or 500
        error = "not_found" if code == 404 else "http_error"
        return jsonify({"error": error, "message": exc.description, "details": None}), code

    @app.errorhandler(Exception)
    def handle_error(exc: Exception):
        app.logger.exception("Unhandled error: %s", exc)
        return jsonify({"error": "internal_error", "message": str(exc), "details": None}), 500

    return app
