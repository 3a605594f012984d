import logging
import os
import time

from flask import Flask, g, jsonify, request
from .extensions import db, migrate, jwt, cors
from .config import Config, DEV_JWT_SECRET, ProductionConfig
from .errors import register_error_handlers

from .blueprints.auth.routes import auth_bp
from .blueprints.categories.routes import categories_bp
from .blueprints.expenses.routes import expenses_bp

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "SAMEORIGIN",
    "Referrer-Policy": "no-referrer",
    "Cross-Origin-Resource-Policy": "same-origin",
}

access_log = logging.getLogger("expensetracker.access")


def _default_config():
    return ProductionConfig if os.getenv("APP_ENV") == "production" else Config


def check_secrets(app):
    if app.config.get("APP_ENV") != "production":
        return
    secret = app.config.get("JWT_SECRET_KEY")
    if not secret or secret == DEV_JWT_SECRET:
        raise RuntimeError("JWT_SECRET is not defined")


def configure_logging(app):
    level = getattr(logging, str(app.config.get("LOG_LEVEL", "INFO")).upper(), logging.INFO)
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    logging.getLogger("expensetracker").setLevel(level)


def create_app(config_object=None):
    app = Flask(__name__)
    app.config.from_object(config_object or _default_config())
    check_secrets(app)
    configure_logging(app)
    started_at = time.monotonic()

    # Initialize extensions
    db.init_app(app)
    migrate.init_app(app, db)
    jwt.init_app(app)
    cors.init_app(app, resources={r"/api/*": {"origins": app.config["CORS_ORIGINS"]}})

    # Tables for a smooth first run; production relies on `flask db upgrade`
    if app.config.get("AUTO_CREATE_TABLES"):
        with app.app_context():
            db.create_all()

    register_error_handlers(app)

    @app.before_request
    def start_timer():
        g.request_started = time.perf_counter()

    @app.after_request
    def finish_request(response):
        for header, value in SECURITY_HEADERS.items():
            response.headers.setdefault(header, value)
        elapsed = (time.perf_counter() - g.get("request_started", time.perf_counter())) * 1000
        access_log.info("%s %s %s %.1fms", request.method, request.path, response.status_code, elapsed)
        return response

    # Register blueprints
    app.register_blueprint(auth_bp)
    app.register_blueprint(categories_bp)
    app.register_blueprint(expenses_bp)

    @app.route("/health")
    def health():
        return jsonify({"status": "ok", "uptime": round(time.monotonic() - started_at, 3)})

    @app.route("/api")
    def api_index():
        return jsonify({
            "name": "Expense Tracker API",
            "version": "1.0.0",
            "endpoints": {
                "auth": "/api/auth",
                "expenses": "/api/expenses",
                "categories": "/api/categories",
            },
        })

    return app
