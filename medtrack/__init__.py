# --- medtrack/__init__.py ---
import time
from datetime import datetime, timezone

from flask import Flask, g, jsonify, request
from werkzeug.exceptions import HTTPException

from .config import AuthConfig, Config
from .extensions import SERVICES_KEY, cors, db, migrate
from .logging import configure_logging, get_logger
from .services import build_services
from .utils.api import err, failure_response
from .utils.errors import internal, not_found

log = get_logger("medtrack")

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "no-referrer",
    "Cache-Control": "no-store",
}


def create_app(config_object=None):
    app = Flask(__name__, instance_relative_config=True)
    app.config.from_object(config_object or Config)
    Config.init_app(app)

    configure_logging(app.config.get("LOG_LEVEL", "INFO"), app.config.get("LOG_JSON", True))

    # Init extensions
    db.init_app(app)
    cors.init_app(app, resources={r"/api/*": {"origins": "*"}})
    migrate.init_app(app, db)
    app.extensions[SERVICES_KEY] = build_services(AuthConfig.from_mapping(app.config), db)

    # Register blueprints
    from .auth import bp as auth_bp; app.register_blueprint(auth_bp)
    from .medication import bp as medication_bp; app.register_blueprint(medication_bp)
    from .users import bp as users_bp; app.register_blueprint(users_bp)

    from .cli import register_cli
    register_cli(app)

    _register_request_hooks(app)
    _register_error_handlers(app)

    @app.get("/api/health")
    def health():
        return jsonify(status="ok", timestamp=datetime.now(timezone.utc).isoformat())

    with app.app_context():
        from . import model  # noqa: F401
        db.create_all()

    return app


def _register_request_hooks(app):
    @app.before_request
    def _start_timer():
        g.request_started = time.perf_counter()

    @app.after_request
    def _finish(response):
        for name, value in SECURITY_HEADERS.items():
            response.headers.setdefault(name, value)
        started = g.get("request_started")
        log.info(
            "request",
            method=request.method,
            path=request.path,
            status=response.status_code,
            duration_ms=round((time.perf_counter() - started) * 1000, 2) if started else None,
            remote_addr=request.remote_addr,
        )
        return response


def _register_error_handlers(app):
    @app.errorhandler(404)
    def _not_found(e):
        return failure_response(not_found(f"Not found - {request.path}"))

    @app.errorhandler(HTTPException)
    def _http_error(e):
        return err(e.description or e.name, e.code or 500)

    @app.errorhandler(Exception)
    def _unhandled(e):
        db.session.rollback()
        log.error(
            "unhandled_error",
            url=request.url,
            method=request.method,
            ip=request.remote_addr,
            exc_info=e,
        )
        return failure_response(internal(), exc=e)
