import time

from flask import Flask, g, request
from werkzeug.exceptions import HTTPException, MethodNotAllowed, NotFound, RequestEntityTooLarge

from garden.config import load_config
from garden.errors import StoreError
from garden.extensions import bcrypt, cors, db, jwt, sock
from garden.http import GardenJSONProvider, failure
from garden.routes import register_blueprints
from garden.store import init_store
from garden.terminal import terminal_ws
from garden.tracing import init_tracing

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "SAMEORIGIN",
    "Referrer-Policy": "no-referrer",
    "X-DNS-Prefetch-Control": "off",
}


def create_app(overrides=None):
    app = Flask(__name__)
    app.json = GardenJSONProvider(app)
    app.config.update(load_config())
    if overrides:
        app.config.update(overrides)
    app.logger.setLevel(app.config["LOG_LEVEL"])

    if app.config["OTEL_ENABLED"]:
        init_tracing(app)

    db.init_app(app)
    bcrypt.init_app(app)
    jwt.init_app(app)
    cors.init_app(app)
    sock.init_app(app)

    register_blueprints(app)
    if app.config["TERMINAL_ENABLED"]:
        app.register_blueprint(terminal_ws)
        app.logger.info("Terminal WebSocket enabled at /terminal")

    register_handlers(app)
    init_store(app)
    return app


def register_handlers(app):
    @app.before_request
    def start_timer():
        g.started = time.monotonic()

    @app.after_request
    def finish_request(response):
        for header, value in SECURITY_HEADERS.items():
            response.headers.setdefault(header, value)
        elapsed = (time.monotonic() - g.get("started", time.monotonic())) * 1000
        app.logger.info("%s %s %s %.1fms", request.method, request.path, response.status_code, elapsed)
        return response

    @app.errorhandler(NotFound)
    def route_not_found(_error):
        return failure("Route not found", 404)

    @app.errorhandler(MethodNotAllowed)
    def method_not_allowed(_error):
        return failure("Method not allowed", 405)

    @app.errorhandler(RequestEntityTooLarge)
    def too_large(_error):
        return failure("File too large. Maximum size is 1GB for videos and 10MB for images.", 413)

    @app.errorhandler(StoreError)
    def bad_query(error):
        return failure("Invalid query", 400, error)

    @app.errorhandler(Exception)
    def unhandled(error):
        if isinstance(error, HTTPException):
            return failure(error.description, error.code)
        app.logger.exception("Unhandled error on %s %s", request.method, request.path)
        return failure("Something went wrong!", 500)
