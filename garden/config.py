import os
import sys

BASE_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))


def _flag(name, default="false"):
    return os.getenv(name, default).lower() in ("1", "true", "yes", "on")


def load_config():
    return dict(
        STORE_BACKEND=os.getenv("GARDEN_STORE", "memory"),
        SQLALCHEMY_DATABASE_URI=os.getenv("DATABASE_URL", "sqlite:///garden.db"),
        SQLALCHEMY_TRACK_MODIFICATIONS=False,
        DATA_FILE=os.getenv("DATA_FILE", os.path.join(BASE_DIR, "data", "plants.json")),
        SEED_SAMPLE_DATA=_flag("SEED_SAMPLE_DATA", "true"),
        ADMIN_USERNAME=os.getenv("ADMIN_USERNAME", "user"),
        ADMIN_PASSWORD=os.getenv("ADMIN_PASSWORD", "admin764"),
        JWT_SECRET_KEY=os.getenv("JWT_SECRET", "super-secret-key-please-change"),
        # sessions live until logout
        JWT_ACCESS_TOKEN_EXPIRES=False,
        JWT_TOKEN_LOCATION=["headers", "query_string"],
        JWT_QUERY_STRING_NAME="token",
        UPLOAD_FOLDER=os.getenv("UPLOAD_FOLDER", os.path.join(BASE_DIR, "public", "uploads")),
        MAX_CONTENT_LENGTH=1024 * 1024 * 1024,
        TERMINAL_ENABLED=_flag("TERMINAL_ENABLED"),
        TERMINAL_SHELL=os.getenv(
            "TERMINAL_SHELL", "/bin/zsh" if sys.platform == "darwin" else "/bin/sh"
        ),
        JAEGER_URL=os.getenv("JAEGER_URL", "http://jaeger-query.garden.svc.cluster.local:16686"),
        OTEL_ENABLED=_flag("OTEL_ENABLED"),
        OTEL_SERVICE_NAME=os.getenv("OTEL_SERVICE_NAME", "beautiful-garden"),
        OTEL_EXPORTER_OTLP_ENDPOINT=os.getenv(
            "OTEL_EXPORTER_OTLP_ENDPOINT",
            "http://jaeger-collector.garden.svc.cluster.local:4318/v1/traces",
        ),
        APP_ENV=os.getenv("APP_ENV", "development"),
        APP_VERSION=os.getenv("APP_VERSION", "1.0.0"),
        LOG_LEVEL=os.getenv("LOG_LEVEL", "INFO").upper(),
    )
