import time

from flask import Blueprint, current_app, jsonify

from garden.growth import format_date, utcnow
from garden.store import get_store

health_api = Blueprint("health_api", __name__)

STARTED_AT = time.monotonic()


def _now():
    return format_date(utcnow())


@health_api.route("", methods=["GET"])
def health():
    return jsonify({
        "status": "healthy",
        "timestamp": _now(),
        "uptime": round(time.monotonic() - STARTED_AT, 3),
        "environment": current_app.config["APP_ENV"],
        "version": current_app.config["APP_VERSION"],
    })


@health_api.route("/live", methods=["GET"])
def live():
    return jsonify({"status": "alive", "timestamp": _now()})


@health_api.route("/ready", methods=["GET"])
def ready():
    store = get_store()
    healthy = store.ping()
    checks = {store.backend: {"status": "connected" if healthy else "disconnected", "healthy": healthy}}
    if not healthy:
        return jsonify({"status": "not ready", "timestamp": _now(), "checks": checks}), 503
    return jsonify({"status": "ready", "timestamp": _now(), "checks": checks})
