import shutil

import requests
from flask import Blueprint, current_app, jsonify

system_api = Blueprint("system_api", __name__)

ADVICE_URL = "https://api.adviceslip.com/advice"
ZENQUOTES_URL = "https://zenquotes.io/api/random"
QUOTE_TIMEOUT = 5


@system_api.route("/api/system/disk", methods=["GET"])
def disk_usage():
    for path in (current_app.config["UPLOAD_FOLDER"], "."):
        try:
            usage = shutil.disk_usage(path)
        except OSError:
            continue
        return jsonify({"free": usage.free, "total": usage.total})
    return jsonify({"free": 0, "total": 0})


def _fetch_json(url):
    response = requests.get(url, timeout=QUOTE_TIMEOUT)
    response.raise_for_status()
    return response.json()


@system_api.route("/api/quote", methods=["GET"])
def advice():
    try:
        slip = (_fetch_json(ADVICE_URL) or {}).get("slip") or {}
    except (requests.RequestException, ValueError) as e:
        current_app.logger.error("Advice API error: %s", e)
        return jsonify({"error": str(e) or "Network error - API not reachable", "advice": None, "id": None}), 503
    return jsonify({"advice": slip.get("advice") or "No advice available", "id": slip.get("id")})


@system_api.route("/api/zenquote", methods=["GET"])
def zen_quote():
    try:
        quotes = _fetch_json(ZENQUOTES_URL) or [{}]
        first = quotes[0]
    except (requests.RequestException, ValueError, IndexError, KeyError, TypeError) as e:
        current_app.logger.error("ZenQuotes API error: %s", e)
        return jsonify({"error": str(e) or "Network error - API not reachable", "quote": None, "author": None}), 503
    return jsonify({"quote": first.get("q") or "No quote available", "author": first.get("a") or "Unknown"})
