import math
from datetime import datetime

from flask import jsonify, request
from flask.json.provider import DefaultJSONProvider

from garden.growth import days_since, format_date, needs_water


class GardenJSONProvider(DefaultJSONProvider):
    """Emit datetimes as ISO-8601 instead of HTTP dates."""

    @staticmethod
    def default(o):
        if isinstance(o, datetime):
            return format_date(o)
        return DefaultJSONProvider.default(o)


def success(data=None, message=None, status=200, **extra):
    body = {"success": True}
    if message:
        body["message"] = message
    body.update(extra)
    if data is not None:
        body["data"] = data
    return jsonify(body), status


def failure(message, status, error=None):
    body = {"success": False, "message": message}
    if error:
        body["error"] = str(error)
    return jsonify(body), status


def page_args(default_limit=50):
    try:
        limit = max(int(request.args.get("limit", default_limit)), 1)
        page = max(int(request.args.get("page", 1)), 1)
    except ValueError:
        limit, page = default_limit, 1
    return limit, page


def page_count(total, limit):
    return math.ceil(total / limit) if limit else 0


def present_plant(plant):
    plant["daysSincePlanted"] = days_since(plant.get("plantedDate"))
    plant["needsWater"] = needs_water(plant)
    return plant


def present_garden(garden, store):
    plants = []
    for plant_id in garden.get("plants") or []:
        plant = store.get("plants", plant_id)
        if plant is not None:
            plants.append(present_plant(plant))
    garden["plants"] = plants
    garden["plantCount"] = len(plants)
    return garden
