from flask import Blueprint, current_app, request

from garden.errors import ValidationError
from garden.growth import (
    MEDIA_TYPES, VERSION_ORDER, build_versions, compute_next_watering,
    is_valid_version, next_version, utcnow, version_index,
)
from garden.http import failure, page_args, page_count, present_plant, success
from garden.store import get_store
from garden.validation import clean_plant, clean_stage

plants_api = Blueprint("plants_api", __name__)

SEARCH_FIELDS = ("name", "species", "description")
FILTER_PARAMS = ("location", "healthStatus", "category", "wateringFrequency")


def _not_found():
    return failure("Plant not found", 404)


def _with_watering(plant, changes):
    """Recompute nextWatering when the schedule inputs change."""
    if "lastWatered" in changes or "wateringFrequency" in changes:
        merged = dict(plant or {}, **changes)
        changes["nextWatering"] = compute_next_watering(
            merged.get("wateringFrequency"), merged.get("lastWatered")
        )
    return changes


@plants_api.route("", methods=["GET"])
def list_plants():
    store = get_store()
    limit, page = page_args()
    filters = {k: request.args[k] for k in FILTER_PARAMS if request.args.get(k)}
    search = request.args.get("search")
    sort = request.args.get("sort", "-createdAt")

    plants = store.find(
        "plants", filters, search, SEARCH_FIELDS,
        sort=["-isPriority", sort], skip=(page - 1) * limit, limit=limit,
    )
    total = store.count("plants", filters, search, SEARCH_FIELDS)
    return success(
        [present_plant(p) for p in plants],
        count=len(plants), total=total, page=page, pages=page_count(total, limit),
    )


@plants_api.route("/<plant_id>", methods=["GET"])
def get_plant(plant_id):
    plant = get_store().get("plants", plant_id)
    if plant is None:
        return _not_found()
    return success(present_plant(plant))


@plants_api.route("", methods=["POST"])
def create_plant():
    payload = request.get_json(silent=True) or {}
    try:
        if not isinstance(payload, dict):
            raise ValidationError("Request body must be a JSON object")
        start = payload.get("currentVersion") or "v1"
        if not is_valid_version(start):
            raise ValidationError(f"Invalid version {start}. Use v1, v2, v3, or v4")
        data = clean_plant(payload)
    except ValidationError as e:
        return failure("Error creating plant", 400, e)

    now = utcnow()
    data["currentVersion"] = start
    data["versions"] = build_versions(start, payload.get("versionNotes"), now)
    data.setdefault("plantedDate", now)
    if data.get("lastWatered"):
        _with_watering(None, data)

    plant = get_store().insert("plants", data)
    current_app.logger.info("Plant %s created at %s", plant["_id"], start)
    return success(present_plant(plant), "Plant created successfully", 201)


@plants_api.route("/<plant_id>", methods=["PUT"])
def update_plant(plant_id):
    store = get_store()
    plant = store.get("plants", plant_id)
    if plant is None:
        return _not_found()
    try:
        changes = clean_plant(request.get_json(silent=True), partial=True)
    except ValidationError as e:
        return failure("Error updating plant", 400, e)

    plant = store.update("plants", plant_id, _with_watering(plant, changes))
    return success(present_plant(plant), "Plant updated successfully")


@plants_api.route("/<plant_id>/version/<version>", methods=["PATCH"])
def update_version(plant_id, version):
    store = get_store()
    plant = store.get("plants", plant_id)
    if plant is None:
        return _not_found()
    if not is_valid_version(version):
        return failure("Invalid version. Use v1, v2, v3, or v4", 400)
    try:
        stage_changes = clean_stage(request.get_json(silent=True))
    except ValidationError as e:
        return failure("Error updating version", 400, e)

    versions = plant["versions"]
    versions[version] = dict(versions[version], **stage_changes)
    versions[version]["date"] = stage_changes.get("date") or utcnow()

    changes = {"versions": versions}
    if version_index(version) > version_index(plant.get("currentVersion")):
        changes["currentVersion"] = version

    plant = store.update("plants", plant_id, changes)
    return success(present_plant(plant), f"Version {version.upper()} updated successfully")


@plants_api.route("/<plant_id>/version/<version>/media/<media_type>", methods=["DELETE"])
def delete_version_media(plant_id, version, media_type):
    store = get_store()
    plant = store.get("plants", plant_id)
    if plant is None:
        return _not_found()
    if not is_valid_version(version):
        return failure("Invalid version", 400)
    if media_type not in MEDIA_TYPES:
        return failure("Invalid media type. Use image, video, or file", 400)

    versions = plant["versions"]
    versions[version][media_type] = None
    plant = store.update("plants", plant_id, {"versions": versions})
    current_app.logger.info("Deleted %s from plant %s version %s", media_type, plant_id, version)
    return success(present_plant(plant), f"{media_type.capitalize()} deleted successfully")


@plants_api.route("/<plant_id>/advance", methods=["PATCH"])
def advance_plant(plant_id):
    store = get_store()
    plant = store.get("plants", plant_id)
    if plant is None:
        return _not_found()

    upcoming = next_version(plant.get("currentVersion"))
    if upcoming is None:
        return failure(f"Plant is already at {VERSION_ORDER[-1].upper()} (fully grown)", 400)

    body = request.get_json(silent=True) or {}
    if not isinstance(body, dict):
        return failure("Error advancing plant", 400, "Request body must be a JSON object")
    versions = plant["versions"]
    versions[upcoming] = dict(
        versions[upcoming],
        date=utcnow(),
        notes=body.get("notes") or f"Advanced to {upcoming.upper()}",
    )
    plant = store.update("plants", plant_id, {"currentVersion": upcoming, "versions": versions})
    return success(present_plant(plant), f"Plant advanced to {upcoming.upper()}")


@plants_api.route("/<plant_id>/water", methods=["PATCH"])
def water_plant(plant_id):
    store = get_store()
    plant = store.get("plants", plant_id)
    if plant is None:
        return _not_found()

    changes = _with_watering(plant, {"lastWatered": utcnow()})
    plant = store.update("plants", plant_id, changes)
    return success(present_plant(plant), "Plant watered successfully")


@plants_api.route("/<plant_id>", methods=["DELETE"])
def delete_plant(plant_id):
    plant = get_store().delete("plants", plant_id)
    if plant is None:
        return _not_found()
    return success(plant, "Plant deleted successfully")


@plants_api.route("/filter/by-version/<version>", methods=["GET"])
def plants_by_version(version):
    if not is_valid_version(version):
        return failure("Invalid version. Use v1, v2, v3, or v4", 400)
    plants = get_store().find(
        "plants", {"currentVersion": version}, sort=["-isPriority", "-createdAt"], limit=100
    )
    return success([present_plant(p) for p in plants], count=len(plants))


@plants_api.route("/status/needs-water", methods=["GET"])
def plants_needing_water():
    plants = get_store().find("plants", {"nextWatering": ("<=", utcnow())}, sort="nextWatering")
    return success([present_plant(p) for p in plants], count=len(plants))
