from flask import Blueprint, current_app, request

from garden.errors import ValidationError
from garden.http import failure, page_args, page_count, present_garden, success
from garden.store import get_store
from garden.validation import clean_garden

gardens_api = Blueprint("gardens_api", __name__)

SEARCH_FIELDS = ("name", "description")


def _not_found(what="Garden"):
    return failure(f"{what} not found", 404)


@gardens_api.route("", methods=["GET"])
def list_gardens():
    store = get_store()
    limit, page = page_args()
    filters = {k: request.args[k] for k in ("location", "gardenType") if request.args.get(k)}
    if request.args.get("isActive") is not None:
        filters["isActive"] = request.args["isActive"] == "true"
    search = request.args.get("search")

    gardens = store.find(
        "gardens", filters, search, SEARCH_FIELDS,
        sort=request.args.get("sort", "-createdAt"), skip=(page - 1) * limit, limit=limit,
    )
    total = store.count("gardens", filters, search, SEARCH_FIELDS)
    return success(
        [present_garden(g, store) for g in gardens],
        count=len(gardens), total=total, page=page, pages=page_count(total, limit),
    )


@gardens_api.route("/<garden_id>", methods=["GET"])
def get_garden(garden_id):
    store = get_store()
    garden = store.get("gardens", garden_id)
    if garden is None:
        return _not_found()
    return success(present_garden(garden, store))


@gardens_api.route("", methods=["POST"])
def create_garden():
    store = get_store()
    try:
        data = clean_garden(request.get_json(silent=True))
    except ValidationError as e:
        return failure("Error creating garden", 400, e)

    garden = store.insert("gardens", data)
    current_app.logger.info("Garden %s created", garden["_id"])
    return success(present_garden(garden, store), "Garden created successfully", 201)


@gardens_api.route("/<garden_id>", methods=["PUT"])
def update_garden(garden_id):
    store = get_store()
    try:
        changes = clean_garden(request.get_json(silent=True), partial=True)
    except ValidationError as e:
        return failure("Error updating garden", 400, e)

    garden = store.update("gardens", garden_id, changes)
    if garden is None:
        return _not_found()
    return success(present_garden(garden, store), "Garden updated successfully")


@gardens_api.route("/<garden_id>/plants/<plant_id>", methods=["POST"])
def add_plant_to_garden(garden_id, plant_id):
    store = get_store()
    garden = store.get("gardens", garden_id)
    if garden is None:
        return _not_found()
    if store.get("plants", plant_id) is None:
        return _not_found("Plant")

    plants = list(garden.get("plants") or [])
    if plant_id not in plants:
        plants.append(plant_id)
        garden = store.update("gardens", garden_id, {"plants": plants})
    return success(present_garden(garden, store), "Plant added to garden successfully")


@gardens_api.route("/<garden_id>/plants/<plant_id>", methods=["DELETE"])
def remove_plant_from_garden(garden_id, plant_id):
    store = get_store()
    garden = store.get("gardens", garden_id)
    if garden is None:
        return _not_found()

    plants = [p for p in garden.get("plants") or [] if p != plant_id]
    garden = store.update("gardens", garden_id, {"plants": plants})
    return success(present_garden(garden, store), "Plant removed from garden successfully")


@gardens_api.route("/<garden_id>", methods=["DELETE"])
def delete_garden(garden_id):
    garden = get_store().delete("gardens", garden_id)
    if garden is None:
        return _not_found()
    return success(garden, "Garden deleted successfully")
