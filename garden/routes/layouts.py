from flask import Blueprint, request

from garden.errors import ValidationError
from garden.http import failure, success
from garden.store import get_store
from garden.validation import clean_layout

layouts_api = Blueprint("layouts_api", __name__)


@layouts_api.route("", methods=["GET"])
def list_layouts():
    layouts = get_store().find("layouts", {"isActive": True}, sort="position")
    return success(layouts, count=len(layouts))


@layouts_api.route("/<layout_id>", methods=["GET"])
def get_layout(layout_id):
    layout = get_store().get("layouts", layout_id)
    if layout is None:
        return failure("Layout not found", 404)
    return success(layout)


@layouts_api.route("", methods=["POST"])
def create_layout():
    store = get_store()
    try:
        data = clean_layout(request.get_json(silent=True))
    except ValidationError as e:
        return failure("Error creating layout", 400, e)

    data["position"] = store.count("layouts") + 1
    data["isActive"] = True
    return success(store.insert("layouts", data), "Layout created successfully", 201)


@layouts_api.route("/<layout_id>", methods=["PUT"])
def update_layout(layout_id):
    try:
        changes = clean_layout(request.get_json(silent=True), partial=True)
    except ValidationError as e:
        return failure("Error updating layout", 400, e)

    layout = get_store().update("layouts", layout_id, changes)
    if layout is None:
        return failure("Layout not found", 404)
    return success(layout, "Layout updated successfully")


@layouts_api.route("/<layout_id>", methods=["DELETE"])
def delete_layout(layout_id):
    layout = get_store().delete("layouts", layout_id)
    if layout is None:
        return failure("Layout not found", 404)
    return success(layout, "Layout deleted successfully")
