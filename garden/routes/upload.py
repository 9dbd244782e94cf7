import os
import re
import secrets
import time

from flask import Blueprint, current_app, request, send_from_directory

from garden.http import failure, success
from garden.media import optimize_image

upload_api = Blueprint("upload_api", __name__)

ALLOWED_EXTENSIONS = re.compile(r"\.(jpeg|jpg|png|gif|webp|mp4|mov|avi|webm)$", re.IGNORECASE)


def _unique_name(original):
    ext = os.path.splitext(original)[1].lower()
    return f"{int(time.time() * 1000)}-{secrets.token_hex(4)}{ext}"


@upload_api.route("/api/upload", methods=["POST"])
def upload_file():
    upload = request.files.get("file")
    if upload is None or not upload.filename:
        return failure("No file uploaded", 400)

    mimetype = upload.mimetype or ""
    is_image = mimetype.startswith("image/")
    is_video = mimetype.startswith("video/")
    if not ALLOWED_EXTENSIONS.search(upload.filename) or not (is_image or is_video):
        return failure(f"Invalid file type: {mimetype}. Only images and videos are allowed.", 400)

    folder = current_app.config["UPLOAD_FOLDER"]
    os.makedirs(folder, exist_ok=True)
    path = os.path.join(folder, _unique_name(upload.filename))
    upload.save(path)

    if is_image:
        path = optimize_image(path)
        if path.endswith(".jpg"):
            mimetype = "image/jpeg"

    filename = os.path.basename(path)
    size = os.path.getsize(path)
    current_app.logger.info(
        "File uploaded: %s (%.2fMB) - %s", upload.filename, size / 1024 / 1024, "VIDEO" if is_video else "IMAGE"
    )
    return success({
        "url": f"/uploads/{filename}",
        "filename": filename,
        "originalName": upload.filename,
        "type": "video" if is_video else "image",
        "mimetype": mimetype,
        "size": size,
    }, "File uploaded successfully")


@upload_api.route("/uploads/<path:filename>", methods=["GET"])
def uploaded_file(filename):
    return send_from_directory(current_app.config["UPLOAD_FOLDER"], filename)
