import logging
import os
import time

from PIL import Image, ImageOps, UnidentifiedImageError

logger = logging.getLogger(__name__)

MAX_DIMENSION = 1920
JPEG_QUALITY = 80


def optimize_image(path):
    """Shrink an image to fit MAX_DIMENSION square and re-encode it as JPEG.

    Returns the path of the optimised file, which has a ``.jpg`` extension.
    On failure the original file is left in place and its path is returned.
    """
    start = time.monotonic()
    original_size = os.path.getsize(path)
    target = os.path.splitext(path)[0] + ".jpg"
    temp_path = target + ".temp"
    try:
        with Image.open(path) as img:
            img = ImageOps.exif_transpose(img)
            img.thumbnail((MAX_DIMENSION, MAX_DIMENSION))
            if img.mode != "RGB":
                img = img.convert("RGB")
            img.save(temp_path, "JPEG", quality=JPEG_QUALITY, optimize=True, progressive=True)
    except (OSError, UnidentifiedImageError, ValueError):
        logger.exception("Image optimization failed for %s, keeping original", path)
        if os.path.exists(temp_path):
            os.remove(temp_path)
        return path

    if target != path:
        os.remove(path)
    os.replace(temp_path, target)
    final_size = os.path.getsize(target)
    logger.info(
        "Optimized %s in %.2fs: %.1fKB -> %.1fKB (saved %.1fKB)",
        os.path.basename(path), time.monotonic() - start,
        original_size / 1024, final_size / 1024, (original_size - final_size) / 1024,
    )
    return target
