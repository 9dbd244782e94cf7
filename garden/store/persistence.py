"""JSON file persistence for the memory store."""
import json
import logging
import os

from garden.growth import dump_record, format_date, load_record, utcnow

logger = logging.getLogger(__name__)

PERSISTED_COLLECTIONS = ("plants", "gardens", "layouts")


def save_data(data_file, collections, id_counters):
    try:
        os.makedirs(os.path.dirname(os.path.abspath(data_file)), exist_ok=True)
        payload = {name: [dump_record(r) for r in collections.get(name, [])] for name in PERSISTED_COLLECTIONS}
        payload["idCounters"] = id_counters
        payload["savedAt"] = format_date(utcnow())
        with open(data_file, "w", encoding="utf-8") as fh:
            json.dump(payload, fh, indent=2)
        logger.info("Data saved to %s", data_file)
        return True
    except (OSError, TypeError, ValueError):
        logger.exception("Error saving data to %s", data_file)
        return False


def load_data(data_file):
    if not has_saved_data(data_file):
        return None
    try:
        with open(data_file, encoding="utf-8") as fh:
            raw = json.load(fh)
        data = {name: [load_record(r) for r in raw.get(name) or []] for name in PERSISTED_COLLECTIONS}
        data["idCounters"] = raw.get("idCounters") or {}
        logger.info("Loaded data from %s (saved at %s)", data_file, raw.get("savedAt"))
        return data
    except (OSError, TypeError, ValueError, AttributeError):
        logger.exception("Error loading data from %s", data_file)
        return None


def has_saved_data(data_file):
    return os.path.exists(data_file)
