"""Growth stages and watering schedule for plants.

A plant moves through four fixed stages, ``v1`` (prepared soil) to ``v4``
(ready to harvest). Stages only ever advance.
"""
from datetime import datetime, timedelta, timezone

VERSION_ORDER = ("v1", "v2", "v3", "v4")
MEDIA_TYPES = ("image", "video", "file")

STAGE_TEMPLATES = {
    "v1": ("Prepared Soil", "Ready for sowing"),
    "v2": ("Sprouts", "Seeds germinated"),
    "v3": ("Growing", "Medium growth phase"),
    "v4": ("Ready to Harvest", "Fully grown"),
}

WATERING_DAYS = {
    "daily": 1,
    "every-2-days": 2,
    "every-3-days": 3,
    "weekly": 7,
    "bi-weekly": 14,
    "monthly": 30,
}

PLANT_DATE_FIELDS = ("lastWatered", "nextWatering", "plantedDate", "expectedHarvestDate")
RECORD_DATE_FIELDS = ("createdAt", "updatedAt")


def utcnow():
    return datetime.now(timezone.utc)


def as_utc(value):
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def parse_date(value):
    if value is None or isinstance(value, datetime):
        return as_utc(value)
    if isinstance(value, (int, float)):
        return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
    text = str(value).strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return as_utc(datetime.fromisoformat(text))


def format_date(value):
    if value is None:
        return None
    return as_utc(value).isoformat().replace("+00:00", "Z")


def version_index(version):
    try:
        return VERSION_ORDER.index(version)
    except ValueError:
        return -1


def is_valid_version(version):
    return version in VERSION_ORDER


def next_version(current):
    """Return the stage after ``current``, or None once fully grown."""
    index = version_index(current)
    if index >= len(VERSION_ORDER) - 1:
        return None
    return VERSION_ORDER[index + 1]


def blank_stage(version):
    name, description = STAGE_TEMPLATES[version]
    return {
        "name": name,
        "description": description,
        "image": None,
        "video": None,
        "file": None,
        "date": None,
        "notes": None,
    }


def build_versions(start="v1", notes=None, now=None):
    """Stages up to ``start`` are dated, earlier ones are marked completed."""
    now = now or utcnow()
    start_index = version_index(start)
    versions = {}
    for index, version in enumerate(VERSION_ORDER):
        stage = blank_stage(version)
        if index <= start_index:
            stage["date"] = now
        if index < start_index:
            stage["notes"] = "Completed"
        elif index == start_index:
            stage["notes"] = notes
        versions[version] = stage
    return versions


def compute_next_watering(frequency, last_watered=None):
    days = WATERING_DAYS.get(frequency, 7)
    return (as_utc(last_watered) or utcnow()) + timedelta(days=days)


def days_since(value, now=None):
    if value is None:
        return 0
    delta = abs((now or utcnow()) - as_utc(value))
    days, remainder = divmod(delta.total_seconds(), 86400)
    return int(days) + (1 if remainder else 0)


def needs_water(plant, now=None):
    next_watering = plant.get("nextWatering")
    if next_watering is None:
        return False
    return (now or utcnow()) >= as_utc(next_watering)


# --- Date (de)serialisation -----------------------------------------

def _convert_versions(versions, convert):
    return {
        key: dict(stage, date=convert(stage.get("date")))
        for key, stage in (versions or {}).items()
    }


def dump_versions(versions):
    return _convert_versions(versions, format_date)


def load_versions(versions):
    return _convert_versions(versions, parse_date)


def dump_record(record):
    out = dict(record)
    for field in PLANT_DATE_FIELDS + RECORD_DATE_FIELDS:
        if field in out:
            out[field] = format_date(out[field])
    if "versions" in out:
        out["versions"] = dump_versions(out["versions"])
    return out


def load_record(record):
    out = dict(record)
    for field in PLANT_DATE_FIELDS + RECORD_DATE_FIELDS:
        if field in out:
            out[field] = parse_date(out[field])
    if "versions" in out:
        out["versions"] = load_versions(out["versions"])
    return out
