from garden.errors import ValidationError
from garden.growth import MEDIA_TYPES, PLANT_DATE_FIELDS, WATERING_DAYS, parse_date

PLANT_ENUMS = {
    "wateringFrequency": tuple(WATERING_DAYS),
    "sunlight": ("full-sun", "partial-sun", "partial-shade", "full-shade"),
    "location": ("indoor", "outdoor", "greenhouse", "balcony"),
    "healthStatus": ("excellent", "good", "fair", "poor", "critical"),
}
PLANT_LIMITS = {"name": 100, "species": 150, "description": 1000, "careNotes": 2000}
PLANT_DEFAULTS = {
    "category": "leafy-vegetable",
    "isPriority": True,
    "wateringFrequency": "weekly",
    "sunlight": "partial-sun",
    "location": "indoor",
    "healthStatus": "good",
    "photo": None,
    "tags": [],
}

GARDEN_ENUMS = {
    "location": ("front-yard", "backyard", "balcony", "indoor", "rooftop", "greenhouse", "community"),
    "size": ("small", "medium", "large", "extra-large"),
    "gardenType": ("flower", "vegetable", "herb", "succulent", "tropical", "mixed"),
    "climate": ("tropical", "subtropical", "temperate", "mediterranean", "arid", "continental"),
    "soilType": ("clay", "sandy", "loamy", "peaty", "chalky", "silty"),
}
GARDEN_LIMITS = {"name": 100, "description": 1000, "notes": 2000}
GARDEN_DEFAULTS = {
    "description": None,
    "location": "backyard",
    "size": "medium",
    "gardenType": "mixed",
    "climate": "temperate",
    "soilType": "loamy",
    "notes": None,
    "isActive": True,
    "plants": [],
}
GARDEN_FIELDS = ("name",) + tuple(GARDEN_DEFAULTS)

LAYOUT_LIMITS = {"name": 100, "description": 1000}
LAYOUT_DEFAULTS = {"description": None, "image": None, "size": None, "cropType": None}

STAGE_FIELDS = ("name", "description", "notes", "date") + MEDIA_TYPES

# fields set only by the store
PROTECTED_FIELDS = ("_id", "id", "createdAt", "updatedAt")
# changed through the version endpoints only
GROWTH_FIELDS = ("currentVersion", "versions", "versionNotes")


def _require_mapping(payload):
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise ValidationError("Request body must be a JSON object")
    return {k: v for k, v in payload.items() if k not in PROTECTED_FIELDS}


def _check_name(data, label, partial):
    if "name" in data or not partial:
        name = data.get("name")
        if not isinstance(name, str) or not name.strip():
            raise ValidationError(f"{label} name is required")
        data["name"] = name.strip()


def _check_strings(data, limits):
    for field, limit in limits.items():
        value = data.get(field)
        if value is None:
            continue
        if not isinstance(value, str):
            raise ValidationError(f"{field} must be a string")
        value = value.strip()
        if len(value) > limit:
            raise ValidationError(f"{field} cannot exceed {limit} characters")
        data[field] = value


def _check_enums(data, enums):
    for field, allowed in enums.items():
        if field in data and data[field] not in allowed:
            raise ValidationError(
                f"`{data[field]}` is not a valid value for {field}; expected one of {', '.join(allowed)}"
            )


def _check_bool(data, field):
    if field in data and not isinstance(data[field], bool):
        raise ValidationError(f"{field} must be a boolean")


def _check_dates(data, fields):
    for field in fields:
        if data.get(field) is not None:
            try:
                data[field] = parse_date(data[field])
            except (TypeError, ValueError):
                raise ValidationError(f"{field} is not a valid date")


def clean_plant(payload, partial=False):
    data = _require_mapping(payload)
    for field in GROWTH_FIELDS:
        data.pop(field, None)
    _check_name(data, "Plant", partial)
    _check_strings(data, PLANT_LIMITS)
    _check_enums(data, PLANT_ENUMS)
    _check_bool(data, "isPriority")
    _check_dates(data, PLANT_DATE_FIELDS)
    tags = data.get("tags")
    if tags is not None:
        if not isinstance(tags, list) or not all(isinstance(t, str) for t in tags):
            raise ValidationError("tags must be a list of strings")
        data["tags"] = [t.strip() for t in tags]
    if not partial:
        for field, default in PLANT_DEFAULTS.items():
            data.setdefault(field, default)
    return data


def clean_stage(payload):
    data = _require_mapping(payload)
    unknown = set(data) - set(STAGE_FIELDS)
    if unknown:
        raise ValidationError(f"Unknown version fields: {', '.join(sorted(unknown))}")
    _check_dates(data, ("date",))
    return data


def _plant_id(entry):
    # populated plants may be sent back as records
    if isinstance(entry, dict):
        entry = entry.get("_id")
    if not isinstance(entry, str) or not entry.strip():
        raise ValidationError("plants must be a list of plant ids")
    return entry


def clean_garden(payload, partial=False):
    data = _require_mapping(payload)
    _check_name(data, "Garden", partial)
    _check_strings(data, GARDEN_LIMITS)
    _check_enums(data, GARDEN_ENUMS)
    _check_bool(data, "isActive")
    plants = data.get("plants")
    if plants is not None:
        if not isinstance(plants, list):
            raise ValidationError("plants must be a list of plant ids")
        data["plants"] = [_plant_id(p) for p in plants]
    data = {k: v for k, v in data.items() if k in GARDEN_FIELDS}
    if not partial:
        for field, default in GARDEN_DEFAULTS.items():
            data.setdefault(field, default)
    return data


def clean_layout(payload, partial=False):
    data = _require_mapping(payload)
    _check_name(data, "Layout", partial)
    _check_strings(data, LAYOUT_LIMITS)
    _check_bool(data, "isActive")
    if "position" in data and (not isinstance(data["position"], int) or isinstance(data["position"], bool)):
        raise ValidationError("position must be an integer")
    if not partial:
        for field, default in LAYOUT_DEFAULTS.items():
            data.setdefault(field, default)
    return data
