from datetime import datetime

from garden.extensions import db
from garden.growth import as_utc, dump_versions, load_versions, utcnow


class RecordMixin:
    # record key -> column attribute
    FIELDS = {}
    HAS_EXTRA = False

    def to_record(self):
        record = dict(self.extra or {}) if self.HAS_EXTRA else {}
        record["_id"] = self.id
        for key, attr in self.FIELDS.items():
            value = getattr(self, attr)
            if isinstance(value, datetime):
                value = as_utc(value)
            record[key] = value
        return record

    def apply(self, changes):
        extra = dict(self.extra or {}) if self.HAS_EXTRA else None
        for key, value in changes.items():
            if key == "_id":
                continue
            attr = self.FIELDS.get(key)
            if attr:
                setattr(self, attr, value)
            elif extra is not None:
                extra[key] = value
        if extra is not None:
            self.extra = extra
        return self

    @classmethod
    def column(cls, key):
        if key == "_id":
            return cls.id
        attr = cls.FIELDS.get(key)
        return getattr(cls, attr) if attr else None


class User(db.Model):
    id = db.Column(db.String(64), primary_key=True)
    username = db.Column(db.String(80), unique=True, nullable=False)
    password_hash = db.Column(db.String(128), nullable=False)
    role = db.Column(db.String(20), nullable=False, default="user")
    created_at = db.Column(db.DateTime(timezone=True), default=utcnow)

    def to_record(self):
        return {
            "_id": self.id,
            "username": self.username,
            "passwordHash": self.password_hash,
            "role": self.role,
            "createdAt": as_utc(self.created_at),
        }


class Session(db.Model):
    token_id = db.Column(db.String(64), primary_key=True)
    user_id = db.Column(db.String(64), index=True, nullable=False)
    created_at = db.Column(db.DateTime(timezone=True), default=utcnow)


class Plant(RecordMixin, db.Model):
    FIELDS = {
        "name": "name",
        "species": "species",
        "description": "description",
        "category": "category",
        "isPriority": "is_priority",
        "wateringFrequency": "watering_frequency",
        "sunlight": "sunlight",
        "location": "location",
        "healthStatus": "health_status",
        "careNotes": "care_notes",
        "photo": "photo",
        "tags": "tags",
        "currentVersion": "current_version",
        "versions": "versions",
        "lastWatered": "last_watered",
        "nextWatering": "next_watering",
        "plantedDate": "planted_date",
        "expectedHarvestDate": "expected_harvest_date",
        "createdAt": "created_at",
        "updatedAt": "updated_at",
    }
    HAS_EXTRA = True

    id = db.Column(db.String(64), primary_key=True)
    name = db.Column(db.String(100), nullable=False)
    species = db.Column(db.String(150))
    description = db.Column(db.String(1000))
    category = db.Column(db.String(50), index=True)
    is_priority = db.Column(db.Boolean, default=True)
    watering_frequency = db.Column(db.String(20))
    sunlight = db.Column(db.String(20))
    location = db.Column(db.String(20), index=True)
    health_status = db.Column(db.String(20), index=True)
    care_notes = db.Column(db.String(2000))
    photo = db.Column(db.String(255))
    tags = db.Column(db.JSON, default=list)
    current_version = db.Column(db.String(2), index=True)
    versions = db.Column(db.JSON)
    last_watered = db.Column(db.DateTime(timezone=True))
    next_watering = db.Column(db.DateTime(timezone=True), index=True)
    planted_date = db.Column(db.DateTime(timezone=True))
    expected_harvest_date = db.Column(db.DateTime(timezone=True))
    extra = db.Column(db.JSON)
    created_at = db.Column(db.DateTime(timezone=True), index=True)
    updated_at = db.Column(db.DateTime(timezone=True))

    def to_record(self):
        record = super().to_record()
        record["versions"] = load_versions(self.versions)
        return record

    def apply(self, changes):
        if "versions" in changes:
            changes = dict(changes, versions=dump_versions(changes["versions"]))
        return super().apply(changes)


class Garden(RecordMixin, db.Model):
    FIELDS = {
        "name": "name",
        "description": "description",
        "location": "location",
        "size": "size",
        "gardenType": "garden_type",
        "climate": "climate",
        "soilType": "soil_type",
        "notes": "notes",
        "isActive": "is_active",
        "plants": "plant_ids",
        "createdAt": "created_at",
        "updatedAt": "updated_at",
    }

    id = db.Column(db.String(64), primary_key=True)
    name = db.Column(db.String(100), nullable=False)
    description = db.Column(db.String(1000))
    location = db.Column(db.String(20), index=True)
    size = db.Column(db.String(20))
    garden_type = db.Column(db.String(20), index=True)
    climate = db.Column(db.String(20))
    soil_type = db.Column(db.String(20))
    notes = db.Column(db.String(2000))
    is_active = db.Column(db.Boolean, default=True)
    # plain id references, no foreign keys
    plant_ids = db.Column(db.JSON, default=list)
    created_at = db.Column(db.DateTime(timezone=True), index=True)
    updated_at = db.Column(db.DateTime(timezone=True))


class Layout(RecordMixin, db.Model):
    FIELDS = {
        "name": "name",
        "description": "description",
        "image": "image",
        "size": "size",
        "cropType": "crop_type",
        "position": "position",
        "isActive": "is_active",
        "createdAt": "created_at",
        "updatedAt": "updated_at",
    }
    HAS_EXTRA = True

    id = db.Column(db.String(64), primary_key=True)
    name = db.Column(db.String(100), nullable=False)
    description = db.Column(db.String(1000))
    image = db.Column(db.String(255))
    size = db.Column(db.String(20))
    crop_type = db.Column(db.String(50))
    position = db.Column(db.Integer, index=True)
    is_active = db.Column(db.Boolean, default=True)
    extra = db.Column(db.JSON)
    created_at = db.Column(db.DateTime(timezone=True))
    updated_at = db.Column(db.DateTime(timezone=True))
