"""Starter layouts, leafy vegetables and gardens for an empty store."""
import logging
from datetime import timedelta

from garden.growth import VERSION_ORDER, blank_stage, utcnow

logger = logging.getLogger(__name__)

LAYOUTS = [
    ("Leafy Greens Bed A", "Main bed for spinach and lettuce", "/images/hero-image.jpg", "large", "leafy-vegetables"),
    ("Herb Garden", "Coriander, mint, and other herbs", None, "medium", "herbs"),
    ("Microgreens Tray", "Fast growing microgreens", None, "small", "microgreens"),
]

# name, species, description, sunlight, location, health, care notes,
# current stage, days since planted, days to harvest, stage ages in days and notes
PLANTS = [
    ("Spinach", "Spinacia oleracea", "Nutritious leafy green, rich in iron", "partial-sun", "outdoor",
     "excellent", "Keep soil moist. Harvest outer leaves first.", "v3", 30, 15,
     [(30, "Added compost and prepared rows"), (20, "Germination successful, thin seedlings"),
      (10, "Healthy growth, regular watering")]),
    ("Lettuce", "Lactuca sativa", "Crisp salad green, fast growing", "partial-sun", "outdoor",
     "good", "Keep cool, water regularly", "v2", 14, 21,
     [(14, "Soil enriched with organic matter"), (7, "Healthy sprouts, good germination rate")]),
    ("Coriander", "Coriandrum sativum", "Aromatic herb for cooking", "partial-shade", "indoor",
     "excellent", "Keep soil consistently moist", "v4", 45, -5,
     [(45, "Used potting mix"), (35, "Good germination"), (20, "Thinned and growing well"),
      (5, "Harvesting leaves as needed")]),
    ("Mint", "Mentha", "Refreshing herb, grows vigorously", "partial-shade", "indoor",
     "excellent", "Keep contained, spreads quickly", "v4", 60, None,
     [(60, "Potted cutting"), (50, "Roots established"), (30, "Growing vigorously"), (10, "Regular harvesting")]),
    ("Methi (Fenugreek)", "Trigonella foenum-graecum", "Popular Indian leafy vegetable", "full-sun", "outdoor",
     "good", "Fast growing, harvest in 3-4 weeks", "v1", 0, 25,
     [(0, "Soil prepared today")]),
    ("Palak (Indian Spinach)", "Beta vulgaris", "Popular leafy green for Indian dishes", "partial-sun", "outdoor",
     "excellent", "Multiple harvests possible", "v2", 10, 20,
     [(10, "Added manure"), (5, "Good germination")]),
]

GARDENS = [
    ("Kitchen Garden", "Daily use leafy vegetables", "backyard", "medium", "vegetable", (0, 1, 4, 5)),
    ("Herb Corner", "Fresh herbs for cooking", "indoor", "small", "herb", (2, 3)),
]


def _plant_record(row, now):
    (name, species, description, sunlight, location, health, care_notes,
     current, planted_days, harvest_days, stages) = row
    versions = {}
    for index, version in enumerate(VERSION_ORDER):
        stage = blank_stage(version)
        if index < len(stages):
            age, notes = stages[index]
            stage["date"] = now - timedelta(days=age)
            stage["notes"] = notes
        versions[version] = stage
    return {
        "name": name,
        "species": species,
        "description": description,
        "category": "leafy-vegetable",
        "isPriority": True,
        "wateringFrequency": "daily",
        "sunlight": sunlight,
        "location": location,
        "healthStatus": health,
        "careNotes": care_notes,
        "photo": None,
        "tags": [],
        "currentVersion": current,
        "versions": versions,
        "lastWatered": None,
        "nextWatering": None,
        "plantedDate": now - timedelta(days=planted_days),
        "expectedHarvestDate": None if harvest_days is None else now + timedelta(days=harvest_days),
    }


def seed_sample_data(store, now=None):
    now = now or utcnow()
    for position, (name, description, image, size, crop_type) in enumerate(LAYOUTS, start=1):
        store.insert("layouts", {
            "name": name,
            "description": description,
            "image": image,
            "size": size,
            "cropType": crop_type,
            "position": position,
            "isActive": True,
        })

    plant_ids = [store.insert("plants", _plant_record(row, now))["_id"] for row in PLANTS]

    for name, description, location, size, garden_type, members in GARDENS:
        store.insert("gardens", {
            "name": name,
            "description": description,
            "location": location,
            "size": size,
            "gardenType": garden_type,
            "climate": "temperate",
            "soilType": "loamy",
            "notes": None,
            "isActive": True,
            "plants": [plant_ids[i] for i in members],
        })

    logger.info(
        "Store seeded with %d plants, %d gardens, %d layouts",
        len(PLANTS), len(GARDENS), len(LAYOUTS),
    )
