from datetime import datetime, timedelta, timezone


def test_list_plants_returns_seeded_plants_with_versions(client):
    res = client.get("/api/plants")
    body = res.get_json()

    assert res.status_code == 200
    assert body["success"] is True
    assert body["total"] == 6
    assert body["count"] == len(body["data"]) == 6
    plant = body["data"][0]
    for key in ("_id", "name", "currentVersion", "versions", "daysSincePlanted", "needsWater"):
        assert key in plant
    assert set(plant["versions"]) == {"v1", "v2", "v3", "v4"}


def test_list_plants_filters_and_searches(client):
    res = client.get("/api/plants?location=indoor")
    names = {p["name"] for p in res.get_json()["data"]}
    assert names == {"Coriander", "Mint"}

    res = client.get("/api/plants?search=SPINACIA")
    assert [p["name"] for p in res.get_json()["data"]] == ["Spinach"]


def test_list_plants_paginates(client):
    body = client.get("/api/plants?limit=4&page=2").get_json()
    assert body["count"] == 2
    assert body["total"] == 6
    assert body["page"] == 2
    assert body["pages"] == 2


def test_list_plants_puts_priority_first(client, new_plant):
    new_plant(name="Weed", isPriority=False)
    new_plant(name="Kale")
    names = [p["name"] for p in client.get("/api/plants").get_json()["data"]]
    assert names[0] == "Kale"
    assert names[-1] == "Weed"


def test_create_plant_echoes_fields(client):
    res = client.post("/api/plants", json={
        "name": "Test Spinach",
        "species": "Spinacia oleracea",
        "category": "leafy-vegetable",
        "currentVersion": "v1",
    })
    body = res.get_json()

    assert res.status_code == 201
    assert body["success"] is True
    assert body["data"]["name"] == "Test Spinach"
    assert body["data"]["species"] == "Spinacia oleracea"
    assert body["data"]["healthStatus"] == "good"
    assert body["data"]["isPriority"] is True
    assert body["data"]["currentVersion"] == "v1"


def test_create_plant_at_later_version_dates_earlier_stages(new_plant):
    plant = new_plant(name="V3 Plant", currentVersion="v3", versionNotes="transplanted")
    versions = plant["versions"]

    assert plant["currentVersion"] == "v3"
    assert versions["v1"]["date"] and versions["v2"]["date"] and versions["v3"]["date"]
    assert versions["v4"]["date"] is None
    assert versions["v1"]["notes"] == "Completed"
    assert versions["v3"]["notes"] == "transplanted"
    assert versions["v4"]["name"] == "Ready to Harvest"


def test_create_plant_requires_name(client):
    res = client.post("/api/plants", json={"species": "Nameless"})
    body = res.get_json()
    assert res.status_code == 400
    assert body["success"] is False
    assert "name is required" in body["error"]


def test_create_plant_rejects_bad_enum_and_version(client):
    assert client.post("/api/plants", json={"name": "x", "sunlight": "moonlight"}).status_code == 400
    assert client.post("/api/plants", json={"name": "x", "currentVersion": "v9"}).status_code == 400


def test_get_missing_plant_returns_404(client):
    res = client.get("/api/plants/plants_0_0")
    assert res.status_code == 404
    assert res.get_json() == {"success": False, "message": "Plant not found"}


def test_update_plant(client, new_plant):
    plant = new_plant()
    res = client.put(f"/api/plants/{plant['_id']}", json={"healthStatus": "poor", "careNotes": "Aphids"})
    body = res.get_json()

    assert res.status_code == 200
    assert body["data"]["healthStatus"] == "poor"
    assert body["data"]["careNotes"] == "Aphids"
    assert body["data"]["name"] == "Test Spinach"


def test_update_plant_cannot_rewrite_growth_stage(client, new_plant):
    plant = new_plant()
    res = client.put(f"/api/plants/{plant['_id']}", json={"currentVersion": "v4"})
    assert res.get_json()["data"]["currentVersion"] == "v1"


def test_update_missing_plant_returns_404(client):
    assert client.put("/api/plants/nope", json={"name": "x"}).status_code == 404


def test_advance_plant(client, new_plant):
    plant = new_plant(currentVersion="v1")
    res = client.patch(f"/api/plants/{plant['_id']}/advance", json={})
    body = res.get_json()

    assert res.status_code == 200
    assert body["message"] == "Plant advanced to V2"
    assert body["data"]["currentVersion"] == "v2"
    assert body["data"]["versions"]["v2"]["notes"] == "Advanced to V2"
    assert body["data"]["versions"]["v2"]["date"]


def test_advance_plant_uses_notes(client, new_plant):
    plant = new_plant(currentVersion="v2")
    res = client.patch(f"/api/plants/{plant['_id']}/advance", json={"notes": "first true leaves"})
    assert res.get_json()["data"]["versions"]["v3"]["notes"] == "first true leaves"


def test_advance_fully_grown_plant_fails(client, new_plant):
    plant = new_plant(currentVersion="v4")
    res = client.patch(f"/api/plants/{plant['_id']}/advance", json={})
    assert res.status_code == 400
    assert res.get_json()["message"] == "Plant is already at V4 (fully grown)"


def test_update_version_moves_current_forward_only(client, new_plant):
    plant = new_plant(currentVersion="v2")

    res = client.patch(f"/api/plants/{plant['_id']}/version/v4", json={"notes": "harvested", "image": "/uploads/a.jpg"})
    body = res.get_json()
    assert res.status_code == 200
    assert body["message"] == "Version V4 updated successfully"
    assert body["data"]["currentVersion"] == "v4"
    assert body["data"]["versions"]["v4"]["image"] == "/uploads/a.jpg"

    res = client.patch(f"/api/plants/{plant['_id']}/version/v1", json={"notes": "redo"})
    assert res.get_json()["data"]["currentVersion"] == "v4"
    assert res.get_json()["data"]["versions"]["v1"]["notes"] == "redo"


def test_update_version_rejects_invalid_version(client, new_plant):
    plant = new_plant()
    res = client.patch(f"/api/plants/{plant['_id']}/version/v5", json={})
    assert res.status_code == 400


def test_delete_version_media(client, new_plant):
    plant = new_plant()
    client.patch(f"/api/plants/{plant['_id']}/version/v1", json={"video": "/uploads/clip.mp4"})

    res = client.delete(f"/api/plants/{plant['_id']}/version/v1/media/video")
    assert res.status_code == 200
    assert res.get_json()["message"] == "Video deleted successfully"
    assert res.get_json()["data"]["versions"]["v1"]["video"] is None

    assert client.delete(f"/api/plants/{plant['_id']}/version/v1/media/audio").status_code == 400
    assert client.delete(f"/api/plants/{plant['_id']}/version/v7/media/image").status_code == 400


def test_water_plant_schedules_next_watering(client, new_plant):
    plant = new_plant(wateringFrequency="every-3-days")
    res = client.patch(f"/api/plants/{plant['_id']}/water")
    data = res.get_json()["data"]

    last = datetime.fromisoformat(data["lastWatered"].replace("Z", "+00:00"))
    upcoming = datetime.fromisoformat(data["nextWatering"].replace("Z", "+00:00"))
    assert upcoming - last == timedelta(days=3)
    assert data["needsWater"] is False


def test_needs_water_lists_overdue_plants(client, new_plant):
    overdue = (datetime.now(timezone.utc) - timedelta(days=10)).isoformat()
    plant = new_plant(name="Thirsty", wateringFrequency="daily", lastWatered=overdue)
    new_plant(name="Fresh", lastWatered=datetime.now(timezone.utc).isoformat())

    body = client.get("/api/plants/status/needs-water").get_json()
    assert [p["_id"] for p in body["data"]] == [plant["_id"]]
    assert body["data"][0]["needsWater"] is True


def test_filter_by_version(client):
    body = client.get("/api/plants/filter/by-version/v4").get_json()
    assert {p["name"] for p in body["data"]} == {"Coriander", "Mint"}
    assert body["count"] == 2


def test_delete_plant(client, new_plant):
    plant = new_plant(name="Delete Me")
    res = client.delete(f"/api/plants/{plant['_id']}")
    assert res.status_code == 200
    assert res.get_json()["success"] is True
    assert client.get(f"/api/plants/{plant['_id']}").status_code == 404
    assert client.delete(f"/api/plants/{plant['_id']}").status_code == 404


def test_unlisted_fields_are_kept(client, new_plant):
    plant = new_plant(variety="Bloomsdale")
    assert plant["variety"] == "Bloomsdale"
    fetched = client.get(f"/api/plants/{plant['_id']}").get_json()["data"]
    assert fetched["variety"] == "Bloomsdale"
