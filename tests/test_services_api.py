"""
Service catalog API tests — /services CRUD and seeding.
"""


def _new_service(**overrides):
    body = {
        "id": "gas-line",
        "name": "Gas Line Installation",
        "description": "Black iron gas line run to appliance",
        "category": "Installation",
        "unit": "sqm",
        "rate": 60.0,
        "quantity_basis": "area",
    }
    body.update(overrides)
    return body


def test_list_services_empty(client):
    resp = client.get("/services")
    assert resp.status_code == 200
    assert resp.json() == []


def test_seed_endpoint(client):
    resp = client.get("/services/seed")
    assert resp.status_code == 200
    data = resp.json()
    assert data["ok"] is True
    assert data["seeded"] > 0

    again = client.get("/services/seed")
    assert again.json()["seeded"] == 0


def test_list_services_fields(client, seeded_db):
    resp = client.get("/services")
    assert resp.status_code == 200
    services = resp.json()
    assert len(services) > 0
    first = services[0]
    for key in ("id", "name", "description", "category", "unit", "rate", "quantity_basis"):
        assert key in first
    assert {s["quantity_basis"] for s in services} == {"area", "fixtures", "flat"}


def test_list_services_by_category(client, seeded_db):
    resp = client.get("/services", params={"category": "Compliance"})
    assert resp.status_code == 200
    assert [s["id"] for s in resp.json()] == ["backflow-test"]


def test_get_service(client, seeded_db):
    resp = client.get("/services/fixture-install")
    assert resp.status_code == 200
    data = resp.json()
    assert data["unit"] == "fixture"
    assert data["quantity_basis"] == "fixtures"


def test_get_missing_service_404(client):
    resp = client.get("/services/does-not-exist")
    assert resp.status_code == 404


def test_create_service(client):
    resp = client.post("/services", json=_new_service())
    assert resp.status_code == 201
    assert resp.json()["id"] == "gas-line"

    listed = client.get("/services").json()
    assert [s["id"] for s in listed] == ["gas-line"]


def test_create_duplicate_service_409(client):
    client.post("/services", json=_new_service())
    resp = client.post("/services", json=_new_service(name="Other"))
    assert resp.status_code == 409


def test_create_service_negative_rate_rejected(client):
    resp = client.post("/services", json=_new_service(rate=-1))
    assert resp.status_code == 422


def test_create_service_bad_basis_rejected(client):
    resp = client.post("/services", json=_new_service(quantity_basis="per_hour"))
    assert resp.status_code == 422


def test_update_service_rate(client, seeded_db):
    resp = client.patch("/services/drain-cleaning", json={"rate": 199.5})
    assert resp.status_code == 200
    assert resp.json()["rate"] == 199.5
    assert resp.json()["name"] == "Drain Cleaning"


def test_update_missing_service_404(client):
    resp = client.patch("/services/nope", json={"rate": 10})
    assert resp.status_code == 404


def test_update_service_null_required_field_422(client, seeded_db):
    for field in ("name", "unit", "rate", "quantity_basis"):
        resp = client.patch("/services/drain-cleaning", json={field: None})
        assert resp.status_code == 422, field
        assert field in resp.json()["detail"]

    unchanged = client.get("/services/drain-cleaning").json()
    assert unchanged["name"] == "Drain Cleaning"
    assert unchanged["rate"] == 180.0


def test_update_service_clear_category(client, seeded_db):
    """Optional columns can still be nulled."""
    resp = client.patch("/services/drain-cleaning", json={"category": None})
    assert resp.status_code == 200
    assert resp.json()["category"] is None
