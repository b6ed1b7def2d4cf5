from datetime import date, timedelta

from conftest import (
    admin_headers,
    agent_headers,
    assignment_pairs,
    auth_headers,
    mk_admin,
    mk_agent,
    mk_service,
    mk_vendor,
)
from database.init import SessionLocal
from database.models import Property
from enums.user_role import UserRole
from schemas.property_schema import today_utc


def _payload(service_ids, vendor_ids, **overrides):
    body = {
        "owner_name": "Riya Shah",
        "owner_email": "riya@example.com",
        "address": "14 Lake Road",
        "city": "Pune",
        "state": "MH",
        "pincode": "411001",
        "project_ending_date": (date.today() + timedelta(days=30)).isoformat(),
        "service_ids": service_ids,
        "vendor_ids": vendor_ids,
    }
    body.update(overrides)
    return body


def _property_count() -> int:
    db = SessionLocal()
    try:
        return db.query(Property).count()
    finally:
        db.close()


def _setup():
    s1 = mk_service("Plumbing")
    s2 = mk_service("Painting")
    v1 = mk_vendor("v1@example.com", [s1, s2])
    v2 = mk_vendor("v2@example.com", [s2])
    agent = mk_agent()
    return s1, s2, v1, v2, agent


def test_add_property_assigns_vendors_and_notifies(client, mailer):
    s1, s2, v1, v2, _ = _setup()

    r = client.post("/agent/add-property", json=_payload([s1, s2], [v1, v2]), headers=agent_headers())
    assert r.status_code == 200, r.text
    data = r.json()["data"]

    assert data["message"] == "Property added successfully"
    assert data["selected_services"] == [s1, s2]
    assert data["selected_vendors"] == [v1, v2]
    assert data["project_ending_date"] == (date.today() + timedelta(days=30)).strftime("%d/%m/%Y")
    assert data["assigned_services"][str(v2)] == [{"service_id": s2, "service_type": "Painting"}]
    assert assignment_pairs(data["property_id"]) == {(v1, s1), (v1, s2), (v2, s2)}

    assert sorted(m["to"] for m in mailer.of_kind("assignment")) == ["v1@example.com", "v2@example.com"]


def test_add_property_with_uncovered_service_creates_nothing(client, mailer):
    s1, s2, v1, v2, _ = _setup()

    r = client.post("/agent/add-property", json=_payload([s1, s2], [v2]), headers=agent_headers())
    assert r.status_code == 400
    body = r.json()
    assert body["message"] == f"No vendors offer the following services: {s1}"
    assert body["data"]["uncovered_service_ids"] == [s1]
    assert _property_count() == 0
    assert mailer.sent == []


def test_add_property_rejects_unknown_ids(client):
    s1, s2, v1, v2, _ = _setup()

    r = client.post("/agent/add-property", json=_payload([s1, 404], [v1]), headers=agent_headers())
    assert r.status_code == 400
    assert r.json()["message"] == "Invalid Service IDs: 404"
    assert _property_count() == 0


def test_add_property_validates_fields(client):
    s1, s2, v1, v2, _ = _setup()

    r = client.post("/agent/add-property", json=_payload([s1], [v1], pincode="12ab"), headers=agent_headers())
    assert r.status_code == 400
    assert "Pincode must be 5 or 6 digits" in r.json()["message"]

    past = (date.today() - timedelta(days=2)).isoformat()
    r = client.post(
        "/agent/add-property", json=_payload([s1], [v1], project_ending_date=past), headers=agent_headers()
    )
    assert r.status_code == 400
    assert "cannot be in the past" in r.json()["message"]

    r = client.post("/agent/add-property", json=_payload([s1], []), headers=agent_headers())
    assert r.status_code == 400
    assert _property_count() == 0


def test_failed_notification_leaves_no_property(client, mailer):
    s1, s2, v1, v2, _ = _setup()
    mailer.fail = True

    r = client.post("/agent/add-property", json=_payload([s1], [v1]), headers=agent_headers())
    assert r.status_code == 500
    assert _property_count() == 0


def test_edit_property_swaps_vendors(client, mailer):
    s1, s2, v1, v2, _ = _setup()
    v3 = mk_vendor("v3@example.com", [s2])
    created = client.post("/agent/add-property", json=_payload([s2], [v1, v2]), headers=agent_headers())
    property_id = created.json()["data"]["property_id"]
    mailer.sent.clear()

    r = client.put(
        f"/agent/edit-property/{property_id}",
        json={"vendor_ids": [v1, v3], "city": "Mumbai"},
        headers=agent_headers(),
    )
    assert r.status_code == 200, r.text
    data = r.json()["data"]
    assert data["updated_details"] is True
    assert data["updated_vendors"] is True
    assert data["updated_services"] is False
    assert data["new_services"] is None
    assert data["removed_vendors"] == [v2]
    assert data["current_vendors"] == sorted([v1, v3])
    assert data["current_services"] == [s2]

    assert [m["to"] for m in mailer.of_kind("cancellation")] == ["v2@example.com"]
    assert [m["to"] for m in mailer.of_kind("assignment")] == ["v3@example.com"]
    assert assignment_pairs(property_id) == {(v1, s2), (v3, s2)}


def test_edit_property_with_same_sets_changes_nothing(client, mailer):
    s1, s2, v1, v2, _ = _setup()
    created = client.post("/agent/add-property", json=_payload([s1, s2], [v1, v2]), headers=agent_headers())
    property_id = created.json()["data"]["property_id"]
    mailer.sent.clear()

    r = client.put(
        f"/agent/edit-property/{property_id}",
        json={"service_ids": [s2, s1], "vendor_ids": [v2, v1]},
        headers=agent_headers(),
    )
    data = r.json()["data"]
    assert data["updated_services"] is False and data["updated_vendors"] is False
    assert data["updated_details"] is False
    assert mailer.sent == []


def test_only_owning_agent_can_edit(client):
    s1, s2, v1, v2, _ = _setup()
    mk_agent("other@example.com", "Other Agent")
    created = client.post("/agent/add-property", json=_payload([s1], [v1]), headers=agent_headers())
    property_id = created.json()["data"]["property_id"]

    r = client.put(
        f"/agent/edit-property/{property_id}",
        json={"city": "Nashik"},
        headers=agent_headers("other@example.com"),
    )
    assert r.status_code == 404


def _set_ending_date(property_id: int, value: date):
    db = SessionLocal()
    try:
        db.get(Property, property_id).project_ending_date = value
        db.commit()
    finally:
        db.close()


def test_edit_accepts_unchanged_past_ending_date(client):
    s1, s2, v1, v2, _ = _setup()
    created = client.post("/agent/add-property", json=_payload([s1], [v1]), headers=agent_headers())
    property_id = created.json()["data"]["property_id"]
    lapsed = today_utc() - timedelta(days=3)
    _set_ending_date(property_id, lapsed)

    r = client.put(
        f"/agent/edit-property/{property_id}",
        json={"city": "Mumbai", "project_ending_date": lapsed.isoformat()},
        headers=agent_headers(),
    )
    assert r.status_code == 200, r.text
    assert r.json()["data"]["updated_details"] is True
    assert r.json()["data"]["project_ending_date"] == lapsed.strftime("%d/%m/%Y")


def test_edit_rejects_new_past_ending_date(client):
    s1, s2, v1, v2, _ = _setup()
    created = client.post("/agent/add-property", json=_payload([s1], [v1]), headers=agent_headers())
    property_id = created.json()["data"]["property_id"]

    r = client.put(
        f"/agent/edit-property/{property_id}",
        json={"city": "Mumbai", "project_ending_date": (today_utc() - timedelta(days=1)).isoformat()},
        headers=agent_headers(),
    )
    assert r.status_code == 400
    assert r.json()["message"] == "Project ending date cannot be in the past"

    db = SessionLocal()
    try:
        assert db.get(Property, property_id).city == "Pune"
    finally:
        db.close()


def test_edit_with_service_no_vendor_offers_keeps_offered_rows(client, mailer):
    s1, s2, v1, v2, _ = _setup()
    s3 = mk_service("Cleaning")
    created = client.post("/agent/add-property", json=_payload([s2], [v2]), headers=agent_headers())
    property_id = created.json()["data"]["property_id"]
    mailer.sent.clear()

    r = client.put(
        f"/agent/edit-property/{property_id}",
        json={"service_ids": [s2, s3]},
        headers=agent_headers(),
    )
    assert r.status_code == 200, r.text
    assert r.json()["data"]["updated_services"] is True
    assert assignment_pairs(property_id) == {(v2, s2)}
    assert mailer.sent == []


def test_agent_lists_own_properties(client):
    s1, s2, v1, v2, _ = _setup()
    client.post("/agent/add-property", json=_payload([s1, s2], [v1, v2]), headers=agent_headers())

    r = client.get("/agent/properties", headers=agent_headers())
    assert r.status_code == 200
    [prop] = r.json()["data"]
    assert [s["service_id"] for s in prop["services"]] == sorted([s1, s2])
    assert sorted(v["vendor_id"] for v in prop["vendors"]) == sorted([v1, v2])
    assert prop["status"] == "New"
    assert prop["assigned_at"] is not None


def test_vendor_sees_assigned_properties(client):
    s1, s2, v1, v2, _ = _setup()
    client.post("/agent/add-property", json=_payload([s1, s2], [v1, v2]), headers=agent_headers())

    r = client.get("/vendor/assigned-properties", headers=auth_headers("v2@example.com", UserRole.VENDOR))
    assert r.status_code == 200
    rows = r.json()["data"]
    assert len(rows) == 1
    assert rows[0]["service_type"] == "Painting"
    assert rows[0]["agent"]["email"] == "agent@example.com"


def test_agent_catalog_helpers(client):
    s1, s2, v1, v2, _ = _setup()

    r = client.post("/agent/vendors-by-services", json={"service_ids": [s1]}, headers=agent_headers())
    assert [v["vendor_id"] for v in r.json()["data"]] == [v1]

    r = client.get("/agent/available-services", headers=agent_headers())
    grouped = {v["vendor_id"]: [s["service_id"] for s in v["services"]] for v in r.json()["data"]}
    assert grouped == {v1: [s1, s2], v2: [s2]}


def test_admin_sets_property_status(client):
    s1, s2, v1, v2, _ = _setup()
    mk_admin()
    created = client.post("/agent/add-property", json=_payload([s1], [v1]), headers=agent_headers())
    property_id = created.json()["data"]["property_id"]

    r = client.put(
        f"/admin/update-property-status/{property_id}", json={"status": "Invoiced"}, headers=admin_headers()
    )
    assert r.status_code == 200
    assert r.json()["data"]["new_status"] == "Invoiced"

    r = client.put(
        f"/admin/update-property-status/{property_id}", json={"status": "Done"}, headers=admin_headers()
    )
    assert r.status_code == 400

    r = client.put("/admin/update-property-status/999", json={"status": "Paid"}, headers=admin_headers())
    assert r.status_code == 404

    r = client.get("/admin/all-assigned-properties", headers=admin_headers())
    [row] = r.json()["data"]
    assert row["status"] == "Invoiced"
    assert row["vendor"]["id"] == v1
