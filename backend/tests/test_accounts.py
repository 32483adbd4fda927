"""
Account resources for the three roles.
"""
from conftest import PASSWORD, login


def test_list_and_get_hide_password(client, pharmacy, consumer):
    headers, identity = consumer
    listed = client.get("/api/users", headers=headers).json()["data"]
    assert listed == [{"id": identity["id"], "username": "u1"}]

    _, pharmacy_identity = pharmacy
    one = client.get(f"/api/pharmacy/{pharmacy_identity['id']}", headers=headers).json()["data"]
    assert one["name"] == "p1 name"
    assert one["phoneNumber"] == "0555000000"
    assert "hashedPassword" not in one and "password" not in one


def test_get_unknown_account(client, consumer):
    headers, _ = consumer
    resp = client.get("/api/fournisseur/999", headers=headers)
    assert resp.status_code == 404
    assert resp.json()["message"] == "Fournisseur not found"


def test_create_partner_account(client, consumer):
    headers, _ = consumer
    body = {
        "username": "s9",
        "password": PASSWORD,
        "name": "Med Supply",
        "location": "Blida",
        "phoneNumber": "0666",
    }
    resp = client.post("/api/fournisseur", json=body, headers=headers)
    assert resp.status_code == 201
    assert resp.json()["message"] == "Fournisseur created successfully"
    assert login(client, "fournisseur", "s9").status_code == 200


def test_create_partner_requires_contact_details(client, consumer):
    headers, _ = consumer
    resp = client.post("/api/pharmacy", json={"username": "p9", "password": PASSWORD}, headers=headers)
    assert resp.status_code == 400


def test_create_duplicate_username_conflicts(client, consumer):
    headers, _ = consumer
    resp = client.post("/api/users", json={"username": "u1", "password": PASSWORD}, headers=headers)
    assert resp.status_code == 409


def test_update_self(client, pharmacy):
    headers, identity = pharmacy
    resp = client.put(
        f"/api/pharmacy/{identity['id']}",
        json={"location": "Constantine", "password": "new-secret"},
        headers=headers,
    )
    assert resp.status_code == 200
    assert resp.json()["message"] == "Pharmacy updated successfully"
    assert resp.json()["data"]["location"] == "Constantine"
    assert login(client, "pharmacy", "p1", password="new-secret").status_code == 200
    assert login(client, "pharmacy", "p1").status_code == 401


def test_cannot_update_someone_else(client, signup, consumer):
    headers, _ = consumer
    _, other = signup("user", "u2")
    resp = client.put(f"/api/users/{other['id']}", json={"username": "hijacked"}, headers=headers)
    assert resp.status_code == 403


def test_same_id_in_another_role_is_not_self(client, consumer, pharmacy):
    headers, identity = consumer
    _, pharmacy_identity = pharmacy
    assert identity["id"] == pharmacy_identity["id"]
    resp = client.delete(f"/api/pharmacy/{pharmacy_identity['id']}", headers=headers)
    assert resp.status_code == 403


def test_rename_onto_taken_username_conflicts(client, signup, consumer):
    headers, identity = consumer
    signup("user", "u2")
    resp = client.put(f"/api/users/{identity['id']}", json={"username": "u2"}, headers=headers)
    assert resp.status_code == 409
    assert resp.json()["message"] == "Username already exists"


def test_delete_self_revokes_sessions_and_cascades(client, consumer, aspirin):
    headers, identity = consumer
    client.post("/api/demands", json={"medId": aspirin["id"]}, headers=headers)

    resp = client.delete(f"/api/users/{identity['id']}", headers=headers)

    assert resp.json() == {"success": True, "message": "User deleted successfully"}
    assert client.get("/api/auth/me", headers=headers).status_code == 401
    assert login(client, "user", "u1").status_code == 401


def test_pharmacy_with_started_commands_cannot_be_deleted(client, pharmacy, supplier, aspirin):
    headers, identity = pharmacy
    supplier_headers, supplier_identity = supplier
    command = client.post(
        "/api/commands", json={"medId": aspirin["id"], "numOfUnits": 4}, headers=headers
    ).json()["data"]
    client.patch(f"/api/commands/{command['id']}/accept", headers=supplier_headers)

    assert client.delete(f"/api/pharmacy/{identity['id']}", headers=headers).status_code == 409
    assert client.delete(f"/api/fournisseur/{supplier_identity['id']}", headers=supplier_headers).status_code == 409


def test_pharmacy_delete_takes_stock_and_awaiting_commands(client, pharmacy, consumer, aspirin):
    headers, identity = pharmacy
    client.post("/api/stocks", json={"medicalId": aspirin["id"], "numOfUnits": 4}, headers=headers)
    client.post("/api/commands", json={"medId": aspirin["id"], "numOfUnits": 4}, headers=headers)

    assert client.delete(f"/api/pharmacy/{identity['id']}", headers=headers).status_code == 200

    consumer_headers, _ = consumer
    assert client.get("/api/stocks", headers=consumer_headers).json()["data"] == []
    assert client.get("/api/commands", headers=consumer_headers).json()["data"] == []
