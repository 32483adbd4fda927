"""
Medicine catalogue routes.
"""


def test_create_and_read(client, consumer, aspirin):
    headers, _ = consumer
    assert aspirin["name"] == "Aspirin"
    assert aspirin["price"] == 5.0

    resp = client.get(f"/api/medicines/{aspirin['id']}", headers=headers)
    assert resp.status_code == 200
    assert resp.json()["data"] == aspirin


def test_price_defaults_to_zero(client, consumer):
    headers, _ = consumer
    resp = client.post("/api/medicines", json={"name": "Placebo"}, headers=headers)
    assert resp.status_code == 201
    assert resp.json()["data"]["price"] == 0


def test_negative_price_rejected(client, consumer):
    headers, _ = consumer
    resp = client.post("/api/medicines", json={"name": "Bad", "price": -1}, headers=headers)
    assert resp.status_code == 400


def test_blank_name_rejected(client, consumer):
    headers, _ = consumer
    resp = client.post("/api/medicines", json={"name": "   "}, headers=headers)
    assert resp.status_code == 400
    assert resp.json()["message"] == "Medicine name is required"


def test_duplicate_name_conflicts(client, pharmacy, aspirin):
    headers, _ = pharmacy
    resp = client.post("/api/medicines", json={"name": "Aspirin", "price": 1}, headers=headers)
    assert resp.status_code == 409
    assert resp.json() == {"success": False, "message": "Medicine already exists"}


def test_list_requires_session(client, aspirin):
    assert client.get("/api/medicines").status_code == 401


def test_search_is_case_insensitive(client, pharmacy, aspirin):
    headers, _ = pharmacy
    client.post("/api/medicines", json={"name": "Paracetamol", "price": 2.5}, headers=headers)

    found = client.get("/api/medicines/search?name=ASPI", headers=headers).json()["data"]
    assert [m["name"] for m in found] == ["Aspirin"]

    assert client.get("/api/medicines/search?name=zzz", headers=headers).json()["data"] == []


def test_search_requires_a_term(client, pharmacy):
    headers, _ = pharmacy
    resp = client.get("/api/medicines/search", headers=headers)
    assert resp.status_code == 400
    assert resp.json()["message"] == "Search term 'name' is required"


def test_update_medicine(client, pharmacy, aspirin):
    headers, _ = pharmacy
    resp = client.put(f"/api/medicines/{aspirin['id']}", json={"price": 6.5}, headers=headers)
    assert resp.status_code == 200
    assert resp.json()["data"] == {"id": aspirin["id"], "name": "Aspirin", "price": 6.5}

    empty = client.put(f"/api/medicines/{aspirin['id']}", json={}, headers=headers)
    assert empty.status_code == 400


def test_rename_onto_existing_name_conflicts(client, pharmacy, aspirin):
    headers, _ = pharmacy
    other = client.post("/api/medicines", json={"name": "Ibuprofen"}, headers=headers).json()["data"]
    resp = client.put(f"/api/medicines/{other['id']}", json={"name": "Aspirin"}, headers=headers)
    assert resp.status_code == 409


def test_delete_unreferenced_medicine(client, pharmacy, aspirin):
    headers, _ = pharmacy
    resp = client.delete(f"/api/medicines/{aspirin['id']}", headers=headers)
    assert resp.json() == {"success": True, "message": "Medicine deleted successfully"}
    missing = client.get(f"/api/medicines/{aspirin['id']}", headers=headers)
    assert missing.status_code == 404
    assert missing.json()["message"] == "Medicine not found"


def test_delete_referenced_medicine_conflicts(client, pharmacy, aspirin):
    headers, _ = pharmacy
    client.post("/api/stocks", json={"medicalId": aspirin["id"], "numOfUnits": 1}, headers=headers)
    resp = client.delete(f"/api/medicines/{aspirin['id']}", headers=headers)
    assert resp.status_code == 409
    assert client.get(f"/api/medicines/{aspirin['id']}", headers=headers).status_code == 200


def test_search_treats_like_wildcards_literally(client, pharmacy, aspirin):
    headers, _ = pharmacy
    client.post("/api/medicines", json={"name": "Ibuprofen"}, headers=headers)
    client.post("/api/medicines", json={"name": "Zinc_Oxide 10%"}, headers=headers)

    percent = client.get("/api/medicines/search", params={"name": "%"}, headers=headers).json()["data"]
    assert [m["name"] for m in percent] == ["Zinc_Oxide 10%"]

    underscore = client.get("/api/medicines/search", params={"name": "c_o"}, headers=headers).json()["data"]
    assert [m["name"] for m in underscore] == ["Zinc_Oxide 10%"]

    assert client.get("/api/medicines/search", params={"name": "_"}, headers=headers).json()["data"] == [
        {"id": percent[0]["id"], "name": "Zinc_Oxide 10%", "price": 0.0}
    ]
