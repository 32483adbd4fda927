"""
Consumer demand requests.
"""
import pytest


@pytest.fixture
def demand(client, consumer, aspirin):
    headers, _ = consumer
    resp = client.post("/api/demands", json={"medId": aspirin["id"]}, headers=headers)
    assert resp.status_code == 201
    return resp.json()["data"]


def test_create_demand(consumer, aspirin, demand):
    _, identity = consumer
    assert demand["userId"] == identity["id"]
    assert demand["medId"] == aspirin["id"]
    assert demand["medicine"]["name"] == "Aspirin"
    assert demand["date"]


def test_consumers_only_see_their_own_demands(client, signup, consumer, aspirin, demand):
    headers, _ = consumer
    other_headers, other = signup("user", "u2")
    client.post("/api/demands", json={"medId": aspirin["id"]}, headers=other_headers)

    # the userId filter cannot widen a consumer's view
    listed = client.get(f"/api/demands?userId={other['id']}", headers=headers).json()["data"]
    assert [d["id"] for d in listed] == [demand["id"]]

    assert client.get(f"/api/demands/{demand['id']}", headers=other_headers).status_code == 403


def test_pharmacy_sees_all_demands(client, pharmacy, signup, aspirin, demand):
    headers, _ = pharmacy
    other_headers, other = signup("user", "u2")
    client.post("/api/demands", json={"medId": aspirin["id"]}, headers=other_headers)

    assert len(client.get("/api/demands", headers=headers).json()["data"]) == 2
    filtered = client.get(f"/api/demands?userId={other['id']}", headers=headers).json()["data"]
    assert [d["userId"] for d in filtered] == [other["id"]]


def test_only_consumers_create_demands(client, pharmacy, aspirin):
    headers, _ = pharmacy
    resp = client.post("/api/demands", json={"medId": aspirin["id"]}, headers=headers)
    assert resp.status_code == 403
    assert resp.json()["message"] == "user access required"


def test_demand_for_unknown_medicine(client, consumer):
    headers, _ = consumer
    resp = client.post("/api/demands", json={"medId": 999}, headers=headers)
    assert resp.status_code == 404


def test_update_and_delete_own_demand(client, consumer, pharmacy, demand):
    headers, _ = consumer
    pharmacy_headers, _ = pharmacy
    ibuprofen = client.post(
        "/api/medicines", json={"name": "Ibuprofen", "price": 3.2}, headers=pharmacy_headers
    ).json()["data"]

    updated = client.put(f"/api/demands/{demand['id']}", json={"medId": ibuprofen["id"]}, headers=headers)
    assert updated.status_code == 200
    assert updated.json()["data"]["medicine"]["name"] == "Ibuprofen"

    deleted = client.delete(f"/api/demands/{demand['id']}", headers=headers)
    assert deleted.json() == {"success": True, "message": "Demand deleted successfully"}
    assert client.get(f"/api/demands/{demand['id']}", headers=headers).status_code == 404


def test_other_consumer_cannot_modify_demand(client, signup, demand):
    other_headers, _ = signup("user", "u2")
    assert client.put(f"/api/demands/{demand['id']}", json={"medId": demand["medId"]}, headers=other_headers).status_code == 403
    assert client.delete(f"/api/demands/{demand['id']}", headers=other_headers).status_code == 403
