from fastapi.testclient import TestClient

from addressbook.web.mock_api import InMemoryAddressBook, create_app


def test_mock_api_status_codes(api_client, store):
    r = api_client.get("/api/addressbook")
    assert r.status_code == 200
    assert r.json() == []

    r = api_client.post("/api/addressbook", json={"firstName": "Ann", "email": "a@x.com", "phone": None})
    assert r.status_code == 201
    created = r.json()
    assert created["id"] == 1
    assert created["phone"] == ""
    assert created["lastName"] == ""

    r = api_client.put("/api/addressbook/1", json={"firstName": "Anne"})
    assert r.status_code == 200
    assert r.json()["firstName"] == "Anne"
    assert r.json()["id"] == 1

    assert api_client.get("/api/addressbook/1").status_code == 200
    assert api_client.delete("/api/addressbook/1").status_code == 204
    assert api_client.get("/api/addressbook/1").status_code == 404
    assert api_client.put("/api/addressbook/1", json={}).status_code == 404
    assert api_client.delete("/api/addressbook/1").status_code == 404
    assert len(store) == 0


def test_mock_api_rejects_non_object_bodies(api_client):
    r = api_client.post("/api/addressbook", json=["not", "an", "object"])
    assert r.status_code == 422


def test_ids_are_never_reused_and_prefix_is_configurable():
    book = InMemoryAddressBook(seed=[{"firstName": "Ann"}, {"firstName": "Bo"}])
    book.delete(2)

    with TestClient(create_app(book, prefix="/v2/")) as client:
        r = client.post("/v2/addressbook", json={"firstName": "Cy", "id": 99})
        assert r.json()["id"] == 3
        names = [c["firstName"] for c in client.get("/v2/addressbook").json()]
        assert names == ["Ann", "Cy"]
