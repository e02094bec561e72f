from __future__ import annotations

from store_ratings.db.enums import Role
from tests.helpers import auth_headers


def test_first_submission_creates_and_second_updates(client, make_user, make_store):
    user = make_user(Role.USER)
    store = make_store(make_user(Role.OWNER))
    headers = auth_headers(user)

    resp = client.post("/api/v1/ratings/", json={"store_id": store.id, "value": 5}, headers=headers)
    assert resp.status_code == 201
    data = resp.json()
    assert data["message"] == "Rating submitted successfully"
    assert data["rating"]["value"] == 5
    rating_id = data["rating"]["id"]

    resp = client.get(f"/api/v1/stores/{store.id}", headers=headers)
    assert resp.json()["average_rating"] == 5.0
    assert resp.json()["user_rating"] == 5

    resp = client.post("/api/v1/ratings/", json={"store_id": store.id, "value": 3}, headers=headers)
    assert resp.status_code == 200
    data = resp.json()
    assert data["message"] == "Rating updated successfully"
    assert data["rating"]["id"] == rating_id

    resp = client.get(f"/api/v1/stores/{store.id}", headers=headers)
    assert resp.json()["average_rating"] == 3.0
    assert resp.json()["total_ratings"] == 1


def test_rating_value_out_of_range_is_a_field_error(client, make_user, make_store):
    store = make_store(make_user(Role.OWNER))

    resp = client.post(
        "/api/v1/ratings/",
        json={"store_id": store.id, "value": 6},
        headers=auth_headers(make_user(Role.USER)),
    )

    assert resp.status_code == 400
    errors = resp.json()["errors"]
    assert [error["field"] for error in errors] == ["value"]


def test_owner_cannot_submit_or_view_other_store(client, make_user, make_store):
    owner = make_user(Role.OWNER)
    make_store(owner)
    other_store = make_store(make_user(Role.OWNER))
    headers = auth_headers(owner)

    resp = client.post("/api/v1/ratings/", json={"store_id": other_store.id, "value": 4}, headers=headers)
    assert resp.status_code == 403

    resp = client.get(f"/api/v1/ratings/store/{other_store.id}", headers=headers)
    assert resp.status_code == 403
    assert "your own store" in resp.json()["error"]


def test_owner_sees_ratings_with_rater_identity(client, make_user, make_store):
    owner = make_user(Role.OWNER)
    store = make_store(owner)
    rater = make_user(Role.USER)
    client.post("/api/v1/ratings/", json={"store_id": store.id, "value": 4}, headers=auth_headers(rater))

    resp = client.get(f"/api/v1/ratings/store/{store.id}?page=1&limit=5", headers=auth_headers(owner))

    assert resp.status_code == 200
    data = resp.json()
    assert data["items"][0]["user"] == {"id": rater.id, "name": rater.name, "email": rater.email}
    assert data["pagination"] == {"total": 1, "page": 1, "limit": 5, "total_pages": 1}
    assert data["average_rating"] == 4.0


def test_unknown_store_is_not_found(client, make_user):
    resp = client.get("/api/v1/ratings/store/4242", headers=auth_headers(make_user(Role.ADMIN)))

    assert resp.status_code == 404


def test_delete_rating_flow(client, make_user, make_store):
    user = make_user(Role.USER)
    store = make_store(make_user(Role.OWNER))
    created = client.post(
        "/api/v1/ratings/", json={"store_id": store.id, "value": 2}, headers=auth_headers(user)
    ).json()
    rating_id = created["rating"]["id"]

    resp = client.delete(f"/api/v1/ratings/{rating_id}", headers=auth_headers(make_user(Role.USER)))
    assert resp.status_code == 403

    resp = client.delete(f"/api/v1/ratings/{rating_id}", headers=auth_headers(user))
    assert resp.status_code == 200
    assert resp.json() == {"message": "Rating deleted successfully"}

    resp = client.get(f"/api/v1/ratings/user/{user.id}", headers=auth_headers(user))
    assert resp.json()["items"] == []


def test_requests_without_token_are_unauthorized(client):
    resp = client.post("/api/v1/ratings/", json={"store_id": 1, "value": 3})

    assert resp.status_code == 401
    assert resp.headers["www-authenticate"] == "Bearer"


def test_requests_with_garbage_token_are_unauthorized(client):
    resp = client.get("/api/v1/stores/", headers={"Authorization": "Bearer not-a-jwt"})

    assert resp.status_code == 401
    assert resp.json() == {"error": "Invalid token"}


def test_out_of_range_ids_are_field_errors(client, make_user):
    user = make_user(Role.USER)
    headers = auth_headers(user)

    resp = client.post("/api/v1/ratings/", json={"store_id": 2**63, "value": 3}, headers=headers)
    assert resp.status_code == 400
    assert [error["field"] for error in resp.json()["errors"]] == ["store_id"]

    for path in (
        "/api/v1/ratings/store/99999999999999999999",
        f"/api/v1/ratings/user/{2**31}",
    ):
        resp = client.get(path, headers=headers)
        assert resp.status_code == 400

    resp = client.delete("/api/v1/ratings/99999999999999999999", headers=headers)
    assert resp.status_code == 400
    assert resp.json()["errors"][0]["field"] == "id"
