from __future__ import annotations

from store_ratings.db.enums import Role
from tests.helpers import auth_headers

NEW_USER = {
    "name": "Administrator Created Account",
    "email": "created@example.com",
    "password": "Secret@123",
    "address": "1 Admin Plaza",
    "role": "OWNER",
}


def test_owner_filter_paginates(client, make_user):
    admin = make_user(Role.ADMIN)
    for _ in range(5):
        make_user(Role.OWNER)
    make_user(Role.USER)

    resp = client.get("/api/v1/users/?role=OWNER&page=1&limit=2", headers=auth_headers(admin))

    assert resp.status_code == 200
    data = resp.json()
    assert len(data["items"]) == 2
    assert all(item["role"] == "OWNER" for item in data["items"])
    assert data["pagination"] == {"total": 5, "page": 1, "limit": 2, "total_pages": 3}

    resp = client.get("/api/v1/users/?role=OWNER&page=3&limit=2", headers=auth_headers(admin))
    assert len(resp.json()["items"]) == 1


def test_admin_creates_and_updates_user(client, make_user):
    admin = make_user(Role.ADMIN)
    headers = auth_headers(admin)

    resp = client.post("/api/v1/users/", json=NEW_USER, headers=headers)
    assert resp.status_code == 201
    created = resp.json()["user"]
    assert created["role"] == "OWNER"
    assert "password" not in created and "password_hash" not in created

    resp = client.put(
        f"/api/v1/users/{created['id']}",
        json={"address": "2 Admin Plaza", "role": "USER"},
        headers=headers,
    )
    assert resp.status_code == 200
    updated = resp.json()["user"]
    assert updated["address"] == "2 Admin Plaza"
    assert updated["role"] == "USER"
    assert updated["name"] == NEW_USER["name"]


def test_duplicate_email_conflicts(client, make_user):
    admin = make_user(Role.ADMIN)
    existing = make_user(Role.USER)

    resp = client.post(
        "/api/v1/users/",
        json={**NEW_USER, "email": existing.email.upper()},
        headers=auth_headers(admin),
    )

    assert resp.status_code == 409


def test_validation_errors_list_each_field(client, make_user):
    admin = make_user(Role.ADMIN)

    resp = client.post(
        "/api/v1/users/",
        json={"name": "short", "email": "nope", "password": "password"},
        headers=auth_headers(admin),
    )

    assert resp.status_code == 400
    body = resp.json()
    assert body["error"] == "Validation failed"
    assert {error["field"] for error in body["errors"]} == {"name", "email", "password"}


def test_non_admin_cannot_manage_users(client, make_user):
    owner = make_user(Role.OWNER)
    target = make_user(Role.USER)

    assert client.post("/api/v1/users/", json=NEW_USER, headers=auth_headers(owner)).status_code == 403
    resp = client.delete(f"/api/v1/users/{target.id}", headers=auth_headers(target))
    assert resp.status_code == 403
    assert resp.json() == {"error": "Access denied. Admin only."}


def test_owner_with_stores_keeps_role(client, make_user, make_store):
    admin = make_user(Role.ADMIN)
    owner = make_user(Role.OWNER)
    make_store(owner)

    resp = client.put(f"/api/v1/users/{owner.id}", json={"role": "USER"}, headers=auth_headers(admin))

    assert resp.status_code == 409


def test_owner_detail_includes_weighted_average(client, make_user, make_store):
    admin = make_user(Role.ADMIN)
    owner = make_user(Role.OWNER)
    first = make_store(owner)
    second = make_store(owner)
    raters = [make_user(Role.USER) for _ in range(2)]
    client.post("/api/v1/ratings/", json={"store_id": first.id, "value": 5}, headers=auth_headers(raters[0]))
    client.post("/api/v1/ratings/", json={"store_id": first.id, "value": 4}, headers=auth_headers(raters[1]))
    client.post("/api/v1/ratings/", json={"store_id": second.id, "value": 1}, headers=auth_headers(raters[0]))

    resp = client.get(f"/api/v1/users/{owner.id}", headers=auth_headers(admin))
    assert resp.status_code == 200
    assert resp.json()["average_rating"] == 3.33

    resp = client.get(f"/api/v1/users/{raters[0].id}", headers=auth_headers(admin))
    assert resp.json()["average_rating"] is None


def test_deleting_owner_removes_stores_and_ratings(client, make_user, make_store):
    admin = make_user(Role.ADMIN)
    owner = make_user(Role.OWNER)
    store = make_store(owner)
    rater = make_user(Role.USER)
    client.post("/api/v1/ratings/", json={"store_id": store.id, "value": 3}, headers=auth_headers(rater))

    resp = client.delete(f"/api/v1/users/{owner.id}", headers=auth_headers(admin))
    assert resp.status_code == 200

    assert client.get(f"/api/v1/users/{owner.id}", headers=auth_headers(admin)).status_code == 404
    assert client.get(f"/api/v1/stores/{store.id}", headers=auth_headers(admin)).status_code == 404
    resp = client.get(f"/api/v1/ratings/user/{rater.id}", headers=auth_headers(rater))
    assert resp.json()["items"] == []


def test_out_of_range_user_id_is_a_field_error(client, make_user):
    resp = client.get("/api/v1/users/99999999999999999999", headers=auth_headers(make_user(Role.ADMIN)))

    assert resp.status_code == 400
    assert resp.json()["errors"][0]["field"] == "id"
