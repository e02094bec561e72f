from __future__ import annotations

from store_ratings.db.enums import Role
from tests.helpers import auth_headers


def _rate(client, user, store, value):
    resp = client.post("/api/v1/ratings/", json={"store_id": store.id, "value": value}, headers=auth_headers(user))
    assert resp.status_code in (200, 201)


def test_admin_dashboard(client, make_user, make_store):
    admin = make_user(Role.ADMIN)
    owner = make_user(Role.OWNER)
    best = make_store(owner)
    good = make_store(owner)
    unrated = make_store(owner)
    alice = make_user(Role.USER)
    bob = make_user(Role.USER)
    _rate(client, alice, best, 5)
    _rate(client, bob, best, 5)
    _rate(client, alice, good, 4)

    resp = client.get("/api/v1/dashboard/admin", headers=auth_headers(admin))

    assert resp.status_code == 200
    data = resp.json()
    assert data["stats"] == {"total_users": 4, "total_stores": 3, "total_ratings": 3}
    assert data["users_by_role"] == {"ADMIN": 1, "OWNER": 1, "USER": 2}
    assert [store["id"] for store in data["top_rated_stores"]] == [best.id, good.id]
    assert data["top_rated_stores"][0]["average_rating"] == 5.0
    assert data["top_rated_stores"][0]["total_ratings"] == 2
    assert unrated.id not in {store["id"] for store in data["top_rated_stores"]}
    assert len(data["recent_ratings"]) == 3
    assert len(data["recent_users"]) == 4
    snapshot = {store["id"]: store for store in data["recent_stores"]}
    assert snapshot[unrated.id]["average_rating"] == 0
    assert snapshot[good.id]["total_ratings"] == 1


def test_owner_dashboard(client, make_user, make_store):
    owner = make_user(Role.OWNER)
    first = make_store(owner, name="Aardvark Antiques and Curios")
    second = make_store(owner, name="Zebra Zippers and Sewing Goods")
    make_store(make_user(Role.OWNER))
    raters = [make_user(Role.USER) for _ in range(3)]
    _rate(client, raters[0], first, 5)
    _rate(client, raters[1], first, 3)
    _rate(client, raters[2], second, 2)

    resp = client.get("/api/v1/dashboard/owner", headers=auth_headers(owner))

    assert resp.status_code == 200
    data = resp.json()
    assert [entry["store"]["id"] for entry in data["stores"]] == [first.id, second.id]
    first_entry = data["stores"][0]
    assert first_entry["average_rating"] == 4.0
    assert first_entry["total_ratings"] == 2
    assert first_entry["rating_distribution"] == {"1": 0, "2": 0, "3": 1, "4": 0, "5": 1}
    assert {rating["user"]["id"] for rating in first_entry["recent_ratings"]} == {raters[0].id, raters[1].id}
    # (5 + 3 + 2) / 3
    assert data["summary"] == {"total_stores": 2, "total_ratings": 3, "overall_average_rating": 3.33}


def test_owner_dashboard_without_stores(client, make_user):
    resp = client.get("/api/v1/dashboard/owner", headers=auth_headers(make_user(Role.OWNER)))

    assert resp.status_code == 200
    assert resp.json() == {
        "stores": [],
        "summary": {"total_stores": 0, "total_ratings": 0, "overall_average_rating": 0.0},
    }


def test_dashboards_are_role_gated(client, make_user):
    owner = make_user(Role.OWNER)
    admin = make_user(Role.ADMIN)
    user = make_user(Role.USER)

    assert client.get("/api/v1/dashboard/admin", headers=auth_headers(owner)).status_code == 403
    assert client.get("/api/v1/dashboard/admin", headers=auth_headers(user)).status_code == 403
    assert client.get("/api/v1/dashboard/owner", headers=auth_headers(admin)).status_code == 403
    resp = client.get("/api/v1/dashboard/owner", headers=auth_headers(user))
    assert resp.json() == {"error": "Access denied. Store owner only."}
