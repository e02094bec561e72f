from __future__ import annotations

from store_ratings.core.security import create_access_token
from store_ratings.db.models.user import User
from store_ratings.services.identity import Principal

TEST_PASSWORD = "Secret@123"


def auth_headers(user: User) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}


def principal_for(user: User) -> Principal:
    return Principal.from_user(user)
