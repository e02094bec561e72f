from dataclasses import dataclass

from sqlalchemy.orm import Session

from store_ratings.core.errors import AuthError
from store_ratings.core.security import decode_access_token
from store_ratings.db.enums import Role
from store_ratings.db.models.user import User


@dataclass(frozen=True)
class Principal:
    id: int
    role: Role
    name: str

    @classmethod
    def from_user(cls, user: User) -> "Principal":
        return cls(id=user.id, role=Role(user.role), name=user.name)


def resolve_principal(db: Session, token: str | None) -> Principal:
    if not token:
        raise AuthError("Access denied. No token provided.")

    user_id = decode_access_token(token)
    user = db.get(User, user_id)
    if user is None:
        raise AuthError("Invalid token")

    return Principal.from_user(user)
