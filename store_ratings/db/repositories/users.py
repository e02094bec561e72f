from sqlalchemy import func, select
from sqlalchemy.orm import Session

from store_ratings.db.enums import Role
from store_ratings.db.models.user import User


def get_user(db: Session, user_id: int) -> User | None:
    return db.get(User, user_id)


def get_user_by_email(db: Session, email: str) -> User | None:
    return db.execute(
        select(User).where(func.lower(User.email) == email.lower())
    ).scalar_one_or_none()


def email_taken(db: Session, email: str, exclude_user_id: int | None = None) -> bool:
    stmt = select(User.id).where(func.lower(User.email) == email.lower())
    if exclude_user_id is not None:
        stmt = stmt.where(User.id != exclude_user_id)
    return db.execute(stmt.limit(1)).scalar_one_or_none() is not None


def count_users(db: Session) -> int:
    return db.execute(select(func.count(User.id))).scalar_one()


def count_users_by_role(db: Session) -> dict[Role, int]:
    rows = db.execute(
        select(User.role, func.count(User.id))
        .group_by(User.role)
    ).all()

    counts = {role: 0 for role in Role}
    for role, count in rows:
        counts[Role(role)] = count
    return counts


def get_recent_users(db: Session, limit: int) -> list[User]:
    return db.execute(
        select(User)
        .order_by(User.created_at.desc(), User.id.asc())
        .limit(limit)
    ).scalars().all()
