from sqlalchemy import func, select
from sqlalchemy.orm import Session, selectinload

from store_ratings.db.models.store import Store


def get_store(db: Session, store_id: int) -> Store | None:
    return db.get(Store, store_id, options=[selectinload(Store.owner)])


def email_taken(db: Session, email: str, exclude_store_id: int | None = None) -> bool:
    stmt = select(Store.id).where(func.lower(Store.email) == email.lower())
    if exclude_store_id is not None:
        stmt = stmt.where(Store.id != exclude_store_id)
    return db.execute(stmt.limit(1)).scalar_one_or_none() is not None


def count_stores(db: Session, owner_id: int | None = None) -> int:
    stmt = select(func.count(Store.id))
    if owner_id is not None:
        stmt = stmt.where(Store.owner_id == owner_id)
    return db.execute(stmt).scalar_one()


def get_recent_stores(db: Session, limit: int) -> list[Store]:
    return db.execute(
        select(Store)
        .options(selectinload(Store.owner))
        .order_by(Store.created_at.desc(), Store.id.asc())
        .limit(limit)
    ).scalars().all()


def get_stores_for_owner(db: Session, owner_id: int) -> list[Store]:
    return db.execute(
        select(Store)
        .where(Store.owner_id == owner_id)
        .order_by(Store.name.asc(), Store.id.asc())
    ).scalars().all()


def get_stores_by_ids(db: Session, store_ids: list[int]) -> dict[int, Store]:
    if not store_ids:
        return {}

    stores = db.execute(
        select(Store)
        .options(selectinload(Store.owner))
        .where(Store.id.in_(store_ids))
    ).scalars().all()

    return {store.id: store for store in stores}
