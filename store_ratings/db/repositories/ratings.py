from collections import defaultdict
from datetime import datetime

from sqlalchemy import func, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import Session, selectinload

from store_ratings.db.models.rating import Rating
from store_ratings.db.models.store import Store

_DIALECT_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


def _insert_for(db: Session):
    dialect = db.get_bind().dialect.name
    try:
        return _DIALECT_INSERTS[dialect]
    except KeyError:
        raise RuntimeError(f"Rating upsert is not supported on the '{dialect}' dialect")


def upsert_rating(db: Session, user_id: int, store_id: int, value: int, now: datetime) -> tuple[int, bool]:
    insert = _insert_for(db)
    stmt = insert(Rating).values(
        user_id=user_id,
        store_id=store_id,
        value=value,
        created_at=now,
        updated_at=now,
    )
    stmt = stmt.on_conflict_do_update(
        index_elements=["user_id", "store_id"],
        set_={"value": stmt.excluded.value, "updated_at": stmt.excluded.updated_at},
    ).returning(Rating.id, Rating.created_at, Rating.updated_at)

    # the conflict branch only moves updated_at
    rating_id, created_at, updated_at = db.execute(stmt).one()
    return rating_id, created_at != updated_at


def get_rating(db: Session, rating_id: int, *, refresh: bool = False) -> Rating | None:
    return db.get(
        Rating,
        rating_id,
        options=[selectinload(Rating.user), selectinload(Rating.store)],
        populate_existing=refresh,
    )


def count_ratings(db: Session, store_id: int | None = None) -> int:
    stmt = select(func.count(Rating.id))
    if store_id is not None:
        stmt = stmt.where(Rating.store_id == store_id)
    return db.execute(stmt).scalar_one()


def get_ratings_for_user(db: Session, user_id: int) -> list[Rating]:
    return db.execute(
        select(Rating)
        .options(selectinload(Rating.store))
        .where(Rating.user_id == user_id)
        .order_by(Rating.created_at.desc(), Rating.id.asc())
    ).scalars().all()


def get_user_values_by_store_ids(db: Session, user_id: int, store_ids: list[int]) -> dict[int, int]:
    if not store_ids:
        return {}

    rows = db.execute(
        select(Rating.store_id, Rating.value)
        .where(Rating.user_id == user_id, Rating.store_id.in_(store_ids))
    ).all()

    return {store_id: value for store_id, value in rows}


def get_values_by_store_ids(db: Session, store_ids: list[int]) -> dict[int, list[int]]:
    if not store_ids:
        return {}

    rows = db.execute(
        select(Rating.store_id, Rating.value)
        .where(Rating.store_id.in_(store_ids))
    ).all()

    values: dict[int, list[int]] = {store_id: [] for store_id in store_ids}
    for store_id, value in rows:
        values[store_id].append(value)
    return values


def get_values_for_all_stores(db: Session) -> dict[int, list[int]]:
    rows = db.execute(select(Rating.store_id, Rating.value)).all()

    values: dict[int, list[int]] = defaultdict(list)
    for store_id, value in rows:
        values[store_id].append(value)
    return dict(values)


def get_values_by_owner_ids(db: Session, owner_ids: list[int]) -> dict[int, dict[int, list[int]]]:
    if not owner_ids:
        return {}

    rows = db.execute(
        select(Store.owner_id, Rating.store_id, Rating.value)
        .join(Store, Store.id == Rating.store_id)
        .where(Store.owner_id.in_(owner_ids))
    ).all()

    grouped: dict[int, dict[int, list[int]]] = defaultdict(lambda: defaultdict(list))
    for owner_id, store_id, value in rows:
        grouped[owner_id][store_id].append(value)
    return {owner_id: dict(stores) for owner_id, stores in grouped.items()}


def get_recent_ratings(db: Session, limit: int) -> list[Rating]:
    return db.execute(
        select(Rating)
        .options(selectinload(Rating.user), selectinload(Rating.store))
        .order_by(Rating.created_at.desc(), Rating.id.asc())
        .limit(limit)
    ).scalars().all()


def get_ratings_for_stores(db: Session, store_ids: list[int]) -> dict[int, list[Rating]]:
    if not store_ids:
        return {}

    ratings = db.execute(
        select(Rating)
        .options(selectinload(Rating.user))
        .where(Rating.store_id.in_(store_ids))
        .order_by(Rating.created_at.desc(), Rating.id.asc())
    ).scalars().all()

    by_store: dict[int, list[Rating]] = {store_id: [] for store_id in store_ids}
    for rating in ratings:
        by_store[rating.store_id].append(rating)
    return by_store
