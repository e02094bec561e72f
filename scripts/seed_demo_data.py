import argparse
import time
from datetime import datetime, timezone

from sqlalchemy import select

from store_ratings.core.security import hash_password
from store_ratings.db.base import Base
from store_ratings.db.enums import Role
from store_ratings.db.models.store import Store
from store_ratings.db.models.user import User
from store_ratings.db.repositories.ratings import upsert_rating
from store_ratings.db.repositories.users import get_user_by_email
from store_ratings.db.session import SessionLocal, engine

DEMO_USERS = [
    {
        "name": "System Administrator User",
        "email": "admin@storerating.com",
        "address": "123 Admin Street, Admin City, Admin State 12345",
        "role": Role.ADMIN,
    },
    {
        "name": "Store Owner Business Manager",
        "email": "owner@storerating.com",
        "address": "456 Business Avenue, Business City, Business State 67890",
        "role": Role.OWNER,
    },
    {
        "name": "Regular User Customer Person",
        "email": "user@storerating.com",
        "address": "789 Customer Lane, Customer City, Customer State 13579",
        "role": Role.USER,
    },
]

DEMO_STORES = [
    {
        "name": "Amazing Electronics Store and More",
        "email": "info@amazingstore.com",
        "address": "100 Electronics Boulevard, Tech City, Tech State 11111",
    },
    {
        "name": "Fresh Groceries Market Downtown",
        "email": "hello@freshgroceries.com",
        "address": "200 Market Street, Food City, Food State 22222",
    },
    {
        "name": "Cozy Books and Coffee Corner Shop",
        "email": "contact@cozybooks.com",
        "address": "300 Reading Road, Book City, Book State 33333",
    },
]

DEMO_RATINGS = {
    "info@amazingstore.com": 5,
    "hello@freshgroceries.com": 4,
}


def log(message: str) -> None:
    ts = time.strftime("%Y-%m-%d %H:%M:%S")
    print(f"[{ts}] {message}", flush=True)


def _get_or_create_user(db, fields: dict, password_hash: str) -> User:
    user = get_user_by_email(db, fields["email"])
    if user is not None:
        log(f"User exists: {fields['email']} (id={user.id})")
        return user

    user = User(password_hash=password_hash, **fields)
    db.add(user)
    db.flush()
    log(f"Created {fields['role']} user {fields['email']} (id={user.id})")
    return user


def _get_or_create_store(db, fields: dict, owner: User) -> Store:
    store = db.execute(select(Store).where(Store.email == fields["email"])).scalar_one_or_none()
    if store is not None:
        log(f"Store exists: {fields['email']} (id={store.id})")
        return store

    store = Store(owner_id=owner.id, **fields)
    db.add(store)
    db.flush()
    log(f"Created store {fields['email']} (id={store.id})")
    return store


def seed(password: str) -> None:
    started = time.perf_counter()
    password_hash = hash_password(password)

    db = SessionLocal()
    try:
        users = {fields["role"]: _get_or_create_user(db, fields, password_hash) for fields in DEMO_USERS}
        stores = [_get_or_create_store(db, fields, users[Role.OWNER]) for fields in DEMO_STORES]

        now = datetime.now(timezone.utc)
        for store in stores:
            value = DEMO_RATINGS.get(store.email)
            if value is None:
                continue
            rating_id, was_update = upsert_rating(db, users[Role.USER].id, store.id, value, now)
            log(f"{'Updated' if was_update else 'Created'} rating id={rating_id} store={store.email} value={value}")

        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()

    elapsed = time.perf_counter() - started
    log(f"Seeding done (users={len(DEMO_USERS)}, stores={len(DEMO_STORES)}, elapsed={elapsed:.2f}s)")


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Create demo admin/owner/user accounts, stores and ratings."
    )
    parser.add_argument(
        "--password",
        type=str,
        default="Admin@1234",
        help="Password assigned to every demo account.",
    )
    parser.add_argument(
        "--create-tables",
        action="store_true",
        help="Create missing tables from the ORM models before seeding (skip when using alembic).",
    )
    args = parser.parse_args()

    if args.create_tables:
        from store_ratings.db import models  # noqa: F401

        Base.metadata.create_all(bind=engine)
        log("Ensured ORM tables exist.")

    seed(args.password)


if __name__ == "__main__":
    main()
