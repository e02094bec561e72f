from __future__ import annotations

import itertools
import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret-key")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from store_ratings.api.deps import get_db
from store_ratings.core.security import hash_password
from store_ratings.db import models  # noqa: F401
from store_ratings.db.base import Base
from store_ratings.db.enums import Role
from store_ratings.db.models.store import Store
from store_ratings.db.models.user import User
from store_ratings.db.session import build_engine
from store_ratings.main import create_app
from tests.helpers import TEST_PASSWORD

_sequence = itertools.count(1)


@pytest.fixture(scope="session")
def password_hash() -> str:
    return hash_password(TEST_PASSWORD)


@pytest.fixture
def engine():
    engine = build_engine("sqlite://", poolclass=StaticPool)
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(session_factory):
    app = create_app()

    def _override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _override_get_db
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def make_user(db, password_hash):
    def _make_user(role: Role = Role.USER, name: str | None = None, email: str | None = None, address: str = "") -> User:
        n = next(_sequence)
        user = User(
            name=name or f"Test {role.value.title()} Account Number {n:04d}",
            email=email or f"{role.value.lower()}{n}@example.com",
            password_hash=password_hash,
            address=address or f"{n} Test Street, Testville",
            role=role,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make_user


@pytest.fixture
def make_store(db):
    def _make_store(owner: User, name: str | None = None, email: str | None = None, address: str = "") -> Store:
        n = next(_sequence)
        store = Store(
            name=name or f"Neighbourhood Test Store No {n:04d}",
            email=email or f"store{n}@example.com",
            address=address or f"{n} Market Road, Shoptown",
            owner_id=owner.id,
        )
        db.add(store)
        db.commit()
        db.refresh(store)
        return store

    return _make_store
