import logging

from sqlalchemy.orm import Session, selectinload

from store_ratings.core.errors import ConflictError, NotFoundError
from store_ratings.db.enums import Role
from store_ratings.db.models.store import Store
from store_ratings.db.models.user import User
from store_ratings.db.repositories import ratings as ratings_repo
from store_ratings.db.repositories import stores as stores_repo
from store_ratings.db.repositories import users as users_repo
from store_ratings.db.session import commit_or_conflict
from store_ratings.schemas.store import OwnerSummary, StoreCreate, StoreRead, StoreUpdate
from store_ratings.services import aggregation
from store_ratings.services.identity import Principal
from store_ratings.services.permissions import Action, require
from store_ratings.services.query import ListQuery, Page, QueryFields, fetch_page

logger = logging.getLogger(__name__)

STORE_QUERY_FIELDS = QueryFields(
    text=("name", "email", "address"),
    sortable=("name", "email", "address", "created_at"),
    default_sort="name",
)

_EMAIL_TAKEN = "Store with this email already exists"
_INVALID_OWNER = "Invalid owner ID or user is not a store owner"


def _store_reads(db: Session, principal: Principal, stores: list[Store]) -> list[StoreRead]:
    store_ids = [store.id for store in stores]
    values_by_store = ratings_repo.get_values_by_store_ids(db, store_ids)

    # only a USER's own values are looked up, never other raters'
    own_values: dict[int, int] = {}
    if principal.role == Role.USER:
        own_values = ratings_repo.get_user_values_by_store_ids(db, principal.id, store_ids)

    reads = []
    for store in stores:
        values = values_by_store.get(store.id, [])
        reads.append(
            StoreRead(
                id=store.id,
                name=store.name,
                email=store.email,
                address=store.address,
                owner=OwnerSummary.model_validate(store.owner),
                average_rating=aggregation.average(values),
                total_ratings=len(values),
                user_rating=own_values.get(store.id),
                created_at=store.created_at,
            )
        )
    return reads


def _require_owner(db: Session, owner_id: int) -> User:
    owner = users_repo.get_user(db, owner_id)
    if owner is None or owner.role != Role.OWNER:
        raise ConflictError(_INVALID_OWNER)
    return owner


def list_stores(db: Session, principal: Principal, query: ListQuery) -> Page[StoreRead]:
    require(principal, Action.LIST_STORES)

    page = fetch_page(db, Store, query, STORE_QUERY_FIELDS, options=[selectinload(Store.owner)])
    return Page(
        items=_store_reads(db, principal, page.items),
        total=page.total,
        page=page.page,
        limit=page.limit,
    )


def get_store_detail(db: Session, principal: Principal, store_id: int) -> StoreRead:
    require(principal, Action.LIST_STORES)

    store = stores_repo.get_store(db, store_id)
    if store is None:
        raise NotFoundError("Store not found")
    return _store_reads(db, principal, [store])[0]


def create_store(db: Session, principal: Principal, payload: StoreCreate) -> StoreRead:
    require(principal, Action.MANAGE_STORES)

    if stores_repo.email_taken(db, payload.email):
        raise ConflictError(_EMAIL_TAKEN)
    _require_owner(db, payload.owner_id)

    store = Store(
        name=payload.name,
        email=payload.email,
        address=payload.address,
        owner_id=payload.owner_id,
    )
    db.add(store)
    commit_or_conflict(db, _EMAIL_TAKEN, missing_reference=_INVALID_OWNER)

    logger.info("User %s created store_id=%s owner_id=%s", principal.id, store.id, store.owner_id)
    return get_store_detail(db, principal, store.id)


def update_store(db: Session, principal: Principal, store_id: int, payload: StoreUpdate) -> StoreRead:
    require(principal, Action.MANAGE_STORES)

    store = stores_repo.get_store(db, store_id)
    if store is None:
        raise NotFoundError("Store not found")

    changes = payload.model_dump(exclude_unset=True, exclude_none=True)

    if "email" in changes and stores_repo.email_taken(db, changes["email"], exclude_store_id=store.id):
        raise ConflictError("Email is already taken by another store")
    if "owner_id" in changes:
        _require_owner(db, changes["owner_id"])

    for key, value in changes.items():
        setattr(store, key, value)

    commit_or_conflict(db, "Email is already taken by another store", missing_reference=_INVALID_OWNER)

    logger.info("User %s updated store_id=%s fields=%s", principal.id, store.id, sorted(changes))
    return get_store_detail(db, principal, store.id)


def delete_store(db: Session, principal: Principal, store_id: int) -> None:
    require(principal, Action.MANAGE_STORES)

    store = stores_repo.get_store(db, store_id)
    if store is None:
        raise NotFoundError("Store not found")

    db.delete(store)
    db.commit()
    logger.info("User %s deleted store_id=%s", principal.id, store_id)
