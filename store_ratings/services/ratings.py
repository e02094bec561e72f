import logging
from dataclasses import dataclass
from datetime import datetime, timezone

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from store_ratings.core.errors import NotFoundError, ValidationError
from store_ratings.db.enums import Role, SortOrder
from store_ratings.db.models.rating import Rating
from store_ratings.db.repositories import ratings as ratings_repo
from store_ratings.db.repositories import stores as stores_repo
from store_ratings.db.repositories import users as users_repo
from store_ratings.db.session import is_missing_reference
from store_ratings.schemas.rating import RaterSummary, StoreRatingList, StoreRatingRead, UserRatingRead
from store_ratings.services import aggregation
from store_ratings.services.identity import Principal
from store_ratings.services.permissions import Action, require
from store_ratings.services.query import ListQuery, QueryFields, fetch_page

logger = logging.getLogger(__name__)

RATING_QUERY_FIELDS = QueryFields(
    sortable=("created_at", "value"),
    default_sort="created_at",
)


@dataclass(frozen=True)
class SubmitResult:
    rating: Rating
    was_update: bool


def _check_value(value: int) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError.for_field("value", "Rating must be an integer")
    if not aggregation.RATING_MIN <= value <= aggregation.RATING_MAX:
        raise ValidationError.for_field("value", "Rating must be between 1 and 5")


def submit(db: Session, principal: Principal, store_id: int, value: int) -> SubmitResult:
    require(principal, Action.SUBMIT_RATING)
    _check_value(value)

    if stores_repo.get_store(db, store_id) is None:
        raise NotFoundError("Store not found")

    try:
        rating_id, was_update = ratings_repo.upsert_rating(
            db,
            user_id=principal.id,
            store_id=store_id,
            value=value,
            now=datetime.now(timezone.utc),
        )
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        if is_missing_reference(exc):
            # store deleted after the existence check
            raise NotFoundError("Store not found")
        raise

    rating = ratings_repo.get_rating(db, rating_id, refresh=True)
    logger.info(
        "User %s %s rating_id=%s store_id=%s value=%s",
        principal.id,
        "updated" if was_update else "created",
        rating_id,
        store_id,
        value,
    )
    return SubmitResult(rating=rating, was_update=was_update)


def delete_by_id(db: Session, principal: Principal, rating_id: int) -> None:
    rating = ratings_repo.get_rating(db, rating_id)
    if rating is None:
        raise NotFoundError("Rating not found")

    require(principal, Action.DELETE_RATING, resource_owner_id=rating.user_id)

    db.delete(rating)
    db.commit()
    logger.info("User %s deleted rating_id=%s", principal.id, rating_id)


def list_for_user(db: Session, principal: Principal, user_id: int) -> list[UserRatingRead]:
    require(principal, Action.VIEW_USER_RATINGS, resource_owner_id=user_id)

    if users_repo.get_user(db, user_id) is None:
        raise NotFoundError("User not found")

    return [
        UserRatingRead.model_validate(rating)
        for rating in ratings_repo.get_ratings_for_user(db, user_id)
    ]


def list_for_store(
    db: Session,
    principal: Principal,
    store_id: int,
    page: int = 1,
    limit: int = 10,
) -> StoreRatingList:
    store = stores_repo.get_store(db, store_id)
    if store is None:
        raise NotFoundError("Store not found")

    require(principal, Action.VIEW_STORE_RATINGS, resource_owner_id=store.owner_id)

    where = [Rating.store_id == store_id]
    if principal.role == Role.USER:
        # regular users only ever see their own rating row
        where.append(Rating.user_id == principal.id)

    query = ListQuery(sort_by="created_at", sort_order=SortOrder.DESC, page=page, limit=limit)
    rows = fetch_page(
        db,
        Rating,
        query,
        RATING_QUERY_FIELDS,
        where=where,
        options=[selectinload(Rating.user)],
    )

    values = ratings_repo.get_values_by_store_ids(db, [store_id])[store_id]
    return StoreRatingList(
        items=[
            StoreRatingRead(
                id=rating.id,
                value=rating.value,
                user_id=rating.user_id,
                store_id=rating.store_id,
                created_at=rating.created_at,
                updated_at=rating.updated_at,
                user=RaterSummary.model_validate(rating.user),
            )
            for rating in rows.items
        ],
        pagination=rows.pagination(),
        average_rating=aggregation.average(values),
        total_ratings=len(values),
    )
