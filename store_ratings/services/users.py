import logging

from sqlalchemy.orm import Session

from store_ratings.core.errors import AuthError, ConflictError, NotFoundError, ValidationError
from store_ratings.core.security import hash_password, verify_password
from store_ratings.db.enums import Role
from store_ratings.db.models.user import User
from store_ratings.db.repositories import ratings as ratings_repo
from store_ratings.db.repositories import stores as stores_repo
from store_ratings.db.repositories import users as users_repo
from store_ratings.db.session import commit_or_conflict
from store_ratings.schemas.auth import RegisterRequest
from store_ratings.schemas.user import UserCreate, UserRead, UserUpdate
from store_ratings.services import aggregation
from store_ratings.services.identity import Principal
from store_ratings.services.permissions import Action, require
from store_ratings.services.query import ListQuery, Page, QueryFields, fetch_page

logger = logging.getLogger(__name__)

USER_QUERY_FIELDS = QueryFields(
    text=("name", "email", "address"),
    exact=("role",),
    sortable=("name", "email", "address", "role", "created_at"),
    default_sort="name",
)

_EMAIL_TAKEN = "User with this email already exists"


def _owner_averages(db: Session, users: list[User]) -> dict[int, float]:
    owner_ids = [user.id for user in users if user.role == Role.OWNER]
    values_by_owner = ratings_repo.get_values_by_owner_ids(db, owner_ids)

    averages: dict[int, float] = {}
    for owner_id, values_by_store in values_by_owner.items():
        per_store = [
            aggregation.aggregate_store(store_id, values)
            for store_id, values in values_by_store.items()
        ]
        averages[owner_id] = aggregation.round_rating(aggregation.weighted_owner_average(per_store))
    return averages


def to_user_read(user: User, average_rating: float | None = None) -> UserRead:
    return UserRead(
        id=user.id,
        name=user.name,
        email=user.email,
        address=user.address,
        role=user.role,
        created_at=user.created_at,
        average_rating=average_rating,
    )


def list_users(db: Session, principal: Principal, query: ListQuery) -> Page[UserRead]:
    require(principal, Action.LIST_USERS)

    page = fetch_page(db, User, query, USER_QUERY_FIELDS)
    averages = _owner_averages(db, page.items)
    return page.map(lambda user: to_user_read(user, averages.get(user.id)))


def get_user_detail(db: Session, principal: Principal, user_id: int) -> UserRead:
    require(principal, Action.LIST_USERS)

    user = users_repo.get_user(db, user_id)
    if user is None:
        raise NotFoundError("User not found")

    averages = _owner_averages(db, [user])
    return to_user_read(user, averages.get(user.id))


def create_user(db: Session, principal: Principal, payload: UserCreate) -> UserRead:
    require(principal, Action.MANAGE_USERS)

    if users_repo.email_taken(db, payload.email):
        raise ConflictError(_EMAIL_TAKEN)

    user = User(
        name=payload.name,
        email=payload.email,
        password_hash=hash_password(payload.password),
        address=payload.address,
        role=payload.role,
    )
    db.add(user)
    commit_or_conflict(db, _EMAIL_TAKEN)
    db.refresh(user)

    logger.info("User %s created user_id=%s role=%s", principal.id, user.id, user.role)
    return to_user_read(user)


def update_user(db: Session, principal: Principal, user_id: int, payload: UserUpdate) -> UserRead:
    require(principal, Action.MANAGE_USERS)

    user = users_repo.get_user(db, user_id)
    if user is None:
        raise NotFoundError("User not found")

    changes = payload.model_dump(exclude_unset=True, exclude_none=True)

    if "email" in changes and users_repo.email_taken(db, changes["email"], exclude_user_id=user.id):
        raise ConflictError("Email is already taken by another user")

    new_role = changes.get("role")
    if (
        new_role is not None
        and user.role == Role.OWNER
        and new_role != Role.OWNER
        and stores_repo.count_stores(db, owner_id=user.id) > 0
    ):
        raise ConflictError("User still owns stores; reassign or delete them before changing the role")

    for key, value in changes.items():
        setattr(user, key, value)

    commit_or_conflict(db, "Email is already taken by another user")
    db.refresh(user)

    logger.info("User %s updated user_id=%s fields=%s", principal.id, user.id, sorted(changes))
    averages = _owner_averages(db, [user])
    return to_user_read(user, averages.get(user.id))


def delete_user(db: Session, principal: Principal, user_id: int) -> None:
    require(principal, Action.MANAGE_USERS)

    user = users_repo.get_user(db, user_id)
    if user is None:
        raise NotFoundError("User not found")

    db.delete(user)
    db.commit()
    logger.info("User %s deleted user_id=%s", principal.id, user_id)


def register_user(db: Session, payload: RegisterRequest) -> User:
    if users_repo.email_taken(db, payload.email):
        raise ConflictError(_EMAIL_TAKEN)

    user = User(
        name=payload.name,
        email=payload.email,
        password_hash=hash_password(payload.password),
        address=payload.address,
        role=Role.USER,
    )
    db.add(user)
    commit_or_conflict(db, _EMAIL_TAKEN)
    db.refresh(user)

    logger.info("Registered user_id=%s", user.id)
    return user


def authenticate(db: Session, email: str, password: str) -> User:
    user = users_repo.get_user_by_email(db, email)
    if user is None or not verify_password(password, user.password_hash):
        raise AuthError("Invalid email or password")
    return user


def change_password(db: Session, principal: Principal, current_password: str, new_password: str) -> None:
    user = users_repo.get_user(db, principal.id)
    if user is None:
        raise AuthError("Invalid token")

    if not verify_password(current_password, user.password_hash):
        raise ValidationError.for_field("current_password", "Current password is incorrect")

    user.password_hash = hash_password(new_password)
    db.commit()
    logger.info("User %s changed their password", principal.id)
