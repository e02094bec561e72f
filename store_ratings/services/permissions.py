import enum
import logging

from store_ratings.core.errors import ForbiddenError
from store_ratings.db.enums import Role
from store_ratings.services.identity import Principal

logger = logging.getLogger(__name__)


class Action(enum.StrEnum):
    LIST_USERS = "list_users"
    MANAGE_USERS = "manage_users"
    LIST_STORES = "list_stores"
    MANAGE_STORES = "manage_stores"
    SUBMIT_RATING = "submit_rating"
    VIEW_STORE_RATINGS = "view_store_ratings"
    DELETE_RATING = "delete_rating"
    VIEW_ADMIN_DASHBOARD = "view_admin_dashboard"
    VIEW_OWNER_DASHBOARD = "view_owner_dashboard"
    VIEW_USER_RATINGS = "view_user_ratings"


_ADMIN_DENIED = {Action.SUBMIT_RATING, Action.VIEW_OWNER_DASHBOARD}
_OWNER_GRANTED = {Action.LIST_USERS, Action.LIST_STORES, Action.VIEW_OWNER_DASHBOARD}
_OWNER_SCOPED = {Action.VIEW_STORE_RATINGS, Action.VIEW_USER_RATINGS}
_USER_GRANTED = {
    Action.LIST_USERS,
    Action.LIST_STORES,
    Action.SUBMIT_RATING,
    Action.VIEW_STORE_RATINGS,
}
_USER_SCOPED = {Action.DELETE_RATING, Action.VIEW_USER_RATINGS}

DENIAL_MESSAGES = {
    Action.LIST_USERS: "Access denied",
    Action.MANAGE_USERS: "Access denied. Admin only.",
    Action.LIST_STORES: "Access denied",
    Action.MANAGE_STORES: "Access denied. Admin only.",
    Action.SUBMIT_RATING: "Only normal users can submit ratings",
    Action.VIEW_STORE_RATINGS: "Access denied. You can only view ratings for your own store.",
    Action.DELETE_RATING: "Access denied. You can only delete your own ratings.",
    Action.VIEW_ADMIN_DASHBOARD: "Access denied. Admin only.",
    Action.VIEW_OWNER_DASHBOARD: "Access denied. Store owner only.",
    Action.VIEW_USER_RATINGS: "Access denied. You can only view your own ratings.",
}


def allow(principal: Principal, action: Action, resource_owner_id: int | None = None) -> bool:
    owns = resource_owner_id is not None and resource_owner_id == principal.id

    match principal.role:
        case Role.ADMIN:
            return action not in _ADMIN_DENIED
        case Role.OWNER:
            if action in _OWNER_SCOPED:
                return owns
            return action in _OWNER_GRANTED
        case Role.USER:
            if action in _USER_SCOPED:
                return owns
            return action in _USER_GRANTED
        case _:
            return False


def require(
    principal: Principal,
    action: Action,
    resource_owner_id: int | None = None,
    message: str | None = None,
) -> None:
    if allow(principal, action, resource_owner_id):
        return

    logger.warning(
        "Permission denied: user_id=%s role=%s action=%s resource_owner_id=%s",
        principal.id,
        principal.role,
        action,
        resource_owner_id,
    )
    raise ForbiddenError(message or DENIAL_MESSAGES[action])
