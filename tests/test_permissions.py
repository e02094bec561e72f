from __future__ import annotations

import pytest

from store_ratings.core.errors import ForbiddenError
from store_ratings.db.enums import Role
from store_ratings.services.identity import Principal
from store_ratings.services.permissions import Action, allow, require

SELF_ID = 10
OTHER_ID = 20

ADMIN = Principal(id=SELF_ID, role=Role.ADMIN, name="Administrator Account Name")
OWNER = Principal(id=SELF_ID, role=Role.OWNER, name="Owner Account Display Name")
USER = Principal(id=SELF_ID, role=Role.USER, name="Regular Account Display Name")

# (action, admin, owner, user) for a resource owned by someone else
UNOWNED_MATRIX = [
    (Action.MANAGE_USERS, True, False, False),
    (Action.MANAGE_STORES, True, False, False),
    (Action.LIST_USERS, True, True, True),
    (Action.LIST_STORES, True, True, True),
    (Action.SUBMIT_RATING, False, False, True),
    (Action.VIEW_STORE_RATINGS, True, False, True),
    (Action.DELETE_RATING, True, False, False),
    (Action.VIEW_ADMIN_DASHBOARD, True, False, False),
    (Action.VIEW_OWNER_DASHBOARD, False, True, False),
    (Action.VIEW_USER_RATINGS, True, False, False),
]

# same table when the caller owns the resource
OWNED_MATRIX = [
    (Action.MANAGE_USERS, True, False, False),
    (Action.MANAGE_STORES, True, False, False),
    (Action.LIST_USERS, True, True, True),
    (Action.LIST_STORES, True, True, True),
    (Action.SUBMIT_RATING, False, False, True),
    (Action.VIEW_STORE_RATINGS, True, True, True),
    (Action.DELETE_RATING, True, False, True),
    (Action.VIEW_ADMIN_DASHBOARD, True, False, False),
    (Action.VIEW_OWNER_DASHBOARD, False, True, False),
    (Action.VIEW_USER_RATINGS, True, True, True),
]


def _expand(matrix):
    for action, admin, owner, user in matrix:
        yield ADMIN, action, admin
        yield OWNER, action, owner
        yield USER, action, user


def test_matrix_covers_every_action():
    assert {row[0] for row in UNOWNED_MATRIX} == set(Action)
    assert {row[0] for row in OWNED_MATRIX} == set(Action)


@pytest.mark.parametrize("principal,action,expected", list(_expand(UNOWNED_MATRIX)))
def test_allow_for_resource_owned_by_someone_else(principal, action, expected):
    assert allow(principal, action, OTHER_ID) is expected


@pytest.mark.parametrize("principal,action,expected", list(_expand(OWNED_MATRIX)))
def test_allow_for_own_resource(principal, action, expected):
    assert allow(principal, action, SELF_ID) is expected


@pytest.mark.parametrize("principal", [OWNER, USER])
def test_scoped_actions_without_owner_id_deny(principal):
    assert allow(principal, Action.DELETE_RATING) is False
    assert allow(principal, Action.VIEW_USER_RATINGS) is False


def test_require_raises_forbidden_with_role_message():
    with pytest.raises(ForbiddenError) as excinfo:
        require(USER, Action.MANAGE_STORES)

    assert excinfo.value.status_code == 403
    assert "Admin only" in excinfo.value.message


def test_require_passes_silently_when_allowed():
    assert require(OWNER, Action.VIEW_STORE_RATINGS, resource_owner_id=SELF_ID) is None
