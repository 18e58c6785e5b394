import pytest

from application.use_cases.access_policy import (
    Action,
    can_access,
    client_target,
    ensure_access,
    user_target,
)
from domain.entities.client_entity import Client
from domain.entities.user_classes import RequestingUser, RoleType
from domain.exceptions import ForbiddenError

ADMIN = RequestingUser(id=1, email="admin@conectar.com", role=RoleType.admin)
USER = RequestingUser(id=2, email="user@conectar.com", role=RoleType.user)


@pytest.mark.parametrize("action", list(Action))
def test_admin_can_do_anything(action):
    assert can_access(ADMIN, user_target(99), action)
    assert can_access(ADMIN, client_target(Client(assigned_user_id=None)), action)


def test_user_reads_and_updates_only_self():
    assert can_access(USER, user_target(USER.id), Action.read)
    assert can_access(USER, user_target(USER.id), Action.update)
    assert not can_access(USER, user_target(ADMIN.id), Action.read)
    assert not can_access(USER, user_target(ADMIN.id), Action.update)


@pytest.mark.parametrize("action", [Action.delete, Action.change_role, Action.list_all, Action.assign])
def test_user_never_gets_admin_actions_even_on_self(action):
    assert not can_access(USER, user_target(USER.id), action)


def test_user_sees_only_assigned_clients():
    mine = Client(assigned_user_id=USER.id)
    theirs = Client(assigned_user_id=ADMIN.id)
    unassigned = Client(assigned_user_id=None)

    assert can_access(USER, client_target(mine), Action.read)
    assert can_access(USER, client_target(mine), Action.update)
    assert not can_access(USER, client_target(theirs), Action.read)
    assert not can_access(USER, client_target(unassigned), Action.update)
    assert not can_access(USER, client_target(mine), Action.delete)
    assert not can_access(USER, client_target(mine), Action.assign)


def test_ensure_access_raises_forbidden_with_message():
    with pytest.raises(ForbiddenError) as exc_info:
        ensure_access(USER, client_target(), Action.delete, "sem permissão")
    assert exc_info.value.message == "sem permissão"
    assert exc_info.value.status_code == 403
