from datetime import datetime, timedelta, timezone

import pytest

from application.use_cases.security import verify_password
from application.use_cases.user_use_cases import UserUseCases
from conftest import as_caller
from domain.entities.client_entity import Client
from domain.entities.user_classes import RoleType
from domain.entities.user_entity import User
from domain.exceptions import BadRequestError, ConflictError, ForbiddenError, NotFoundError
from domain.models.user_models import UpdatePasswordRequest, UserCreate, UserQuery, UserUpdate


class TestCreateAndList:

    def test_create_hashes_and_defaults_role(self, db):
        user = UserUseCases(db).create(UserCreate(name="Bia", email="bia@conectar.com", password="senha123"))
        assert user.role == RoleType.user
        assert verify_password("senha123", user.password)

    def test_create_duplicate_email_conflicts(self, db, regular_user):
        with pytest.raises(ConflictError):
            UserUseCases(db).create(UserCreate(name="X", email="user@conectar.com", password="senha123"))

    def test_role_filter(self, db, admin_user, regular_user, other_user):
        admins = UserUseCases(db).find_all(UserQuery(role=RoleType.admin))
        assert [u.id for u in admins] == [admin_user.id]

    def test_sort_by_name_desc(self, db, admin_user, regular_user, other_user):
        users = UserUseCases(db).find_all(UserQuery(sort_by="name", order="DESC"))
        assert [u.name for u in users] == ["Usuário Regular", "Outro Usuário", "Administrador"]

    def test_sort_by_email_defaults_to_ascending(self, db, admin_user, regular_user, other_user):
        users = UserUseCases(db).find_all(UserQuery(sort_by="email"))
        assert [u.email for u in users] == ["admin@conectar.com", "outro@conectar.com", "user@conectar.com"]

    def test_unknown_sort_field_is_ignored(self, db, admin_user, regular_user):
        query = UserQuery(sort_by="password", order="DESC")
        assert query.sort_by is None
        users = UserUseCases(db).find_all(query)
        assert {u.id for u in users} == {admin_user.id, regular_user.id}


class TestFindOne:

    def test_missing_user_is_not_found(self, db):
        with pytest.raises(NotFoundError):
            UserUseCases(db).find_one(404)

    def test_includes_assigned_clients(self, db, regular_user, make_client):
        make_client("12.345.678/0001-90", assigned_user_id=regular_user.id)
        user = UserUseCases(db).find_one(regular_user.id)
        assert [c.cnpj for c in user.assigned_clients] == ["12.345.678/0001-90"]

    def test_repeated_reads_are_identical(self, db, regular_user):
        uc = UserUseCases(db)
        first = uc.find_one(regular_user.id)
        snapshot = (first.id, first.name, first.email, first.role, first.updated_at)
        second = uc.find_one(regular_user.id)
        assert (second.id, second.name, second.email, second.role, second.updated_at) == snapshot

    def test_profile_of_someone_else_is_forbidden(self, db, regular_user, other_user):
        with pytest.raises(ForbiddenError):
            UserUseCases(db).get_profile(other_user.id, as_caller(regular_user))


class TestUpdate:

    def test_self_update(self, db, regular_user):
        user = UserUseCases(db).update(regular_user.id, UserUpdate(name="Novo Nome"), as_caller(regular_user))
        assert user.name == "Novo Nome"
        assert user.email == "user@conectar.com"

    def test_admin_updates_anyone(self, db, admin_user, regular_user):
        user = UserUseCases(db).update(regular_user.id, UserUpdate(role=RoleType.admin), as_caller(admin_user))
        assert user.role == RoleType.admin

    def test_non_admin_updating_other_is_forbidden(self, db, regular_user, other_user):
        with pytest.raises(ForbiddenError):
            UserUseCases(db).update(other_user.id, UserUpdate(name="Hack"), as_caller(regular_user))
        db.refresh(other_user)
        assert other_user.name == "Outro Usuário"

    def test_non_admin_updating_missing_id_is_still_forbidden(self, db, regular_user):
        with pytest.raises(ForbiddenError):
            UserUseCases(db).update(9999, UserUpdate(name="Hack"), as_caller(regular_user))

    def test_non_admin_cannot_promote_self(self, db, regular_user):
        with pytest.raises(ForbiddenError):
            UserUseCases(db).update(regular_user.id, UserUpdate(role=RoleType.admin), as_caller(regular_user))

    def test_email_taken_by_other_conflicts(self, db, regular_user, other_user):
        with pytest.raises(ConflictError):
            UserUseCases(db).update(
                regular_user.id, UserUpdate(email="outro@conectar.com"), as_caller(regular_user)
            )

    def test_keeping_own_email_is_fine(self, db, regular_user):
        user = UserUseCases(db).update(
            regular_user.id, UserUpdate(email="user@conectar.com", name="Mesmo"), as_caller(regular_user)
        )
        assert user.name == "Mesmo"


class TestUpdatePassword:

    def test_wrong_current_password_is_bad_request(self, db, regular_user):
        payload = UpdatePasswordRequest(current_password="errada", new_password="nova123")
        with pytest.raises(BadRequestError) as exc_info:
            UserUseCases(db).update_password(regular_user.id, payload, as_caller(regular_user))
        assert exc_info.value.message == "Senha atual incorreta"

    def test_password_is_rehashed(self, db, regular_user):
        payload = UpdatePasswordRequest(current_password="user123", new_password="nova123")
        UserUseCases(db).update_password(regular_user.id, payload, as_caller(regular_user))
        db.refresh(regular_user)
        assert verify_password("nova123", regular_user.password)
        assert not verify_password("user123", regular_user.password)

    def test_other_users_password_is_forbidden(self, db, regular_user, other_user):
        payload = UpdatePasswordRequest(current_password="outro123", new_password="nova123")
        with pytest.raises(ForbiddenError):
            UserUseCases(db).update_password(other_user.id, payload, as_caller(regular_user))


class TestRemove:

    def test_admin_cannot_delete_self(self, db, admin_user):
        with pytest.raises(BadRequestError):
            UserUseCases(db).remove(admin_user.id, as_caller(admin_user))
        assert db.get(User, admin_user.id) is not None

    def test_admin_deletes_other_user(self, db, admin_user, regular_user):
        user_id = regular_user.id
        UserUseCases(db).remove(user_id, as_caller(admin_user))
        db.expire_all()
        assert db.get(User, user_id) is None

    def test_non_admin_cannot_delete(self, db, regular_user, other_user):
        with pytest.raises(ForbiddenError):
            UserUseCases(db).remove(other_user.id, as_caller(regular_user))

    def test_missing_user_is_not_found(self, db, admin_user):
        with pytest.raises(NotFoundError):
            UserUseCases(db).remove(12345, as_caller(admin_user))

    def test_deleting_user_unassigns_clients(self, db, admin_user, regular_user, make_client):
        client = make_client("12.345.678/0001-90", assigned_user_id=regular_user.id)
        UserUseCases(db).remove(regular_user.id, as_caller(admin_user))
        db.expire_all()
        assert db.get(Client, client.id).assigned_user_id is None


def test_find_inactive_users(db, make_user):
    now = datetime.now(timezone.utc)
    stale = make_user("stale@conectar.com", last_login_at=now - timedelta(days=40))
    make_user("fresh@conectar.com", last_login_at=now - timedelta(days=10))
    never = make_user("never@conectar.com")

    inactive = UserUseCases(db).find_inactive_users(30)

    assert {u.email for u in inactive} == {stale.email, never.email}


def test_inactivity_threshold_is_configurable(db, make_user):
    now = datetime.now(timezone.utc)
    make_user("fresh@conectar.com", last_login_at=now - timedelta(days=10))

    assert [u.email for u in UserUseCases(db).find_inactive_users(5)] == ["fresh@conectar.com"]
