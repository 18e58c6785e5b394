"""
Shared pytest fixtures.

Every test gets a fresh in-memory SQLite database. The FastAPI app is wired
to the same database through ``dependency_overrides``.
"""

import os

# precisa valer antes de importar qualquer módulo do projeto
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("JWT_SECRET", "test-secret-key-for-testing-only")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("FRONTEND_URL", "http://frontend.local")

from datetime import datetime
from typing import Optional

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from infrastructure.database import Base, enable_sqlite_foreign_keys, get_db
from domain.entities.user_entity import User
from domain.entities.client_entity import Client, ClientStatus
from domain.entities.user_classes import RequestingUser, RoleType
from application.use_cases.security import create_access_token, hash_password


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_foreign_keys(engine)
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, autocommit=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def api(session_factory):
    from main import app

    def _get_test_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _get_test_db
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db):
    def _make_user(
        email: str,
        *,
        name: str = "Usuário Teste",
        password: str = "senha123",
        role: RoleType = RoleType.user,
        last_login_at: Optional[datetime] = None,
        provider: Optional[str] = None,
    ) -> User:
        user = User(
            name=name,
            email=email,
            password=hash_password(password) if password else "",
            role=role,
            last_login_at=last_login_at,
            provider=provider,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make_user


@pytest.fixture
def admin_user(make_user) -> User:
    return make_user("admin@conectar.com", name="Administrador", password="admin123", role=RoleType.admin)


@pytest.fixture
def regular_user(make_user) -> User:
    return make_user("user@conectar.com", name="Usuário Regular", password="user123")


@pytest.fixture
def other_user(make_user) -> User:
    return make_user("outro@conectar.com", name="Outro Usuário", password="outro123")


def as_caller(user: User) -> RequestingUser:
    return RequestingUser(id=user.id, email=user.email, role=user.role)


def auth_headers(user: User) -> dict:
    token = create_access_token(user_id=user.id, email=user.email, role=user.role)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def make_client(db):
    def _make_client(
        cnpj: str,
        *,
        store_front_name: str = "Padaria do João",
        company_name: str = "João Silva Panificação LTDA",
        city: str = "São Paulo",
        status: ClientStatus = ClientStatus.active,
        assigned_user_id: Optional[int] = None,
        created_at: Optional[datetime] = None,
    ) -> Client:
        client = Client(
            store_front_name=store_front_name,
            cnpj=cnpj,
            company_name=company_name,
            cep="01234-567",
            street="Rua das Flores",
            neighborhood="Centro",
            city=city,
            state="SP",
            number="123",
            status=status,
            assigned_user_id=assigned_user_id,
        )
        if created_at is not None:
            client.created_at = created_at
        db.add(client)
        db.commit()
        db.refresh(client)
        return client

    return _make_client
