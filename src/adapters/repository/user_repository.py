import logging
from datetime import datetime, timezone
from typing import Any
from sqlalchemy.orm import Session, selectinload
from sqlalchemy import select, or_
from sqlalchemy.exc import IntegrityError
from adapters.repository.integrity import IntegrityKind, classify_integrity_error
from domain.entities.user_entity import User
from domain.entities.client_entity import Client  # registra o mapper de Client
from domain.entities.user_classes import RoleType
from domain.exceptions import BadRequestError, ConflictError
from domain.models.query_models import SortOrder
from domain.models.user_models import UserQuery, UserSortField

logger = logging.getLogger(__name__)

SORT_COLUMNS = {
    UserSortField.name: User.name,
    UserSortField.created_at: User.created_at,
    UserSortField.email: User.email,
}

class UserRepository:
    def __init__(self, db: Session):
        self.db = db

    def _commit(self) -> None:
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            kind = classify_integrity_error(e)
            logger.warning("Violação de integridade (%s) em users: %s", kind.value, getattr(e, "orig", e))
            if kind == IntegrityKind.unique:
                raise ConflictError("Email já está em uso", details={"field": "email"})
            raise BadRequestError("Dados do usuário violam restrições do banco")

    def get_by_id(self, user_id: int) -> User | None:
        return self.db.get(User, user_id)

    def get_with_clients(self, user_id: int) -> User | None:
        query = select(User).options(selectinload(User.assigned_clients)).where(User.id == user_id)
        return self.db.execute(query).scalars().first()

    def get_user_by_email(self, email: str) -> User | None:
        query = select(User).where(User.email == email)
        return self.db.execute(query).scalars().first()

    def create_user(
        self,
        *,
        name: str,
        email: str,
        hashed_password: str,
        role: RoleType,
        provider: str | None = None,
        last_login_at: datetime | None = None,
    ) -> User:
        user = User(
            name=name,
            email=email,
            password=hashed_password,
            role=role,
            provider=provider,
            last_login_at=last_login_at,
        )
        self.db.add(user)
        self._commit()
        self.db.refresh(user)
        return user

    def find_all_users(self, filters: UserQuery) -> list[User]:
        query = select(User)
        if filters.role is not None:
            query = query.where(User.role == filters.role)
        if filters.sort_by is not None:
            column = SORT_COLUMNS[filters.sort_by]
            query = query.order_by(column.desc() if filters.order == SortOrder.desc else column.asc())
        return list(self.db.execute(query).scalars().all())

    def update_user(self, user: User, values: dict[str, Any]) -> User:
        for field, value in values.items():
            setattr(user, field, value)
        self._commit()
        self.db.refresh(user)
        return user

    def update_password(self, user: User, hashed_password: str) -> None:
        user.password = hashed_password
        self._commit()

    def touch_last_login(self, user: User) -> User:
        user.last_login_at = datetime.now(timezone.utc)
        self._commit()
        self.db.refresh(user)
        return user

    def delete_user(self, user: User) -> None:
        self.db.delete(user)
        self.db.commit()

    def find_inactive_users(self, cutoff: datetime) -> list[User]:
        query = select(User).where(or_(User.last_login_at.is_(None), User.last_login_at < cutoff))
        return list(self.db.execute(query).scalars().all())
