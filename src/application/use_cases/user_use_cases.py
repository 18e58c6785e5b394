import logging
from datetime import datetime, timedelta, timezone
from sqlalchemy.orm import Session
from adapters.repository.user_repository import UserRepository
from application.use_cases.access_policy import Action, ensure_access, user_target
from application.use_cases.security import hash_password, verify_password
from domain.entities.user_classes import RequestingUser, RoleType
from domain.entities.user_entity import User
from domain.exceptions import BadRequestError, ConflictError, NotFoundError
from domain.models.user_models import UpdatePasswordRequest, UserCreate, UserQuery, UserUpdate

logger = logging.getLogger(__name__)

DEFAULT_INACTIVITY_DAYS = 30

class UserUseCases:
    def __init__(self, db: Session):
        self.repo = UserRepository(db)

    def create(self, payload: UserCreate) -> User:
        if self.repo.get_user_by_email(payload.email):
            raise ConflictError("Email já está em uso", details={"field": "email"})

        return self.repo.create_user(
            name=payload.name,
            email=payload.email,
            hashed_password=hash_password(payload.password),
            role=payload.role or RoleType.user,
        )

    def find_all(self, filters: UserQuery | None = None) -> list[User]:
        return self.repo.find_all_users(filters or UserQuery())

    def find_one(self, user_id: int) -> User:
        user = self.repo.get_with_clients(user_id)
        if not user:
            raise NotFoundError("Usuário não encontrado")
        return user

    def get_profile(self, user_id: int, current: RequestingUser) -> User:
        ensure_access(current, user_target(user_id), Action.read,
                      "Você não tem permissão para acessar este perfil")
        return self.find_one(user_id)

    def update(self, user_id: int, payload: UserUpdate, current: RequestingUser) -> User:
        ensure_access(current, user_target(user_id), Action.update,
                      "Você não tem permissão para atualizar este usuário")
        user = self.find_one(user_id)

        values = payload.model_dump(exclude_unset=True, exclude_none=True)
        if "role" in values and values["role"] != user.role:
            ensure_access(current, user_target(user_id), Action.change_role,
                          "Você não tem permissão para alterar o papel deste usuário")

        new_email = values.get("email")
        if new_email and new_email != user.email:
            existing = self.repo.get_user_by_email(new_email)
            if existing and existing.id != user.id:
                raise ConflictError("Email já está em uso", details={"field": "email"})

        self.repo.update_user(user, values)
        return self.find_one(user_id)

    def update_password(self, user_id: int, payload: UpdatePasswordRequest, current: RequestingUser) -> None:
        ensure_access(current, user_target(user_id), Action.update,
                      "Você não tem permissão para atualizar a senha deste usuário")
        user = self.find_one(user_id)

        if not verify_password(payload.current_password, user.password):
            raise BadRequestError("Senha atual incorreta")

        self.repo.update_password(user, hash_password(payload.new_password))

    def remove(self, user_id: int, current: RequestingUser) -> None:
        ensure_access(current, user_target(user_id), Action.delete,
                      "Você não tem permissão para excluir usuários")
        if current.id == user_id:
            raise BadRequestError("Você não pode excluir sua própria conta")

        user = self.find_one(user_id)
        self.repo.delete_user(user)
        logger.info("Usuário %s excluído por %s", user_id, current.id)

    def find_inactive_users(self, days: int = DEFAULT_INACTIVITY_DAYS) -> list[User]:
        cutoff = datetime.now(timezone.utc) - timedelta(days=days)
        return self.repo.find_inactive_users(cutoff)
