import logging
from datetime import datetime, timezone
from sqlalchemy.orm import Session
from domain.entities.user_classes import RoleType
from domain.entities.user_entity import User
from domain.exceptions import ConflictError, RegistrationConflictError, UnauthorizedError
from domain.models.user_models import AuthResponse, RegisterRequest, UserSummary
from adapters.repository.user_repository import UserRepository
from application.use_cases.security import create_access_token, verify_password, hash_password
from application.utils.oauth_service import OAuthProfile

logger = logging.getLogger(__name__)

class AuthenticationUseCases:
    """Application business rules for auth."""

    def __init__(self, db: Session):
        self.repo_user = UserRepository(db)

    def validate_credentials(self, *, email: str, password: str) -> User | None:
        user = self.repo_user.get_user_by_email(email)
        if not user or not verify_password(password, user.password):
            return None
        return self.repo_user.touch_last_login(user)

    def login(self, *, email: str, password: str) -> AuthResponse:
        user = self.validate_credentials(email=email, password=password)
        if not user:
            logger.warning("Tentativa de login rejeitada para %s", email)
            raise UnauthorizedError("Credenciais inválidas")

        logger.info("Login de %s (id=%s)", user.email, user.id)
        return self.issue_session(user)

    def register(self, payload: RegisterRequest) -> AuthResponse:
        if self.repo_user.get_user_by_email(payload.email):
            raise RegistrationConflictError("Email já está em uso", details={"field": "email"})

        try:
            user = self.repo_user.create_user(
                name=payload.name,
                email=payload.email,
                hashed_password=hash_password(payload.password),
                role=payload.role or RoleType.user,
            )
        except ConflictError as e:
            # cadastro concorrente com o mesmo email
            raise RegistrationConflictError(e.message, details=e.details) from e
        logger.info("Usuário registrado: %s (id=%s)", user.email, user.id)
        return self.issue_session(user)

    def reconcile_oauth_identity(self, profile: OAuthProfile, provider: str) -> User:
        user = self.repo_user.get_user_by_email(profile.email)
        if user is not None:
            return self.repo_user.touch_last_login(user)

        name = " ".join(part for part in (profile.first_name, profile.last_name) if part) or profile.email
        user = self.repo_user.create_user(
            name=name,
            email=profile.email,
            hashed_password="",
            role=RoleType.user,
            provider=provider,
            last_login_at=datetime.now(timezone.utc),
        )
        logger.info("Usuário criado via %s: %s (id=%s)", provider, user.email, user.id)
        return user

    def issue_session(self, user: User) -> AuthResponse:
        token = create_access_token(user_id=user.id, email=user.email, role=user.role)
        return AuthResponse(access_token=token, user=UserSummary.model_validate(user))
