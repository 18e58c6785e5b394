# autentication_controller.py
import secrets
import logging
from fastapi import APIRouter, Depends, Request
from fastapi.responses import RedirectResponse
from sqlalchemy.orm import Session

from infrastructure.database import get_db
from domain.models.user_models import AuthResponse, LoginRequest, RegisterRequest
from domain.entities.user_classes import RequestingUser
from domain.exceptions import UnauthorizedError
from application.use_cases.autentication_use_cases import AuthenticationUseCases
from application.use_cases.security import get_current_user
from application.utils.oauth_service import OAuthProvider, get_oauth_provider, frontend_callback_url

OAUTH_STATE_COOKIE = "oauth_state"
OAUTH_STATE_MAX_AGE = 600  # segundos

router = APIRouter(prefix="/auth", tags=["auth"])

logger = logging.getLogger(__name__)

def resolve_provider(provider: str) -> OAuthProvider:
    return get_oauth_provider(provider)

@router.post("/login", response_model=AuthResponse)
def login(payload: LoginRequest, db: Session = Depends(get_db)):
    uc = AuthenticationUseCases(db)
    return uc.login(email=payload.email, password=payload.password)

@router.post("/register", response_model=AuthResponse, status_code=201)
def register(payload: RegisterRequest, db: Session = Depends(get_db)):
    uc = AuthenticationUseCases(db)
    return uc.register(payload)

@router.get("/me")
def me(current: RequestingUser = Depends(get_current_user)):
    return {"id": current.id, "email": current.email, "role": current.role.value}

@router.get("/{provider}")
def oauth_start(oauth: OAuthProvider = Depends(resolve_provider)):
    """Redireciona para a tela de consentimento do provedor."""
    state = secrets.token_urlsafe(24)
    response = RedirectResponse(oauth.authorization_url(state), status_code=302)
    response.set_cookie(
        OAUTH_STATE_COOKIE,
        state,
        max_age=OAUTH_STATE_MAX_AGE,
        httponly=True,
        samesite="lax",
        path="/auth",
    )
    return response

@router.get("/{provider}/callback")
def oauth_callback(
    request: Request,
    code: str | None = None,
    state: str | None = None,
    oauth: OAuthProvider = Depends(resolve_provider),
    db: Session = Depends(get_db),
):
    expected_state = request.cookies.get(OAUTH_STATE_COOKIE)
    if not code or not state or not expected_state or not secrets.compare_digest(state, expected_state):
        logger.warning("Callback OAuth de %s sem code/state válidos", oauth.name)
        raise UnauthorizedError(f"Falha na autenticação com {oauth.name}")

    profile = oauth.fetch_profile(code)
    uc = AuthenticationUseCases(db)
    user = uc.reconcile_oauth_identity(profile, oauth.name)
    session = uc.issue_session(user)
    logger.info("Login via %s de %s (id=%s)", oauth.name, user.email, user.id)

    response = RedirectResponse(frontend_callback_url(session.access_token), status_code=302)
    response.delete_cookie(OAUTH_STATE_COOKIE, path="/auth")
    return response
