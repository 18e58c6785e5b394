# security.py
import os
import logging
from datetime import datetime, timedelta, timezone
from typing import Optional
from jose import jwt, JWTError, ExpiredSignatureError
from jose.exceptions import JWTClaimsError
from passlib.context import CryptContext
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from pydantic import ValidationError
from dotenv import load_dotenv

from domain.models.user_models import TokenPayload
from domain.entities.user_classes import RequestingUser, RoleType
from domain.exceptions import ForbiddenError, TokenError, TokenErrorKind, UnauthorizedError

load_dotenv()

logger = logging.getLogger(__name__)

BCRYPT_ROUNDS = int(os.environ.get("BCRYPT_ROUNDS", "12"))

pwd_context = CryptContext(
    schemes=["bcrypt_sha256"],
    deprecated="auto",
    bcrypt_sha256__rounds=BCRYPT_ROUNDS,
)

http_bearer = HTTPBearer(auto_error=False)

JWT_SECRET = os.environ.get("JWT_SECRET", "change_this_in_prod")
ALGORITHM = os.environ.get("JWT_ALGORITHM", "HS256")
# sessões valem 24h
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.environ.get("ACCESS_TOKEN_EXPIRE_MINUTES", str(60 * 24)))
JWT_LEEWAY_SECONDS = int(os.environ.get("JWT_LEEWAY_SECONDS", "0"))

def hash_password(raw: str) -> str:
    if not isinstance(raw, str):
        raise TypeError("Password must be a string")
    return pwd_context.hash(raw)

def verify_password(raw: str, hashed: str | None) -> bool:
    # contas OAuth não têm hash: nunca batem com senha local
    if not isinstance(raw, str) or not hashed:
        return False
    return pwd_context.verify(raw, hashed)

def create_access_token(*, user_id: int, email: str, role: RoleType, expires_minutes: int | None = None) -> str:
    now = datetime.now(timezone.utc)
    expire = now + timedelta(minutes=expires_minutes or ACCESS_TOKEN_EXPIRE_MINUTES)
    role_value = role.value if hasattr(role, "value") else str(role)
    payload = {"sub": str(user_id), "email": email, "role": role_value, "iat": now, "exp": expire}
    return jwt.encode(payload, JWT_SECRET, algorithm=ALGORITHM)

def verify_token(token: str) -> RequestingUser:
    """Valida assinatura, validade e claims; devolve a identidade do chamador.

    Falha sempre com ``TokenError``, cujo ``kind`` distingue expirado,
    malformado, ainda não válido e demais problemas.
    """
    try:
        payload = jwt.decode(
            token,
            JWT_SECRET,
            algorithms=[ALGORITHM],
            options={"verify_exp": True, "leeway": JWT_LEEWAY_SECONDS},
        )
    except ExpiredSignatureError:
        raise TokenError(TokenErrorKind.expired, "Token expirado")
    except JWTClaimsError as e:
        if "nbf" in str(e):
            raise TokenError(TokenErrorKind.not_yet_valid, "Token não ativo ainda")
        raise TokenError(TokenErrorKind.other, f"Erro no token: {e}")
    except JWTError:
        raise TokenError(TokenErrorKind.malformed, "Token malformado")

    try:
        data = TokenPayload(sub=payload.get("sub"), email=payload.get("email"), role=payload.get("role"))
        return RequestingUser(id=int(data.sub), email=data.email, role=data.role)
    except (ValidationError, TypeError, ValueError):
        raise TokenError(TokenErrorKind.other, "Erro no token: claims inválidas")

def get_current_user(credentials: Optional[HTTPAuthorizationCredentials] = Depends(http_bearer)) -> RequestingUser:
    if credentials is None or not credentials.credentials:
        raise UnauthorizedError("Token não fornecido")
    try:
        return verify_token(credentials.credentials)
    except TokenError as e:
        logger.warning("Token rejeitado (%s)", e.kind.value)
        raise

def require_roles(*allowed: RoleType):
    def _checker(current: RequestingUser = Depends(get_current_user)) -> RequestingUser:
        if current.role not in allowed:
            raise ForbiddenError("Permissões insuficientes")
        return current
    return _checker
