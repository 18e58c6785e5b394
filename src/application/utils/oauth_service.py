"""
Login social (Google e Microsoft) via fluxo authorization code.

O handshake em si é do provedor; aqui só montamos a URL de autorização,
trocamos o ``code`` por um access token e lemos o perfil do usuário.
"""

import logging
import os
from dataclasses import dataclass
from typing import Callable, Optional
from urllib.parse import urlencode

import httpx
from dotenv import load_dotenv

from domain.exceptions import NotFoundError, ServiceUnavailableError, UnauthorizedError

load_dotenv()

logger = logging.getLogger(__name__)

FRONTEND_URL = os.environ.get("FRONTEND_URL", "http://localhost:8080")
OAUTH_TIMEOUT_SECONDS = float(os.environ.get("OAUTH_TIMEOUT_SECONDS", "10"))
MICROSOFT_TENANT = os.environ.get("MICROSOFT_TENANT", "common")


@dataclass(frozen=True)
class OAuthProfile:
    email: str
    first_name: str | None = None
    last_name: str | None = None


def _google_profile(data: dict) -> OAuthProfile:
    return OAuthProfile(
        email=data.get("email"),
        first_name=data.get("given_name"),
        last_name=data.get("family_name"),
    )


def _microsoft_profile(data: dict) -> OAuthProfile:
    return OAuthProfile(
        email=data.get("mail") or data.get("userPrincipalName"),
        first_name=data.get("givenName"),
        last_name=data.get("surname"),
    )


@dataclass(frozen=True)
class OAuthProviderConfig:
    name: str
    client_id: str
    client_secret: str
    callback_url: str
    authorize_url: str
    token_url: str
    profile_url: str
    scope: str
    parse_profile: Callable[[dict], OAuthProfile]

    @property
    def is_configured(self) -> bool:
        return bool(self.client_id and self.client_secret)


def _provider_configs() -> dict[str, OAuthProviderConfig]:
    ms_base = f"https://login.microsoftonline.com/{MICROSOFT_TENANT}/oauth2/v2.0"
    return {
        "google": OAuthProviderConfig(
            name="google",
            client_id=os.environ.get("GOOGLE_CLIENT_ID", ""),
            client_secret=os.environ.get("GOOGLE_CLIENT_SECRET", ""),
            callback_url=os.environ.get("GOOGLE_CALLBACK_URL", "http://localhost:3000/auth/google/callback"),
            authorize_url="https://accounts.google.com/o/oauth2/v2/auth",
            token_url="https://oauth2.googleapis.com/token",
            profile_url="https://openidconnect.googleapis.com/v1/userinfo",
            scope="openid email profile",
            parse_profile=_google_profile,
        ),
        "microsoft": OAuthProviderConfig(
            name="microsoft",
            client_id=os.environ.get("MICROSOFT_CLIENT_ID", ""),
            client_secret=os.environ.get("MICROSOFT_CLIENT_SECRET", ""),
            callback_url=os.environ.get("MICROSOFT_CALLBACK_URL", "http://localhost:3000/auth/microsoft/callback"),
            authorize_url=f"{ms_base}/authorize",
            token_url=f"{ms_base}/token",
            profile_url="https://graph.microsoft.com/v1.0/me",
            scope="user.read",
            parse_profile=_microsoft_profile,
        ),
    }


class OAuthProvider:
    """Cliente HTTP de um provedor OAuth2."""

    def __init__(self, config: OAuthProviderConfig, transport: Optional[httpx.BaseTransport] = None):
        self.config = config
        self._transport = transport

    @property
    def name(self) -> str:
        return self.config.name

    def _ensure_configured(self) -> None:
        if not self.config.is_configured:
            raise ServiceUnavailableError(f"Login com {self.name} não está configurado")

    def authorization_url(self, state: str) -> str:
        self._ensure_configured()
        params = {
            "client_id": self.config.client_id,
            "redirect_uri": self.config.callback_url,
            "response_type": "code",
            "scope": self.config.scope,
            "state": state,
        }
        return f"{self.config.authorize_url}?{urlencode(params)}"

    def fetch_profile(self, code: str) -> OAuthProfile:
        """Troca o ``code`` por um access token e devolve o perfil do usuário."""
        self._ensure_configured()
        try:
            with httpx.Client(timeout=OAUTH_TIMEOUT_SECONDS, transport=self._transport) as client:
                token_resp = client.post(
                    self.config.token_url,
                    data={
                        "client_id": self.config.client_id,
                        "client_secret": self.config.client_secret,
                        "code": code,
                        "grant_type": "authorization_code",
                        "redirect_uri": self.config.callback_url,
                    },
                    headers={"Accept": "application/json"},
                )
                token_resp.raise_for_status()
                access_token = token_resp.json().get("access_token")
                if not access_token:
                    raise UnauthorizedError(f"Falha na autenticação com {self.name}")

                profile_resp = client.get(
                    self.config.profile_url,
                    headers={"Authorization": f"Bearer {access_token}"},
                )
                profile_resp.raise_for_status()
                profile = self.config.parse_profile(profile_resp.json())
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("Erro no OAuth com %s: %s", self.name, e)
            raise UnauthorizedError(f"Falha na autenticação com {self.name}")

        if not profile.email:
            raise UnauthorizedError(f"Provedor {self.name} não informou o email")
        return profile


def get_oauth_provider(name: str) -> OAuthProvider:
    config = _provider_configs().get(name)
    if config is None:
        raise NotFoundError(f"Provedor OAuth desconhecido: {name}")
    return OAuthProvider(config)


def frontend_callback_url(token: str) -> str:
    return f"{FRONTEND_URL}/#/auth/callback?{urlencode({'token': token})}"
