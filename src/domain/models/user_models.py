# schemas.py
from pydantic import BaseModel, EmailStr, Field, field_validator
from pydantic.alias_generators import to_camel
from pydantic.config import ConfigDict  # pydantic v2
from datetime import datetime
from enum import Enum
from typing import List

from domain.entities.user_classes import RoleType
from domain.entities.client_entity import ClientStatus
from domain.models.query_models import SortOrder, parse_allowed, parse_order


class CamelModel(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True, alias_generator=to_camel)


class UserCreate(CamelModel):
    name: str = Field(min_length=1)
    email: EmailStr
    password: str = Field(min_length=6)
    role: RoleType | None = None

class RegisterRequest(UserCreate):
    pass

class UserUpdate(CamelModel):
    name: str | None = Field(default=None, min_length=1)
    email: EmailStr | None = None
    role: RoleType | None = None

class UpdatePasswordRequest(CamelModel):
    current_password: str = Field(min_length=1)
    new_password: str = Field(min_length=6)

class UserSummary(CamelModel):
    id: int
    name: str
    # saída: emails vindos de provedores OAuth (ex.: UPN "joao@corp.local") não passam no EmailStr
    email: str
    role: RoleType

class UserRead(UserSummary):
    provider: str | None = None
    last_login_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

class AssignedClientRead(CamelModel):
    id: int
    store_front_name: str
    cnpj: str
    company_name: str
    city: str
    status: ClientStatus

class UserDetail(UserRead):
    assigned_clients: List[AssignedClientRead] = []

class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)

class AuthResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserSummary

class TokenPayload(BaseModel):
    sub: str  # id do usuário
    email: str
    role: RoleType

class UserSortField(str, Enum):
    name = "name"
    created_at = "createdAt"
    email = "email"

class UserQuery(BaseModel):
    role: RoleType | None = None
    sort_by: UserSortField | None = None
    order: SortOrder = SortOrder.asc

    @field_validator("sort_by", mode="before")
    @classmethod
    def _ignore_unknown_sort(cls, value):
        return parse_allowed(value, UserSortField)

    @field_validator("order", mode="before")
    @classmethod
    def _normalize_order(cls, value):
        return parse_order(value)
