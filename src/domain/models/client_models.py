from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel, EmailStr, Field, field_validator

from domain.entities.client_entity import ClientStatus
from domain.models.user_models import CamelModel, UserSummary
from domain.models.query_models import SortOrder, parse_allowed, parse_order

class ClientCreate(CamelModel):
    store_front_name: str = Field(min_length=1, examples=["Loja do João"])
    cnpj: str = Field(min_length=1, max_length=20, examples=["12.345.678/0001-90"])
    company_name: str = Field(min_length=1, examples=["João Silva Comércio LTDA"])
    cep: str = Field(min_length=1, max_length=9, examples=["01234-567"])
    street: str = Field(min_length=1)
    neighborhood: str = Field(min_length=1)
    city: str = Field(min_length=1)
    state: str = Field(min_length=2, max_length=2, examples=["SP"])
    number: str = Field(min_length=1)
    complement: Optional[str] = None
    status: Optional[ClientStatus] = None
    phone: Optional[str] = None
    email: Optional[EmailStr] = None
    contact_person: Optional[str] = None
    assigned_user_id: Optional[int] = None

class ClientUpdate(CamelModel):
    store_front_name: Optional[str] = Field(default=None, min_length=1)
    cnpj: Optional[str] = Field(default=None, min_length=1, max_length=20)
    company_name: Optional[str] = Field(default=None, min_length=1)
    cep: Optional[str] = Field(default=None, min_length=1, max_length=9)
    street: Optional[str] = Field(default=None, min_length=1)
    neighborhood: Optional[str] = Field(default=None, min_length=1)
    city: Optional[str] = Field(default=None, min_length=1)
    state: Optional[str] = Field(default=None, min_length=2, max_length=2)
    number: Optional[str] = Field(default=None, min_length=1)
    complement: Optional[str] = None
    status: Optional[ClientStatus] = None
    phone: Optional[str] = None
    email: Optional[EmailStr] = None
    contact_person: Optional[str] = None
    assigned_user_id: Optional[int] = None

class ClientRead(CamelModel):
    id: int
    store_front_name: str
    cnpj: str
    company_name: str
    cep: str
    street: str
    neighborhood: str
    city: str
    state: str
    number: str
    complement: Optional[str] = None
    status: ClientStatus
    phone: Optional[str] = None
    email: Optional[str] = None
    contact_person: Optional[str] = None
    assigned_user_id: Optional[int] = None
    assigned_user: Optional[UserSummary] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

class ClientSortField(str, Enum):
    store_front_name = "storeFrontName"
    company_name = "companyName"
    created_at = "createdAt"
    status = "status"

class ClientQuery(BaseModel):
    name: Optional[str] = None
    cnpj: Optional[str] = None
    city: Optional[str] = None
    status: Optional[ClientStatus] = None
    sort_by: Optional[ClientSortField] = None
    # sortBy informado mas fora da lista: nenhuma ordenação é aplicada
    sort_requested: bool = False
    order: SortOrder = SortOrder.asc

    @field_validator("sort_by", mode="before")
    @classmethod
    def _ignore_unknown_sort(cls, value):
        return parse_allowed(value, ClientSortField)

    @field_validator("order", mode="before")
    @classmethod
    def _normalize_order(cls, value):
        return parse_order(value)

    @classmethod
    def from_params(cls, *, name=None, cnpj=None, city=None, status=None, sort_by=None, order=None) -> "ClientQuery":
        return cls(
            name=name or None,
            cnpj=cnpj or None,
            city=city or None,
            status=status,
            sort_by=sort_by,
            sort_requested=bool(sort_by),
            order=order,
        )
