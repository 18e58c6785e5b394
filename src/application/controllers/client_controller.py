from fastapi import APIRouter, Depends, Query, Response, status
from infrastructure.database import get_db
from sqlalchemy.orm import Session
from domain.entities.client_entity import ClientStatus
from domain.models.client_models import ClientCreate, ClientQuery, ClientRead, ClientUpdate
from application.use_cases.client_use_cases import ClientUseCases
from domain.entities.user_classes import RequestingUser, RoleType
from application.use_cases.security import (
    get_current_user, require_roles)
from typing import List

router = APIRouter(prefix="/clients", tags=["clients"])

@router.post("", status_code=201, response_model=ClientRead)
def register_client(payload: ClientCreate, db: Session = Depends(get_db), current: RequestingUser = Depends(get_current_user)):
    uc = ClientUseCases(db)
    return uc.create(payload)

@router.get("", response_model=List[ClientRead])
def find_all_clients(
    name: str | None = None,
    cnpj: str | None = None,
    city: str | None = None,
    client_status: ClientStatus | None = Query(None, alias="status"),
    sort_by: str | None = Query(None, alias="sortBy"),
    order: str | None = None,
    db: Session = Depends(get_db),
    current: RequestingUser = Depends(get_current_user),
):
    filters = ClientQuery.from_params(
        name=name, cnpj=cnpj, city=city, status=client_status, sort_by=sort_by, order=order
    )
    uc = ClientUseCases(db)
    return uc.find_all(current, filters)

@router.get("/{client_id}", response_model=ClientRead)
def find_client_by_id(
        client_id: int,
        db: Session = Depends(get_db),
        current: RequestingUser = Depends(get_current_user)
):
    uc = ClientUseCases(db)
    return uc.find_one(client_id, current)

@router.patch("/{client_id}", response_model=ClientRead)
def update_client(
        client_id: int,
        payload: ClientUpdate,
        db: Session = Depends(get_db),
        current: RequestingUser = Depends(get_current_user)
):
    uc = ClientUseCases(db)
    return uc.update(client_id, payload, current)

@router.delete("/{client_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_client(
        client_id: int,
        db: Session = Depends(get_db),
        current: RequestingUser = Depends(require_roles(RoleType.admin))
):
    ClientUseCases(db).remove(client_id, current)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

@router.patch("/{client_id}/assign/{user_id}", response_model=ClientRead)
def assign_user(
        client_id: int,
        user_id: int,
        db: Session = Depends(get_db),
        current: RequestingUser = Depends(require_roles(RoleType.admin))
):
    uc = ClientUseCases(db)
    return uc.assign_user_to_client(client_id, user_id, current)
