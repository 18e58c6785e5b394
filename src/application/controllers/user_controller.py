from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session
from infrastructure.database import get_db
from domain.models.user_models import UpdatePasswordRequest, UserCreate, UserDetail, UserQuery, UserRead, UserUpdate
from application.use_cases.user_use_cases import UserUseCases, DEFAULT_INACTIVITY_DAYS
from domain.entities.user_classes import RequestingUser, RoleType
from typing import List
from application.use_cases.security import (
    get_current_user, require_roles,
)

router = APIRouter(prefix="/users", tags=["users"])

admin_only = require_roles(RoleType.admin)

@router.post("", response_model=UserRead, status_code=201)
def create_user(
    payload: UserCreate,
    db: Session = Depends(get_db),
    _: RequestingUser = Depends(admin_only),
):
    return UserUseCases(db).create(payload)

@router.get("", response_model=List[UserRead])
def find_all_users(
    role: RoleType | None = None,
    sort_by: str | None = Query(None, alias="sortBy"),
    order: str | None = None,
    db: Session = Depends(get_db),
    _: RequestingUser = Depends(admin_only),
):
    filters = UserQuery(role=role, sort_by=sort_by, order=order)
    return UserUseCases(db).find_all(filters)

@router.get("/inactive/list", response_model=List[UserRead])
def find_inactive_users(
    days: int = Query(DEFAULT_INACTIVITY_DAYS, ge=0),
    db: Session = Depends(get_db),
    _: RequestingUser = Depends(admin_only),
):
    return UserUseCases(db).find_inactive_users(days)

@router.get("/profile/me", response_model=UserDetail)
def get_profile(db: Session = Depends(get_db), current: RequestingUser = Depends(get_current_user)):
    return UserUseCases(db).find_one(current.id)

@router.patch("/profile/me", response_model=UserDetail)
def update_profile(
    payload: UserUpdate,
    db: Session = Depends(get_db),
    current: RequestingUser = Depends(get_current_user),
):
    return UserUseCases(db).update(current.id, payload, current)

@router.patch("/profile/me/password")
def update_profile_password(
    payload: UpdatePasswordRequest,
    db: Session = Depends(get_db),
    current: RequestingUser = Depends(get_current_user),
):
    UserUseCases(db).update_password(current.id, payload, current)
    return {"message": "Senha atualizada com sucesso"}

@router.get("/{user_id}", response_model=UserDetail)
def find_user(user_id: int, db: Session = Depends(get_db), current: RequestingUser = Depends(get_current_user)):
    return UserUseCases(db).get_profile(user_id, current)

@router.patch("/{user_id}", response_model=UserDetail)
def update_user(
    user_id: int,
    payload: UserUpdate,
    db: Session = Depends(get_db),
    current: RequestingUser = Depends(get_current_user),
):
    return UserUseCases(db).update(user_id, payload, current)

@router.patch("/{user_id}/password")
def update_user_password(
    user_id: int,
    payload: UpdatePasswordRequest,
    db: Session = Depends(get_db),
    current: RequestingUser = Depends(get_current_user),
):
    UserUseCases(db).update_password(user_id, payload, current)
    return {"message": "Senha atualizada com sucesso"}

@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_user(user_id: int, db: Session = Depends(get_db), current: RequestingUser = Depends(admin_only)):
    UserUseCases(db).remove(user_id, current)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
