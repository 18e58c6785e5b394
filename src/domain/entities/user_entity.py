# models.py
from typing import List, TYPE_CHECKING
from sqlalchemy import String, Enum as SAEnum, DateTime, func
from datetime import datetime
from sqlalchemy.orm import Mapped, mapped_column, relationship
from infrastructure.database import Base
from domain.entities.user_classes import RoleType

if TYPE_CHECKING:
    from domain.entities.client_entity import Client


class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
    # vazio para contas criadas via OAuth
    password: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    role: Mapped[RoleType] = mapped_column(
        SAEnum(RoleType, name="roletype", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=RoleType.user,
    )
    provider: Mapped[str | None] = mapped_column(String(50), nullable=True)
    last_login_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    assigned_clients: Mapped[List["Client"]] = relationship(
        "Client", back_populates="assigned_user"
    )
