import logging
from typing import Any, Optional
from sqlalchemy.orm import Session, joinedload
from sqlalchemy import select, or_
from sqlalchemy.exc import IntegrityError
from adapters.repository.integrity import IntegrityKind, classify_integrity_error
from domain.entities.client_entity import Client
from domain.exceptions import BadRequestError, ConflictError, NotFoundError
from domain.models.client_models import ClientQuery, ClientSortField
from domain.models.query_models import SortOrder

logger = logging.getLogger(__name__)

SORT_COLUMNS = {
    ClientSortField.store_front_name: Client.store_front_name,
    ClientSortField.company_name: Client.company_name,
    ClientSortField.created_at: Client.created_at,
    ClientSortField.status: Client.status,
}

class ClientRepository:
    def __init__(self, db: Session):
        self.db = db

    def _commit(self) -> None:
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            kind = classify_integrity_error(e)
            logger.warning("Violação de integridade (%s) em clients: %s", kind.value, getattr(e, "orig", e))
            if kind == IntegrityKind.unique:
                raise ConflictError("CNPJ já está cadastrado", details={"field": "cnpj"})
            if kind == IntegrityKind.foreign_key:
                # usuário atribuído removido entre a checagem e o commit
                raise NotFoundError("Usuário não encontrado", details={"field": "assignedUserId"})
            raise BadRequestError("Dados do cliente violam restrições do banco")

    def _visible(self, owner_id: Optional[int]):
        """SELECT base; ``owner_id`` restringe aos clientes atribuídos a ele."""
        query = select(Client).options(joinedload(Client.assigned_user))
        if owner_id is not None:
            query = query.where(Client.assigned_user_id == owner_id)
        return query

    def get_client_by_cnpj(self, cnpj: str) -> Client | None:
        query = select(Client).where(Client.cnpj == cnpj)
        return self.db.execute(query).scalars().first()

    def find_client(self, client_id: int, owner_id: Optional[int] = None) -> Client | None:
        query = self._visible(owner_id).where(Client.id == client_id)
        return self.db.execute(query).scalars().first()

    def find_all_clients(self, filters: ClientQuery, owner_id: Optional[int] = None) -> list[Client]:
        query = self._visible(owner_id)

        if filters.name:
            query = query.where(
                or_(
                    Client.store_front_name.icontains(filters.name, autoescape=True),
                    Client.company_name.icontains(filters.name, autoescape=True),
                )
            )
        if filters.cnpj:
            query = query.where(Client.cnpj.icontains(filters.cnpj, autoescape=True))
        if filters.city:
            query = query.where(Client.city.icontains(filters.city, autoescape=True))
        if filters.status is not None:
            query = query.where(Client.status == filters.status)

        if filters.sort_by is not None:
            column = SORT_COLUMNS[filters.sort_by]
            query = query.order_by(column.desc() if filters.order == SortOrder.desc else column.asc())
        elif not filters.sort_requested:
            query = query.order_by(Client.created_at.desc(), Client.id.desc())

        return list(self.db.execute(query).scalars().unique().all())

    def register(self, values: dict[str, Any]) -> Client:
        client = Client(**values)
        self.db.add(client)
        self._commit()
        self.db.refresh(client)
        return client

    def update_client(self, client: Client, values: dict[str, Any]) -> None:
        for field, value in values.items():
            setattr(client, field, value)
        self._commit()

    def delete_client(self, client: Client) -> None:
        self.db.delete(client)
        self.db.commit()
