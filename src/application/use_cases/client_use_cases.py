import logging
from typing import Optional
from sqlalchemy.orm import Session
from adapters.repository.client_repository import ClientRepository
from adapters.repository.user_repository import UserRepository
from application.use_cases.access_policy import Action, can_access, client_target, ensure_access
from domain.entities.client_entity import Client, ClientStatus
from domain.entities.user_classes import RequestingUser
from domain.exceptions import ConflictError, NotFoundError
from domain.models.client_models import ClientCreate, ClientQuery, ClientUpdate

logger = logging.getLogger(__name__)

NULLABLE_FIELDS = frozenset({"complement", "phone", "email", "contact_person", "assigned_user_id"})

class ClientUseCases:

    def __init__(self, db: Session):
        self.repo = ClientRepository(db)
        self.repo_user = UserRepository(db)

    @staticmethod
    def _owner_scope(current: RequestingUser) -> Optional[int]:
        # admin enxerga tudo; os demais apenas clientes atribuídos a si
        return None if can_access(current, client_target(), Action.list_all) else current.id

    def _ensure_user_exists(self, user_id: int) -> None:
        if self.repo_user.get_by_id(user_id) is None:
            raise NotFoundError("Usuário não encontrado")

    def create(self, payload: ClientCreate) -> Client:
        if self.repo.get_client_by_cnpj(payload.cnpj):
            raise ConflictError("CNPJ já está cadastrado", details={"field": "cnpj"})
        if payload.assigned_user_id is not None:
            self._ensure_user_exists(payload.assigned_user_id)

        values = payload.model_dump()
        values["status"] = payload.status or ClientStatus.active
        client = self.repo.register(values)
        logger.info("Cliente %s criado (cnpj=%s)", client.id, client.cnpj)
        return self.repo.find_client(client.id)

    def find_all(self, current: RequestingUser, filters: ClientQuery | None = None) -> list[Client]:
        return self.repo.find_all_clients(filters or ClientQuery(), owner_id=self._owner_scope(current))

    def find_one(self, client_id: int, current: RequestingUser) -> Client:
        # cliente invisível para o chamador é tratado como inexistente
        client = self.repo.find_client(client_id, owner_id=self._owner_scope(current))
        if not client:
            raise NotFoundError("Cliente não encontrado")
        return client

    def update(self, client_id: int, payload: ClientUpdate, current: RequestingUser) -> Client:
        client = self.find_one(client_id, current)
        values = payload.model_dump(exclude_unset=True)

        new_cnpj = values.get("cnpj")
        if new_cnpj and new_cnpj != client.cnpj:
            existing = self.repo.get_client_by_cnpj(new_cnpj)
            if existing and existing.id != client.id:
                raise ConflictError("CNPJ já está cadastrado", details={"field": "cnpj"})

        ensure_access(current, client_target(client), Action.update,
                      "Você não tem permissão para atualizar este cliente")

        if "assigned_user_id" in values and values["assigned_user_id"] != client.assigned_user_id:
            ensure_access(current, client_target(client), Action.assign,
                          "Você não tem permissão para atribuir usuários a clientes")
            if values["assigned_user_id"] is not None:
                self._ensure_user_exists(values["assigned_user_id"])

        # campos obrigatórios não aceitam null explícito
        values = {k: v for k, v in values.items() if v is not None or k in NULLABLE_FIELDS}
        self.repo.update_client(client, values)
        return self.find_one(client_id, current)

    def remove(self, client_id: int, current: RequestingUser) -> None:
        ensure_access(current, client_target(), Action.delete,
                      "Você não tem permissão para excluir clientes")
        client = self.find_one(client_id, current)
        self.repo.delete_client(client)
        logger.info("Cliente %s excluído por %s", client_id, current.id)

    def assign_user_to_client(self, client_id: int, user_id: int, current: RequestingUser) -> Client:
        ensure_access(current, client_target(), Action.assign,
                      "Você não tem permissão para atribuir usuários a clientes")
        client = self.find_one(client_id, current)
        self._ensure_user_exists(user_id)

        self.repo.update_client(client, {"assigned_user_id": user_id})
        logger.info("Cliente %s atribuído ao usuário %s", client_id, user_id)
        return self.find_one(client_id, current)
