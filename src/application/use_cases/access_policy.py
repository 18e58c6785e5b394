"""
Regras de autorização centralizadas.

Todo método de caso de uso consulta ``can_access`` (ou ``ensure_access``)
antes de tocar no banco. Administradores passam por tudo; usuários comuns
só leem e alteram recursos dos quais são donos: o próprio cadastro e os
clientes atribuídos a eles.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from domain.entities.user_classes import RequestingUser
from domain.entities.client_entity import Client
from domain.exceptions import ForbiddenError


class ResourceKind(str, Enum):
    user = "user"
    client = "client"


class Action(str, Enum):
    read = "read"
    update = "update"
    delete = "delete"
    assign = "assign"
    change_role = "change_role"
    list_all = "list_all"


@dataclass(frozen=True)
class Target:
    kind: ResourceKind
    owner_id: Optional[int] = None


def user_target(user_id: Optional[int] = None) -> Target:
    # o dono de um usuário é ele mesmo
    return Target(ResourceKind.user, user_id)


def client_target(client: Optional[Client] = None) -> Target:
    return Target(ResourceKind.client, client.assigned_user_id if client is not None else None)


OWNER_ACTIONS = frozenset({Action.read, Action.update})


def can_access(caller: RequestingUser, target: Target, action: Action) -> bool:
    if caller.is_admin:
        return True
    if action not in OWNER_ACTIONS:
        return False
    return target.owner_id is not None and target.owner_id == caller.id


def ensure_access(caller: RequestingUser, target: Target, action: Action, message: str) -> None:
    if not can_access(caller, target, action):
        raise ForbiddenError(message)
