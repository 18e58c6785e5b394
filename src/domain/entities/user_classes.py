# entities.py
from dataclasses import dataclass
from enum import Enum

class RoleType(str, Enum):
    admin = "admin"
    user = "user"

@dataclass(frozen=True)
class RequestingUser:
    """Identidade do chamador, extraída do token uma única vez por requisição."""
    id: int
    email: str
    role: RoleType

    @property
    def is_admin(self) -> bool:
        return self.role == RoleType.admin
