from enum import Enum
from sqlalchemy.exc import IntegrityError

# SQLSTATE do postgres; sqlite só informa no texto da mensagem
UNIQUE_VIOLATION = "23505"
FOREIGN_KEY_VIOLATION = "23503"

class IntegrityKind(str, Enum):
    unique = "unique"
    foreign_key = "foreign_key"
    other = "other"

def classify_integrity_error(error: IntegrityError) -> IntegrityKind:
    orig = getattr(error, "orig", None)
    code = getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)
    if code == UNIQUE_VIOLATION:
        return IntegrityKind.unique
    if code == FOREIGN_KEY_VIOLATION:
        return IntegrityKind.foreign_key

    message = str(orig if orig is not None else error).lower()
    if "unique" in message or "duplicate" in message:
        return IntegrityKind.unique
    if "foreign key" in message:
        return IntegrityKind.foreign_key
    return IntegrityKind.other
