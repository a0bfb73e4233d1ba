from .errors import (
    AccountError,
    Conflict,
    Forbidden,
    InvalidInput,
    NotFound,
    StaleDocument,
    StorageUnavailable,
    Unauthorized,
)
from .ids import IdentifierFactory
from .models import UserDocument, redact
from .password import BcryptPasswordHasher
from .service import AccountService
from .store import JsonRecordStore

__all__ = [
    "AccountError",
    "AccountService",
    "BcryptPasswordHasher",
    "Conflict",
    "Forbidden",
    "IdentifierFactory",
    "InvalidInput",
    "JsonRecordStore",
    "NotFound",
    "StaleDocument",
    "StorageUnavailable",
    "Unauthorized",
    "UserDocument",
    "redact",
]
