# ledger/__init__.py
from .errors import (
    LedgerError, NotFoundError, ConflictError, SerializationConflictError, StorageFailure
)

__all__ = [
    'LedgerError',
    'NotFoundError',
    'ConflictError',
    'SerializationConflictError',
    'StorageFailure'
]
