# ledger/errors.py


class LedgerError(Exception):
    """Base class for all checkout ledger errors"""
    pass


class NotFoundError(LedgerError):
    """The referenced book or active checkout does not exist"""
    pass


class ConflictError(LedgerError):
    """A precondition was violated by competing state.

    Callers should re-read state before trying again; only subclasses with
    ``retryable`` set may be re-attempted blindly.
    """
    retryable = False


class SerializationConflictError(ConflictError):
    """The database aborted the transaction because a concurrent one won the race"""
    retryable = True


class StorageFailure(LedgerError):
    """Storage or transport error unrelated to ledger business rules"""
    pass
