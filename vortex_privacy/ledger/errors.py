"""Ledger error types."""


class LedgerError(Exception):
    """Base error for ledger-side failures."""


class SchemaError(LedgerError):
    """Raised when a call payload fails schema validation."""


class SizeLimitError(LedgerError):
    """Raised when a call payload exceeds configured size limits."""


class ObjectNotFound(LedgerError):
    """Raised when a call references an unknown shared object."""


class PoolAlreadyInitialized(LedgerError):
    """Raised when a pool is initialized a second time."""


class TransactionAborted(LedgerError):
    """The enclosing call aborted; carries no reason by design."""

    def __init__(self) -> None:
        super().__init__("transaction aborted")
