"""Simulated ledger and the on-ledger pool verifier."""

from .chain import Event, Ledger, TransactionResult, TxContext
from .client import build_transact_call, submit_transact
from .errors import (
    LedgerError,
    ObjectNotFound,
    PoolAlreadyInitialized,
    SchemaError,
    SizeLimitError,
    TransactionAborted,
)
from .identity import Address
from .messages import TransactCall, decode_call, encode_call
from .pool import PoolState, TransactRecord, VortexPool, transact

__all__ = [
    "Address",
    "Event",
    "Ledger",
    "LedgerError",
    "ObjectNotFound",
    "PoolAlreadyInitialized",
    "PoolState",
    "SchemaError",
    "SizeLimitError",
    "TransactCall",
    "TransactRecord",
    "TransactionAborted",
    "TransactionResult",
    "TxContext",
    "VortexPool",
    "build_transact_call",
    "decode_call",
    "encode_call",
    "submit_transact",
    "transact",
]
