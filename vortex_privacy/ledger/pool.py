"""
On-ledger verifier for the multiplication relation.

⚠️ DRAFT — requires crypto review before production use

A ``VortexPool`` is created Uninitialized, moves to Ready exactly once at
deployment, and stays Ready for its lifetime. Its prepared verifying key is
fixed at that transition and only read afterwards.

Every ``transact`` failure surfaces as the same ``TransactionAborted``;
the underlying reason is only logged at debug level.
"""

from __future__ import annotations

import hashlib
import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple

from ..privacy_protocol.config import CURVE_NAME
from ..privacy_protocol.exceptions import (
    MalformedProofBytes,
    ProofVerificationError,
    SerializationError,
    VerificationFailed,
)
from ..privacy_protocol.snark.groth16 import (
    Groth16Proof,
    PreparedVerifyingKey,
    VerifyingKey,
    prepare_verifying_key,
    verify_proof,
)
from ..privacy_protocol.snark.serialization import (
    deserialize_fr_vector,
    serialize_fr_vector,
)
from .chain import Event, Ledger, TxContext
from .constants import MODULE_NAME, PACKAGE_ID, TRANSACT_FUNCTION
from .errors import PoolAlreadyInitialized, TransactionAborted
from .identity import Address
from .messages import TransactCall

logger = logging.getLogger(__name__)

TRANSACT_EVENT = "TransactEvent"


class PoolState(Enum):
    UNINITIALIZED = "uninitialized"
    READY = "ready"


@dataclass(frozen=True)
class TransactRecord:
    sender: Address
    public_value: int
    proof_digest: str


class VortexPool:
    """
    Shared pool object holding the prepared verifying key.

    Example:
        >>> ledger = Ledger()
        >>> pool_id = VortexPool.init(ledger, verification_key_bytes)
        >>> pool = ledger.get_object(pool_id)
        >>> pool.state
        <PoolState.READY: 'ready'>
    """

    def __init__(self) -> None:
        self._pvk: Optional[PreparedVerifyingKey] = None
        self._records: List[TransactRecord] = []

    def __setattr__(self, name: str, value) -> None:
        if name == "_pvk" and getattr(self, "_pvk", None) is not None:
            raise AttributeError("prepared verifying key is immutable")
        super().__setattr__(name, value)

    @property
    def state(self) -> PoolState:
        return PoolState.READY if self._pvk is not None else PoolState.UNINITIALIZED

    @property
    def curve(self) -> str:
        return CURVE_NAME

    @property
    def pvk(self) -> PreparedVerifyingKey:
        if self._pvk is None:
            raise TransactionAborted()
        return self._pvk

    @property
    def records(self) -> Tuple[TransactRecord, ...]:
        """
        Accepted transactions, oldest first.

        The history only grows; a failed call rolls back to the previous
        snapshot and nothing is ever pruned.
        """
        return tuple(self._records)

    def initialize(self, verifying_key_bytes: bytes) -> None:
        """
        Move Uninitialized → Ready.

        Raises:
            PoolAlreadyInitialized: If the pool is already Ready
            MalformedKey: If the verifying key bytes cannot be decoded
        """
        if self._pvk is not None:
            raise PoolAlreadyInitialized("pool is already initialized")
        vk = VerifyingKey.from_bytes(bytes(verifying_key_bytes))
        self._pvk = prepare_verifying_key(vk)

    @classmethod
    def init(cls, ledger: Ledger, verifying_key_bytes: bytes) -> str:
        """Deploy a Ready pool on ``ledger`` and return its object id."""
        pool = cls()
        pool.initialize(verifying_key_bytes)
        pool_id = ledger.publish_shared(pool)
        if not ledger.is_registered(PACKAGE_ID, MODULE_NAME, TRANSACT_FUNCTION):
            ledger.register(PACKAGE_ID, MODULE_NAME, TRANSACT_FUNCTION, _transact_entry)
        logger.info("Deployed %s pool %s", CURVE_NAME, pool_id)
        return pool_id

    def snapshot(self) -> Tuple[TransactRecord, ...]:
        return tuple(self._records)

    def restore(self, state: Tuple[TransactRecord, ...]) -> None:
        self._records = list(state)

    def _record(self, record: TransactRecord) -> None:
        self._records.append(record)


def _verify_bound_proof(
    pvk: PreparedVerifyingKey, proof_points_bytes: bytes, sender: Address
) -> None:
    recipient = sender.to_field_element()
    public_inputs = deserialize_fr_vector(serialize_fr_vector([recipient]))
    proof = Groth16Proof.from_bytes(proof_points_bytes)
    if not verify_proof(pvk, proof, public_inputs):
        raise VerificationFailed("pairing check failed")


def transact(
    pool: VortexPool,
    proof_points_bytes: bytes,
    public_value: int,
    ctx: TxContext,
) -> TransactRecord:
    """
    Verify a proof bound to ``ctx.sender`` and record the transaction.

    The verified public input is always the sender's field element;
    ``public_value`` is recorded alongside but does not take part in the check.

    Raises:
        TransactionAborted: On any failure, without detail
    """
    if pool.state is not PoolState.READY:
        logger.debug("transact on uninitialized pool")
        raise TransactionAborted()

    try:
        _verify_bound_proof(pool.pvk, bytes(proof_points_bytes), ctx.sender)
    except (MalformedProofBytes, VerificationFailed, SerializationError, ProofVerificationError) as e:
        logger.debug("transact rejected: %s: %s", type(e).__name__, e)
        raise TransactionAborted() from None

    record = TransactRecord(
        sender=ctx.sender,
        public_value=public_value,
        proof_digest=hashlib.sha256(bytes(proof_points_bytes)).hexdigest(),
    )
    pool._record(record)
    ctx.emit(
        Event(
            type=TRANSACT_EVENT,
            fields={
                "sender": str(record.sender),
                "public_value": record.public_value,
                "proof_digest": record.proof_digest,
            },
        )
    )
    return record


def _transact_entry(ctx: TxContext, pool: VortexPool, call: TransactCall) -> None:
    if not isinstance(pool, VortexPool):
        raise TransactionAborted()
    transact(pool, call.proof, call.public_value, ctx)
