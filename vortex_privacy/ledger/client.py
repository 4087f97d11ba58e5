"""Client helper for submitting ``transact`` calls."""

from __future__ import annotations

import logging
from typing import Optional

from ..privacy_protocol.types import Proof
from .chain import Ledger, TransactionResult
from .constants import MODULE_NAME, MSG_V, PACKAGE_ID, TRANSACT_FUNCTION
from .identity import Address
from .messages import TransactCall, encode_call

logger = logging.getLogger(__name__)


def build_transact_call(
    pool_id: str, proof: Proof, public_value: Optional[int] = None
) -> TransactCall:
    if public_value is None:
        values = proof.public_input_values
        public_value = values[0] if values else 0
    return TransactCall(
        msg_v=MSG_V,
        package=PACKAGE_ID,
        module=MODULE_NAME,
        function=TRANSACT_FUNCTION,
        pool_id=pool_id,
        proof=proof.proof_bytes,
        public_value=public_value,
    )


def submit_transact(
    ledger: Ledger,
    sender: Address,
    pool_id: str,
    proof: Proof,
    public_value: Optional[int] = None,
) -> TransactionResult:
    """
    Submit ``proof`` to the pool as ``sender``.

    ``public_value`` defaults to the proof's first public input.
    """
    call = build_transact_call(pool_id, proof, public_value)
    result = ledger.execute(sender, encode_call(call))
    logger.info(
        "transact %s from %s: %s",
        result.digest[:18],
        sender,
        "success" if result.success else "aborted",
    )
    return result
