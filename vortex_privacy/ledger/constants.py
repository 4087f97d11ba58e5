"""Ledger call constants for the pool contract."""

from __future__ import annotations

from ..privacy_protocol.config import PROOF_SIZE_BYTES

MSG_V = 1
PACKAGE_ID = "0x" + "00" * 31 + "2a"
MODULE_NAME = "vortex"
TRANSACT_FUNCTION = "transact"

ADDRESS_LENGTH = 32
U256_MAX = (1 << 256) - 1

MAX_CALL_BYTES = 8192
MAX_PROOF_BYTES = 4 * PROOF_SIZE_BYTES
