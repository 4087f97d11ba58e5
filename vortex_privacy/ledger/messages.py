"""CBOR call schema for the pool's ``transact`` entry point."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import cbor2

from .constants import (
    MAX_CALL_BYTES,
    MAX_PROOF_BYTES,
    MODULE_NAME,
    MSG_V,
    TRANSACT_FUNCTION,
    U256_MAX,
)
from .errors import SchemaError, SizeLimitError


def _require_bytes(value: Any, field: str) -> bytes:
    if not isinstance(value, (bytes, bytearray)):
        raise SchemaError(f"{field} must be bytes")
    return bytes(value)


def _require_str(value: Any, field: str) -> str:
    if not isinstance(value, str) or not value:
        raise SchemaError(f"{field} must be a non-empty string")
    return value


@dataclass(frozen=True)
class TransactCall:
    """
    ``package::module::function(pool, proof_bytes, public_value)``.

    ``public_value`` is a u256 carried for the record; the pool derives the
    verified public input from the sender, never from this field.
    """

    msg_v: int
    package: str
    module: str
    function: str
    pool_id: str
    proof: bytes
    public_value: int

    @property
    def target(self) -> tuple[str, str, str]:
        return self.package, self.module, self.function

    def validate(self) -> None:
        if self.msg_v != MSG_V:
            raise SchemaError("unsupported msg_v")
        _require_str(self.package, "package")
        if self.module != MODULE_NAME:
            raise SchemaError("unsupported module")
        if self.function != TRANSACT_FUNCTION:
            raise SchemaError("unsupported function")
        _require_str(self.pool_id, "pool_id")
        proof = _require_bytes(self.proof, "proof")
        if len(proof) > MAX_PROOF_BYTES:
            raise SizeLimitError("proof too large")
        if isinstance(self.public_value, bool) or not isinstance(self.public_value, int):
            raise SchemaError("public_value must be an integer")
        if self.public_value < 0 or self.public_value > U256_MAX:
            raise SchemaError("public_value out of u256 range")


def encode_call(call: TransactCall) -> bytes:
    call.validate()
    payload = {
        "msg_v": call.msg_v,
        "package": call.package,
        "module": call.module,
        "function": call.function,
        "pool": call.pool_id,
        "proof": bytes(call.proof),
        "value": call.public_value,
    }
    blob = cbor2.dumps(payload)
    if len(blob) > MAX_CALL_BYTES:
        raise SizeLimitError("call too large")
    return blob


def decode_call(blob: bytes) -> TransactCall:
    if not isinstance(blob, (bytes, bytearray)):
        raise SchemaError("call blob must be bytes")
    blob_bytes = bytes(blob)
    if len(blob_bytes) > MAX_CALL_BYTES:
        raise SizeLimitError("call too large")
    try:
        payload = cbor2.loads(blob_bytes)
    except (cbor2.CBORDecodeError, ValueError, TypeError) as e:
        raise SchemaError(f"call decode failed: {e}")
    if not isinstance(payload, dict):
        raise SchemaError("call payload must be a dict")
    msg_v = payload.get("msg_v", -1)
    value = payload.get("value", -1)
    call = TransactCall(
        msg_v=msg_v if isinstance(msg_v, int) else -1,
        package=payload.get("package", ""),
        module=payload.get("module", ""),
        function=payload.get("function", ""),
        pool_id=payload.get("pool", ""),
        proof=_require_bytes(payload.get("proof", b""), "proof"),
        public_value=value if isinstance(value, int) else -1,
    )
    call.validate()
    return call
