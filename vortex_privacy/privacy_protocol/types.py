"""
⚠️ DRAFT — requires crypto review before production use

Common types for zero-knowledge proofs.

This module provides:
1. Witness - private inputs (a, b) and public output c of the relation
2. Proof - Groth16 proof points plus their wire encodings, with JSON
   (camelCase, matching the browser prover output) and CBOR serialization
"""

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

import cbor2

from .config import (
    FIELD_MODULUS,
    G1_COMPRESSED_SIZE,
    G2_COMPRESSED_SIZE,
    PROOF_VERSION,
    SCALAR_SIZE_BYTES,
)
from .exceptions import MalformedProofBytes, SerializationError

FieldLike = Union[int, str]


def parse_field_element(value: FieldLike) -> int:
    """
    Parse a field element from an int or a decimal string.

    Values are reduced modulo FIELD_MODULUS.

    Raises:
        ValueError: If the string is not a decimal integer
        TypeError: If the value has an unsupported type
    """
    if isinstance(value, bool):
        raise TypeError("field element must be int or decimal string, got bool")
    if isinstance(value, int):
        return value % FIELD_MODULUS
    if isinstance(value, str):
        text = value.strip()
        if not text or not text.lstrip("-").isdigit():
            raise ValueError(f"Failed to parse decimal {value!r}")
        return int(text) % FIELD_MODULUS
    raise TypeError(f"field element must be int or decimal string, got {type(value)}")


def _parse_public_input(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, str)):
        raise MalformedProofBytes(f"public input must be a decimal string, got {value!r}")
    text = str(value).strip()
    if not (text.isascii() and text.isdigit()):
        raise MalformedProofBytes(f"public input is not a decimal integer: {value!r}")
    parsed = int(text)
    if parsed >= FIELD_MODULUS:
        raise MalformedProofBytes("public input is not a canonical field element")
    return parsed


def _encode_public_inputs(values: List[Any]) -> bytes:
    """Concatenated 32-byte little-endian scalars, no length prefix."""
    return b"".join(
        _parse_public_input(v).to_bytes(SCALAR_SIZE_BYTES, "little") for v in values
    )


# ============================================================================
# WITNESS
# ============================================================================


@dataclass(frozen=True)
class Witness:
    """
    Witness for the multiplication relation ``c = a * b``.

    ``a`` and ``b`` are private, ``c`` is the public output. Elements are
    stored reduced modulo FIELD_MODULUS. Satisfiability is not checked here;
    the proof generator checks the constraint system and raises
    WitnessUnsatisfiable.

    Example:
        >>> w = Witness.create(5, 6)
        >>> w.c
        30
    """

    a: int
    b: int
    c: int

    def __post_init__(self) -> None:
        for name in ("a", "b", "c"):
            object.__setattr__(self, name, parse_field_element(getattr(self, name)))

    @classmethod
    def create(cls, a: FieldLike, b: FieldLike) -> "Witness":
        """Build a satisfying witness with ``c`` derived from ``a * b``."""
        a_val = parse_field_element(a)
        b_val = parse_field_element(b)
        return cls(a=a_val, b=b_val, c=a_val * b_val % FIELD_MODULUS)

    @classmethod
    def from_json(cls, text: str) -> "Witness":
        """Parse ``{"a": "...", "b": "...", "c": "..."}`` with decimal strings."""
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise ValueError(f"Failed to parse input JSON: {e}")
        if not isinstance(data, dict) or not {"a", "b", "c"} <= data.keys():
            raise ValueError("witness JSON must contain a, b and c")
        return cls(a=data["a"], b=data["b"], c=data["c"])

    def to_json(self) -> str:
        return json.dumps({"a": str(self.a), "b": str(self.b), "c": str(self.c)})

    def is_satisfied(self) -> bool:
        return self.a * self.b % FIELD_MODULUS == self.c


# ============================================================================
# PROOF
# ============================================================================


@dataclass
class Proof:
    """
    Groth16 proof with transport encodings.

    Attributes:
        proof_a: Compressed G1 point A (32 bytes)
        proof_b: Compressed G2 point B (64 bytes)
        proof_c: Compressed G1 point C (32 bytes)
        public_inputs: Public inputs as decimal strings, in circuit order
        proof_serialized_hex: Hex of A || B || C
        public_inputs_serialized_hex: Hex of the concatenated scalar encodings

    Serialization:
        - JSON via to_json()/from_json() with camelCase keys
        - CBOR with version field via serialize()/deserialize()
    """

    proof_a: bytes
    proof_b: bytes
    proof_c: bytes
    public_inputs: List[str] = field(default_factory=list)
    proof_serialized_hex: str = ""
    public_inputs_serialized_hex: str = ""

    def __post_init__(self) -> None:
        if not self.proof_serialized_hex:
            self.proof_serialized_hex = self.proof_bytes.hex()
        if not self.public_inputs_serialized_hex and isinstance(self.public_inputs, list):
            self.public_inputs_serialized_hex = _encode_public_inputs(
                self.public_inputs
            ).hex()
        self.validate()

    def validate(self) -> None:
        """
        Check the hex encodings against the structured fields.

        Raises:
            MalformedProofBytes: If a point has the wrong size or the two
                representations disagree
        """
        sizes = (
            ("proof_a", self.proof_a, G1_COMPRESSED_SIZE),
            ("proof_b", self.proof_b, G2_COMPRESSED_SIZE),
            ("proof_c", self.proof_c, G1_COMPRESSED_SIZE),
        )
        for name, value, size in sizes:
            if not isinstance(value, (bytes, bytearray)) or len(value) != size:
                raise MalformedProofBytes(f"{name} must be {size} bytes")
        if not isinstance(self.public_inputs, list):
            raise MalformedProofBytes("public_inputs must be a list")
        if str(self.proof_serialized_hex).lower() != self.proof_bytes.hex():
            raise MalformedProofBytes("proofSerializedHex does not match proof points")
        expected = _encode_public_inputs(self.public_inputs).hex()
        if str(self.public_inputs_serialized_hex).lower() != expected:
            raise MalformedProofBytes(
                "publicInputsSerializedHex does not match publicInputs"
            )

    @property
    def proof_bytes(self) -> bytes:
        return bytes(self.proof_a) + bytes(self.proof_b) + bytes(self.proof_c)

    @property
    def public_inputs_bytes(self) -> bytes:
        try:
            return bytes.fromhex(self.public_inputs_serialized_hex)
        except ValueError as e:
            raise MalformedProofBytes(f"Failed to decode public inputs hex: {e}")

    @property
    def public_input_values(self) -> List[int]:
        return [int(v) for v in self.public_inputs]

    @classmethod
    def from_proof_bytes(
        cls,
        proof_bytes: bytes,
        public_inputs: List[int],
        public_inputs_bytes: bytes,
    ) -> "Proof":
        """Split serialized proof points into their A, B, C components."""
        expected = 2 * G1_COMPRESSED_SIZE + G2_COMPRESSED_SIZE
        if len(proof_bytes) != expected:
            raise MalformedProofBytes(
                f"proof must be {expected} bytes, got {len(proof_bytes)}"
            )
        b_end = G1_COMPRESSED_SIZE + G2_COMPRESSED_SIZE
        return cls(
            proof_a=bytes(proof_bytes[:G1_COMPRESSED_SIZE]),
            proof_b=bytes(proof_bytes[G1_COMPRESSED_SIZE:b_end]),
            proof_c=bytes(proof_bytes[b_end:]),
            public_inputs=[str(v) for v in public_inputs],
            proof_serialized_hex=bytes(proof_bytes).hex(),
            public_inputs_serialized_hex=bytes(public_inputs_bytes).hex(),
        )

    # ========================================================================
    # JSON
    # ========================================================================

    def to_dict(self) -> Dict[str, Any]:
        return {
            "proofA": list(self.proof_a),
            "proofB": list(self.proof_b),
            "proofC": list(self.proof_c),
            "publicInputs": list(self.public_inputs),
            "proofSerializedHex": self.proof_serialized_hex,
            "publicInputsSerializedHex": self.public_inputs_serialized_hex,
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict())

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Proof":
        required = (
            "proofA",
            "proofB",
            "proofC",
            "publicInputs",
            "proofSerializedHex",
            "publicInputsSerializedHex",
        )
        missing = [k for k in required if k not in data]
        if missing:
            raise MalformedProofBytes(f"proof JSON missing fields: {', '.join(missing)}")
        try:
            return cls(
                proof_a=bytes(data["proofA"]),
                proof_b=bytes(data["proofB"]),
                proof_c=bytes(data["proofC"]),
                public_inputs=[str(v) for v in data["publicInputs"]],
                proof_serialized_hex=str(data["proofSerializedHex"]),
                public_inputs_serialized_hex=str(data["publicInputsSerializedHex"]),
            )
        except (TypeError, ValueError) as e:
            raise MalformedProofBytes(f"Failed to parse proof JSON: {e}")

    @classmethod
    def from_json(cls, text: str) -> "Proof":
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise MalformedProofBytes(f"Failed to parse proof JSON: {e}")
        if not isinstance(data, dict):
            raise MalformedProofBytes("proof JSON must be an object")
        return cls.from_dict(data)

    # ========================================================================
    # SERIALIZATION (CBOR)
    # ========================================================================

    def serialize(self) -> bytes:
        """
        Serialize proof to bytes using CBOR.

        Raises:
            SerializationError: If serialization fails
        """
        try:
            data = {
                "v": PROOF_VERSION,
                "p": self.proof_bytes,
                "i": self.public_inputs_bytes,
                "pi": list(self.public_inputs),
            }
            return cbor2.dumps(data)
        except (cbor2.CBOREncodeError, MalformedProofBytes) as e:
            raise SerializationError(f"Failed to serialize proof: {e}")

    @classmethod
    def deserialize(cls, data: bytes) -> "Proof":
        """
        Deserialize proof from CBOR bytes.

        Raises:
            MalformedProofBytes: If the payload is invalid or has the wrong version
        """
        try:
            obj = cbor2.loads(data)
        except (cbor2.CBORDecodeError, ValueError, TypeError) as e:
            raise MalformedProofBytes(f"Failed to deserialize proof: {e}")

        if not isinstance(obj, dict):
            raise MalformedProofBytes("Invalid proof format: missing required fields")

        version = obj.get("v", PROOF_VERSION)
        if version != PROOF_VERSION:
            raise MalformedProofBytes(
                f"Unsupported proof version: {version} (expected {PROOF_VERSION})"
            )

        proof_bytes: Optional[bytes] = obj.get("p")
        inputs_bytes: Optional[bytes] = obj.get("i")
        if not isinstance(proof_bytes, bytes) or not isinstance(inputs_bytes, bytes):
            raise MalformedProofBytes("Invalid proof format: missing required fields")

        public_inputs = obj.get("pi", [])
        if not isinstance(public_inputs, list):
            raise MalformedProofBytes("Invalid proof format: pi must be a list")

        return cls.from_proof_bytes(proof_bytes, public_inputs, inputs_bytes)
