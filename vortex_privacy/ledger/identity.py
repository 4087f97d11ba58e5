"""Ledger identities and the recipient binding derived from them."""

from __future__ import annotations

from dataclasses import dataclass

from ..privacy_protocol.config import FIELD_MODULUS
from .constants import ADDRESS_LENGTH
from .errors import SchemaError


@dataclass(frozen=True)
class Address:
    """
    32-byte ledger account address.

    Example:
        >>> sender = Address.from_hex("0x1e")
        >>> sender.to_field_element()
        30
    """

    value: bytes

    def __post_init__(self) -> None:
        if not isinstance(self.value, (bytes, bytearray)):
            raise SchemaError("address must be bytes")
        if len(self.value) != ADDRESS_LENGTH:
            raise SchemaError(f"address must be {ADDRESS_LENGTH} bytes")
        object.__setattr__(self, "value", bytes(self.value))

    @classmethod
    def from_hex(cls, text: str) -> "Address":
        """Parse ``0x``-prefixed hex; short values are left-padded with zeros."""
        cleaned = text.strip()
        if cleaned.startswith(("0x", "0X")):
            cleaned = cleaned[2:]
        if not cleaned or len(cleaned) > 2 * ADDRESS_LENGTH:
            raise SchemaError(f"invalid address: {text!r}")
        try:
            raw = bytes.fromhex(cleaned.rjust(2 * ADDRESS_LENGTH, "0"))
        except ValueError:
            raise SchemaError(f"invalid address: {text!r}")
        return cls(raw)

    @classmethod
    def from_int(cls, value: int) -> "Address":
        if value < 0 or value >= 1 << (8 * ADDRESS_LENGTH):
            raise SchemaError("address integer out of range")
        return cls(value.to_bytes(ADDRESS_LENGTH, "big"))

    def to_int(self) -> int:
        return int.from_bytes(self.value, "big")

    def to_field_element(self) -> int:
        """Recipient binding: the big-endian address reduced mod FIELD_MODULUS."""
        return recipient_field(self)

    def __str__(self) -> str:
        return "0x" + self.value.hex()


def recipient_field(address: Address) -> int:
    return address.to_int() % FIELD_MODULUS
