"""
⚠️ DRAFT — requires crypto review before production use

Canonical compressed encoding for BN254 scalars and points.

Layout (little-endian, byte-compatible with arkworks ``serialize_compressed``):
- Fr: 32 bytes
- G1: x (32 bytes); last byte carries flags
- G2: x.c0 || x.c1 (64 bytes); last byte carries flags
- Vec<T>: u64 length || T*

Flags live in the two top bits of the final byte: 0x80 marks the larger
y root, 0x40 marks the point at infinity.
"""

from __future__ import annotations

import io
from typing import Callable, List, Sequence, TypeVar

from ..config import (
    BASE_FIELD_MODULUS,
    FIELD_MODULUS,
    FLAG_INFINITY,
    FLAG_MASK,
    FLAG_Y_IS_NEGATIVE,
    G1_COMPRESSED_SIZE,
    G2_COMPRESSED_SIZE,
    MAX_VEC_ELEMENTS,
    SCALAR_SIZE_BYTES,
    VEC_LENGTH_PREFIX_BYTES,
)
from ..exceptions import SerializationError
from .curve import (
    G1_IDENTITY,
    G2_IDENTITY,
    G1Point,
    G2Point,
    fq2_is_larger_root,
    fq_is_larger_root,
    g1_affine,
    g1_from_x,
    g2_affine,
    g2_from_x,
    is_identity,
)

T = TypeVar("T")

_FIELD_BYTES = G1_COMPRESSED_SIZE


# ============================================================================
# SCALARS
# ============================================================================


def serialize_fr(value: int) -> bytes:
    if not isinstance(value, int):
        raise TypeError(f"field element must be int, got {type(value)}")
    return (value % FIELD_MODULUS).to_bytes(SCALAR_SIZE_BYTES, "little")


def deserialize_fr(data: bytes) -> int:
    if len(data) != SCALAR_SIZE_BYTES:
        raise SerializationError(
            f"field element must be {SCALAR_SIZE_BYTES} bytes, got {len(data)}"
        )
    value = int.from_bytes(data, "little")
    if value >= FIELD_MODULUS:
        raise SerializationError("field element is not canonical")
    return value


def serialize_fr_vector(values: Sequence[int]) -> bytes:
    """Public-input encoding: concatenated scalars, no length prefix."""
    return b"".join(serialize_fr(v) for v in values)


def deserialize_fr_vector(data: bytes) -> List[int]:
    if len(data) % SCALAR_SIZE_BYTES != 0:
        raise SerializationError("public input bytes are not a whole number of scalars")
    return [
        deserialize_fr(data[i : i + SCALAR_SIZE_BYTES])
        for i in range(0, len(data), SCALAR_SIZE_BYTES)
    ]


# ============================================================================
# POINTS
# ============================================================================


def _split_flags(data: bytes) -> tuple[int, int]:
    flags = data[-1] & FLAG_MASK
    if flags == FLAG_MASK:
        raise SerializationError("point has both infinity and sign flags set")
    raw = data[:-1] + bytes([data[-1] & ~FLAG_MASK & 0xFF])
    return int.from_bytes(raw, "little"), flags


def _read_coordinate(chunk: bytes) -> int:
    value = int.from_bytes(chunk, "little")
    if value >= BASE_FIELD_MODULUS:
        raise SerializationError("coordinate is not canonical")
    return value


def serialize_g1(point: G1Point) -> bytes:
    if is_identity(point):
        out = bytearray(G1_COMPRESSED_SIZE)
        out[-1] |= FLAG_INFINITY
        return bytes(out)
    x, y = g1_affine(point)
    out = bytearray(x.to_bytes(_FIELD_BYTES, "little"))
    if fq_is_larger_root(y):
        out[-1] |= FLAG_Y_IS_NEGATIVE
    return bytes(out)


def deserialize_g1(data: bytes) -> G1Point:
    if len(data) != G1_COMPRESSED_SIZE:
        raise SerializationError(
            f"G1 point must be {G1_COMPRESSED_SIZE} bytes, got {len(data)}"
        )
    x, flags = _split_flags(data)
    if flags & FLAG_INFINITY:
        if x != 0:
            raise SerializationError("infinity must encode x = 0")
        return G1_IDENTITY
    if x >= BASE_FIELD_MODULUS:
        raise SerializationError("coordinate is not canonical")
    point = g1_from_x(x, bool(flags & FLAG_Y_IS_NEGATIVE))
    if point is None:
        raise SerializationError("G1 point is not on the curve")
    return point


def serialize_g2(point: G2Point) -> bytes:
    if is_identity(point):
        out = bytearray(G2_COMPRESSED_SIZE)
        out[-1] |= FLAG_INFINITY
        return bytes(out)
    (x0, x1), (y0, y1) = g2_affine(point)
    out = bytearray(
        x0.to_bytes(_FIELD_BYTES, "little") + x1.to_bytes(_FIELD_BYTES, "little")
    )
    if fq2_is_larger_root(y0, y1):
        out[-1] |= FLAG_Y_IS_NEGATIVE
    return bytes(out)


def deserialize_g2(data: bytes) -> G2Point:
    if len(data) != G2_COMPRESSED_SIZE:
        raise SerializationError(
            f"G2 point must be {G2_COMPRESSED_SIZE} bytes, got {len(data)}"
        )
    x0 = _read_coordinate(data[:_FIELD_BYTES])
    x1, flags = _split_flags(data[_FIELD_BYTES:])
    if flags & FLAG_INFINITY:
        if x0 != 0 or x1 != 0:
            raise SerializationError("infinity must encode x = 0")
        return G2_IDENTITY
    if x1 >= BASE_FIELD_MODULUS:
        raise SerializationError("coordinate is not canonical")
    point = g2_from_x(x0, x1, bool(flags & FLAG_Y_IS_NEGATIVE))
    if point is None:
        raise SerializationError("G2 point is not on the curve or not in the subgroup")
    return point


# ============================================================================
# STREAMS
# ============================================================================


class CanonicalReader:
    """Sequential reader over a canonical byte encoding."""

    def __init__(self, data: bytes) -> None:
        self._stream = io.BytesIO(bytes(data))
        self._size = len(data)

    def read_exact(self, size: int) -> bytes:
        chunk = self._stream.read(size)
        if len(chunk) != size:
            raise SerializationError("unexpected end of data")
        return chunk

    def read_g1(self) -> G1Point:
        return deserialize_g1(self.read_exact(G1_COMPRESSED_SIZE))

    def read_g2(self) -> G2Point:
        return deserialize_g2(self.read_exact(G2_COMPRESSED_SIZE))

    def read_fr(self) -> int:
        return deserialize_fr(self.read_exact(SCALAR_SIZE_BYTES))

    def read_vec(self, read_item: Callable[[], T]) -> List[T]:
        length = int.from_bytes(self.read_exact(VEC_LENGTH_PREFIX_BYTES), "little")
        if length > MAX_VEC_ELEMENTS:
            raise SerializationError(f"vector length {length} exceeds limit")
        return [read_item() for _ in range(length)]

    def finish(self) -> None:
        if self._stream.tell() != self._size:
            raise SerializationError("trailing bytes after canonical encoding")


class CanonicalWriter:
    """Sequential writer producing a canonical byte encoding."""

    def __init__(self) -> None:
        self._buffer = bytearray()

    def write_g1(self, point: G1Point) -> None:
        self._buffer.extend(serialize_g1(point))

    def write_g2(self, point: G2Point) -> None:
        self._buffer.extend(serialize_g2(point))

    def write_fr(self, value: int) -> None:
        self._buffer.extend(serialize_fr(value))

    def write_vec(self, items: Sequence[T], write_item: Callable[[T], None]) -> None:
        self._buffer.extend(len(items).to_bytes(VEC_LENGTH_PREFIX_BYTES, "little"))
        for item in items:
            write_item(item)

    def getvalue(self) -> bytes:
        return bytes(self._buffer)
