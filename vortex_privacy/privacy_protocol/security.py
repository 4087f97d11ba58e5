"""
⚠️ DRAFT — requires crypto review before production use

Security utilities for cryptographic operations.

This is a PROTOTYPE implementation for testing and validation.
DO NOT use in production without security audit.
"""

import os
import random
import secrets
from typing import Optional

from .config import CURVE_NAME, FIELD_MODULUS


# ============================================================================
# FIELD MODULUS VALIDATION (Run at module import)
# ============================================================================


def _validate_field_modulus():
    """
    Validate FIELD_MODULUS is reasonable.

    Prevents configuration errors by checking FIELD_MODULUS matches
    the expected BN254 scalar field order.

    Raises:
        ValueError: If FIELD_MODULUS is invalid
    """
    if FIELD_MODULUS <= 0:
        raise ValueError(f"Invalid FIELD_MODULUS: {FIELD_MODULUS}")

    if FIELD_MODULUS < 2**128:
        raise ValueError(f"FIELD_MODULUS too small (< 2^128): {FIELD_MODULUS}")

    bn254_order = (
        0x30644E72E131A029B85045B68181585D2833E84879B9709143E1F593F0000001
    )
    if CURVE_NAME == "bn254" and FIELD_MODULUS != bn254_order:
        raise ValueError(
            f"FIELD_MODULUS mismatch for bn254: "
            f"expected {hex(bn254_order)}, got {hex(FIELD_MODULUS)}"
        )


# Validate FIELD_MODULUS on module import (fail fast)
_validate_field_modulus()


# ============================================================================
# RANDOMNESS SOURCE (Fork-Safe)
# ============================================================================


class RandomnessSource:
    """
    Cryptographically secure randomness with fork detection.

    Prevents catastrophic randomness reuse if process forks.

    Passing ``seed`` switches to a deterministic generator. That mode exists
    only for reproducible test keys and must never be used for real
    ceremonies or proofs.

    Example:
        >>> rng = RandomnessSource()
        >>> scalar = rng.get_random_field_element()
        >>> test_rng = RandomnessSource(seed=0)
    """

    def __init__(self, seed: Optional[int] = None):
        """Initialize randomness source with fork detection."""
        self._pid = os.getpid()
        self._seed = seed
        if seed is None:
            self._rng = secrets.SystemRandom()
        else:
            self._rng = random.Random(seed)

    @property
    def deterministic(self) -> bool:
        return self._seed is not None

    def _check_fork(self) -> None:
        # A seeded stream is reproducible by construction; reseeding after
        # a fork would only replay it.
        if os.getpid() != self._pid and self._seed is None:
            self.__init__()

    def get_random_scalar(self, max_value: int) -> int:
        """
        Get random scalar in [0, max_value).

        Args:
            max_value: Upper bound (exclusive)

        Returns:
            Random scalar in [0, max_value)
        """
        self._check_fork()
        return self._rng.randrange(0, max_value)

    def get_random_field_element(self, nonzero: bool = False) -> int:
        """
        Get random element of the scalar field.

        Args:
            nonzero: Draw from [1, FIELD_MODULUS) instead of [0, FIELD_MODULUS)

        Returns:
            Random field element as int
        """
        if nonzero:
            return 1 + self.get_random_scalar(FIELD_MODULUS - 1)
        return self.get_random_scalar(FIELD_MODULUS)

