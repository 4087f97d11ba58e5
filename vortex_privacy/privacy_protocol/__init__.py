"""Public API for the proof side of the pool."""

from __future__ import annotations

from .exceptions import (
    MalformedKey,
    MalformedProofBytes,
    PrivacyProtocolError,
    ProofGenerationError,
    ProofVerificationError,
    VerificationFailed,
    WitnessUnsatisfiable,
)
from .types import Proof, Witness

__all__ = [
    "MalformedKey",
    "MalformedProofBytes",
    "PrivacyProtocolError",
    "Proof",
    "ProofGenerationError",
    "ProofVerificationError",
    "VerificationFailed",
    "Witness",
    "WitnessUnsatisfiable",
]
