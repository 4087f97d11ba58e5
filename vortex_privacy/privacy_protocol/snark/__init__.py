"""Groth16 over BN254 for the multiplication circuit."""

from .assets import KeyStore, generate_keys
from .backend import ProofGenerator
from .circuit import MultiplicationCircuit
from .groth16 import (
    Groth16Proof,
    PreparedVerifyingKey,
    ProvingKey,
    VerifyingKey,
    prepare_verifying_key,
    prove,
    setup,
    verify_proof,
)

__all__ = [
    "Groth16Proof",
    "KeyStore",
    "MultiplicationCircuit",
    "PreparedVerifyingKey",
    "ProofGenerator",
    "ProvingKey",
    "VerifyingKey",
    "generate_keys",
    "prepare_verifying_key",
    "prove",
    "setup",
    "verify_proof",
]
