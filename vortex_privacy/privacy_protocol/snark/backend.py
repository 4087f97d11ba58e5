"""Client-side proof generation and local verification facade."""

from __future__ import annotations

import logging
from typing import Optional, Union

from ..exceptions import (
    MalformedKey,
    ProofGenerationError,
    ProofVerificationError,
    SerializationError,
    WitnessUnsatisfiable,
)
from ..security import RandomnessSource
from ..types import Proof, Witness
from .assets import decode_key_hex
from .circuit import MultiplicationCircuit, synthesize
from .groth16 import (
    Groth16Proof,
    ProvingKey,
    VerifyingKey,
    prepare_verifying_key,
    prove,
    verify_proof,
)
from .serialization import deserialize_fr_vector

logger = logging.getLogger(__name__)

KeyMaterial = Union[ProvingKey, VerifyingKey, bytes, bytearray, str]


def _key_bytes(material: Union[bytes, bytearray, str], label: str) -> bytes:
    if isinstance(material, (bytes, bytearray)):
        return bytes(material)
    if isinstance(material, str):
        return decode_key_hex(material, label)
    raise MalformedKey(
        f"{label} must be a key object, bytes or hex text, got {type(material).__name__}"
    )


def _coerce_proving_key(material: KeyMaterial) -> ProvingKey:
    if isinstance(material, ProvingKey):
        return material
    if isinstance(material, VerifyingKey):
        raise MalformedKey("expected a proving key, got a verifying key")
    return ProvingKey.from_bytes(_key_bytes(material, "proving key"))


def _coerce_verifying_key(material: KeyMaterial) -> VerifyingKey:
    if isinstance(material, VerifyingKey):
        return material
    if isinstance(material, ProvingKey):
        return material.vk
    return VerifyingKey.from_bytes(_key_bytes(material, "verifying key"))


class ProofGenerator:
    """
    Generate Groth16 proofs for the multiplication circuit.

    Keys may be passed as parsed objects, raw bytes or hex strings.

    Example:
        >>> generator = ProofGenerator()
        >>> proof = generator.generate(Witness.create(5, 6), proving_key_hex)
        >>> assert generator.verify(proof, verification_key_hex)
    """

    def __init__(self, rng: Optional[RandomnessSource] = None) -> None:
        self.rng = rng or RandomnessSource()

    def generate(self, witness: Witness, proving_key: KeyMaterial) -> Proof:
        """
        Prove knowledge of ``(a, b)`` with ``a * b = c``.

        Raises:
            WitnessUnsatisfiable: If ``c != a * b`` in the field
            MalformedKey: If the proving key cannot be parsed or does not fit
            ProofGenerationError: For other proof generation failures
        """
        if not isinstance(witness, Witness):
            raise TypeError("witness must be Witness")

        circuit = MultiplicationCircuit.from_witness(witness)

        # Check satisfiability before touching the key so a bad witness
        # is reported as such even with a bad key.
        cs = synthesize(circuit)
        unsatisfied = cs.which_is_unsatisfied()
        if unsatisfied is not None:
            raise WitnessUnsatisfiable(f"Constraints are not satisfied: {unsatisfied}")

        pk = _coerce_proving_key(proving_key)

        try:
            groth16_proof = prove(pk, circuit, self.rng)
        except (WitnessUnsatisfiable, MalformedKey):
            raise
        except (ArithmeticError, ValueError) as e:
            raise ProofGenerationError(f"Failed to generate proof: {e}")

        public_inputs = circuit.public_inputs()
        proof = Proof.from_proof_bytes(
            groth16_proof.to_bytes(),
            public_inputs,
            circuit.public_inputs_serialized(),
        )
        logger.debug("Generated proof %s", proof.proof_serialized_hex[:16])
        return proof

    def verify(self, proof: Proof, verification_key: KeyMaterial) -> bool:
        """
        Check ``proof`` locally with the same pairing equation as the pool.

        Returns:
            True if the proof verifies, False if it is malformed or rejected

        Raises:
            MalformedKey: If the verification key cannot be parsed
        """
        vk = _coerce_verifying_key(verification_key)
        pvk = prepare_verifying_key(vk)
        try:
            proof.validate()
            groth16_proof = Groth16Proof.from_bytes(proof.proof_bytes)
            public_inputs = deserialize_fr_vector(proof.public_inputs_bytes)
            return verify_proof(pvk, groth16_proof, public_inputs)
        except (ValueError, SerializationError, ProofVerificationError) as e:
            logger.debug("Local verification rejected proof: %s", e)
            return False
