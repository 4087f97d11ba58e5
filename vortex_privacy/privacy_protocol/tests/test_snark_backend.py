"""Unit tests for the proof generator facade."""

from __future__ import annotations

import dataclasses

import pytest

from vortex_privacy.privacy_protocol.exceptions import (
    MalformedKey,
    MalformedProofBytes,
    WitnessUnsatisfiable,
)
from vortex_privacy.privacy_protocol.snark.assets import generate_keys
from vortex_privacy.privacy_protocol.snark.backend import ProofGenerator
from vortex_privacy.privacy_protocol.snark.serialization import serialize_fr_vector
from vortex_privacy.privacy_protocol.types import Proof, Witness


def test_generate_then_verify(proof_30, verifying_key) -> None:
    assert proof_30.public_inputs == ["30"]
    assert proof_30.public_inputs_serialized_hex == serialize_fr_vector([30]).hex()
    assert len(proof_30.proof_bytes) == 128
    assert ProofGenerator().verify(proof_30, verifying_key)


def test_verify_accepts_hex_and_bytes_keys(proof_30, verifying_key) -> None:
    vk_bytes = verifying_key.to_bytes()
    generator = ProofGenerator()
    assert generator.verify(proof_30, vk_bytes)
    assert generator.verify(proof_30, "\n  " + vk_bytes.hex() + "\n")


def test_generate_accepts_hex_key(proving_key, verifying_key) -> None:
    proof = ProofGenerator().generate(Witness.create(2, 3), proving_key.to_bytes().hex())
    assert proof.public_input_values == [6]
    assert ProofGenerator().verify(proof, verifying_key)


def test_generate_rejects_unsatisfied_witness(proving_key) -> None:
    with pytest.raises(WitnessUnsatisfiable):
        ProofGenerator().generate(Witness(a=5, b=6, c=31), proving_key)


def test_unsatisfied_witness_reported_before_bad_key() -> None:
    with pytest.raises(WitnessUnsatisfiable):
        ProofGenerator().generate(Witness(a=5, b=6, c=31), "zz")


def test_generate_rejects_malformed_key_hex() -> None:
    with pytest.raises(MalformedKey):
        ProofGenerator().generate(Witness.create(5, 6), "zz")
    with pytest.raises(MalformedKey):
        ProofGenerator().generate(Witness.create(5, 6), "   ")


def test_generate_rejects_verifying_key_as_proving_key(verifying_key) -> None:
    with pytest.raises(MalformedKey):
        ProofGenerator().generate(Witness.create(5, 6), verifying_key)
    with pytest.raises(MalformedKey):
        ProofGenerator().generate(Witness.create(5, 6), verifying_key.to_bytes())


def test_generate_rejects_non_witness(proving_key) -> None:
    with pytest.raises(TypeError):
        ProofGenerator().generate({"a": 5, "b": 6}, proving_key)


def test_verify_rejects_changed_public_input(proof_30, verifying_key) -> None:
    forged = dataclasses.replace(
        proof_30,
        public_inputs=["31"],
        public_inputs_serialized_hex=serialize_fr_vector([31]).hex(),
    )
    assert not ProofGenerator().verify(forged, verifying_key)


def test_verify_rejects_malformed_proof_points(proof_30, verifying_key) -> None:
    broken = dataclasses.replace(
        proof_30, proof_a=bytes(31) + b"\xc0", proof_serialized_hex=""
    )
    assert not ProofGenerator().verify(broken, verifying_key)


def test_inconsistent_proof_fields_are_rejected(proof_30) -> None:
    data = proof_30.to_dict()
    data["publicInputs"] = ["31"]
    with pytest.raises(MalformedProofBytes, match="publicInputs"):
        Proof.from_dict(data)

    data = proof_30.to_dict()
    data["proofA"] = [0] * 32
    with pytest.raises(MalformedProofBytes, match="proofSerializedHex"):
        Proof.from_dict(data)


def test_verify_checks_fields_changed_after_construction(proof_30, verifying_key) -> None:
    mutated = dataclasses.replace(proof_30)
    mutated.public_inputs = ["31"]
    assert not ProofGenerator().verify(mutated, verifying_key)

    mutated = dataclasses.replace(proof_30)
    mutated.proof_a = bytes(32)
    assert not ProofGenerator().verify(mutated, verifying_key)


def test_proof_without_hex_fields_verifies(proof_30, verifying_key) -> None:
    rebuilt = Proof(
        proof_a=proof_30.proof_a,
        proof_b=proof_30.proof_b,
        proof_c=proof_30.proof_c,
        public_inputs=["30"],
    )
    assert rebuilt.public_inputs_serialized_hex == proof_30.public_inputs_serialized_hex
    assert ProofGenerator().verify(rebuilt, verifying_key)


def test_verify_raises_on_missing_key(proof_30) -> None:
    with pytest.raises(MalformedKey):
        ProofGenerator().verify(proof_30, None)


def test_generate_raises_on_missing_key() -> None:
    with pytest.raises(MalformedKey):
        ProofGenerator().generate(Witness.create(5, 6), None)


def test_verify_rejects_key_from_other_setup(proof_30) -> None:
    other_vk = generate_keys(seed=99).vk
    assert not ProofGenerator().verify(proof_30, other_vk)


def test_verify_rejects_key_with_more_public_inputs(proof_30, two_input_verifying_key) -> None:
    assert len(two_input_verifying_key.gamma_abc_g1) == 3
    assert not ProofGenerator().verify(proof_30, two_input_verifying_key)
    assert not ProofGenerator().verify(proof_30, two_input_verifying_key.to_bytes().hex())


def test_verify_raises_on_malformed_key(proof_30) -> None:
    with pytest.raises(MalformedKey):
        ProofGenerator().verify(proof_30, "00ff")


def test_json_roundtrip_still_verifies(proof_30, verifying_key) -> None:
    restored = Proof.from_json(proof_30.to_json())
    assert ProofGenerator().verify(restored, verifying_key)
