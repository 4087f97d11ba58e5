"""
Unit tests for Witness and Proof types.
"""

import json

import cbor2

import pytest

from vortex_privacy.privacy_protocol.config import FIELD_MODULUS
from vortex_privacy.privacy_protocol.exceptions import MalformedProofBytes
from vortex_privacy.privacy_protocol.types import Proof, Witness, parse_field_element


def _dummy_proof() -> Proof:
    return Proof.from_proof_bytes(
        bytes(range(128)),
        [30],
        (30).to_bytes(32, "little"),
    )


class TestParseFieldElement:
    """Test field element parsing."""

    def test_int_and_string(self):
        assert parse_field_element(30) == 30
        assert parse_field_element("30") == 30
        assert parse_field_element(" 30 ") == 30

    def test_reduces_modulo_field(self):
        assert parse_field_element(FIELD_MODULUS + 5) == 5
        assert parse_field_element(str(FIELD_MODULUS)) == 0
        assert parse_field_element(-1) == FIELD_MODULUS - 1

    def test_rejects_non_decimal(self):
        with pytest.raises(ValueError):
            parse_field_element("0x1e")
        with pytest.raises(ValueError):
            parse_field_element("")

    def test_rejects_bool(self):
        with pytest.raises(TypeError):
            parse_field_element(True)


class TestWitness:
    """Test Witness construction."""

    def test_create_derives_product(self):
        w = Witness.create(5, 6)
        assert (w.a, w.b, w.c) == (5, 6, 30)
        assert w.is_satisfied()

    def test_product_wraps_modulo_field(self):
        w = Witness.create(FIELD_MODULUS - 1, 2)
        assert w.c == FIELD_MODULUS - 2
        assert w.is_satisfied()

    def test_unsatisfied_witness_can_be_built(self):
        w = Witness(a=5, b=6, c=31)
        assert not w.is_satisfied()

    def test_json_roundtrip(self):
        w = Witness.create("5", "6")
        assert json.loads(w.to_json()) == {"a": "5", "b": "6", "c": "30"}
        assert Witness.from_json(w.to_json()) == w

    def test_from_json_requires_all_fields(self):
        with pytest.raises(ValueError):
            Witness.from_json('{"a": "5", "b": "6"}')
        with pytest.raises(ValueError):
            Witness.from_json("not json")


class TestProof:
    """Test Proof layout and serialization."""

    def test_from_proof_bytes_splits_points(self):
        proof = _dummy_proof()
        assert proof.proof_a == bytes(range(32))
        assert proof.proof_b == bytes(range(32, 96))
        assert proof.proof_c == bytes(range(96, 128))
        assert proof.proof_bytes == bytes(range(128))
        assert proof.proof_serialized_hex == bytes(range(128)).hex()
        assert proof.public_inputs == ["30"]
        assert proof.public_input_values == [30]

    def test_from_proof_bytes_rejects_wrong_length(self):
        with pytest.raises(MalformedProofBytes):
            Proof.from_proof_bytes(bytes(127), [30], bytes(32))

    def test_json_uses_camel_case(self):
        data = json.loads(_dummy_proof().to_json())
        assert set(data) == {
            "proofA",
            "proofB",
            "proofC",
            "publicInputs",
            "proofSerializedHex",
            "publicInputsSerializedHex",
        }
        assert data["proofA"] == list(range(32))

    def test_json_roundtrip(self):
        proof = _dummy_proof()
        assert Proof.from_json(proof.to_json()) == proof

    def test_json_missing_fields(self):
        with pytest.raises(MalformedProofBytes, match="missing"):
            Proof.from_json('{"proofA": []}')

    def test_json_not_an_object(self):
        with pytest.raises(MalformedProofBytes):
            Proof.from_json("[1, 2, 3]")

    def test_cbor_roundtrip(self):
        proof = _dummy_proof()
        restored = Proof.deserialize(proof.serialize())
        assert restored.proof_bytes == proof.proof_bytes
        assert restored.public_inputs == proof.public_inputs
        assert restored.public_inputs_serialized_hex == proof.public_inputs_serialized_hex

    def test_cbor_rejects_garbage(self):
        with pytest.raises(MalformedProofBytes):
            Proof.deserialize(b"\xff\x00")

    def test_bad_public_inputs_hex(self):
        proof = _dummy_proof()
        proof.public_inputs_serialized_hex = "zz"
        with pytest.raises(MalformedProofBytes):
            _ = proof.public_inputs_bytes


class TestProofConsistency:
    """Structured fields and hex encodings must describe the same proof."""

    def test_hex_fields_are_derived_when_missing(self):
        proof = Proof(
            proof_a=bytes(32), proof_b=bytes(64), proof_c=bytes(32), public_inputs=["30"]
        )
        assert proof.proof_serialized_hex == bytes(128).hex()
        assert proof.public_inputs_serialized_hex == ((30).to_bytes(32, "little")).hex()

    def test_hex_comparison_ignores_case(self):
        data = _dummy_proof().to_dict()
        data["proofSerializedHex"] = data["proofSerializedHex"].upper()
        assert Proof.from_dict(data).proof_bytes == bytes(range(128))

    def test_public_inputs_must_match_hex(self):
        data = _dummy_proof().to_dict()
        data["publicInputs"] = ["31"]
        with pytest.raises(MalformedProofBytes, match="publicInputs"):
            Proof.from_dict(data)

    def test_points_must_match_hex(self):
        data = _dummy_proof().to_dict()
        data["proofA"] = [0] * 32
        with pytest.raises(MalformedProofBytes, match="proofSerializedHex"):
            Proof.from_dict(data)

    def test_point_sizes(self):
        data = _dummy_proof().to_dict()
        data["proofB"] = [0] * 63
        with pytest.raises(MalformedProofBytes, match="proof_b"):
            Proof.from_dict(data)

    @pytest.mark.parametrize("value", ["abc", "-1", "1.5", str(FIELD_MODULUS)])
    def test_public_inputs_must_be_canonical_decimal(self, value):
        with pytest.raises(MalformedProofBytes):
            Proof(proof_a=bytes(32), proof_b=bytes(64), proof_c=bytes(32), public_inputs=[value])

    def test_validate_detects_later_mutation(self):
        proof = _dummy_proof()
        proof.public_inputs = ["31"]
        with pytest.raises(MalformedProofBytes):
            proof.validate()


class TestProofCbor:
    """CBOR decoding reports every malformed payload as MalformedProofBytes."""

    def _payload(self, **overrides):
        proof = _dummy_proof()
        data = {"v": 1, "p": proof.proof_bytes, "i": proof.public_inputs_bytes, "pi": ["30"]}
        data.update(overrides)
        return cbor2.dumps(data)

    def test_valid_payload(self):
        assert Proof.deserialize(self._payload()).public_input_values == [30]

    @pytest.mark.parametrize("pi", [["abc"], 5, "30", [None], [True]])
    def test_bad_public_input_list(self, pi):
        with pytest.raises(MalformedProofBytes):
            Proof.deserialize(self._payload(pi=pi))

    def test_public_inputs_must_match_encoding(self):
        with pytest.raises(MalformedProofBytes, match="publicInputs"):
            Proof.deserialize(self._payload(pi=["31"]))

    def test_wrong_version(self):
        with pytest.raises(MalformedProofBytes, match="version"):
            Proof.deserialize(self._payload(v=2))
