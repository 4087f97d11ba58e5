"""
Unit tests for the cryptographic configuration module.
"""

from py_ecc.optimized_bn128 import curve_order, field_modulus

from vortex_privacy.privacy_protocol import config


class TestConfig:
    """Test configuration constants."""

    def test_validate_config(self):
        """Configuration passes its own validation."""
        assert config.validate_config() is True

    def test_curve_selection(self):
        """Curve, library and proof system are fixed."""
        assert config.CURVE_NAME == "bn254"
        assert config.CURVE_LIBRARY == "py_ecc"
        assert config.PROOF_SYSTEM == "groth16"

    def test_field_moduli_match_library(self):
        """Configured moduli are the ones py_ecc implements."""
        assert config.FIELD_MODULUS == curve_order
        assert config.BASE_FIELD_MODULUS == field_modulus
        assert config.FIELD_MODULUS == (
            21888242871839275222246405745257275088548364400416034343698204186575808495617
        )

    def test_encoding_sizes(self):
        """Compressed sizes add up to a 128-byte proof."""
        assert config.G1_COMPRESSED_SIZE == 32
        assert config.G2_COMPRESSED_SIZE == 64
        assert config.PROOF_SIZE_BYTES == 128

    def test_flags_are_disjoint(self):
        """Sign and infinity flags use distinct bits."""
        assert config.FLAG_Y_IS_NEGATIVE & config.FLAG_INFINITY == 0
        assert config.FLAG_MASK == 0xC0

    def test_root_of_unity_generator(self):
        """FR_GENERATOR^((r-1)/2) is -1, so it generates the 2-adic subgroup."""
        r = config.FIELD_MODULUS
        assert pow(config.FR_GENERATOR, (r - 1) // 2, r) == r - 1
