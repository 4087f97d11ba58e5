"""
⚠️ DRAFT — requires crypto review before production use

Cryptographic configuration for the privacy pool.

This is a PROTOTYPE implementation for testing and validation.
DO NOT use in production without security audit.

Groth16 over BN254 via py_ecc (optimized_bn128).
"""

# ============================================================================
# CURVE SELECTION
# ============================================================================

# IMPLEMENTATION: BN254 (a.k.a. alt_bn128 / bn128) via py_ecc
# - Pairing-friendly, embedding degree 12
# - Same curve as the EVM pairing precompiles and Sui's groth16 module
# - G1 has cofactor 1, G2 requires an explicit subgroup check

CURVE_NAME = "bn254"
CURVE_LIBRARY = "py_ecc"
PROOF_SYSTEM = "groth16"

# ============================================================================
# FIELD PARAMETERS
# ============================================================================

if CURVE_NAME == "bn254":
    # Scalar field order r (circuit arithmetic happens mod r)
    FIELD_MODULUS = (
        21888242871839275222246405745257275088548364400416034343698204186575808495617
    )
    FIELD_MODULUS_BITS = 254
    # Base field order q (curve coordinates live mod q)
    BASE_FIELD_MODULUS = (
        21888242871839275222246405745257275088696311157297823662689037894645226208583
    )
    # Multiplicative generator of Fr*, used to derive roots of unity
    FR_GENERATOR = 5
    FR_TWO_ADICITY = 28

# ============================================================================
# CANONICAL ENCODING
# ============================================================================

# Little-endian, compressed points with flags in the top bits of the last byte
SCALAR_SIZE_BYTES = 32
G1_COMPRESSED_SIZE = 32
G2_COMPRESSED_SIZE = 64
PROOF_SIZE_BYTES = 2 * G1_COMPRESSED_SIZE + G2_COMPRESSED_SIZE
VEC_LENGTH_PREFIX_BYTES = 8

FLAG_Y_IS_NEGATIVE = 0x80
FLAG_INFINITY = 0x40
FLAG_MASK = FLAG_Y_IS_NEGATIVE | FLAG_INFINITY

PROOF_VERSION = 1

# ============================================================================
# KEY STORE
# ============================================================================

KEYS_DIR_ENV_VAR = "VORTEX_KEYS_DIR"
DEFAULT_KEYS_DIR = "keys"
PROVING_KEY_FILENAME = "proving_key"
VERIFICATION_KEY_FILENAME = "verification_key"

MAX_KEY_BYTES = 4 * 1024 * 1024
# Upper bound on Vec lengths read from key material
MAX_VEC_ELEMENTS = 1 << 20

# ============================================================================
# VALIDATION
# ============================================================================


def validate_config() -> bool:
    """
    Validate configuration parameters.

    Returns:
        True if configuration is valid

    Raises:
        AssertionError: If configuration is invalid
    """
    assert CURVE_NAME in ["bn254"], "Invalid curve"
    assert CURVE_LIBRARY == "py_ecc", "Invalid library"
    assert PROOF_SYSTEM == "groth16", "Invalid proof system"
    assert FIELD_MODULUS.bit_length() == FIELD_MODULUS_BITS, "Field modulus size"
    assert FIELD_MODULUS < BASE_FIELD_MODULUS, "Scalar field must fit base field"
    assert (FIELD_MODULUS - 1) % (1 << FR_TWO_ADICITY) == 0, "Bad two-adicity"
    # Two spare bits in the top byte are needed for the point flags
    assert BASE_FIELD_MODULUS.bit_length() <= 8 * G1_COMPRESSED_SIZE - 2
    assert PROOF_SIZE_BYTES == 128

    return True


# Auto-validate on import
validate_config()
