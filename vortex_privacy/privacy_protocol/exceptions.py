"""
⚠️ DRAFT — requires crypto review before production use

Custom exceptions for the privacy pool.

These exceptions provide structured error handling for cryptographic operations.
Verifier-side kinds (MalformedProofBytes, VerificationFailed) never cross the
ledger boundary; the pool collapses them into a single opaque abort.
"""


class PrivacyProtocolError(Exception):
    """Base exception for privacy protocol errors."""

    pass


class ProofGenerationError(PrivacyProtocolError):
    """Error during proof generation."""

    pass


class WitnessUnsatisfiable(ProofGenerationError):
    """Witness does not satisfy the circuit relation."""

    pass


class MalformedKey(PrivacyProtocolError):
    """Proving or verification key material cannot be parsed."""

    pass


class ProofVerificationError(PrivacyProtocolError):
    """Error during proof verification."""

    pass


class MalformedProofBytes(ProofVerificationError):
    """Proof or public-input bytes cannot be decoded."""

    pass


class VerificationFailed(ProofVerificationError):
    """Proof decodes but the pairing check rejects it."""

    pass


class ConfigurationError(PrivacyProtocolError):
    """Configuration error."""

    pass


class CryptographicError(PrivacyProtocolError):
    """Cryptographic operation error."""

    pass


class SerializationError(CryptographicError):
    """Canonical encoding or decoding failed."""

    pass
