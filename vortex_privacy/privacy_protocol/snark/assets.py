"""Key store: resolve, load and write Groth16 key material."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from ..config import (
    DEFAULT_KEYS_DIR,
    KEYS_DIR_ENV_VAR,
    MAX_KEY_BYTES,
    PROVING_KEY_FILENAME,
    VERIFICATION_KEY_FILENAME,
)
from ..exceptions import MalformedKey
from ..security import RandomnessSource
from .circuit import Circuit, MultiplicationCircuit
from .groth16 import ProvingKey, VerifyingKey, setup

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class KeyPaths:
    proving_key_hex: Path
    verification_key_hex: Path
    proving_key_bin: Path
    verification_key_bin: Path


def default_keys_dir() -> Path:
    return Path(os.getenv(KEYS_DIR_ENV_VAR, DEFAULT_KEYS_DIR))


def decode_key_hex(text: str, label: str = "key") -> bytes:
    """
    Decode hex key text after trimming surrounding whitespace.

    Raises:
        MalformedKey: If the text is empty or not valid hex
    """
    cleaned = text.strip()
    if cleaned.startswith(("0x", "0X")):
        cleaned = cleaned[2:]
    if not cleaned:
        raise MalformedKey(f"{label} is empty")
    try:
        return bytes.fromhex(cleaned)
    except ValueError as e:
        raise MalformedKey(f"Failed to decode {label} hex: {e}")


def read_hex_key(path: Path | str, label: str = "key") -> bytes:
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"missing {label}: {path}")
    if path.stat().st_size > 2 * MAX_KEY_BYTES + 2:
        raise MalformedKey(f"{label} too large: {path}")
    try:
        text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise MalformedKey(f"{label} is not UTF-8 text: {e}")
    return decode_key_hex(text, label)


class KeyStore:
    """
    Read-only access to the key files produced by key generation.

    Layout under ``base_dir``::

        proving_key.hex / proving_key.bin
        verification_key.hex / verification_key.bin

    Loading always goes through the ``.hex`` files; ``.bin`` twins are
    written for tools that want raw bytes.
    """

    def __init__(self, base_dir: Path | str | None = None) -> None:
        self._base_dir = Path(base_dir) if base_dir else default_keys_dir()

    @property
    def base_dir(self) -> Path:
        return self._base_dir

    @property
    def paths(self) -> KeyPaths:
        return KeyPaths(
            proving_key_hex=self._base_dir / f"{PROVING_KEY_FILENAME}.hex",
            verification_key_hex=self._base_dir / f"{VERIFICATION_KEY_FILENAME}.hex",
            proving_key_bin=self._base_dir / f"{PROVING_KEY_FILENAME}.bin",
            verification_key_bin=self._base_dir / f"{VERIFICATION_KEY_FILENAME}.bin",
        )

    def exists(self) -> bool:
        paths = self.paths
        return paths.proving_key_hex.exists() and paths.verification_key_hex.exists()

    def load_proving_key_bytes(self) -> bytes:
        return read_hex_key(self.paths.proving_key_hex, "proving key")

    def load_verification_key_bytes(self) -> bytes:
        return read_hex_key(self.paths.verification_key_hex, "verification key")

    def load_proving_key(self) -> ProvingKey:
        return ProvingKey.from_bytes(self.load_proving_key_bytes())

    def load_verifying_key(self) -> VerifyingKey:
        return VerifyingKey.from_bytes(self.load_verification_key_bytes())

    def write_keys(self, pk: ProvingKey) -> KeyPaths:
        paths = self.paths
        self._base_dir.mkdir(parents=True, exist_ok=True)

        vk_bytes = pk.vk.to_bytes()
        pk_bytes = pk.to_bytes()

        paths.verification_key_bin.write_bytes(vk_bytes)
        paths.verification_key_hex.write_text(vk_bytes.hex(), encoding="utf-8")
        paths.proving_key_bin.write_bytes(pk_bytes)
        paths.proving_key_hex.write_text(pk_bytes.hex(), encoding="utf-8")

        logger.info("Keys written to %s", self._base_dir)
        return paths


def generate_keys(
    circuit: Optional[Circuit] = None,
    seed: Optional[int] = None,
) -> ProvingKey:
    """
    Run key generation for ``circuit`` (the multiplication circuit by default).

    ``seed`` gives reproducible keys for tests; leave it unset otherwise.
    """
    if circuit is None:
        circuit = MultiplicationCircuit.empty()
    rng = RandomnessSource(seed=seed)
    if rng.deterministic:
        logger.warning("Generating keys from a fixed seed; test use only")
    return setup(circuit, rng)
