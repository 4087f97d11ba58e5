"""Unit tests for the key store."""

from __future__ import annotations

from pathlib import Path

import pytest

from vortex_privacy.privacy_protocol.config import KEYS_DIR_ENV_VAR
from vortex_privacy.privacy_protocol.exceptions import MalformedKey
from vortex_privacy.privacy_protocol.snark.assets import (
    KeyStore,
    decode_key_hex,
    default_keys_dir,
    read_hex_key,
)


def test_default_keys_dir_uses_env(monkeypatch, tmp_path) -> None:
    monkeypatch.setenv(KEYS_DIR_ENV_VAR, str(tmp_path))
    assert default_keys_dir() == tmp_path
    assert KeyStore().base_dir == tmp_path


def test_default_keys_dir_fallback(monkeypatch) -> None:
    monkeypatch.delenv(KEYS_DIR_ENV_VAR, raising=False)
    assert default_keys_dir() == Path("keys")


def test_write_and_load_keys(keys_dir, proving_key) -> None:
    store = KeyStore(keys_dir)
    assert store.exists()
    paths = store.paths
    assert paths.proving_key_hex.name == "proving_key.hex"
    assert paths.verification_key_bin.read_bytes() == proving_key.vk.to_bytes()

    assert store.load_proving_key_bytes() == proving_key.to_bytes()
    assert store.load_verification_key_bytes() == proving_key.vk.to_bytes()
    assert store.load_verifying_key().to_bytes() == proving_key.vk.to_bytes()
    assert store.load_proving_key().to_bytes() == proving_key.to_bytes()


def test_missing_key_file(tmp_path) -> None:
    store = KeyStore(tmp_path)
    assert not store.exists()
    with pytest.raises(FileNotFoundError):
        store.load_verification_key_bytes()


def test_hex_is_trimmed(tmp_path) -> None:
    path = tmp_path / "key.hex"
    path.write_text("  0xDEADbeef\n", encoding="utf-8")
    assert read_hex_key(path) == bytes.fromhex("deadbeef")


@pytest.mark.parametrize("text", ["", "  \n", "abc", "zz", "0x"])
def test_malformed_hex(text) -> None:
    with pytest.raises(MalformedKey):
        decode_key_hex(text)


def test_malformed_key_bytes(tmp_path) -> None:
    store = KeyStore(tmp_path)
    store.paths.verification_key_hex.write_text("00" * 10, encoding="utf-8")
    with pytest.raises(MalformedKey):
        store.load_verifying_key()
