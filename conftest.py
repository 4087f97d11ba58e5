"""Shared fixtures: deterministic keys and a reference proof, built once per session."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

import pytest

from vortex_privacy.privacy_protocol.security import RandomnessSource
from vortex_privacy.privacy_protocol.snark.assets import KeyStore, generate_keys
from vortex_privacy.privacy_protocol.snark.backend import ProofGenerator
from vortex_privacy.privacy_protocol.snark.r1cs import ConstraintSystem
from vortex_privacy.privacy_protocol.types import Witness

TEST_SEED = 0


@dataclass(frozen=True)
class SquareCircuit:
    """Public ``c`` and ``d`` with ``a * b = c`` and ``a = d``."""

    c: Optional[int] = None
    d: Optional[int] = None
    a: Optional[int] = None
    b: Optional[int] = None

    def generate_constraints(self, cs: ConstraintSystem) -> None:
        c = cs.new_input(self.c)
        d = cs.new_input(self.d)
        a = cs.new_witness(self.a)
        b = cs.new_witness(self.b)
        cs.enforce(a, b, c, label="a * b == c")
        cs.enforce_equal(a, d, label="a == d")

    def public_inputs(self) -> List[int]:
        if self.c is None or self.d is None:
            raise ValueError("circuit has no assignment")
        return [self.c, self.d]


@pytest.fixture(scope="session")
def proving_key():
    return generate_keys(seed=TEST_SEED)


@pytest.fixture(scope="session")
def verifying_key(proving_key):
    return proving_key.vk


@pytest.fixture(scope="session")
def two_input_verifying_key():
    """Verifying key of a circuit with two public inputs."""
    return generate_keys(circuit=SquareCircuit(), seed=5).vk


@pytest.fixture(scope="session")
def keys_dir(tmp_path_factory, proving_key):
    base = tmp_path_factory.mktemp("keys")
    KeyStore(base).write_keys(proving_key)
    return base


@pytest.fixture(scope="session")
def proof_30(proving_key):
    """Proof for a=5, b=6, so the public input is 30."""
    generator = ProofGenerator(rng=RandomnessSource(seed=1))
    return generator.generate(Witness.create(5, 6), proving_key)
