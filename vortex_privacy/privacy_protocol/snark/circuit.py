"""
Circuits proved by the pool.

A circuit knows how to lay out its variables and constraints in a
:class:`ConstraintSystem`. Key generation runs it with unknown values
(``Circuit.empty()``), proving runs it with a full witness. Public inputs are
allocated first and in a fixed order, so the verifier's public-input vector
lines up with ``gamma_abc_g1[1:]``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Protocol

from ..types import Witness
from .r1cs import ConstraintSystem
from .serialization import serialize_fr_vector


class Circuit(Protocol):
    def generate_constraints(self, cs: ConstraintSystem) -> None:
        ...

    def public_inputs(self) -> List[int]:
        ...


@dataclass(frozen=True)
class MultiplicationCircuit:
    """
    Proves knowledge of private ``a`` and ``b`` with ``a * b = c``.

    ``c`` is the only public input. On the ledger it is the caller's
    recipient binding, so a proof only verifies for one caller.
    """

    c: Optional[int] = None
    a: Optional[int] = None
    b: Optional[int] = None

    @classmethod
    def empty(cls) -> "MultiplicationCircuit":
        """Shape-only instance for key generation."""
        return cls()

    @classmethod
    def from_witness(cls, witness: Witness) -> "MultiplicationCircuit":
        return cls(c=witness.c, a=witness.a, b=witness.b)

    def generate_constraints(self, cs: ConstraintSystem) -> None:
        c = cs.new_input(self.c)

        a = cs.new_witness(self.a)
        b = cs.new_witness(self.b)

        cs.enforce(a, b, c, label="a * b == c")

    def public_inputs(self) -> List[int]:
        if self.c is None:
            raise ValueError("circuit has no assignment")
        return [self.c]

    def public_inputs_serialized(self) -> bytes:
        return serialize_fr_vector(self.public_inputs())


def synthesize(circuit: Circuit) -> ConstraintSystem:
    cs = ConstraintSystem()
    circuit.generate_constraints(cs)
    return cs
