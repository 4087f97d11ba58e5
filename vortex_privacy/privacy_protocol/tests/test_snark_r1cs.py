"""Unit tests for the constraint system and the multiplication circuit."""

from __future__ import annotations

import pytest

from vortex_privacy.privacy_protocol.config import FIELD_MODULUS
from vortex_privacy.privacy_protocol.snark.circuit import MultiplicationCircuit, synthesize
from vortex_privacy.privacy_protocol.snark.r1cs import (
    ONE,
    ConstraintSystem,
    LinearCombination,
    Variable,
)
from vortex_privacy.privacy_protocol.types import Witness


def test_linear_combination_arithmetic() -> None:
    x = Variable("witness", 0)
    lc = LinearCombination.of(x) + 3
    assert lc.terms == {x: 1, ONE: 3}

    doubled = lc * 2
    assert doubled.terms == {x: 2, ONE: 6}

    assert (lc - x).terms == {ONE: 3}
    assert (lc - lc).terms == {}


def test_linear_combination_coefficients_reduce() -> None:
    x = Variable("witness", 0)
    lc = LinearCombination({x: FIELD_MODULUS + 2})
    assert lc.terms == {x: 2}
    assert (LinearCombination.of(x) * -1).terms == {x: FIELD_MODULUS - 1}


def test_linear_combination_rejects_unknown_type() -> None:
    with pytest.raises(TypeError):
        LinearCombination.of("x")


def test_constraint_system_satisfaction() -> None:
    cs = ConstraintSystem()
    out = cs.new_input(12)
    x = cs.new_witness(3)
    y = cs.new_witness(4)
    cs.enforce(x, y, out, label="x * y == out")
    assert cs.is_satisfied()
    assert cs.public_inputs() == [12]
    assert cs.full_assignment() == [1, 12, 3, 4]

    cs.enforce_equal(x, 4, label="x == 4")
    assert cs.which_is_unsatisfied() == "x == 4"


def test_constraint_system_columns_and_matrices() -> None:
    cs = synthesize(MultiplicationCircuit.from_witness(Witness.create(5, 6)))
    assert cs.num_instance_variables == 2
    assert cs.num_witness_variables == 2
    assert cs.num_constraints == 1

    rows_a, rows_b, rows_c = cs.matrices()
    # z = [1, c, a, b]
    assert rows_a == [{2: 1}]
    assert rows_b == [{3: 1}]
    assert rows_c == [{1: 1}]


def test_shape_only_circuit_has_no_assignment() -> None:
    cs = synthesize(MultiplicationCircuit.empty())
    assert not cs.has_assignment
    assert cs.num_variables == 4
    with pytest.raises(ValueError):
        cs.full_assignment()


def test_circuit_detects_wrong_product() -> None:
    cs = synthesize(MultiplicationCircuit(c=31, a=5, b=6))
    assert cs.which_is_unsatisfied() == "a * b == c"


def test_circuit_public_inputs() -> None:
    circuit = MultiplicationCircuit.from_witness(Witness.create(5, 6))
    assert circuit.public_inputs() == [30]
    assert circuit.public_inputs_serialized() == b"\x1e" + bytes(31)
    with pytest.raises(ValueError):
        MultiplicationCircuit.empty().public_inputs()
