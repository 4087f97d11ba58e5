"""
Rank-1 constraint system builder.

A constraint is ``<A, z> * <B, z> = <C, z>`` over Fr, where ``z`` is the
full assignment ``[1, instance..., witness...]``. Circuits allocate
variables and add constraints through :class:`ConstraintSystem`; during key
generation the values are unknown (``None``) and only the shape matters.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Tuple, Union

from ..config import FIELD_MODULUS

INSTANCE = "instance"
WITNESS = "witness"


@dataclass(frozen=True)
class Variable:
    kind: str
    index: int


ONE = Variable(INSTANCE, 0)


class LinearCombination:
    """Sparse sum of ``coeff * variable`` terms with coefficients in Fr."""

    __slots__ = ("terms",)

    def __init__(self, terms: Optional[Dict[Variable, int]] = None) -> None:
        self.terms: Dict[Variable, int] = {}
        for var, coeff in (terms or {}).items():
            self._accumulate(var, coeff)

    @classmethod
    def of(cls, value: "LCLike") -> "LinearCombination":
        if isinstance(value, LinearCombination):
            return value
        if isinstance(value, Variable):
            return cls({value: 1})
        if isinstance(value, int):
            return cls({ONE: value})
        raise TypeError(f"cannot build linear combination from {type(value)}")

    def _accumulate(self, var: Variable, coeff: int) -> None:
        coeff = (self.terms.get(var, 0) + coeff) % FIELD_MODULUS
        if coeff:
            self.terms[var] = coeff
        else:
            self.terms.pop(var, None)

    def __add__(self, other: "LCLike") -> "LinearCombination":
        result = LinearCombination(self.terms)
        for var, coeff in LinearCombination.of(other).terms.items():
            result._accumulate(var, coeff)
        return result

    def __sub__(self, other: "LCLike") -> "LinearCombination":
        return self + LinearCombination.of(other) * -1

    def __mul__(self, scalar: int) -> "LinearCombination":
        return LinearCombination({v: c * scalar for v, c in self.terms.items()})

    __rmul__ = __mul__

    def evaluate(self, values: Dict[Variable, int]) -> int:
        return sum(coeff * values[var] for var, coeff in self.terms.items()) % FIELD_MODULUS

    def __repr__(self) -> str:
        return f"LinearCombination({self.terms!r})"


LCLike = Union[LinearCombination, Variable, int]


@dataclass
class Constraint:
    a: LinearCombination
    b: LinearCombination
    c: LinearCombination


@dataclass
class ConstraintSystem:
    """Collects variables and constraints produced by a circuit."""

    instance_values: List[Optional[int]] = field(default_factory=lambda: [1])
    witness_values: List[Optional[int]] = field(default_factory=list)
    constraints: List[Constraint] = field(default_factory=list)
    labels: List[str] = field(default_factory=list)

    @property
    def num_instance_variables(self) -> int:
        return len(self.instance_values)

    @property
    def num_witness_variables(self) -> int:
        return len(self.witness_values)

    @property
    def num_variables(self) -> int:
        return self.num_instance_variables + self.num_witness_variables

    @property
    def num_constraints(self) -> int:
        return len(self.constraints)

    def new_input(self, value: Optional[int]) -> Variable:
        self.instance_values.append(_reduce(value))
        return Variable(INSTANCE, len(self.instance_values) - 1)

    def new_witness(self, value: Optional[int]) -> Variable:
        self.witness_values.append(_reduce(value))
        return Variable(WITNESS, len(self.witness_values) - 1)

    def enforce(self, a: LCLike, b: LCLike, c: LCLike, label: str = "") -> None:
        self.constraints.append(
            Constraint(
                LinearCombination.of(a),
                LinearCombination.of(b),
                LinearCombination.of(c),
            )
        )
        self.labels.append(label or f"constraint_{len(self.constraints) - 1}")

    def enforce_equal(self, left: LCLike, right: LCLike, label: str = "") -> None:
        self.enforce(LinearCombination.of(left) - right, ONE, 0, label)

    # ------------------------------------------------------------------
    # Assignment
    # ------------------------------------------------------------------

    @property
    def has_assignment(self) -> bool:
        return all(v is not None for v in self.instance_values) and all(
            v is not None for v in self.witness_values
        )

    def column(self, var: Variable) -> int:
        """Position of ``var`` in the full assignment vector."""
        if var.kind == INSTANCE:
            return var.index
        return self.num_instance_variables + var.index

    def variables(self) -> Iterable[Variable]:
        for i in range(self.num_instance_variables):
            yield Variable(INSTANCE, i)
        for j in range(self.num_witness_variables):
            yield Variable(WITNESS, j)

    def values(self) -> Dict[Variable, int]:
        if not self.has_assignment:
            raise ValueError("constraint system has no full assignment")
        return {var: self.value_of(var) for var in self.variables()}

    def value_of(self, var: Variable) -> Optional[int]:
        if var.kind == INSTANCE:
            return self.instance_values[var.index]
        return self.witness_values[var.index]

    def full_assignment(self) -> List[int]:
        values = self.values()
        return [values[var] for var in self.variables()]

    def public_inputs(self) -> List[int]:
        """Instance values without the leading constant one."""
        return [int(v) for v in self.instance_values[1:]]

    def which_is_unsatisfied(self) -> Optional[str]:
        values = self.values()
        for constraint, label in zip(self.constraints, self.labels):
            lhs = constraint.a.evaluate(values) * constraint.b.evaluate(values)
            if lhs % FIELD_MODULUS != constraint.c.evaluate(values):
                return label
        return None

    def is_satisfied(self) -> bool:
        return self.which_is_unsatisfied() is None

    def matrices(self) -> Tuple[List[Dict[int, int]], List[Dict[int, int]], List[Dict[int, int]]]:
        """Sparse A, B, C rows keyed by assignment column."""
        rows_a, rows_b, rows_c = [], [], []
        for constraint in self.constraints:
            rows_a.append({self.column(v): k for v, k in constraint.a.terms.items()})
            rows_b.append({self.column(v): k for v, k in constraint.b.terms.items()})
            rows_c.append({self.column(v): k for v, k in constraint.c.terms.items()})
        return rows_a, rows_b, rows_c


def _reduce(value: Optional[int]) -> Optional[int]:
    if value is None:
        return None
    return int(value) % FIELD_MODULUS
