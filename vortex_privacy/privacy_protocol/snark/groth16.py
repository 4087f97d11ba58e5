"""
⚠️ DRAFT — requires crypto review before production use

Groth16 over BN254.

Key generation, proving and verification follow the arkworks
construction (libsnark reduction): the R1CS is turned into a QAP over a
power-of-two multiplicative subgroup of Fr, with one extra ``x_i * 0 = 0``
row per instance variable so the instance polynomials are linearly
independent.

Verification checks

    e(A, B) * e(IC, -gamma) * e(C, -delta) == e(alpha, beta)

where ``IC = gamma_abc[0] + sum(x_i * gamma_abc[i + 1])``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Sequence, Tuple

from py_ecc.optimized_bn128 import FQ12

from ..config import FIELD_MODULUS, FR_GENERATOR, FR_TWO_ADICITY
from ..exceptions import (
    MalformedKey,
    MalformedProofBytes,
    ProofVerificationError,
    SerializationError,
    WitnessUnsatisfiable,
)
from ..security import RandomnessSource
from .circuit import Circuit, synthesize
from .curve import (
    G1_GENERATOR,
    G1_IDENTITY,
    G2_GENERATOR,
    G2_IDENTITY,
    G1Point,
    G2Point,
    g1_mul,
    g2_mul,
    msm,
    multi_pairing,
    point_add,
    point_neg,
)
from .r1cs import ConstraintSystem
from .serialization import CanonicalReader, CanonicalWriter

logger = logging.getLogger(__name__)

_R = FIELD_MODULUS


def _inv(value: int) -> int:
    return pow(value, -1, _R)


# ============================================================================
# EVALUATION DOMAIN
# ============================================================================


class EvaluationDomain:
    """Multiplicative subgroup ``{omega^i}`` of Fr of power-of-two size."""

    def __init__(self, min_size: int) -> None:
        size = 1
        while size < max(min_size, 1):
            size <<= 1
        if size.bit_length() - 1 > FR_TWO_ADICITY:
            raise ValueError(f"domain of size {size} exceeds Fr two-adicity")
        self.size = size
        self.omega = pow(FR_GENERATOR, (_R - 1) // size, _R)
        if size > 1 and pow(self.omega, size // 2, _R) == 1:
            raise ValueError("root of unity has wrong order")
        self.size_inv = _inv(size)
        self.elements = [pow(self.omega, i, _R) for i in range(size)]

    def vanishing_at(self, tau: int) -> int:
        return (pow(tau, self.size, _R) - 1) % _R

    def lagrange_at(self, tau: int) -> List[int]:
        """All Lagrange basis polynomials evaluated at ``tau``."""
        z = self.vanishing_at(tau)
        if z == 0:
            return [1 if w == tau % _R else 0 for w in self.elements]
        scale = z * self.size_inv % _R
        return [scale * w % _R * _inv((tau - w) % _R) % _R for w in self.elements]

    def ifft(self, evaluations: Sequence[int]) -> List[int]:
        """Coefficients of the polynomial taking ``evaluations`` on the domain."""
        values = list(evaluations) + [0] * (self.size - len(evaluations))
        omega_inv = _inv(self.omega)
        coeffs = []
        for k in range(self.size):
            step = pow(omega_inv, k, _R)
            acc, power = 0, 1
            for v in values:
                acc += v * power
                power = power * step % _R
            coeffs.append(acc * self.size_inv % _R)
        return coeffs


def _qap_rows(cs: ConstraintSystem) -> Tuple[List[Dict[int, int]], List[Dict[int, int]], List[Dict[int, int]]]:
    rows_a, rows_b, rows_c = cs.matrices()
    for i in range(cs.num_instance_variables):
        rows_a.append({i: 1})
        rows_b.append({})
        rows_c.append({})
    return rows_a, rows_b, rows_c


def _domain_for(cs: ConstraintSystem) -> EvaluationDomain:
    return EvaluationDomain(cs.num_constraints + cs.num_instance_variables)


# ============================================================================
# KEYS AND PROOF
# ============================================================================


@dataclass(frozen=True)
class VerifyingKey:
    alpha_g1: G1Point
    beta_g2: G2Point
    gamma_g2: G2Point
    delta_g2: G2Point
    gamma_abc_g1: Tuple[G1Point, ...]

    @property
    def num_public_inputs(self) -> int:
        return len(self.gamma_abc_g1) - 1

    def write(self, writer: CanonicalWriter) -> None:
        writer.write_g1(self.alpha_g1)
        writer.write_g2(self.beta_g2)
        writer.write_g2(self.gamma_g2)
        writer.write_g2(self.delta_g2)
        writer.write_vec(self.gamma_abc_g1, writer.write_g1)

    @classmethod
    def read(cls, reader: CanonicalReader) -> "VerifyingKey":
        return cls(
            alpha_g1=reader.read_g1(),
            beta_g2=reader.read_g2(),
            gamma_g2=reader.read_g2(),
            delta_g2=reader.read_g2(),
            gamma_abc_g1=tuple(reader.read_vec(reader.read_g1)),
        )

    def to_bytes(self) -> bytes:
        writer = CanonicalWriter()
        self.write(writer)
        return writer.getvalue()

    @classmethod
    def from_bytes(cls, data: bytes) -> "VerifyingKey":
        try:
            reader = CanonicalReader(data)
            vk = cls.read(reader)
            reader.finish()
        except SerializationError as e:
            raise MalformedKey(f"Failed to deserialize verifying key: {e}")
        if not vk.gamma_abc_g1:
            raise MalformedKey("verifying key has no gamma_abc_g1 elements")
        return vk


@dataclass(frozen=True)
class ProvingKey:
    vk: VerifyingKey
    beta_g1: G1Point
    delta_g1: G1Point
    a_query: Tuple[G1Point, ...]
    b_g1_query: Tuple[G1Point, ...]
    b_g2_query: Tuple[G2Point, ...]
    h_query: Tuple[G1Point, ...]
    l_query: Tuple[G1Point, ...]

    def to_bytes(self) -> bytes:
        writer = CanonicalWriter()
        self.vk.write(writer)
        writer.write_g1(self.beta_g1)
        writer.write_g1(self.delta_g1)
        writer.write_vec(self.a_query, writer.write_g1)
        writer.write_vec(self.b_g1_query, writer.write_g1)
        writer.write_vec(self.b_g2_query, writer.write_g2)
        writer.write_vec(self.h_query, writer.write_g1)
        writer.write_vec(self.l_query, writer.write_g1)
        return writer.getvalue()

    @classmethod
    def from_bytes(cls, data: bytes) -> "ProvingKey":
        try:
            reader = CanonicalReader(data)
            pk = cls(
                vk=VerifyingKey.read(reader),
                beta_g1=reader.read_g1(),
                delta_g1=reader.read_g1(),
                a_query=tuple(reader.read_vec(reader.read_g1)),
                b_g1_query=tuple(reader.read_vec(reader.read_g1)),
                b_g2_query=tuple(reader.read_vec(reader.read_g2)),
                h_query=tuple(reader.read_vec(reader.read_g1)),
                l_query=tuple(reader.read_vec(reader.read_g1)),
            )
            reader.finish()
        except SerializationError as e:
            raise MalformedKey(f"Failed to deserialize proving key: {e}")
        return pk


@dataclass(frozen=True)
class Groth16Proof:
    a: G1Point
    b: G2Point
    c: G1Point

    def to_bytes(self) -> bytes:
        writer = CanonicalWriter()
        writer.write_g1(self.a)
        writer.write_g2(self.b)
        writer.write_g1(self.c)
        return writer.getvalue()

    @classmethod
    def from_bytes(cls, data: bytes) -> "Groth16Proof":
        try:
            reader = CanonicalReader(data)
            proof = cls(a=reader.read_g1(), b=reader.read_g2(), c=reader.read_g1())
            reader.finish()
        except SerializationError as e:
            raise MalformedProofBytes(f"Failed to deserialize proof: {e}")
        return proof


@dataclass(frozen=True)
class PreparedVerifyingKey:
    """Verifier-side key: built once, never mutated."""

    vk: VerifyingKey
    alpha_g1_beta_g2: FQ12
    gamma_g2_neg: G2Point
    delta_g2_neg: G2Point


# ============================================================================
# SETUP
# ============================================================================


def setup(circuit: Circuit, rng: RandomnessSource) -> ProvingKey:
    """
    Generate Groth16 parameters for ``circuit``'s shape.

    Trusted setup by a single party: the toxic waste (tau, alpha, beta,
    gamma, delta) only lives in this frame.
    """
    cs = synthesize(circuit)
    domain = _domain_for(cs)

    tau = rng.get_random_field_element(nonzero=True)
    while domain.vanishing_at(tau) == 0:
        tau = rng.get_random_field_element(nonzero=True)
    alpha = rng.get_random_field_element(nonzero=True)
    beta = rng.get_random_field_element(nonzero=True)
    gamma = rng.get_random_field_element(nonzero=True)
    delta = rng.get_random_field_element(nonzero=True)

    lagrange = domain.lagrange_at(tau)
    rows_a, rows_b, rows_c = _qap_rows(cs)

    num_vars = cs.num_variables
    a_eval = [0] * num_vars
    b_eval = [0] * num_vars
    c_eval = [0] * num_vars
    for j, (row_a, row_b, row_c) in enumerate(zip(rows_a, rows_b, rows_c)):
        for col, coeff in row_a.items():
            a_eval[col] = (a_eval[col] + coeff * lagrange[j]) % _R
        for col, coeff in row_b.items():
            b_eval[col] = (b_eval[col] + coeff * lagrange[j]) % _R
        for col, coeff in row_c.items():
            c_eval[col] = (c_eval[col] + coeff * lagrange[j]) % _R

    gamma_inv = _inv(gamma)
    delta_inv = _inv(delta)
    num_instance = cs.num_instance_variables

    combined = [(beta * a_eval[i] + alpha * b_eval[i] + c_eval[i]) % _R for i in range(num_vars)]
    gamma_abc = tuple(g1_mul(G1_GENERATOR, v * gamma_inv) for v in combined[:num_instance])
    l_query = tuple(g1_mul(G1_GENERATOR, v * delta_inv) for v in combined[num_instance:])

    t_tau = domain.vanishing_at(tau)
    h_query = tuple(
        g1_mul(G1_GENERATOR, pow(tau, i, _R) * t_tau % _R * delta_inv)
        for i in range(domain.size - 1)
    )

    vk = VerifyingKey(
        alpha_g1=g1_mul(G1_GENERATOR, alpha),
        beta_g2=g2_mul(G2_GENERATOR, beta),
        gamma_g2=g2_mul(G2_GENERATOR, gamma),
        delta_g2=g2_mul(G2_GENERATOR, delta),
        gamma_abc_g1=gamma_abc,
    )
    pk = ProvingKey(
        vk=vk,
        beta_g1=g1_mul(G1_GENERATOR, beta),
        delta_g1=g1_mul(G1_GENERATOR, delta),
        a_query=tuple(g1_mul(G1_GENERATOR, v) for v in a_eval),
        b_g1_query=tuple(g1_mul(G1_GENERATOR, v) for v in b_eval),
        b_g2_query=tuple(g2_mul(G2_GENERATOR, v) for v in b_eval),
        h_query=h_query,
        l_query=l_query,
    )
    logger.info(
        "Generated Groth16 parameters: %d constraints, %d variables, domain size %d",
        cs.num_constraints,
        num_vars,
        domain.size,
    )
    return pk


# ============================================================================
# PROVING
# ============================================================================


def _poly_mul(p: Sequence[int], q: Sequence[int]) -> List[int]:
    out = [0] * (len(p) + len(q) - 1)
    for i, pi in enumerate(p):
        if pi == 0:
            continue
        for j, qj in enumerate(q):
            out[i + j] = (out[i + j] + pi * qj) % _R
    return out


def _divide_by_vanishing(poly: List[int], n: int) -> List[int]:
    """Divide by ``x^n - 1``; raise if the remainder is non-zero."""
    rem = list(poly)
    quotient = [0] * max(len(rem) - n, 0)
    for k in range(len(rem) - 1, n - 1, -1):
        coeff = rem[k]
        if coeff:
            quotient[k - n] = coeff
            rem[k - n] = (rem[k - n] + coeff) % _R
            rem[k] = 0
    if any(rem[:n]):
        raise WitnessUnsatisfiable("QAP is not divisible by the vanishing polynomial")
    return quotient


def _compute_h(cs: ConstraintSystem, domain: EvaluationDomain, assignment: List[int]) -> List[int]:
    rows_a, rows_b, rows_c = _qap_rows(cs)

    def _evaluate(rows: List[Dict[int, int]]) -> List[int]:
        return [sum(k * assignment[col] for col, k in row.items()) % _R for row in rows]

    a_poly = domain.ifft(_evaluate(rows_a))
    b_poly = domain.ifft(_evaluate(rows_b))
    c_poly = domain.ifft(_evaluate(rows_c))

    product = _poly_mul(a_poly, b_poly)
    for i, ci in enumerate(c_poly):
        product[i] = (product[i] - ci) % _R
    h = _divide_by_vanishing(product, domain.size)
    h += [0] * (domain.size - 1 - len(h))
    return h[: domain.size - 1]


def prove(pk: ProvingKey, circuit: Circuit, rng: RandomnessSource) -> Groth16Proof:
    """
    Create a proof for a fully assigned circuit.

    Raises:
        WitnessUnsatisfiable: If the assignment violates a constraint
        MalformedKey: If the key does not match the circuit shape
    """
    cs = synthesize(circuit)
    if not cs.has_assignment:
        raise WitnessUnsatisfiable("circuit is missing witness values")
    unsatisfied = cs.which_is_unsatisfied()
    if unsatisfied is not None:
        raise WitnessUnsatisfiable(f"Constraints are not satisfied: {unsatisfied}")

    domain = _domain_for(cs)
    num_instance = cs.num_instance_variables
    if (
        len(pk.a_query) != cs.num_variables
        or len(pk.b_g2_query) != cs.num_variables
        or len(pk.l_query) != cs.num_witness_variables
        or len(pk.h_query) != domain.size - 1
        or len(pk.vk.gamma_abc_g1) != num_instance
    ):
        raise MalformedKey("proving key does not match the circuit")

    z = cs.full_assignment()
    h = _compute_h(cs, domain, z)

    r = rng.get_random_field_element()
    s = rng.get_random_field_element()

    g_a = point_add(pk.vk.alpha_g1, msm(pk.a_query, z, G1_IDENTITY))
    g_a = point_add(g_a, g1_mul(pk.delta_g1, r))

    g2_b = point_add(pk.vk.beta_g2, msm(pk.b_g2_query, z, G2_IDENTITY))
    g2_b = point_add(g2_b, g2_mul(pk.vk.delta_g2, s))

    g1_b = point_add(pk.beta_g1, msm(pk.b_g1_query, z, G1_IDENTITY))
    g1_b = point_add(g1_b, g1_mul(pk.delta_g1, s))

    g_c = msm(pk.l_query, z[num_instance:], G1_IDENTITY)
    g_c = point_add(g_c, msm(pk.h_query, h, G1_IDENTITY))
    g_c = point_add(g_c, g1_mul(g_a, s))
    g_c = point_add(g_c, g1_mul(g1_b, r))
    g_c = point_add(g_c, point_neg(g1_mul(pk.delta_g1, r * s)))

    return Groth16Proof(a=g_a, b=g2_b, c=g_c)


# ============================================================================
# VERIFICATION
# ============================================================================


def prepare_verifying_key(vk: VerifyingKey) -> PreparedVerifyingKey:
    return PreparedVerifyingKey(
        vk=vk,
        alpha_g1_beta_g2=multi_pairing([(vk.alpha_g1, vk.beta_g2)]),
        gamma_g2_neg=point_neg(vk.gamma_g2),
        delta_g2_neg=point_neg(vk.delta_g2),
    )


def prepare_inputs(pvk: PreparedVerifyingKey, public_inputs: Sequence[int]) -> G1Point:
    gamma_abc = pvk.vk.gamma_abc_g1
    if len(public_inputs) + 1 != len(gamma_abc):
        raise ProofVerificationError(
            f"expected {len(gamma_abc) - 1} public inputs, got {len(public_inputs)}"
        )
    return point_add(gamma_abc[0], msm(gamma_abc[1:], public_inputs, G1_IDENTITY))


def verify_proof(
    pvk: PreparedVerifyingKey,
    proof: Groth16Proof,
    public_inputs: Sequence[int],
) -> bool:
    """
    Run the Groth16 pairing check.

    Returns:
        True if the proof is valid for ``public_inputs``

    Raises:
        ProofVerificationError: If the number of public inputs does not match the key
    """
    prepared = prepare_inputs(pvk, public_inputs)
    result = multi_pairing(
        [
            (proof.a, proof.b),
            (prepared, pvk.gamma_g2_neg),
            (proof.c, pvk.delta_g2_neg),
        ]
    )
    return result == pvk.alpha_g1_beta_g2
