"""
⚠️ DRAFT — requires crypto review before production use

BN254 group helpers on top of py_ecc's optimized (projective) arithmetic.

Points are py_ecc projective triples ``(x, y, z)``; the identity has
``z == 0``. py_ecc has no square root in Fq2, so point decompression lives
here: both base-field roots use ``q ≡ 3 (mod 4)``.
"""

from __future__ import annotations

from typing import Iterable, Optional, Sequence, Tuple

from py_ecc.optimized_bn128 import (
    FQ,
    FQ2,
    FQ12,
    G1,
    G2,
    Z1,
    Z2,
    add,
    b,
    b2,
    curve_order,
    eq,
    field_modulus,
    final_exponentiate,
    is_on_curve,
    multiply,
    neg,
    normalize,
    pairing,
)

from ..config import BASE_FIELD_MODULUS, FIELD_MODULUS

G1Point = Tuple[FQ, FQ, FQ]
G2Point = Tuple[FQ2, FQ2, FQ2]

if curve_order != FIELD_MODULUS or field_modulus != BASE_FIELD_MODULUS:
    raise ImportError("py_ecc bn128 parameters do not match configured BN254")

_Q = BASE_FIELD_MODULUS
_SQRT_EXP = (_Q + 1) // 4
_HALF = (_Q + 1) // 2

G1_GENERATOR: G1Point = G1
G2_GENERATOR: G2Point = G2
G1_IDENTITY: G1Point = Z1
G2_IDENTITY: G2Point = Z2


# ============================================================================
# BASE FIELD ROOTS
# ============================================================================


def fq_sqrt(value: int) -> Optional[int]:
    """Square root in Fq, or None for a non-residue."""
    value %= _Q
    root = pow(value, _SQRT_EXP, _Q)
    if root * root % _Q != value:
        return None
    return root


def fq2_sqrt(c0: int, c1: int) -> Optional[Tuple[int, int]]:
    """
    Square root of ``c0 + c1*u`` in Fq2 = Fq[u]/(u^2 + 1).

    Uses the norm: if ``x0 + x1*u`` squares to ``c0 + c1*u`` then
    ``x0^2 = (c0 ± |c|)/2`` where ``|c| = sqrt(c0^2 + c1^2)``.
    """
    c0 %= _Q
    c1 %= _Q
    if c1 == 0:
        root = fq_sqrt(c0)
        if root is not None:
            return root, 0
        # -1 is a non-residue, so -c0 is a residue
        root = fq_sqrt(-c0)
        if root is None:
            return None
        return 0, root

    gamma = fq_sqrt(c0 * c0 + c1 * c1)
    if gamma is None:
        return None
    x0 = fq_sqrt((c0 + gamma) * _HALF)
    if x0 is None:
        x0 = fq_sqrt((c0 - gamma) * _HALF)
        if x0 is None:
            return None
    x1 = c1 * pow(2 * x0, -1, _Q) % _Q

    # x0^2 - x1^2 == c0 and 2*x0*x1 == c1
    if (x0 * x0 - x1 * x1) % _Q != c0 or (2 * x0 * x1) % _Q != c1:
        return None
    return x0, x1


def fq_is_larger_root(y: int) -> bool:
    """True when y is lexicographically greater than -y."""
    y %= _Q
    return y > (-y) % _Q


def fq2_is_larger_root(y0: int, y1: int) -> bool:
    """Fq2 ordering compares c1 first, then c0."""
    y0 %= _Q
    y1 %= _Q
    return (y1, y0) > ((-y1) % _Q, (-y0) % _Q)


# ============================================================================
# POINTS
# ============================================================================


def is_identity(point) -> bool:
    z = point[2]
    return z == type(z).zero()


def g1_affine(point: G1Point) -> Tuple[int, int]:
    x, y = normalize(point)
    return int(x.n), int(y.n)


def g2_affine(point: G2Point) -> Tuple[Tuple[int, int], Tuple[int, int]]:
    x, y = normalize(point)
    x0, x1 = (int(c) for c in x.coeffs)
    y0, y1 = (int(c) for c in y.coeffs)
    return (x0, x1), (y0, y1)


def g1_from_x(x: int, larger_root: bool) -> Optional[G1Point]:
    """Recover a G1 point from its x coordinate and root selector."""
    y = fq_sqrt(x * x * x + int(b.n))
    if y is None:
        return None
    if fq_is_larger_root(y) != larger_root:
        y = (-y) % _Q
    point = (FQ(x), FQ(y), FQ.one())
    if not is_on_curve(point, b):
        return None
    # Cofactor is 1: every curve point is in the prime-order group
    return point


def g2_from_x(x0: int, x1: int, larger_root: bool) -> Optional[G2Point]:
    """Recover a G2 point from its x coordinate; None if off-curve or off-subgroup."""
    x = FQ2([x0, x1])
    rhs = x * x * x + b2
    r0, r1 = (int(c) for c in rhs.coeffs)
    root = fq2_sqrt(r0, r1)
    if root is None:
        return None
    y0, y1 = root
    if fq2_is_larger_root(y0, y1) != larger_root:
        y0, y1 = (-y0) % _Q, (-y1) % _Q
    point = (x, FQ2([y0, y1]), FQ2.one())
    if not is_on_curve(point, b2):
        return None
    if not g2_in_subgroup(point):
        return None
    return point


def g2_in_subgroup(point: G2Point) -> bool:
    return is_identity(multiply(point, curve_order))


def g1_mul(point: G1Point, scalar: int) -> G1Point:
    return multiply(point, scalar % FIELD_MODULUS)


def g2_mul(point: G2Point, scalar: int) -> G2Point:
    return multiply(point, scalar % FIELD_MODULUS)


def point_add(p1, p2):
    return add(p1, p2)


def point_neg(point):
    return neg(point)


def point_eq(p1, p2) -> bool:
    return eq(p1, p2)


def msm(points: Sequence, scalars: Iterable[int], identity):
    """Naive multi-scalar multiplication: sum(s_i * P_i)."""
    acc = identity
    for point, scalar in zip(points, scalars):
        scalar %= FIELD_MODULUS
        if scalar == 0 or is_identity(point):
            continue
        acc = add(acc, multiply(point, scalar))
    return acc


# ============================================================================
# PAIRINGS
# ============================================================================


def multi_pairing(pairs: Sequence[Tuple[G1Point, G2Point]]) -> FQ12:
    """
    Product of pairings e(P_i, Q_i) with a single final exponentiation.
    """
    acc = FQ12.one()
    for p, q in pairs:
        if is_identity(p) or is_identity(q):
            continue
        acc = acc * pairing(q, p, final_exponentiate=False)
    return final_exponentiate(acc)


def gt_one() -> FQ12:
    return FQ12.one()
