"""
groth16_sol.verifiers.pairing_bn254
===================================

Thin BN254 (altbn128) wrapper around `py_ecc.optimized_bn128`.

Everything that touches py_ecc's projective point tuples lives here; the rest
of the package speaks in the typed variants of `points.py`.

Public API
----------
- to_backend_g1(P) / to_backend_g2(Q)       typed point -> py_ecc tuple
- from_backend_g1(P) / from_backend_g2(Q)   py_ecc tuple -> typed point
- g1_add(P, Q), g1_mul(P, k), g2_mul(Q, k)
- g2_in_subgroup(Q)
- pair(P, Q) -> GTElement
- product_of_pairings(pairs) -> GTElement
- check_pairing_product(pairs) -> bool
- curve_order(), field_modulus()

Notes
-----
- Point ordering follows the common convention e(P, Q) with P in G1, Q in G2.
  The underlying `py_ecc` pairing call expects (Q, P); this wrapper handles it.
- Products share one final exponentiation: Miller loops are multiplied first.

License: MIT
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Tuple

from py_ecc.optimized_bn128 import (FQ, FQ2, FQ12, Z1, Z2, add, double,
                                    final_exponentiate, is_inf, multiply,
                                    normalize, pairing)
from py_ecc.optimized_bn128 import curve_order as _Q
from py_ecc.optimized_bn128 import field_modulus as _P

from .field import P as _FIELD_P
from .field import R as _FIELD_R
from .field import Fq, Fq2
from .points import G1Affine, G1Infinity, G1Point, G2Affine, G2Infinity, G2Point

log = logging.getLogger(__name__)

BACKEND_NAME = "py_ecc.optimized_bn128"

# Backend-internal projective tuples
BackendG1 = Tuple[Any, Any, Any]
BackendG2 = Tuple[Any, Any, Any]
GTElement = FQ12

if int(_P) != _FIELD_P or int(_Q) != _FIELD_R:  # pragma: no cover
    raise ImportError(f"{BACKEND_NAME} does not implement BN254")


def curve_order() -> int:
    """Return the BN254 subgroup order r."""
    return int(_Q)


def field_modulus() -> int:
    """Return the base field modulus p."""
    return int(_P)


def _limb(c: Any) -> int:
    # optimized FQP stores plain ints; FQ wraps them in `.n`
    return int(c.n) if hasattr(c, "n") else int(c)


# -------------------------
# Conversions
# -------------------------


def to_backend_g1(p: G1Point) -> BackendG1:
    if p.is_infinity:
        return Z1
    x, y = p.xy()
    return (FQ(x.n), FQ(y.n), FQ.one())


def to_backend_g2(q: G2Point) -> BackendG2:
    if q.is_infinity:
        return Z2
    x, y = q.xy()
    return (FQ2([x.c0.n, x.c1.n]), FQ2([y.c0.n, y.c1.n]), FQ2.one())


def from_backend_g1(pt: BackendG1) -> G1Point:
    if is_inf(pt):
        return G1Infinity()
    ax, ay = normalize(pt)
    return G1Affine(Fq(_limb(ax)), Fq(_limb(ay)))


def from_backend_g2(pt: BackendG2) -> G2Point:
    if is_inf(pt):
        return G2Infinity()
    ax, ay = normalize(pt)
    return G2Affine(
        Fq2(Fq(_limb(ax.coeffs[0])), Fq(_limb(ax.coeffs[1]))),
        Fq2(Fq(_limb(ay.coeffs[0])), Fq(_limb(ay.coeffs[1]))),
    )


# -------------------------
# Group operations
# -------------------------


def g1_add(p: G1Point, q: G1Point) -> G1Point:
    return from_backend_g1(add(to_backend_g1(p), to_backend_g1(q)))


def g1_mul(p: G1Point, k: int) -> G1Point:
    return from_backend_g1(multiply(to_backend_g1(p), k % curve_order()))


def g2_mul(q: G2Point, k: int) -> G2Point:
    return from_backend_g2(multiply(to_backend_g2(q), k % curve_order()))


def _mul_unreduced(pt: Any, n: int) -> Any:
    """Left-to-right double-and-add without reducing n modulo the group order."""
    acc = None
    for bit in bin(n)[2:]:
        if acc is not None:
            acc = double(acc)
        if bit == "1":
            acc = pt if acc is None else add(acc, pt)
    return acc


def g2_in_subgroup(q: G2Point) -> bool:
    """True iff r * Q is the identity (the twist has a large cofactor)."""
    if q.is_infinity:
        return True
    return bool(is_inf(_mul_unreduced(to_backend_g2(q), curve_order())))


# -------------------------
# Pairing
# -------------------------


def _miller(p: G1Point, q: G2Point) -> GTElement:
    if p.is_infinity or q.is_infinity:
        return FQ12.one()
    # py_ecc pairing expects (Q, P)
    return pairing(to_backend_g2(q), to_backend_g1(p), final_exponentiate=False)


def pair(p: G1Point, q: G2Point) -> GTElement:
    """Compute the reduced Ate pairing e(P, Q)."""
    return final_exponentiate(_miller(p, q))


def product_of_pairings(pairs: Iterable[Tuple[G1Point, G2Point]]) -> GTElement:
    """
    Compute prod e(P_i, Q_i) with a single final exponentiation.

    Points must already be on their curves; callers validate (the precompile
    emulation rejects bad input before reaching here).
    """
    acc = FQ12.one()
    n = 0
    for p, q in pairs:
        acc = acc * _miller(p, q)
        n += 1
    log.debug("pairing product over %d pairs", n)
    return final_exponentiate(acc)


def check_pairing_product(pairs: Iterable[Tuple[G1Point, G2Point]]) -> bool:
    """Return True iff prod e(P_i, Q_i) == 1 in GT."""
    return product_of_pairings(pairs) == FQ12.one()


__all__ = [
    "BACKEND_NAME",
    "GTElement",
    "curve_order",
    "field_modulus",
    "to_backend_g1",
    "to_backend_g2",
    "from_backend_g1",
    "from_backend_g2",
    "g1_add",
    "g1_mul",
    "g2_mul",
    "g2_in_subgroup",
    "pair",
    "product_of_pairings",
    "check_pairing_product",
]
