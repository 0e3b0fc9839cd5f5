"""
groth16_sol.adapters.decimal_codec
==================================

Decimal-string JSON codec for BN254 field elements and curve points, the
convention used by circom / snarkjs artifacts (and arkworks' serde bridge).

Encodings
---------
- field element:  "123"                      (base-10 canonical residue)
- G1:             [x, y, z]                  projective, z = "1" for affine
- G2:             [[x0, x1], [y0, y1], [z0, z1]],  z = ["1", "0"]
- GT (Fq12):      [[[a0,a1],[b0,b1],[c0,c1]], [[d0,d1],[e0,e1],[f0,f1]]]
- BabyJubJub:     [x, y]                     affine only

Points at infinity are written as G1 ["0", "1", "0"] and
G2 [["0","0"], ["1","0"], ["0","0"]].

Decoding
--------
- Field strings must be non-empty ASCII digits; anything else is a ParseError.
  Values are reduced modulo the field, never rejected.
- Projective triples are read as Jacobian coordinates (x/z^2, y/z^3).
  z == 0 is infinity when y != 0; (0, 0, 0) is malformed. The affine pair
  (0, 0) is the EVM/snarkjs spelling of infinity and is accepted as such.
- With check=True (default) decoded points must lie on the curve and in the
  prime-order subgroup; check=False trusts the input.

Public API
----------
- serialize_f(fe) / deserialize_f(s, field=Fr)
- serialize_f_seq(xs) / deserialize_f_seq(v, field=Fr)
- deserialize_word(s) / deserialize_word_seq(v)      raw uint256 words, unreduced
- serialize_fq2(x) / deserialize_fq2(v)
- serialize_g1(P) / deserialize_g1(v, check=True)
- serialize_g2(Q) / deserialize_g2(v, check=True)
- serialize_g1_seq(ps) / deserialize_g1_seq(v, check=True)
- serialize_gt(f) / deserialize_gt(v)
- serialize_affine(pt) / deserialize_affine(v, check=True)   (BabyJubJub)
- serialize_affine_seq(ps) / deserialize_affine_seq(v, check=True)
"""

from __future__ import annotations

import re
from typing import Any, List, Sequence, Type, TypeVar

from py_ecc.optimized_bn128 import FQ12

from ..errors import MalformedPoint, ParseError
from ..verifiers.babyjubjub import EdwardsAffine
from ..verifiers.field import Fq, Fq2, Fr, PrimeFieldElement
from ..verifiers.points import (G1Affine, G1Infinity, G1Point, G2Affine,
                                G2Infinity, G2Point)

F = TypeVar("F", bound=PrimeFieldElement)

_DEC_RE = re.compile(r"[0-9]+")

G1_INFINITY_JSON = ["0", "1", "0"]
G2_INFINITY_JSON = [["0", "0"], ["1", "0"], ["0", "0"]]

_WORD_LIMIT = 1 << 256


# -----------------------------------------------------------------------------
# Field elements
# -----------------------------------------------------------------------------


def serialize_f(fe: PrimeFieldElement) -> str:
    return str(fe.n)


def deserialize_f(s: Any, field: Type[F] = Fr) -> F:  # type: ignore[assignment]
    if not isinstance(s, str):
        raise ParseError(s, reason="field element must be a JSON string")
    if not _DEC_RE.fullmatch(s):
        raise ParseError(s, reason="field element must be a non-empty decimal string")
    return field(int(s, 10))


def deserialize_word(s: Any) -> int:
    """Decimal string to a raw uint256 word; never reduced modulo a field."""
    if not isinstance(s, str):
        raise ParseError(s, reason="word must be a JSON string")
    if not _DEC_RE.fullmatch(s):
        raise ParseError(s, reason="word must be a non-empty decimal string")
    w = int(s, 10)
    if w >= _WORD_LIMIT:
        raise ParseError(s, reason="word does not fit in uint256")
    return w


def deserialize_word_seq(v: Any) -> List[int]:
    if not isinstance(v, (list, tuple)):
        raise ParseError(v, reason="expected a JSON array of decimal strings")
    return [deserialize_word(s) for s in v]


def serialize_f_seq(xs: Sequence[PrimeFieldElement]) -> List[str]:
    return [serialize_f(x) for x in xs]


def deserialize_f_seq(v: Any, field: Type[F] = Fr) -> List[F]:  # type: ignore[assignment]
    if not isinstance(v, (list, tuple)):
        raise ParseError(v, reason="expected a JSON array of decimal strings")
    return [deserialize_f(s, field) for s in v]


def serialize_fq2(x: Fq2) -> List[str]:
    return [serialize_f(x.c0), serialize_f(x.c1)]


def deserialize_fq2(v: Any) -> Fq2:
    _expect_arity(v, 2, "Fq2")
    c0, c1 = (_component(s, Fq, "Fq2", i) for i, s in enumerate(v))
    return Fq2(c0, c1)


def _expect_arity(v: Any, n: int, group: str) -> None:
    if not isinstance(v, (list, tuple)):
        raise MalformedPoint(
            f"expected a JSON array of {n} items", group=group, ctx={"got": type(v).__name__}
        )
    if len(v) != n:
        raise MalformedPoint(
            f"expected {n} components, got {len(v)}", group=group, ctx={"arity": len(v)}
        )


def _component(s: Any, field: Type[F], group: str, index: int) -> F:
    try:
        return deserialize_f(s, field)
    except ParseError as e:
        raise MalformedPoint(
            "component is not a decimal field element", group=group, ctx={"index": index}, cause=e
        ) from e


# -----------------------------------------------------------------------------
# G1 / G2
# -----------------------------------------------------------------------------


def serialize_g1(p: G1Point) -> List[str]:
    if p.is_infinity:
        return list(G1_INFINITY_JSON)
    x, y = p.xy()
    return [serialize_f(x), serialize_f(y), "1"]


def deserialize_g1(v: Any, *, check: bool = True) -> G1Point:
    _expect_arity(v, 3, "G1")
    x, y, z = (_component(s, Fq, "G1", i) for i, s in enumerate(v))
    if not z:
        if not y:
            raise MalformedPoint("(0, 0, 0) is not a projective point", group="G1")
        return G1Infinity()
    zinv = z.inv()
    zinv2 = zinv * zinv
    ax, ay = x * zinv2, y * zinv2 * zinv
    if not ax and not ay:
        return G1Infinity()
    p = G1Affine(ax, ay)
    if check and not p.in_subgroup():
        raise MalformedPoint("point is not on the curve", group="G1", ctx={"x": str(ax.n)})
    return p


def serialize_g2(q: G2Point) -> List[List[str]]:
    if q.is_infinity:
        return [list(c) for c in G2_INFINITY_JSON]
    x, y = q.xy()
    return [serialize_fq2(x), serialize_fq2(y), ["1", "0"]]


def _g2_component(v: Any, index: int) -> Fq2:
    try:
        return deserialize_fq2(v)
    except MalformedPoint as e:
        e.with_context(group="G2", index=index)
        raise


def deserialize_g2(v: Any, *, check: bool = True) -> G2Point:
    _expect_arity(v, 3, "G2")
    x, y, z = (_g2_component(c, i) for i, c in enumerate(v))
    if z.is_zero():
        if y.is_zero():
            raise MalformedPoint("(0, 0, 0) is not a projective point", group="G2")
        return G2Infinity()
    zinv = z.inv()
    zinv2 = zinv.square()
    ax, ay = x * zinv2, y * zinv2 * zinv
    if ax.is_zero() and ay.is_zero():
        return G2Infinity()
    q = G2Affine(ax, ay)
    if check:
        if not q.is_on_curve():
            raise MalformedPoint("point is not on the curve", group="G2")
        if not q.in_subgroup():
            raise MalformedPoint("point is not in the prime-order subgroup", group="G2")
    return q


def serialize_g1_seq(ps: Sequence[G1Point]) -> List[List[str]]:
    return [serialize_g1(p) for p in ps]


def deserialize_g1_seq(v: Any, *, check: bool = True) -> List[G1Point]:
    if not isinstance(v, (list, tuple)):
        raise MalformedPoint("expected a JSON array of G1 points", group="G1")
    out: List[G1Point] = []
    for i, item in enumerate(v):
        try:
            out.append(deserialize_g1(item, check=check))
        except MalformedPoint as e:
            e.with_context(position=i)
            raise
    return out


# -----------------------------------------------------------------------------
# GT (Fq12)
# -----------------------------------------------------------------------------
#
# Tower: Fq12 = Fq6[w] / (w^2 - v), Fq6 = Fq2[v] / (v^3 - (9 + u)), so w^6 = 9 + u.
# py_ecc keeps Fq12 flat over w with u = w^6 - 9. For the tower coefficient
# x_k = a_k + b_k*u of w^k (k = 0..5):
#     flat[k] = a_k - 9*b_k,  flat[k + 6] = b_k
# and the JSON nests x_k as c0 = (x_0, x_2, x_4), c1 = (x_1, x_3, x_5).


def _flat_coeffs(f: FQ12) -> List[int]:
    return [int(c.n) if hasattr(c, "n") else int(c) for c in f.coeffs]


def serialize_gt(f: FQ12) -> List[List[List[str]]]:
    flat = _flat_coeffs(f)
    tower = []
    for k in range(6):
        b = Fq(flat[k + 6])
        a = Fq(flat[k]) + b * 9
        tower.append(Fq2(a, b))
    c0 = [serialize_fq2(tower[k]) for k in (0, 2, 4)]
    c1 = [serialize_fq2(tower[k]) for k in (1, 3, 5)]
    return [c0, c1]


def deserialize_gt(v: Any) -> FQ12:
    _expect_arity(v, 2, "GT")
    tower: List[Fq2] = [Fq2.zero()] * 6
    for half, sub in enumerate(v):
        _expect_arity(sub, 3, "GT")
        for j, item in enumerate(sub):
            try:
                tower[2 * j + half] = deserialize_fq2(item)
            except MalformedPoint as e:
                e.with_context(group="GT", index=f"{half}.{j}")
                raise
    flat = [0] * 12
    for k, x in enumerate(tower):
        flat[k] = (x.c0 - x.c1 * 9).n
        flat[k + 6] = x.c1.n
    return FQ12(flat)


# -----------------------------------------------------------------------------
# BabyJubJub (affine)
# -----------------------------------------------------------------------------


def serialize_affine(pt: EdwardsAffine) -> List[str]:
    return [serialize_f(pt.x), serialize_f(pt.y)]


def deserialize_affine(v: Any, *, check: bool = True) -> EdwardsAffine:
    _expect_arity(v, 2, "BabyJubJub")
    x, y = (_component(s, Fr, "BabyJubJub", i) for i, s in enumerate(v))
    pt = EdwardsAffine(x, y)
    if check:
        if not pt.is_on_curve():
            raise MalformedPoint("point is not on the curve", group="BabyJubJub")
        if not pt.in_subgroup():
            raise MalformedPoint("point is not in the prime-order subgroup", group="BabyJubJub")
    return pt


def serialize_affine_seq(ps: Sequence[EdwardsAffine]) -> List[List[str]]:
    return [serialize_affine(p) for p in ps]


def deserialize_affine_seq(v: Any, *, check: bool = True) -> List[EdwardsAffine]:
    if not isinstance(v, (list, tuple)):
        raise MalformedPoint("expected a JSON array of points", group="BabyJubJub")
    return [deserialize_affine(item, check=check) for item in v]


__all__ = [
    "G1_INFINITY_JSON",
    "G2_INFINITY_JSON",
    "serialize_f",
    "deserialize_f",
    "serialize_f_seq",
    "deserialize_f_seq",
    "deserialize_word",
    "deserialize_word_seq",
    "serialize_fq2",
    "deserialize_fq2",
    "serialize_g1",
    "deserialize_g1",
    "serialize_g2",
    "deserialize_g2",
    "serialize_g1_seq",
    "deserialize_g1_seq",
    "serialize_gt",
    "deserialize_gt",
    "serialize_affine",
    "deserialize_affine",
    "serialize_affine_seq",
    "deserialize_affine_seq",
]
