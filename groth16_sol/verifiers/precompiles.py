"""
EVM alt_bn128 precompiles (EIP-196 / EIP-197), emulated in Python.

Each function takes the raw call input and returns the raw output, or None
when the precompile would fail (the EVM `staticcall` then returns 0):

- ec_add      0x06   (x1, y1, x2, y2)            -> (x, y)
- ec_mul      0x07   (x, y, s)                   -> (x, y)
- ec_pairing  0x08   k * (x, y, x_im, x_re, y_im, y_re) -> 1 | 0

Input shorter than expected is right-padded with zeros; extra bytes are
ignored (ecAdd/ecMul). The pairing input must be a multiple of 192 bytes.
Coordinates >= P, points off the curve and G2 points outside the r-torsion
make the call fail. (0, 0) encodes the point at infinity.
"""

from __future__ import annotations

import logging
from typing import Callable, Dict, List, Optional, Tuple

from .field import P, Fq, Fq2
from .pairing_bn254 import check_pairing_product, g1_add, g1_mul
from .points import G1Affine, G1Infinity, G1Point, G2Affine, G2Infinity, G2Point

log = logging.getLogger(__name__)

PRECOMPILE_ADD = 0x06
PRECOMPILE_MUL = 0x07
PRECOMPILE_VERIFY = 0x08

PAIRING_CHUNK = 192

Precompile = Callable[[bytes], Optional[bytes]]


class _Reject(Exception):
    """Internal: input makes the precompile fail."""


def _words(data: bytes, n: int) -> List[int]:
    data = data[: n * 32].ljust(n * 32, b"\x00")
    return [int.from_bytes(data[i * 32:(i + 1) * 32], "big") for i in range(n)]


def _coord(v: int) -> int:
    if v >= P:
        raise _Reject("coordinate not in field")
    return v


def _g1(x: int, y: int) -> G1Point:
    x, y = _coord(x), _coord(y)
    if x == 0 and y == 0:
        return G1Infinity()
    p = G1Affine(Fq(x), Fq(y))
    if not p.is_on_curve():
        raise _Reject("G1 point not on curve")
    return p


def _g2(x_im: int, x_re: int, y_im: int, y_re: int) -> G2Point:
    for v in (x_im, x_re, y_im, y_re):
        _coord(v)
    if x_im == x_re == y_im == y_re == 0:
        return G2Infinity()
    q = G2Affine(Fq2.from_ints(x_re, x_im), Fq2.from_ints(y_re, y_im))
    if not q.is_on_curve():
        raise _Reject("G2 point not on curve")
    if not q.in_subgroup():
        raise _Reject("G2 point not in subgroup")
    return q


def _encode_g1(p: G1Point) -> bytes:
    if p.is_infinity:
        return b"\x00" * 64
    x, y = p.xy()
    return x.to_bytes() + y.to_bytes()


def ec_add(data: bytes) -> Optional[bytes]:
    try:
        x1, y1, x2, y2 = _words(data, 4)
        return _encode_g1(g1_add(_g1(x1, y1), _g1(x2, y2)))
    except _Reject as e:
        log.debug("ecAdd rejected input: %s", e)
        return None


def ec_mul(data: bytes) -> Optional[bytes]:
    try:
        x, y, s = _words(data, 3)
        return _encode_g1(g1_mul(_g1(x, y), s))
    except _Reject as e:
        log.debug("ecMul rejected input: %s", e)
        return None


def decode_pairing_input(data: bytes) -> List[Tuple[G1Point, G2Point]]:
    """Split ecPairing input into (G1, G2) pairs; raises ValueError on bad input."""
    if len(data) % PAIRING_CHUNK:
        raise ValueError(f"pairing input length {len(data)} is not a multiple of {PAIRING_CHUNK}")
    pairs = []
    try:
        for off in range(0, len(data), PAIRING_CHUNK):
            x, y, x_im, x_re, y_im, y_re = _words(data[off:off + PAIRING_CHUNK], 6)
            pairs.append((_g1(x, y), _g2(x_im, x_re, y_im, y_re)))
    except _Reject as e:
        raise ValueError(str(e)) from e
    return pairs


def ec_pairing(data: bytes) -> Optional[bytes]:
    try:
        pairs = decode_pairing_input(data)
    except ValueError as e:
        log.debug("ecPairing rejected input: %s", e)
        return None
    ok = check_pairing_product(pairs)
    return (1 if ok else 0).to_bytes(32, "big")


PRECOMPILES: Dict[int, Precompile] = {
    PRECOMPILE_ADD: ec_add,
    PRECOMPILE_MUL: ec_mul,
    PRECOMPILE_VERIFY: ec_pairing,
}


__all__ = [
    "PRECOMPILE_ADD",
    "PRECOMPILE_MUL",
    "PRECOMPILE_VERIFY",
    "PRECOMPILES",
    "ec_add",
    "ec_mul",
    "ec_pairing",
    "decode_pairing_input",
]
