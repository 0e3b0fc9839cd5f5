"""
BN254 G1/G2 points as tagged variants.

Every group has two variants:

- `G1Affine(x, y)` / `G2Affine(x, y)` carry affine coordinates.
- `G1Infinity()` / `G2Infinity()` are the identity and carry none; asking them
  for `x`, `y` or `xy()` raises `UndefinedCoordinates`.

`is_infinity` is the defined-ness check; callers branch on it (or on the
type) instead of probing for sentinel coordinates.

Curves:
    G1: y^2 = x^3 + 3            over Fq
    G2: y^2 = x^3 + 3 / (9 + u)  over Fq2 (D-type sextic twist)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple, Union

from ..errors import UndefinedCoordinates
from .field import Fq, Fq2

B1 = Fq(3)
B2 = Fq2.from_ints(3, 0) / Fq2.from_ints(9, 1)


@dataclass(frozen=True)
class G1Affine:
    x: Fq
    y: Fq

    is_infinity = False

    def xy(self) -> Tuple[Fq, Fq]:
        return self.x, self.y

    def is_on_curve(self) -> bool:
        return self.y * self.y == self.x * self.x * self.x + B1

    def in_subgroup(self) -> bool:
        # cofactor 1: every curve point is in the prime-order group
        return self.is_on_curve()

    def negate(self) -> "G1Affine":
        return G1Affine(self.x, -self.y)

    @staticmethod
    def from_ints(x: int, y: int) -> "G1Affine":
        return G1Affine(Fq(x), Fq(y))


@dataclass(frozen=True)
class G1Infinity:
    is_infinity = True

    @property
    def x(self) -> Fq:
        raise UndefinedCoordinates("G1")

    @property
    def y(self) -> Fq:
        raise UndefinedCoordinates("G1")

    def xy(self) -> Tuple[Fq, Fq]:
        raise UndefinedCoordinates("G1")

    def is_on_curve(self) -> bool:
        return True

    def in_subgroup(self) -> bool:
        return True

    def negate(self) -> "G1Infinity":
        return self


@dataclass(frozen=True)
class G2Affine:
    x: Fq2
    y: Fq2

    is_infinity = False

    def xy(self) -> Tuple[Fq2, Fq2]:
        return self.x, self.y

    def is_on_curve(self) -> bool:
        return self.y.square() == self.x.square() * self.x + B2

    def in_subgroup(self) -> bool:
        if not self.is_on_curve():
            return False
        from .pairing_bn254 import g2_in_subgroup

        return g2_in_subgroup(self)

    def negate(self) -> "G2Affine":
        return G2Affine(self.x, -self.y)

    @staticmethod
    def from_ints(x0: int, x1: int, y0: int, y1: int) -> "G2Affine":
        return G2Affine(Fq2.from_ints(x0, x1), Fq2.from_ints(y0, y1))


@dataclass(frozen=True)
class G2Infinity:
    is_infinity = True

    @property
    def x(self) -> Fq2:
        raise UndefinedCoordinates("G2")

    @property
    def y(self) -> Fq2:
        raise UndefinedCoordinates("G2")

    def xy(self) -> Tuple[Fq2, Fq2]:
        raise UndefinedCoordinates("G2")

    def is_on_curve(self) -> bool:
        return True

    def in_subgroup(self) -> bool:
        return True

    def negate(self) -> "G2Infinity":
        return self


G1Point = Union[G1Affine, G1Infinity]
G2Point = Union[G2Affine, G2Infinity]

G1_GENERATOR = G1Affine.from_ints(1, 2)
G2_GENERATOR = G2Affine.from_ints(
    10857046999023057135944570762232829481370756359578518086990519993285655852781,
    11559732032986387107991004021392285783925812861821192530917403151452391805634,
    8495653923123431417604973247489272438418190587263600148770280649306958101930,
    4082367875863433681332203403145435568316851327593401208105741076214120093531,
)


def negate(point):
    """Group negation: flips y (component-wise for G2), identity stays identity."""
    return point.negate()


__all__ = [
    "G1Affine",
    "G1Infinity",
    "G2Affine",
    "G2Infinity",
    "G1Point",
    "G2Point",
    "G1_GENERATOR",
    "G2_GENERATOR",
    "B1",
    "B2",
    "negate",
]
