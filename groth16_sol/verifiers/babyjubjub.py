"""
BabyJubJub: the twisted Edwards curve embedded in the BN254 scalar field.

    a*x^2 + y^2 = 1 + d*x^2*y^2   over Fr (BN254),  a = 168700, d = 168696

Group order is 8 * l with l = BABYJUBJUB_ORDER. The identity is the affine
point (0, 1), so unlike BN254 there is no separate infinity variant; points
are always serialized as affine [x, y].

Only what point (de)serialization needs lives here: the curve equation, the
complete addition law and a scalar multiplication used by the subgroup check.
"""

from __future__ import annotations

from dataclasses import dataclass

from .field import BABYJUBJUB_ORDER, Fr

A = Fr(168700)
D = Fr(168696)
COFACTOR = 8


@dataclass(frozen=True)
class EdwardsAffine:
    x: Fr
    y: Fr

    @staticmethod
    def identity() -> "EdwardsAffine":
        return EdwardsAffine(Fr(0), Fr(1))

    @staticmethod
    def from_ints(x: int, y: int) -> "EdwardsAffine":
        return EdwardsAffine(Fr(x), Fr(y))

    def is_zero(self) -> bool:
        return self == EdwardsAffine.identity()

    def is_on_curve(self) -> bool:
        x2 = self.x * self.x
        y2 = self.y * self.y
        return A * x2 + y2 == 1 + D * x2 * y2

    def __add__(self, other: "EdwardsAffine") -> "EdwardsAffine":
        x1, y1, x2, y2 = self.x, self.y, other.x, other.y
        t = D * x1 * x2 * y1 * y2
        x3 = (x1 * y2 + y1 * x2) / (1 + t)
        y3 = (y1 * y2 - A * x1 * x2) / (1 - t)
        return EdwardsAffine(x3, y3)

    def __neg__(self) -> "EdwardsAffine":
        return EdwardsAffine(-self.x, self.y)

    def double(self) -> "EdwardsAffine":
        return self + self

    def multiply(self, k: int) -> "EdwardsAffine":
        """Double-and-add; k is not reduced so that order checks stay meaningful."""
        if k < 0:
            return (-self).multiply(-k)
        acc = EdwardsAffine.identity()
        for bit in bin(k)[2:]:
            acc = acc.double()
            if bit == "1":
                acc = acc + self
        return acc

    def in_subgroup(self) -> bool:
        return self.is_on_curve() and self.multiply(BABYJUBJUB_ORDER).is_zero()


# Generator of the full group (order 8 * l).
GENERATOR = EdwardsAffine.from_ints(
    16540640123574156134436876038791482806971768689494387082833631921987005038935,
    20819045374670962167435360035096875258406992893633759881276124905556507972311,
)


def subgroup_generator() -> EdwardsAffine:
    """Cofactor-cleared generator of the prime-order subgroup."""
    return GENERATOR.multiply(COFACTOR)


__all__ = ["A", "D", "COFACTOR", "EdwardsAffine", "GENERATOR", "subgroup_generator"]
