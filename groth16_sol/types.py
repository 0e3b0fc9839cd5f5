"""
Core value types: verification key, proof and public input.

All are frozen dataclasses over the typed field/point model; JSON lives in
`adapters/`, wire words (uint256) are produced by `verifiers/groth16_bn254`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Optional, Tuple

from .verifiers.field import Fr
from .verifiers.points import G1Point, G2Point


@dataclass(frozen=True)
class VerificationKey:
    """
    Groth16 verification key over BN254.

    gamma_abc_g1[0] is the constant term of the public-input combination,
    gamma_abc_g1[i] (i >= 1) is multiplied by public input i-1.
    `alphabeta_g12` is the precomputed e(alpha, beta) some producers ship
    (circom's vk_alphabeta_12); it is carried along, never required.
    """

    alpha_g1: G1Point
    beta_g2: G2Point
    gamma_g2: G2Point
    delta_g2: G2Point
    gamma_abc_g1: Tuple[G1Point, ...]
    alphabeta_g12: Optional[object] = field(default=None, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "gamma_abc_g1", tuple(self.gamma_abc_g1))

    @property
    def num_public_inputs(self) -> int:
        return max(len(self.gamma_abc_g1) - 1, 0)


@dataclass(frozen=True)
class Proof:
    a: G1Point
    b: G2Point
    c: G1Point


@dataclass(frozen=True)
class PublicInput:
    """Ordered public inputs (scalar field elements)."""

    values: Tuple[Fr, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "values", tuple(self.values))

    @staticmethod
    def from_ints(xs: Iterable[int]) -> "PublicInput":
        return PublicInput(tuple(Fr(int(x)) for x in xs))

    def __len__(self) -> int:
        return len(self.values)

    def __iter__(self):
        return iter(self.values)

    def words(self) -> Tuple[int, ...]:
        return tuple(v.n for v in self.values)


__all__ = ["VerificationKey", "Proof", "PublicInput"]
