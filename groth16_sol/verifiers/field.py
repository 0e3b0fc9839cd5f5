# Copyright
# SPDX-License-Identifier: Apache-2.0
"""
BN254 prime fields (a.k.a. alt_bn128) and the quadratic extension Fq2.

Three concrete fields share one small immutable base class:

- `Fr`  scalar field of BN254, modulus R (also the base field of BabyJubJub)
- `Fq`  base field of BN254, modulus P
- `BabyJubJubFr` scalar field of the BabyJubJub prime-order subgroup

Elements are always stored as the canonical residue in [0, modulus): the
constructor reduces, so two elements compare equal iff they are the same
residue.

`Fq2` is Fq[u] / (u^2 + 1), stored as (c0, c1) meaning c0 + c1*u. This is the
coordinate field of G2 and the only extension arithmetic done outside py_ecc
(decoding Jacobian G2 coordinates needs an inverse and a couple of products).

It is **not** constant-time and is intended only for public, verifier-side data.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Type, TypeVar, Union

from ..errors import Groth16SolError

# BN254 / alt_bn128 moduli.
P: int = 21888242871839275222246405745257275088696311157297823662689037894645226208583
R: int = 21888242871839275222246405745257275088548364400416034343698204186575808495617
# BabyJubJub prime-order subgroup (cofactor 8 over Fr).
BABYJUBJUB_ORDER: int = 2736030358979909402780800718157159386076813972158567259200215660948447373041

FIELD_BYTE_LEN = 32

F = TypeVar("F", bound="PrimeFieldElement")


@dataclass(frozen=True)
class PrimeFieldElement:
    """
    Base for prime-field elements. Subclasses only set MODULUS / NAME.

    Use like integers:
        a = Fr.from_int(5)
        b = a * 7 + 1
    """

    n: int

    MODULUS: ClassVar[int] = 0
    NAME: ClassVar[str] = "F"

    def __post_init__(self) -> None:
        if isinstance(self.n, bool) or not isinstance(self.n, int):
            raise TypeError(f"{self.NAME} expects an int, got {type(self.n).__name__}")
        object.__setattr__(self, "n", self.n % self.MODULUS)

    # --- Constructors -----------------------------------------------------

    @classmethod
    def from_int(cls: Type[F], x: int) -> F:
        return cls(int(x))

    @classmethod
    def zero(cls: Type[F]) -> F:
        return cls(0)

    @classmethod
    def one(cls: Type[F]) -> F:
        return cls(1)

    @classmethod
    def is_canonical_int(cls, x: int) -> bool:
        """True iff x already is a residue in [0, MODULUS)."""
        return 0 <= x < cls.MODULUS

    @classmethod
    def from_bytes(cls: Type[F], b: bytes, *, strict_len: bool = False) -> F:
        """
        Parse big-endian bytes. If strict_len, require exactly 32 bytes.
        Shorter inputs are accepted by default (e.g., b'\\x01' -> 1).
        """
        if strict_len and len(b) != FIELD_BYTE_LEN:
            raise Groth16SolError(
                msg=f"{cls.NAME}.from_bytes: expected {FIELD_BYTE_LEN} bytes, got {len(b)}"
            )
        if len(b) > FIELD_BYTE_LEN:
            raise Groth16SolError(msg=f"{cls.NAME}.from_bytes: too many bytes for field element")
        return cls(int.from_bytes(b, "big"))

    # --- Serialization ----------------------------------------------------

    def to_bytes(self) -> bytes:
        return self.n.to_bytes(FIELD_BYTE_LEN, "big")

    def to_hex(self, prefix: bool = True) -> str:
        h = self.to_bytes().hex()
        return ("0x" + h) if prefix else h

    # --- Basic number protocol -------------------------------------------

    def __int__(self) -> int:
        return self.n

    def __index__(self) -> int:
        return self.n

    def __bool__(self) -> bool:
        return self.n != 0

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.n})"

    def __hash__(self) -> int:
        return hash(self.n)

    def _coerce(self, other: object) -> int:
        if type(other) is type(self):
            return other.n  # type: ignore[attr-defined]
        if isinstance(other, int) and not isinstance(other, bool):
            return other
        raise TypeError(
            f"cannot combine {type(self).__name__} with {type(other).__name__}"
        )

    # --- Arithmetic -------------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if type(other) is type(self):
            return self.n == other.n  # type: ignore[attr-defined]
        if isinstance(other, int) and not isinstance(other, bool):
            return self.n == other % self.MODULUS
        return NotImplemented

    def __neg__(self: F) -> F:
        return type(self)(-self.n)

    def __add__(self: F, other: Union[int, F]) -> F:
        return type(self)(self.n + self._coerce(other))

    def __radd__(self: F, other: Union[int, F]) -> F:
        return self.__add__(other)

    def __sub__(self: F, other: Union[int, F]) -> F:
        return type(self)(self.n - self._coerce(other))

    def __rsub__(self: F, other: Union[int, F]) -> F:
        return type(self)(self._coerce(other) - self.n)

    def __mul__(self: F, other: Union[int, F]) -> F:
        return type(self)(self.n * self._coerce(other))

    def __rmul__(self: F, other: Union[int, F]) -> F:
        return self.__mul__(other)

    def __truediv__(self: F, other: Union[int, F]) -> F:
        return self * type(self)(self._coerce(other)).inv()

    def __rtruediv__(self: F, other: Union[int, F]) -> F:
        return type(self)(self._coerce(other)) * self.inv()

    def __pow__(self: F, e: int) -> F:
        if e < 0:
            return self.inv() ** (-e)
        return type(self)(pow(self.n, e, self.MODULUS))

    def inv(self: F) -> F:
        if self.n == 0:
            raise ZeroDivisionError(f"{self.NAME}: inverse of zero")
        return type(self)(pow(self.n, self.MODULUS - 2, self.MODULUS))


class Fr(PrimeFieldElement):
    """BN254 scalar field (public inputs, exponents)."""

    MODULUS = R
    NAME = "bn254.Fr"


class Fq(PrimeFieldElement):
    """BN254 base field (G1 coordinates)."""

    MODULUS = P
    NAME = "bn254.Fq"


class BabyJubJubFr(PrimeFieldElement):
    MODULUS = BABYJUBJUB_ORDER
    NAME = "babyjubjub.Fr"


# BabyJubJub is defined over the BN254 scalar field.
BabyJubJubFq = Fr


# Quadratic extension ----------------------------------------------------------


@dataclass(frozen=True)
class Fq2:
    """c0 + c1*u with u^2 = -1."""

    c0: Fq
    c1: Fq

    @staticmethod
    def from_ints(c0: int, c1: int) -> "Fq2":
        return Fq2(Fq(c0), Fq(c1))

    @staticmethod
    def zero() -> "Fq2":
        return Fq2(Fq(0), Fq(0))

    @staticmethod
    def one() -> "Fq2":
        return Fq2(Fq(1), Fq(0))

    def is_zero(self) -> bool:
        return not self.c0 and not self.c1

    def __bool__(self) -> bool:
        return not self.is_zero()

    def __neg__(self) -> "Fq2":
        return Fq2(-self.c0, -self.c1)

    def __add__(self, other: "Fq2") -> "Fq2":
        return Fq2(self.c0 + other.c0, self.c1 + other.c1)

    def __sub__(self, other: "Fq2") -> "Fq2":
        return Fq2(self.c0 - other.c0, self.c1 - other.c1)

    def __mul__(self, other: Union["Fq2", Fq, int]) -> "Fq2":
        if isinstance(other, Fq2):
            # (a + bu)(c + du) = (ac - bd) + (ad + bc)u
            a, b, c, d = self.c0, self.c1, other.c0, other.c1
            return Fq2(a * c - b * d, a * d + b * c)
        return Fq2(self.c0 * other, self.c1 * other)

    def __truediv__(self, other: "Fq2") -> "Fq2":
        return self * other.inv()

    def square(self) -> "Fq2":
        return self * self

    def inv(self) -> "Fq2":
        norm = self.c0 * self.c0 + self.c1 * self.c1
        if not norm:
            raise ZeroDivisionError("Fq2: inverse of zero")
        t = norm.inv()
        return Fq2(self.c0 * t, -self.c1 * t)

    def __repr__(self) -> str:
        return f"Fq2({self.c0.n}, {self.c1.n})"


def negate(x: F) -> F:
    """Additive inverse in the element's own field (P - x mod P for Fq)."""
    return -x


__all__ = [
    "P",
    "R",
    "BABYJUBJUB_ORDER",
    "FIELD_BYTE_LEN",
    "PrimeFieldElement",
    "Fr",
    "Fq",
    "Fq2",
    "BabyJubJubFr",
    "BabyJubJubFq",
    "negate",
]
