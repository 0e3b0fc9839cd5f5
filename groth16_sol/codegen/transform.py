"""
Verification key -> the values the verifier contract hard-codes.

The pairing check is arranged as

    e(A, B) * e(C, -delta) * e(alpha, -beta) * e(L_pub, -gamma) == 1

so beta, gamma and delta are stored negated. Every point must be affine: a
contract constant cannot encode "no coordinates".
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Tuple

from ..errors import InvalidVerificationKey, UndefinedCoordinates
from ..types import VerificationKey
from ..verifiers.field import P, R
from ..verifiers.points import G1Affine, G2Affine
from ..verifiers.precompiles import (PRECOMPILE_ADD, PRECOMPILE_MUL,
                                     PRECOMPILE_VERIFY)

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class TransformedKey:
    alpha: G1Affine
    beta_neg: G2Affine
    gamma_neg: G2Affine
    delta_neg: G2Affine
    constant_term: G1Affine
    input_terms: Tuple[G1Affine, ...]

    @property
    def num_public_inputs(self) -> int:
        return len(self.input_terms)


@dataclass(frozen=True)
class ContractConstant:
    name: str
    value: int
    # "hex" for moduli/addresses, "dec" for curve coordinates
    style: str = "dec"

    def literal(self) -> str:
        if self.style == "hex":
            return f"0x{self.value:02x}" if self.value < 0x100 else hex(self.value)
        return str(self.value)


def _affine(point, name: str):
    try:
        point.xy()
    except UndefinedCoordinates as e:
        raise InvalidVerificationKey(
            f"{name} is the point at infinity", field_name=name, cause=e
        ) from e
    return point


def transform_verification_key(vk: VerificationKey) -> TransformedKey:
    if not vk.gamma_abc_g1:
        raise InvalidVerificationKey("gamma_abc_g1 is empty", field_name="gamma_abc_g1")
    alpha = _affine(vk.alpha_g1, "alpha_g1")
    beta = _affine(vk.beta_g2, "beta_g2")
    gamma = _affine(vk.gamma_g2, "gamma_g2")
    delta = _affine(vk.delta_g2, "delta_g2")
    terms = [_affine(p, f"gamma_abc_g1[{i}]") for i, p in enumerate(vk.gamma_abc_g1)]
    tk = TransformedKey(
        alpha=alpha,
        beta_neg=beta.negate(),
        gamma_neg=gamma.negate(),
        delta_neg=delta.negate(),
        constant_term=terms[0],
        input_terms=tuple(terms[1:]),
    )
    log.debug("transformed verification key (%d public inputs)", tk.num_public_inputs)
    return tk


def g2_words(point: G2Affine) -> Tuple[int, int, int, int]:
    """EVM word order of a G2 point: imaginary before real part."""
    return (point.x.c1.n, point.x.c0.n, point.y.c1.n, point.y.c0.n)


def g2_constant_names(prefix: str) -> Tuple[str, str, str, str]:
    """Constant names of a G2 point in EVM word order (matches g2_words)."""
    return (f"{prefix}_X_1", f"{prefix}_X_0", f"{prefix}_Y_1", f"{prefix}_Y_0")


def pub_constant_names(i: int) -> Tuple[str, str]:
    return (f"PUB_{i}_X", f"PUB_{i}_Y")


def _g2_constants(prefix: str, point: G2Affine) -> List[ContractConstant]:
    return [
        ContractConstant(f"{prefix}_X_0", point.x.c0.n),
        ContractConstant(f"{prefix}_X_1", point.x.c1.n),
        ContractConstant(f"{prefix}_Y_0", point.y.c0.n),
        ContractConstant(f"{prefix}_Y_1", point.y.c1.n),
    ]


def contract_constants(tk: TransformedKey) -> List[ContractConstant]:
    """Ordered constant table, in declaration order of the contract."""
    out = [
        ContractConstant("PRECOMPILE_ADD", PRECOMPILE_ADD, "hex"),
        ContractConstant("PRECOMPILE_MUL", PRECOMPILE_MUL, "hex"),
        ContractConstant("PRECOMPILE_VERIFY", PRECOMPILE_VERIFY, "hex"),
        ContractConstant("P", P, "hex"),
        ContractConstant("R", R, "hex"),
        ContractConstant("ALPHA_X", tk.alpha.x.n),
        ContractConstant("ALPHA_Y", tk.alpha.y.n),
    ]
    out += _g2_constants("BETA_NEG", tk.beta_neg)
    out += _g2_constants("GAMMA_NEG", tk.gamma_neg)
    out += _g2_constants("DELTA_NEG", tk.delta_neg)
    out += [
        ContractConstant("CONSTANT_X", tk.constant_term.x.n),
        ContractConstant("CONSTANT_Y", tk.constant_term.y.n),
    ]
    for i, term in enumerate(tk.input_terms):
        nx, ny = pub_constant_names(i)
        out += [ContractConstant(nx, term.x.n), ContractConstant(ny, term.y.n)]
    return out


__all__ = [
    "TransformedKey",
    "ContractConstant",
    "transform_verification_key",
    "contract_constants",
    "g2_words",
    "g2_constant_names",
    "pub_constant_names",
]
