"""
groth16_sol.tests helpers

Utilities shared by the test modules.

Exports:
- TEST_ROOT
- fixture_path(*parts) -> Path
- read_json(path_or_name) -> Any
- configure_test_logging() -> None
- Trapdoor, make_trapdoor(num_inputs, seed) -> Trapdoor
- make_key(trapdoor) -> VerificationKey
- make_proof(trapdoor, inputs, r=..., s=...) -> Proof

A Groth16 key built from a known trapdoor (alpha, beta, gamma, delta and the
IC discrete logs) lets tests forge valid proofs without a prover:

    L = k0 + sum_i x_i * k_{i+1}
    A = r*G1, B = s*G2, C = c*G1 with c = (r*s - alpha*beta - L*gamma) / delta

so that e(A,B) e(C,-delta) e(alpha,-beta) e(L,-gamma) = g_T^0.

Environment toggles:
- GROTH16_SOL_TEST_LOG=1   -> enable DEBUG logging for groth16_sol.*
"""

from __future__ import annotations

import json
import logging
import random
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Sequence, Tuple, Union

from ..config import LOG_FORMAT, env_flag
from ..types import Proof, VerificationKey
from ..verifiers.field import R
from ..verifiers.pairing_bn254 import g1_mul, g2_mul
from ..verifiers.points import G1_GENERATOR, G2_GENERATOR

TEST_ROOT: Path = Path(__file__).resolve().parent


def fixture_path(*parts: Union[str, Path]) -> Path:
    """Return a path under groth16_sol/tests/fixtures."""
    return (TEST_ROOT / "fixtures").joinpath(*map(Path, parts))


def read_json(path_or_name: Union[str, Path]) -> Any:
    """
    Read and parse JSON from a path. If a bare name is given, resolve under fixtures/.
    """
    p = Path(path_or_name)
    if not p.exists():
        p = fixture_path(str(p))
    if not p.exists():
        raise FileNotFoundError(f"JSON file not found: {p}")
    with p.open("r", encoding="utf-8") as fh:
        return json.load(fh)


def configure_test_logging(level: int = logging.DEBUG) -> None:
    if env_flag("GROTH16_SOL_TEST_LOG", False):
        logging.basicConfig(level=level, format=LOG_FORMAT)
        logging.getLogger("groth16_sol").setLevel(level)


# --- Synthetic keys and proofs --------------------------------------------------


@dataclass(frozen=True)
class Trapdoor:
    alpha: int
    beta: int
    gamma: int
    delta: int
    ic: Tuple[int, ...]


def make_trapdoor(num_inputs: int, seed: int = 7) -> Trapdoor:
    rnd = random.Random(seed)
    pick = lambda: rnd.randrange(1, R)  # noqa: E731
    return Trapdoor(pick(), pick(), pick(), pick(), tuple(pick() for _ in range(num_inputs + 1)))


def make_key(td: Trapdoor) -> VerificationKey:
    return VerificationKey(
        alpha_g1=g1_mul(G1_GENERATOR, td.alpha),
        beta_g2=g2_mul(G2_GENERATOR, td.beta),
        gamma_g2=g2_mul(G2_GENERATOR, td.gamma),
        delta_g2=g2_mul(G2_GENERATOR, td.delta),
        gamma_abc_g1=tuple(g1_mul(G1_GENERATOR, k) for k in td.ic),
    )


def make_proof(td: Trapdoor, inputs: Sequence[int], r: int = 1234567, s: int = 7654321) -> Proof:
    if len(inputs) != len(td.ic) - 1:
        raise ValueError("input count does not match the trapdoor")
    lin = td.ic[0] + sum(x * k for x, k in zip(inputs, td.ic[1:]))
    c = (r * s - td.alpha * td.beta - lin * td.gamma) * pow(td.delta, R - 2, R) % R
    return Proof(
        a=g1_mul(G1_GENERATOR, r),
        b=g2_mul(G2_GENERATOR, s),
        c=g1_mul(G1_GENERATOR, c),
    )


__all__ = [
    "TEST_ROOT",
    "fixture_path",
    "read_json",
    "configure_test_logging",
    "Trapdoor",
    "make_trapdoor",
    "make_key",
    "make_proof",
]
