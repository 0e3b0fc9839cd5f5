"""
groth16_sol.codegen.render
==========================

Turn a verification key into Solidity source.

Two steps:

1) `build_contract(vk, config)` -> ContractIR: the constant table plus the MSM
   and pairing fragments (structured ops, see `ir.py`).
2) `render_contract(ir)` -> str: a plain string-building pass over ContractIR.

`render_verifier(vk, config)` does both.

The contract exposes

    function publicInputMSM(uint256[N] calldata input) internal view returns (uint256 x, uint256 y)
    function verifyProof(uint256[8] calldata proof, uint256[N] calldata input) public view

and reverts with `PublicInputNotInField()` or `ProofInvalid()`. Solidity has
no zero-length static arrays, so for N == 0 the `input` parameter is dropped.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator, List, Optional, Tuple

from ..config import DEFAULT_CONFIG, SolidityVerifierConfig
from ..types import VerificationKey
from .ir import Fragment
from .msm import INPUT_ARRAY, assemble_msm
from .pairing import PROOF_ARRAY, PROOF_WORDS, assemble_pairing
from .transform import (ContractConstant, TransformedKey, contract_constants,
                        transform_verification_key)

log = logging.getLogger(__name__)

INDENT = "    "


@dataclass(frozen=True)
class ContractIR:
    config: SolidityVerifierConfig
    key: TransformedKey
    constants: Tuple[ContractConstant, ...]
    msm: Fragment
    pairing: Fragment

    @property
    def num_public_inputs(self) -> int:
        return self.key.num_public_inputs

    def constant_values(self) -> dict:
        return {c.name: c.value for c in self.constants}


def build_contract(
    vk: VerificationKey, config: Optional[SolidityVerifierConfig] = None
) -> ContractIR:
    tk = transform_verification_key(vk)
    return ContractIR(
        config=config or DEFAULT_CONFIG,
        key=tk,
        constants=tuple(contract_constants(tk)),
        msm=assemble_msm(tk.num_public_inputs),
        pairing=assemble_pairing(),
    )


class _SourceBuilder:
    def __init__(self) -> None:
        self._lines: List[str] = []
        self._depth = 0

    def line(self, text: str = "") -> None:
        self._lines.append(INDENT * self._depth + text if text else "")

    def lines(self, texts: List[str]) -> None:
        for t in texts:
            self.line(t)

    @contextmanager
    def block(self, header: str, *continuation: str) -> Iterator[None]:
        """`header`, then `continuation` lines indented one extra level; the last gets the brace."""
        heads = [header, *continuation]
        for i, h in enumerate(heads):
            text = h if i == 0 else INDENT + h
            self.line(text + " {" if i == len(heads) - 1 else text)
        self._depth += 1
        try:
            yield
        finally:
            self._depth -= 1
            self.line("}")

    def text(self) -> str:
        return "\n".join(self._lines) + "\n"


# Comments above each constant group, keyed by the first constant of the group.
_GROUP_COMMENTS = {
    "PRECOMPILE_ADD": "Addresses of the alt_bn128 precompiles (EIP-196, EIP-197)",
    "P": "Base field order P and scalar field order R of BN254",
    "ALPHA_X": "Groth16 alpha in G1",
    "BETA_NEG_X_0": "Groth16 beta in G2, negated; index 0 is the real part",
    "GAMMA_NEG_X_0": "Groth16 gamma in G2, negated",
    "DELTA_NEG_X_0": "Groth16 delta in G2, negated",
    "CONSTANT_X": "Constant term of the public input combination",
    "PUB_0_X": "Public input bases",
}


def _input_param(n: int) -> str:
    return f"uint256[{n}] calldata {INPUT_ARRAY}" if n else ""


def _emit_constants(b: _SourceBuilder, constants: Tuple[ContractConstant, ...]) -> None:
    for c in constants:
        comment = _GROUP_COMMENTS.get(c.name)
        if comment:
            b.line()
            b.line(f"// {comment}")
        b.line(f"uint256 constant {c.name} = {c.literal()};")


def _emit_assembly(b: _SourceBuilder, fragment: Fragment) -> None:
    with b.block("assembly"):
        b.lines(fragment.render_lines())
    with b.block("if (!success)"):
        b.line(f"revert {fragment.error}();")


def render_contract(ir: ContractIR) -> str:
    cfg = ir.config
    n = ir.num_public_inputs
    b = _SourceBuilder()
    b.line(f"// SPDX-License-Identifier: {cfg.license_identifier}")
    b.line(f"pragma solidity {cfg.pragma_version};")
    b.line()
    b.line("/// @title Groth16 verifier over BN254")
    b.line("/// @notice Generated from a verification key; the key is hard-coded below.")
    with b.block(f"contract {cfg.contract_name}"):
        b.line("/// A public input is not smaller than the scalar field order R.")
        b.line("/// @dev Inputs are never reduced; a non-canonical input is rejected.")
        b.line(f"error {ir.msm.error}();")
        b.line()
        b.line("/// The proof does not satisfy the pairing equation, or a proof point")
        b.line("/// is not a valid curve point.")
        b.line(f"error {ir.pairing.error}();")
        _emit_constants(b, ir.constants)
        b.line()

        b.line("/// Linear combination of the public inputs with the key's IC points.")
        b.line("/// @notice Reverts with PublicInputNotInField if an input is >= R.")
        if n:
            b.line("/// @param input The public inputs, elements of the scalar field.")
        b.line("/// @return x The X coordinate of the resulting G1 point.")
        b.line("/// @return y The Y coordinate of the resulting G1 point.")
        with b.block(
            f"function publicInputMSM({_input_param(n)})",
            "internal view returns (uint256 x, uint256 y)",
        ):
            b.line("bool success = true;")
            _emit_assembly(b, ir.msm)
        b.line()

        b.line("/// Verify a Groth16 proof; returns normally iff the proof is valid.")
        b.line("/// @notice Reverts with ProofInvalid or PublicInputNotInField otherwise.")
        b.line("/// @param proof (A.x, A.y, B.x1, B.x0, B.y1, B.y0, C.x, C.y).")
        if n:
            b.line("/// @param input The public inputs, elements of the scalar field.")
        params = f"uint256[{PROOF_WORDS}] calldata {PROOF_ARRAY}"
        if n:
            params += ", " + _input_param(n)
        call_args = INPUT_ARRAY if n else ""
        with b.block(f"function verifyProof({params}) public view"):
            b.line(f"(uint256 x, uint256 y) = publicInputMSM({call_args});")
            b.line("bool success;")
            _emit_assembly(b, ir.pairing)
    return b.text()


def render_verifier(
    vk: VerificationKey, config: Optional[SolidityVerifierConfig] = None
) -> str:
    ir = build_contract(vk, config)
    src = render_contract(ir)
    log.info(
        "rendered %s (%d public inputs, %d bytes)",
        ir.config.contract_name,
        ir.num_public_inputs,
        len(src),
    )
    return src


__all__ = ["ContractIR", "build_contract", "render_contract", "render_verifier"]
