"""
Pairing check input for ecPairing (0x08), 0x300 bytes at the free pointer.

    0x000  A.x A.y B.x1 B.x0 B.y1 B.y0 C.x C.y     proof, copied from calldata
    0x100  -delta    (x1, x0, y1, y0)               pairs with C
    0x180  alpha     (x, y)
    0x1c0  -beta     (x1, x0, y1, y0)               pairs with alpha
    0x240  L_pub     (x, y)                         MSM result
    0x280  -gamma    (x1, x0, y1, y0)               pairs with L_pub

G2 words are imaginary part first, as EIP-197 expects.
"""

from __future__ import annotations

from typing import List, Tuple

from .ir import (CalldataCopy, Const, FoldMLoad, Fragment, LetPointer, Local,
                 MStore, Operand, StaticCall)
from .transform import g2_constant_names

PROOF_ARRAY = "proof"
PROOF_WORDS = 8
PAIRING_INPUT_SIZE = 0x300
ERROR = "ProofInvalid"


def pairing_layout() -> List[Tuple[int, Operand]]:
    """(offset, operand) for every word after the copied proof."""
    words: List[Operand] = []
    words += [Const(n) for n in g2_constant_names("DELTA_NEG")]
    words += [Const("ALPHA_X"), Const("ALPHA_Y")]
    words += [Const(n) for n in g2_constant_names("BETA_NEG")]
    words += [Local("x"), Local("y")]
    words += [Const(n) for n in g2_constant_names("GAMMA_NEG")]
    base = PROOF_WORDS * 0x20
    return [(base + i * 0x20, w) for i, w in enumerate(words)]


def assemble_pairing() -> Fragment:
    ops = [
        LetPointer("f"),
        CalldataCopy("f", PROOF_ARRAY, PROOF_WORDS * 0x20),
    ]
    ops += [MStore("f", off, w) for off, w in pairing_layout()]
    ops += [
        StaticCall(Const("PRECOMPILE_VERIFY"), "f", PAIRING_INPUT_SIZE, "f", 0x20, fold=False),
        FoldMLoad("f"),
    ]
    return Fragment(tuple(ops), error=ERROR, flag_initial=False)


__all__ = ["PROOF_ARRAY", "PROOF_WORDS", "PAIRING_INPUT_SIZE", "ERROR", "pairing_layout", "assemble_pairing"]
