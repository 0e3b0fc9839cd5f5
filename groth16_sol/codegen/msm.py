"""
Public-input multi-scalar multiplication, unrolled for a fixed input count.

Memory (f = free memory pointer, g = f + 0x40):

    f + 0x00  acc.x          g + 0x00  PUB_i_X
    f + 0x20  acc.y          g + 0x20  PUB_i_Y
                             g + 0x40  input[i]

ecMul writes i*PUB_i over (g, g+0x20); ecAdd then reads the 0x80 bytes at f
(accumulator followed by the product) and writes the sum back to f.
"""

from __future__ import annotations

from .ir import (Assign, Calldata, Const, Fragment, LetLocal, LetPointer,
                 Local, MLoad, MStore, RangeCheck, StaticCall)
from .transform import pub_constant_names

INPUT_ARRAY = "input"
ERROR = "PublicInputNotInField"


def assemble_msm(num_public_inputs: int) -> Fragment:
    if num_public_inputs < 0:
        raise ValueError("num_public_inputs must be >= 0")
    ops = [
        LetPointer("f"),
        LetPointer("g", "f", 0x40),
    ]
    if num_public_inputs:
        ops.append(LetLocal("s"))
    ops += [
        MStore("f", 0x00, Const("CONSTANT_X")),
        MStore("f", 0x20, Const("CONSTANT_Y")),
    ]
    for i in range(num_public_inputs):
        nx, ny = pub_constant_names(i)
        ops += [
            MStore("g", 0x00, Const(nx)),
            MStore("g", 0x20, Const(ny)),
            Assign("s", Calldata(INPUT_ARRAY, i)),
            MStore("g", 0x40, Local("s")),
            RangeCheck("s", Const("R")),
            StaticCall(Const("PRECOMPILE_MUL"), "g", 0x60, "g", 0x40),
            StaticCall(Const("PRECOMPILE_ADD"), "f", 0x80, "f", 0x40),
        ]
    ops += [
        MLoad("x", "f", 0x00),
        MLoad("y", "f", 0x20),
    ]
    return Fragment(tuple(ops), error=ERROR, flag_initial=True, outputs=("x", "y"))


__all__ = ["INPUT_ARRAY", "ERROR", "assemble_msm"]
