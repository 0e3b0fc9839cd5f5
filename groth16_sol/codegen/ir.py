"""
A tiny structured IR for the verifier's inline assembly.

The MSM and pairing assemblers emit lists of ops instead of text. Each op
knows two things:

- `render()`   the single Yul statement it stands for
- `execute(m)` its effect on a `Machine` (word-addressed EVM memory, calldata
               arrays, locals, a success flag, and a precompile table)

The renderer only concatenates `render()` output; direct verification runs
the very same op list through `Machine`, so the memory layout is defined once.

Semantics follow the EVM: words are 256-bit, `mstore` truncates to 256 bits,
a failed `staticcall` leaves memory untouched and yields 0, and nothing
short-circuits: every check is folded into the flag with `and`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import (Callable, Dict, List, Mapping, Optional, Sequence, Tuple,
                    Union)

WORD = 0x20
WORD_MASK = (1 << 256) - 1
FREE_MEMORY_POINTER = 0x80

Precompile = Callable[[bytes], Optional[bytes]]


def hexw(n: int) -> str:
    return f"0x{n:02x}"


# -----------------------------------------------------------------------------
# Operands
# -----------------------------------------------------------------------------


@dataclass(frozen=True)
class Const:
    """A named contract constant (value comes from the constant table)."""

    name: str

    def render(self) -> str:
        return self.name

    def value(self, m: "Machine") -> int:
        return m.constants[self.name]


@dataclass(frozen=True)
class Local:
    name: str

    def render(self) -> str:
        return self.name

    def value(self, m: "Machine") -> int:
        return m.locals[self.name]


@dataclass(frozen=True)
class Calldata:
    """Word `index` of a `uint256[N] calldata` parameter."""

    array: str
    index: int

    def render(self) -> str:
        if self.index == 0:
            return f"calldataload({self.array})"
        return f"calldataload(add({self.array}, {hexw(self.index * WORD)}))"

    def value(self, m: "Machine") -> int:
        return m.calldata[self.array][self.index]


Operand = Union[Const, Local, Calldata]


def _addr(ptr: str, offset: int) -> str:
    return ptr if offset == 0 else f"add({ptr}, {hexw(offset)})"


# -----------------------------------------------------------------------------
# Ops
# -----------------------------------------------------------------------------


@dataclass(frozen=True)
class LetPointer:
    """`let f := mload(0x40)` (base None) or `let g := add(f, delta)`."""

    name: str
    base: Optional[str] = None
    delta: int = 0

    def render(self) -> str:
        if self.base is None:
            return f"let {self.name} := mload(0x40)"
        return f"let {self.name} := {_addr(self.base, self.delta)}"

    def execute(self, m: "Machine") -> None:
        if self.base is None:
            m.pointers[self.name] = m.free_pointer
        else:
            m.pointers[self.name] = m.pointers[self.base] + self.delta


@dataclass(frozen=True)
class LetLocal:
    name: str

    def render(self) -> str:
        return f"let {self.name}"

    def execute(self, m: "Machine") -> None:
        m.locals[self.name] = 0


@dataclass(frozen=True)
class MStore:
    ptr: str
    offset: int
    value: Operand

    def render(self) -> str:
        return f"mstore({_addr(self.ptr, self.offset)}, {self.value.render()})"

    def execute(self, m: "Machine") -> None:
        m.mstore(m.pointers[self.ptr] + self.offset, self.value.value(m))


@dataclass(frozen=True)
class Assign:
    """`s := <operand>`"""

    local: str
    value: Operand

    def render(self) -> str:
        return f"{self.local} := {self.value.render()}"

    def execute(self, m: "Machine") -> None:
        m.locals[self.local] = self.value.value(m)


@dataclass(frozen=True)
class MLoad:
    """`x := mload(f + offset)`"""

    local: str
    ptr: str
    offset: int = 0

    def render(self) -> str:
        return f"{self.local} := mload({_addr(self.ptr, self.offset)})"

    def execute(self, m: "Machine") -> None:
        m.locals[self.local] = m.mload(m.pointers[self.ptr] + self.offset)


@dataclass(frozen=True)
class RangeCheck:
    """`success := and(success, lt(s, R))`"""

    local: str
    bound: Const

    def render(self) -> str:
        return f"{Machine.FLAG} := and({Machine.FLAG}, lt({self.local}, {self.bound.render()}))"

    def execute(self, m: "Machine") -> None:
        s = m.locals[self.local]
        m.fold(0 <= s < self.bound.value(m))


@dataclass(frozen=True)
class CalldataCopy:
    ptr: str
    array: str
    size: int

    def render(self) -> str:
        return f"calldatacopy({self.ptr}, {self.array}, {hexw(self.size)})"

    def execute(self, m: "Machine") -> None:
        base = m.pointers[self.ptr]
        words = m.calldata[self.array]
        for i in range(self.size // WORD):
            m.mstore(base + i * WORD, words[i])


@dataclass(frozen=True)
class StaticCall:
    """
    `success := and(success, staticcall(gas(), ADDR, in, in_size, out, out_size))`

    With fold=False the result overwrites the flag instead of being and-ed in.
    """

    address: Const
    in_ptr: str
    in_size: int
    out_ptr: str
    out_size: int
    fold: bool = True

    def render(self) -> str:
        call = (
            f"staticcall(gas(), {self.address.render()}, {self.in_ptr}, {hexw(self.in_size)}, "
            f"{self.out_ptr}, {hexw(self.out_size)})"
        )
        if self.fold:
            return f"{Machine.FLAG} := and({Machine.FLAG}, {call})"
        return f"{Machine.FLAG} := {call}"

    def execute(self, m: "Machine") -> None:
        ok = m.staticcall(
            self.address.value(m),
            m.pointers[self.in_ptr],
            self.in_size,
            m.pointers[self.out_ptr],
            self.out_size,
        )
        if self.fold:
            m.fold(ok)
        else:
            m.flag = ok


@dataclass(frozen=True)
class FoldMLoad:
    """`success := and(success, mload(f))`"""

    ptr: str
    offset: int = 0

    def render(self) -> str:
        return f"{Machine.FLAG} := and({Machine.FLAG}, mload({_addr(self.ptr, self.offset)}))"

    def execute(self, m: "Machine") -> None:
        m.fold(m.mload(m.pointers[self.ptr] + self.offset) != 0)


Op = Union[LetPointer, LetLocal, MStore, Assign, MLoad, RangeCheck, CalldataCopy, StaticCall, FoldMLoad]


@dataclass(frozen=True)
class Fragment:
    """
    One assembly block plus the Solidity around it.

    flag_initial is the `bool success` value before the block; `error` is the
    custom error reverted with when the flag ends false; `outputs` are the
    locals the block leaves behind (e.g. ("x", "y") for the MSM).
    """

    ops: Tuple[Op, ...]
    error: str
    flag_initial: bool
    outputs: Tuple[str, ...] = ()

    def render_lines(self) -> List[str]:
        return [op.render() for op in self.ops]


# -----------------------------------------------------------------------------
# Interpreter
# -----------------------------------------------------------------------------


@dataclass
class CallRecord:
    address: int
    input: bytes
    output: Optional[bytes]


@dataclass
class Machine:
    """Just enough EVM to run a Fragment."""

    FLAG = "success"

    constants: Mapping[str, int]
    calldata: Mapping[str, Sequence[int]]
    precompiles: Mapping[int, Precompile]
    locals: Dict[str, int] = field(default_factory=dict)
    free_pointer: int = FREE_MEMORY_POINTER
    memory: bytearray = field(default_factory=bytearray)
    pointers: Dict[str, int] = field(default_factory=dict)
    flag: bool = True
    calls: List[CallRecord] = field(default_factory=list)

    def _grow(self, end: int) -> None:
        if end > len(self.memory):
            # EVM memory expands in whole words and reads as zero
            end = (end + WORD - 1) // WORD * WORD
            self.memory.extend(b"\x00" * (end - len(self.memory)))

    def mstore(self, addr: int, value: int) -> None:
        self._grow(addr + WORD)
        self.memory[addr:addr + WORD] = (value & WORD_MASK).to_bytes(WORD, "big")

    def mload(self, addr: int) -> int:
        self._grow(addr + WORD)
        return int.from_bytes(self.memory[addr:addr + WORD], "big")

    def read(self, addr: int, size: int) -> bytes:
        self._grow(addr + size)
        return bytes(self.memory[addr:addr + size])

    def fold(self, ok: bool) -> None:
        self.flag = bool(self.flag and ok)

    def staticcall(self, address: int, in_addr: int, in_size: int, out_addr: int, out_size: int) -> bool:
        data = self.read(in_addr, in_size)
        impl = self.precompiles.get(address)
        out = impl(data) if impl is not None else None
        self.calls.append(CallRecord(address, data, out))
        if out is None:
            return False
        n = min(out_size, len(out))
        self._grow(out_addr + n)
        self.memory[out_addr:out_addr + n] = out[:n]
        return True

    def run(self, fragment: Fragment) -> "Machine":
        self.flag = fragment.flag_initial
        for op in fragment.ops:
            op.execute(self)
        return self


__all__ = [
    "WORD",
    "WORD_MASK",
    "FREE_MEMORY_POINTER",
    "hexw",
    "Const",
    "Local",
    "Calldata",
    "Operand",
    "LetPointer",
    "LetLocal",
    "MStore",
    "Assign",
    "MLoad",
    "RangeCheck",
    "CalldataCopy",
    "StaticCall",
    "FoldMLoad",
    "Op",
    "Fragment",
    "CallRecord",
    "Machine",
]
