"""
groth16_sol.verifiers.groth16_bn254
===================================

Direct Groth16 verification over BN254, executing the exact assembly the
generated contract runs (see `codegen/ir.py`) against emulated precompiles.

Verification equation
---------------------
    e(A, B) * e(C, -delta) * e(alpha, -beta) * e(L_pub, -gamma) == 1
    L_pub = IC[0] + sum_i input[i] * IC[i + 1]

Public API
----------
- prepare_uncompressed_proof(proof) -> 8 words (A.x, A.y, B.x1, B.x0, B.y1, B.y0, C.x, C.y)
- proof_to_bytes(proof_or_words) -> 256 bytes, proof_from_bytes(b) -> 8 words
- format_call(proof, inputs) -> "[p0,...,p7],[i0,...]"
- public_input_msm(vk, inputs) -> (x, y)           raises PublicInputNotInField
- verify_proof(proof, inputs, vk) -> None          raises ProofInvalid / PublicInputNotInField
- verify(proof, inputs, vk) -> bool

`vk` may be a VerificationKey or an already-built ContractIR. Inputs are
uint256 words (ints, or Fr / PublicInput); a word >= R is never reduced.
"""

from __future__ import annotations

import logging
from typing import Iterable, List, Sequence, Tuple, Union

from ..codegen.ir import WORD, Machine
from ..codegen.msm import INPUT_ARRAY
from ..codegen.pairing import PROOF_ARRAY, PROOF_WORDS
from ..codegen.render import ContractIR, build_contract
from ..codegen.transform import g2_words
from ..errors import ProofInvalid, PublicInputNotInField, VerificationError
from ..types import Proof, PublicInput, VerificationKey
from .field import PrimeFieldElement
from .precompiles import PRECOMPILES

log = logging.getLogger(__name__)

ProofLike = Union[Proof, bytes, bytearray, Sequence[int]]
InputLike = Union[PublicInput, Iterable[Union[int, PrimeFieldElement]]]
KeyLike = Union[VerificationKey, ContractIR]

_WORD_LIMIT = 1 << 256


# -----------------------------------------------------------------------------
# Proof words
# -----------------------------------------------------------------------------


def prepare_uncompressed_proof(proof: Proof) -> Tuple[int, ...]:
    """Eight calldata words of a proof; points at infinity become zero words."""
    words: List[int] = []
    words += [0, 0] if proof.a.is_infinity else [proof.a.x.n, proof.a.y.n]
    words += [0, 0, 0, 0] if proof.b.is_infinity else list(g2_words(proof.b))
    words += [0, 0] if proof.c.is_infinity else [proof.c.x.n, proof.c.y.n]
    return tuple(words)


def _proof_words(proof: ProofLike) -> Tuple[int, ...]:
    if isinstance(proof, Proof):
        return prepare_uncompressed_proof(proof)
    if isinstance(proof, (bytes, bytearray)):
        return proof_from_bytes(bytes(proof))
    words = tuple(int(w) for w in proof)
    if len(words) != PROOF_WORDS:
        raise ValueError(f"proof must have {PROOF_WORDS} words, got {len(words)}")
    for w in words:
        if not 0 <= w < _WORD_LIMIT:
            raise ValueError("proof word does not fit in uint256")
    return words


def proof_from_bytes(b: bytes) -> Tuple[int, ...]:
    if len(b) != PROOF_WORDS * WORD:
        raise ValueError(f"proof must be {PROOF_WORDS * WORD} bytes, got {len(b)}")
    return tuple(int.from_bytes(b[i:i + WORD], "big") for i in range(0, len(b), WORD))


def proof_to_bytes(proof: ProofLike) -> bytes:
    return b"".join(w.to_bytes(WORD, "big") for w in _proof_words(proof))


def _input_words(inputs: InputLike) -> Tuple[int, ...]:
    if isinstance(inputs, PublicInput):
        return inputs.words()
    return tuple(int(x) for x in inputs)


def format_call(proof: ProofLike, inputs: InputLike) -> str:
    """Arguments of verifyProof in the `[..],[..]` form cast/remix accept."""
    pw = ",".join(str(w) for w in _proof_words(proof))
    iw = ",".join(str(w) for w in _input_words(inputs))
    return f"[{pw}],[{iw}]"


# -----------------------------------------------------------------------------
# Execution
# -----------------------------------------------------------------------------


def _contract(vk: KeyLike) -> ContractIR:
    return vk if isinstance(vk, ContractIR) else build_contract(vk)


def _check_arity(ir: ContractIR, words: Sequence[int]) -> None:
    if len(words) != ir.num_public_inputs:
        raise ValueError(
            f"expected {ir.num_public_inputs} public inputs, got {len(words)}"
        )


def _msm(ir: ContractIR, words: Sequence[int]) -> Tuple[int, int]:
    m = Machine(
        constants=ir.constant_values(),
        calldata={INPUT_ARRAY: list(words)},
        precompiles=PRECOMPILES,
    ).run(ir.msm)
    if not m.flag:
        raise PublicInputNotInField(ctx={"inputs": len(words)})
    return m.locals["x"], m.locals["y"]


def public_input_msm(vk: KeyLike, inputs: InputLike) -> Tuple[int, int]:
    ir = _contract(vk)
    words = _input_words(inputs)
    _check_arity(ir, words)
    return _msm(ir, words)


def verify_proof(proof: ProofLike, inputs: InputLike, vk: KeyLike) -> None:
    """Return normally iff the proof is valid; otherwise raise like the contract reverts."""
    ir = _contract(vk)
    words = _input_words(inputs)
    _check_arity(ir, words)
    pw = _proof_words(proof)
    x, y = _msm(ir, words)
    m = Machine(
        constants=ir.constant_values(),
        calldata={PROOF_ARRAY: list(pw)},
        precompiles=PRECOMPILES,
        locals={"x": x, "y": y},
    ).run(ir.pairing)
    if not m.flag:
        call = m.calls[-1] if m.calls else None
        reason = "pairing precompile failed" if call is None or call.output is None else "pairing check failed"
        log.debug("proof rejected: %s", reason)
        raise ProofInvalid(ctx={"reason": reason})
    log.debug("proof accepted (%d public inputs)", len(words))


def verify(proof: ProofLike, inputs: InputLike, vk: KeyLike) -> bool:
    try:
        verify_proof(proof, inputs, vk)
    except VerificationError as e:
        log.info("verification failed: %s", e)
        return False
    return True


__all__ = [
    "prepare_uncompressed_proof",
    "proof_from_bytes",
    "proof_to_bytes",
    "format_call",
    "public_input_msm",
    "verify_proof",
    "verify",
]
