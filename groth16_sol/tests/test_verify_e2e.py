"""
End-to-end: synthetic key + forged-valid proof through the same assembly the
generated contract runs.
"""

import pytest

from groth16_sol.codegen.render import build_contract
from groth16_sol.errors import ProofInvalid, PublicInputNotInField
from groth16_sol.tests import configure_test_logging, make_key, make_proof, make_trapdoor
from groth16_sol.types import PublicInput
from groth16_sol.verifiers.field import P, R
from groth16_sol.verifiers.groth16_bn254 import (format_call, prepare_uncompressed_proof,
                                                 proof_from_bytes, proof_to_bytes,
                                                 verify, verify_proof)

configure_test_logging()

INPUTS = [3, 5]


@pytest.fixture(scope="module")
def trapdoor():
    return make_trapdoor(2, seed=21)


@pytest.fixture(scope="module")
def contract(trapdoor):
    return build_contract(make_key(trapdoor))


@pytest.fixture(scope="module")
def proof(trapdoor):
    return make_proof(trapdoor, INPUTS)


def test_proof_words_layout(proof):
    words = prepare_uncompressed_proof(proof)
    assert words[0:2] == (proof.a.x.n, proof.a.y.n)
    assert words[2:6] == (proof.b.x.c1.n, proof.b.x.c0.n, proof.b.y.c1.n, proof.b.y.c0.n)
    assert words[6:8] == (proof.c.x.n, proof.c.y.n)
    assert proof_from_bytes(proof_to_bytes(proof)) == words
    with pytest.raises(ValueError):
        proof_from_bytes(b"\x00" * 255)
    with pytest.raises(ValueError):
        proof_to_bytes([0] * 7)


def test_format_call(proof):
    words = prepare_uncompressed_proof(proof)
    expected = "[" + ",".join(map(str, words)) + "],[3,5]"
    assert format_call(proof, INPUTS) == expected
    assert format_call(words, PublicInput.from_ints(INPUTS)) == expected


@pytest.mark.slow
def test_valid_proof(contract, proof):
    verify_proof(proof, INPUTS, contract)
    assert verify(proof_to_bytes(proof), INPUTS, contract) is True


@pytest.mark.slow
def test_wrong_inputs(contract, proof):
    with pytest.raises(ProofInvalid):
        verify_proof(proof, [3, 6], contract)
    # reduction is never applied: 3 + R is rejected, not aliased to 3
    with pytest.raises(PublicInputNotInField):
        verify_proof(proof, [3 + R, 5], contract)
    with pytest.raises(ValueError):
        verify_proof(proof, [3], contract)


@pytest.mark.slow
@pytest.mark.parametrize("index", [0, 3, 7])
def test_mutated_word(contract, proof, index):
    words = list(prepare_uncompressed_proof(proof))
    words[index] ^= 1
    with pytest.raises(ProofInvalid) as ei:
        verify_proof(words, INPUTS, contract)
    assert ei.value.ctx["reason"] == "pairing precompile failed"


@pytest.mark.slow
def test_non_canonical_coordinate_rejected(contract, proof):
    words = list(prepare_uncompressed_proof(proof))
    words[1] += P
    with pytest.raises(ProofInvalid) as ei:
        verify_proof(words, INPUTS, contract)
    assert ei.value.ctx["reason"] == "pairing precompile failed"


@pytest.mark.slow
def test_proof_for_other_statement(trapdoor, contract):
    other = make_proof(trapdoor, [4, 4])
    assert verify(other, [4, 4], contract) is True
    assert verify(other, INPUTS, contract) is False


@pytest.mark.slow
def test_accepts_verification_key_directly(trapdoor, proof):
    assert verify(proof, INPUTS, make_key(trapdoor)) is True
