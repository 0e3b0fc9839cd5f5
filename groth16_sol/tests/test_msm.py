import pytest

from groth16_sol.codegen.ir import Machine
from groth16_sol.codegen.msm import assemble_msm
from groth16_sol.codegen.render import build_contract
from groth16_sol.errors import PublicInputNotInField
from groth16_sol.tests import configure_test_logging
from groth16_sol.types import PublicInput, VerificationKey
from groth16_sol.verifiers.field import R, Fr
from groth16_sol.verifiers.groth16_bn254 import public_input_msm
from groth16_sol.verifiers.pairing_bn254 import g1_add, g1_mul
from groth16_sol.verifiers.precompiles import PRECOMPILES
from groth16_sol.verifiers.points import G1_GENERATOR, G2_GENERATOR

configure_test_logging()

K, T0, T1 = (g1_mul(G1_GENERATOR, k) for k in (11, 13, 17))


def _key(ic):
    return VerificationKey(G1_GENERATOR, G2_GENERATOR, G2_GENERATOR, G2_GENERATOR, tuple(ic))


@pytest.fixture(scope="module")
def contract():
    return build_contract(_key((K, T0, T1)))


def test_msm_matches_linear_combination(contract):
    x, y = public_input_msm(contract, [3, 5])
    expected = g1_add(g1_add(K, g1_mul(T0, 3)), g1_mul(T1, 5))
    assert (x, y) == (expected.x.n, expected.y.n)
    assert expected == g1_mul(G1_GENERATOR, 11 + 3 * 13 + 5 * 17)


def test_msm_accepts_field_elements_and_public_input(contract):
    a = public_input_msm(contract, [Fr(3), Fr(5)])
    b = public_input_msm(contract, PublicInput.from_ints([3, 5]))
    assert a == b == public_input_msm(contract, [3, 5])


def test_zero_scalars_give_constant_term(contract):
    assert public_input_msm(contract, [0, 0]) == (K.x.n, K.y.n)


def test_largest_canonical_input_accepted(contract):
    x, y = public_input_msm(contract, [R - 1, 0])
    expected = g1_add(K, g1_mul(T0, R - 1))
    assert (x, y) == (expected.x.n, expected.y.n)


@pytest.mark.parametrize("inputs", [[R, 5], [3, R], [R + 3, 0], [2**256 - 1, 0], [-1, 0]])
def test_out_of_range_inputs_rejected(contract, inputs):
    with pytest.raises(PublicInputNotInField):
        public_input_msm(contract, inputs)


def test_checks_do_not_short_circuit(contract):
    m = Machine(
        constants=contract.constant_values(),
        calldata={"input": [R, 5]},
        precompiles=PRECOMPILES,
    ).run(contract.msm)
    assert m.flag is False
    # every input still performs its ecMul + ecAdd
    assert [c.address for c in m.calls] == [7, 6, 7, 6]


def test_wrong_arity(contract):
    with pytest.raises(ValueError):
        public_input_msm(contract, [1])


def test_no_public_inputs():
    c = build_contract(_key((K,)))
    assert public_input_msm(c, []) == (K.x.n, K.y.n)
    assert not any("calldataload" in line for line in c.msm.render_lines())


def test_rendered_steps_for_two_inputs():
    lines = assemble_msm(2).render_lines()
    assert lines[:5] == [
        "let f := mload(0x40)",
        "let g := add(f, 0x40)",
        "let s",
        "mstore(f, CONSTANT_X)",
        "mstore(add(f, 0x20), CONSTANT_Y)",
    ]
    step = [
        "mstore(g, PUB_1_X)",
        "mstore(add(g, 0x20), PUB_1_Y)",
        "s := calldataload(add(input, 0x20))",
        "mstore(add(g, 0x40), s)",
        "success := and(success, lt(s, R))",
        "success := and(success, staticcall(gas(), PRECOMPILE_MUL, g, 0x60, g, 0x40))",
        "success := and(success, staticcall(gas(), PRECOMPILE_ADD, f, 0x80, f, 0x40))",
    ]
    assert lines[12:19] == step
    assert "s := calldataload(input)" in lines
    assert lines[-2:] == ["x := mload(f)", "y := mload(add(f, 0x20))"]
    with pytest.raises(ValueError):
        assemble_msm(-1)
