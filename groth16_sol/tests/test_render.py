import re

import pytest

from groth16_sol.adapters.circom_loader import load_verification_key
from groth16_sol.codegen.render import (_SourceBuilder, build_contract,
                                        render_contract, render_verifier)
from groth16_sol.config import SolidityVerifierConfig
from groth16_sol.tests import (configure_test_logging, fixture_path, make_key,
                               make_trapdoor)
from groth16_sol.verifiers.field import P, R

configure_test_logging()


@pytest.fixture(scope="module")
def source():
    return render_verifier(load_verification_key(fixture_path("vk_generators.json")))


def test_header(source):
    lines = source.splitlines()
    assert lines[0] == "// SPDX-License-Identifier: MIT"
    assert lines[1] == "pragma solidity ^0.8.4;"
    assert "contract Verifier {" in lines
    assert source.endswith("}\n")


def test_errors_and_signatures(source):
    assert "    error PublicInputNotInField();" in source
    assert "    error ProofInvalid();" in source
    assert "function publicInputMSM(uint256[2] calldata input)\n" in source
    assert "        internal view returns (uint256 x, uint256 y) {" in source
    assert (
        "function verifyProof(uint256[8] calldata proof, uint256[2] calldata input) public view {"
        in source
    )
    assert "(uint256 x, uint256 y) = publicInputMSM(input);" in source
    assert "revert PublicInputNotInField();" in source
    assert "revert ProofInvalid();" in source


def test_constants(source):
    def const(name):
        m = re.search(rf"uint256 constant {name} = (\w+);", source)
        assert m, name
        return int(m.group(1), 0)

    assert const("PRECOMPILE_ADD") == 6
    assert "uint256 constant PRECOMPILE_VERIFY = 0x08;" in source
    assert const("P") == P
    assert const("R") == R
    assert const("ALPHA_X") == 1 and const("ALPHA_Y") == 2
    # IC = [G, 2G, G] in the fixture
    assert const("CONSTANT_X") == 1
    assert const("PUB_0_X") == 1368015179489954701390400359078579693043519447331113978918064868415326638035
    assert const("PUB_1_Y") == 2
    assert "PUB_2_X" not in source
    # beta is the G2 generator; negation only touches y
    assert const("BETA_NEG_X_0") == 10857046999023057135944570762232829481370756359578518086990519993285655852781
    assert const("BETA_NEG_Y_0") == P - 8495653923123431417604973247489272438418190587263600148770280649306958101930


def test_assembly_blocks_in_order(source):
    msm = source.index("function publicInputMSM")
    verify = source.index("function verifyProof")
    assert msm < verify
    assert source.index("bool success = true;") < verify
    assert source.index("bool success;") > verify
    assert source.count("assembly {") == 2
    assert source.count("{") == source.count("}")
    assert "memory-safe" not in source


def test_zero_public_inputs():
    src = render_verifier(make_key(make_trapdoor(0)))
    assert "function publicInputMSM()\n" in src
    assert "function verifyProof(uint256[8] calldata proof) public view {" in src
    assert "(uint256 x, uint256 y) = publicInputMSM();" in src
    assert "calldataload" not in src
    assert "PUB_0_X" not in src


def test_config_is_applied():
    cfg = SolidityVerifierConfig(
        pragma_version=">=0.8.4 <0.9.0", contract_name="MultiplierVerifier", license_identifier="Apache-2.0"
    )
    src = render_contract(build_contract(make_key(make_trapdoor(1)), cfg))
    assert src.startswith("// SPDX-License-Identifier: Apache-2.0\npragma solidity >=0.8.4 <0.9.0;\n")
    assert "contract MultiplierVerifier {" in src
    assert "uint256[1] calldata input" in src


def test_rendering_is_deterministic():
    vk = make_key(make_trapdoor(3, seed=5))
    assert render_verifier(vk) == render_verifier(vk)


def test_block_continuation_follows_depth():
    b = _SourceBuilder()
    with b.block("contract A"):
        with b.block("contract B"):
            with b.block("function f()", "internal view returns (uint256 x)"):
                b.line("x := 1")
    assert b.text().splitlines()[2:5] == [
        "        function f()",
        "            internal view returns (uint256 x) {",
        "            x := 1",
    ]
