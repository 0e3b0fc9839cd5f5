import json

import pytest

from groth16_sol.adapters.circom_loader import dump_proof, dump_verification_key
from groth16_sol.cli import main
from groth16_sol.tests import (configure_test_logging, fixture_path, make_key,
                               make_proof, make_trapdoor)
from groth16_sol.verifiers.field import R

configure_test_logging()

VK = str(fixture_path("vk_generators.json"))
PROOF = str(fixture_path("proof_generators.json"))
PUBLIC = str(fixture_path("public.json"))


def _write(tmp_path, name, obj):
    p = tmp_path / name
    p.write_text(json.dumps(obj), encoding="utf-8")
    return str(p)


def test_extract_verifier_to_stdout(capsys):
    assert main(["extract-verifier", "--vk", VK]) == 0
    out = capsys.readouterr().out
    assert out.startswith("// SPDX-License-Identifier: MIT\npragma solidity ^0.8.4;\n")
    assert "contract Verifier {" in out


def test_extract_verifier_with_config_and_overrides(tmp_path, monkeypatch):
    monkeypatch.delenv("GROTH16_SOL_CONTRACT_NAME", raising=False)
    monkeypatch.delenv("GROTH16_SOL_PRAGMA_VERSION", raising=False)
    out = tmp_path / "out" / "Verifier.sol"
    rc = main([
        "extract-verifier",
        "--verification-key", VK,
        "--config", str(fixture_path("verifier.yaml")),
        "--contract-name", "Renamed",
        "-o", str(out),
    ])
    assert rc == 0
    src = out.read_text(encoding="utf-8")
    assert "pragma solidity ^0.8.20;" in src
    assert "contract Renamed {" in src
    assert list(out.parent.iterdir()) == [out]


def test_generate_call(capsys):
    assert main(["generate-call", "--proof", PROOF, "--public", PUBLIC]) == 0
    out = capsys.readouterr().out.strip()
    assert out == (
        "[1,2,"
        "11559732032986387107991004021392285783925812861821192530917403151452391805634,"
        "10857046999023057135944570762232829481370756359578518086990519993285655852781,"
        "4082367875863433681332203403145435568316851327593401208105741076214120093531,"
        "8495653923123431417604973247489272438418190587263600148770280649306958101930,"
        "1368015179489954701390400359078579693043519447331113978918064868415326638035,"
        "9918110051302171585080402603319702774565515993150576347155970296011118125764"
        "],[3,5]"
    )


def test_malformed_key_exits_2(tmp_path, capsys):
    bad = _write(tmp_path, "vk.json", {"protocol": "groth16", "curve": "bn128", "IC": []})
    assert main(["extract-verifier", "--vk", bad]) == 2
    assert capsys.readouterr().err.startswith("error: ")


def test_bad_config_exits_2(tmp_path, capsys):
    cfg = tmp_path / "cfg.yaml"
    cfg.write_text("contract_name: 'not an identifier'\n", encoding="utf-8")
    assert main(["extract-verifier", "--vk", VK, "--config", str(cfg)]) == 2
    assert "CONFIG" in capsys.readouterr().err


@pytest.mark.slow
def test_verify_command(tmp_path, capsys):
    td = make_trapdoor(2, seed=4)
    vk = _write(tmp_path, "vk.json", dump_verification_key(make_key(td)))
    proof = _write(tmp_path, "proof.json", dump_proof(make_proof(td, [7, 9])))
    good = _write(tmp_path, "public.json", ["7", "9"])
    wrong = _write(tmp_path, "wrong.json", ["7", "8"])

    assert main(["verify", "--vk", vk, "--proof", proof, "--public", good]) == 0
    assert capsys.readouterr().out.strip() == "ok"

    assert main(["verify", "--vk", vk, "--proof", proof, "--public", wrong]) == 1
    assert "ProofInvalid" in capsys.readouterr().err

    assert main(["verify", "--vk", vk, "--proof", proof, "--public", PUBLIC + ".missing"]) == 2


def test_generate_call_keeps_unreduced_inputs(tmp_path, capsys):
    public = _write(tmp_path, "public.json", [str(R + 3), "5"])
    assert main(["generate-call", "--proof", PROOF, "--public", public]) == 0
    assert capsys.readouterr().out.strip().endswith(f"],[{R + 3},5]")


def test_verify_rejects_unreduced_input(tmp_path, capsys):
    td = make_trapdoor(2, seed=4)
    vk = _write(tmp_path, "vk.json", dump_verification_key(make_key(td)))
    proof = _write(tmp_path, "proof.json", dump_proof(make_proof(td, [7, 9])))
    # 7 + R aliases 7 in Fr; the contract still refuses it
    aliased = _write(tmp_path, "public.json", [str(7 + R), "9"])

    assert main(["verify", "--vk", vk, "--proof", proof, "--public", aliased]) == 1
    assert "PublicInputNotInField" in capsys.readouterr().err
