#!/usr/bin/env python3
"""
groth16_sol.cli
===============

Command line front-end.

Usage
-----
# Solidity verifier from a circom/snarkjs verification key
python -m groth16_sol extract-verifier --vk verification_key.json -o Verifier.sol \\
    [--pragma-version "^0.8.20"] [--contract-name MyVerifier] [--config verifier.yaml]

# Arguments for verifyProof(uint256[8], uint256[N]) from proof.json + public.json
python -m groth16_sol generate-call --proof proof.json --public public.json [-o call.txt]

# Check a proof locally, exactly as the generated contract would
python -m groth16_sol verify --vk verification_key.json --proof proof.json --public public.json

Exit codes: 0 ok, 1 proof rejected (ProofInvalid / PublicInputNotInField),
2 bad input (unreadable/malformed files, invalid key or config).
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
import tempfile
from pathlib import Path
from typing import Optional

from .adapters.circom_loader import (load_proof, load_public_words,
                                     load_verification_key)
from .codegen.render import render_verifier
from .config import configure_logging, load_config
from .errors import Groth16SolError, VerificationError
from .verifiers.groth16_bn254 import format_call, verify_proof

log = logging.getLogger(__name__)


def _write_output(text: str, out: Optional[str]) -> None:
    if not out:
        sys.stdout.write(text)
        if not text.endswith("\n"):
            sys.stdout.write("\n")
        return
    path = Path(out)
    path.parent.mkdir(parents=True, exist_ok=True)
    # write-then-rename so a failed run never leaves a truncated file
    tmp_fd, tmp_path = tempfile.mkstemp(prefix=path.name, dir=str(path.parent))
    try:
        with os.fdopen(tmp_fd, "w", encoding="utf-8") as f:
            f.write(text)
        os.replace(tmp_path, path)
    except BaseException:
        if os.path.exists(tmp_path):
            os.remove(tmp_path)
        raise
    log.info("wrote %s", path)


# =============================================================================
# Commands
# =============================================================================


def cmd_extract_verifier(args: argparse.Namespace) -> int:
    cfg = load_config(args.config).with_overrides(
        pragma_version=args.pragma_version,
        contract_name=args.contract_name,
    )
    vk = load_verification_key(args.vk)
    _write_output(render_verifier(vk, cfg), args.output)
    return 0


def cmd_generate_call(args: argparse.Namespace) -> int:
    proof = load_proof(args.proof)
    public = load_public_words(args.public)
    _write_output(format_call(proof, public), args.output)
    return 0


def cmd_verify(args: argparse.Namespace) -> int:
    vk = load_verification_key(args.vk)
    proof = load_proof(args.proof)
    public = load_public_words(args.public)
    try:
        verify_proof(proof, public, vk)
    except VerificationError as e:
        print(f"invalid: {e}", file=sys.stderr)
        return 1
    print("ok")
    return 0


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="groth16-sol",
        description="Groth16 (BN254) Solidity verifier generator",
    )
    p.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = p.add_subparsers(dest="cmd", required=True)

    sp = sub.add_parser("extract-verifier", help="Render a Solidity verifier from a verification key")
    sp.add_argument("--vk", "--verification-key", dest="vk", required=True, help="verification_key.json")
    sp.add_argument("-o", "--output", help="Output .sol path (default: stdout)")
    sp.add_argument("--pragma-version", help="Solidity version constraint, e.g. ^0.8.20")
    sp.add_argument("--contract-name", help="Contract identifier (default: Verifier)")
    sp.add_argument("--config", help="JSON/YAML file with verifier settings")
    sp.set_defaults(func=cmd_extract_verifier)

    sp = sub.add_parser("generate-call", help="Format verifyProof arguments from proof + public inputs")
    sp.add_argument("--proof", required=True, help="proof.json")
    sp.add_argument("--public", required=True, help="public.json")
    sp.add_argument("-o", "--output", help="Output path (default: stdout)")
    sp.set_defaults(func=cmd_generate_call)

    sp = sub.add_parser("verify", help="Verify a proof locally with the generated contract's logic")
    sp.add_argument("--vk", "--verification-key", dest="vk", required=True, help="verification_key.json")
    sp.add_argument("--proof", required=True, help="proof.json")
    sp.add_argument("--public", required=True, help="public.json")
    sp.set_defaults(func=cmd_verify)

    return p


def main(argv: Optional[list[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    configure_logging(logging.DEBUG if args.verbose else logging.WARNING)
    try:
        return args.func(args)
    except (Groth16SolError, ValueError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
