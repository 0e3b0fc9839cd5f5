"""
groth16_sol: Groth16 (BN254) verification key -> Solidity verifier

Small facade over the package. Everything listed in `__all__` can be imported
from here; the modules behind it are loaded lazily on first use.

Layout
------
- `groth16_sol.verifiers`  field / point model, py_ecc wrapper, precompile
                           emulation, direct verification
- `groth16_sol.adapters`   decimal-string JSON codec, circom/snarkjs artifacts
- `groth16_sol.codegen`    key transform, assembly IR, MSM / pairing
                           assemblers, Solidity renderer
- `groth16_sol.cli`        `groth16-sol extract-verifier | generate-call | verify`

Usage
-----
>>> from groth16_sol import load_verification_key, render_verifier
>>> vk = load_verification_key("verification_key.json")
>>> src = render_verifier(vk)

>>> from groth16_sol import load_groth16, verify
>>> vk, proof, public = load_groth16("verification_key.json", "proof.json", "public.json")
>>> verify(proof, public, vk)
True
"""

from __future__ import annotations

from importlib import import_module
from typing import Any, Dict, Final

from .errors import (ConfigError, Groth16SolError, InvalidVerificationKey,
                     MalformedPoint, ParseError, ProofInvalid,
                     PublicInputNotInField, UndefinedCoordinates,
                     VerificationError)

__version__: Final = "0.1.0"

_LAZY: Dict[str, str] = {
    # model
    "Fr": "verifiers.field",
    "Fq": "verifiers.field",
    "Fq2": "verifiers.field",
    "G1Affine": "verifiers.points",
    "G1Infinity": "verifiers.points",
    "G2Affine": "verifiers.points",
    "G2Infinity": "verifiers.points",
    "VerificationKey": "types",
    "Proof": "types",
    "PublicInput": "types",
    # codec / artifacts
    "load_verification_key": "adapters.circom_loader",
    "load_proof": "adapters.circom_loader",
    "load_public_input": "adapters.circom_loader",
    "load_public_words": "adapters.circom_loader",
    "load_groth16": "adapters.circom_loader",
    # codegen
    "SolidityVerifierConfig": "config",
    "load_config": "config",
    "transform_verification_key": "codegen.transform",
    "build_contract": "codegen.render",
    "render_contract": "codegen.render",
    "render_verifier": "codegen.render",
    # direct verification
    "prepare_uncompressed_proof": "verifiers.groth16_bn254",
    "format_call": "verifiers.groth16_bn254",
    "public_input_msm": "verifiers.groth16_bn254",
    "verify_proof": "verifiers.groth16_bn254",
    "verify": "verifiers.groth16_bn254",
}


def __getattr__(name: str) -> Any:
    mod = _LAZY.get(name)
    if mod is None:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
    value = getattr(import_module(f".{mod}", __name__), name)
    globals()[name] = value
    return value


__all__ = [
    "__version__",
    "Groth16SolError",
    "InvalidVerificationKey",
    "UndefinedCoordinates",
    "ParseError",
    "MalformedPoint",
    "VerificationError",
    "PublicInputNotInField",
    "ProofInvalid",
    "ConfigError",
    *_LAZY,
]
