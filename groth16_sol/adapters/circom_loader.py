"""
groth16_sol.adapters.circom_loader
==================================

Load and dump circom / snarkjs Groth16 JSON artifacts as typed values.

Shapes
------
Verification key (verification_key.json):
{
  "protocol": "groth16",
  "curve": "bn128",
  "nPublic": 2,
  "vk_alpha_1": ["x", "y", "1"],
  "vk_beta_2":  [["x0","x1"], ["y0","y1"], ["1","0"]],
  "vk_gamma_2": [...],
  "vk_delta_2": [...],
  "vk_alphabeta_12": [[[..],[..],[..]], [[..],[..],[..]]],   # optional
  "IC": [["x","y","1"], ...]                                   # 1 + nPublic
}

Proof (proof.json):
{ "pi_a": [...], "pi_b": [...], "pi_c": [...], "protocol": "groth16", "curve": "bn128" }

Some tools wrap it as { "proof": {...}, "publicSignals": [...] }; both are accepted.

Public inputs (public.json):  ["1", "2", ...]

All numbers are decimal strings (see decimal_codec). Points are checked
(on-curve + subgroup) unless check=False.

Exports
-------
- load_json(source) -> Any
- load_verification_key(source, check=True) -> VerificationKey
- load_proof(source, check=True) -> Proof
- load_public_input(source) -> PublicInput
- load_groth16(vk_source, proof_source, public_source=None) -> (vk, proof, public)
- dump_verification_key(vk) / dump_proof(proof) / dump_public_input(public)

License: MIT
"""

from __future__ import annotations

import json
import logging
import os
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from ..errors import CodecError, InvalidVerificationKey, MalformedPoint, ParseError
from ..types import Proof, PublicInput, VerificationKey
from . import decimal_codec as dc

log = logging.getLogger(__name__)

JsonLike = Union[str, bytes, os.PathLike, Mapping[str, Any], List[Any]]

_CURVES = ("bn128", "bn254", "altbn128", "alt_bn128")


# -----------------------------------------------------------------------------
# I/O helpers
# -----------------------------------------------------------------------------


def load_json(source: JsonLike) -> Any:
    """
    Load JSON from:
      - dict-like / list: shallow-copied
      - path-like or string path
      - bytes or string containing JSON text

    Raises ParseError on failure.
    """
    if isinstance(source, Mapping):
        return dict(source)
    if isinstance(source, list):
        return list(source)
    try:
        if isinstance(source, (bytes, bytearray, memoryview)):
            return json.loads(bytes(source).decode("utf-8"))
        s = os.fspath(source)
        if os.path.isfile(s):
            with open(s, "r", encoding="utf-8") as f:
                return json.load(f)
        return json.loads(s)
    except (ValueError, OSError) as e:
        raise ParseError(str(source), reason=f"could not load JSON: {e}", cause=e) from e


def _require(obj: Mapping[str, Any], key: str, what: str) -> Any:
    if key not in obj:
        raise MalformedPoint(f"{what} is missing '{key}'", ctx={"key": key})
    return obj[key]


def _check_metadata(obj: Mapping[str, Any], what: str) -> None:
    protocol = obj.get("protocol")
    if protocol is not None and str(protocol).lower() != "groth16":
        raise InvalidVerificationKey(
            f"{what}: unsupported protocol {protocol!r}", field_name="protocol"
        )
    curve = obj.get("curve")
    if curve is not None and str(curve).lower() not in _CURVES:
        raise InvalidVerificationKey(f"{what}: unsupported curve {curve!r}", field_name="curve")


# -----------------------------------------------------------------------------
# Verification key
# -----------------------------------------------------------------------------


def parse_verification_key(obj: Mapping[str, Any], *, check: bool = True) -> VerificationKey:
    if not isinstance(obj, Mapping):
        raise InvalidVerificationKey("verification key must be a JSON object")
    _check_metadata(obj, "verification key")

    def point(key: str, g2: bool) -> Any:
        raw = _require(obj, key, "verification key")
        try:
            if g2:
                return dc.deserialize_g2(raw, check=check)
            return dc.deserialize_g1(raw, check=check)
        except MalformedPoint as e:
            e.with_context(key=key)
            raise

    alpha = point("vk_alpha_1", False)
    beta = point("vk_beta_2", True)
    gamma = point("vk_gamma_2", True)
    delta = point("vk_delta_2", True)

    ic_raw = _require(obj, "IC", "verification key")
    try:
        ic = dc.deserialize_g1_seq(ic_raw, check=check)
    except MalformedPoint as e:
        e.with_context(key="IC")
        raise
    if not ic:
        raise InvalidVerificationKey("IC must be a non-empty list of G1 points", field_name="IC")

    n_public = obj.get("nPublic")
    if n_public is not None:
        try:
            n_public = int(n_public)
        except (TypeError, ValueError) as e:
            raise InvalidVerificationKey(
                "nPublic is not an integer", field_name="nPublic", cause=e
            ) from e
        if n_public != len(ic) - 1:
            raise InvalidVerificationKey(
                "nPublic does not match IC length",
                field_name="nPublic",
                ctx={"nPublic": n_public, "ic_len": len(ic)},
            )

    alphabeta = None
    if obj.get("vk_alphabeta_12") is not None:
        alphabeta = dc.deserialize_gt(obj["vk_alphabeta_12"])

    vk = VerificationKey(alpha, beta, gamma, delta, tuple(ic), alphabeta_g12=alphabeta)
    log.debug("loaded verification key with %d public inputs", vk.num_public_inputs)
    return vk


def load_verification_key(source: JsonLike, *, check: bool = True) -> VerificationKey:
    return parse_verification_key(load_json(source), check=check)


def dump_verification_key(vk: VerificationKey) -> Dict[str, Any]:
    out: Dict[str, Any] = {
        "protocol": "groth16",
        "curve": "bn128",
        "nPublic": vk.num_public_inputs,
        "vk_alpha_1": dc.serialize_g1(vk.alpha_g1),
        "vk_beta_2": dc.serialize_g2(vk.beta_g2),
        "vk_gamma_2": dc.serialize_g2(vk.gamma_g2),
        "vk_delta_2": dc.serialize_g2(vk.delta_g2),
    }
    if vk.alphabeta_g12 is not None:
        out["vk_alphabeta_12"] = dc.serialize_gt(vk.alphabeta_g12)
    out["IC"] = dc.serialize_g1_seq(vk.gamma_abc_g1)
    return out


# -----------------------------------------------------------------------------
# Proof / public input
# -----------------------------------------------------------------------------


def _split_bundle(obj: Mapping[str, Any]) -> Tuple[Mapping[str, Any], Optional[Any]]:
    if "proof" in obj and isinstance(obj["proof"], Mapping):
        return obj["proof"], obj.get("publicSignals")
    return obj, obj.get("publicSignals")


def parse_proof(obj: Mapping[str, Any], *, check: bool = True) -> Proof:
    if not isinstance(obj, Mapping):
        raise MalformedPoint("proof must be a JSON object")
    proof, _ = _split_bundle(obj)
    _check_metadata(proof, "proof")
    try:
        a = dc.deserialize_g1(_require(proof, "pi_a", "proof"), check=check)
        b = dc.deserialize_g2(_require(proof, "pi_b", "proof"), check=check)
        c = dc.deserialize_g1(_require(proof, "pi_c", "proof"), check=check)
    except MalformedPoint as e:
        e.with_context(artifact="proof")
        raise
    return Proof(a, b, c)


def load_proof(source: JsonLike, *, check: bool = True) -> Proof:
    return parse_proof(load_json(source), check=check)


def dump_proof(proof: Proof) -> Dict[str, Any]:
    return {
        "pi_a": dc.serialize_g1(proof.a),
        "pi_b": dc.serialize_g2(proof.b),
        "pi_c": dc.serialize_g1(proof.c),
        "protocol": "groth16",
        "curve": "bn128",
    }


def parse_public_input(obj: Any) -> PublicInput:
    return PublicInput(tuple(dc.deserialize_f_seq(obj)))


def load_public_input(source: JsonLike) -> PublicInput:
    return parse_public_input(load_json(source))


def parse_public_words(obj: Any) -> Tuple[int, ...]:
    """public.json as raw calldata words (no reduction, unlike parse_public_input)."""
    return tuple(dc.deserialize_word_seq(obj))


def load_public_words(source: JsonLike) -> Tuple[int, ...]:
    return parse_public_words(load_json(source))


def dump_public_input(public: PublicInput) -> List[str]:
    return dc.serialize_f_seq(public.values)


def load_groth16(
    vk_source: JsonLike,
    proof_source: JsonLike,
    public_source: Optional[JsonLike] = None,
    *,
    check: bool = True,
) -> Tuple[VerificationKey, Proof, PublicInput]:
    """
    Convenience loader:
      vk, proof, public = load_groth16("verification_key.json", "proof.json", "public.json")

    Without public_source the proof bundle's publicSignals are used.
    """
    vk = load_verification_key(vk_source, check=check)
    raw_proof = load_json(proof_source)
    proof = parse_proof(raw_proof, check=check)
    if public_source is not None:
        public = load_public_input(public_source)
    else:
        _, signals = _split_bundle(raw_proof)
        if signals is None:
            raise CodecError(msg="no public input given and proof has no publicSignals")
        public = parse_public_input(signals)
    return vk, proof, public


__all__ = [
    "load_json",
    "parse_verification_key",
    "load_verification_key",
    "dump_verification_key",
    "parse_proof",
    "load_proof",
    "dump_proof",
    "parse_public_input",
    "load_public_input",
    "parse_public_words",
    "load_public_words",
    "dump_public_input",
    "load_groth16",
]
