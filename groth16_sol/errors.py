"""
Typed exceptions for groth16_sol.

Design goals
- Structured: machine-readable code + human message + contextual fields.
- Composable: wrap lower-level exceptions with preserved causes.
- Stable: to_dict()/from_dict() round-trip for CLI/JSON reporting.

Hierarchy
  Groth16SolError (base)
    InvalidVerificationKey   key unusable for code generation
    UndefinedCoordinates     coordinates requested from a point at infinity
    CodecError
      ParseError             field element string is not a decimal integer
      MalformedPoint         point JSON has wrong arity / bad component / fails checks
    VerificationError
      PublicInputNotInField  a public input word is >= R (or MSM precompile failed)
      ProofInvalid           pairing precompile failed or equation does not hold
    ConfigError              verifier config could not be loaded or validated
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional


class ErrorCode(str, Enum):
    """Canonical error codes."""

    UNKNOWN = "UNKNOWN"

    # Key / model
    INVALID_VERIFICATION_KEY = "INVALID_VERIFICATION_KEY"
    UNDEFINED_COORDINATES = "UNDEFINED_COORDINATES"

    # Decimal codec
    PARSE = "PARSE"
    MALFORMED_POINT = "MALFORMED_POINT"

    # Verification (mirrors the custom errors of the generated contract)
    PUBLIC_INPUT_NOT_IN_FIELD = "PublicInputNotInField"
    PROOF_INVALID = "ProofInvalid"

    CONFIG = "CONFIG"


@dataclass
class Groth16SolError(Exception):
    """
    Base structured error.

    Fields:
      code:  stable machine code (ErrorCode | str)
      msg:   human-readable summary
      ctx:   small dict of contextual fields (indices, paths, values as str)
      cause: optional underlying exception (not serialized)
    """

    code: ErrorCode | str = ErrorCode.UNKNOWN
    msg: str = "groth16_sol error"
    ctx: Dict[str, Any] = field(default_factory=dict)
    cause: Optional[BaseException] = None

    def __post_init__(self) -> None:
        if not isinstance(self.ctx, dict):
            self.ctx = {"_ctx_type_error": str(type(self.ctx)), "repr": repr(self.ctx)}
        if self.cause is not None:
            self.__cause__ = self.cause

    def __str__(self) -> str:
        code = self.code.value if isinstance(self.code, ErrorCode) else self.code
        parts = [f"[{code}] {self.msg}"]
        if self.ctx:
            parts.append(f"ctx={self.ctx}")
        if self.cause:
            parts.append(f"cause={self.cause!r}")
        return " ".join(parts)

    # dataclass(eq=True) would make instances unhashable; exceptions must stay hashable
    __hash__ = Exception.__hash__

    def with_context(self, **extra: Any) -> "Groth16SolError":
        """Merge extra context in place and return self (handy when re-raising)."""
        self.ctx.update(extra)
        return self

    def to_dict(self) -> Dict[str, Any]:
        code = self.code.value if isinstance(self.code, ErrorCode) else str(self.code)
        return {"code": code, "msg": self.msg, "ctx": self.ctx}

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "Groth16SolError":
        code_raw = d.get("code", ErrorCode.UNKNOWN)
        try:
            code: ErrorCode | str = ErrorCode(code_raw)
        except ValueError:
            code = str(code_raw)
        return Groth16SolError(
            code=code, msg=str(d.get("msg", "groth16_sol error")), ctx=dict(d.get("ctx", {}))
        )


def _merge(base: Dict[str, Any], ctx: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    if ctx:
        base.update(ctx)
    return base


class InvalidVerificationKey(Groth16SolError):
    """Verification key cannot be turned into a verifier (empty IC, infinity points, bad metadata)."""

    def __init__(
        self,
        msg: str = "invalid verification key",
        *,
        field_name: Optional[str] = None,
        ctx: Optional[Mapping[str, Any]] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        base: Dict[str, Any] = {}
        if field_name is not None:
            base["field"] = field_name
        super().__init__(
            code=ErrorCode.INVALID_VERIFICATION_KEY, msg=msg, ctx=_merge(base, ctx), cause=cause
        )


class UndefinedCoordinates(Groth16SolError):
    """Affine coordinates were requested from a point at infinity."""

    def __init__(
        self,
        group: str,
        *,
        ctx: Optional[Mapping[str, Any]] = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.UNDEFINED_COORDINATES,
            msg=f"{group} point at infinity has no affine coordinates",
            ctx=_merge({"group": group}, ctx),
        )


class CodecError(Groth16SolError):
    """Base for decimal-codec failures."""


class ParseError(CodecError):
    """A field element string is not a non-empty run of ASCII decimal digits."""

    def __init__(
        self,
        value: Any,
        *,
        reason: str = "expected a decimal string",
        ctx: Optional[Mapping[str, Any]] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        shown = value if isinstance(value, str) else type(value).__name__
        if isinstance(shown, str) and len(shown) > 96:
            shown = shown[:93] + "..."
        super().__init__(
            code=ErrorCode.PARSE,
            msg=reason,
            ctx=_merge({"value": shown}, ctx),
            cause=cause,
        )


class MalformedPoint(CodecError):
    """Point JSON has the wrong shape, an unparsable component, or fails curve/subgroup checks."""

    def __init__(
        self,
        msg: str = "malformed point",
        *,
        group: Optional[str] = None,
        ctx: Optional[Mapping[str, Any]] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        base: Dict[str, Any] = {}
        if group is not None:
            base["group"] = group
        super().__init__(
            code=ErrorCode.MALFORMED_POINT, msg=msg, ctx=_merge(base, ctx), cause=cause
        )


class VerificationError(Groth16SolError):
    """Base for the two verifier reverts."""


class PublicInputNotInField(VerificationError):
    """A public input is not a canonical scalar (>= R) or a MSM precompile call failed."""

    def __init__(
        self,
        msg: str = "public input not in field",
        *,
        ctx: Optional[Mapping[str, Any]] = None,
    ) -> None:
        super().__init__(code=ErrorCode.PUBLIC_INPUT_NOT_IN_FIELD, msg=msg, ctx=dict(ctx or {}))


class ProofInvalid(VerificationError):
    """The pairing precompile failed or the pairing equation does not hold."""

    def __init__(
        self,
        msg: str = "proof invalid",
        *,
        ctx: Optional[Mapping[str, Any]] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        super().__init__(code=ErrorCode.PROOF_INVALID, msg=msg, ctx=dict(ctx or {}), cause=cause)


class ConfigError(Groth16SolError):
    """Verifier configuration is unreadable or invalid."""

    def __init__(
        self,
        msg: str = "invalid configuration",
        *,
        key: Optional[str] = None,
        ctx: Optional[Mapping[str, Any]] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        base: Dict[str, Any] = {}
        if key is not None:
            base["key"] = key
        super().__init__(code=ErrorCode.CONFIG, msg=msg, ctx=_merge(base, ctx), cause=cause)


__all__ = [
    "ErrorCode",
    "Groth16SolError",
    "InvalidVerificationKey",
    "UndefinedCoordinates",
    "CodecError",
    "ParseError",
    "MalformedPoint",
    "VerificationError",
    "PublicInputNotInField",
    "ProofInvalid",
    "ConfigError",
]
