"""
Verifier-generation settings and logging setup.

`SolidityVerifierConfig` controls the parts of the generated contract that
are not derived from the verification key. It can be built directly, loaded
from a JSON or YAML file, and overridden from the environment:

    GROTH16_SOL_PRAGMA_VERSION   e.g. "^0.8.20"
    GROTH16_SOL_CONTRACT_NAME    e.g. "MultiplierVerifier"
    GROTH16_SOL_LICENSE          SPDX identifier, e.g. "Apache-2.0"

File example (YAML):

    pragma_version: "^0.8.20"
    contract_name: MultiplierVerifier
"""

from __future__ import annotations

import json
import logging
import os
import re
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Mapping, Optional, Union

import yaml

from .errors import ConfigError

ENV_PREFIX = "GROTH16_SOL_"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

# Custom errors (`error ProofInvalid();`) need solc >= 0.8.4.
DEFAULT_PRAGMA_VERSION = "^0.8.4"

_IDENT_RE = re.compile(r"[A-Za-z_$][A-Za-z0-9_$]*")
_PRAGMA_RE = re.compile(r"[0-9A-Za-z.^~<>=*|\- ]+")
_SPDX_RE = re.compile(r"[A-Za-z0-9.+\-() ]+")


@dataclass(frozen=True)
class SolidityVerifierConfig:
    """
    Fields:
      pragma_version:      version constraint after `pragma solidity`
      contract_name:       Solidity identifier of the generated contract
      license_identifier:  SPDX identifier for the header comment
    """

    pragma_version: str = DEFAULT_PRAGMA_VERSION
    contract_name: str = "Verifier"
    license_identifier: str = "MIT"

    def __post_init__(self) -> None:
        if not isinstance(self.pragma_version, str) or not _PRAGMA_RE.fullmatch(self.pragma_version.strip()):
            raise ConfigError("invalid pragma version", key="pragma_version", ctx={"value": repr(self.pragma_version)})
        if not isinstance(self.contract_name, str) or not _IDENT_RE.fullmatch(self.contract_name):
            raise ConfigError("contract name must be a Solidity identifier", key="contract_name",
                              ctx={"value": repr(self.contract_name)})
        if not isinstance(self.license_identifier, str) or not _SPDX_RE.fullmatch(self.license_identifier):
            raise ConfigError("invalid SPDX license identifier", key="license_identifier",
                              ctx={"value": repr(self.license_identifier)})
        object.__setattr__(self, "pragma_version", self.pragma_version.strip())

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "SolidityVerifierConfig":
        if not isinstance(data, Mapping):
            raise ConfigError("configuration must be a mapping", ctx={"got": type(data).__name__})
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigError("unknown configuration keys", ctx={"keys": unknown})
        return cls(**{k: str(v) for k, v in data.items()})

    def with_overrides(self, **changes: Optional[str]) -> "SolidityVerifierConfig":
        """Return a copy with the non-None `changes` applied."""
        return replace(self, **{k: v for k, v in changes.items() if v is not None})


DEFAULT_CONFIG = SolidityVerifierConfig()


def env_overrides(env: Optional[Mapping[str, str]] = None) -> dict:
    env = os.environ if env is None else env
    out = {}
    for key, name in (
        ("pragma_version", "PRAGMA_VERSION"),
        ("contract_name", "CONTRACT_NAME"),
        ("license_identifier", "LICENSE"),
    ):
        v = env.get(ENV_PREFIX + name)
        if v:
            out[key] = v
    return out


def load_config(
    path: Optional[Union[str, Path]] = None,
    *,
    env: Optional[Mapping[str, str]] = None,
    fallback: SolidityVerifierConfig = DEFAULT_CONFIG,
) -> SolidityVerifierConfig:
    """
    Load a config from a JSON or YAML file, then apply environment overrides.
    If `path` is None the `fallback` is the starting point.
    """
    cfg = fallback
    if path is not None:
        p = Path(path)
        try:
            text = p.read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigError(f"cannot read {p}", cause=e) from e
        try:
            if text.lstrip().startswith("{"):
                data = json.loads(text)
            else:
                data = yaml.safe_load(text) or {}
        except (ValueError, yaml.YAMLError) as e:
            raise ConfigError(f"cannot parse {p}", cause=e) from e
        cfg = SolidityVerifierConfig.from_mapping(data)
    return cfg.with_overrides(**env_overrides(env))


def env_flag(name: str, default: bool = False) -> bool:
    """
    Read an environment flag in a truthy/falsey way: "1", "true", "yes" -> True.
    """
    v = os.getenv(name)
    if v is None:
        return default
    return str(v).strip().lower() in {"1", "true", "yes", "on"}


def configure_logging(level: int = logging.INFO) -> None:
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger("groth16_sol").setLevel(level)


__all__ = [
    "ENV_PREFIX",
    "DEFAULT_PRAGMA_VERSION",
    "SolidityVerifierConfig",
    "DEFAULT_CONFIG",
    "env_overrides",
    "load_config",
    "env_flag",
    "configure_logging",
]
