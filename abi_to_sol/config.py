"""
abi_to_sol.config: default generation options.

Configuration precedence:
  1) Explicit arguments to generate_solidity() / CLI flags
  2) Environment variables (ABI_TO_SOL_*)
  3) Hardcoded defaults below

Key env vars (case-insensitive where boolean):
  - ABI_TO_SOL_NAME               (str)   default: MyInterface
  - ABI_TO_SOL_SOLIDITY_VERSION   (str)   default: ">=0.7.0 <0.9.0"
  - ABI_TO_SOL_LICENSE            (str)   default: UNLICENSED
  - ABI_TO_SOL_PRETTIFY           (bool)  default: true
  - ABI_TO_SOL_PRETTIER           (path)  default: first `prettier` on PATH

Usage:
    from abi_to_sol.config import load_config
    CFG = load_config()
    CFG.solidity_version
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Dict, Optional
import os

DEFAULT_NAME = "MyInterface"
DEFAULT_SOLIDITY_VERSION = ">=0.7.0 <0.9.0"
DEFAULT_LICENSE = "UNLICENSED"
DEFAULT_PRETTIFY = True


# ----------------------------- helpers ---------------------------------------


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    val = raw.strip().lower()
    return val in ("1", "true", "t", "yes", "y", "on")


def _env_str(name: str, default: str) -> str:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip()


def _env_opt(name: str) -> Optional[str]:
    raw = os.getenv(name)
    if not raw or not raw.strip():
        return None
    return raw.strip()


# ------------------------------- config --------------------------------------


@dataclass(frozen=True)
class GeneratorConfig:
    name: str
    solidity_version: str
    license: str
    prettify_output: bool

    # Explicit prettier executable; None means "look it up on PATH".
    prettier_path: Optional[str]

    def as_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "solidity_version": self.solidity_version,
            "license": self.license,
            "prettify_output": self.prettify_output,
            "prettier_path": self.prettier_path,
        }


@lru_cache(maxsize=1)
def load_config() -> GeneratorConfig:
    """
    Build and cache a GeneratorConfig from environment + defaults.
    Call load_config.cache_clear() after changing the environment.
    """
    return GeneratorConfig(
        name=_env_str("ABI_TO_SOL_NAME", DEFAULT_NAME),
        solidity_version=_env_str("ABI_TO_SOL_SOLIDITY_VERSION", DEFAULT_SOLIDITY_VERSION),
        license=_env_str("ABI_TO_SOL_LICENSE", DEFAULT_LICENSE),
        prettify_output=_env_bool("ABI_TO_SOL_PRETTIFY", DEFAULT_PRETTIFY),
        prettier_path=_env_opt("ABI_TO_SOL_PRETTIER"),
    )


__all__ = [
    "GeneratorConfig",
    "load_config",
    "DEFAULT_NAME",
    "DEFAULT_SOLIDITY_VERSION",
    "DEFAULT_LICENSE",
    "DEFAULT_PRETTIFY",
]
