"""
Typed exceptions for abi_to_sol.

Every failure of the core generator surfaces as one of these; there is no
partial output. The taxonomy mirrors the three ways generation can go wrong:

- the input cannot be read as an ABI (AbiParseError)
- the version range cannot be parsed (InvalidVersionRangeError)
- the version range disagrees about syntax the ABI actually needs
  (RangeAmbiguityError)
- the version range is too old for something the ABI needs
  (VersionFloorError)

Formatter failures never show up here; they are swallowed in
abi_to_sol.formatter.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional


class ErrorCode(str, Enum):
    """Stable machine codes for generator failures."""

    UNKNOWN = "UNKNOWN"
    ABI_PARSE = "ABI_PARSE"
    INVALID_RANGE = "INVALID_RANGE"
    RANGE_AMBIGUITY = "RANGE_AMBIGUITY"
    VERSION_FLOOR = "VERSION_FLOOR"


@dataclass
class AbiToSolError(Exception):
    """
    Base structured error.

    Fields:
      code:  stable machine code (ErrorCode)
      msg:   human-readable summary
      ctx:   small dict of contextual fields (feature name, type, versions)
    """

    msg: str = "abi-to-sol error"
    ctx: Dict[str, Any] = field(default_factory=dict)
    code: ErrorCode = ErrorCode.UNKNOWN

    def __post_init__(self) -> None:
        super().__init__(self.msg)

    def __str__(self) -> str:
        return self.msg

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code.value,
            "msg": self.msg,
            "ctx": dict(self.ctx),
        }


@dataclass
class AbiParseError(AbiToSolError):
    """Raised when the input is not a readable ABI document."""

    code: ErrorCode = ErrorCode.ABI_PARSE


@dataclass
class InvalidVersionRangeError(AbiToSolError):
    """Raised when a version range expression cannot be parsed."""

    code: ErrorCode = ErrorCode.INVALID_RANGE


@dataclass
class RangeAmbiguityError(AbiToSolError):
    """
    The requested range spans versions that disagree on a feature the ABI
    needs, so no single spelling is valid for the whole range.
    """

    code: ErrorCode = ErrorCode.RANGE_AMBIGUITY

    @property
    def feature(self) -> Optional[str]:
        return self.ctx.get("feature")


@dataclass
class VersionFloorError(AbiToSolError):
    """The requested range is too old to ever support a needed feature."""

    code: ErrorCode = ErrorCode.VERSION_FLOOR

    @property
    def minimum_version(self) -> Optional[str]:
        return self.ctx.get("minimum_version")


__all__ = [
    "ErrorCode",
    "AbiToSolError",
    "AbiParseError",
    "InvalidVersionRangeError",
    "RangeAmbiguityError",
    "VersionFloorError",
]
