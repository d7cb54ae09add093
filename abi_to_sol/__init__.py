"""
abi_to_sol: generate Solidity interfaces from contract ABIs.

The generated interface is valid for a whole *range* of compiler versions:
version-dependent syntax (fallback/receive keywords, calldata vs memory,
struct placement, custom errors) is chosen so that it compiles everywhere
in the range, or generation fails with a precise error.

- generate_solidity(abi, *, name=None, solidity_version=None, license=None,
                    prettify_output=None, formatter=None) -> str
- parse_abi(raw) -> Abi
- __version__

Example:

    from abi_to_sol import generate_solidity
    print(generate_solidity(abi_json, name="IToken", solidity_version="^0.8.4"))
"""

from __future__ import annotations

from .abi import Abi, parse_abi
from .errors import (
    AbiParseError,
    AbiToSolError,
    InvalidVersionRangeError,
    RangeAmbiguityError,
    VersionFloorError,
)
from .solidity import generate_solidity
from .version import __version__


def version() -> str:
    """Return the abi_to_sol version string."""
    return __version__


__all__ = [
    "__version__",
    "version",
    "Abi",
    "parse_abi",
    "generate_solidity",
    "AbiToSolError",
    "AbiParseError",
    "InvalidVersionRangeError",
    "RangeAmbiguityError",
    "VersionFloorError",
]
