"""abi_to_sol.version: tool version stamped into generated headers.

Resolution order (first match wins):
  1) ABI_TO_SOL_VERSION env var (exact value)
  2) installed package metadata for the 'abi-to-sol' distribution
  3) BASE_VERSION + '+dev'

The value is resolved once per process so repeated generation runs stamp
byte-identical headers.
"""

from __future__ import annotations

import os
from functools import lru_cache
from importlib import metadata as importlib_metadata
from typing import Optional

BASE_VERSION = "0.8.0"

DIST_NAME = "abi-to-sol"


def _pkg_metadata_version(dist_name: str = DIST_NAME) -> Optional[str]:
    """Try to read installed package version; None if unavailable."""
    try:
        v = importlib_metadata.version(dist_name)
    except importlib_metadata.PackageNotFoundError:
        return None
    return v if v and v != "0.0.0" else None


@lru_cache(maxsize=1)
def compute_version() -> str:
    val = os.getenv("ABI_TO_SOL_VERSION")
    if val:
        return val

    meta_v = _pkg_metadata_version()
    if meta_v:
        return meta_v

    return f"{BASE_VERSION}+dev"


__version__ = compute_version()

__all__ = ["__version__", "BASE_VERSION", "compute_version"]
