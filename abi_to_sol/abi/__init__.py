"""
abi_to_sol.abi
==============

Typed ABI surface for the generator.

This package provides:
  • Immutable node types for ABI entries and (tuple-nested) parameters.
  • Canonical tuple-shape signatures used for struct deduplication.
  • parse_abi(): raw JSON ABI → typed nodes, with JSON Schema validation.
"""

from __future__ import annotations

from .normalize import *  # noqa: F401,F403
from .types import *  # noqa: F401,F403

from .normalize import __all__ as _all_normalize
from .types import __all__ as _all_types

__all__ = tuple(dict.fromkeys((*_all_types, *_all_normalize)))
