"""
abi_to_sol.cli
--------------
Command-line entrypoint for abi_to_sol.

Usage:
  abi-to-sol [NAME] < abi.json
  python -m abi_to_sol --help
"""
from __future__ import annotations

from .main import app, run

__all__ = ["app", "run"]
