"""
Typed ABI nodes consumed by the generator.

These dataclasses model a contract ABI as a closed set of entry variants:

  - FunctionEntry
  - ConstructorEntry
  - FallbackEntry
  - ReceiveEntry
  - EventEntry
  - ErrorEntry

Parameters (and tuple components, which are just nested parameters) carry
the raw ABI type string verbatim; nothing here validates that a type string
is a real Solidity type. Instances are produced by
abi_to_sol.abi.normalize.parse_abi and are immutable.

Serialization helpers (`to_dict`) give back the canonical JSON ABI shape.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

__all__ = [
    "Parameter",
    "FunctionEntry",
    "ConstructorEntry",
    "FallbackEntry",
    "ReceiveEntry",
    "EventEntry",
    "ErrorEntry",
    "Entry",
    "Abi",
    "is_tuple",
    "needs_location",
    "type_signature",
    "tuple_signature",
]


# ──────────────────────────────────────────────────────────────────────────────
# Parameters
# ──────────────────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class Parameter:
    """
    Named parameter of a function/event/error, or a component of a tuple.

    `indexed` is only meaningful for event inputs; it is None elsewhere.
    """

    name: str
    type: str
    internal_type: Optional[str] = None
    components: Tuple["Parameter", ...] = ()
    indexed: Optional[bool] = None

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"name": self.name, "type": self.type}
        if self.internal_type is not None:
            out["internalType"] = self.internal_type
        if self.components:
            out["components"] = [c.to_dict() for c in self.components]
        if self.indexed is not None:
            out["indexed"] = self.indexed
        return out


def is_tuple(parameter: Parameter) -> bool:
    return parameter.type.startswith("tuple")


def needs_location(parameter: Parameter) -> bool:
    """True for reference types that take a data location in a signature."""
    t = parameter.type
    return t.startswith("tuple") or "[" in t or t == "bytes" or t == "string"


def tuple_signature(components: Sequence[Parameter]) -> str:
    """Canonical shape of a tuple: "(" + component signatures + ")"."""
    return "(" + ",".join(type_signature(c) for c in components) + ")"


def type_signature(parameter: Parameter) -> str:
    """
    Canonical type of a single parameter. Tuple types have the leading
    "tuple" replaced by their component shape, keeping array suffixes:
    tuple[2][] -> (uint256,bool)[2][]
    """
    if not is_tuple(parameter):
        return parameter.type
    return tuple_signature(parameter.components) + parameter.type[len("tuple"):]


def _params(params: Sequence[Parameter]) -> List[Dict[str, Any]]:
    return [p.to_dict() for p in params]


# ──────────────────────────────────────────────────────────────────────────────
# Entries
# ──────────────────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class FunctionEntry:
    name: str
    inputs: Tuple[Parameter, ...] = ()
    outputs: Tuple[Parameter, ...] = ()
    state_mutability: str = "nonpayable"  # "pure" | "view" | "nonpayable" | "payable"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": "function",
            "name": self.name,
            "inputs": _params(self.inputs),
            "outputs": _params(self.outputs),
            "stateMutability": self.state_mutability,
        }


@dataclass(frozen=True)
class ConstructorEntry:
    inputs: Tuple[Parameter, ...] = ()
    state_mutability: str = "nonpayable"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": "constructor",
            "inputs": _params(self.inputs),
            "stateMutability": self.state_mutability,
        }


@dataclass(frozen=True)
class FallbackEntry:
    state_mutability: str = "nonpayable"

    def to_dict(self) -> Dict[str, Any]:
        return {"type": "fallback", "stateMutability": self.state_mutability}


@dataclass(frozen=True)
class ReceiveEntry:
    state_mutability: str = "payable"

    def to_dict(self) -> Dict[str, Any]:
        return {"type": "receive", "stateMutability": self.state_mutability}


@dataclass(frozen=True)
class EventEntry:
    name: str
    inputs: Tuple[Parameter, ...] = ()
    anonymous: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": "event",
            "name": self.name,
            "inputs": _params(self.inputs),
            "anonymous": self.anonymous,
        }


@dataclass(frozen=True)
class ErrorEntry:
    name: str
    inputs: Tuple[Parameter, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {"type": "error", "name": self.name, "inputs": _params(self.inputs)}


Entry = Union[
    FunctionEntry,
    ConstructorEntry,
    FallbackEntry,
    ReceiveEntry,
    EventEntry,
    ErrorEntry,
]


@dataclass(frozen=True)
class Abi:
    """
    Ordered ABI entries plus the JSON document they came from.

    `source` is echoed verbatim into the generated provenance notice; when
    an Abi is built by hand it defaults to the canonical `to_list()` form.
    """

    entries: Tuple[Entry, ...] = ()
    source: Any = field(default=None, compare=False)

    def __iter__(self):
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def to_list(self) -> List[Dict[str, Any]]:
        return [e.to_dict() for e in self.entries]

    def source_document(self) -> Any:
        return self.source if self.source is not None else self.to_list()
