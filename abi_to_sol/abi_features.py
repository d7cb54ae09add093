"""
Global facts about an ABI that steer emission.

  defines-fallback      some entry is a fallback
  defines-receive       some entry is a receive
  needs-abiencoder-v2   some parameter is a tuple, an array of string/bytes,
                        or a nested array
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from functools import reduce
from typing import Dict, Iterable, Optional

from .abi.types import (
    Abi,
    ConstructorEntry,
    ErrorEntry,
    EventEntry,
    FallbackEntry,
    FunctionEntry,
    Parameter,
    ReceiveEntry,
)
from .visitor import Visitor, dispatch

__all__ = ["AbiFeatures", "AbiFeaturesCollector", "collect_abi_features"]


@dataclass(frozen=True)
class AbiFeatures:
    defines_fallback: bool = False
    defines_receive: bool = False
    needs_abiencoder_v2: bool = False

    def __or__(self, other: "AbiFeatures") -> "AbiFeatures":
        return AbiFeatures(
            **{f.name: getattr(self, f.name) or getattr(other, f.name) for f in fields(self)}
        )

    def __getitem__(self, fact: str) -> bool:
        return bool(getattr(self, fact.replace("-", "_")))

    def as_dict(self) -> Dict[str, bool]:
        return {f.name.replace("_", "-"): getattr(self, f.name) for f in fields(self)}


def _union(items: Iterable[AbiFeatures]) -> AbiFeatures:
    return reduce(lambda a, b: a | b, items, AbiFeatures())


class AbiFeaturesCollector(Visitor[AbiFeatures, None]):
    def _params(self, params: Iterable[Parameter]) -> AbiFeatures:
        return _union(dispatch(p, self) for p in params)

    def visit_abi(self, node: Abi, context: Optional[None] = None) -> AbiFeatures:
        return _union(dispatch(entry, self) for entry in node)

    def visit_function_entry(self, node: FunctionEntry, context: Optional[None] = None) -> AbiFeatures:
        return self._params(node.inputs) | self._params(node.outputs)

    def visit_constructor_entry(self, node: ConstructorEntry, context: Optional[None] = None) -> AbiFeatures:
        return self._params(node.inputs)

    def visit_fallback_entry(self, node: FallbackEntry, context: Optional[None] = None) -> AbiFeatures:
        return AbiFeatures(defines_fallback=True)

    def visit_receive_entry(self, node: ReceiveEntry, context: Optional[None] = None) -> AbiFeatures:
        return AbiFeatures(defines_receive=True)

    def visit_event_entry(self, node: EventEntry, context: Optional[None] = None) -> AbiFeatures:
        return self._params(node.inputs)

    def visit_error_entry(self, node: ErrorEntry, context: Optional[None] = None) -> AbiFeatures:
        return self._params(node.inputs)

    def visit_parameter(self, node: Parameter, context: Optional[None] = None) -> AbiFeatures:
        t = node.type
        if t.startswith("tuple") or "string[" in t or "bytes[" in t or "][" in t:
            return AbiFeatures(needs_abiencoder_v2=True)
        return AbiFeatures()


def collect_abi_features(abi: Abi) -> AbiFeatures:
    return dispatch(abi, AbiFeaturesCollector())
