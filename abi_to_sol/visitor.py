"""
Dispatch over the closed set of ABI node kinds.

Every pass over an ABI (feature scanning, declaration collection, emission)
subclasses Visitor. All visit_* methods are abstract, so a pass that forgets
a node kind cannot be instantiated, and the dispatch table below is checked
against that set at import time: adding a node kind without a visit method
(or the other way round) fails immediately.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Dict, Generic, Optional, TypeVar, Union

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

R = TypeVar("R")
C = TypeVar("C")

Node = Union[
    Abi,
    FunctionEntry,
    ConstructorEntry,
    FallbackEntry,
    ReceiveEntry,
    EventEntry,
    ErrorEntry,
    Parameter,
]


class Visitor(ABC, Generic[R, C]):
    @abstractmethod
    def visit_abi(self, node: Abi, context: Optional[C] = None) -> R: ...

    @abstractmethod
    def visit_function_entry(self, node: FunctionEntry, context: Optional[C] = None) -> R: ...

    @abstractmethod
    def visit_constructor_entry(self, node: ConstructorEntry, context: Optional[C] = None) -> R: ...

    @abstractmethod
    def visit_fallback_entry(self, node: FallbackEntry, context: Optional[C] = None) -> R: ...

    @abstractmethod
    def visit_receive_entry(self, node: ReceiveEntry, context: Optional[C] = None) -> R: ...

    @abstractmethod
    def visit_event_entry(self, node: EventEntry, context: Optional[C] = None) -> R: ...

    @abstractmethod
    def visit_error_entry(self, node: ErrorEntry, context: Optional[C] = None) -> R: ...

    @abstractmethod
    def visit_parameter(self, node: Parameter, context: Optional[C] = None) -> R: ...


_DISPATCH: Dict[type, str] = {
    Abi: "visit_abi",
    FunctionEntry: "visit_function_entry",
    ConstructorEntry: "visit_constructor_entry",
    FallbackEntry: "visit_fallback_entry",
    ReceiveEntry: "visit_receive_entry",
    EventEntry: "visit_event_entry",
    ErrorEntry: "visit_error_entry",
    Parameter: "visit_parameter",
}

def _check_dispatch_table(table: Dict[type, str]) -> None:
    methods = frozenset(table.values())
    if methods != Visitor.__abstractmethods__:
        raise RuntimeError(
            "dispatch table out of sync with Visitor: "
            f"missing {sorted(Visitor.__abstractmethods__ - methods)}, "
            f"unknown {sorted(methods - Visitor.__abstractmethods__)}"
        )


_check_dispatch_table(_DISPATCH)


def dispatch(node: Node, visitor: Visitor[R, C], context: Optional[C] = None) -> R:
    """Route `node` to the visitor method for its kind."""
    try:
        method = _DISPATCH[type(node)]
    except KeyError:
        raise TypeError(f"not an ABI node: {type(node).__name__}") from None
    return getattr(visitor, method)(node, context)


__all__ = ["Visitor", "Node", "dispatch"]
