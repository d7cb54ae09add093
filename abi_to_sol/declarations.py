"""
Struct declarations needed by an ABI.

Every tuple-typed parameter (at any nesting depth) becomes one struct
declaration, keyed by its structural signature so that identically-shaped
tuples share a single declaration regardless of field names. Names and
containers come from the `internalType` hint ("struct Container.Name[]");
tuples without a hint get a hash-derived name in the global container ("").

Collection is a pure fold: each visit returns a fresh Declarations value and
merging keeps the first-seen declaration for a signature. Inner tuples are
visited before the tuple that contains them, so declaration order is
dependency order.
"""

from __future__ import annotations

import hashlib
import logging
import re
from dataclasses import dataclass, field
from functools import reduce
from typing import Dict, Iterable, List, Optional, Tuple

from .abi.types import (
    Abi,
    ConstructorEntry,
    ErrorEntry,
    EventEntry,
    FallbackEntry,
    FunctionEntry,
    Parameter,
    ReceiveEntry,
    is_tuple,
    tuple_signature,
)
from .visitor import Visitor, dispatch

log = logging.getLogger(__name__)

__all__ = [
    "GLOBAL_CONTAINER",
    "Identifier",
    "Component",
    "Declaration",
    "Declarations",
    "DeclarationsCollector",
    "collect_declarations",
    "signature_of",
]

GLOBAL_CONTAINER = ""

_STRUCT_RE = re.compile(r"^struct\s+([^\[\s]+)")


@dataclass(frozen=True)
class Identifier:
    name: str
    container: str = GLOBAL_CONTAINER


@dataclass(frozen=True)
class Component:
    """One struct field. `signature` is set when the field is itself a tuple."""

    name: str
    type: str
    signature: Optional[str] = None


@dataclass(frozen=True)
class Declaration:
    identifier: Identifier
    components: Tuple[Component, ...] = ()


@dataclass(frozen=True)
class Declarations:
    """
    signature_declarations: signature -> canonical declaration (first seen)
    container_signatures:   container -> signatures declared inside it

    Both are insertion ordered. Every signature lives in exactly one container.
    """

    signature_declarations: Dict[str, Declaration] = field(default_factory=dict)
    container_signatures: Dict[str, Tuple[str, ...]] = field(default_factory=dict)

    @classmethod
    def of(cls, signature_declarations: Dict[str, Declaration]) -> "Declarations":
        containers: Dict[str, List[str]] = {}
        for signature, declaration in signature_declarations.items():
            containers.setdefault(declaration.identifier.container, []).append(signature)
        return cls(
            signature_declarations=dict(signature_declarations),
            container_signatures={c: tuple(s) for c, s in containers.items()},
        )

    def merge(self, other: "Declarations") -> "Declarations":
        merged = dict(self.signature_declarations)
        for signature, declaration in other.signature_declarations.items():
            # TODO: first-seen container wins when two entries hint different
            # containers for one shape; revisit if a placement rule is agreed.
            merged.setdefault(signature, declaration)
        return Declarations.of(merged)

    def __bool__(self) -> bool:
        return bool(self.signature_declarations)

    def __len__(self) -> int:
        return len(self.signature_declarations)

    def lookup(self, signature: str) -> Optional[Declaration]:
        return self.signature_declarations.get(signature)

    def for_container(self, container: str) -> List[Declaration]:
        return [self.signature_declarations[s] for s in self.container_signatures.get(container, ())]


def signature_of(variable: "Parameter | Component") -> Optional[str]:
    """Tuple signature of a parameter or struct field, None for non-tuples."""
    if isinstance(variable, Component):
        return variable.signature
    if is_tuple(variable):
        return tuple_signature(variable.components)
    return None


def _identifier(internal_type: Optional[str], signature: str) -> Identifier:
    match = _STRUCT_RE.match(internal_type or "")
    if match:
        parts = match.group(1).split(".")
        if len(parts) == 1:
            return Identifier(name=parts[0])
        if len(parts) == 2:
            return Identifier(name=parts[1], container=parts[0])
    digest = hashlib.sha3_256(signature.encode("utf-8")).hexdigest()
    return Identifier(name=f"S_{digest[:8]}")


def _union(items: Iterable[Declarations]) -> Declarations:
    return reduce(lambda a, b: a.merge(b), items, Declarations())


class DeclarationsCollector(Visitor[Declarations, None]):
    def _params(self, params: Iterable[Parameter]) -> Declarations:
        return _union(dispatch(p, self) for p in params)

    def visit_abi(self, node: Abi, context: Optional[None] = None) -> Declarations:
        return _union(dispatch(entry, self) for entry in node)

    def visit_function_entry(self, node: FunctionEntry, context: Optional[None] = None) -> Declarations:
        return self._params(node.inputs).merge(self._params(node.outputs))

    def visit_constructor_entry(self, node: ConstructorEntry, context: Optional[None] = None) -> Declarations:
        return self._params(node.inputs)

    def visit_fallback_entry(self, node: FallbackEntry, context: Optional[None] = None) -> Declarations:
        return Declarations()

    def visit_receive_entry(self, node: ReceiveEntry, context: Optional[None] = None) -> Declarations:
        return Declarations()

    def visit_event_entry(self, node: EventEntry, context: Optional[None] = None) -> Declarations:
        return self._params(node.inputs)

    def visit_error_entry(self, node: ErrorEntry, context: Optional[None] = None) -> Declarations:
        return self._params(node.inputs)

    def visit_parameter(self, node: Parameter, context: Optional[None] = None) -> Declarations:
        if not is_tuple(node):
            return Declarations()

        inner = self._params(node.components)

        signature = tuple_signature(node.components)
        declaration = Declaration(
            identifier=_identifier(node.internal_type, signature),
            components=tuple(
                Component(name=c.name, type=c.type, signature=signature_of(c))
                for c in node.components
            ),
        )
        return inner.merge(Declarations.of({signature: declaration}))


def collect_declarations(abi: Abi) -> Declarations:
    declarations = dispatch(abi, DeclarationsCollector())
    log.debug(
        "collected %d struct declarations across containers %s",
        len(declarations),
        list(declarations.container_signatures),
    )
    return declarations
