"""
abi_to_sol.solidity
===================

Emit a Solidity interface for an ABI that compiles under every compiler
version in a requested range.

Pipeline (all steps pure; nothing is shared between calls):

    abi ──► parse_abi ──► collect_abi_features ─┐
                     └──► collect_declarations ─┼──► SolidityGenerator ──► formatter
    range ──► for_range ────────────────────────┘

The generator walks the ABI once. Where a syntax choice depends on the
compiler version (fallback keyword, data location of reference-type inputs,
custom errors, struct placement) it consults the resolved VersionFeatures
and raises instead of guessing when the range cannot agree.

Output layout:

    // SPDX-License-Identifier: <license>
    // !! THIS FILE WAS AUTOGENERATED BY abi-to-sol v<version>. SEE SOURCE BELOW. !!
    pragma solidity <range>;
    [pragma experimental ABIEncoderV2;]

    interface <Name> { <own structs> <members> }

    <global structs | interface __Structs { ... }>
    <interface <Container> { ... }> ...

    // THIS FILE WAS AUTOGENERATED FROM THE FOLLOWING ABI JSON:
    /*
    <abi json>
    */
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, replace
from typing import Callable, Iterable, List, Optional, Union

from .abi.normalize import RawAbi, parse_abi
from .abi.types import (
    Abi,
    ConstructorEntry,
    ErrorEntry,
    EventEntry,
    FallbackEntry,
    FunctionEntry,
    Parameter,
    ReceiveEntry,
    needs_location,
)
from .abi_features import AbiFeatures, collect_abi_features
from .config import load_config
from .declarations import (
    GLOBAL_CONTAINER,
    Component,
    Declaration,
    Declarations,
    Identifier,
    collect_declarations,
    signature_of,
)
from .errors import RangeAmbiguityError, VersionFloorError
from .formatter import Formatter, apply_formatter, prettier_formatter
from .version import __version__
from .version_features import MIXED, NOT_APPLICABLE, Definite, VersionFeatures, for_range, minimum_version
from .visitor import Visitor, dispatch

log = logging.getLogger(__name__)

__all__ = ["SHIM_GLOBAL_INTERFACE_NAME", "Context", "SolidityGenerator", "generate_solidity"]

SHIM_GLOBAL_INTERFACE_NAME = "__Structs"

ParameterModifiers = Callable[[Parameter], List[str]]


def _no_modifiers(parameter: Parameter) -> List[str]:
    return []


def _memory_location(parameter: Parameter) -> List[str]:
    return ["memory"] if needs_location(parameter) else []


def _indexed(parameter: Parameter) -> List[str]:
    return ["indexed"] if parameter.indexed else []


@dataclass(frozen=True)
class Context:
    """Per-entry emission state: enclosing interface and modifier rule."""

    interface_name: Optional[str] = None
    parameter_modifiers: ParameterModifiers = _no_modifiers


class SolidityGenerator(Visitor[str, Context]):
    def __init__(
        self,
        *,
        name: str,
        license: str,
        solidity_version: str,
        version_features: VersionFeatures,
        abi_features: AbiFeatures,
        declarations: Declarations,
    ) -> None:
        self.name = name
        self.license = license
        self.solidity_version = solidity_version
        self.version_features = version_features
        self.abi_features = abi_features
        self.declarations = declarations

    # ------------------------------------------------------------------ entries

    def visit_abi(self, node: Abi, context: Optional[Context] = None) -> str:
        self._check_struct_support()
        sections = [
            self._generate_header(),
            self._generate_interface(node),
            self._generate_declarations(),
            self._generate_autogenerated_notice(node),
        ]
        return "\n\n".join(s for s in sections if s)

    def visit_function_entry(self, node: FunctionEntry, context: Optional[Context] = None) -> str:
        context = context or Context()
        inputs = self._generate_parameters(
            node.inputs, replace(context, parameter_modifiers=self._input_location)
        )
        parts = [f"function {node.name}({inputs}) external"]

        mutability = self._generate_state_mutability(node)
        if mutability:
            parts.append(mutability)

        # Return values are always copied to memory, whatever the version.
        if node.outputs:
            outputs = self._generate_parameters(
                node.outputs, replace(context, parameter_modifiers=_memory_location)
            )
            parts.append(f"returns ({outputs})")

        parts.append(";")
        return " ".join(parts)

    def visit_constructor_entry(self, node: ConstructorEntry, context: Optional[Context] = None) -> str:
        # interfaces don't have constructors
        return ""

    def visit_fallback_entry(self, node: FallbackEntry, context: Optional[Context] = None) -> str:
        serves_as_receive = (
            self.abi_features.defines_receive
            and not self.version_features.is_true("receive-keyword")
        )
        payable = node.state_mutability == "payable" or serves_as_receive
        return f"{self._generate_fallback_name()} () external{' payable' if payable else ''};"

    def visit_receive_entry(self, node: ReceiveEntry, context: Optional[Context] = None) -> str:
        if self.version_features.is_true("receive-keyword"):
            return "receive () external payable;"

        # the fallback entry already absorbs receive semantics
        if self.abi_features.defines_fallback:
            return ""

        return self.visit_fallback_entry(FallbackEntry(state_mutability="payable"), context)

    def visit_event_entry(self, node: EventEntry, context: Optional[Context] = None) -> str:
        context = context or Context()
        inputs = self._generate_parameters(node.inputs, replace(context, parameter_modifiers=_indexed))
        return f"event {node.name}({inputs}){' anonymous' if node.anonymous else ''};"

    def visit_error_entry(self, node: ErrorEntry, context: Optional[Context] = None) -> str:
        if not self.version_features.is_true("custom-errors"):
            floor = minimum_version("custom-errors")
            raise VersionFloorError(
                f"ABI defines custom errors; use Solidity v{floor} or higher",
                ctx={"feature": "custom-errors", "minimum_version": floor, "range": self.solidity_version},
            )

        context = context or Context()
        inputs = self._generate_parameters(node.inputs, replace(context, parameter_modifiers=_no_modifiers))
        return f"error {node.name}({inputs});"

    def visit_parameter(self, node: Parameter, context: Optional[Context] = None) -> str:
        context = context or Context()
        type_ = self._generate_type(node, context)
        return " ".join([type_, *context.parameter_modifiers(node), node.name])

    # ---------------------------------------------------------------- sections

    def _generate_header(self) -> str:
        include_experimental_pragma = (
            self.abi_features.needs_abiencoder_v2
            and self.version_features["abiencoder-v2"] != Definite("default")
        )
        lines = [
            f"// SPDX-License-Identifier: {self.license}",
            f"// !! THIS FILE WAS AUTOGENERATED BY abi-to-sol v{__version__}. SEE SOURCE BELOW. !!",
            f"pragma solidity {self.solidity_version};",
        ]
        if include_experimental_pragma:
            lines.append("pragma experimental ABIEncoderV2;")
        return "\n".join(lines)

    def _generate_interface(self, abi: Abi) -> str:
        lines = [f"interface {self.name} {{"]

        own = self._generate_declarations_for_container(self.name)
        if own:
            lines.extend([own, ""])

        context = Context(interface_name=self.name)
        for entry in abi:
            fragment = dispatch(entry, self, context)
            if fragment:
                lines.append(fragment)

        lines.append("}")
        return "\n".join(lines)

    def _generate_declarations(self) -> str:
        blocks: List[str] = []

        if self.declarations.for_container(GLOBAL_CONTAINER):
            globals_ = self._generate_declarations_for_container(GLOBAL_CONTAINER)
            if self.version_features.is_true("global-structs"):
                blocks.append(globals_)
            else:
                blocks.append(self._wrap_interface(SHIM_GLOBAL_INTERFACE_NAME, globals_))

        for container in self.declarations.container_signatures:
            if container in (GLOBAL_CONTAINER, self.name):
                continue
            blocks.append(
                self._wrap_interface(container, self._generate_declarations_for_container(container))
            )

        return "\n\n".join(blocks)

    def _generate_autogenerated_notice(self, abi: Abi) -> str:
        return "\n".join(
            [
                "",
                "// THIS FILE WAS AUTOGENERATED FROM THE FOLLOWING ABI JSON:",
                "/*",
                json.dumps(abi.source_document(), separators=(",", ":"), ensure_ascii=False),
                "*/",
            ]
        )

    # ------------------------------------------------------------ declarations

    def _check_struct_support(self) -> None:
        if self.declarations and not self.version_features.is_true("structs-in-interfaces"):
            floor = minimum_version("structs-in-interfaces")
            raise VersionFloorError(
                "abi-to-sol does not support custom struct types for this Solidity version; "
                f"use Solidity v{floor} or higher",
                ctx={
                    "feature": "structs-in-interfaces",
                    "minimum_version": floor,
                    "range": self.solidity_version,
                },
            )

    @staticmethod
    def _wrap_interface(name: str, body: str) -> str:
        return "\n".join([f"interface {name} {{", body, "}"])

    def _generate_declarations_for_container(self, container: str) -> str:
        scope: Optional[str] = container
        if container == GLOBAL_CONTAINER and not self.version_features.is_true("global-structs"):
            scope = SHIM_GLOBAL_INTERFACE_NAME

        context = Context(interface_name=scope)
        return "\n\n".join(
            self._generate_struct(declaration, context)
            for declaration in self.declarations.for_container(container)
        )

    def _generate_struct(self, declaration: Declaration, context: Context) -> str:
        fields = "\n".join(
            f"{self._generate_type(component, context)} {component.name};"
            for component in declaration.components
        )
        return f"struct {declaration.identifier.name} {{ {fields} }}"

    # ------------------------------------------------------------------- types

    def _generate_type(self, variable: Union[Parameter, Component], context: Context) -> str:
        signature = signature_of(variable)
        if signature is None:
            return variable.type

        declaration = self.declarations.lookup(signature)
        if declaration is None:
            return variable.type

        return self._generate_struct_type(variable.type, declaration.identifier, context)

    def _generate_struct_type(self, type_: str, identifier: Identifier, context: Context) -> str:
        container = identifier.container
        if container == GLOBAL_CONTAINER and not self.version_features.is_true("global-structs"):
            container = SHIM_GLOBAL_INTERFACE_NAME

        if container and container != context.interface_name:
            name = f"{container}.{identifier.name}"
        else:
            name = identifier.name

        # keep array suffixes: tuple[2][] -> Name[2][]
        return name + type_[len("tuple"):]

    # ----------------------------------------------------------------- helpers

    def _generate_parameters(self, parameters: Iterable[Parameter], context: Context) -> str:
        return ", ".join(dispatch(p, self, context) for p in parameters)

    @staticmethod
    def _generate_state_mutability(entry: Union[FunctionEntry, FallbackEntry, ConstructorEntry, ReceiveEntry]) -> str:
        if entry.state_mutability and entry.state_mutability != "nonpayable":
            return entry.state_mutability
        return ""

    def _generate_fallback_name(self) -> str:
        resolution = self.version_features["fallback-keyword"]
        if resolution == Definite(True):
            return "fallback"
        if resolution == Definite(False):
            return "function"
        raise RangeAmbiguityError(
            "Desired Solidity range lacks unambiguous fallback syntax.",
            ctx={"feature": "fallback-keyword", "range": self.solidity_version},
        )

    def _input_location(self, parameter: Parameter) -> List[str]:
        if not needs_location(parameter):
            return []

        resolution = self.version_features["array-parameter-location"]
        if resolution is NOT_APPLICABLE:
            return []
        if resolution is MIXED:
            raise RangeAmbiguityError(
                "Desired Solidity range lacks unambiguous location specifier for "
                f'parameter of type "{parameter.type}".',
                ctx={
                    "feature": "array-parameter-location",
                    "type": parameter.type,
                    "range": self.solidity_version,
                },
            )
        return [str(resolution.value)]


def generate_solidity(
    abi: RawAbi,
    *,
    name: Optional[str] = None,
    solidity_version: Optional[str] = None,
    license: Optional[str] = None,
    prettify_output: Optional[bool] = None,
    formatter: Optional[Formatter] = None,
) -> str:
    """
    Generate Solidity interface source for `abi`.

    Options left as None fall back to abi_to_sol.config.load_config().
    An injected `formatter` is used in place of prettier; formatting is
    best-effort and never raises.

    Raises:
        AbiParseError, InvalidVersionRangeError, RangeAmbiguityError,
        VersionFloorError
    """
    cfg = load_config()
    name = name or cfg.name
    solidity_version = solidity_version or cfg.solidity_version
    license = license or cfg.license
    if prettify_output is None:
        prettify_output = True if formatter is not None else cfg.prettify_output

    parsed = parse_abi(abi)
    generator = SolidityGenerator(
        name=name,
        license=license,
        solidity_version=solidity_version,
        version_features=for_range(solidity_version),
        abi_features=collect_abi_features(parsed),
        declarations=collect_declarations(parsed),
    )
    generated = dispatch(parsed, generator)

    if not prettify_output:
        return generated

    if formatter is None:
        formatter = prettier_formatter(cfg.prettier_path)
    return apply_formatter(generated, formatter)
