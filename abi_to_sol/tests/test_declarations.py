from __future__ import annotations

import hashlib
from typing import Any, Dict, List, Optional

from hypothesis import given, strategies as st

from abi_to_sol.abi import Parameter, parse_abi, tuple_signature, type_signature
from abi_to_sol.declarations import (
    GLOBAL_CONTAINER,
    Component,
    Declaration,
    Declarations,
    Identifier,
    collect_declarations,
)


def _fn(name: str, *inputs: Dict[str, Any]) -> Dict[str, Any]:
    return {"type": "function", "name": name, "inputs": list(inputs), "outputs": [], "stateMutability": "nonpayable"}


def _tuple(name: str, components: List[Dict[str, Any]], internal_type: Optional[str] = None, type_: str = "tuple") -> Dict[str, Any]:
    p: Dict[str, Any] = {"name": name, "type": type_, "components": components}
    if internal_type is not None:
        p["internalType"] = internal_type
    return p


def test_no_tuples_no_declarations(token_abi) -> None:
    declarations = collect_declarations(parse_abi(token_abi))
    assert not declarations
    assert declarations.container_signatures == {}


def test_container_and_name_from_internal_type() -> None:
    abi = parse_abi(
        [
            _fn(
                "f",
                _tuple(
                    "p",
                    [{"name": "x", "type": "uint256"}, {"name": "owner", "type": "address"}],
                    internal_type="struct Lib.Point[]",
                    type_="tuple[]",
                ),
            )
        ]
    )
    declarations = collect_declarations(abi)

    declaration = declarations.lookup("(uint256,address)")
    assert declaration is not None
    assert declaration.identifier == Identifier(name="Point", container="Lib")
    assert declaration.components == (
        Component(name="x", type="uint256"),
        Component(name="owner", type="address"),
    )
    assert declarations.container_signatures == {"Lib": ("(uint256,address)",)}


def test_same_shape_different_names_is_one_declaration(point_abi) -> None:
    declarations = collect_declarations(parse_abi(point_abi))

    assert len(declarations) == 1
    assert declarations.lookup("(uint256,uint256)").identifier == Identifier(name="Point")
    assert declarations.container_signatures == {GLOBAL_CONTAINER: ("(uint256,uint256)",)}


def test_first_seen_container_wins() -> None:
    components = [{"name": "a", "type": "bool"}]
    abi = parse_abi(
        [
            _fn("f", _tuple("x", components, internal_type="struct A.Flag")),
            _fn("g", _tuple("y", components, internal_type="struct B.Other")),
        ]
    )
    declarations = collect_declarations(abi)

    assert declarations.lookup("(bool)").identifier == Identifier(name="Flag", container="A")
    assert list(declarations.container_signatures) == ["A"]


def test_nested_tuples_are_declared_inner_first() -> None:
    inner = _tuple(
        "items",
        [{"name": "id", "type": "uint64"}],
        internal_type="struct Item[]",
        type_="tuple[]",
    )
    outer = _tuple("order", [{"name": "buyer", "type": "address"}, inner], internal_type="struct Shop.Order")
    declarations = collect_declarations(parse_abi([_fn("place", outer)]))

    assert list(declarations.signature_declarations) == ["(uint64)", "(address,(uint64)[])"]
    order = declarations.lookup("(address,(uint64)[])")
    assert order.components[1] == Component(name="items", type="tuple[]", signature="(uint64)")
    assert declarations.container_signatures == {
        GLOBAL_CONTAINER: ("(uint64)",),
        "Shop": ("(address,(uint64)[])",),
    }


def test_unnamed_tuple_gets_hash_name() -> None:
    abi = parse_abi([_fn("f", _tuple("t", [{"name": "a", "type": "uint8"}]))])
    declaration = collect_declarations(abi).lookup("(uint8)")

    digest = hashlib.sha3_256(b"(uint8)").hexdigest()
    assert declaration.identifier == Identifier(name=f"S_{digest[:8]}")


def test_outputs_events_errors_and_constructor_are_walked() -> None:
    shape = [{"name": "v", "type": "uint16"}]
    abi = parse_abi(
        [
            {"type": "constructor", "inputs": [_tuple("c", shape, "struct C")]},
            {"type": "function", "name": "f", "inputs": [], "outputs": [_tuple("o", [{"name": "v", "type": "int8"}], "struct O")]},
            {"type": "event", "name": "E", "inputs": [_tuple("e", [{"name": "v", "type": "bytes32"}], "struct E")]},
            {"type": "error", "name": "X", "inputs": [_tuple("x", [{"name": "v", "type": "bool"}], "struct X")]},
        ]
    )
    names = [d.identifier.name for d in collect_declarations(abi).signature_declarations.values()]
    assert names == ["C", "O", "E", "X"]


def test_type_signature_keeps_array_suffix() -> None:
    p = Parameter(
        name="t",
        type="tuple[2][]",
        components=(Parameter("a", "uint256"), Parameter("b", "bool")),
    )
    assert tuple_signature(p.components) == "(uint256,bool)"
    assert type_signature(p) == "(uint256,bool)[2][]"


def test_merge_keeps_first_declaration() -> None:
    a = Declarations.of({"(bool)": _decl("A", "X")})
    b = Declarations.of({"(bool)": _decl("B", "Y"), "(uint8)": _decl("C", "")})
    merged = a.merge(b)

    assert merged.lookup("(bool)").identifier.name == "A"
    assert merged.container_signatures == {"X": ("(bool)",), "": ("(uint8)",)}


def _decl(name: str, container: str) -> Declaration:
    return Declaration(identifier=Identifier(name=name, container=container))


_PRIMITIVES = st.sampled_from(["uint256", "address", "bool", "bytes32", "string", "uint8[]", "bytes"])
_NAMES = st.from_regex(r"[A-Z][A-Za-z0-9]{0,8}", fullmatch=True)


@given(types=st.lists(_PRIMITIVES, min_size=1, max_size=6), names=st.lists(_NAMES, min_size=2, max_size=5, unique=True))
def test_dedup_is_by_shape_not_name(types, names) -> None:
    entries = []
    for i, struct_name in enumerate(names):
        components = [{"name": f"f{i}_{j}", "type": t} for j, t in enumerate(types)]
        entries.append(_fn(f"fn{i}", _tuple("arg", components, internal_type=f"struct {struct_name}")))

    declarations = collect_declarations(parse_abi(entries))

    assert len(declarations) == 1
    (declaration,) = declarations.signature_declarations.values()
    assert declaration.identifier.name == names[0]


@given(containers=st.lists(st.sampled_from(["", "A", "B"]), min_size=1, max_size=8))
def test_every_signature_in_exactly_one_container(containers) -> None:
    entries = []
    for i, container in enumerate(containers):
        prefix = f"{container}." if container else ""
        shape = [{"name": "v", "type": f"uint{8 * (1 + i % 4)}"}]
        entries.append(_fn(f"fn{i}", _tuple("arg", shape, internal_type=f"struct {prefix}S{i}")))

    declarations = collect_declarations(parse_abi(entries))

    seen: List[str] = []
    for signatures in declarations.container_signatures.values():
        seen.extend(signatures)
    assert sorted(seen) == sorted(declarations.signature_declarations)
    assert len(seen) == len(set(seen))
