"""
ABI normalization & validation

Turns a raw ABI (JSON text, a list of entry objects, or a build artifact
with an "abi" key) into the typed nodes of abi_to_sol.abi.types. It
performs:

- JSON Schema validation against the packaged abi.schema.json
- Legacy-field normalization:
    * missing "type" means "function"
    * stateMutability derived from `payable` / `constant` when absent
    * missing inputs/outputs/name default to empty
- Conversion of parameters (recursively through tuple components)

Type strings are trusted as given. The raw document is kept on the
resulting Abi so the generator can echo it back verbatim.
"""

from __future__ import annotations

import json
import logging
from functools import lru_cache
from importlib import resources as importlib_resources
from typing import Any, Dict, List, Tuple, Union

import jsonschema

from ..errors import AbiParseError
from .types import (
    Abi,
    ConstructorEntry,
    Entry,
    ErrorEntry,
    EventEntry,
    FallbackEntry,
    FunctionEntry,
    Parameter,
    ReceiveEntry,
)

log = logging.getLogger(__name__)

__all__ = ["parse_abi", "load_abi_schema", "validate_abi_document"]

_SCHEMA_FILE = "abi.schema.json"

RawAbi = Union[str, bytes, List[Any], Dict[str, Any], Abi]


# ----------------------------
# Public API
# ----------------------------


def parse_abi(raw: RawAbi, *, validate_schema: bool = True) -> Abi:
    """
    Normalize a raw ABI into an Abi.

    Args:
        raw: ABI as JSON text, an already-parsed list, a build artifact
            object carrying an "abi" list, or an Abi (returned as-is).
        validate_schema: validate the document against the packaged schema.

    Raises:
        AbiParseError: on malformed JSON or a document that is not an ABI.
    """
    if isinstance(raw, Abi):
        return raw

    document = _load_document(raw)

    if validate_schema:
        validate_abi_document(document)

    entries = tuple(_normalize_entry(item, i) for i, item in enumerate(document))
    log.debug("parsed ABI with %d entries", len(entries))
    return Abi(entries=entries, source=document)


@lru_cache(maxsize=1)
def load_abi_schema() -> Dict[str, Any]:
    text = importlib_resources.files(__package__).joinpath(_SCHEMA_FILE).read_text(encoding="utf-8")
    return json.loads(text)


def validate_abi_document(document: Any) -> None:
    """Raise AbiParseError describing the first schema violation, if any."""
    validator = jsonschema.Draft202012Validator(load_abi_schema())
    errors = sorted(validator.iter_errors(document), key=lambda e: list(e.absolute_path))
    if not errors:
        return
    first = errors[0]
    where = "/".join(str(p) for p in first.absolute_path) or "<root>"
    raise AbiParseError(
        f"ABI schema validation failed at {where}: {first.message}",
        ctx={"path": where, "violations": len(errors)},
    )


# ----------------------------
# Loading
# ----------------------------


def _load_document(raw: Any) -> List[Any]:
    if isinstance(raw, (bytes, bytearray)):
        raw = bytes(raw).decode("utf-8")
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except json.JSONDecodeError as e:
            raise AbiParseError(f"ABI JSON parse error: {e}") from e

    # Build artifacts wrap the ABI list under "abi".
    if isinstance(raw, dict) and "abi" in raw:
        raw = raw["abi"]

    if not isinstance(raw, list):
        raise AbiParseError(
            f"ABI top-level must be a list of entries, got {type(raw).__name__}"
        )
    return raw


# ----------------------------
# Normalization
# ----------------------------


def _state_mutability(item: Dict[str, Any], default: str = "nonpayable") -> str:
    mut = item.get("stateMutability")
    if mut:
        return str(mut)
    if item.get("payable"):
        return "payable"
    if item.get("constant"):
        return "view"
    return default


def _normalize_param(p: Any, *, allow_indexed: bool = False) -> Parameter:
    if not isinstance(p, dict):
        raise AbiParseError(f"ABI parameter must be an object, got {type(p).__name__}")
    typ = p.get("type")
    if not isinstance(typ, str) or not typ:
        raise AbiParseError("ABI parameter requires a non-empty 'type'")
    components = tuple(_normalize_param(c) for c in (p.get("components") or []))
    indexed = bool(p.get("indexed", False)) if allow_indexed else None
    return Parameter(
        name=str(p.get("name") or ""),
        type=typ,
        internal_type=p.get("internalType"),
        components=components,
        indexed=indexed,
    )


def _normalize_params(params: Any, *, allow_indexed: bool = False) -> Tuple[Parameter, ...]:
    if params is None:
        return ()
    if not isinstance(params, list):
        raise AbiParseError("ABI parameters must be a list")
    return tuple(_normalize_param(p, allow_indexed=allow_indexed) for p in params)


def _normalize_entry(item: Any, index: int) -> Entry:
    if not isinstance(item, dict):
        raise AbiParseError(f"[{index}] ABI entry must be an object", ctx={"index": index})

    kind = item.get("type", "function")
    if kind == "function":
        name = item.get("name")
        if not isinstance(name, str):
            raise AbiParseError(f"[{index}] function entry requires a name", ctx={"index": index})
        return FunctionEntry(
            name=name,
            inputs=_normalize_params(item.get("inputs")),
            outputs=_normalize_params(item.get("outputs")),
            state_mutability=_state_mutability(item),
        )
    if kind == "constructor":
        return ConstructorEntry(
            inputs=_normalize_params(item.get("inputs")),
            state_mutability=_state_mutability(item),
        )
    if kind == "fallback":
        return FallbackEntry(state_mutability=_state_mutability(item))
    if kind == "receive":
        return ReceiveEntry(state_mutability=_state_mutability(item, default="payable"))
    if kind == "event":
        return EventEntry(
            name=str(item.get("name", "")),
            inputs=_normalize_params(item.get("inputs"), allow_indexed=True),
            anonymous=bool(item.get("anonymous", False)),
        )
    if kind == "error":
        return ErrorEntry(
            name=str(item.get("name", "")),
            inputs=_normalize_params(item.get("inputs")),
        )
    raise AbiParseError(f"[{index}] unknown ABI entry type={kind!r}", ctx={"index": index})
