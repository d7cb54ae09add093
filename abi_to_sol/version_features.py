"""
Solidity syntax features by compiler version.

Each feature is a step function over the ordered axis of compiler versions,
written down as a handful of disjoint npm-style sub-ranges (FEATURE_TABLE).
Resolving a requested range against the table yields, per feature:

  Definite(value)   every version in the range agrees on `value`
  MIXED             the range spans versions that disagree
  NOT_APPLICABLE    the feature does not exist anywhere in the range

Resolution never fails on MIXED; the emitter decides whether an ambiguous
feature actually matters for the ABI at hand.

Ranges are intersected exactly: two npm ranges share a version iff they
share one of the boundary points derived from their literals, so the answer
never depends on which compiler releases happen to exist.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from functools import lru_cache
from typing import Dict, List, Optional, Tuple, Union

from semantic_version import NpmSpec, Version

from .errors import InvalidVersionRangeError

log = logging.getLogger(__name__)

__all__ = [
    "Definite",
    "Unresolved",
    "MIXED",
    "NOT_APPLICABLE",
    "Resolution",
    "FEATURE_TABLE",
    "boundary_versions",
    "VersionFeatures",
    "parse_range",
    "ranges_intersect",
    "resolve_feature",
    "for_range",
    "minimum_version",
]


# ──────────────────────────────────────────────────────────────────────────────
# Resolution values
# ──────────────────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class Definite:
    value: Union[bool, str]


class Unresolved(Enum):
    MIXED = "mixed"
    NOT_APPLICABLE = "not-applicable"

    def __repr__(self) -> str:
        return f"Unresolved.{self.name}"


MIXED = Unresolved.MIXED
NOT_APPLICABLE = Unresolved.NOT_APPLICABLE

Resolution = Union[Definite, Unresolved]


# ──────────────────────────────────────────────────────────────────────────────
# Feature table
# ──────────────────────────────────────────────────────────────────────────────

FeatureValue = Union[bool, str, Unresolved]

FEATURE_TABLE: Dict[str, Tuple[Tuple[str, FeatureValue], ...]] = {
    "receive-keyword": (
        (">=0.6.0", True),
        ("<0.6.0", False),
    ),
    "fallback-keyword": (
        (">=0.6.0", True),
        ("<0.6.0", False),
    ),
    "array-parameter-location": (
        (">=0.7.0", "memory"),
        ("^0.5.0 || ^0.6.0", "calldata"),
        # Open question: before 0.5 there is no location keyword at all. This
        # row makes ranges straddling 0.5.0 resolve MIXED instead of taking the
        # calldata spelling, which 0.4 compilers reject.
        ("<0.5.0", NOT_APPLICABLE),
    ),
    "abiencoder-v2": (
        (">=0.8.0", "default"),
        ("<0.8.0", "experimental"),
    ),
    "global-structs": (
        (">=0.6.0", True),
        ("<0.6.0", False),
    ),
    "structs-in-interfaces": (
        (">=0.5.0", True),
        ("<0.5.0", False),
    ),
    "custom-errors": (
        (">=0.8.4", True),
        ("<0.8.4", False),
    ),
}


# ──────────────────────────────────────────────────────────────────────────────
# Range helpers
# ──────────────────────────────────────────────────────────────────────────────

_VERSION_LITERAL = re.compile(r"\d+(?:\.\d+){0,2}")


def _literal_versions(expression: str) -> List[Version]:
    out: List[Version] = []
    for literal in _VERSION_LITERAL.findall(expression):
        parts = [int(p) for p in literal.split(".")] + [0, 0]
        out.append(Version("{}.{}.{}".format(*parts[:3])))
    return out


@lru_cache(maxsize=256)
def boundary_versions(expression: str) -> Tuple[Version, ...]:
    """
    Versions at which membership in `expression` can change.

    Every npm range desugars to intervals whose lower bound is a literal of
    the expression, or the next patch/minor/major after one. The smallest
    member of any intersection of such intervals is therefore 0.0.0 or one
    of these points.
    """
    points = {Version("0.0.0")}
    for v in _literal_versions(expression):
        points.update((v, v.next_patch(), v.next_minor(), v.next_major()))
    return tuple(sorted(points))


@lru_cache(maxsize=1)
def _table_boundaries() -> Tuple[Version, ...]:
    points = set()
    for rows in FEATURE_TABLE.values():
        for sub_range, _ in rows:
            points.update(boundary_versions(sub_range))
    return tuple(sorted(points))


# ──────────────────────────────────────────────────────────────────────────────
# Range helpers
# ──────────────────────────────────────────────────────────────────────────────


@lru_cache(maxsize=256)
def parse_range(expression: str) -> NpmSpec:
    try:
        return NpmSpec(expression.strip())
    except ValueError as e:
        raise InvalidVersionRangeError(
            f"Invalid Solidity version range {expression!r}: {e}",
            ctx={"range": expression},
        ) from e


def ranges_intersect(a: str, b: str) -> bool:
    """True if some release version satisfies both ranges."""
    spec_a, spec_b = parse_range(a), parse_range(b)
    candidates = set(boundary_versions(a)) | set(boundary_versions(b))
    return any(spec_a.match(v) and spec_b.match(v) for v in candidates)


def resolve_feature(feature: str, expression: str) -> Resolution:
    """Resolve one feature of FEATURE_TABLE over a requested range."""
    values: List[FeatureValue] = []
    for sub_range, value in FEATURE_TABLE[feature]:
        if ranges_intersect(expression, sub_range) and value not in values:
            values.append(value)

    if len(values) > 1:
        return MIXED
    if not values or values[0] is NOT_APPLICABLE:
        return NOT_APPLICABLE
    return Definite(values[0])  # type: ignore[arg-type]


def minimum_version(feature: str, value: Union[bool, str] = True) -> Optional[str]:
    """Lowest version where `feature` resolves to `value`, e.g. "0.8.4"."""
    for version in _table_boundaries():
        if resolve_feature(feature, str(version)) == Definite(value):
            return str(version)
    return None


# ──────────────────────────────────────────────────────────────────────────────
# Resolved set
# ──────────────────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class VersionFeatures:
    """Per-feature resolutions for one requested range. Read-only."""

    range: str
    resolutions: Dict[str, Resolution] = field(default_factory=dict)

    def __getitem__(self, feature: str) -> Resolution:
        return self.resolutions.get(feature, NOT_APPLICABLE)

    def is_true(self, feature: str) -> bool:
        return self[feature] == Definite(True)

    def as_dict(self) -> Dict[str, str]:
        out: Dict[str, str] = {}
        for name, res in self.resolutions.items():
            out[name] = repr(res.value) if isinstance(res, Definite) else res.value
        return out


def for_range(expression: str) -> VersionFeatures:
    """Resolve every known feature for `expression`."""
    resolutions = {feature: resolve_feature(feature, expression) for feature in FEATURE_TABLE}
    features = VersionFeatures(range=expression, resolutions=resolutions)
    log.debug("version features for %r: %s", expression, features.as_dict())
    return features
