from __future__ import annotations

import pytest
from hypothesis import given, strategies as st
from semantic_version import Version

from abi_to_sol.errors import InvalidVersionRangeError
from abi_to_sol.version_features import (
    FEATURE_TABLE,
    MIXED,
    NOT_APPLICABLE,
    Definite,
    for_range,
    minimum_version,
    parse_range,
    ranges_intersect,
    resolve_feature,
)


def test_modern_range_resolves_everything_definitely() -> None:
    features = for_range("^0.8.4")

    assert features["receive-keyword"] == Definite(True)
    assert features["fallback-keyword"] == Definite(True)
    assert features["array-parameter-location"] == Definite("memory")
    assert features["abiencoder-v2"] == Definite("default")
    assert features["global-structs"] == Definite(True)
    assert features["structs-in-interfaces"] == Definite(True)
    assert features["custom-errors"] == Definite(True)


def test_solidity_05_features() -> None:
    features = for_range("^0.5.0")

    assert features["array-parameter-location"] == Definite("calldata")
    assert features["receive-keyword"] == Definite(False)
    assert features["fallback-keyword"] == Definite(False)
    assert features["global-structs"] == Definite(False)
    assert features["structs-in-interfaces"] == Definite(True)
    assert features["abiencoder-v2"] == Definite("experimental")
    assert not features.is_true("custom-errors")


def test_range_spanning_a_breakpoint_is_mixed() -> None:
    features = for_range(">=0.6.0 <0.8.0")

    assert features["array-parameter-location"] is MIXED
    # both 0.6 and 0.7 agree on these
    assert features["receive-keyword"] == Definite(True)
    assert features["abiencoder-v2"] == Definite("experimental")


def test_custom_errors_mixed_inside_08() -> None:
    assert for_range("^0.8.0")["custom-errors"] is MIXED
    assert for_range("0.8.3")["custom-errors"] == Definite(False)
    assert for_range("0.8.4")["custom-errors"] == Definite(True)


def test_location_not_applicable_before_05() -> None:
    assert for_range("^0.4.24")["array-parameter-location"] is NOT_APPLICABLE


def test_not_applicable_sub_range_still_mixes() -> None:
    assert resolve_feature("array-parameter-location", ">=0.4.0 <0.6.0") is MIXED


def test_sub_ranges_sharing_a_value_are_not_mixed() -> None:
    # ^0.5.0 and ^0.6.0 are listed together, 0.5 and 0.6 agree on calldata
    assert resolve_feature("array-parameter-location", ">=0.5.0 <0.7.0") == Definite("calldata")


def test_open_ended_range_reaches_past_known_releases() -> None:
    features = for_range(">=0.9.0")
    assert features["custom-errors"] == Definite(True)
    assert features["abiencoder-v2"] == Definite("default")


def test_empty_range_is_not_applicable() -> None:
    features = for_range(">=0.9.0 <0.8.0")
    assert all(features[name] is NOT_APPLICABLE for name in FEATURE_TABLE)
    assert features["no-such-feature"] is NOT_APPLICABLE


def test_or_ranges() -> None:
    features = for_range("^0.5.0 || ^0.8.4")
    assert features["array-parameter-location"] is MIXED
    assert features["structs-in-interfaces"] == Definite(True)
    assert features["custom-errors"] is MIXED


def test_minimum_versions() -> None:
    assert minimum_version("custom-errors") == "0.8.4"
    assert minimum_version("structs-in-interfaces") == "0.5.0"
    assert minimum_version("receive-keyword") == "0.6.0"
    assert minimum_version("array-parameter-location", "calldata") == "0.5.0"


def test_invalid_range_raises() -> None:
    with pytest.raises(InvalidVersionRangeError) as excinfo:
        parse_range("banana")
    assert excinfo.value.ctx["range"] == "banana"


def test_as_dict_is_readable() -> None:
    rendered = for_range(">=0.6.0 <0.8.0").as_dict()
    assert rendered["array-parameter-location"] == "mixed"
    assert rendered["receive-keyword"] == "True"


@pytest.mark.parametrize("expression", ["0.8.35", "^0.8.32", "^0.9.5", ">=0.8.40 <0.9.0", "1.2.3", "~0.8.4"])
def test_versions_past_any_known_release(expression) -> None:
    features = for_range(expression)

    assert features["custom-errors"] == Definite(True)
    assert features["fallback-keyword"] == Definite(True)
    assert features["structs-in-interfaces"] == Definite(True)
    assert features["array-parameter-location"] == Definite("memory")
    assert features["abiencoder-v2"] == Definite("default")


def test_pin_between_table_boundaries() -> None:
    features = for_range("0.6.99")
    assert features["array-parameter-location"] == Definite("calldata")
    assert features["custom-errors"] == Definite(False)


def test_ranges_intersect() -> None:
    assert ranges_intersect("^0.8.32", ">=0.8.4")
    assert ranges_intersect(">0.8.3", "<0.8.5")
    assert not ranges_intersect(">0.8.3", "<0.8.4")
    assert not ranges_intersect("^0.5.0 || ^0.6.0", ">=0.7.0")
    assert ranges_intersect("0.6.12 || 0.9.1", "^0.5.0 || ^0.6.0")


# ── properties ────────────────────────────────────────────────────────────────

_VERSIONS = st.builds(
    lambda major, minor, patch: Version(f"{major}.{minor}.{patch}"),
    major=st.sampled_from([0, 0, 0, 1, 2]),
    minor=st.integers(0, 12),
    patch=st.integers(0, 120),
)


def _row_value(feature: str, version: Version):
    (value,) = [v for sub, v in FEATURE_TABLE[feature] if parse_range(sub).match(version)]
    return value


def _expected(value):
    return NOT_APPLICABLE if value is NOT_APPLICABLE else Definite(value)


@given(version=_VERSIONS)
def test_any_pin_resolves_to_its_row(version) -> None:
    features = for_range(str(version))
    for feature in FEATURE_TABLE:
        assert features[feature] == _expected(_row_value(feature, version))


@given(a=_VERSIONS, b=_VERSIONS, feature=st.sampled_from(sorted(FEATURE_TABLE)))
def test_range_inside_one_sub_range_is_never_mixed(a, b, feature) -> None:
    lo, hi = min(a, b), max(a, b)
    if _row_value(feature, lo) != _row_value(feature, hi):
        # straddles a boundary; every table row is one contiguous interval
        assert resolve_feature(feature, f">={lo} <={hi}") is MIXED
        return

    resolution = resolve_feature(feature, f">={lo} <={hi}")
    assert resolution is not MIXED
    assert resolution == _expected(_row_value(feature, lo))
