from __future__ import annotations

import pytest
from pydantic import ValidationError

# We load the real packaged defaults so tests exercise the shipped YAML.
from geoverify.config.settings import get_settings

# The override helpers are pure (no I/O), so they are tested directly.
from geoverify.config.overrides import apply_settings_overrides, parse_override_pairs


def test_packaged_defaults():
    settings = get_settings()

    assert settings.verification.radius_floor_m == 10
    assert settings.verification.default_radius_m == 50
    assert settings.spoofing.check_weights == {"is_emulator": 0.6, "mock_location": 0.6}
    assert settings.spoofing.pass_threshold == 0.5


def test_apply_settings_overrides_returns_same_object_when_none():
    settings = get_settings()

    # No overrides is a fast path: the cached model comes back untouched.
    assert apply_settings_overrides(settings, None) is settings
    assert apply_settings_overrides(settings, {}) is settings


def test_apply_settings_overrides_can_override_allowed_knobs():
    settings = get_settings()

    out = apply_settings_overrides(settings, {"verification": {"radius_floor_m": 25}})

    assert out.verification.radius_floor_m == 25
    # Untouched siblings survive the deep merge.
    assert out.verification.default_radius_m == settings.verification.default_radius_m
    # The shared cached settings must not change (no cross-call leakage).
    assert settings.verification.radius_floor_m == 10


def test_apply_settings_overrides_rejects_disallowed_keys_with_clear_path():
    settings = get_settings()

    with pytest.raises(ValueError, match=r"disallowed key: 'app'"):
        apply_settings_overrides(settings, {"app": {"log_level": "DEBUG"}})

    with pytest.raises(ValueError, match=r"spoofing\.unknown_knob"):
        apply_settings_overrides(settings, {"spoofing": {"unknown_knob": 1}})


def test_apply_settings_overrides_rejects_wrong_value_shapes_for_restricted_subtrees():
    settings = get_settings()

    with pytest.raises(ValueError, match=r"settings_overrides key 'spoofing' must be a mapping"):
        apply_settings_overrides(settings, {"spoofing": 1})


def test_apply_settings_overrides_revalidates_ranges():
    settings = get_settings()

    with pytest.raises(ValidationError):
        apply_settings_overrides(settings, {"spoofing": {"pass_threshold": 2}})


def test_parse_override_pairs_builds_nested_mapping():
    out = parse_override_pairs(
        [
            "verification.radius_floor_m=25",
            "spoofing.check_weights.is_emulator=0.2",
            "spoofing.check_weights.mock_location=0.4",
        ]
    )

    assert out == {
        "verification": {"radius_floor_m": 25},
        "spoofing": {"check_weights": {"is_emulator": 0.2, "mock_location": 0.4}},
    }


def test_parse_override_pairs_rejects_malformed_pairs():
    with pytest.raises(ValueError, match=r"expected KEY=VALUE"):
        parse_override_pairs(["verification.radius_floor_m"])

    with pytest.raises(ValueError, match=r"conflicts"):
        parse_override_pairs(["verification=1", "verification.radius_floor_m=2"])
