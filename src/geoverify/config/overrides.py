from __future__ import annotations

from typing import Any, Mapping

import yaml

from geoverify.config.settings import Settings

"""
Per-call settings overrides (safe subset).

A calling service (or the CLI `--override` flag) can tune verification and
spoofing knobs for a single call without editing YAML. This module:
- validates the override payload against a whitelist,
- deep-merges the safe subset onto current settings,
- re-validates with Pydantic so ranges stay correct.

The cached global Settings object is never mutated; a new model is returned.
"""

# A value of True allows any key under that subtree; a nested dict restricts it
# to the listed keys, recursively. `app` (log level, name) is process-wide and
# deliberately absent.
ALLOWED_SETTINGS_OVERRIDES_TREE: dict[str, Any] = {
    "verification": True,
    "spoofing": {
        "check_weights": True,
        "pass_threshold": True,
    },
}


def _deep_merge(base: dict[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    merged: dict[str, Any] = dict(base)
    for key, override_value in override.items():
        if isinstance(override_value, Mapping) and isinstance(merged.get(key), Mapping):
            merged[key] = _deep_merge(dict(merged[key]), override_value)
            continue
        merged[key] = override_value
    return merged


def _filter_overrides(
    overrides: Mapping[str, Any],
    *,
    allowed_tree: Mapping[str, Any],
    path: tuple[str, ...] = (),
) -> dict[str, Any]:
    # Unknown keys raise instead of being dropped, so typos surface immediately.
    filtered: dict[str, Any] = {}
    for key, value in overrides.items():
        if key not in allowed_tree:
            dotted_path = ".".join((*path, key))
            raise ValueError(f"settings_overrides contains a disallowed key: '{dotted_path}'")

        allowed = allowed_tree[key]
        if allowed is True:
            filtered[key] = value
            continue

        if not isinstance(value, Mapping):
            dotted_path = ".".join((*path, key))
            raise ValueError(f"settings_overrides key '{dotted_path}' must be a mapping")

        filtered[key] = _filter_overrides(value, allowed_tree=allowed, path=(*path, key))
    return filtered


def parse_override_pairs(pairs: list[str]) -> dict[str, Any]:
    """Turn `a.b.c=VALUE` strings into a nested override mapping.

    Values are parsed as YAML scalars, so `0.4` becomes a float and `true` a bool.
    """
    out: dict[str, Any] = {}
    for pair in pairs:
        if "=" not in pair:
            raise ValueError(f"Invalid override '{pair}', expected KEY=VALUE")
        key, raw_value = pair.split("=", 1)
        parts = [p.strip() for p in key.split(".") if p.strip()]
        if not parts:
            raise ValueError(f"Invalid override '{pair}', empty key")
        node = out
        for part in parts[:-1]:
            child = node.setdefault(part, {})
            if not isinstance(child, dict):
                raise ValueError(f"Override '{pair}' conflicts with an earlier scalar override")
            node = child
        node[parts[-1]] = yaml.safe_load(raw_value)
    return out


def apply_settings_overrides(settings: Settings, overrides: Mapping[str, Any] | None) -> Settings:
    if not overrides:
        return settings

    safe_overrides = _filter_overrides(overrides, allowed_tree=ALLOWED_SETTINGS_OVERRIDES_TREE)
    merged_payload = _deep_merge(settings.model_dump(mode="python"), safe_overrides)
    return Settings.model_validate(merged_payload)
