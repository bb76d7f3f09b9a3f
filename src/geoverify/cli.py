"""
GeoVerify CLI entrypoint.

This CLI is intended for quick local checks and debugging of the verification core
(e.g., "how far is this check-in from the quest target?") without the service layer.
It delegates all logic to the library functions.
"""

from __future__ import annotations

import argparse
import json
from dataclasses import asdict
from typing import Any

from geoverify.config.overrides import apply_settings_overrides, parse_override_pairs
from geoverify.config.settings import Settings, get_settings
from geoverify.core.env import resolve_project_path
from geoverify.core.geo import bearing, bounding_box, direction, distance, format_distance
from geoverify.core.logging import configure_logging
from geoverify.core.validation import is_valid_coordinates
from geoverify.domain.models import DeviceSignal, SubmittedLocation, TargetLocation
from geoverify.query.nearby import find_nearby
from geoverify.verification.spoofing import detect_spoofing
from geoverify.verification.verify import verify_location


def _settings_for(args: argparse.Namespace) -> Settings:
    overrides = parse_override_pairs(args.override) if args.override else None
    return apply_settings_overrides(get_settings(), overrides)


def _print_json(payload: Any) -> None:
    print(json.dumps(payload, ensure_ascii=False, indent=2))


def _require_valid(lat: float, lon: float, label: str) -> None:
    if not is_valid_coordinates(lat, lon):
        raise ValueError(f"Invalid {label} coordinates: lat={lat} lon={lon}")


def _cmd_distance(args: argparse.Namespace) -> int:
    _require_valid(args.lat1, args.lon1, "first")
    _require_valid(args.lat2, args.lon2, "second")
    d = distance(args.lat1, args.lon1, args.lat2, args.lon2)
    if args.json:
        _print_json({"distance_m": d, "formatted": format_distance(d)})
        return 0
    print(format_distance(d))
    return 0


def _cmd_bearing(args: argparse.Namespace) -> int:
    _require_valid(args.lat1, args.lon1, "first")
    _require_valid(args.lat2, args.lon2, "second")
    b = bearing(args.lat1, args.lon1, args.lat2, args.lon2)
    if args.json:
        _print_json({"bearing_deg": b, "direction": direction(b)})
        return 0
    print(f"{b:.1f}° {direction(b)}")
    return 0


def _cmd_bbox(args: argparse.Namespace) -> int:
    _require_valid(args.lat, args.lon, "center")
    box = bounding_box(args.lat, args.lon, args.radius)
    if args.json:
        _print_json(asdict(box))
        return 0
    print(f"lat [{box.min_lat:.6f}, {box.max_lat:.6f}]  lon [{box.min_lon:.6f}, {box.max_lon:.6f}]")
    return 0


def _cmd_verify(args: argparse.Namespace) -> int:
    settings = _settings_for(args)
    submitted = SubmittedLocation(latitude=args.lat, longitude=args.lon, accuracy=args.accuracy)
    target = TargetLocation(coordinates=(args.target_lon, args.target_lat), radius_meters=args.radius)
    result = verify_location(submitted, target, settings=settings)
    if args.json:
        _print_json(result.model_dump(mode="json"))
    else:
        print(result.message)
    return 0 if result.passed else 1


def _cmd_spoof(args: argparse.Namespace) -> int:
    settings = _settings_for(args)
    signal = DeviceSignal(is_emulator=args.emulator, is_mock_location=args.mock_location)
    assessment = detect_spoofing(signal, settings=settings)
    if args.json:
        _print_json(assessment.model_dump(mode="json"))
    else:
        status = "PASS" if assessment.passed else "FAIL"
        print(f"{status} risk={assessment.risk_score:.2f}")
        for check in assessment.checks:
            print(f"  - {check.check}: {'ok' if check.passed else 'flagged'} ({check.details})")
    return 0 if assessment.passed else 1


def _cmd_nearby(args: argparse.Namespace) -> int:
    _require_valid(args.lat, args.lon, "user")
    path = resolve_project_path(args.candidates)
    raw = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(raw, list):
        raise ValueError(f"Candidates file {path} must contain a JSON list")

    matches = find_nearby(args.lat, args.lon, raw, args.max_distance)
    if args.json:
        _print_json([m.to_dict() for m in matches])
        return 0
    for i, m in enumerate(matches, start=1):
        label = m.data.get("name") or m.data.get("id") or "?"
        print(f"{i:>2}. {label}  {format_distance(m.distance)}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the GeoVerify CLI."""
    parser = argparse.ArgumentParser(prog="geoverify")
    parser.add_argument(
        "--override",
        action="append",
        default=[],
        help="Per-run settings override, e.g. verification.radius_floor_m=5 (repeatable).",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    pair = argparse.ArgumentParser(add_help=False)
    pair.add_argument("--lat1", required=True, type=float)
    pair.add_argument("--lon1", required=True, type=float)
    pair.add_argument("--lat2", required=True, type=float)
    pair.add_argument("--lon2", required=True, type=float)
    pair.add_argument("--json", action="store_true", help="Output machine-readable JSON")

    dist = sub.add_parser("distance", parents=[pair], help="Great-circle distance between two points.")
    dist.set_defaults(func=_cmd_distance)

    brg = sub.add_parser("bearing", parents=[pair], help="Initial bearing and compass direction.")
    brg.set_defaults(func=_cmd_bearing)

    box = sub.add_parser("bbox", help="Bounding box around a point (not valid near the poles).")
    box.add_argument("--lat", required=True, type=float)
    box.add_argument("--lon", required=True, type=float)
    box.add_argument("--radius", required=True, type=float, help="Radius in meters")
    box.add_argument("--json", action="store_true")
    box.set_defaults(func=_cmd_bbox)

    ver = sub.add_parser("verify", help="Verify a submitted position against a target radius.")
    ver.add_argument("--lat", required=True, type=float)
    ver.add_argument("--lon", required=True, type=float)
    ver.add_argument("--accuracy", type=float, default=None, help="Reported accuracy in meters")
    ver.add_argument("--target-lat", required=True, type=float)
    ver.add_argument("--target-lon", required=True, type=float)
    ver.add_argument("--radius", type=float, default=None, help="Allowed radius in meters")
    ver.add_argument("--json", action="store_true")
    ver.set_defaults(func=_cmd_verify)

    spf = sub.add_parser("spoof", help="Score device signals for spoofing risk.")
    spf.add_argument("--emulator", action="store_true")
    spf.add_argument("--mock-location", dest="mock_location", action="store_true")
    spf.add_argument("--json", action="store_true")
    spf.set_defaults(func=_cmd_spoof)

    near = sub.add_parser("nearby", help="Filter and sort candidates from a JSON file by distance.")
    near.add_argument("--lat", required=True, type=float)
    near.add_argument("--lon", required=True, type=float)
    near.add_argument("--max-distance", dest="max_distance", required=True, type=float)
    near.add_argument(
        "--candidates",
        required=True,
        help="JSON list of {coordinates: [lon, lat], data: {...}} (relative paths resolve from the repo root)",
    )
    near.add_argument("--json", action="store_true")
    near.set_defaults(func=_cmd_nearby)
    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint callable used by `python -m geoverify.cli`."""
    configure_logging()
    parser = build_parser()
    args = parser.parse_args(argv)
    func: Any = getattr(args, "func")
    return int(func(args))


if __name__ == "__main__":
    raise SystemExit(main())
