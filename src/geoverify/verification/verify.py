from __future__ import annotations

# Location verification: decide whether a submitted position is close enough to a target.
#
# The check runs as a staged pipeline:
#   presence -> target configuration -> coordinate ranges -> distance evaluation
# Each stage returns a `StageOutcome` holding either its value or a ready-made failed
# `VerificationResult`; the first failure is the verdict.
#
# Contract: `verify_location` always returns. Bad payloads, out-of-range numbers and
# unexpected faults all come back as `VerificationResult(passed=False, ...)`.

import logging
import math
from dataclasses import dataclass
from typing import Any, Generic, Mapping, TypeVar, Union

from pydantic import ValidationError

from geoverify.config.settings import Settings, get_settings
from geoverify.core.geo import distance, round_half_up
from geoverify.core.validation import is_valid_coordinates
from geoverify.domain.models import SubmittedLocation, TargetLocation, VerificationResult

logger = logging.getLogger(__name__)

T = TypeVar("T")

MSG_NOT_PROVIDED = "Location data not provided"
MSG_NOT_CONFIGURED = "Quest target location not configured"
MSG_INVALID = "Invalid coordinates"
MSG_FAILED = "Location verification failed"

SubmittedInput = Union[SubmittedLocation, Mapping[str, Any], None]
TargetInput = Union[TargetLocation, Mapping[str, Any], None]


@dataclass(frozen=True)
class StageOutcome(Generic[T]):
    """Tagged result of one pipeline stage: a value on success, a verdict on failure."""

    value: T | None = None
    failure: VerificationResult | None = None

    @property
    def ok(self) -> bool:
        return self.failure is None


def _failure(message: str, *, allowed_radius: float | None) -> VerificationResult:
    return VerificationResult(
        passed=False,
        within_radius=False,
        distance_meters=None,
        allowed_radius=allowed_radius,
        message=message,
    )


def _format_meters(value: float) -> str:
    # 50.0 -> "50", 12.5 -> "12.5"
    return f"{value:g}"


def _raw_radius(target: TargetInput) -> Any:
    if target is None:
        return None
    if isinstance(target, TargetLocation):
        return target.radius_meters
    if isinstance(target, Mapping):
        if "radius_meters" in target:
            return target["radius_meters"]
        return target.get("radiusMeters")
    return None


def _as_float(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        out = float(value)
    except (TypeError, ValueError):
        return None
    return out if math.isfinite(out) else None


def declared_radius(target: TargetInput) -> float | None:
    """The target's own radius when it is a positive finite number, else None."""
    value = _as_float(_raw_radius(target))
    return value if value is not None and value > 0 else None


def resolve_allowed_radius(target: TargetInput, *, settings: Settings) -> float:
    """Apply the default (missing/zero/invalid radius) and then the floor."""
    cfg = settings.verification
    value = _as_float(_raw_radius(target))
    if not value:
        value = float(cfg.default_radius_m)
    return max(float(cfg.radius_floor_m), value)


def _check_presence(submitted: SubmittedInput, target: TargetInput) -> StageOutcome[tuple[Any, Any]]:
    not_provided = StageOutcome(failure=_failure(MSG_NOT_PROVIDED, allowed_radius=declared_radius(target)))
    if submitted is None:
        return not_provided
    if not isinstance(submitted, SubmittedLocation):
        try:
            submitted = SubmittedLocation.model_validate(submitted)
        except ValidationError as exc:
            logger.debug("Submitted location rejected: %s", exc.errors(include_url=False))
            return not_provided
    if submitted.latitude is None or submitted.longitude is None:
        return not_provided
    return StageOutcome(value=(submitted.latitude, submitted.longitude))


def _check_target(target: TargetInput, *, allowed_radius: float) -> StageOutcome[tuple[Any, Any]]:
    not_configured = StageOutcome(failure=_failure(MSG_NOT_CONFIGURED, allowed_radius=allowed_radius))
    if target is None:
        return not_configured
    if not isinstance(target, TargetLocation):
        try:
            target = TargetLocation.model_validate(target)
        except ValidationError as exc:
            logger.debug("Target location rejected: %s", exc.errors(include_url=False))
            return not_configured
    if target.coordinates is None:
        return not_configured
    # Stored order is (lon, lat); hand back (lat, lon) like the submitted pair.
    return StageOutcome(value=(target.lat, target.lon))


def _check_ranges(
    user: tuple[Any, Any], target: tuple[Any, Any], *, allowed_radius: float
) -> StageOutcome[tuple[tuple[float, float], tuple[float, float]]]:
    if not is_valid_coordinates(*user) or not is_valid_coordinates(*target):
        return StageOutcome(failure=_failure(MSG_INVALID, allowed_radius=allowed_radius))
    return StageOutcome(value=(user, target))


def _evaluate(
    user: tuple[float, float], target: tuple[float, float], *, allowed_radius: float
) -> VerificationResult:
    distance_meters = round_half_up(distance(user[0], user[1], target[0], target[1]))
    within_radius = distance_meters <= allowed_radius
    if within_radius:
        message = f"Location verified ({distance_meters}m away)"
    else:
        message = f"Location mismatch ({distance_meters}m away, allowed {_format_meters(allowed_radius)}m)"
    return VerificationResult(
        passed=within_radius,
        within_radius=within_radius,
        distance_meters=distance_meters,
        allowed_radius=allowed_radius,
        message=message,
    )


def _run_pipeline(submitted: SubmittedInput, target: TargetInput, *, settings: Settings) -> VerificationResult:
    presence = _check_presence(submitted, target)
    if not presence.ok:
        return presence.failure

    # Computed before the target check so every later verdict carries a usable radius.
    allowed_radius = resolve_allowed_radius(target, settings=settings)

    configured = _check_target(target, allowed_radius=allowed_radius)
    if not configured.ok:
        return configured.failure

    ranges = _check_ranges(presence.value, configured.value, allowed_radius=allowed_radius)
    if not ranges.ok:
        return ranges.failure

    user, target_point = ranges.value
    return _evaluate(user, target_point, allowed_radius=allowed_radius)


def verify_location(
    submitted: SubmittedInput,
    target: TargetInput,
    *,
    settings: Settings | None = None,
) -> VerificationResult:
    """Verify a submitted position against a target location and its allowed radius.

    Accepts the normalized models or plain mappings with the same fields
    (`radiusMeters` is accepted as an alias of `radius_meters`).
    Never raises: every failure is returned as a result with `passed=False`.
    """
    try:
        settings = settings or get_settings()
        result = _run_pipeline(submitted, target, settings=settings)
    except Exception as e:
        logger.warning("Location verification failed unexpectedly: %s", str(e))
        return _failure(str(e) or MSG_FAILED, allowed_radius=declared_radius(target))

    if not result.passed:
        logger.debug("Location verification failed: %s", result.message)
    return result
