"""
Device spoofing heuristic.

An opt-in risk score over device-reported flags. The verifier never calls this;
the calling workflow combines both verdicts into its own accept/reject decision.

Scoring:
- each triggered check adds its configured weight (`spoofing.check_weights`)
- the total is capped at 1.0
- the assessment passes while `risk_score <= spoofing.pass_threshold`
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

from pydantic import ValidationError

from geoverify.config.settings import Settings, get_settings
from geoverify.domain.models import DeviceSignal, SpoofAssessment, SpoofCheck

logger = logging.getLogger(__name__)


def _check(name: str, *, triggered: bool, triggered_details: str, clear_details: str) -> SpoofCheck:
    return SpoofCheck(
        check=name,
        passed=not triggered,
        details=triggered_details if triggered else clear_details,
    )


def detect_spoofing(
    signal: DeviceSignal | Mapping[str, Any] | None,
    *,
    settings: Settings | None = None,
) -> SpoofAssessment:
    """Score device signals for location spoofing risk (permissive when no signal is given).

    Never raises. An empty mapping is still a signal (both checks run and pass); a
    payload without readable flags is scored as a clean device.
    """
    if signal is None or (not isinstance(signal, Mapping) and not signal):
        return SpoofAssessment(passed=True, checks=(), risk_score=0.0)
    if not isinstance(signal, DeviceSignal):
        try:
            signal = DeviceSignal.model_validate(signal)
        except ValidationError as exc:
            logger.debug("Device signal unreadable, treating flags as unset: %s", exc.errors(include_url=False))
            signal = DeviceSignal()

    cfg = (settings or get_settings()).spoofing
    weights = cfg.check_weights

    checks = (
        _check(
            "is_emulator",
            triggered=signal.is_emulator,
            triggered_details="Device reports emulator",
            clear_details="Not an emulator",
        ),
        _check(
            "mock_location",
            triggered=signal.is_mock_location,
            triggered_details="Mock location enabled",
            clear_details="Mock location not detected",
        ),
    )

    raw_score = sum(float(weights.get(c.check, 0.0)) for c in checks if not c.passed)
    risk_score = min(1.0, max(0.0, raw_score))
    return SpoofAssessment(passed=risk_score <= cfg.pass_threshold, checks=checks, risk_score=risk_score)
