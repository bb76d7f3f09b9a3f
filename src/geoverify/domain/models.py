"""
Domain models (Pydantic).

These types are the normalized shapes exchanged with the calling service:
- request inputs (`SubmittedLocation`, `TargetLocation`, `DeviceSignal`)
- candidate projections supplied by the persistence layer (`NearbyCandidate`)
- verdicts (`VerificationResult`, `SpoofAssessment`, `NearbyLocation`)

All of them are frozen value objects built fresh for each call.

Coordinates stored on targets and candidates follow the GeoJSON order
`(longitude, latitude)`; submitted positions use named fields instead.
"""

from __future__ import annotations

import math
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, StrictFloat, StrictInt, field_validator

# Reported positions must be real JSON numbers; "12.5" strings are rejected.
StrictNumber = StrictInt | StrictFloat


def _finite_or_none(value: Any) -> float | None:
    # Side fields never reject a payload: unusable values read as "not reported".
    if value is None or isinstance(value, bool):
        return None
    try:
        out = float(value)
    except (TypeError, ValueError):
        return None
    return out if math.isfinite(out) else None


class SubmittedLocation(BaseModel):
    """A single position reported by the user's device at verification time."""

    model_config = ConfigDict(frozen=True)

    latitude: StrictNumber | None = None
    longitude: StrictNumber | None = None
    accuracy: float | None = None

    @field_validator("accuracy", mode="before")
    @classmethod
    def _lenient_accuracy(cls, value: Any) -> float | None:
        value = _finite_or_none(value)
        return value if value is not None and value >= 0 else None


class TargetLocation(BaseModel):
    """A quest/story target: a `(lon, lat)` pair plus the allowed radius in meters.

    An unusable `radius_meters` is kept as None; the verifier then applies the
    configured default radius.
    """

    model_config = ConfigDict(frozen=True)

    coordinates: tuple[float, float] | None = None
    radius_meters: float | None = Field(
        default=None, validation_alias=AliasChoices("radius_meters", "radiusMeters")
    )

    @field_validator("radius_meters", mode="before")
    @classmethod
    def _lenient_radius(cls, value: Any) -> float | None:
        return _finite_or_none(value)

    @property
    def lon(self) -> float | None:
        return self.coordinates[0] if self.coordinates is not None else None

    @property
    def lat(self) -> float | None:
        return self.coordinates[1] if self.coordinates is not None else None


class VerificationResult(BaseModel):
    """Verdict for one submitted-vs-target comparison."""

    model_config = ConfigDict(frozen=True)

    passed: bool
    within_radius: bool
    distance_meters: int | None
    allowed_radius: float | None
    message: str


class DeviceSignal(BaseModel):
    """Optional device flags used by the spoofing heuristic."""

    model_config = ConfigDict(frozen=True, from_attributes=True)

    is_emulator: bool = Field(
        default=False, validation_alias=AliasChoices("is_emulator", "isEmulator")
    )
    is_mock_location: bool = Field(
        default=False, validation_alias=AliasChoices("is_mock_location", "isMockLocation")
    )

    @field_validator("is_emulator", "is_mock_location", mode="before")
    @classmethod
    def _truthy(cls, value: Any) -> bool:
        # Device SDKs report these flags loosely ("1", 1, "yes"); any truthy value counts.
        return bool(value)


class SpoofCheck(BaseModel):
    model_config = ConfigDict(frozen=True)

    check: str
    passed: bool
    details: str


class SpoofAssessment(BaseModel):
    """Risk scoring over device signals; `checks` keeps evaluation order."""

    model_config = ConfigDict(frozen=True)

    passed: bool
    checks: tuple[SpoofCheck, ...] = ()
    risk_score: float = Field(..., ge=0, le=1)


class NearbyCandidate(BaseModel):
    """A stored location projected to `(lon, lat)` plus its flat data payload."""

    model_config = ConfigDict(frozen=True)

    coordinates: tuple[float, float]
    data: dict[str, Any] = Field(default_factory=dict)

    @property
    def lon(self) -> float:
        return self.coordinates[0]

    @property
    def lat(self) -> float:
        return self.coordinates[1]


class NearbyLocation(BaseModel):
    """A candidate within range, annotated with its distance from the user (meters)."""

    model_config = ConfigDict(frozen=True)

    data: dict[str, Any]
    distance: float

    def to_dict(self) -> dict[str, Any]:
        return {**self.data, "distance": self.distance}
