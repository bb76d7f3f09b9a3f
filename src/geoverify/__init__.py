"""
GeoVerify: geolocation verification core.

Pure, stateless functions for spherical geodesy, coordinate validation, radius
verification, device spoofing heuristics, and nearby-location filtering.
"""

from geoverify.core.geo import (
    BoundingBox,
    GeoPoint,
    RadiusCheck,
    bearing,
    bounding_box,
    direction,
    distance,
    format_distance,
    haversine_m,
    is_within_radius,
    to_degrees,
    to_radians,
)
from geoverify.core.validation import is_valid_coordinates
from geoverify.domain.models import (
    DeviceSignal,
    NearbyCandidate,
    NearbyLocation,
    SpoofAssessment,
    SpoofCheck,
    SubmittedLocation,
    TargetLocation,
    VerificationResult,
)
from geoverify.query.nearby import find_nearby
from geoverify.verification.spoofing import detect_spoofing
from geoverify.verification.verify import verify_location

__all__ = [
    "BoundingBox",
    "DeviceSignal",
    "GeoPoint",
    "NearbyCandidate",
    "NearbyLocation",
    "RadiusCheck",
    "SpoofAssessment",
    "SpoofCheck",
    "SubmittedLocation",
    "TargetLocation",
    "VerificationResult",
    "bearing",
    "bounding_box",
    "detect_spoofing",
    "direction",
    "distance",
    "find_nearby",
    "format_distance",
    "haversine_m",
    "is_valid_coordinates",
    "is_within_radius",
    "to_degrees",
    "to_radians",
    "verify_location",
]
