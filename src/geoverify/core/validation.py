"""
Coordinate validation.

The geodesy primitives in `geoverify.core.geo` trust their inputs, so every caller
that handles user-supplied coordinates runs this guard first.
"""

from __future__ import annotations

import math
from numbers import Real
from typing import Any


def _is_number(value: Any) -> bool:
    # bool is an int subclass; a True latitude is a payload bug, not a coordinate.
    return isinstance(value, Real) and not isinstance(value, bool)


def is_valid_coordinates(lat: Any, lon: Any) -> bool:
    """Return True when `lat`/`lon` are finite numbers inside the WGS84 degree ranges."""
    if not (_is_number(lat) and _is_number(lon)):
        return False
    if not (math.isfinite(lat) and math.isfinite(lon)):
        return False
    return -90 <= lat <= 90 and -180 <= lon <= 180
