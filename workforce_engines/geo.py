"""
Geo-Proximity Validator (``workforce_engines.geo``).

Responsibility
--------------
Great-circle distance between two coordinates, radius containment, and
coordinate range validation for check-in / check-out geofencing.

Architecture position
---------------------
**Engines layer** -- pure functional core.  ZERO I/O, ZERO database,
ZERO clock reads.

Invariants enforced
-------------------
* Distance uses the haversine formula on a sphere of mean radius
  6,371,000 m and is returned in meters as a float.
* Latitude must lie in [-90, 90] and longitude in [-180, 180]; radius must
  be non-negative.  Values are never clamped.

Failure modes
-------------
* ``InvalidCoordinatesError`` for a missing or out-of-range coordinate.
* ``InvalidRadiusError`` for a missing or negative radius.
  Both indicate a configuration or client defect, not a business outcome.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from decimal import Decimal
from typing import Union

from workforce_kernel.exceptions import InvalidCoordinatesError, InvalidRadiusError

Degrees = Union[Decimal, float, int]

EARTH_RADIUS_METERS = 6_371_000.0

MIN_LATITUDE, MAX_LATITUDE = -90.0, 90.0
MIN_LONGITUDE, MAX_LONGITUDE = -180.0, 180.0


@dataclass(frozen=True)
class LocationCheck:
    """Distance from a site and whether it falls inside the allowed radius."""

    distance_meters: float
    radius_meters: Decimal
    within_radius: bool


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


def is_valid_coordinates(latitude: Degrees | None, longitude: Degrees | None) -> bool:
    """True when both values are present and within range."""
    if latitude is None or longitude is None:
        return False
    lat, lon = float(latitude), float(longitude)
    if math.isnan(lat) or math.isnan(lon):
        return False
    return MIN_LATITUDE <= lat <= MAX_LATITUDE and MIN_LONGITUDE <= lon <= MAX_LONGITUDE


def validate_coordinates(latitude: Degrees | None, longitude: Degrees | None) -> None:
    """Raise ``InvalidCoordinatesError`` unless the pair is usable."""
    if latitude is None or longitude is None:
        raise InvalidCoordinatesError(latitude, longitude, "latitude and longitude are required")
    lat, lon = float(latitude), float(longitude)
    if math.isnan(lat) or not MIN_LATITUDE <= lat <= MAX_LATITUDE:
        raise InvalidCoordinatesError(latitude, longitude, "latitude must be between -90 and 90")
    if math.isnan(lon) or not MIN_LONGITUDE <= lon <= MAX_LONGITUDE:
        raise InvalidCoordinatesError(latitude, longitude, "longitude must be between -180 and 180")


# ---------------------------------------------------------------------------
# Distance
# ---------------------------------------------------------------------------


def calculate_distance(
    lat1: Degrees | None,
    lon1: Degrees | None,
    lat2: Degrees | None,
    lon2: Degrees | None,
) -> float:
    """Haversine great-circle distance in meters.

    Args:
        lat1, lon1: First point in decimal degrees.
        lat2, lon2: Second point in decimal degrees.

    Returns:
        Distance in meters.  Symmetric, and 0.0 for identical points.

    Raises:
        InvalidCoordinatesError: if any coordinate is missing or out of range.
    """
    validate_coordinates(lat1, lon1)
    validate_coordinates(lat2, lon2)

    phi1 = math.radians(float(lat1))
    phi2 = math.radians(float(lat2))
    d_phi = math.radians(float(lat2) - float(lat1))
    d_lambda = math.radians(float(lon2) - float(lon1))

    a = (
        math.sin(d_phi / 2) ** 2
        + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    )
    # float error can push a past 1.0 for near-antipodal points
    a = min(1.0, a)
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_METERS * c


def _validate_radius(radius_meters: Degrees | None) -> Decimal:
    if radius_meters is None:
        raise InvalidRadiusError(radius_meters)
    radius = Decimal(str(radius_meters))
    if radius.is_nan() or radius < 0:
        raise InvalidRadiusError(radius_meters)
    return radius


def is_within_radius(
    latitude: Degrees | None,
    longitude: Degrees | None,
    site_latitude: Degrees | None,
    site_longitude: Degrees | None,
    radius_meters: Degrees | None,
) -> bool:
    """True when the point lies at most ``radius_meters`` from the site."""
    return check_location(
        latitude, longitude, site_latitude, site_longitude, radius_meters
    ).within_radius


def check_location(
    latitude: Degrees | None,
    longitude: Degrees | None,
    site_latitude: Degrees | None,
    site_longitude: Degrees | None,
    radius_meters: Degrees | None,
) -> LocationCheck:
    """Distance and containment in one pass."""
    radius = _validate_radius(radius_meters)
    distance = calculate_distance(latitude, longitude, site_latitude, site_longitude)
    return LocationCheck(
        distance_meters=distance,
        radius_meters=radius,
        within_radius=distance <= float(radius),
    )


def format_distance(distance_meters: float | None) -> str:
    """Human-readable distance: "N/A", "350 m" or "1.25 km"."""
    if distance_meters is None:
        return "N/A"
    if distance_meters >= 1000:
        return f"{distance_meters / 1000:.2f} km"
    return f"{distance_meters:.0f} m"
