"""
Tests for the geo-proximity validator.

Covers:
- Haversine distance (identity, symmetry, known meridian arc)
- Radius containment, including the boundary
- Coordinate and radius validation
- Human-readable distance formatting
"""

from decimal import Decimal

import pytest

from workforce_engines.geo import (
    calculate_distance,
    check_location,
    format_distance,
    is_valid_coordinates,
    is_within_radius,
    validate_coordinates,
)
from workforce_kernel.exceptions import InvalidCoordinatesError, InvalidRadiusError

RIYADH = (Decimal("24.7136"), Decimal("46.6753"))
JEDDAH = (Decimal("21.5433"), Decimal("39.1728"))


class TestCalculateDistance:

    def test_identical_points_are_zero(self):
        assert calculate_distance(*RIYADH, *RIYADH) == 0.0

    def test_symmetric(self):
        assert calculate_distance(*RIYADH, *JEDDAH) == pytest.approx(
            calculate_distance(*JEDDAH, *RIYADH)
        )

    def test_one_degree_of_latitude(self):
        # 2 * pi * 6_371_000 / 360
        assert calculate_distance(0, 0, 1, 0) == pytest.approx(111_194.93, abs=0.5)

    def test_riyadh_to_jeddah(self):
        assert calculate_distance(*RIYADH, *JEDDAH) == pytest.approx(845_000, rel=0.01)

    def test_accepts_floats_and_decimals(self):
        assert calculate_distance(24.7136, 46.6753, *RIYADH) == pytest.approx(0.0, abs=1e-6)

    def test_missing_coordinate_rejected(self):
        with pytest.raises(InvalidCoordinatesError):
            calculate_distance(None, 46.0, 24.0, 46.0)


class TestRadius:

    def test_inside(self):
        assert is_within_radius(Decimal("24.7137"), RIYADH[1], *RIYADH, Decimal("100"))

    def test_outside(self):
        assert not is_within_radius(Decimal("24.7236"), RIYADH[1], *RIYADH, Decimal("100"))

    def test_zero_radius_only_exact_point(self):
        assert is_within_radius(*RIYADH, *RIYADH, 0)
        assert not is_within_radius(Decimal("24.7137"), RIYADH[1], *RIYADH, 0)

    def test_check_location_reports_distance(self):
        check = check_location(Decimal("24.7236"), RIYADH[1], *RIYADH, Decimal("100"))
        assert check.within_radius is False
        assert check.distance_meters == pytest.approx(1111.9, abs=1.0)
        assert check.radius_meters == Decimal("100")

    def test_negative_radius_rejected(self):
        with pytest.raises(InvalidRadiusError):
            is_within_radius(*RIYADH, *RIYADH, Decimal("-1"))

    def test_missing_radius_rejected(self):
        with pytest.raises(InvalidRadiusError):
            check_location(*RIYADH, *RIYADH, None)


class TestValidation:

    @pytest.mark.parametrize(
        "lat, lon",
        [(90, 180), (-90, -180), (0, 0), (Decimal("24.5"), Decimal("-46.5"))],
    )
    def test_valid(self, lat, lon):
        assert is_valid_coordinates(lat, lon)
        validate_coordinates(lat, lon)

    @pytest.mark.parametrize(
        "lat, lon",
        [(90.0001, 0), (-91, 0), (0, 180.5), (0, -181), (None, 0), (0, None), (float("nan"), 0)],
    )
    def test_invalid(self, lat, lon):
        assert not is_valid_coordinates(lat, lon)
        with pytest.raises(InvalidCoordinatesError):
            validate_coordinates(lat, lon)

    def test_error_carries_code(self):
        with pytest.raises(InvalidCoordinatesError) as exc_info:
            validate_coordinates(95, 0)
        assert exc_info.value.code == "INVALID_COORDINATES"


class TestFormatDistance:

    def test_none(self):
        assert format_distance(None) == "N/A"

    def test_meters(self):
        assert format_distance(349.6) == "350 m"

    def test_kilometers(self):
        assert format_distance(1250.0) == "1.25 km"
