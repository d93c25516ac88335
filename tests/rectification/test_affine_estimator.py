"""
Unit tests for affine_estimator module and AffineCoefficients.
"""

import numpy as np
import pytest

from src.common.types import Point
from src.rectification.affine_estimator import (
    build_affine_system,
    estimate_affine,
    triangle_area2,
)
from src.rectification.types import AffineCoefficients, EstimateStatus


def _points(coords):
    return [Point(x=x, y=y) for x, y in coords]


class TestBuildAffineSystem:
    """Tests for the 6x6 system layout."""

    def test_rows_per_correspondence(self):
        """Test that each pair contributes an x-row and a y-row."""
        src = _points([(1, 2), (3, 4), (5, 7)])
        dst = _points([(10, 20), (30, 40), (50, 70)])

        matrix, vector = build_affine_system(src, dst)

        assert matrix.shape == (6, 6)
        assert vector.shape == (6,)
        np.testing.assert_array_equal(matrix[0], [1, 2, 1, 0, 0, 0])
        np.testing.assert_array_equal(matrix[1], [0, 0, 0, 1, 2, 1])
        np.testing.assert_array_equal(matrix[4], [5, 7, 1, 0, 0, 0])
        np.testing.assert_array_equal(vector, [10, 20, 30, 40, 50, 70])

    def test_wrong_point_count(self):
        """Test that anything but 3 points is rejected."""
        with pytest.raises(ValueError, match="Expected exactly 3 source points"):
            build_affine_system(_points([(0, 0), (1, 0)]), _points([(0, 0)] * 3))

        with pytest.raises(ValueError, match="Expected exactly 3 destination points"):
            build_affine_system(_points([(0, 0), (1, 0), (0, 1)]), _points([(0, 0)] * 4))


class TestEstimateAffine:
    """Tests for affine estimation."""

    def test_recovers_known_map(self):
        """Test that a known affine map is recovered from 3 correspondences."""
        truth = AffineCoefficients(2.0, 0.5, 5.0, -0.3, 1.5, 7.0)
        src = _points([(0, 0), (100, 10), (20, 80)])
        dst = [Point(x=u, y=v) for u, v in (truth.apply(p.x, p.y) for p in src)]

        estimate = estimate_affine(src, dst)

        assert estimate.status == EstimateStatus.OK
        got = estimate.coefficients
        np.testing.assert_allclose(
            [got.a, got.b, got.c, got.d, got.e, got.f],
            [2.0, 0.5, 5.0, -0.3, 1.5, 7.0],
            atol=1e-9,
        )

    def test_maps_source_vertices_onto_destination(self):
        """Test that each source vertex lands on its destination vertex."""
        src = _points([(100, 150), (1900, 180), (1920, 2800)])
        dst = _points([(0, 0), (1200, 0), (1200, 1600)])

        coeffs = estimate_affine(src, dst).coefficients

        for s, d in zip(src, dst):
            x, y = coeffs.apply(s.x, s.y)
            assert x == pytest.approx(d.x, abs=1e-6)
            assert y == pytest.approx(d.y, abs=1e-6)

    def test_collinear_source_is_degenerate(self):
        """Test that collinear source points are tagged, not raised."""
        src = _points([(0, 0), (10, 10), (20, 20)])
        dst = _points([(0, 0), (100, 0), (100, 100)])

        estimate = estimate_affine(src, dst)

        assert estimate.status == EstimateStatus.DEGENERATE
        assert not estimate.is_ok()
        c = estimate.coefficients
        assert np.all(np.isfinite([c.a, c.b, c.c, c.d, c.e, c.f]))

    def test_identical_source_points_are_degenerate(self):
        """Test the fully collapsed triangle."""
        src = _points([(50, 50)] * 3)
        dst = _points([(0, 0), (100, 0), (100, 100)])

        assert estimate_affine(src, dst).status == EstimateStatus.DEGENERATE

    def test_collinear_destination_is_degenerate(self):
        """Test that a map with a singular linear part is tagged."""
        src = _points([(0, 0), (10, 0), (0, 10)])
        dst = _points([(0, 0), (5, 5), (10, 10)])

        assert estimate_affine(src, dst).status == EstimateStatus.DEGENERATE


class TestTriangleArea:
    def test_signed_area(self):
        p = _points([(0, 0), (4, 0), (0, 3)])
        assert triangle_area2(*p) == pytest.approx(12.0)
        assert triangle_area2(p[0], p[2], p[1]) == pytest.approx(-12.0)


class TestAffineCoefficients:
    """Tests for the coefficient container."""

    def test_inverse_round_trip(self):
        coeffs = AffineCoefficients(1.5, 0.2, -30.0, -0.1, 0.8, 12.0)
        inverse = coeffs.inverse()

        x, y = coeffs.apply(123.0, 456.0)
        back = inverse.apply(x, y)

        assert back == pytest.approx((123.0, 456.0))

    def test_singular_inverse_raises(self):
        with pytest.raises(ValueError, match="Singular transform"):
            AffineCoefficients(1.0, 2.0, 0.0, 2.0, 4.0, 0.0).inverse()

    def test_identity(self):
        identity = AffineCoefficients.identity()
        assert identity.apply(3.0, 4.0) == (3.0, 4.0)
        np.testing.assert_array_equal(
            identity.to_matrix(), [[1, 0, 0], [0, 1, 0]]
        )
