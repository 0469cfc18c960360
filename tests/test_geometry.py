import math

import pytest

from forcegraph.geometry import (
    DegenerateGeometryError,
    add,
    angle,
    bounding_box,
    difference,
    distance,
    length,
    midpoint,
    normalize,
    reciprocal_angle,
    scale,
    shift_along_angle,
)


def test_difference_points_from_first_to_second():
    assert difference((1.0, 2.0), (4.0, 6.0)) == (3.0, 4.0)


def test_distance_is_symmetric():
    a, b = (1.5, -2.0), (-3.0, 7.25)
    assert distance(a, b) == distance(b, a)
    assert distance((0, 0), (3, 4)) == pytest.approx(5.0)


def test_midpoint_is_symmetric():
    a, b = (0.0, 0.0), (2.0, 2.0)
    assert midpoint(a, b) == midpoint(b, a)
    assert midpoint(a, b)[0] == pytest.approx(1.0)


def test_normalize_unit_length():
    assert normalize((3.0, 4.0)) == pytest.approx((0.6, 0.8))


def test_normalize_zero_vector_raises():
    with pytest.raises(DegenerateGeometryError):
        normalize((0.0, 0.0))


def test_degenerate_error_is_value_error():
    assert issubclass(DegenerateGeometryError, ValueError)


class TestAngle:
    def test_diagonal(self):
        assert angle((0, 0), (2, 2)) == pytest.approx(math.pi / 4)

    def test_ignores_orientation(self):
        a, b = (2.0, 3.0), (-1.0, 7.0)
        assert angle(a, b) == pytest.approx(angle(b, a))

    def test_is_not_four_quadrant(self):
        # atan2 would give -3pi/4 here.
        assert angle((0, 0), (-1, -1)) == pytest.approx(math.pi / 4)

    def test_vertical_line(self):
        assert abs(angle((0, 0), (0, 5))) == pytest.approx(math.pi / 2)

    def test_coincident_points(self):
        assert angle((1, 1), (1, 1)) == 0.0

    def test_reciprocal_is_perpendicular(self):
        a, b = (0.0, 0.0), (3.0, 1.0)
        theta = reciprocal_angle(a, b)
        direction = difference(a, b)
        dot = math.cos(theta) * direction[0] + math.sin(theta) * direction[1]
        assert dot == pytest.approx(0.0, abs=1e-9)


def test_control_point_placement():
    point1, point2 = (2.0, 3.0), (1.0, 2.0)
    control = shift_along_angle(midpoint(point1, point2), reciprocal_angle(point1, point2), -1)
    assert control[0] == pytest.approx(0.7929, abs=1e-4)
    assert control[1] == pytest.approx(3.2071, abs=1e-4)


@pytest.mark.parametrize("theta", [0.0, 0.7, -1.2, math.pi / 2, 3.0])
@pytest.mark.parametrize("magnitude", [0.5, 12.0, -4.0])
def test_shift_round_trip(theta, magnitude):
    start = (13.5, -2.25)
    moved = shift_along_angle(start, theta, magnitude)
    back = shift_along_angle(moved, theta, -magnitude)
    assert back == pytest.approx(start)


def test_bounding_box():
    assert bounding_box([(1, 5), (-2, 3), (4, -1)]) == (-2, -1, 4, 5)
    assert bounding_box([]) is None


def test_vector_arithmetic():
    assert add((1.0, 2.0), (3.0, -4.0)) == (4.0, -2.0)
    assert scale((1.5, -2.0), 2.0) == (3.0, -4.0)
    assert length((3.0, 4.0)) == pytest.approx(5.0)
