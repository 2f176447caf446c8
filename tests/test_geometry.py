"""Tests for geometric predicates (pyearcut/geometry.py)."""

import pytest

from pyearcut.geometry import (
    is_point_in_box,
    orient,
    point_in_triangle,
    ring_signed_area,
)
from pyearcut.topology import Node


def test_orient():
    a = Node(0, 0.0, 0.0)
    b = Node(1, 1.0, 0.0)
    c = Node(2, 0.0, 1.0)

    assert orient(a, b, c) == 1
    assert orient(a, c, b) == -1
    assert orient(a, b, Node(3, 2.0, 0.0)) == 0


def test_orient_is_exact():
    """Nearly collinear points are still classified correctly."""
    a = Node(0, 0.1, 0.1)
    b = Node(1, 0.3, 0.3)
    c = Node(2, 0.5, 0.5 + 2**-50)

    assert orient(a, b, c) == 1


def test_is_point_in_box():
    assert is_point_in_box((0, 0), (2, 2), (1, 1))
    assert is_point_in_box((2, 2), (0, 0), (2, 0))
    assert not is_point_in_box((0, 0), (2, 2), (3, 1))
    assert is_point_in_box((0, 0), (2, 2), (2.1, 1), eps=0.2)


class TestPointInTriangle:
    """Inclusive point in triangle test on a counterclockwise triangle."""

    tri = (0.0, 0.0, 4.0, 0.0, 0.0, 4.0)

    def test_interior_point(self):
        assert point_in_triangle(*self.tri, 1.0, 1.0)

    def test_point_on_edge(self):
        """Edge points count as inside."""
        assert point_in_triangle(*self.tri, 2.0, 0.0)
        assert point_in_triangle(*self.tri, 2.0, 2.0)

    def test_corner(self):
        assert point_in_triangle(*self.tri, 0.0, 0.0)

    def test_exterior_point(self):
        assert not point_in_triangle(*self.tri, 3.0, 3.0)
        assert not point_in_triangle(*self.tri, -1.0, 1.0)

    def test_clockwise_triangle(self):
        """The corners must be given counterclockwise."""
        assert not point_in_triangle(0.0, 0.0, 0.0, 4.0, 4.0, 0.0, 1.0, 1.0)


class TestRingSignedArea:
    """Shoelace area of a ring stored in a flat buffer."""

    def test_counterclockwise_is_positive(self):
        data = [0, 0, 10, 0, 10, 10, 0, 10]
        assert ring_signed_area(data, 0, len(data)) == pytest.approx(100.0)

    def test_clockwise_is_negative(self):
        data = [0, 0, 0, 10, 10, 10, 10, 0]
        assert ring_signed_area(data, 0, len(data)) == pytest.approx(-100.0)

    def test_closing_point_adds_nothing(self):
        data = [0, 0, 10, 0, 10, 10, 0, 10, 0, 0]
        assert ring_signed_area(data, 0, len(data)) == pytest.approx(100.0)

    def test_slice_and_stride(self):
        """Only the requested slice is used, every dim-th value is an x."""
        data = [9, 9, 9, 0, 0, 5, 4, 0, 5, 0, 3, 5]
        assert ring_signed_area(data, 3, 12, dim=3) == pytest.approx(6.0)

    def test_degenerate_ring(self):
        assert ring_signed_area([1, 1], 0, 2) == 0.0
        assert ring_signed_area([0, 0, 1, 1, 2, 2], 0, 6) == 0.0
