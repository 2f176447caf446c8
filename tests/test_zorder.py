"""Tests for the ear emptiness strategies (pyearcut/zorder.py)."""

import numpy as np
import pytest

from pyearcut.topology import linked_list, ring_nodes
from pyearcut.utils import Z_ORDER_SCALE
from pyearcut.zorder import (
    DirectScan,
    ZOrderIndex,
    compute_bbox,
    select_ear_test,
    z_order,
)


def star_buffer(n_points: int) -> list[float]:
    angles = np.linspace(0.0, 2 * np.pi, n_points, endpoint=False)
    radii = np.where(np.arange(n_points) % 2 == 0, 10.0, 6.0)
    points = np.column_stack([radii * np.cos(angles), radii * np.sin(angles)])
    return points.reshape(-1).tolist()


@pytest.mark.parametrize(
    "x, y, expected",
    [(0, 0, 0), (1, 0, 1), (0, 1, 2), (1, 1, 3), (2, 0, 4), (3, 3, 15)],
)
def test_z_order_interleaves_bits(x, y, expected):
    assert z_order(x, y, 0.0, 0.0, 1.0) == expected


def test_z_order_covers_grid():
    """The far corner of the bounding box maps to the largest 30-bit code."""
    assert z_order(1.0, 1.0, 0.0, 0.0, Z_ORDER_SCALE) == 2**30 - 1
    assert z_order(-5.0, -5.0, -5.0, -5.0, Z_ORDER_SCALE) == 0


def test_compute_bbox():
    data = [1, 2, 9, 9, -3, 4, 5, 7, 0, 0, 0, 8]
    assert compute_bbox(data, 2) == (-3, 0, 9, 9)
    assert compute_bbox(data, 3) == (0, -3, 9, 7)


class TestZOrderIndex:
    """Spatial index built over all vertices of the buffer."""

    def test_from_buffer(self):
        index = ZOrderIndex.from_buffer([0, 0, 4, 0, 4, 2], 2)

        assert (index.min_x, index.min_y) == (0, 0)
        assert index.inv_size == pytest.approx(Z_ORDER_SCALE / 4)

    def test_from_buffer_single_location(self):
        assert ZOrderIndex.from_buffer([1, 1, 1, 1, 1, 1], 2) is None

    def test_index_sorts_nodes(self):
        data = star_buffer(40)
        last = linked_list(data, 0, len(data), 2, ccw=True)
        index = ZOrderIndex.from_buffer(data, 2)

        index.index(last)

        nodes = ring_nodes(last)
        head = next(p for p in nodes if p.prev_z is None)
        visited = []
        p = head
        while p is not None:
            visited.append(p)
            p = p.next_z

        assert len(visited) == len(nodes)
        codes = [p.z for p in visited]
        assert codes == sorted(codes)

    @pytest.mark.parametrize("n_points", [16, 60, 150])
    def test_same_answers_as_direct_scan(self, n_points):
        """Both strategies agree on every node of a star."""
        data = star_buffer(n_points)
        last = linked_list(data, 0, len(data), 2, ccw=True)
        index = ZOrderIndex.from_buffer(data, 2)
        index.index(last)
        direct = DirectScan()

        answers = [(index.is_ear(p), direct.is_ear(p)) for p in ring_nodes(last)]

        assert all(hashed == scanned for hashed, scanned in answers)
        # tips of the star are ears, inner corners are reflex
        assert sum(hashed for hashed, _ in answers) == n_points // 2


def test_direct_scan_rejects_blocked_ear():
    """A reflex vertex inside the candidate triangle blocks it."""
    data = [0, 0, 4, 0, 4, 4, 2, 1, 0, 4]
    last = linked_list(data, 0, len(data), 2, ccw=True)
    nodes = {p.i: p for p in ring_nodes(last)}
    scan = DirectScan()

    # (2, 1) lies inside the triangles at both bottom corners
    assert not scan.is_ear(nodes[0])
    assert not scan.is_ear(nodes[1])
    assert scan.is_ear(nodes[2])
    assert not scan.is_ear(nodes[3])
    assert scan.is_ear(nodes[4])


def test_vertex_on_diagonal_blocks_ear():
    """A reflex vertex on the closing edge of the ear counts as inside."""
    # square with a notch from the left edge whose tip touches the diagonal
    data = [0, 0, 4, 0, 4, 4, 0, 4, 0, 3, 2, 2, 0, 1]
    last = linked_list(data, 0, len(data), 2, ccw=True)
    nodes = {p.i: p for p in ring_nodes(last)}
    index = ZOrderIndex.from_buffer(data, 2)
    index.index(last)

    # the notch tip (2, 2) lies on the closing edge of both right corners
    for i in (1, 2):
        assert not DirectScan().is_ear(nodes[i])
        assert not index.is_ear(nodes[i])
    assert DirectScan().is_ear(nodes[3])
    assert index.is_ear(nodes[3])


def test_coincident_corner_does_not_block():
    """A reflex vertex sitting on a corner of the ear is ignored."""
    # two squares touching at (2, 2), which appears twice in the ring
    data = [0, 0, 2, 0, 2, 2, 4, 2, 4, 4, 2, 4, 2, 2, 0, 2]
    last = linked_list(data, 0, len(data), 2, ccw=True)
    nodes = {p.i: p for p in ring_nodes(last)}
    index = ZOrderIndex.from_buffer(data, 2)
    index.index(last)

    assert DirectScan().is_ear(nodes[1])
    assert index.is_ear(nodes[1])


def test_select_ear_test():
    small = star_buffer(20)
    large = star_buffer(200)

    assert isinstance(select_ear_test(small, 2, 80), DirectScan)
    assert isinstance(select_ear_test(large, 2, 80), ZOrderIndex)
    assert isinstance(select_ear_test(small, 2, 0), ZOrderIndex)
    assert isinstance(select_ear_test([3, 3, 3, 3, 3, 3], 2, 0), DirectScan)
