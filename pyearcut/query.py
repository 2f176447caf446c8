"""Verification queries on triangulation results."""

from collections.abc import Sequence

import numpy as np

from pyearcut.geometry import ring_signed_area
from pyearcut.utils import FlatBuffer


def triangles_area(
    data: FlatBuffer, triangles: Sequence[int], dim: int = 2
) -> float:
    """
    Total unsigned area of the triangles.

    :param data: flat coordinate buffer
    :param triangles: vertex indices, three per triangle
    :param dim: number of coordinates per vertex
    :return: sum of the triangle areas
    """
    coords = np.asarray(data, dtype=float).reshape(-1, dim)[:, :2]
    tris = coords[np.asarray(triangles, dtype=np.intp).reshape(-1, 3)]
    if len(tris) == 0:
        return 0.0
    a, b, c = tris[:, 0], tris[:, 1], tris[:, 2]
    cross = (b[:, 0] - a[:, 0]) * (c[:, 1] - a[:, 1]) - (c[:, 0] - a[:, 0]) * (
        b[:, 1] - a[:, 1]
    )
    return 0.5 * float(np.sum(np.abs(cross)))


def polygon_area(
    data: FlatBuffer, hole_indices: Sequence[int] = (), dim: int = 2
) -> float:
    """Area of the exterior ring minus the area of every hole."""
    bounds = [0, *(h * dim for h in hole_indices), len(data)]
    areas = [
        abs(ring_signed_area(data, start, end, dim))
        for start, end in zip(bounds, bounds[1:])
    ]
    if not areas:
        return 0.0
    return areas[0] - sum(areas[1:])


def deviation(
    data: FlatBuffer,
    hole_indices: Sequence[int],
    triangles: Sequence[int],
    dim: int = 2,
) -> float:
    """
    Relative difference between the polygon area and the area covered by its
    triangulation.

    A correct triangulation of a valid polygon gives a value close to zero.

    :param data: flat coordinate buffer
    :param hole_indices: vertex index where each hole starts
    :param triangles: vertex indices, three per triangle
    :param dim: number of coordinates per vertex
    :return: ``|triangles area - polygon area| / polygon area``, 0 if both are 0
    """
    expected = polygon_area(data, hole_indices, dim)
    actual = triangles_area(data, triangles, dim)
    if expected == 0 and actual == 0:
        return 0.0
    if expected == 0:
        return float("inf")
    return abs((actual - expected) / expected)
