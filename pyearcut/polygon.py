from collections.abc import Sequence
from dataclasses import dataclass
from typing import Self, TypeAlias

import numpy as np
from numpy.typing import NDArray

from pyearcut.utils import Vec2d

Ring: TypeAlias = Sequence[Vec2d] | NDArray[np.floating]


def _as_ring(ring: Ring) -> NDArray[np.floating]:
    arr = np.asarray(ring, dtype=np.float64)
    if arr.size == 0:
        return np.empty((0, 2), dtype=np.float64)
    if arr.ndim != 2 or arr.shape[1] != 2:
        raise ValueError(f"Ring must be a sequence of (x, y) pairs, got shape {arr.shape}")
    return arr


@dataclass(frozen=True, eq=False)
class Polygon:
    """
    A polygon given by its exterior ring and zero or more holes.

    Rings may repeat their first point at the end; the closing point is kept
    in the flat buffer and ignored by the triangulation.
    """

    exterior: NDArray[np.floating]
    interiors: tuple[NDArray[np.floating], ...] = ()

    def __init__(self, exterior: Ring, interiors: Sequence[Ring] = ()) -> None:
        object.__setattr__(self, "exterior", _as_ring(exterior))
        object.__setattr__(
            self, "interiors", tuple(_as_ring(ring) for ring in interiors)
        )

    @classmethod
    def from_coordinates(cls, rings: Sequence[Ring]) -> Self:
        """
        Build a polygon from GeoJSON-style coordinates: the exterior ring
        followed by the holes.
        """
        if len(rings) == 0:
            return cls([])
        return cls(rings[0], rings[1:])

    @property
    def num_vertices(self) -> int:
        return len(self.exterior) + sum(len(ring) for ring in self.interiors)


def flatten(polygon: Polygon) -> tuple[NDArray[np.floating], list[int]]:
    """
    Flatten a polygon into a single coordinate buffer.

    :param polygon: the polygon to flatten
    :return: the buffer ``[x0, y0, x1, y1, ...]`` holding the exterior ring
        and then every hole in order, and the vertex index where each hole
        starts
    """
    if len(polygon.exterior) == 0:
        return np.empty(0, dtype=np.float64), []

    # empty holes would break the strictly increasing hole indices
    holes = [ring for ring in polygon.interiors if len(ring)]
    rings = [polygon.exterior, *holes]
    hole_indices = []
    offset = len(polygon.exterior)
    for ring in holes:
        hole_indices.append(offset)
        offset += len(ring)

    vertices = np.concatenate([ring.reshape(-1) for ring in rings])
    return vertices, hole_indices
