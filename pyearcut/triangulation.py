from collections.abc import Sequence
from dataclasses import dataclass
from typing import overload

import numpy as np
from numpy.typing import NDArray

from pyearcut.query import deviation
from pyearcut.utils import Triangle


class TriangleSequence(Sequence):
    """
    Triangles of a triangulation, built on demand from the flat buffer.

    Triangles come out in reverse order of the index list, and each triangle
    lists its corners in reverse as well: the last index of the list is the
    first corner of the first triangle. Iterating again starts from scratch
    and never touches the buffer.
    """

    def __init__(
        self,
        vertices: NDArray[np.floating],
        triangle_indices: NDArray[np.integer],
        dim: int = 2,
    ) -> None:
        self._vertices = vertices
        self._indices = triangle_indices
        self._dim = dim

    def __len__(self) -> int:
        return len(self._indices) // 3

    def _coord(self, vertex_idx: int) -> tuple[float, float]:
        offset = int(vertex_idx) * self._dim
        return float(self._vertices[offset]), float(self._vertices[offset + 1])

    def _triangle(self, k: int) -> Triangle:
        end = len(self._indices) - 3 * k
        c, b, a = self._indices[end - 3 : end]
        return self._coord(a), self._coord(b), self._coord(c)

    @overload
    def __getitem__(self, k: int) -> Triangle: ...

    @overload
    def __getitem__(self, k: slice) -> list[Triangle]: ...

    def __getitem__(self, k):
        if isinstance(k, slice):
            return [self._triangle(i) for i in range(*k.indices(len(self)))]
        n = len(self)
        if k < 0:
            k += n
        if not 0 <= k < n:
            raise IndexError(f"Triangle index {k} out of range for {n} triangles")
        return self._triangle(k)

    def __repr__(self) -> str:
        return f"TriangleSequence({len(self)} triangles)"


@dataclass
class Triangulation:
    """
    Raw result of a triangulation, ready for packed vertex/index buffers.

    :param vertices: flat buffer ``[x0, y0, x1, y1, ...]``
    :param triangle_indices: vertex indices, three per triangle
    :param hole_indices: vertex index where each hole starts
    :param dim: number of coordinates per vertex in ``vertices``
    """

    vertices: NDArray[np.floating]
    triangle_indices: NDArray[np.integer]
    hole_indices: tuple[int, ...] = ()
    dim: int = 2

    @property
    def num_triangles(self) -> int:
        return len(self.triangle_indices) // 3

    @property
    def points(self) -> NDArray[np.floating]:
        """Vertex coordinates as an (n, 2) view of the buffer."""
        return self.vertices.reshape(-1, self.dim)[:, :2]

    @property
    def index_triples(self) -> NDArray[np.integer]:
        """Triangle indices as an (m, 3) view."""
        return self.triangle_indices.reshape(-1, 3)

    def triangles(self) -> TriangleSequence:
        return TriangleSequence(self.vertices, self.triangle_indices, self.dim)

    def deviation(self) -> float:
        """Relative area error of the triangulation, see :func:`pyearcut.query.deviation`."""
        return deviation(
            self.vertices, self.hole_indices, self.triangle_indices, self.dim
        )

    def plot(
        self,
        show: bool = False,
        title: str = "Triangulation",
        point_labels: bool = False,
        fontsize: int = 7,
    ) -> None:
        """
        Plot the triangulation using matplotlib.

        :param show: Whether to call plt.show() after plotting
        :param title: Title of the plot
        :param point_labels: Whether to label points with their indices
        :param fontsize: Font size for labels
        """
        import matplotlib.pyplot as plt

        fig, ax = plt.subplots()

        offset = 0.01  # Adjust as needed depending on your scale

        points = self.points
        for tri_idx, tri in enumerate(self.index_triples):
            pts = points[tri]
            tri_closed = np.vstack([pts, pts[0]])  # Close the triangle
            ax.fill(tri_closed[:, 0], tri_closed[:, 1], alpha=0.2)
            ax.plot(tri_closed[:, 0], tri_closed[:, 1], "b-", linewidth=1.0, alpha=0.6)

            # Triangle index at centroid
            centroid = np.mean(pts, axis=0)
            ax.text(
                centroid[0],
                centroid[1],
                str(tri_idx),
                fontsize=fontsize,
                ha="center",
                va="center",
                color="green",
            )

        # Draw ring outlines
        bounds = [0, *self.hole_indices, len(points)]
        for ring_idx, (start, end) in enumerate(zip(bounds, bounds[1:])):
            ring = points[start:end]
            if len(ring) == 0:
                continue
            ring_closed = np.vstack([ring, ring[0]])
            ax.plot(
                ring_closed[:, 0],
                ring_closed[:, 1],
                "r-",
                linewidth=2.0,
                label="Exterior" if ring_idx == 0 else None,
                zorder=10,
            )

        ax.plot(points[:, 0], points[:, 1], "ko", markersize=4, zorder=11)

        if point_labels:
            for idx, (x, y) in enumerate(points):
                ax.text(
                    x + offset,
                    y + offset,
                    str(idx),
                    fontsize=fontsize,
                    ha="left",
                    va="bottom",
                    color="purple",
                )

        ax.set_aspect("equal")
        ax.set_title(title)

        if show:
            plt.show()
        plt.close(fig)
