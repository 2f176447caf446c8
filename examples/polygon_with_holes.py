"""Example: Triangulate a polygon with holes.

This example builds a rectangle with two square holes placed side by side,
triangulates it and checks the result against the polygon area.
"""

import numpy as np

from pyearcut.build import triangulate
from pyearcut.polygon import Polygon


def main():
    """Example: Rectangle with two holes."""
    print("\n" + "=" * 70)
    print("POLYGON WITH HOLES EXAMPLE")
    print("=" * 70 + "\n")

    exterior = np.array(
        [
            [0.0, 0.0],
            [20.0, 0.0],
            [20.0, 10.0],
            [0.0, 10.0],
            [0.0, 0.0],  # closing point
        ]
    )
    holes = [
        np.array([[2.0, 2.0], [6.0, 2.0], [6.0, 6.0], [2.0, 6.0], [2.0, 2.0]]),
        np.array([[12.0, 1.0], [16.0, 1.0], [16.0, 5.0], [12.0, 5.0], [12.0, 1.0]]),
    ]

    polygon = Polygon(exterior, holes)
    print(f"Number of vertices: {polygon.num_vertices}")
    print(f"  Exterior: {len(exterior)}")
    print(f"  Holes: {[len(h) for h in holes]}")

    tri = triangulate(polygon)
    print(f"\nNumber of triangles: {tri.num_triangles}")
    print(f"Index buffer: {tri.triangle_indices.tolist()}")
    print(f"Area deviation: {tri.deviation():.2e}")

    print("\nTriangles:")
    for i, (a, b, c) in enumerate(tri.triangles()):
        print(f"  {i}: {a} {b} {c}")

    tri.plot(show=True, title="Rectangle with two holes", point_labels=True)


if __name__ == "__main__":
    main()
