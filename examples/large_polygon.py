"""Example: Triangulate a large star polygon with and without the z-order index."""

import time

import numpy as np

from pyearcut.build import earcut
from pyearcut.query import deviation


def star(n_points: int, r_outer: float = 10.0, r_inner: float = 6.0) -> np.ndarray:
    angles = np.linspace(0.0, 2 * np.pi, n_points, endpoint=False)
    radii = np.where(np.arange(n_points) % 2 == 0, r_outer, r_inner)
    return np.column_stack([radii * np.cos(angles), radii * np.sin(angles)]).reshape(-1)


def main():
    data = star(2_000)

    start = time.perf_counter()
    hashed = earcut(data)
    t_hashed = time.perf_counter() - start

    start = time.perf_counter()
    direct = earcut(data, hash_threshold=len(data))
    t_direct = time.perf_counter() - start

    print(f"z-order index: {len(hashed) // 3} triangles in {t_hashed:.2f}s")
    print(f"direct scan:   {len(direct) // 3} triangles in {t_direct:.2f}s")
    print(f"identical: {hashed == direct}")
    print(f"deviation: {deviation(data, [], hashed):.2e}")


if __name__ == "__main__":
    main()
