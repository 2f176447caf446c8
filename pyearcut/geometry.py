import numpy as np
from shewchuk import orientation

from pyearcut.utils import FlatBuffer, Vec2d


def orient(a, b, c) -> int:
    """
    Exact orientation of three ring nodes (anything with ``x`` and ``y``).

    Returns +1 if a -> b -> c turns counterclockwise, -1 if clockwise and 0 if
    the points are collinear.
    """
    return orientation(a.x, a.y, b.x, b.y, c.x, c.y)


def is_point_in_box(
    a: Vec2d,
    b: Vec2d,
    p: Vec2d,
    eps: float = 0.0,
) -> bool:
    # check if p is within the bounding box of [a, b]
    return (
        min(a[0], b[0]) - eps <= p[0] <= max(a[0], b[0]) + eps
        and min(a[1], b[1]) - eps <= p[1] <= max(a[1], b[1]) + eps
    )


def point_in_triangle(
    ax: float,
    ay: float,
    bx: float,
    by: float,
    cx: float,
    cy: float,
    px: float,
    py: float,
) -> bool:
    """
    Check whether p lies inside or on the boundary of the counterclockwise
    triangle abc.
    """
    return (
        orientation(ax, ay, bx, by, px, py) >= 0
        and orientation(bx, by, cx, cy, px, py) >= 0
        and orientation(cx, cy, ax, ay, px, py) >= 0
    )


def ring_signed_area(
    data: FlatBuffer, start: int, end: int, dim: int = 2
) -> float:
    """
    Signed area of the ring stored in ``data[start:end]`` (buffer offsets,
    stride ``dim``). Positive for counterclockwise rings.

    The ring is treated as implicitly closed, so a repeated closing point
    contributes nothing.
    """
    ring = np.asarray(data[start:end], dtype=float)
    if len(ring) < 2 * dim:
        return 0.0
    x = ring[0::dim]
    y = ring[1::dim]
    return 0.5 * float(np.sum(x * np.roll(y, -1) - np.roll(x, -1) * y))
