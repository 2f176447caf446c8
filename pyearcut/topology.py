"""Circular doubly linked vertex ring used by the ear slicer."""

from dataclasses import dataclass, field
from typing import Optional

from pyearcut.geometry import is_point_in_box, orient, ring_signed_area
from pyearcut.utils import FlatBuffer


@dataclass(slots=True, eq=False)
class Node:
    # vertex index in the flat buffer (buffer offset // dim)
    i: int
    x: float
    y: float
    # ring neighbours, linked by whoever creates the node
    prev: "Node" = field(init=False, repr=False)
    next: "Node" = field(init=False, repr=False)
    # z-order code and neighbours in z-order, set by the spatial index
    z: Optional[int] = None
    prev_z: Optional["Node"] = field(default=None, repr=False)
    next_z: Optional["Node"] = field(default=None, repr=False)
    # kept by point filtering even when duplicate or collinear
    steiner: bool = False


def equals(p: Node, q: Node) -> bool:
    return p.x == q.x and p.y == q.y


def insert_node(i: int, x: float, y: float, last: Optional[Node]) -> Node:
    """Create a node and link it after ``last`` (or into a ring of its own)."""
    p = Node(i, x, y)
    if last is None:
        p.prev = p
        p.next = p
    else:
        p.next = last.next
        p.prev = last
        last.next.prev = p
        last.next = p
    return p


def remove_node(p: Node) -> None:
    p.next.prev = p.prev
    p.prev.next = p.next

    if p.prev_z is not None:
        p.prev_z.next_z = p.next_z
    if p.next_z is not None:
        p.next_z.prev_z = p.prev_z


def linked_list(
    data: FlatBuffer, start: int, end: int, dim: int, ccw: bool
) -> Optional[Node]:
    """
    Build a ring from the buffer slice ``data[start:end]`` wound in the
    requested direction.

    Vertices equal to their predecessor are skipped and a closing point equal
    to the first one is dropped, so the ring never holds zero-length edges at
    construction time.

    :param data: flat coordinate buffer
    :param start: buffer offset of the first vertex
    :param end: buffer offset one past the last vertex
    :param dim: number of coordinates per vertex
    :param ccw: True for a counterclockwise ring, False for clockwise
    :return: the last inserted node, or None for an empty slice
    """
    offsets = range(start, end, dim)
    if ccw != (ring_signed_area(data, start, end, dim) > 0):
        offsets = reversed(offsets)

    last = None
    for offset in offsets:
        x, y = data[offset], data[offset + 1]
        if last is not None and last.x == x and last.y == y:
            continue
        last = insert_node(offset // dim, x, y, last)

    if last is not None and equals(last, last.next):
        remove_node(last)
        last = last.next
    return last


def ring_nodes(start: Node) -> list[Node]:
    """Collect the nodes of a ring, starting from ``start``."""
    nodes = [start]
    p = start.next
    while p is not start:
        nodes.append(p)
        p = p.next
    return nodes


def filter_points(start: Node, end: Optional[Node] = None) -> Node:
    """Eliminate duplicate and collinear points between ``start`` and ``end``."""
    if end is None:
        end = start

    p = start
    again = True
    while again or p is not end:
        again = False
        if not p.steiner and (equals(p, p.next) or orient(p.prev, p, p.next) == 0):
            remove_node(p)
            p = end = p.prev
            if p is p.next:
                break
            again = True
        else:
            p = p.next
    return end


def split_polygon(a: Node, b: Node) -> Node:
    """
    Link two nodes with a bridge made of duplicated endpoints.

    If a and b belong to the same ring it is split in two. If one belongs to
    the outer ring and the other to a hole, the hole is merged into the outer
    ring. Returns the duplicate of ``b``, which lies on the other side of the
    bridge.
    """
    a2 = Node(a.i, a.x, a.y)
    b2 = Node(b.i, b.x, b.y)
    an = a.next
    bp = b.prev

    a.next = b
    b.prev = a

    a2.next = an
    an.prev = a2

    b2.next = a2
    a2.prev = b2

    bp.next = b2
    b2.prev = bp
    return b2


def _on_segment(p: Node, q: Node, r: Node) -> bool:
    # q is known to be collinear with pr
    return is_point_in_box((p.x, p.y), (r.x, r.y), (q.x, q.y))


def intersects(p1: Node, q1: Node, p2: Node, q2: Node) -> bool:
    """Check if segments p1q1 and p2q2 intersect, touching included."""
    o1 = orient(p1, q1, p2)
    o2 = orient(p1, q1, q2)
    o3 = orient(p2, q2, p1)
    o4 = orient(p2, q2, q1)

    if o1 != o2 and o3 != o4:
        return True

    # collinear cases
    if o1 == 0 and _on_segment(p1, p2, q1):
        return True
    if o2 == 0 and _on_segment(p1, q2, q1):
        return True
    if o3 == 0 and _on_segment(p2, p1, q2):
        return True
    if o4 == 0 and _on_segment(p2, q1, q2):
        return True
    return False


def intersects_polygon(a: Node, b: Node) -> bool:
    """Check if the diagonal ab crosses any ring edge not incident to a or b."""
    p = a
    while True:
        if (
            p.i != a.i
            and p.next.i != a.i
            and p.i != b.i
            and p.next.i != b.i
            and intersects(p, p.next, a, b)
        ):
            return True
        p = p.next
        if p is a:
            return False


def locally_inside(a: Node, b: Node) -> bool:
    """Check if the diagonal ab leaves a towards the ring interior."""
    if orient(a.prev, a, a.next) > 0:
        # convex corner
        return orient(a, b, a.next) <= 0 and orient(a, a.prev, b) <= 0
    return orient(a, b, a.prev) > 0 or orient(a, a.next, b) > 0


def middle_inside(a: Node, b: Node) -> bool:
    """Even-odd test of the midpoint of ab against the whole ring."""
    p = a
    inside = False
    px = (a.x + b.x) / 2
    py = (a.y + b.y) / 2
    while True:
        n = p.next
        if (
            (p.y > py) != (n.y > py)
            and n.y != p.y
            and px < (n.x - p.x) * (py - p.y) / (n.y - p.y) + p.x
        ):
            inside = not inside
        p = n
        if p is a:
            return inside


def is_valid_diagonal(a: Node, b: Node) -> bool:
    """Check if ab splits the ring into two rings that can be clipped on their own."""
    if a.next.i == b.i or a.prev.i == b.i or intersects_polygon(a, b):
        return False

    # locally visible and does not create opposite-facing sectors
    if (
        locally_inside(a, b)
        and locally_inside(b, a)
        and middle_inside(a, b)
        and (orient(a.prev, a, b.prev) != 0 or orient(a, b.prev, b) != 0)
    ):
        return True

    # zero-length diagonal between two reflex duplicates
    return (
        equals(a, b)
        and orient(a.prev, a, a.next) < 0
        and orient(b.prev, b, b.next) < 0
    )
