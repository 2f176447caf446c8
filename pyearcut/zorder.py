"""
Ear emptiness tests.

An ear candidate (a, b, c) is rejected when another reflex ring vertex lies
inside it or on its boundary without sitting on one of its corners.
``DirectScan`` walks the whole remaining ring for every candidate;
``ZOrderIndex`` keeps the nodes sorted by Morton code and only visits those
whose code falls within the code range of the candidate's bounding box.
Both answer the same question and produce identical triangulations.
"""

from typing import Optional, Self, TypeAlias

from loguru import logger

from pyearcut.geometry import orient, point_in_triangle
from pyearcut.topology import Node, equals, ring_nodes
from pyearcut.utils import FlatBuffer, Z_ORDER_SCALE

Bbox: TypeAlias = tuple[float, float, float, float]


def z_order(x: float, y: float, min_x: float, min_y: float, inv_size: float) -> int:
    """
    Morton code of a point: its coordinates are mapped onto a 15-bit grid
    over the bounding box and their bits interleaved (x in the even bits).
    """
    x = int((x - min_x) * inv_size)
    y = int((y - min_y) * inv_size)

    x = (x | (x << 8)) & 0x00FF00FF
    x = (x | (x << 4)) & 0x0F0F0F0F
    x = (x | (x << 2)) & 0x33333333
    x = (x | (x << 1)) & 0x55555555

    y = (y | (y << 8)) & 0x00FF00FF
    y = (y | (y << 4)) & 0x0F0F0F0F
    y = (y | (y << 2)) & 0x33333333
    y = (y | (y << 1)) & 0x55555555

    return x | (y << 1)


def compute_bbox(data: FlatBuffer, dim: int) -> Bbox:
    xs = data[0::dim]
    ys = data[1::dim]
    return min(xs), min(ys), max(xs), max(ys)


def _blocks(p: Node, a: Node, b: Node, c: Node) -> bool:
    # a reflex vertex inside the ear or on its boundary would end up outside
    # the remaining ring once the ear is cut; bridge duplicates sitting on a
    # corner do not count
    if equals(p, a) or equals(p, b) or equals(p, c):
        return False
    return point_in_triangle(
        a.x, a.y, b.x, b.y, c.x, c.y, p.x, p.y
    ) and orient(p.prev, p, p.next) <= 0


class DirectScan:
    """Test ear candidates against every remaining ring vertex."""

    def index(self, start: Node) -> None:
        return None

    def is_ear(self, ear: Node) -> bool:
        a = ear.prev
        b = ear
        c = ear.next

        if orient(a, b, c) <= 0:
            return False  # reflex, can't be an ear

        p = c.next
        while p is not a:
            if _blocks(p, a, b, c):
                return False
            p = p.next
        return True


class ZOrderIndex:
    """
    Test ear candidates against the ring vertices near them in z-order.

    :param min_x: left edge of the bounding box of all vertices
    :param min_y: bottom edge of the bounding box of all vertices
    :param inv_size: grid cells per unit length
    """

    def __init__(self, min_x: float, min_y: float, inv_size: float) -> None:
        self.min_x = min_x
        self.min_y = min_y
        self.inv_size = inv_size

    @classmethod
    def from_buffer(cls, data: FlatBuffer, dim: int) -> Optional[Self]:
        """
        Build an index covering every vertex of the buffer.

        Returns None when all vertices coincide, since no grid can be laid
        over an empty bounding box.
        """
        min_x, min_y, max_x, max_y = compute_bbox(data, dim)
        size = max(max_x - min_x, max_y - min_y)
        if size == 0:
            return None
        return cls(min_x, min_y, Z_ORDER_SCALE / size)

    def z(self, x: float, y: float) -> int:
        return z_order(x, y, self.min_x, self.min_y, self.inv_size)

    def index(self, start: Node) -> None:
        """Assign missing z codes and relink the ring's nodes in z-order."""
        nodes = ring_nodes(start)
        for p in nodes:
            if p.z is None:
                p.z = self.z(p.x, p.y)

        nodes.sort(key=lambda node: node.z)
        for prev, node in zip(nodes, nodes[1:]):
            prev.next_z = node
            node.prev_z = prev
        nodes[0].prev_z = None
        nodes[-1].next_z = None
        logger.trace(f"Indexed {len(nodes)} nodes in z-order")

    def is_ear(self, ear: Node) -> bool:
        a = ear.prev
        b = ear
        c = ear.next

        if orient(a, b, c) <= 0:
            return False  # reflex, can't be an ear

        # triangle bbox
        x0 = min(a.x, b.x, c.x)
        y0 = min(a.y, b.y, c.y)
        x1 = max(a.x, b.x, c.x)
        y1 = max(a.y, b.y, c.y)

        # z-order range for the current triangle bbox
        min_z = self.z(x0, y0)
        max_z = self.z(x1, y1)

        def blocks(p: Node) -> bool:
            return (
                x0 <= p.x <= x1
                and y0 <= p.y <= y1
                and p is not a
                and p is not c
                and _blocks(p, a, b, c)
            )

        p = ear.prev_z
        n = ear.next_z

        # look for points inside the triangle in both directions
        while p is not None and p.z >= min_z and n is not None and n.z <= max_z:
            if blocks(p):
                return False
            p = p.prev_z
            if blocks(n):
                return False
            n = n.next_z

        # look for remaining points in decreasing z-order
        while p is not None and p.z >= min_z:
            if blocks(p):
                return False
            p = p.prev_z

        # look for remaining points in increasing z-order
        while n is not None and n.z <= max_z:
            if blocks(n):
                return False
            n = n.next_z

        return True


EarTest: TypeAlias = DirectScan | ZOrderIndex


def select_ear_test(
    data: FlatBuffer, dim: int, hash_threshold: int
) -> EarTest:
    """Pick the z-order index for inputs above ``hash_threshold`` vertices."""
    if len(data) // dim > hash_threshold:
        index = ZOrderIndex.from_buffer(data, dim)
        if index is not None:
            logger.debug(f"Using z-order index for {len(data) // dim} vertices")
            return index
    return DirectScan()
