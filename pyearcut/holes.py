"""
Hole elimination.

Every hole is spliced into the outer ring through a bridge, leaving a single
weakly simple ring for the ear slicer. The bridge starts at the rightmost
vertex of the hole and ends at an outer vertex visible along a ray cast in the
+x direction (David Eberly, "Triangulation by Ear Clipping", mirrored).
"""

import math
from typing import Optional

from loguru import logger

from pyearcut.geometry import orient, point_in_triangle
from pyearcut.topology import (
    Node,
    filter_points,
    linked_list,
    locally_inside,
    split_polygon,
)
from pyearcut.utils import FlatBuffer


def get_rightmost(start: Node) -> Node:
    """Rightmost node of a ring; ties go to the lowest one."""
    p = start
    rightmost = start
    while True:
        if p.x > rightmost.x or (p.x == rightmost.x and p.y < rightmost.y):
            rightmost = p
        p = p.next
        if p is start:
            return rightmost


def sector_contains_sector(m: Node, p: Node) -> bool:
    """Check whether the wedge of ``p`` lies inside the wedge of ``m`` (same location)."""
    return orient(m.next, m, p.next) < 0 and orient(p.prev, m, m.next) < 0


def find_hole_bridge(hole: Node, outer_node: Node) -> Optional[Node]:
    """
    Find the outer ring node to connect ``hole`` to.

    The ray from the hole node towards +x hits the nearest outer edge at
    ``(qx, hy)``; the edge endpoint with the larger x is the first candidate.
    Any reflex vertex inside the triangle (hole, hit point, candidate) would
    block the bridge, so among those the one with the smallest angle to the
    ray wins. Angle ties go to the vertex closest to the hole, then to the
    one whose wedge contains the current candidate's wedge.

    :param hole: rightmost node of the hole ring
    :param outer_node: any node of the outer ring (with holes merged so far)
    :return: the bridge node on the outer ring, or None if the ray hits nothing
    """
    p = outer_node
    hx = hole.x
    hy = hole.y
    qx = math.inf
    m = None

    # segments wound upwards on the right side of the hole are the ones the
    # ray can enter through
    while True:
        n = p.next
        if p.y <= hy <= n.y and n.y != p.y:
            x = p.x + (hy - p.y) * (n.x - p.x) / (n.y - p.y)
            if hx <= x < qx:
                qx = x
                m = p if p.x >= n.x else n
                if x == hx:
                    # hole touches the outer segment, pick its rightmost end
                    return m
        p = n
        if p is outer_node:
            break

    if m is None:
        return None

    stop = m
    mx = m.x
    my = m.y
    tan_min = math.inf
    # counterclockwise corners of the triangle (hole, hit point, candidate)
    if hy < my:
        ax, bx = hx, qx
    else:
        ax, bx = qx, hx

    p = m
    while True:
        if (
            hx <= p.x <= mx
            and hx != p.x
            and point_in_triangle(ax, hy, bx, hy, mx, my, p.x, p.y)
        ):
            tan = abs(hy - p.y) / (p.x - hx)
            if locally_inside(p, hole) and (
                tan < tan_min
                or (
                    tan == tan_min
                    and (p.x < m.x or (p.x == m.x and sector_contains_sector(m, p)))
                )
            ):
                m = p
                tan_min = tan
        p = p.next
        if p is stop:
            return m


def eliminate_hole(hole: Node, outer_node: Node) -> Node:
    """Bridge a single hole into the outer ring and return a node of the merged ring."""
    bridge = find_hole_bridge(hole, outer_node)
    if bridge is None:
        logger.debug(f"No bridge found for hole vertex {hole.i}, leaving it out")
        return outer_node

    logger.trace(f"Bridging hole vertex {hole.i} to outer vertex {bridge.i}")
    bridge_reverse = split_polygon(bridge, hole)

    # filter collinear points around the cuts
    filter_points(bridge_reverse, bridge_reverse.next)
    return filter_points(bridge, bridge.next)


def eliminate_holes(
    data: FlatBuffer,
    hole_indices: list[int],
    outer_node: Node,
    dim: int,
) -> Node:
    """
    Link every hole into the outer ring, producing a single ring without holes.

    Holes are collected in input order, then bridged from right to left so
    that each ray only meets the outer boundary or holes already merged into
    it.

    :param data: flat coordinate buffer
    :param hole_indices: vertex index where each hole starts
    :param outer_node: a node of the outer ring
    :param dim: number of coordinates per vertex
    :return: a node of the merged ring
    """
    queue = []
    for k, hole_start in enumerate(hole_indices):
        start = hole_start * dim
        end = hole_indices[k + 1] * dim if k < len(hole_indices) - 1 else len(data)
        ring = linked_list(data, start, end, dim, ccw=False)
        if ring is None:
            continue
        if ring is ring.next:
            ring.steiner = True
        queue.append(get_rightmost(ring))

    # stable, so holes sharing a bridge x keep their input order
    queue.sort(key=lambda node: node.x, reverse=True)
    for hole in queue:
        outer_node = eliminate_hole(hole, outer_node)

    logger.debug(f"Bridged {len(queue)} holes into the outer ring")
    return outer_node
