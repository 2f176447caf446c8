from enum import Enum, auto
from typing import Optional

import numpy as np
from loguru import logger
from numpy.typing import NDArray

from pyearcut.debug_utils import plot_ring
from pyearcut.holes import eliminate_holes
from pyearcut.polygon import Polygon, flatten
from pyearcut.topology import (
    Node,
    equals,
    filter_points,
    intersects,
    is_valid_diagonal,
    linked_list,
    locally_inside,
    remove_node,
    ring_nodes,
    split_polygon,
)
from pyearcut.triangulation import Triangulation
from pyearcut.utils import FlatBuffer, HASH_THRESHOLD
from pyearcut.zorder import EarTest, select_ear_test


class EarcutInputError(ValueError):
    """Raised for malformed buffers, strides or hole offsets."""


class ClipStage(Enum):
    """
    Stages of the ear slicing state machine.

    A ring that runs out of ears moves one stage forward; splitting hands two
    fresh rings back to ``clipping``.
    """

    clipping = auto()  # plain ear slicing
    filtered = auto()  # duplicate and collinear nodes dropped, slice again
    cured = auto()  # small local self-intersections clipped, slice again
    splitting = auto()  # split along a valid diagonal
    exhausted = auto()  # nothing left to try


def _validate_input(
    data: NDArray[np.floating], hole_indices: list[int], dim: int
) -> None:
    if data.ndim != 1:
        raise EarcutInputError(f"Expected a flat buffer, got shape {data.shape}")
    if dim < 2:
        raise EarcutInputError(f"dim must be at least 2, got {dim}")
    if len(data) % dim:
        raise EarcutInputError(
            f"Buffer length {len(data)} is not a multiple of dim={dim}"
        )
    if not np.all(np.isfinite(data)):
        raise EarcutInputError("Coordinates must be finite")

    n_vertices = len(data) // dim
    previous = 0
    for hole_start in hole_indices:
        if hole_start <= previous or hole_start > n_vertices:
            raise EarcutInputError(
                f"Invalid hole indices {hole_indices} for {n_vertices} vertices"
            )
        previous = hole_start


def _cure_local_intersections(start: Node, triangles: list[int]) -> Node:
    """
    Clip every pair of crossing edges a-p and p.next-b by emitting (a, p, b)
    and removing the two nodes in between.
    """
    p = start
    while True:
        a = p.prev
        b = p.next.next
        if (
            not equals(a, b)
            and intersects(a, p, p.next, b)
            and locally_inside(a, b)
            and locally_inside(b, a)
        ):
            triangles.extend((a.i, p.i, b.i))
            remove_node(p)
            remove_node(p.next)
            p = start = b

        p = p.next
        if p is start:
            break
    return filter_points(p)


def _split_earcut(start: Node) -> Optional[tuple[Node, Node]]:
    """
    Split the ring in two along the first valid diagonal found.

    :return: a node of each half, or None if no diagonal works
    """
    a = start
    while True:
        b = a.next.next
        while b is not a.prev:
            if a.i != b.i and is_valid_diagonal(a, b):
                c = split_polygon(a, b)

                # filter collinear points around the cuts
                a = filter_points(a, a.next)
                c = filter_points(c, c.next)
                return a, c
            b = b.next
        a = a.next
        if a is start:
            return None


def earcut_linked(
    ear: Node,
    triangles: list[int],
    ear_test: EarTest,
    debug: bool = False,
) -> None:
    """
    Main ear slicing loop which triangulates a ring.

    Rings are processed from an explicit stack of (node, stage) tasks. Each
    task slices ears until the ring is reduced to two nodes or a full turn
    finds no ear, in which case the ring is queued again one stage further.

    :param ear: a node of the ring
    :param triangles: output list, extended with vertex index triples
    :param ear_test: strategy answering "is this node an ear?"
    :param debug: plot the remaining ring when slicing gives up
    """
    pending: list[tuple[Node, ClipStage]] = [(ear, ClipStage.clipping)]
    while pending:
        ear, stage = pending.pop()

        if stage is ClipStage.exhausted:
            remaining = len(ring_nodes(ear))
            logger.warning(
                f"Could not triangulate {remaining} remaining vertices, "
                f"returning a partial result"
            )
            if debug:
                plot_ring(ear, title="Untriangulated ring", show=True)
            continue

        if stage is ClipStage.splitting:
            halves = _split_earcut(ear)
            if halves is None:
                pending.append((ear, ClipStage.exhausted))
                continue
            first, second = halves
            logger.debug(f"Split ring between vertices {first.i} and {second.i}")
            # slice the first half before the second one
            pending.append((second, ClipStage.clipping))
            pending.append((first, ClipStage.clipping))
            continue

        if stage is ClipStage.clipping:
            ear_test.index(ear)

        stop = ear
        # iterate through ears, slicing them one by one
        while ear.prev is not ear.next:
            prev = ear.prev
            nxt = ear.next

            if ear_test.is_ear(ear):
                # cut off the triangle
                triangles.extend((prev.i, ear.i, nxt.i))
                remove_node(ear)

                # skipping the next vertex leads to less sliver triangles
                ear = nxt.next
                stop = nxt.next
                continue

            ear = nxt

            # if we looped through the whole remaining ring and can't find
            # any more ears
            if ear is stop:
                if stage is ClipStage.clipping:
                    logger.debug("No ear found, filtering points and retrying")
                    pending.append((filter_points(ear), ClipStage.filtered))
                elif stage is ClipStage.filtered:
                    logger.debug("No ear found, curing local self-intersections")
                    ear = _cure_local_intersections(filter_points(ear), triangles)
                    pending.append((ear, ClipStage.cured))
                else:
                    logger.debug("No ear found, splitting the ring")
                    pending.append((ear, ClipStage.splitting))
                break


def earcut(
    data: FlatBuffer,
    hole_indices: Optional[list[int]] = None,
    dim: int = 2,
    hash_threshold: int = HASH_THRESHOLD,
    debug: bool = False,
) -> list[int]:
    """
    Triangulate a polygon given as a flat coordinate buffer.

    :param data: flat buffer ``[x0, y0, x1, y1, ...]`` (``dim`` values per vertex),
        the exterior ring first and then every hole
    :param hole_indices: vertex index where each hole starts, strictly increasing
    :param dim: number of coordinates per vertex; only the first two are used
    :param hash_threshold: vertex count above which the z-order index is used
    :param debug: plot the remaining ring if slicing gives up
    :return: vertex indices, three per triangle. Empty when the exterior ring
        has fewer than three distinct points
    """
    hole_indices = [] if hole_indices is None else [int(h) for h in hole_indices]
    coords = np.asarray(data, dtype=np.float64)
    _validate_input(coords, hole_indices, dim)

    # plain floats are a lot faster than numpy scalars in the node loops
    data = coords.tolist()

    outer_len = hole_indices[0] * dim if hole_indices else len(data)
    outer_node = linked_list(data, 0, outer_len, dim, ccw=True)
    triangles: list[int] = []

    if outer_node is None or outer_node.next is outer_node.prev:
        logger.debug("Exterior ring has fewer than 3 distinct points")
        return triangles

    if hole_indices:
        outer_node = eliminate_holes(data, hole_indices, outer_node, dim)

    ear_test = select_ear_test(data, dim, hash_threshold)
    earcut_linked(outer_node, triangles, ear_test, debug=debug)

    logger.debug(
        f"Triangulated {len(data) // dim} vertices into {len(triangles) // 3} triangles"
    )
    return triangles


def triangulate(
    polygon: Polygon,
    hash_threshold: int = HASH_THRESHOLD,
    debug: bool = False,
) -> Triangulation:
    """
    Triangulate a polygon with holes.

    :param polygon: exterior ring and holes
    :param hash_threshold: vertex count above which the z-order index is used
    :param debug: plot the remaining ring if slicing gives up
    :return: the flat vertex buffer together with the triangle indices
    """
    vertices, hole_indices = flatten(polygon)
    triangle_indices = earcut(
        vertices, hole_indices, hash_threshold=hash_threshold, debug=debug
    )
    return Triangulation(
        vertices=vertices,
        triangle_indices=np.asarray(triangle_indices, dtype=np.intp),
        hole_indices=tuple(hole_indices),
    )
