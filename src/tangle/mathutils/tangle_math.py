"""
Geometry predicates for the puzzle plane.

All predicates take plain indexables (tuples, lists, Vec3, numpy arrays) and
only read the x/y components unless stated otherwise. Results are plain
tuples so they can be compared and stored without copying.
"""
import math
from .vec3 import (
    Vec3,
    vec2_sub,
    vec2_cross,
    vec2_dot,
    vec2_length_sq,
    vec2_distance,
)

# Default tolerance for the segment test (parallel check and endpoint exclusion)
EPSILON = 1e-6

# Segments shorter than this (squared) are treated as points
DEGENERATE_SEGMENT_SQ = 1e-4

# Directions shorter than this (squared) fall back to DEFAULT_DIRECTION
DEGENERATE_DIRECTION_SQ = 1e-3

DEFAULT_DIRECTION = (1.0, 0.0, 0.0)


def segment_parameters(a, b, c, d, tol=EPSILON):
    """
    Solve the parametric intersection of the lines through AB and CD.

    With r = B - A and s = D - C, returns (t, u) such that A + t*r == C + u*s,
    or None when |r x s| < tol (parallel, collinear or degenerate segments).
    """
    r = vec2_sub(b, a)
    s = vec2_sub(d, c)
    rxs = vec2_cross(r, s)

    if abs(rxs) < tol:
        return None

    ca = vec2_sub(c, a)
    t = vec2_cross(ca, s) / rxs
    u = vec2_cross(ca, r) / rxs
    return t, u


def find_intersection_between_segments(a, b, c, d, tol=EPSILON):
    """
    Find the point where segment AB strictly crosses segment CD.

    Both parameters must lie strictly inside (tol, 1 - tol): segments that only
    touch at an endpoint (two ropes meeting at a shared pin) do not cross.
    Parallel and collinear-overlapping segments never cross.

    Args:
        a, b: Endpoints of the first segment
        c, d: Endpoints of the second segment
        tol: Tolerance for the parallel check and the endpoint exclusion

    Returns:
        The crossing point as an (x, y) tuple, or None
    """
    params = segment_parameters(a, b, c, d, tol)
    if params is None:
        return None

    t, u = params
    if not (tol < t < 1.0 - tol and tol < u < 1.0 - tol):
        return None

    return (a[0] + t * (b[0] - a[0]), a[1] + t * (b[1] - a[1]))


def closest_point_on_segment(point, seg_start, seg_end):
    """Closest point to `point` on segment [seg_start, seg_end], as an (x, y) tuple."""
    seg = vec2_sub(seg_end, seg_start)
    seg_length_sq = vec2_length_sq(seg)

    if seg_length_sq < DEGENERATE_SEGMENT_SQ:
        return (seg_start[0], seg_start[1])

    t = vec2_dot(vec2_sub(point, seg_start), seg) / seg_length_sq
    t = min(1.0, max(0.0, t))
    return (seg_start[0] + t * seg[0], seg_start[1] + t * seg[1])


def point_to_segment_distance(point, seg_start, seg_end):
    """Shortest 2D distance from a point to a segment."""
    return vec2_distance(point, closest_point_on_segment(point, seg_start, seg_end))


def closest_segment_index(path, point):
    """
    Index of the path segment (path[i], path[i + 1]) nearest to `point` in 2D.

    Ties keep the earliest segment. Returns -1 for paths with fewer than 2 points.
    """
    if path is None or len(path) < 2:
        return -1

    min_dist = math.inf
    closest_index = -1

    for i in range(len(path) - 1):
        dist = point_to_segment_distance(point, path[i], path[i + 1])
        if dist < min_dist:
            min_dist = dist
            closest_index = i

    return closest_index


def path_direction(path):
    """
    Overall direction of a path: normalized first-to-last vector.

    This is exact for straight two-point ropes, which is the only shape a
    rope has before weaves are spliced in (weaves never move the endpoints).
    Degenerate paths fall back to DEFAULT_DIRECTION.
    """
    if path is None or len(path) < 2:
        return Vec3(DEFAULT_DIRECTION)

    direction = Vec3(path[-1]) - Vec3(path[0])
    if direction.length_sq() < DEGENERATE_DIRECTION_SQ:
        return Vec3(DEFAULT_DIRECTION)

    return direction.normalized()


def distance_from_path_start(path, point):
    """2D distance from the first path point to `point` (0 for empty paths)."""
    if path is None or len(path) < 2:
        return 0.0
    return vec2_distance(path[0], point)
