# gravity_shift/game/geometry.py
from __future__ import annotations
from typing import Tuple

Point = Tuple[float, float]
Rect = Tuple[float, float, float, float]   # (x, y, w, h), y grows downward
Triangle = Tuple[Point, Point, Point]


def edge_sign(p: Point, a: Point, b: Point) -> float:
    """Which side of the line a->b the point p lies on (sign of the 2D cross product)."""
    return (p[0] - b[0]) * (a[1] - b[1]) - (a[0] - b[0]) * (p[1] - b[1])


def orientation(a: Point, b: Point, c: Point) -> int:
    """+1 / -1 for the winding of triangle abc, 0 if degenerate."""
    s = edge_sign(a, b, c)
    return (s > 0) - (s < 0)


def point_in_triangle(p: Point, a: Point, b: Point, c: Point) -> bool:
    """
    Sign-consistency test: p is inside (edges included) unless it is on the
    positive side of one edge and the negative side of another.
    Works for either winding.
    """
    d1 = edge_sign(p, a, b)
    d2 = edge_sign(p, b, c)
    d3 = edge_sign(p, c, a)
    has_neg = (d1 < 0) or (d2 < 0) or (d3 < 0)
    has_pos = (d1 > 0) or (d2 > 0) or (d3 > 0)
    return not (has_neg and has_pos)


def rects_overlap(r1: Rect, r2: Rect) -> bool:
    """Strict AABB overlap: touching edges do not count."""
    x1, y1, w1, h1 = r1
    x2, y2, w2, h2 = r2
    return x1 < x2 + w2 and x1 + w1 > x2 and y1 < y2 + h2 and y1 + h1 > y2


def rect_corners(r: Rect) -> Tuple[Point, Point, Point, Point]:
    x, y, w, h = r
    return (x, y), (x + w, y), (x, y + h), (x + w, y + h)


def rect_center(r: Rect) -> Point:
    x, y, w, h = r
    return x + w / 2, y + h / 2


def spike_triangle(x: float, width: float, height: float, on_ceiling: bool, field_height: float) -> Triangle:
    """Base on the mounting edge, apex pointing into the field."""
    if on_ceiling:
        return (x, 0.0), (x + width, 0.0), (x + width / 2, height)
    return (x, field_height), (x + width, field_height), (x + width / 2, field_height - height)


def spike_bounds(x: float, width: float, height: float, on_ceiling: bool, field_height: float) -> Rect:
    y = 0.0 if on_ceiling else field_height - height
    return x, y, width, height


def any_corner_in_triangle(r: Rect, tri: Triangle) -> bool:
    a, b, c = tri
    return any(point_in_triangle(p, a, b, c) for p in rect_corners(r))
