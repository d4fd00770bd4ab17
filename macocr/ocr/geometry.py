# macocr/ocr/geometry.py
from typing import Tuple

from .base import BoundingBox, Point, TextObservation


def to_pixel(point: Point, width: int, height: int) -> Tuple[float, float]:
    """
    Normalized bottom-left-origin point -> pixel top-left-origin point.
    """
    x, y = point
    return x * width, (1.0 - y) * height


def bounding_box(observation: TextObservation, width: int, height: int) -> BoundingBox:
    """
    Axis-aligned box enclosing the four transformed corners.

    For rotated text this is larger than the quadrilateral itself.
    With width/height of 0 every box collapses to (0, 0, 0, 0).
    """
    points = [to_pixel(p, width, height) for p in observation.corners]
    xs = [p[0] for p in points]
    ys = [p[1] for p in points]
    min_x, max_x = min(xs), max(xs)
    min_y, max_y = min(ys), max(ys)
    return BoundingBox(x=min_x, y=min_y, w=max_x - min_x, h=max_y - min_y)
