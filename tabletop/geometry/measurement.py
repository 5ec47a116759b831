"""
Measurement engine: area and edge length for pricing.

Regular shapes use closed-form formulas; custom outlines are integrated with
the shoelace formula. Millimetre inputs are converted to metres before any
squaring or multiplying, and every dimension is floored at MIN_DIMENSION_MM
first so no division or product can produce NaN/inf.

The rectangle-family areas (rounded corners, D-end) and the super-ellipse
area are deliberately the conservative approximations used for pricing, not
exact geometry.
"""

import math
from typing import Callable, Dict, Sequence, Tuple

from ..config import settings
from ..models import ShapeVariant
from ..schemas import Measurements
from .boundary import Boundary

MM_TO_M = 0.001


def _safe_mm(value: float) -> float:
    """Clamp a dimension to the minimum before it is used."""
    try:
        number = float(value)
    except (TypeError, ValueError):
        return settings.MIN_DIMENSION_MM
    if not math.isfinite(number):
        return settings.MIN_DIMENSION_MM
    return max(settings.MIN_DIMENSION_MM, number)


def ramanujan_perimeter(a: float, b: float) -> float:
    """Ramanujan's second approximation of an ellipse perimeter."""
    return math.pi * (3 * (a + b) - math.sqrt((3 * a + b) * (a + 3 * b)))


def shoelace_area(points: Sequence[Tuple[float, float]]) -> float:
    """Unsigned polygon area. Path is treated as closed."""
    n = len(points)
    if n < 3:
        return 0.0
    twice_area = 0.0
    for i in range(n):
        x1, y1 = points[i]
        x2, y2 = points[(i + 1) % n]
        twice_area += x1 * y2 - x2 * y1
    return abs(twice_area) / 2.0


def polygon_perimeter(points: Sequence[Tuple[float, float]]) -> float:
    """Sum of consecutive vertex distances, closing back to the first vertex."""
    n = len(points)
    if n < 2:
        return 0.0
    return sum(
        math.hypot(points[(i + 1) % n][0] - points[i][0], points[(i + 1) % n][1] - points[i][1])
        for i in range(n)
    )


# --- Per-shape formulas: (boundary) -> (area_m2, edge_length_m) ---

def _rectangular(boundary: Boundary) -> Tuple[float, float]:
    length = _safe_mm(boundary.length_mm) * MM_TO_M
    width = _safe_mm(boundary.width_mm) * MM_TO_M
    return length * width, 2 * (length + width)


def _d_end(boundary: Boundary) -> Tuple[float, float]:
    length = _safe_mm(boundary.length_mm) * MM_TO_M
    width = _safe_mm(boundary.width_mm) * MM_TO_M
    flat = max(length - width / 2.0, 0.0)
    straight_run = 2 * flat + width
    curved = math.pi * max(length, width)
    return length * width, straight_run + curved


def _round(boundary: Boundary) -> Tuple[float, float]:
    diameter = _safe_mm(boundary.diameter_mm) * MM_TO_M
    return math.pi * (diameter / 2.0) ** 2, math.pi * diameter


def _elliptical(boundary: Boundary) -> Tuple[float, float]:
    a = _safe_mm(boundary.length_mm) * MM_TO_M / 2.0
    b = _safe_mm(boundary.width_mm) * MM_TO_M / 2.0
    return math.pi * a * b, ramanujan_perimeter(a, b)


def _custom(boundary: Boundary) -> Tuple[float, float]:
    outer = boundary.outer
    if len(outer) < 3:
        return _rectangular(boundary)
    area_mm2 = shoelace_area(outer)
    perimeter_mm = polygon_perimeter(outer)
    return area_mm2 * MM_TO_M * MM_TO_M, perimeter_mm * MM_TO_M


MEASUREMENT_FORMULAS: Dict[ShapeVariant, Callable[[Boundary], Tuple[float, float]]] = {
    ShapeVariant.RECT: _rectangular,
    ShapeVariant.ROUNDED_RECT: _rectangular,
    ShapeVariant.D_END: _d_end,
    ShapeVariant.ROUND: _round,
    ShapeVariant.ELLIPSE: _elliptical,
    ShapeVariant.SUPER_ELLIPSE: _elliptical,
    ShapeVariant.CUSTOM: _custom,
}


def measure(boundary: Boundary, thickness_mm: float) -> Measurements:
    """Area (m²), edge length (m) and derived thickness figures for a boundary."""
    area_m2, edge_length_m = MEASUREMENT_FORMULAS[boundary.shape](boundary)
    thickness_m = _safe_mm(thickness_mm) * MM_TO_M
    area_m2 = max(0.0, area_m2)
    edge_length_m = max(0.0, edge_length_m)
    return Measurements(
        area_m2=area_m2,
        edge_length_m=edge_length_m,
        thickness_m=thickness_m,
        volume_m3=area_m2 * thickness_m,
        edge_face_area_m2=edge_length_m * thickness_m,
    )
