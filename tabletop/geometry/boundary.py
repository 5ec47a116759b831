"""
Shape boundary generator.

Every shape variant maps to one generator function in BOUNDARY_GENERATORS.
Each generator takes the configuration (and the imported outline, for custom
shapes) and returns a closed Boundary in millimetres centered at the origin.
Paths are implicitly closed: the last point connects back to the first.
"""

import logging
import math
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Tuple

from ..config import settings
from ..errors import InvalidDimensionError, InvalidOutlineError
from ..models import ShapeVariant
from ..schemas import CustomOutline, TabletopConfiguration, clamp, EXPONENT_MIN, EXPONENT_MAX
from .outline_importer import unit_scale

logger = logging.getLogger(__name__)

Point = Tuple[float, float]
Path = Tuple[Point, ...]


@dataclass(frozen=True)
class Boundary:
    shape: ShapeVariant
    paths: Tuple[Path, ...]
    length_mm: float
    width_mm: float
    corner_radius_mm: float = 0.0
    exponent: float = 2.0
    flat_length_mm: float = 0.0

    @property
    def outer(self) -> Path:
        return self.paths[0] if self.paths else ()

    @property
    def holes(self) -> Tuple[Path, ...]:
        return self.paths[1:]

    @property
    def diameter_mm(self) -> float:
        return min(self.length_mm, self.width_mm)

    def summary(self) -> dict:
        """Compact description for API responses and dimension overlays."""
        return {
            "shape": self.shape.value,
            "length_mm": round(self.length_mm, 3),
            "width_mm": round(self.width_mm, 3),
            "corner_radius_mm": round(self.corner_radius_mm, 3),
            "exponent": round(self.exponent, 3),
            "flat_length_mm": round(self.flat_length_mm, 3),
            "point_count": len(self.outer),
            "hole_count": len(self.holes),
        }


# --- Helpers ---

def _require_positive(name: str, value) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise InvalidDimensionError(f"{name} is missing or not a number: {value!r}")
    if not math.isfinite(number) or number <= 0:
        raise InvalidDimensionError(f"{name} must be positive, got {value!r}")
    return number


def _validated_dimensions(config: TabletopConfiguration) -> Tuple[float, float]:
    length = _require_positive("length_mm", config.length_mm)
    width = _require_positive("width_mm", config.width_mm)
    _require_positive("thickness_mm", config.thickness_mm)
    return length, width


def _arc(cx: float, cy: float, rx: float, ry: float,
         start: float, end: float, segments: int) -> List[Point]:
    """Points along an elliptical arc from ``start`` to ``end`` radians, both ends included."""
    segments = max(1, segments)
    points = []
    for i in range(segments + 1):
        theta = start + (end - start) * i / segments
        points.append((cx + rx * math.cos(theta), cy + ry * math.sin(theta)))
    return points


def _closed_curve(rx: float, ry: float, segments: int) -> List[Point]:
    """Full ellipse sampled at ``segments`` evenly spaced angles, no repeated closing point."""
    segments = max(3, segments)
    return [
        (rx * math.cos(2 * math.pi * i / segments), ry * math.sin(2 * math.pi * i / segments))
        for i in range(segments)
    ]


def _dedupe(points: List[Point], tolerance: float = 1e-9) -> Path:
    """Drop consecutive duplicates, including a last point equal to the first."""
    result = []
    for p in points:
        if result and abs(p[0] - result[-1][0]) <= tolerance and abs(p[1] - result[-1][1]) <= tolerance:
            continue
        result.append(p)
    if len(result) > 1 and abs(result[0][0] - result[-1][0]) <= tolerance \
            and abs(result[0][1] - result[-1][1]) <= tolerance:
        result.pop()
    return tuple(result)


# --- Generators ---

def rect_boundary(config: TabletopConfiguration, outline=None) -> Boundary:
    length, width = _validated_dimensions(config)
    hl, hw = length / 2.0, width / 2.0
    outer = ((-hl, -hw), (hl, -hw), (hl, hw), (-hl, hw))
    return Boundary(ShapeVariant.RECT, (outer,), length, width)


def rounded_rect_boundary(config: TabletopConfiguration, outline=None) -> Boundary:
    length, width = _validated_dimensions(config)
    hl, hw = length / 2.0, width / 2.0
    r = max(0.0, min(config.corner_radius_mm, hw, hl))
    if r == 0.0:
        outer = ((-hl, -hw), (hl, -hw), (hl, hw), (-hl, hw))
        return Boundary(ShapeVariant.ROUNDED_RECT, (outer,), length, width)

    n = settings.ARC_SEGMENTS
    quarter = math.pi / 2.0
    points = []
    points += _arc(hl - r, -hw + r, r, r, -quarter, 0.0, n)            # bottom-right
    points += _arc(hl - r, hw - r, r, r, 0.0, quarter, n)              # top-right
    points += _arc(-hl + r, hw - r, r, r, quarter, 2 * quarter, n)     # top-left
    points += _arc(-hl + r, -hw + r, r, r, 2 * quarter, 3 * quarter, n)  # bottom-left
    return Boundary(
        ShapeVariant.ROUNDED_RECT, (_dedupe(points),), length, width, corner_radius_mm=r,
    )


def d_end_boundary(config: TabletopConfiguration, outline=None) -> Boundary:
    """
    Flat end on the left, semicircle of radius width/2 on the right.

    A top shorter than width/2 has no room for the full semicircle; its
    curved end is squashed into a half-ellipse so the outline stays inside
    length x width.
    """
    length, width = _validated_dimensions(config)
    hl, hw = length / 2.0, width / 2.0
    radius = hw
    flat = max(length - radius, 0.0)
    reach = length - flat
    x0 = -hl
    cx = x0 + flat

    points = [(x0, -hw), (cx, -hw)]
    points += _arc(cx, 0.0, reach, radius, -math.pi / 2.0, math.pi / 2.0, 2 * settings.ARC_SEGMENTS)
    points += [(cx, hw), (x0, hw)]
    return Boundary(
        ShapeVariant.D_END, (_dedupe(points),), length, width,
        corner_radius_mm=radius, flat_length_mm=flat,
    )


def round_boundary(config: TabletopConfiguration, outline=None) -> Boundary:
    length, width = _validated_dimensions(config)
    diameter = min(length, width)
    outer = tuple(_closed_curve(diameter / 2.0, diameter / 2.0, settings.CIRCLE_SEGMENTS))
    return Boundary(ShapeVariant.ROUND, (outer,), diameter, diameter)


def ellipse_boundary(config: TabletopConfiguration, outline=None) -> Boundary:
    length, width = _validated_dimensions(config)
    outer = tuple(_closed_curve(length / 2.0, width / 2.0, settings.ELLIPSE_SEGMENTS))
    return Boundary(ShapeVariant.ELLIPSE, (outer,), length, width)


def super_ellipse_boundary(config: TabletopConfiguration, outline=None) -> Boundary:
    length, width = _validated_dimensions(config)
    a, b = length / 2.0, width / 2.0
    n = clamp(config.super_ellipse_exponent, EXPONENT_MIN, EXPONENT_MAX)
    segments = max(3, settings.SUPER_ELLIPSE_SEGMENTS)
    points = []
    for i in range(segments):
        theta = 2 * math.pi * i / segments
        cos, sin = math.cos(theta), math.sin(theta)
        x = a * math.copysign(abs(cos) ** (2.0 / n), cos)
        y = b * math.copysign(abs(sin) ** (2.0 / n), sin)
        points.append((x, y))
    return Boundary(ShapeVariant.SUPER_ELLIPSE, (_dedupe(points),), length, width, exponent=n)


def custom_boundary(config: TabletopConfiguration,
                    outline: Optional[CustomOutline] = None) -> Boundary:
    """Imported outline converted to mm and recentered on its bounding-box center."""
    if outline is None or not outline.paths or not outline.outer:
        raise InvalidOutlineError("Custom shape selected but no outline has been imported")
    _require_positive("thickness_mm", config.thickness_mm)

    scale = unit_scale(outline.unit)
    cx, cy = outline.bounds.center
    paths = tuple(
        tuple(((p.x - cx) * scale, (p.y - cy) * scale) for p in path)
        for path in outline.paths
    )
    return Boundary(
        ShapeVariant.CUSTOM, paths,
        outline.bounds.width * scale, outline.bounds.height * scale,
    )


BOUNDARY_GENERATORS: Dict[ShapeVariant, Callable[..., Boundary]] = {
    ShapeVariant.RECT: rect_boundary,
    ShapeVariant.ROUNDED_RECT: rounded_rect_boundary,
    ShapeVariant.D_END: d_end_boundary,
    ShapeVariant.ROUND: round_boundary,
    ShapeVariant.ELLIPSE: ellipse_boundary,
    ShapeVariant.SUPER_ELLIPSE: super_ellipse_boundary,
    ShapeVariant.CUSTOM: custom_boundary,
}

_unmapped = set(ShapeVariant) - set(BOUNDARY_GENERATORS)
if _unmapped:
    raise RuntimeError(f"No boundary generator for shape variants: {sorted(v.value for v in _unmapped)}")


def generate_boundary(config: TabletopConfiguration,
                      outline: Optional[CustomOutline] = None) -> Boundary:
    """
    Produce the closed boundary for a configuration.

    Raises:
        InvalidDimensionError: non-positive length, width or thickness.
        InvalidOutlineError: custom shape without an imported outline.
    """
    generator = BOUNDARY_GENERATORS[ShapeVariant(config.shape)]
    boundary = generator(config, outline)
    logger.debug(
        "Boundary %s: %.1f x %.1f mm, %d points",
        boundary.shape.value, boundary.length_mm, boundary.width_mm, len(boundary.outer),
    )
    return boundary
