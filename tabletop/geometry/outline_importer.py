"""
Custom outline import.

Takes the closed point paths produced by a CAD-parsing collaborator
(outer boundary first, then any cut-outs) and normalizes them into a
CustomOutline with a bounding box over the outer path.
"""

import logging
import math

from ..errors import InvalidOutlineError
from ..models import ShapeVariant
from ..schemas import CustomOutline, OutlineBounds, OutlinePoint, TabletopConfiguration

logger = logging.getLogger(__name__)

# Millimetres per declared unit
UNIT_TO_MM = {
    "mm": 1.0,
    "cm": 10.0,
    "m": 1000.0,
    "in": 25.4,
    "ft": 304.8,
}


def _unit_key(unit) -> str:
    """Lookup key for a declared unit. Blank or missing means millimetres."""
    return str(unit or "mm").strip().lower() or "mm"


def unit_scale(unit: str) -> float:
    """Millimetres per one ``unit``. Raises InvalidOutlineError for unknown units."""
    key = _unit_key(unit)
    if key not in UNIT_TO_MM:
        raise InvalidOutlineError(
            f"Unknown outline unit: {unit!r}. Available: {list(UNIT_TO_MM.keys())}"
        )
    return UNIT_TO_MM[key]


def _to_point(raw) -> OutlinePoint:
    if isinstance(raw, OutlinePoint):
        point = raw
    elif isinstance(raw, dict):
        point = OutlinePoint(x=float(raw["x"]), y=float(raw["y"]))
    else:
        x, y = raw
        point = OutlinePoint(x=float(x), y=float(y))
    if not (math.isfinite(point.x) and math.isfinite(point.y)):
        raise InvalidOutlineError("Outline contains a non-finite coordinate")
    return point


def _normalize_path(raw_path) -> list:
    """Convert points and drop the closing vertex when it repeats the first one."""
    try:
        points = [_to_point(p) for p in raw_path]
    except (KeyError, TypeError, ValueError) as e:
        raise InvalidOutlineError(f"Malformed outline point: {e}")
    if len(points) > 1 and points[-1] == points[0]:
        points = points[:-1]
    return points


def compute_bounds(points: list) -> OutlineBounds:
    xs = [p.x for p in points]
    ys = [p.y for p in points]
    return OutlineBounds(min_x=min(xs), max_x=max(xs), min_y=min(ys), max_y=max(ys))


def import_outline(paths, unit: str = "mm") -> CustomOutline:
    """
    Build a CustomOutline from raw point paths.

    Args:
        paths: sequence of paths; each path is a sequence of (x, y) pairs,
               {"x": .., "y": ..} dicts or OutlinePoint. paths[0] is the outer
               boundary, the rest are holes.
        unit: linear unit of the coordinates (mm, cm, m, in, ft).

    Raises:
        InvalidOutlineError: no paths, fewer than 3 outer points, unknown unit,
        or a zero-width / zero-height bounding box.
    """
    unit = _unit_key(unit)
    unit_scale(unit)
    if not paths:
        raise InvalidOutlineError("Outline has no paths")

    outer = _normalize_path(paths[0])
    if len(set(outer)) < 3:
        raise InvalidOutlineError(
            f"Outer outline path needs at least 3 points, got {len(set(outer))}"
        )

    bounds = compute_bounds(outer)
    if bounds.width <= 0 or bounds.height <= 0:
        raise InvalidOutlineError(
            "Outline bounds are degenerate (%.3f x %.3f)" % (bounds.width, bounds.height)
        )

    holes = []
    for index, raw_hole in enumerate(paths[1:], start=1):
        hole = _normalize_path(raw_hole)
        if len(hole) < 3:
            logger.warning("Dropping outline hole %d with %d points", index, len(hole))
            continue
        holes.append(hole)

    logger.info(
        "Imported outline: %d outer points, %d holes, %.1f x %.1f %s",
        len(outer), len(holes), bounds.width, bounds.height, unit,
    )
    return CustomOutline(paths=[outer] + holes, unit=unit, bounds=bounds)


def outline_size_mm(outline: CustomOutline) -> tuple:
    """Bounding-box (width, height) of the outline converted to millimetres."""
    scale = unit_scale(outline.unit)
    return outline.bounds.width * scale, outline.bounds.height * scale


def apply_outline_dimensions(config: TabletopConfiguration,
                             outline: CustomOutline) -> TabletopConfiguration:
    """The outline's bounding box overrides slider-set length/width while custom is active."""
    if config.shape != ShapeVariant.CUSTOM or outline is None:
        return config
    length_mm, width_mm = outline_size_mm(outline)
    return config.update(length_mm=length_mm, width_mm=width_mm)
