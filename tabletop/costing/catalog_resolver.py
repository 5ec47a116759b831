"""
Catalog resolver: sheet limits and material rate for a thickness.

Preference order:
1. Thickness record matching the configured thickness exactly
2. Nearest thickness record (ties go to the earlier record in the catalog)
"""

import logging

from ..errors import NoCatalogDataError
from ..schemas import MaterialCatalogEntry, SheetSpec, ThicknessRecord

logger = logging.getLogger(__name__)

THICKNESS_MATCH_TOLERANCE_MM = 0.01


def _sheet_area_m2(record: ThicknessRecord):
    if not record.max_length_mm or not record.max_width_mm:
        return None
    if record.max_length_mm <= 0 or record.max_width_mm <= 0:
        return None
    return (record.max_length_mm / 1000.0) * (record.max_width_mm / 1000.0)


def select_thickness_record(entry: MaterialCatalogEntry, thickness_mm: float):
    # type: (MaterialCatalogEntry, float) -> tuple
    """Returns (record, exact_match). Raises NoCatalogDataError with no records."""
    records = list(entry.thicknesses or [])
    if not records:
        raise NoCatalogDataError(f"Material {entry.name!r} has no thickness records")

    for record in records:
        if abs(record.thickness_mm - thickness_mm) <= THICKNESS_MATCH_TOLERANCE_MM:
            return record, True

    # min() keeps the first of equally-near records
    nearest = min(records, key=lambda r: abs(r.thickness_mm - thickness_mm))
    logger.warning(
        "No %.1fmm record for %s, using nearest stocked thickness %.1fmm",
        thickness_mm, entry.name, nearest.thickness_mm,
    )
    return nearest, False


def resolve_sheet(entry: MaterialCatalogEntry, thickness_mm: float) -> SheetSpec:
    """Maximum sheet size and per-m² rate applicable at ``thickness_mm``."""
    record, exact = select_thickness_record(entry, thickness_mm)
    return SheetSpec(
        thickness_mm=record.thickness_mm,
        max_length_mm=record.max_length_mm,
        max_width_mm=record.max_width_mm,
        sheet_area_m2=_sheet_area_m2(record),
        square_meter_rate=entry.square_meter_rate,
        exact_match=exact,
    )
