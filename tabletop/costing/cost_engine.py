"""
Cost estimation engine.

Combines measurements, the resolved sheet and the job's labour rules into a
CostingSnapshot.

    pieces_per_sheet = max(1, floor(sheetL / pieceL) × floor(sheetW / pieceW))
    sheets_required  = ceil(quantity / pieces_per_sheet)
    material_cost    = rate × sheet_area × sheets_required
    labour_total     = Σ units × rate over applicable rules
    base_cost        = material_cost + labour_total
    profit           = base_cost × pct / 100
    total_cost       = base_cost + profit

Sheet packing is a grid estimate, not a nesting optimisation.
"""

import logging
import math
from typing import List, Optional

from ..config import settings
from ..models import EdgeProfile
from ..schemas import (
    CostingSnapshot, LabourRule, Measurements, RepriceResult, SheetSpec, StoredPrice,
    whole_quantity,
)
from .labour import calculate_labour_items, labour_total

logger = logging.getLogger(__name__)


def clamp_quantity(quantity) -> int:
    try:
        value = whole_quantity(quantity)
    except (TypeError, ValueError):
        value = 1
    return max(1, min(settings.QUANTITY_MAX, value))


class CostEngine:
    """Stateless; one instance can price any number of configurations concurrently."""

    def pieces_per_sheet(self, sheet: Optional[SheetSpec],
                         piece_length_mm: float, piece_width_mm: float) -> Optional[int]:
        """Grid packing estimate. None when the sheet has no usable limits."""
        if sheet is None or not sheet.has_limits:
            return None
        piece_length = max(settings.MIN_DIMENSION_MM, piece_length_mm)
        piece_width = max(settings.MIN_DIMENSION_MM, piece_width_mm)
        along = math.floor(sheet.max_length_mm / piece_length)
        across = math.floor(sheet.max_width_mm / piece_width)
        return max(1, along * across)

    def sheets_required(self, quantity: int, pieces_per_sheet: int) -> int:
        return math.ceil(quantity / max(1, pieces_per_sheet))

    def build_snapshot(self, measurements: Measurements, piece_length_mm: float,
                       piece_width_mm: float, sheet: Optional[SheetSpec],
                       labour_rules: List[LabourRule], quantity: int,
                       edge_profile: EdgeProfile,
                       profit_percentage: float = None) -> CostingSnapshot:
        """Full costing from scratch. Never derives anything from a previous snapshot."""
        quantity = clamp_quantity(quantity)
        if profit_percentage is None:
            profit_percentage = settings.PROFIT_PERCENTAGE_DEFAULT

        # --- Material ---
        pieces = self.pieces_per_sheet(sheet, piece_length_mm, piece_width_mm)
        rate = sheet.square_meter_rate if sheet is not None else None
        sheets = None
        sheet_unit_cost = None
        material_cost = None
        if pieces is None:
            logger.warning("Material cost omitted: no sheet limits at %s",
                           "%.1fmm" % sheet.thickness_mm if sheet is not None else "any thickness")
        else:
            sheets = self.sheets_required(quantity, pieces)
            if rate is None:
                logger.warning("Material cost omitted: no material rate")
            else:
                raw_unit_cost = rate * sheet.sheet_area_m2
                sheet_unit_cost = round(raw_unit_cost, 2)
                material_cost = round(raw_unit_cost * sheets, 2)

        # --- Labour ---
        labour_items = calculate_labour_items(labour_rules or [], measurements, quantity, edge_profile)
        labour_subtotal = labour_total(labour_items)

        # --- Totals ---
        base_cost = round((material_cost or 0.0) + labour_subtotal, 2)
        profit = round(base_cost * (profit_percentage / 100.0), 2)
        total_cost = round(base_cost + profit, 2)

        logger.info(
            "Costed %d tops: %.3f m², %.3f m edge, %s sheets, %.2f total",
            quantity, measurements.area_m2, measurements.edge_length_m,
            sheets if sheets is not None else "?", total_cost,
        )

        return CostingSnapshot(
            quantity=quantity,
            area_m2=measurements.area_m2,
            edge_length_m=measurements.edge_length_m,
            square_meter_rate=rate,
            sheet_area_m2=sheet.sheet_area_m2 if sheet is not None else None,
            pieces_per_sheet=pieces,
            sheets_required=sheets,
            sheet_unit_cost=sheet_unit_cost,
            material_cost=material_cost,
            labour_items=labour_items,
            labour_total=labour_subtotal,
            base_cost=base_cost,
            profit=profit,
            profit_percentage=profit_percentage,
            total_cost=total_cost,
        )

    def scale_stored_price(self, stored: StoredPrice, new_quantity: int) -> RepriceResult:
        """
        FALLBACK ONLY: proportional scaling of a previously stored total.

        Ignores sheet-count steps and quantity-dependent labour, so the result
        is flagged approximate. Use full recomputation whenever a costing
        basis is available.
        """
        new_quantity = clamp_quantity(new_quantity)
        old_quantity = max(1, int(stored.quantity or 1))
        total = round(stored.total_cost * new_quantity / old_quantity, 2)
        logger.warning(
            "Repricing by proportional scaling (%d -> %d), no costing basis available",
            old_quantity, new_quantity,
        )
        return RepriceResult(
            quantity=new_quantity,
            total_cost=total,
            method="scaled",
            approximate=True,
            snapshot=None,
        )
