"""
Cost estimation engine and labour rules.

Tests:
1-3.   Sheet packing estimate
4-6.   Full snapshot arithmetic
7-8.   Edge-profile filtering
9.     Missing sheet limits
10-11. Basis units
12.    Proportional scaling fallback
"""

import math

import pytest

from tabletop.config import settings
from tabletop.costing.cost_engine import CostEngine, clamp_quantity
from tabletop.costing.labour import basis_units, calculate_labour_items, labour_total
from tabletop.models import CostBasis, EdgeProfile
from tabletop.schemas import LabourRule, Measurements, SheetSpec, StoredPrice


# --- Fixtures ---

def _sheet(max_length=3600, max_width=1800, rate=42.0):
    area = (max_length / 1000) * (max_width / 1000) if max_length and max_width else None
    return SheetSpec(
        thickness_mm=25,
        max_length_mm=max_length,
        max_width_mm=max_width,
        sheet_area_m2=area,
        square_meter_rate=rate,
    )


def _rect_measurements():
    """2000 x 900 x 25mm rectangle."""
    return Measurements(
        area_m2=1.8, edge_length_m=5.8, thickness_m=0.025,
        volume_m3=0.045, edge_face_area_m2=0.145,
    )


def _labour_rules():
    return [
        LabourRule(id="cnc-cutting", label="CNC routing", basis="per-edge-length", rate=12.5),
        LabourRule(id="abs-edging", label="ABS edge banding", basis="per-edge-length", rate=9.0,
                   applies_to_edge_profile="edged"),
        LabourRule(id="sharknose-paint", label="Sharknose bevel + paint", basis="per-edge-length",
                   rate=28.0, applies_to_edge_profile="painted-sharknose"),
        LabourRule(id="packaging", label="Packaging", basis="per-table", rate=15.0),
        LabourRule(id="job-setup", label="Job setup", basis="per-order", rate=45.0),
    ]


def _snapshot(quantity=3, edge_profile=EdgeProfile.EDGED, sheet=None, rules=None, profit=30.0):
    return CostEngine().build_snapshot(
        measurements=_rect_measurements(),
        piece_length_mm=2000,
        piece_width_mm=900,
        sheet=sheet if sheet is not None else _sheet(),
        labour_rules=rules if rules is not None else _labour_rules(),
        quantity=quantity,
        edge_profile=edge_profile,
        profit_percentage=profit,
    )


# ============================================================
# Sheet packing
# ============================================================

def test_pieces_per_sheet_grid_estimate():
    engine = CostEngine()
    assert engine.pieces_per_sheet(_sheet(), 2000, 900) == 2
    assert engine.pieces_per_sheet(_sheet(), 1200, 600) == 9
    assert engine.sheets_required(3, 2) == 2
    assert engine.sheets_required(4, 2) == 2
    assert engine.sheets_required(5, 2) == 3


def test_oversize_piece_still_counts_one_per_sheet():
    assert CostEngine().pieces_per_sheet(_sheet(), 4000, 2000) == 1


def test_no_limits_means_no_packing():
    engine = CostEngine()
    assert engine.pieces_per_sheet(None, 2000, 900) is None
    assert engine.pieces_per_sheet(_sheet(None, None), 2000, 900) is None


# ============================================================
# Snapshot arithmetic
# ============================================================

def test_material_cost_from_sheets():
    snap = _snapshot(quantity=3)
    assert snap.pieces_per_sheet == 2
    assert snap.sheets_required == 2
    assert math.isclose(snap.sheet_area_m2, 6.48)
    assert snap.sheet_unit_cost == pytest.approx(272.16)
    assert snap.material_cost == pytest.approx(544.32)


def test_labour_and_totals():
    snap = _snapshot(quantity=3)
    costs = {item.id: item.cost for item in snap.labour_items}
    assert costs["cnc-cutting"] == pytest.approx(217.5)     # 5.8 m x 3 x 12.5
    assert costs["abs-edging"] == pytest.approx(156.6)      # 5.8 m x 3 x 9.0
    assert costs["packaging"] == pytest.approx(45.0)        # 3 tables x 15
    assert costs["job-setup"] == pytest.approx(45.0)        # once per order
    assert snap.labour_total == pytest.approx(464.1)
    assert snap.base_cost == pytest.approx(1008.42)
    assert snap.profit == pytest.approx(302.53)
    assert snap.profit_percentage == 30.0
    assert snap.total_cost == pytest.approx(1310.95)


def test_zero_profit():
    snap = _snapshot(profit=0)
    assert snap.profit == 0
    assert snap.total_cost == snap.base_cost


# ============================================================
# Edge-profile filtering
# ============================================================

def test_rules_for_other_edge_profile_are_omitted():
    edged = {item.id for item in _snapshot(edge_profile=EdgeProfile.EDGED).labour_items}
    painted = {item.id for item in _snapshot(edge_profile=EdgeProfile.PAINTED_SHARKNOSE).labour_items}
    assert "abs-edging" in edged and "sharknose-paint" not in edged
    assert "sharknose-paint" in painted and "abs-edging" not in painted
    assert {"cnc-cutting", "packaging", "job-setup"} <= edged & painted


def test_labour_items_keep_rule_order():
    items = calculate_labour_items(_labour_rules(), _rect_measurements(), 1, EdgeProfile.EDGED)
    assert [item.id for item in items] == ["cnc-cutting", "abs-edging", "packaging", "job-setup"]
    assert labour_total(items) == pytest.approx(72.5 + 52.2 + 15 + 45)


# ============================================================
# Missing sheet limits
# ============================================================

def test_missing_limits_omit_material_cost():
    snap = _snapshot(sheet=_sheet(None, None))
    assert snap.pieces_per_sheet is None
    assert snap.sheets_required is None
    assert snap.material_cost is None
    assert snap.base_cost == snap.labour_total


def test_missing_rate_omits_material_cost_but_keeps_sheet_count():
    snap = _snapshot(sheet=_sheet(rate=None))
    assert snap.sheets_required == 2
    assert snap.material_cost is None
    assert snap.base_cost == snap.labour_total


# ============================================================
# Basis units
# ============================================================

def test_basis_units():
    m = _rect_measurements()
    assert basis_units(CostBasis.PER_EDGE_LENGTH, m, 2) == pytest.approx(11.6)
    assert basis_units(CostBasis.PER_AREA, m, 2) == pytest.approx(3.6)
    assert basis_units(CostBasis.PER_TABLE, m, 2) == 2
    assert basis_units(CostBasis.PER_ORDER, m, 2) == 1


def test_unknown_edge_profile_scope_rejected():
    with pytest.raises(ValueError):
        LabourRule(id="x", label="X", basis="per-table", applies_to_edge_profile="chamfer")


# ============================================================
# Proportional scaling fallback
# ============================================================

def test_scale_stored_price_is_flagged_approximate():
    result = CostEngine().scale_stored_price(StoredPrice(quantity=2, total_cost=1000.0), 3)
    assert result.method == "scaled"
    assert result.approximate is True
    assert result.total_cost == 1500.0
    assert result.snapshot is None


def test_clamp_quantity_handles_non_finite_and_junk():
    assert clamp_quantity(float("inf")) == settings.QUANTITY_MAX
    assert clamp_quantity(float("-inf")) == 1
    assert clamp_quantity(float("nan")) == 1
    assert clamp_quantity("abc") == 1
    assert clamp_quantity(None) == 1
    assert clamp_quantity("7.9") == 7
