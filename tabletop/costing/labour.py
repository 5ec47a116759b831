"""
Labour rule evaluation.

Every cost is traceable to one rule: basis units × rate.

Basis units:
    per-edge-length  edge length (m) × quantity
    per-area         area (m²) × quantity
    per-table        quantity
    per-order        1
Rules scoped to a different edge profile are left out entirely.
"""

import logging
from typing import List

from ..models import CostBasis, EdgeProfile
from ..schemas import LabourItem, LabourRule, Measurements

logger = logging.getLogger(__name__)


def basis_units(basis: CostBasis, measurements: Measurements, quantity: int) -> float:
    basis = CostBasis(basis)
    if basis == CostBasis.PER_EDGE_LENGTH:
        return measurements.edge_length_m * quantity
    if basis == CostBasis.PER_AREA:
        return measurements.area_m2 * quantity
    if basis == CostBasis.PER_TABLE:
        return float(quantity)
    return 1.0  # per-order


def applicable_rules(rules: List[LabourRule], edge_profile: EdgeProfile) -> List[LabourRule]:
    return [rule for rule in rules if rule.applies_to(edge_profile)]


def calculate_labour_items(rules, measurements, quantity, edge_profile):
    # type: (List[LabourRule], Measurements, int, EdgeProfile) -> List[LabourItem]
    """Labour line items for the rules that apply to ``edge_profile``, in rule order."""
    items = []
    for rule in applicable_rules(rules, edge_profile):
        units = basis_units(rule.basis, measurements, quantity)
        items.append(LabourItem(
            id=rule.id,
            label=rule.label,
            basis=rule.basis,
            applies_to_edge_profile=rule.applies_to_edge_profile,
            units=round(units, 4),
            rate=rule.rate,
            cost=round(units * rule.rate, 2),
        ))

    skipped = len(rules) - len(items)
    if skipped:
        logger.debug("Skipped %d labour rules not scoped to %s", skipped, EdgeProfile(edge_profile).value)
    return items


def labour_total(items: List[LabourItem]) -> float:
    return round(sum(item.cost for item in items), 2)
