"""
Instant local estimate.

Shown immediately while the catalog-backed costing loads, and when no
catalog is reachable. Flat per-m² rates by material family, scaled by
thickness relative to 25mm, with small volume discounts.
"""

from ..models import MaterialFamily
from ..schemas import TabletopConfiguration

# Per m² at 25mm thickness
BASE_RATE_PER_M2 = {
    MaterialFamily.LAMINATE: 250.0,
    MaterialFamily.TIMBER: 380.0,
    MaterialFamily.LINOLEUM: 320.0,
}

REFERENCE_THICKNESS_MM = 25.0

# (minimum quantity, multiplier); highest matching tier wins
VOLUME_DISCOUNTS = [
    (10, 0.94),
    (5, 0.97),
]


def volume_multiplier(quantity: int) -> float:
    for min_qty, multiplier in VOLUME_DISCOUNTS:
        if quantity >= min_qty:
            return multiplier
    return 1.0


def quick_estimate(config: TabletopConfiguration) -> int:
    """Rough total for ``config.quantity`` tops, rounded to whole currency units."""
    area_m2 = (config.length_mm / 1000.0) * (config.width_mm / 1000.0)
    thickness_factor = config.thickness_mm / REFERENCE_THICKNESS_MM
    rate = BASE_RATE_PER_M2.get(MaterialFamily(config.material), BASE_RATE_PER_M2[MaterialFamily.LAMINATE])

    unit_price = area_m2 * rate * thickness_factor * volume_multiplier(config.quantity)
    return int(round(max(0.0, unit_price * config.quantity)))
