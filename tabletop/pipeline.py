"""
Pricing pipeline: configuration in, CostingSnapshot out.

    outline dimensions (custom only)
      → boundary generation
      → measurement
      → sheet resolution
      → costing

Every call starts from scratch; nothing is cached between calls. Callers
decide when a recompute is warranted (slider release, quantity change, cart
reload) and call recompute() again.
"""

import logging
from typing import Optional

from .costing.catalog_resolver import resolve_sheet
from .costing.cost_engine import CostEngine
from .errors import NothingToRepriceError
from .geometry.boundary import generate_boundary
from .geometry.measurement import measure
from .geometry.outline_importer import apply_outline_dimensions
from .schemas import (
    CostingBasis, CustomOutline, PricedTabletop, RepriceResult, StoredPrice,
    TabletopConfiguration,
)

logger = logging.getLogger(__name__)

# Stateless: safe to share
cost_engine = CostEngine()


def recompute(config: TabletopConfiguration, basis: CostingBasis,
              outline: Optional[CustomOutline] = None) -> PricedTabletop:
    """
    Run the full pipeline for one configuration.

    Raises:
        InvalidOutlineError: custom shape with no usable outline
        InvalidDimensionError: non-positive length/width/thickness
        NoCatalogDataError: the material has no thickness records
    """
    config = apply_outline_dimensions(config, outline)
    boundary = generate_boundary(config, outline)
    measurements = measure(boundary, config.thickness_mm)
    sheet = resolve_sheet(basis.material, config.thickness_mm)

    snapshot = cost_engine.build_snapshot(
        measurements=measurements,
        piece_length_mm=boundary.length_mm,
        piece_width_mm=boundary.width_mm,
        sheet=sheet,
        labour_rules=basis.labour_rules,
        quantity=config.quantity,
        edge_profile=config.edge_profile,
        profit_percentage=basis.profit_percentage,
    )

    return PricedTabletop(
        config=config,
        boundary=boundary.summary(),
        measurements=measurements,
        sheet=sheet,
        snapshot=snapshot,
    )


def reprice(config: TabletopConfiguration, new_quantity: int,
            stored: Optional[StoredPrice] = None,
            basis: Optional[CostingBasis] = None,
            outline: Optional[CustomOutline] = None) -> RepriceResult:
    """
    Price the same design at a different quantity.

    With a costing basis the snapshot is rebuilt from the first step, which
    picks up sheet-count steps. Without one, the stored price is scaled
    proportionally and the result is flagged approximate.

    Raises:
        NothingToRepriceError: neither a basis nor a stored price was given
    """
    if basis is not None:
        priced = recompute(config.update(quantity=new_quantity), basis, outline)
        return RepriceResult(
            quantity=priced.snapshot.quantity,
            total_cost=priced.snapshot.total_cost,
            method="recomputed",
            approximate=False,
            snapshot=priced.snapshot,
        )

    if stored is None:
        raise NothingToRepriceError("Nothing to reprice from: no costing basis and no stored price")

    return cost_engine.scale_stored_price(stored, new_quantity)
