"""
Pricing API: explicit, synchronous recompute for one configuration.

POST /api/pricing/recompute: full costing snapshot
POST /api/pricing/reprice  : same design at a new quantity
POST /api/pricing/estimate : instant local estimate (no catalog needed)
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from sqlalchemy.orm import Session

from ..config import settings
from ..costing.quick_estimate import quick_estimate
from ..database import get_db
from ..errors import TabletopError
from ..pipeline import recompute, reprice
from ..schemas import (
    CostingBasis, LabourRule, MaterialCatalogEntry, PricedTabletop, RepriceResult,
    StoredPrice, TabletopConfiguration,
)
from .catalog import load_labour_rules, load_material
from .outlines import OutlineImportRequest, outline_from_request

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/pricing", tags=["pricing"])


# --- Request schemas ---

class PricingRequest(BaseModel):
    config: TabletopConfiguration
    outline: Optional[OutlineImportRequest] = None
    material_id: Optional[int] = None
    material: Optional[MaterialCatalogEntry] = None
    labour_rules: Optional[List[LabourRule]] = None
    profit_percentage: Optional[float] = None


class RepriceRequest(PricingRequest):
    quantity: int
    stored_price: Optional[StoredPrice] = None


# --- Helpers ---

def _build_basis(request: PricingRequest, db: Session, required: bool = True) -> Optional[CostingBasis]:
    """
    Material comes inline or from the catalog by id. Labour rules default to
    every rule in the catalog; profit to the configured default.
    """
    if request.material is not None:
        material = request.material
    elif request.material_id is not None:
        material = load_material(db, request.material_id)
    elif required:
        raise HTTPException(status_code=422, detail="Provide material or material_id")
    else:
        return None

    labour_rules = request.labour_rules if request.labour_rules is not None else load_labour_rules(db)
    profit = request.profit_percentage
    if profit is None:
        profit = settings.PROFIT_PERCENTAGE_DEFAULT
    return CostingBasis(material=material, labour_rules=labour_rules, profit_percentage=profit)


# --- Endpoints ---

@router.post("/recompute", response_model=PricedTabletop)
def recompute_price(request: PricingRequest, db: Session = Depends(get_db)):
    basis = _build_basis(request, db)
    try:
        outline = outline_from_request(request.outline) if request.outline else None
        return recompute(request.config, basis, outline)
    except TabletopError as e:
        logger.info("Pricing unavailable (%s): %s", e.kind, e.message)
        raise HTTPException(status_code=422, detail=e.to_dict())


@router.post("/reprice", response_model=RepriceResult)
def reprice_quantity(request: RepriceRequest, db: Session = Depends(get_db)):
    basis = _build_basis(request, db, required=False)
    try:
        outline = outline_from_request(request.outline) if request.outline else None
        return reprice(request.config, request.quantity, request.stored_price, basis, outline)
    except TabletopError as e:
        logger.info("Reprice unavailable (%s): %s", e.kind, e.message)
        raise HTTPException(status_code=422, detail=e.to_dict())


@router.post("/estimate")
def estimate_price(config: TabletopConfiguration):
    return {
        "price": quick_estimate(config),
        "quantity": config.quantity,
        "material": config.material.value,
        "approximate": True,
    }
