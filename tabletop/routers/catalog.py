"""
Catalog reference data: materials (with per-thickness sheet limits) and
labour rules. The pricing engine only reads these.

GET /api/materials/           : list materials
GET /api/materials/seed       : seed default materials (skips existing)
GET /api/materials/{id}       : one material
GET /api/labour-rules/        : list labour rules
GET /api/labour-rules/seed    : seed default labour rules (skips existing)
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from .. import models
from ..database import get_db
from ..models import CostBasis, EdgeProfile, MaterialFamily, Finish, ANY_EDGE_PROFILE
from ..schemas import LabourRule, MaterialCatalogEntry

logger = logging.getLogger(__name__)

router = APIRouter(tags=["catalog"])

# Default stock. Rates are supplier cost per m² of sheet, sheet sizes in mm
DEFAULT_MATERIALS = [
    {
        "name": "Laminate Polar White",
        "family": MaterialFamily.LAMINATE.value,
        "finish": Finish.MATTE.value,
        "supplier_sku": "LAM-PW-M",
        "square_meter_rate": 42.00,
        "thicknesses": [(16, 3600, 1800), (25, 3600, 1800), (33, 3600, 1800)],
    },
    {
        "name": "Timber Blackbutt",
        "family": MaterialFamily.TIMBER.value,
        "finish": Finish.SATIN.value,
        "supplier_sku": "TIM-BB-S",
        "square_meter_rate": 165.00,
        "thicknesses": [(25, 2400, 1200), (32, 2400, 1200)],
    },
    {
        "name": "Linoleum Pebble",
        "family": MaterialFamily.LINOLEUM.value,
        "finish": Finish.MATTE.value,
        "supplier_sku": "LIN-PB-M",
        "square_meter_rate": 95.00,
        "thicknesses": [(18, 3000, 1500), (25, 3000, 1500)],
    },
]

DEFAULT_LABOUR_RULES = [
    {"rule_id": "cnc-cutting", "label": "CNC routing", "basis": CostBasis.PER_EDGE_LENGTH.value,
     "rate": 12.50, "applies_to_edge_profile": ANY_EDGE_PROFILE},
    {"rule_id": "abs-edging", "label": "ABS edge banding", "basis": CostBasis.PER_EDGE_LENGTH.value,
     "rate": 9.00, "applies_to_edge_profile": EdgeProfile.EDGED.value},
    {"rule_id": "sharknose-paint", "label": "Sharknose bevel + paint", "basis": CostBasis.PER_EDGE_LENGTH.value,
     "rate": 28.00, "applies_to_edge_profile": EdgeProfile.PAINTED_SHARKNOSE.value},
    {"rule_id": "surface-prep", "label": "Surface clean + inspection", "basis": CostBasis.PER_AREA.value,
     "rate": 6.00, "applies_to_edge_profile": ANY_EDGE_PROFILE},
    {"rule_id": "packaging", "label": "Packaging", "basis": CostBasis.PER_TABLE.value,
     "rate": 15.00, "applies_to_edge_profile": ANY_EDGE_PROFILE},
    {"rule_id": "job-setup", "label": "Job setup", "basis": CostBasis.PER_ORDER.value,
     "rate": 45.00, "applies_to_edge_profile": ANY_EDGE_PROFILE},
]


def seed_catalog(db: Session) -> dict:
    """Insert default materials and labour rules that don't exist yet."""
    seeded_materials = 0
    for data in DEFAULT_MATERIALS:
        existing = db.query(models.Material).filter(models.Material.name == data["name"]).first()
        if existing:
            continue
        material = models.Material(
            name=data["name"],
            family=data["family"],
            finish=data["finish"],
            supplier_sku=data["supplier_sku"],
            square_meter_rate=data["square_meter_rate"],
        )
        for thickness, max_length, max_width in data["thicknesses"]:
            material.thicknesses.append(models.MaterialThickness(
                thickness_mm=thickness, max_length_mm=max_length, max_width_mm=max_width,
            ))
        db.add(material)
        seeded_materials += 1

    seeded_rules = 0
    for data in DEFAULT_LABOUR_RULES:
        existing = db.query(models.LabourRuleRecord).filter(
            models.LabourRuleRecord.rule_id == data["rule_id"]
        ).first()
        if not existing:
            db.add(models.LabourRuleRecord(**data))
            seeded_rules += 1

    db.commit()
    if seeded_materials or seeded_rules:
        logger.info("Seeded %d materials and %d labour rules", seeded_materials, seeded_rules)
    return {"materials": seeded_materials, "labour_rules": seeded_rules}


def load_material(db: Session, material_id: int) -> MaterialCatalogEntry:
    material = db.query(models.Material).filter(models.Material.id == material_id).first()
    if not material:
        raise HTTPException(status_code=404, detail=f"Material {material_id} not found")
    return MaterialCatalogEntry.model_validate(material)


def load_labour_rules(db: Session) -> List[LabourRule]:
    records = db.query(models.LabourRuleRecord).order_by(models.LabourRuleRecord.id).all()
    return [
        LabourRule(
            id=r.rule_id,
            label=r.label,
            basis=r.basis,
            rate=r.rate,
            applies_to_edge_profile=r.applies_to_edge_profile,
        )
        for r in records
    ]


@router.get("/materials/seed")
def seed_materials(db: Session = Depends(get_db)):
    """Seed default catalog. Safe to run multiple times, skips existing."""
    return {"ok": True, "seeded": seed_catalog(db)}


@router.get("/materials/", response_model=List[MaterialCatalogEntry])
def list_materials(db: Session = Depends(get_db)):
    return db.query(models.Material).order_by(models.Material.id).all()


@router.get("/materials/{material_id}", response_model=MaterialCatalogEntry)
def get_material(material_id: int, db: Session = Depends(get_db)):
    return load_material(db, material_id)


@router.get("/labour-rules/seed")
def seed_labour_rules(db: Session = Depends(get_db)):
    return {"ok": True, "seeded": seed_catalog(db)}


@router.get("/labour-rules/", response_model=List[LabourRule])
def list_labour_rules(db: Session = Depends(get_db)):
    return load_labour_rules(db)
