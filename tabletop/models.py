from sqlalchemy import Column, Integer, String, Float, DateTime, Text, ForeignKey
from sqlalchemy.orm import relationship
from datetime import datetime
from .database import Base
import enum


# --- Enums (stored as VARCHAR so new variants don't need a migration) ---

class ShapeVariant(str, enum.Enum):
    RECT = "rect"
    ROUNDED_RECT = "rounded-rect"
    D_END = "d-end"
    ROUND = "round"
    ELLIPSE = "ellipse"
    SUPER_ELLIPSE = "super-ellipse"
    CUSTOM = "custom"


class EdgeProfile(str, enum.Enum):
    EDGED = "edged"                          # square edge, ABS banded
    PAINTED_SHARKNOSE = "painted-sharknose"  # painted bevel


ANY_EDGE_PROFILE = "any"


class CostBasis(str, enum.Enum):
    PER_EDGE_LENGTH = "per-edge-length"
    PER_AREA = "per-area"
    PER_TABLE = "per-table"
    PER_ORDER = "per-order"


class MaterialFamily(str, enum.Enum):
    LAMINATE = "laminate"
    TIMBER = "timber"
    LINOLEUM = "linoleum"


class Finish(str, enum.Enum):
    MATTE = "matte"
    SATIN = "satin"


# --- Catalog reference data ---

class Material(Base):
    """Sheet material stocked by the workshop. Read-only to the pricing engine."""
    __tablename__ = "materials"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    family = Column(String, nullable=False, default=MaterialFamily.LAMINATE.value)
    finish = Column(String, nullable=True)
    supplier_sku = Column(String, nullable=True)
    square_meter_rate = Column(Float, nullable=True)
    notes = Column(Text, nullable=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    thicknesses = relationship(
        "MaterialThickness",
        back_populates="material",
        cascade="all, delete-orphan",
        order_by="MaterialThickness.id",
    )


class MaterialThickness(Base):
    """Largest sheet available for a material at one thickness."""
    __tablename__ = "material_thicknesses"

    id = Column(Integer, primary_key=True, index=True)
    material_id = Column(Integer, ForeignKey("materials.id"), nullable=False)
    thickness_mm = Column(Float, nullable=False)
    max_length_mm = Column(Float, nullable=True)
    max_width_mm = Column(Float, nullable=True)

    material = relationship("Material", back_populates="thicknesses")


class LabourRuleRecord(Base):
    """Admin-managed labour pricing rule."""
    __tablename__ = "labour_rules"

    id = Column(Integer, primary_key=True, index=True)
    rule_id = Column(String, unique=True, nullable=False)
    label = Column(String, nullable=False)
    basis = Column(String, nullable=False)
    rate = Column(Float, nullable=False, default=0.0)
    applies_to_edge_profile = Column(String, nullable=False, default=ANY_EDGE_PROFILE)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
