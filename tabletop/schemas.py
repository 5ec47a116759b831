import math

from pydantic import BaseModel, field_validator, model_validator
from typing import Optional, List
from .config import settings
from .models import (
    ShapeVariant, EdgeProfile, CostBasis, MaterialFamily, Finish, ANY_EDGE_PROFILE,
)

EXPONENT_MIN = 1.5
EXPONENT_MAX = 8.0


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def whole_quantity(value) -> int:
    """Truncate to an int. Infinity saturates at QUANTITY_MAX, NaN falls back to 1."""
    number = float(value)
    if math.isnan(number):
        return 1
    if math.isinf(number):
        return settings.QUANTITY_MAX if number > 0 else 1
    return int(number)


# --- Configuration ---

class TabletopConfiguration(BaseModel):
    """
    One tabletop design as edited in the configurator.

    Invariants applied on every construction:
      - round: width mirrors length (the diameter)
      - corner radius <= half the smaller side
      - super-ellipse exponent within [1.5, 8]
      - quantity within [1, QUANTITY_MAX]
    Positivity of length/width/thickness is checked by the boundary generator.
    """
    shape: ShapeVariant = ShapeVariant.ROUNDED_RECT
    length_mm: float = 2000.0
    width_mm: float = 900.0
    thickness_mm: float = 25.0
    corner_radius_mm: float = 150.0
    super_ellipse_exponent: float = 2.5
    edge_profile: EdgeProfile = EdgeProfile.EDGED
    material: MaterialFamily = MaterialFamily.LAMINATE
    finish: Finish = Finish.MATTE
    quantity: int = 1

    @field_validator("quantity", mode="before")
    @classmethod
    def _coerce_quantity(cls, value):
        if value is None:
            return 1
        return whole_quantity(value)

    @model_validator(mode="after")
    def _apply_invariants(self):
        if self.shape == ShapeVariant.ROUND:
            self.width_mm = self.length_mm

        smaller = max(0.0, min(self.length_mm, self.width_mm))
        self.corner_radius_mm = clamp(self.corner_radius_mm, 0.0, smaller / 2.0)
        self.super_ellipse_exponent = clamp(self.super_ellipse_exponent, EXPONENT_MIN, EXPONENT_MAX)
        self.quantity = int(clamp(self.quantity, 1, settings.QUANTITY_MAX))
        return self

    def update(self, **changes) -> "TabletopConfiguration":
        """Return a new configuration with ``changes`` applied and invariants re-checked.

        For the round shape whichever of length/width was changed becomes the
        diameter; if both are given, length wins.
        """
        data = self.model_dump()
        data.update(changes)
        if ShapeVariant(data["shape"]) == ShapeVariant.ROUND:
            if "width_mm" in changes and "length_mm" not in changes:
                data["length_mm"] = changes["width_mm"]
        return TabletopConfiguration(**data)


# --- Custom outline ---

class OutlinePoint(BaseModel):
    x: float
    y: float

    class Config:
        frozen = True


class OutlineBounds(BaseModel):
    min_x: float
    max_x: float
    min_y: float
    max_y: float

    class Config:
        frozen = True

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y

    @property
    def center(self) -> tuple:
        return ((self.min_x + self.max_x) / 2.0, (self.min_y + self.max_y) / 2.0)


class CustomOutline(BaseModel):
    """Imported outline: paths[0] is the outer boundary, the rest are holes."""
    paths: List[List[OutlinePoint]]
    unit: str = "mm"
    bounds: OutlineBounds

    class Config:
        frozen = True

    @property
    def outer(self) -> List[OutlinePoint]:
        return self.paths[0] if self.paths else []

    @property
    def holes(self) -> List[List[OutlinePoint]]:
        return self.paths[1:]


# --- Catalog ---

class ThicknessRecord(BaseModel):
    thickness_mm: float
    max_length_mm: Optional[float] = None
    max_width_mm: Optional[float] = None

    class Config:
        from_attributes = True


class MaterialCatalogEntry(BaseModel):
    id: Optional[int] = None
    name: str
    family: str = MaterialFamily.LAMINATE.value
    finish: Optional[str] = None
    supplier_sku: Optional[str] = None
    thicknesses: List[ThicknessRecord] = []
    square_meter_rate: Optional[float] = None

    class Config:
        from_attributes = True


class LabourRule(BaseModel):
    id: str
    label: str
    basis: CostBasis
    rate: float = 0.0
    applies_to_edge_profile: str = ANY_EDGE_PROFILE

    @field_validator("applies_to_edge_profile")
    @classmethod
    def _known_edge_profile(cls, value: str) -> str:
        allowed = [ANY_EDGE_PROFILE] + [p.value for p in EdgeProfile]
        if value not in allowed:
            raise ValueError(f"applies_to_edge_profile must be one of {allowed}, got {value!r}")
        return value

    def applies_to(self, edge_profile: EdgeProfile) -> bool:
        return self.applies_to_edge_profile in (ANY_EDGE_PROFILE, EdgeProfile(edge_profile).value)


# --- Engine outputs ---

class Measurements(BaseModel):
    area_m2: float
    edge_length_m: float
    thickness_m: float
    volume_m3: float
    edge_face_area_m2: float

    class Config:
        frozen = True


class SheetSpec(BaseModel):
    thickness_mm: float
    max_length_mm: Optional[float] = None
    max_width_mm: Optional[float] = None
    sheet_area_m2: Optional[float] = None
    square_meter_rate: Optional[float] = None
    exact_match: bool = True

    class Config:
        frozen = True

    @property
    def has_limits(self) -> bool:
        return bool(self.max_length_mm and self.max_width_mm
                    and self.max_length_mm > 0 and self.max_width_mm > 0)


class LabourItem(BaseModel):
    id: str
    label: str
    basis: CostBasis
    applies_to_edge_profile: str
    units: float
    rate: float
    cost: float

    class Config:
        frozen = True


class CostingSnapshot(BaseModel):
    """Full cost breakdown for one configuration at one quantity. Never mutated."""
    quantity: int
    area_m2: float
    edge_length_m: float
    square_meter_rate: Optional[float] = None
    sheet_area_m2: Optional[float] = None
    pieces_per_sheet: Optional[int] = None
    sheets_required: Optional[int] = None
    sheet_unit_cost: Optional[float] = None
    material_cost: Optional[float] = None
    labour_items: List[LabourItem] = []
    labour_total: float = 0.0
    base_cost: float = 0.0
    profit: float = 0.0
    profit_percentage: float = 0.0
    total_cost: float = 0.0

    class Config:
        frozen = True


class CostingBasis(BaseModel):
    """Everything needed to recompute a price from scratch."""
    material: MaterialCatalogEntry
    labour_rules: List[LabourRule] = []
    profit_percentage: float = settings.PROFIT_PERCENTAGE_DEFAULT


class StoredPrice(BaseModel):
    """A price persisted by a cart line before the costing basis was recorded."""
    quantity: int
    total_cost: float


class RepriceResult(BaseModel):
    quantity: int
    total_cost: float
    method: str                     # "recomputed" | "scaled"
    approximate: bool
    snapshot: Optional[CostingSnapshot] = None


class PricedTabletop(BaseModel):
    config: TabletopConfiguration
    boundary: dict
    measurements: Measurements
    sheet: Optional[SheetSpec] = None
    snapshot: CostingSnapshot
