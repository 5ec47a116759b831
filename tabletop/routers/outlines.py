from typing import List

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from ..errors import TabletopError
from ..geometry.outline_importer import import_outline
from ..schemas import CustomOutline, OutlinePoint

router = APIRouter(prefix="/outlines", tags=["outlines"])


class OutlineImportRequest(BaseModel):
    paths: List[List[OutlinePoint]]
    unit: str = "mm"


def outline_from_request(request: OutlineImportRequest) -> CustomOutline:
    """Re-derive bounds server-side; client-supplied bounds are never trusted."""
    return import_outline(request.paths, request.unit)


@router.post("/import", response_model=CustomOutline)
def import_custom_outline(request: OutlineImportRequest):
    """Normalize a parsed CAD outline (outer path first, then holes)."""
    try:
        return outline_from_request(request)
    except TabletopError as e:
        raise HTTPException(status_code=422, detail=e.to_dict())
