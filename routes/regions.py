# routes/regions.py
"""
Public region/commune catalogue and the company scope update.
Catalogue reads answer with a localized `{"error": ...}` body on failure.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from config.db import get_db
from config.security import get_current_user_optional
from model.user import User
from schema.scope import ScopeResult, ScopeUpdate
from services import service_area as area_service
from src.route_helpers import viewer_id_of

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1", tags=["Regions"])

REGIONS_FAILED = "Error al obtener las regiones."
REGION_REQUIRED = "El ID de la región es requerido."
COMMUNES_FAILED = "Error al obtener las comunas."


@router.get("/regions")
def list_regions(db: Session = Depends(get_db)):
    try:
        regions = area_service.list_regions(db)
    except Exception:
        logger.exception("Failed to list regions")
        return JSONResponse(status_code=500, content={"error": REGIONS_FAILED})
    return [r.model_dump(mode="json") for r in regions]


@router.get("/regions/{region_id}/communes")
def list_communes(region_id: str, db: Session = Depends(get_db)):
    if not region_id.strip():
        return JSONResponse(status_code=400, content={"error": REGION_REQUIRED})
    try:
        communes = area_service.list_communes(db, region_id.strip())
    except Exception:
        logger.exception("Failed to list communes of %s", region_id)
        return JSONResponse(status_code=500, content={"error": COMMUNES_FAILED})
    return [c.model_dump(mode="json") for c in communes]


@router.put("/scope", response_model=ScopeResult)
def update_scope(
    payload: ScopeUpdate,
    db: Session = Depends(get_db),
    viewer: Optional[User] = Depends(get_current_user_optional),
):
    """Replace the company's service areas (owner only)."""
    return area_service.update_user_scope(
        db,
        viewer_id_of(viewer),
        payload.company_id,
        payload.scope,
        payload.regions,
        payload.communes,
    )
