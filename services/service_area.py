# services/service_area.py
"""
Company service scope and the region/commune catalogue.
"""

import logging
from typing import List, Optional, Sequence

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from model.service_area import Commune, CompanyServiceArea, Region, ScopeType
from schema.scope import CommuneOut, RegionOut, ScopeResult, ServiceAreaOut

logger = logging.getLogger(__name__)

NOT_AUTHENTICATED = "Usuario no autenticado."
NOT_AUTHORIZED = "No autorizado para realizar esta acción."
SCOPE_UPDATED = "Alcance actualizado correctamente."
SCOPE_FAILED = "Error al actualizar el alcance."
INVALID_SCOPE = "Alcance no válido."


def _unique(values: Optional[Sequence[str]]) -> List[str]:
    return [v for v in dict.fromkeys(values or []) if v]


def update_user_scope(
    db: Session,
    viewer_id: Optional[str],
    company_id: str,
    scope: ScopeType,
    regions: Optional[Sequence[str]] = None,
    communes: Optional[Sequence[str]] = None,
) -> ScopeResult:
    """
    Replace the company's service areas in one transaction: every existing
    row is deleted, then COUNTRY writes a single marker row, REGION one row
    per region and COMMUNE one row per known commune (carrying its region).
    """
    if not viewer_id:
        return ScopeResult(success=False, message=NOT_AUTHENTICATED)
    if viewer_id != company_id:
        return ScopeResult(success=False, message=NOT_AUTHORIZED)

    try:
        scope = ScopeType(scope)
    except ValueError:
        return ScopeResult(success=False, message=INVALID_SCOPE)

    try:
        db.execute(delete(CompanyServiceArea).where(CompanyServiceArea.company_id == company_id))

        if scope == ScopeType.COUNTRY:
            db.add(CompanyServiceArea(company_id=company_id, scope=ScopeType.COUNTRY))
        elif scope == ScopeType.REGION:
            for region_id in _unique(regions):
                db.add(CompanyServiceArea(company_id=company_id, scope=ScopeType.REGION, region_id=region_id))
        elif scope == ScopeType.COMMUNE:
            ids = _unique(communes)
            rows = db.execute(select(Commune.id, Commune.region_id).where(Commune.id.in_(ids))).all() if ids else []
            for commune_id, region_id in rows:
                db.add(
                    CompanyServiceArea(
                        company_id=company_id,
                        scope=ScopeType.COMMUNE,
                        commune_id=commune_id,
                        region_id=region_id,
                    )
                )

        db.commit()
        logger.info("Service scope of %s set to %s", company_id, scope.value)
        return ScopeResult(success=True, message=SCOPE_UPDATED)
    except Exception:
        db.rollback()
        logger.exception("Error updating scope of %s", company_id)
        return ScopeResult(success=False, message=SCOPE_FAILED)


def get_company_service_areas(db: Session, company_id: str) -> List[ServiceAreaOut]:
    rows = db.scalars(
        select(CompanyServiceArea)
        .where(CompanyServiceArea.company_id == company_id)
        .order_by(CompanyServiceArea.scope, CompanyServiceArea.region_id, CompanyServiceArea.commune_id)
    ).all()
    return [ServiceAreaOut.model_validate(r) for r in rows]


def list_regions(db: Session) -> List[RegionOut]:
    rows = db.scalars(select(Region).order_by(Region.name)).all()
    return [RegionOut.model_validate(r) for r in rows]


def list_communes(db: Session, region_id: str) -> List[CommuneOut]:
    rows = db.scalars(
        select(Commune).where(Commune.region_id == region_id).order_by(Commune.name)
    ).all()
    return [CommuneOut.model_validate(c) for c in rows]
