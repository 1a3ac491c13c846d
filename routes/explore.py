# routes/explore.py
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from config.db import get_db
from config.security import get_current_user_optional
from model.service_area import ScopeType
from model.user import User
from schema.explore import CompanyCard, CompanyFilters, CompanySort, PaginatedCompaniesResponse
from services import explore as explore_service
from src.route_helpers import viewer_id_of

router = APIRouter(prefix="/v1/explore", tags=["Explore"])


@router.get("/companies", response_model=PaginatedCompaniesResponse)
def list_companies(
    search_term: Optional[str] = None,
    categories: Optional[List[str]] = Query(None),
    location: Optional[str] = None,
    scope: Optional[ScopeType] = None,
    region_id: Optional[str] = None,
    commune_id: Optional[str] = None,
    sort_by: CompanySort = CompanySort.NAME_ASC,
    page: Optional[float] = None,
    page_size: Optional[float] = None,
    db: Session = Depends(get_db),
    viewer: Optional[User] = Depends(get_current_user_optional),
):
    """
    Filtered, sorted and paginated company directory. Filters combine with AND.
    """
    filters = CompanyFilters(
        search_term=search_term,
        categories=categories,
        location=location,
        scope=scope,
        region_id=region_id,
        commune_id=commune_id,
        sort_by=sort_by,
    )
    return explore_service.get_filtered_companies(db, viewer_id_of(viewer), filters, page, page_size)


@router.get("/featured", response_model=List[CompanyCard])
def featured_companies(limit: int = 6, db: Session = Depends(get_db)):
    return explore_service.get_featured_companies(db, limit)


@router.get("/featured/random", response_model=List[CompanyCard])
def random_featured_companies(
    limit: int = 5,
    db: Session = Depends(get_db),
    viewer: Optional[User] = Depends(get_current_user_optional),
):
    return explore_service.get_random_featured_companies(db, viewer_id_of(viewer), limit)
