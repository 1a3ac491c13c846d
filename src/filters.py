# src/filters.py
"""
Conjunctive filter builders for explore queries.

Each active filter contributes one clause; inactive filters contribute
nothing, so an empty filter object leaves only the base conditions.
"""

from typing import List, Optional, Sequence

from sqlalchemy import and_, or_, select

from model.service_area import Commune, CompanyServiceArea, ScopeType
from model.social.models import Post
from model.user import User, UserCategory


def _contains_ci(column, term: str):
    escaped = term.replace("/", "//").replace("%", "/%").replace("_", "/_")
    return column.ilike(f"%{escaped}%", escape="/")


def _clean(term: Optional[str]) -> Optional[str]:
    if term is None:
        return None
    term = term.strip()
    return term or None


def _clean_list(values: Optional[Sequence[str]]) -> List[str]:
    return [v for v in (values or []) if v and v.strip()]


def search_clause(term: str):
    """Case-insensitive substring match across name, username and bio."""
    return or_(
        _contains_ci(User.name, term),
        _contains_ci(User.username, term),
        _contains_ci(User.bio, term),
    )


def category_clause(categories: Sequence[str]):
    """Non-empty intersection between the user's categories and `categories`."""
    return User.category_links.any(UserCategory.name.in_(list(categories)))


def location_clause(location: str):
    return _contains_ci(User.location, location)


def service_area_clause(
    scope: Optional[ScopeType] = None,
    region_id: Optional[str] = None,
    commune_id: Optional[str] = None,
):
    """
    Companies that serve the requested place.

    A commune is served by companies covering the whole country, the
    commune's region, or the commune itself. A region is served by
    country-wide companies and by any area inside the region (commune rows
    carry their parent region). A bare scope matches companies declaring at
    least one area of that scope.
    """
    if commune_id:
        commune_region = select(Commune.region_id).where(Commune.id == commune_id).scalar_subquery()
        return User.service_areas.any(
            or_(
                CompanyServiceArea.scope == ScopeType.COUNTRY,
                and_(
                    CompanyServiceArea.scope == ScopeType.REGION,
                    CompanyServiceArea.region_id == commune_region,
                ),
                CompanyServiceArea.commune_id == commune_id,
            )
        )
    if region_id:
        return User.service_areas.any(
            or_(
                CompanyServiceArea.scope == ScopeType.COUNTRY,
                CompanyServiceArea.region_id == region_id,
            )
        )
    if scope is not None:
        return User.service_areas.any(CompanyServiceArea.scope == scope)
    return None


def build_company_conditions(filters, viewer_id: Optional[str] = None) -> list:
    """
    WHERE clauses for the company listing: companies only, never the viewer,
    plus the AND of every active filter.
    """
    conditions = [User.is_company.is_(True)]
    if viewer_id:
        conditions.append(User.id != viewer_id)

    conjunction = []
    term = _clean(filters.search_term)
    if term:
        conjunction.append(search_clause(term))
    categories = _clean_list(filters.categories)
    if categories:
        conjunction.append(category_clause(categories))
    location = _clean(filters.location)
    if location:
        conjunction.append(location_clause(location))
    area = service_area_clause(filters.scope, filters.region_id, filters.commune_id)
    if area is not None:
        conjunction.append(area)

    if conjunction:
        conditions.append(and_(*conjunction))
    return conditions


def build_post_conditions(filters) -> list:
    """
    Explore post filters: search over the post text and its author's
    name/username; category and location apply to the author.
    """
    if filters is None:
        return []

    conjunction = []
    term = _clean(filters.search_term)
    if term:
        conjunction.append(
            or_(
                _contains_ci(Post.content, term),
                Post.author.has(or_(_contains_ci(User.name, term), _contains_ci(User.username, term))),
            )
        )
    categories = _clean_list(filters.categories)
    if categories:
        conjunction.append(Post.author.has(category_clause(categories)))
    location = _clean(filters.location)
    if location:
        conjunction.append(Post.author.has(location_clause(location)))

    if not conjunction:
        return []
    return [and_(*conjunction)]
