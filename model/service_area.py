# model/service_area.py
"""
Geographic catalogue (regions and their communes) and the service scope
each company declares: the whole country, a set of regions, or a set of communes.
"""

import enum

from sqlalchemy import Column, String, DateTime, ForeignKey, Index, UniqueConstraint, Enum as SAEnum
from sqlalchemy.orm import relationship

from model.base import Base, utcnow
from src.id_generator import id_factory


class ScopeType(str, enum.Enum):
    COUNTRY = "COUNTRY"
    REGION = "REGION"
    COMMUNE = "COMMUNE"


class Region(Base):
    __tablename__ = "regions"

    id = Column(String(40), primary_key=True, default=id_factory("region"))
    name = Column(String(255), unique=True, nullable=False)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    communes = relationship("Commune", back_populates="region", cascade="all, delete-orphan", passive_deletes=True)


class Commune(Base):
    __tablename__ = "communes"

    id = Column(String(40), primary_key=True, default=id_factory("commune"))
    name = Column(String(255), nullable=False)
    region_id = Column(String(40), ForeignKey("regions.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    region = relationship("Region", back_populates="communes")

    __table_args__ = (
        UniqueConstraint("name", "region_id", name="uq_commune_name_region"),
    )


class CompanyServiceArea(Base):
    __tablename__ = "company_service_areas"

    id = Column(String(40), primary_key=True, default=id_factory("service_area"))
    company_id = Column(String(40), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    scope = Column(SAEnum(ScopeType, name="scope_type"), nullable=False, default=ScopeType.COUNTRY)
    region_id = Column(String(40), ForeignKey("regions.id", ondelete="CASCADE"))
    commune_id = Column(String(40), ForeignKey("communes.id", ondelete="CASCADE"))
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    company = relationship("User", back_populates="service_areas")
    region = relationship("Region")
    commune = relationship("Commune")

    __table_args__ = (
        Index("idx_service_areas_company", "company_id"),
        Index("idx_service_areas_region", "region_id"),
        Index("idx_service_areas_commune", "commune_id"),
    )
