from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from model.service_area import ScopeType


class ScopeUpdate(BaseModel):
    company_id: str
    scope: ScopeType
    regions: List[str] = Field(default_factory=list)
    communes: List[str] = Field(default_factory=list)


class ScopeResult(BaseModel):
    success: bool
    message: str


class RegionOut(BaseModel):
    id: str
    name: str
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class CommuneOut(BaseModel):
    id: str
    name: str
    region_id: str
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ServiceAreaOut(BaseModel):
    id: str
    scope: ScopeType
    region_id: Optional[str] = None
    commune_id: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)
