from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from schema.common import ActionResult


# ------------------------------------------------------------
# Feedback
# ------------------------------------------------------------
class FeedbackIn(BaseModel):
    content: str = ""
    email: Optional[str] = None


class FeedbackOut(BaseModel):
    id: str
    content: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class FeedbackResponse(ActionResult):
    feedback: Optional[FeedbackOut] = None


class FeedbackAuthor(BaseModel):
    id: str
    username: str
    name: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class FeedbackListItem(BaseModel):
    id: str
    content: str
    email: Optional[str] = None
    created_at: datetime
    user: Optional[FeedbackAuthor] = None

    model_config = ConfigDict(from_attributes=True)


class FeedbackListResponse(ActionResult):
    feedbacks: List[FeedbackListItem] = Field(default_factory=list)


# ------------------------------------------------------------
# Company enrollment requests
# ------------------------------------------------------------
class EnrollmentIn(BaseModel):
    company_name: str = ""
    industry: str = ""
    contact_name: str = ""
    contact_email: str = ""
    phone: Optional[str] = None
    website: Optional[str] = None
    description: str = ""
    sustainability: Optional[str] = None
