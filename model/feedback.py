# model/feedback.py
"""
Append-only inbound messages: site feedback and company enrollment requests.
"""

from sqlalchemy import Column, String, Text, DateTime, ForeignKey
from sqlalchemy.orm import relationship

from model.base import Base, utcnow
from src.id_generator import id_factory


class Feedback(Base):
    __tablename__ = "feedback"

    id = Column(String(40), primary_key=True, default=id_factory("feedback"))
    content = Column(Text, nullable=False)
    email = Column(String(255))
    user_id = Column(String(40), ForeignKey("users.id", ondelete="SET NULL"))
    created_at = Column(DateTime, nullable=False, default=utcnow)

    user = relationship("User", back_populates="feedback")


class CompanyRequest(Base):
    __tablename__ = "company_requests"

    id = Column(String(40), primary_key=True, default=id_factory("company_request"))
    name = Column(String(255), nullable=False)
    industry = Column(String(255), nullable=False)
    contact_name = Column(String(255), nullable=False)
    contact_email = Column(String(255), nullable=False)
    phone = Column(String(64))
    website = Column(String(512))
    description = Column(Text, nullable=False)
    sustainability = Column(Text)
    created_at = Column(DateTime, nullable=False, default=utcnow)
