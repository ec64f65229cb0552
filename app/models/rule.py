"""
Business rule model

Rules gate the availability of shipping methods. Their conditions are
evaluated elsewhere; a rule flagged invalid never matches.
"""
from sqlalchemy import Column, Integer, String, Boolean, DateTime, Text, Index

from app.core.database import Base
from app.core.utils import utcnow, uuid_hex


class Rule(Base):
    __tablename__ = "rule"
    __table_args__ = (
        Index("ix_rule_priority", "priority"),
    )

    id = Column(String(32), primary_key=True, default=uuid_hex)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    priority = Column(Integer, nullable=False, default=1)
    invalid = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime(timezone=True), default=utcnow)

    def __repr__(self):
        return f"<Rule(id={self.id}, name={self.name}, priority={self.priority})>"
