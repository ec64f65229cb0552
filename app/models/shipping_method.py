"""
Shipping method model

A shipping method the storefront can offer at checkout. Whether it is offered
to a given customer depends on its availability rule.
"""
from sqlalchemy import Column, Integer, String, Boolean, DateTime, Text, ForeignKey, Index
from sqlalchemy.orm import relationship

from app.core.database import Base
from app.core.utils import utcnow, uuid_hex
from app.models.sales_channel import sales_channel_shipping_method


class ShippingMethod(Base):
    __tablename__ = "shipping_method"
    __table_args__ = (
        Index("ix_shipping_method_active", "active"),
        Index("ix_shipping_method_availability_rule_id", "availability_rule_id"),
    )

    id = Column(String(32), primary_key=True, default=uuid_hex)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    active = Column(Boolean, nullable=False, default=False)
    position = Column(Integer, nullable=False, default=1)
    tracking_url = Column(Text, nullable=True)

    # No rule means always available
    availability_rule_id = Column(String(32), ForeignKey("rule.id", ondelete="SET NULL"), nullable=True)
    media_id = Column(String(32), ForeignKey("media.id", ondelete="SET NULL"), nullable=True)

    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=True, onupdate=utcnow)

    # Relationships
    media = relationship("Media")
    availability_rule = relationship("Rule")
    sales_channels = relationship(
        "SalesChannel",
        secondary=sales_channel_shipping_method,
        back_populates="shipping_methods",
    )

    def __repr__(self):
        return f"<ShippingMethod(id={self.id}, name={self.name}, active={self.active})>"
