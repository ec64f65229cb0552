"""
Sales channel model

A sales channel is one storefront. Clients identify it with its access key;
shipping methods are offered per sales channel through an assignment table.
"""
from sqlalchemy import Column, String, Boolean, DateTime, ForeignKey, Table
from sqlalchemy.orm import relationship

from app.core.database import Base
from app.core.utils import utcnow, uuid_hex

sales_channel_shipping_method = Table(
    "sales_channel_shipping_method",
    Base.metadata,
    Column("sales_channel_id", String(32), ForeignKey("sales_channel.id", ondelete="CASCADE"), primary_key=True),
    Column("shipping_method_id", String(32), ForeignKey("shipping_method.id", ondelete="CASCADE"), primary_key=True),
)


class SalesChannel(Base):
    __tablename__ = "sales_channel"

    id = Column(String(32), primary_key=True, default=uuid_hex)
    name = Column(String(255), nullable=False)
    access_key = Column(String(64), nullable=False, unique=True, index=True)
    active = Column(Boolean, nullable=False, default=True)
    currency_id = Column(String(32), nullable=False)
    language_id = Column(String(32), nullable=False)

    created_at = Column(DateTime(timezone=True), default=utcnow)

    shipping_methods = relationship(
        "ShippingMethod",
        secondary=sales_channel_shipping_method,
        back_populates="sales_channels",
    )

    def __repr__(self):
        return f"<SalesChannel(id={self.id}, name={self.name}, active={self.active})>"
