"""
Media model

Only the columns the storefront needs to render a shipping method logo.
"""
from sqlalchemy import Column, String, DateTime, Text

from app.core.database import Base
from app.core.utils import utcnow, uuid_hex


class Media(Base):
    __tablename__ = "media"

    id = Column(String(32), primary_key=True, default=uuid_hex)
    file_name = Column(String(255), nullable=True)
    mime_type = Column(String(100), nullable=True)
    url = Column(Text, nullable=True)
    alt = Column(String(255), nullable=True)
    title = Column(String(255), nullable=True)

    created_at = Column(DateTime(timezone=True), default=utcnow)

    def __repr__(self):
        return f"<Media(id={self.id}, file_name={self.file_name})>"
