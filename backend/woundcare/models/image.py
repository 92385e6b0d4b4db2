from datetime import datetime

from sqlalchemy import Column, String, Text, Boolean, DateTime, Integer, ForeignKey
from sqlalchemy.orm import relationship
from .base import Base, TimestampMixin, generate_uuid


class BeforeAfterType:
    BEFORE = "BEFORE"
    AFTER = "AFTER"

    ALL = [BEFORE, AFTER]


class WoundImage(Base, TimestampMixin):
    __tablename__ = "wound_images"

    id = Column(String, primary_key=True, default=generate_uuid)
    wound_id = Column(String, ForeignKey("wounds.id", ondelete="CASCADE"), nullable=False, index=True)
    uploaded_by_id = Column(String, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)

    # Public URL under UPLOAD_URL_PREFIX; the file lives in UPLOAD_DIR
    url = Column(String(500), nullable=False)
    filename = Column(String(255), nullable=False)
    file_size = Column(Integer, nullable=False)
    mime_type = Column(String(50), nullable=False)

    description = Column(Text, nullable=True)
    captured_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    is_before_after = Column(Boolean, nullable=False, default=False)
    before_after_type = Column(String(10), nullable=True)

    wound = relationship("Wound", back_populates="images")
    uploaded_by = relationship("User")
