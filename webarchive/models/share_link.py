from datetime import datetime
from typing import Optional

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from webarchive.core.clock import utcnow
from webarchive.core.database import Base

class ShareLink(Base):
    __tablename__ = "share_links"

    id = Column(Integer, primary_key=True, index=True)
    page_id = Column(Integer, ForeignKey("pages.id"), nullable=False, index=True)
    share_code = Column(String, unique=True, nullable=False, index=True)
    expires_at = Column(DateTime, nullable=True)  # None = n'expire jamais
    created_at = Column(DateTime, default=utcnow)

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        if self.expires_at is None:
            return False
        return self.expires_at < (now or utcnow())
