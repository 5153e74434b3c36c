"""Page model"""

import enum

from sqlalchemy import Column, Integer, String, DateTime, Boolean, ForeignKey
from webarchive.core.clock import utcnow
from webarchive.core.database import Base


class PageState(str, enum.Enum):
    ACTIVE = "active"
    DELETED = "deleted"  # corbeille : la ligne et les blobs sont gardés


class Page(Base):
    __tablename__ = "pages"

    id = Column(Integer, primary_key=True, index=True)
    folder_id = Column(Integer, ForeignKey("folders.id"), nullable=False, index=True)

    title = Column(String, nullable=False)
    description = Column(String, nullable=False, default="")
    page_url = Column(String, nullable=False, index=True)
    content_key = Column(String, nullable=False)  # clé blob du snapshot html
    screenshot_key = Column(String, nullable=True)
    note = Column(String, nullable=True)

    is_showcased = Column(Boolean, default=False, nullable=False)
    is_deleted = Column(Boolean, default=False, nullable=False, index=True)
    deleted_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=utcnow, index=True)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    @property
    def state(self) -> PageState:
        return PageState.DELETED if self.is_deleted else PageState.ACTIVE

    @property
    def blob_keys(self):
        return [key for key in (self.content_key, self.screenshot_key) if key]
