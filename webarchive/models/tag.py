from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from webarchive.core.clock import utcnow
from webarchive.core.database import Base

class Tag(Base):
    __tablename__ = "tags"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, unique=True, nullable=False)  # sensible à la casse
    color = Column(String, nullable=True)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    page_links = relationship("PageTag", lazy="selectin", cascade="all, delete-orphan")

    @property
    def page_ids(self):
        # dérivé, jamais stocké
        return sorted(link.page_id for link in self.page_links)


class PageTag(Base):
    # table de liaison, la clé composite rend chaque lien unique
    __tablename__ = "page_tags"

    page_id = Column(Integer, ForeignKey("pages.id"), primary_key=True)
    tag_id = Column(Integer, ForeignKey("tags.id"), primary_key=True, index=True)
