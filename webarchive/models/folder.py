from sqlalchemy import Column, Integer, String, DateTime, Boolean
from webarchive.core.clock import utcnow
from webarchive.core.database import Base

class Folder(Base):
    __tablename__ = "folders"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    # réservés : aucune route ne supprime de dossier, mais les lectures filtrent déjà dessus
    is_deleted = Column(Boolean, default=False, nullable=False)
    deleted_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)
