"""Table clé/valeur : credential admin + quelques réglages"""

from sqlalchemy import Column, String
from webarchive.core.database import Base

ADMIN_TOKEN_KEY = "ADMIN_TOKEN"
SHOULD_SHOW_RECENT_KEY = "SHOULD_SHOW_RECENT"


class StoreEntry(Base):
    __tablename__ = "stores"

    # clé primaire : une seule ligne ADMIN_TOKEN possible
    key = Column(String, primary_key=True)
    value = Column(String, nullable=False)
