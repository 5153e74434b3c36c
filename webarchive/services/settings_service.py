"""Réglages stockés dans la table `stores` (à côté du credential admin)"""

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from webarchive.core.errors import StoreError
from webarchive.models.store import SHOULD_SHOW_RECENT_KEY, StoreEntry

logger = logging.getLogger(__name__)


def get_should_show_recent(db: Session) -> bool:
    entry = db.query(StoreEntry).filter(StoreEntry.key == SHOULD_SHOW_RECENT_KEY).first()
    if not entry:
        return True  # pas encore réglé
    return entry.value == "true"


def set_should_show_recent(db: Session, value: bool) -> bool:
    # upsert
    db.merge(StoreEntry(key=SHOULD_SHOW_RECENT_KEY, value="true" if value else "false"))
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Could not save {SHOULD_SHOW_RECENT_KEY}: {e}")
        raise StoreError("Could not save setting") from e
    return value
