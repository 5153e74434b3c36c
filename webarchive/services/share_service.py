"""Liens de partage publics (code aléatoire, expiration optionnelle)"""

import logging
import math
from datetime import datetime, timedelta
from typing import List, Optional, Tuple

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from webarchive.core.clock import utcnow
from webarchive.core.errors import ConflictError, NotFoundError, StoreError, ValidationError
from webarchive.models.page import Page
from webarchive.models.share_link import ShareLink
from webarchive.services.codes import generate_share_code

logger = logging.getLogger(__name__)


def compute_expiry(created_at: datetime, expires_in_hours: Optional[float]) -> Optional[datetime]:
    # None ou 0 = n'expire jamais
    if expires_in_hours is None:
        return None
    if isinstance(expires_in_hours, bool) or expires_in_hours < 0:
        raise ValidationError("expires_in_hours should be a positive number or null")
    if not math.isfinite(expires_in_hours):
        raise ValidationError("expires_in_hours should be a finite number")
    if expires_in_hours == 0:
        return None
    try:
        return created_at + timedelta(hours=expires_in_hours)
    except OverflowError as e:
        # au-delà de datetime.max
        raise ValidationError("expires_in_hours is too large") from e


def create_share_link(
    db: Session,
    page_id: int,
    expires_in_hours: Optional[float] = None,
    now: Optional[datetime] = None
) -> ShareLink:
    now = now or utcnow()
    expires_at = compute_expiry(now, expires_in_hours)

    page = db.query(Page).filter(Page.id == page_id, Page.is_deleted == False).first()
    if not page:
        raise NotFoundError(f"Page {page_id} not found")

    # Pas de retry sur collision : l'unicité est garantie par la contrainte DB
    link = ShareLink(
        page_id=page_id,
        share_code=generate_share_code(),
        expires_at=expires_at,
        created_at=now
    )
    db.add(link)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        logger.warning(f"Share code collision for page {page_id}")
        raise ConflictError("Share code already exists") from e
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Share link creation failed: {e}")
        raise StoreError("Could not create share link") from e

    db.refresh(link)
    logger.info(f"Created share link {link.id} for page {page_id} (expires_at={expires_at})")
    return link


def get_share_link_by_code(db: Session, share_code: str) -> Optional[ShareLink]:
    # seul chemin de lecture du viewer public, donc pas d'auth ici
    return db.query(ShareLink).filter(ShareLink.share_code == share_code).first()


def is_share_link_expired(link: ShareLink, now: Optional[datetime] = None) -> bool:
    return link.is_expired(now)


def list_share_links_for_page(db: Session, page_id: int) -> List[ShareLink]:
    return db.query(ShareLink).filter(ShareLink.page_id == page_id).order_by(
        ShareLink.created_at.desc(),
        ShareLink.id.desc()
    ).all()


def list_all_share_links(db: Session) -> List[Tuple[ShareLink, Optional[str]]]:
    # LEFT JOIN : on garde le lien même si la page n'existe plus
    return db.query(ShareLink, Page.title).outerjoin(
        Page, Page.id == ShareLink.page_id
    ).order_by(
        ShareLink.created_at.desc(),
        ShareLink.id.desc()
    ).all()


def delete_share_link(db: Session, link_id: int) -> bool:
    link = db.query(ShareLink).filter(ShareLink.id == link_id).first()
    if not link:
        return False

    db.delete(link)
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Share link deletion failed: {e}")
        raise StoreError("Could not delete share link") from e

    logger.info(f"Deleted share link {link_id}")
    return True


def delete_share_links_for_page(db: Session, page_id: int, commit: bool = True) -> int:
    """commit=False : laisse la transaction ouverte (utilisé par la purge d'une page)"""
    try:
        deleted = db.query(ShareLink).filter(ShareLink.page_id == page_id).delete(synchronize_session=False)
        if commit:
            db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Could not delete share links of page {page_id}: {e}")
        raise StoreError("Could not delete share links") from e
    return deleted
