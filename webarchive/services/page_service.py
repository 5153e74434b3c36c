# IMPORTS
import logging
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from webarchive.core.blob_store import BlobStore
from webarchive.core.clock import utcnow
from webarchive.core.database import Statement, run_batch
from webarchive.core.errors import NotFoundError, StoreError, ValidationError
from webarchive.models.page import Page, PageState
from webarchive.models.tag import PageTag, Tag
from webarchive.services.codes import new_blob_key
from webarchive.services.folder_service import require_folder
from webarchive.services.share_service import delete_share_links_for_page
from webarchive.services.tag_service import build_sync_statements, records_for_page

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = ("folder_id", "title", "description", "page_url", "note", "is_showcased")
NULLABLE_FIELDS = {"note"}


def _commit(db: Session, action: str):
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Page {action} failed: {e}")
        raise StoreError(f"Could not {action} page") from e


# ============ LECTURE ============

def get_page(db: Session, page_id: int, deleted: Optional[bool] = None) -> Optional[Page]:
    page = db.query(Page).filter(Page.id == page_id).first()
    # si `deleted` est donné, une page dans l'autre état compte comme absente
    if page and deleted is not None and page.is_deleted != deleted:
        return None
    return page


def query_pages_by_url(db: Session, page_url: str) -> List[Page]:
    return db.query(Page).filter(Page.page_url == page_url, Page.is_deleted == False).all()


def query_deleted_pages(db: Session) -> List[Page]:
    # la corbeille, dernière suppression en premier
    return db.query(Page).filter(Page.is_deleted == True).order_by(
        Page.deleted_at.desc(),
        Page.id.desc()
    ).all()


def get_page_tags(db: Session, page_id: int) -> List[Tag]:
    return db.query(Tag).join(PageTag, PageTag.tag_id == Tag.id).filter(
        PageTag.page_id == page_id
    ).order_by(Tag.id).all()


def get_page_content(blobs: BlobStore, page: Page) -> Optional[bytes]:
    return blobs.get(page.content_key)


def get_page_screenshot(blobs: BlobStore, page: Page) -> Optional[bytes]:
    if not page.screenshot_key:
        return None
    return blobs.get(page.screenshot_key)


# ============ CRÉATION ============

def insert_page(
    db: Session,
    blobs: BlobStore,
    title: str,
    page_url: str,
    folder_id: int,
    content: bytes,
    description: str = "",
    screenshot: Optional[bytes] = None,
    is_showcased: bool = False
) -> Page:
    if not title:
        raise ValidationError("Page title is required")
    require_folder(db, folder_id)

    content_key = new_blob_key("html")
    screenshot_key = new_blob_key("png") if screenshot else None
    blobs.put(content_key, content)
    if screenshot_key:
        blobs.put(screenshot_key, screenshot)

    page = Page(
        title=title,
        description=description or "",
        page_url=page_url,
        folder_id=folder_id,
        content_key=content_key,
        screenshot_key=screenshot_key,
        is_showcased=is_showcased
    )
    db.add(page)
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        # pas de ligne -> on ne garde pas les blobs orphelins
        blobs.delete([key for key in (content_key, screenshot_key) if key])
        logger.error(f"Page insert failed: {e}")
        raise StoreError("Could not save page") from e

    db.refresh(page)
    logger.info(f"Saved page {page.id} in folder {folder_id}")
    return page


# ============ MISE À JOUR (page + tags, atomique) ============

def build_page_update_statement(page_id: int, changes: Dict[str, Any], now: datetime) -> Statement:
    unknown = set(changes) - set(UPDATABLE_FIELDS)
    if unknown:
        raise ValidationError(f"Unknown page fields: {sorted(unknown)}")
    for name, value in changes.items():
        if value is None and name not in NULLABLE_FIELDS:
            raise ValidationError(f"{name} cannot be null")

    # noms de colonnes pris dans la whitelist, les valeurs restent paramétrées
    assignments = [f"{name} = :{name}" for name in UPDATABLE_FIELDS if name in changes]
    assignments.append("updated_at = :updated_at")
    params = {name: changes[name] for name in UPDATABLE_FIELDS if name in changes}
    params["updated_at"] = now
    params["page_id"] = page_id

    return Statement(f"UPDATE pages SET {', '.join(assignments)} WHERE id = :page_id", params)


def update_page(
    db: Session,
    page_id: int,
    changes: Dict[str, Any],
    bind_tags: Iterable[str] = (),
    unbind_tags: Iterable[str] = ()
) -> Page:
    """
    Met à jour la page ET ses tags dans un seul batch : soit tout est visible,
    soit rien (un échec de la synchro des tags annule aussi les champs).
    """
    if not get_page(db, page_id):
        raise NotFoundError(f"Page {page_id} not found")
    if changes.get("folder_id") is not None:
        require_folder(db, changes["folder_id"])

    now = utcnow()
    statements = [build_page_update_statement(page_id, changes, now)]
    statements += build_sync_statements(
        records_for_page(page_id, bind_tags),
        records_for_page(page_id, unbind_tags),
        now
    )
    run_batch(db, statements)

    return get_page(db, page_id)


# ============ CYCLE DE VIE : ACTIVE -> DELETED -> (purge) ============

def _require_state(db: Session, page_id: int, expected: PageState) -> Page:
    page = get_page(db, page_id)
    if not page:
        raise NotFoundError(f"Page {page_id} not found")
    if page.state != expected:
        raise ValidationError(f"Page {page_id} is {page.state.value}, expected {expected.value}")
    return page


def delete_page(db: Session, page_id: int, now: Optional[datetime] = None) -> Page:
    # suppression logique : la ligne reste, restore = remettre le flag
    page = _require_state(db, page_id, PageState.ACTIVE)
    page.is_deleted = True
    page.deleted_at = now or utcnow()
    _commit(db, "delete")
    db.refresh(page)
    logger.info(f"Moved page {page_id} to trash")
    return page


def restore_page(db: Session, page_id: int) -> Page:
    page = _require_state(db, page_id, PageState.DELETED)
    page.is_deleted = False
    page.deleted_at = None
    _commit(db, "restore")
    db.refresh(page)
    logger.info(f"Restored page {page_id}")
    return page


def purge_page(db: Session, blobs: BlobStore, page_id: int) -> None:
    """
    Suppression définitive d'une page de la corbeille.

    Liens de tags, liens de partage et la ligne partent dans une transaction,
    puis les blobs (contenu + screenshot, l'un ou l'autre peut manquer).
    """
    page = _require_state(db, page_id, PageState.DELETED)
    keys = page.blob_keys

    try:
        db.query(PageTag).filter(PageTag.page_id == page_id).delete(synchronize_session=False)
        delete_share_links_for_page(db, page_id, commit=False)
        db.delete(page)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Page purge failed: {e}")
        raise StoreError("Could not purge page") from e

    blobs.delete(keys)
    logger.info(f"Purged page {page_id}")
