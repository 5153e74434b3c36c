from dataclasses import dataclass
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from webarchive.core.errors import ValidationError
from webarchive.models.page import Page
from webarchive.models.tag import PageTag


@dataclass
class PageFilters:
    folder_id: Optional[int] = None
    keyword: Optional[str] = None
    tag_id: Optional[int] = None


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def page_conditions(filters: Optional[PageFilters] = None) -> list:
    """
    Prédicats communs au comptage et au listing (AND entre eux).

    count_pages() et query_pages() passent TOUS LES DEUX par ici : un filtre
    ajouté ici s'applique aux deux, le total et la liste ne divergent jamais.
    """
    filters = filters or PageFilters()
    conditions = [Page.is_deleted == False]

    if filters.folder_id is not None:
        conditions.append(Page.folder_id == filters.folder_id)

    if filters.keyword:
        # sous-chaîne, insensible à la casse, sans tokenisation
        pattern = f"%{_escape_like(filters.keyword)}%"
        conditions.append(Page.title.ilike(pattern, escape="\\"))

    if filters.tag_id is not None:
        tagged = select(PageTag.page_id).where(PageTag.tag_id == filters.tag_id)
        conditions.append(Page.id.in_(tagged))

    return conditions


def count_pages(db: Session, filters: Optional[PageFilters] = None) -> int:
    return db.query(Page).filter(*page_conditions(filters)).count()


def query_pages(
    db: Session,
    filters: Optional[PageFilters] = None,
    page_number: Optional[int] = None,
    page_size: Optional[int] = None
) -> List[Page]:
    # Toujours du plus récent au plus ancien (id pour départager)
    query = db.query(Page).filter(*page_conditions(filters)).order_by(
        Page.created_at.desc(),
        Page.id.desc()
    )

    # Pagination seulement si les deux sont fournis, sinon tout le set filtré
    if page_number is not None and page_size is not None:
        if page_number < 1 or page_size < 1:
            raise ValidationError("page_number and page_size must be >= 1")
        query = query.limit(page_size).offset((page_number - 1) * page_size)

    return query.all()


def count_all_pages(db: Session) -> int:
    return count_pages(db)


def query_all_page_ids(db: Session, folder_id: int) -> List[int]:
    return [page.id for page in query_pages(db, PageFilters(folder_id=folder_id))]


RECENT_PAGES_LIMIT = 20


def query_recent_pages(db: Session) -> List[Page]:
    return query_pages(db, page_number=1, page_size=RECENT_PAGES_LIMIT)
