"""
Tags et synchronisation page <-> tag.

Les liens sont créés/supprimés par NOM de tag : la requête de liaison retrouve
l'id du tag par une sous-requête au moment de l'exécution. Le tag peut donc être
créé plus haut dans le même batch, sans aller-retour pour récupérer son id.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable, List, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from webarchive.core.clock import utcnow
from webarchive.core.database import Statement, run_batch
from webarchive.core.errors import ConflictError, StoreError, ValidationError
from webarchive.models.tag import Tag

logger = logging.getLogger(__name__)

CREATE_TAG_SQL = (
    "INSERT INTO tags (name, created_at, updated_at) VALUES (:name, :now, :now) "
    "ON CONFLICT (name) DO NOTHING"
)
BIND_PAGE_SQL = (
    "INSERT INTO page_tags (page_id, tag_id) "
    "SELECT :page_id, id FROM tags WHERE name = :name "
    "ON CONFLICT DO NOTHING"
)
UNBIND_PAGE_SQL = (
    "DELETE FROM page_tags "
    "WHERE page_id = :page_id AND tag_id = (SELECT id FROM tags WHERE name = :name)"
)


def _check_tag_name(name) -> str:
    # même règle pour la synchro et le CRUD
    if not isinstance(name, str) or not name.strip():
        raise ValidationError("Tag name is required")
    return name


@dataclass
class TagBindRecord:
    tag_name: str
    page_ids: List[int] = field(default_factory=list)


# func 1: build_sync_statements()
def build_sync_statements(
    bind_list: Iterable[TagBindRecord],
    unbind_list: Iterable[TagBindRecord],
    now: Optional[datetime] = None
) -> List[Statement]:
    """
    Construit la liste ordonnée des requêtes de synchro, sans rien exécuter.

    Ordre : tous les binds (création du tag puis ses liens), puis tous les
    unbinds. Les tags gardent l'ordre d'entrée. Aucune déduplication : un même
    tag+page présent dans les deux listes finit délié, l'unbind passe en dernier.
    """
    now = now or utcnow()
    statements = []

    bind_list = list(bind_list)
    unbind_list = list(unbind_list)
    for record in bind_list + unbind_list:
        _check_tag_name(record.tag_name)

    for record in bind_list:
        statements.append(Statement(CREATE_TAG_SQL, {"name": record.tag_name, "now": now}))
        for page_id in record.page_ids:
            statements.append(Statement(BIND_PAGE_SQL, {"page_id": page_id, "name": record.tag_name}))

    for record in unbind_list:
        for page_id in record.page_ids:
            statements.append(Statement(UNBIND_PAGE_SQL, {"page_id": page_id, "name": record.tag_name}))

    return statements


# func 2: apply_sync()
def apply_sync(db: Session, bind_list: Iterable[TagBindRecord], unbind_list: Iterable[TagBindRecord]) -> bool:
    statements = build_sync_statements(bind_list, unbind_list)
    logger.info(f"Applying tag sync batch of {len(statements)} statements")
    return run_batch(db, statements)


def records_for_page(page_id: int, tag_names: Iterable[str]) -> List[TagBindRecord]:
    return [TagBindRecord(tag_name=name, page_ids=[page_id]) for name in tag_names]


# ============ CRUD ============

def list_tags(db: Session) -> List[Tag]:
    return db.query(Tag).order_by(Tag.id).all()


def get_tag(db: Session, tag_id: int) -> Optional[Tag]:
    return db.query(Tag).filter(Tag.id == tag_id).first()


def _commit(db: Session, action: str):
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        logger.warning(f"Tag {action} rejected: name already used")
        raise ConflictError("Tag name already exists") from e
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Tag {action} failed: {e}")
        raise StoreError(f"Could not {action} tag") from e


def create_tag(db: Session, name: str, color: Optional[str] = None) -> Tag:
    _check_tag_name(name)

    tag = Tag(name=name, color=color)
    db.add(tag)
    _commit(db, "create")
    db.refresh(tag)
    return tag


def update_tag(db: Session, tag: Tag, name: Optional[str] = None, color: Optional[str] = None) -> Tag:
    if not name and not color:
        raise ValidationError("At least one field is required")

    if name:
        tag.name = name
    if color:
        tag.color = color
    _commit(db, "update")
    db.refresh(tag)
    return tag


def delete_tag(db: Session, tag: Tag) -> None:
    tag_id = tag.id
    # les liens page_tags partent avec le tag (cascade), même transaction
    db.delete(tag)
    _commit(db, "delete")
    logger.info(f"Deleted tag {tag_id}")
