import logging
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from webarchive.core.errors import NotFoundError, StoreError, ValidationError
from webarchive.models.folder import Folder

logger = logging.getLogger(__name__)


def list_folders(db: Session) -> List[Folder]:
    return db.query(Folder).filter(Folder.is_deleted == False).order_by(Folder.id).all()


def get_folder(db: Session, folder_id: int) -> Optional[Folder]:
    return db.query(Folder).filter(Folder.id == folder_id, Folder.is_deleted == False).first()


def require_folder(db: Session, folder_id: int) -> Folder:
    # une page non supprimée pointe toujours vers un dossier valide
    folder = get_folder(db, folder_id)
    if not folder:
        raise NotFoundError(f"Folder {folder_id} not found")
    return folder


def create_folder(db: Session, name: str) -> Folder:
    if not name or not name.strip():
        raise ValidationError("Folder name is required")

    folder = Folder(name=name.strip())
    db.add(folder)
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Folder creation failed: {e}")
        raise StoreError("Could not create folder") from e
    db.refresh(folder)
    return folder
