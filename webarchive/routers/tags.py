from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List

from webarchive.core.database import get_db
from webarchive.core.security import require_admin
from webarchive.schemas.tag import TagCreate, TagResponse, TagUpdate
from webarchive.services import tag_service

router = APIRouter(prefix="/tags", tags=["tags"], dependencies=[Depends(require_admin)])


def _get_tag_or_404(db: Session, tag_id: int):
    tag = tag_service.get_tag(db, tag_id)
    if not tag:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Tag not found")
    return tag


@router.get("", response_model=List[TagResponse])
def list_tags(db: Session = Depends(get_db)):
    # chaque tag avec ses page_ids
    return tag_service.list_tags(db)


@router.post("", response_model=TagResponse, status_code=status.HTTP_201_CREATED)
def create_tag(tag_data: TagCreate, db: Session = Depends(get_db)):
    return tag_service.create_tag(db, tag_data.name, tag_data.color)


@router.get("/{tag_id}", response_model=TagResponse)
def get_tag(tag_id: int, db: Session = Depends(get_db)):
    return _get_tag_or_404(db, tag_id)


@router.put("/{tag_id}", response_model=TagResponse)
def update_tag(tag_id: int, tag_data: TagUpdate, db: Session = Depends(get_db)):
    tag = _get_tag_or_404(db, tag_id)
    return tag_service.update_tag(db, tag, name=tag_data.name, color=tag_data.color)


@router.delete("/{tag_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_tag(tag_id: int, db: Session = Depends(get_db)):
    tag = _get_tag_or_404(db, tag_id)
    tag_service.delete_tag(db, tag)
