from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List

from webarchive.core.database import get_db
from webarchive.core.security import require_admin
from webarchive.schemas.folder import FolderCreate, FolderResponse
from webarchive.services import folder_service

router = APIRouter(prefix="/folders", tags=["folders"], dependencies=[Depends(require_admin)])

@router.post("", response_model=FolderResponse, status_code=status.HTTP_201_CREATED)
def create_folder(folder_data: FolderCreate, db: Session = Depends(get_db)):
    return folder_service.create_folder(db, folder_data.name)

@router.get("", response_model=List[FolderResponse])
def list_folders(db: Session = Depends(get_db)):
    return folder_service.list_folders(db)

@router.get("/{folder_id}", response_model=FolderResponse)
def get_folder(folder_id: int, db: Session = Depends(get_db)):
    folder = folder_service.get_folder(db, folder_id)
    if not folder:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Folder not found")
    return folder
