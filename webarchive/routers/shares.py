from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List

from webarchive.core.database import get_db
from webarchive.core.security import require_admin
from webarchive.schemas.share import ShareCreate, ShareResponse, ShareWithPageTitle
from webarchive.services import share_service

router = APIRouter(prefix="/shares", tags=["shares"], dependencies=[Depends(require_admin)])

@router.post("", response_model=ShareResponse, status_code=status.HTTP_201_CREATED)
def create_share(share_data: ShareCreate, db: Session = Depends(get_db)):
    """
    Créer un lien de partage pour une page.

    expires_in est en heures : None ou 0 = n'expire jamais, négatif = 400.
    Plusieurs liens peuvent coexister pour la même page.
    """
    return share_service.create_share_link(db, share_data.page_id, share_data.expires_in)

@router.get("", response_model=List[ShareWithPageTitle])
def list_shares(db: Session = Depends(get_db)):
    # tous les liens avec le titre de leur page
    rows = share_service.list_all_share_links(db)
    return [
        ShareWithPageTitle.model_validate(link).model_copy(update={"page_title": page_title})
        for link, page_title in rows
    ]

@router.get("/page/{page_id}", response_model=List[ShareResponse])
def list_page_shares(page_id: int, db: Session = Depends(get_db)):
    return share_service.list_share_links_for_page(db, page_id)

@router.delete("/{link_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_share(link_id: int, db: Session = Depends(get_db)):
    if not share_service.delete_share_link(db, link_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Share link not found")
