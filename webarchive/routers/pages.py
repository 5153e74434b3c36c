import base64
import binascii
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from fastapi.responses import HTMLResponse
from sqlalchemy.orm import Session

from webarchive.core.blob_store import BlobStore, get_blob_store
from webarchive.core.database import get_db
from webarchive.core.security import require_admin
from webarchive.schemas.page import PageCreate, PageListResponse, PageResponse, PageUpdate
from webarchive.schemas.tag import TagResponse
from webarchive.services import page_service
from webarchive.services.search_service import (
    PageFilters,
    count_pages,
    query_all_page_ids,
    query_pages,
    query_recent_pages,
)

router = APIRouter(prefix="/pages", tags=["pages"], dependencies=[Depends(require_admin)])


def _get_page_or_404(db: Session, page_id: int, deleted: Optional[bool] = None):
    page = page_service.get_page(db, page_id, deleted=deleted)
    if not page:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Page not found")
    return page


# Sauvegarde une page (snapshot html + screenshot optionnel)
@router.post("", response_model=PageResponse, status_code=status.HTTP_201_CREATED)
def create_page(page_data: PageCreate, db: Session = Depends(get_db), blobs: BlobStore = Depends(get_blob_store)):
    screenshot = None
    if page_data.screenshot:
        try:
            screenshot = base64.b64decode(page_data.screenshot, validate=True)
        except binascii.Error:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Screenshot should be base64")

    return page_service.insert_page(
        db,
        blobs,
        title=page_data.title,
        page_url=page_data.page_url,
        folder_id=page_data.folder_id,
        content=page_data.content.encode("utf-8"),
        description=page_data.description,
        screenshot=screenshot,
        is_showcased=page_data.is_showcased
    )


@router.get("", response_model=PageListResponse)
def list_pages(
    folder_id: Optional[int] = None,
    keyword: Optional[str] = None,
    tag_id: Optional[int] = None,
    page_number: Optional[int] = Query(None, ge=1),
    page_size: Optional[int] = Query(None, ge=1),
    db: Session = Depends(get_db)
):
    # même filtre pour la liste et le total
    filters = PageFilters(folder_id=folder_id, keyword=keyword, tag_id=tag_id)
    return {
        "items": query_pages(db, filters, page_number, page_size),
        "total": count_pages(db, filters)
    }


@router.get("/recent", response_model=List[PageResponse])
def recent_pages(db: Session = Depends(get_db)):
    return query_recent_pages(db)


@router.get("/trash", response_model=List[PageResponse])
def trash(db: Session = Depends(get_db)):
    return page_service.query_deleted_pages(db)


@router.get("/by-url", response_model=List[PageResponse])
def pages_by_url(url: str, db: Session = Depends(get_db)):
    return page_service.query_pages_by_url(db, url)


@router.get("/ids", response_model=List[int])
def page_ids_in_folder(folder_id: int, db: Session = Depends(get_db)):
    return query_all_page_ids(db, folder_id)


@router.get("/{page_id}", response_model=PageResponse)
def get_page(page_id: int, db: Session = Depends(get_db)):
    return _get_page_or_404(db, page_id)


@router.get("/{page_id}/tags", response_model=List[TagResponse])
def get_page_tags(page_id: int, db: Session = Depends(get_db)):
    _get_page_or_404(db, page_id)
    return page_service.get_page_tags(db, page_id)


@router.get("/{page_id}/content", response_class=HTMLResponse)
def get_page_content(page_id: int, db: Session = Depends(get_db), blobs: BlobStore = Depends(get_blob_store)):
    page = _get_page_or_404(db, page_id)
    content = page_service.get_page_content(blobs, page)
    if content is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Content not found")
    return HTMLResponse(content=content)


@router.get("/{page_id}/screenshot")
def get_page_screenshot(page_id: int, db: Session = Depends(get_db), blobs: BlobStore = Depends(get_blob_store)):
    page = _get_page_or_404(db, page_id)
    screenshot = page_service.get_page_screenshot(blobs, page)
    if screenshot is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Screenshot not found")
    return Response(content=screenshot, media_type="image/png")


@router.put("/{page_id}", response_model=PageResponse)
    # Maj les champs + bind/unbind des tags, en un seul batch
def update_page(page_id: int, page_data: PageUpdate, db: Session = Depends(get_db)):
    changes = page_data.model_dump(exclude_unset=True, exclude={"bind_tags", "unbind_tags"})
    return page_service.update_page(
        db,
        page_id,
        changes,
        bind_tags=page_data.bind_tags,
        unbind_tags=page_data.unbind_tags
    )


@router.delete("/{page_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_page(page_id: int, db: Session = Depends(get_db)):
    page_service.delete_page(db, page_id)


@router.post("/{page_id}/restore", response_model=PageResponse)
def restore_page(page_id: int, db: Session = Depends(get_db)):
    return page_service.restore_page(db, page_id)


@router.delete("/{page_id}/purge", status_code=status.HTTP_204_NO_CONTENT)
def purge_page(page_id: int, db: Session = Depends(get_db), blobs: BlobStore = Depends(get_blob_store)):
    page_service.purge_page(db, blobs, page_id)
