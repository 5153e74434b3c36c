"""Vue publique d'un lien de partage : aucune authentification ici"""

from html import escape

from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse
from sqlalchemy.orm import Session

from webarchive.core.blob_store import BlobStore, get_blob_store
from webarchive.core.database import get_db
from webarchive.services.page_service import get_page, get_page_content
from webarchive.services.share_service import get_share_link_by_code, is_share_link_expired

router = APIRouter(tags=["share"])


def _message_page(title: str, message: str, status_code: int) -> HTMLResponse:
    html = (
        "<!DOCTYPE html><html lang=\"en\"><head><meta charset=\"UTF-8\">"
        f"<title>{escape(title)}</title></head>"
        f"<body><h1>{escape(title)}</h1><p>{escape(message)}</p></body></html>"
    )
    return HTMLResponse(content=html, status_code=status_code)


@router.get("/share/{code}", response_class=HTMLResponse)
def view_shared_page(code: str, db: Session = Depends(get_db), blobs: BlobStore = Depends(get_blob_store)):
    link = get_share_link_by_code(db, code)
    if not link:
        return _message_page("Link Not Found", "This share link does not exist or has been removed.", 404)

    # expiration vérifiée à la lecture, pas de nettoyage en tâche de fond
    if is_share_link_expired(link):
        return _message_page("Link Expired", "This share link has expired and is no longer accessible.", 410)

    page = get_page(db, link.page_id, deleted=False)
    if not page:
        return _message_page("Page Not Found", "The shared page no longer exists.", 404)

    content = get_page_content(blobs, page)
    if content is None:
        return _message_page("Content Not Found", "The page content could not be retrieved.", 404)

    return HTMLResponse(content=content, headers={"cache-control": "public, max-age=3600"})
