import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from webarchive.core.config import settings
from webarchive.core.database import engine, Base
from webarchive.core.errors import ArchiveError, ConflictError, NotFoundError, StoreError, ValidationError
from webarchive.routers import health, auth, folders, pages, tags, shares, share_view, config

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s"
)

# Init DB
Base.metadata.create_all(bind=engine)

app = FastAPI(
    title="Web Archive API",
    version="0.1.0"
)

# Erreurs du data layer -> status HTTP
ERROR_STATUS = {
    ValidationError: 400,
    NotFoundError: 404,
    ConflictError: 409,
    StoreError: 500,
}

@app.exception_handler(ArchiveError)
def archive_error_handler(request: Request, exc: ArchiveError):
    status_code = next((code for kind, code in ERROR_STATUS.items() if isinstance(exc, kind)), 500)
    return JSONResponse(status_code=status_code, content={"detail": exc.message})

# Routes
app.include_router(health.router, prefix="/health")
app.include_router(auth.router)
app.include_router(folders.router)
app.include_router(pages.router)
app.include_router(tags.router)
app.include_router(shares.router)
app.include_router(config.router)
app.include_router(share_view.router)
